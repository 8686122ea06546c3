"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (front face)
- Ray missing sphere
- Ray starting inside sphere (back face)
- Ray tangent to sphere
- Interval limits and validation of sphere parameters
"""

import pytest
import taichi as ti


class TestSphereBasics:
    """Tests for Sphere dataclass and host-side validation."""

    def test_make_sphere(self):
        """Test make_sphere convenience function."""
        from lumen.geometry.sphere import make_sphere, vec3

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5)
            center_result[None] = sphere.center
            radius_result[None] = sphere.radius

        test_kernel()
        c = center_result[None]
        assert abs(c[0] - 1.0) < 1e-6
        assert abs(c[1] - 2.0) < 1e-6
        assert abs(c[2] - 3.0) < 1e-6
        assert abs(radius_result[None] - 0.5) < 1e-6

    def test_sphere_record(self):
        """Test the table record of a valid sphere."""
        from lumen.geometry.primitive import PrimitiveKind
        from lumen.geometry.sphere import sphere_record

        record = sphere_record((0, 1, 2), 2)
        assert record.kind == PrimitiveKind.SPHERE
        assert record.p0 == (0.0, 1.0, 2.0)
        assert record.radius == 2.0

    @pytest.mark.parametrize("radius", [0.0, -1.0, float("nan"), float("inf")])
    def test_sphere_record_rejects_bad_radius(self, radius):
        """Zero, negative and non-finite radii are degenerate."""
        from lumen.errors import DegenerateGeometryError
        from lumen.geometry.sphere import sphere_record

        with pytest.raises(DegenerateGeometryError):
            sphere_record((0.0, 0.0, 0.0), radius)


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_hit_sphere_direct_hit(self):
        """Test ray hitting sphere head-on from outside."""
        from lumen.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        point = ti.field(dtype=ti.math.vec3, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            # Ray from z=5 pointing toward origin
            ray_origin = vec3(0.0, 0.0, 5.0)
            ray_direction = vec3(0.0, 0.0, -1.0)
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)

            record = hit_sphere(ray_origin, ray_direction, sphere, 0.001, 1000.0)
            hit[None] = record.hit
            t_val[None] = record.t
            point[None] = record.point
            normal[None] = record.normal
            front_face[None] = record.front_face

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 4.0) < 1e-5
        p = point[None]
        assert abs(p[0]) < 1e-5
        assert abs(p[1]) < 1e-5
        assert abs(p[2] - 1.0) < 1e-5
        n = normal[None]
        assert abs(n[0]) < 1e-5
        assert abs(n[1]) < 1e-5
        assert abs(n[2] - 1.0) < 1e-5
        assert front_face[None] == 1

    def test_hit_sphere_miss(self):
        """Test ray missing sphere entirely."""
        from lumen.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            record = hit_sphere(vec3(5.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 1000.0)
            hit[None] = record.hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_sphere_inside(self):
        """Test ray starting inside sphere (back face hit)."""
        from lumen.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0), sphere, 0.001, 1000.0)
            hit[None] = record.hit
            t_val[None] = record.t
            normal[None] = record.normal
            front_face[None] = record.front_face

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 1.0) < 1e-5
        # Normal faces back against the ray
        assert abs(normal[None][2] + 1.0) < 1e-5
        assert front_face[None] == 0

    def test_hit_sphere_tangent(self):
        """A tangent ray touches the sphere at exactly one point."""
        from lumen.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        point = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            # Grazes the top of the unit sphere at (0, 1, 0)
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            record = hit_sphere(vec3(0.0, 1.0, 5.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 1000.0)
            hit[None] = record.hit
            t_val[None] = record.t
            point[None] = record.point

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 5.0) < 1e-4
        p = point[None]
        assert abs(p[1] - 1.0) < 1e-5
        assert abs(p[2]) < 1e-4

    def test_hit_sphere_respects_t_max(self):
        """Hits beyond t_max are ignored."""
        from lumen.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            record = hit_sphere(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0), sphere, 0.001, 3.0)
            hit[None] = record.hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_sphere_behind_ray(self):
        """Spheres behind the origin are not hit."""
        from lumen.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            record = hit_sphere(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, 1.0), sphere, 0.001, 1000.0)
            hit[None] = record.hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_sphere_unit_normal_for_large_radius(self):
        """Normals are unit length regardless of radius."""
        from lumen.geometry.sphere import Sphere, hit_sphere, vec3

        length = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, -1000.0, 0.0), radius=1000.0)
            record = hit_sphere(vec3(0.3, 5.0, 0.2), vec3(0.0, -1.0, 0.0), sphere, 0.001, 1e9)
            length[None] = ti.math.length(record.normal)

        test_kernel()
        assert abs(length[None] - 1.0) < 1e-3

    def test_sphere_uv_poles(self):
        """v is 0 at the bottom pole and 1 at the top pole."""
        from lumen.geometry.sphere import sphere_uv, vec3

        bottom = ti.field(dtype=ti.math.vec2, shape=())
        top = ti.field(dtype=ti.math.vec2, shape=())

        @ti.kernel
        def test_kernel():
            bottom[None] = sphere_uv(vec3(0.0, -1.0, 0.0))
            top[None] = sphere_uv(vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert abs(bottom[None][1]) < 1e-5
        assert abs(top[None][1] - 1.0) < 1e-5
