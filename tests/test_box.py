"""Unit tests for axis-aligned box intersection (slab method)."""

import pytest
import taichi as ti


class TestBoxRecord:
    """Tests for host-side box validation."""

    def test_box_record(self):
        from lumen.geometry.box import box_record
        from lumen.geometry.primitive import PrimitiveKind

        record = box_record((-1, -1, -1), (1, 2, 3))
        assert record.kind == PrimitiveKind.BOX
        assert record.p0 == (-1.0, -1.0, -1.0)
        assert record.p1 == (1.0, 2.0, 3.0)

    @pytest.mark.parametrize(
        "low, high",
        [
            ((0.0, 0.0, 0.0), (1.0, 1.0, 0.0)),
            ((1.0, 0.0, 0.0), (0.0, 1.0, 1.0)),
        ],
    )
    def test_box_record_rejects_flat_or_inverted(self, low, high):
        from lumen.errors import DegenerateGeometryError
        from lumen.geometry.box import box_record

        with pytest.raises(DegenerateGeometryError):
            box_record(low, high)


class TestBoxIntersection:
    """Tests for ray-box intersection."""

    def test_hit_box_front(self):
        """A ray along -z enters through the +z face."""
        from lumen.geometry.box import Box, hit_box, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            box = Box(low=vec3(-1.0, -1.0, -1.0), high=vec3(1.0, 1.0, 1.0))
            record = hit_box(vec3(0.2, 0.3, 5.0), vec3(0.0, 0.0, -1.0), box, 0.001, 1000.0)
            hit[None] = record.hit
            t_val[None] = record.t
            normal[None] = record.normal
            front_face[None] = record.front_face

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 4.0) < 1e-5
        n = normal[None]
        assert abs(n[0]) < 1e-6 and abs(n[1]) < 1e-6
        assert abs(n[2] - 1.0) < 1e-6
        assert front_face[None] == 1

    def test_hit_box_side_face_normal(self):
        """A ray along +x enters through the -x face."""
        from lumen.geometry.box import Box, hit_box, vec3

        normal = ti.field(dtype=ti.math.vec3, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            box = Box(low=vec3(0.0, 0.0, 0.0), high=vec3(2.0, 1.0, 1.0))
            record = hit_box(vec3(-3.0, 0.5, 0.5), vec3(1.0, 0.0, 0.0), box, 0.001, 1000.0)
            normal[None] = record.normal
            t_val[None] = record.t

        test_kernel()
        assert abs(t_val[None] - 3.0) < 1e-5
        assert abs(normal[None][0] + 1.0) < 1e-6

    def test_hit_box_from_inside(self):
        """From inside, the exit face is hit on its back side."""
        from lumen.geometry.box import Box, hit_box, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            box = Box(low=vec3(-1.0, -1.0, -1.0), high=vec3(1.0, 1.0, 1.0))
            record = hit_box(vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), box, 0.001, 1000.0)
            hit[None] = record.hit
            t_val[None] = record.t
            normal[None] = record.normal
            front_face[None] = record.front_face

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 1.0) < 1e-5
        assert abs(normal[None][1] + 1.0) < 1e-6
        assert front_face[None] == 0

    def test_miss_box(self):
        from lumen.geometry.box import Box, hit_box, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            box = Box(low=vec3(-1.0, -1.0, -1.0), high=vec3(1.0, 1.0, 1.0))
            record = hit_box(vec3(3.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0), box, 0.001, 1000.0)
            hit[None] = record.hit

        test_kernel()
        assert hit[None] == 0

    def test_diagonal_ray_misses_corner(self):
        """A ray passing beside a corner misses even though it crosses every slab."""
        from lumen.geometry.box import Box, hit_box, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            box = Box(low=vec3(0.0, 0.0, 0.0), high=vec3(1.0, 1.0, 1.0))
            direction = ti.math.normalize(vec3(1.0, -1.0, 0.0))
            record = hit_box(vec3(0.0, 2.5, 0.5), direction, box, 0.001, 1000.0)
            hit[None] = record.hit

        test_kernel()
        assert hit[None] == 0
