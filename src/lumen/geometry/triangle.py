"""Triangle primitive with Moller-Trumbore intersection.

The outward normal follows the right-hand rule over (v0, v1, v2): vertices
that appear counter-clockwise from a viewpoint face that viewpoint. The hit
uv holds the barycentric weights of v1 and v2.
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from ..core.vector import as_vec3, vector_cross, vector_length
from ..errors import DegenerateGeometryError
from .hit import HitRecord, face_normal
from .primitive import PrimitiveKind, PrimitiveRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3
vec2 = tm.vec2

# Determinants below this mean the ray is parallel to the triangle
DETERMINANT_EPSILON = 1e-10


@ti.dataclass
class Triangle:
    """A triangle given by its three vertices."""

    v0: vec3
    v1: vec3
    v2: vec3


def triangle_record(v0, v1, v2) -> PrimitiveRecord:
    """Validate triangle vertices and build its table record.

    Raises:
        DegenerateGeometryError: If the vertices are collinear or coincident.
    """
    a = as_vec3(v0, "triangle v0")
    b = as_vec3(v1, "triangle v1")
    c = as_vec3(v2, "triangle v2")
    if vector_length(vector_cross(np.subtract(b, a), np.subtract(c, a))) <= 1e-12:
        raise DegenerateGeometryError(f"Triangle vertices are collinear: {a}, {b}, {c}")
    return PrimitiveRecord(kind=PrimitiveKind.TRIANGLE, p0=a, p1=b, p2=c)


@ti.func
def hit_triangle(
    ray_origin: vec3,
    ray_direction: vec3,
    tri: Triangle,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-triangle intersection (Moller-Trumbore).

    Both sides of the triangle are hit; front_face tells them apart.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        tri: The triangle to test.
        t_min: Hits must satisfy t > t_min.
        t_max: Hits must satisfy t < t_max.

    Returns:
        A HitRecord with barycentric (u, v) in uv.
    """
    edge1 = tri.v1 - tri.v0
    edge2 = tri.v2 - tri.v0
    pvec = tm.cross(ray_direction, edge2)
    det = tm.dot(edge1, pvec)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0
    hit_uv = vec2(0.0, 0.0)

    if ti.abs(det) > DETERMINANT_EPSILON:
        inv_det = 1.0 / det
        tvec = ray_origin - tri.v0
        u = tm.dot(tvec, pvec) * inv_det
        if u >= 0.0 and u <= 1.0:
            qvec = tm.cross(tvec, edge1)
            v = tm.dot(ray_direction, qvec) * inv_det
            if v >= 0.0 and u + v <= 1.0:
                t = tm.dot(edge2, qvec) * inv_det
                if t > t_min and t < t_max:
                    did_hit = 1
                    hit_t = t
                    hit_point = ray_origin + t * ray_direction
                    outward = tm.normalize(tm.cross(edge1, edge2))
                    hit_normal, is_front_face = face_normal(ray_direction, outward)
                    hit_uv = vec2(u, v)

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
        uv=hit_uv,
    )
