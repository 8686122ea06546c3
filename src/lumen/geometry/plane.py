"""Infinite plane primitive.

A plane is stored as a point on the plane and a unit normal. Rays parallel to
the plane never hit it, even when they lie inside it.
"""

import taichi as ti
import taichi.math as tm

from ..core.vector import as_vec3, unit_vector
from .hit import HitRecord, face_normal
from .primitive import PrimitiveKind, PrimitiveRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3
vec2 = tm.vec2

# |dot(normal, direction)| below this is treated as parallel
PARALLEL_EPSILON = 1e-8


@ti.dataclass
class Plane:
    """An infinite plane.

    Attributes:
        point: Any point on the plane.
        normal: Unit outward normal.
    """

    point: vec3
    normal: vec3


def plane_record(point, normal) -> PrimitiveRecord:
    """Validate plane parameters and build its table record.

    The normal is normalized here, so callers may pass any non-zero vector.

    Raises:
        DegenerateGeometryError: If normal has zero length.
    """
    p = as_vec3(point, "plane point")
    n = unit_vector(normal, "plane normal")
    return PrimitiveRecord(kind=PrimitiveKind.PLANE, p0=p, p1=n)


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: Plane,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-plane intersection.

    Solves dot(normal, origin + t * direction - point) = 0 for t.

    Returns:
        A HitRecord. uv is always zero for planes.
    """
    denom = tm.dot(plane.normal, ray_direction)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0

    if ti.abs(denom) > PARALLEL_EPSILON:
        t = tm.dot(plane.point - ray_origin, plane.normal) / denom
        if t > t_min and t < t_max:
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction
            hit_normal, is_front_face = face_normal(ray_direction, plane.normal)

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
        uv=vec2(0.0, 0.0),
    )
