"""Axis-aligned box primitive with slab intersection.

Boxes are solid: a ray starting inside a box hits its far wall, which lets
boxes carry dielectric materials.
"""

import taichi as ti
import taichi.math as tm

from ..core.vector import as_vec3
from ..errors import DegenerateGeometryError
from .hit import HitRecord, face_normal
from .primitive import PrimitiveKind, PrimitiveRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3
vec2 = tm.vec2

_SLAB_INFINITY = 1e30


@ti.dataclass
class Box:
    """Axis-aligned box between two corners.

    Attributes:
        low: Corner with the smallest coordinates.
        high: Corner with the largest coordinates.
    """

    low: vec3
    high: vec3


def box_record(low, high) -> PrimitiveRecord:
    """Validate box corners and build its table record.

    Raises:
        DegenerateGeometryError: If low is not strictly below high on every axis.
    """
    lo = as_vec3(low, "box low corner")
    hi = as_vec3(high, "box high corner")
    if not all(a < b for a, b in zip(lo, hi)):
        raise DegenerateGeometryError(f"Box corners are inverted or flat: low={lo} high={hi}")
    return PrimitiveRecord(kind=PrimitiveKind.BOX, p0=lo, p1=hi)


@ti.func
def hit_box(
    ray_origin: vec3,
    ray_direction: vec3,
    box: Box,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-box intersection with the slab method.

    The entry distance is used when it lies in (t_min, t_max), the exit
    distance otherwise. The normal is that of the slab crossed at the hit.

    Returns:
        A HitRecord. uv is always zero for boxes.
    """
    t_near = -_SLAB_INFINITY
    t_far = _SLAB_INFINITY
    near_axis = 0
    far_axis = 0
    near_dir = 0.0
    far_dir = 0.0
    within_slabs = 1

    for a in ti.static(range(3)):
        d = ray_direction[a]
        o = ray_origin[a]
        if ti.abs(d) < 1e-12:
            # Parallel to this slab: inside it or a miss
            if o < box.low[a] or o > box.high[a]:
                within_slabs = 0
        else:
            inv_d = 1.0 / d
            t0 = (box.low[a] - o) * inv_d
            t1 = (box.high[a] - o) * inv_d
            if t0 > t1:
                temp = t0
                t0 = t1
                t1 = temp
            if t0 > t_near:
                t_near = t0
                near_axis = a
                near_dir = d
            if t1 < t_far:
                t_far = t1
                far_axis = a
                far_dir = d

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0

    if within_slabs == 1 and t_near <= t_far:
        axis = -1
        sign = 0.0
        if t_near > t_min and t_near < t_max:
            hit_t = t_near
            axis = near_axis
            sign = -tm.sign(near_dir)
        elif t_far > t_min and t_far < t_max:
            hit_t = t_far
            axis = far_axis
            sign = tm.sign(far_dir)

        if axis >= 0:
            outward = vec3(0.0, 0.0, 0.0)
            for a in ti.static(range(3)):
                if a == axis:
                    outward[a] = sign
            did_hit = 1
            hit_point = ray_origin + hit_t * ray_direction
            hit_normal, is_front_face = face_normal(ray_direction, outward)

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
        uv=vec2(0.0, 0.0),
    )
