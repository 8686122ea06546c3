"""Scene-level primitive intersection testing.

All primitives of a scene are stored in one structure-of-arrays table in
insertion order. intersect_scene walks the table, dispatches on each row's
PrimitiveKind, and keeps the closest hit. Candidates are tested against the
closest t found so far with a strict comparison, so when two primitives are
hit at exactly the same distance the one inserted first wins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lumen.geometry import sphere_record
    >>> from lumen.scene.intersection import upload_primitives, intersect_scene
    >>> upload_primitives([sphere_record((0, 0, -1), 0.5)], [0])
    >>> # Use intersect_scene within a Taichi kernel
"""

from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

from ..errors import SceneCapacityError
from ..geometry.box import Box, hit_box
from ..geometry.hit import HitRecord, miss_record
from ..geometry.plane import Plane, hit_plane
from ..geometry.primitive import PrimitiveKind, PrimitiveRecord
from ..geometry.quad import Quad, hit_quad
from ..geometry.sphere import Sphere, hit_sphere
from ..geometry.triangle import Triangle, hit_triangle

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3
vec2 = tm.vec2


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: 1 if the ray intersected any primitive, 0 on a miss.
        t: Ray parameter of the closest intersection.
        point: The 3D point where the ray intersected the surface.
        normal: Unit surface normal facing the incoming ray.
        front_face: 1 if the ray struck the outward-facing side.
        uv: Surface coordinates of the hit point.
        material_id: Row of the hit primitive's material in the material
            table. -1 on a miss.
        primitive_id: Row of the hit primitive. -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    uv: vec2
    material_id: ti.i32
    primitive_id: ti.i32


# Maximum number of primitives supported in the scene
MAX_PRIMITIVES = 4096

# Primitive storage: see lumen.geometry.primitive for the slot layout
prim_kind = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
prim_p0 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
prim_p1 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
prim_p2 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PRIMITIVES)
prim_radius = ti.field(dtype=ti.f32, shape=MAX_PRIMITIVES)
prim_material_id = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
num_primitives = ti.field(dtype=ti.i32, shape=())


def clear_primitives() -> None:
    """Remove all primitives from the device table."""
    num_primitives[None] = 0


def upload_primitives(records: Sequence[PrimitiveRecord], material_ids: Sequence[int]) -> None:
    """Replace the device table with the given primitives, in order.

    Args:
        records: Validated primitive descriptors.
        material_ids: Material table row for each record.

    Raises:
        SceneCapacityError: If there are more than MAX_PRIMITIVES records.
        ValueError: If records and material_ids differ in length.
    """
    if len(records) != len(material_ids):
        raise ValueError(
            f"Got {len(records)} primitives but {len(material_ids)} material ids"
        )
    if len(records) > MAX_PRIMITIVES:
        raise SceneCapacityError(
            f"Scene has {len(records)} primitives, maximum is {MAX_PRIMITIVES}"
        )
    for idx, (record, material_id) in enumerate(zip(records, material_ids)):
        prim_kind[idx] = int(record.kind)
        prim_p0[idx] = vec3(*record.p0)
        prim_p1[idx] = vec3(*record.p1)
        prim_p2[idx] = vec3(*record.p2)
        prim_radius[idx] = record.radius
        prim_material_id[idx] = material_id
    num_primitives[None] = len(records)


def get_primitive_count() -> int:
    """Get the number of primitives in the device table."""
    return int(num_primitives[None])


@ti.func
def hit_primitive(
    index: ti.i32,
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Intersect a ray with one row of the primitive table."""
    kind = prim_kind[index]
    rec = miss_record()
    if kind == int(PrimitiveKind.SPHERE):
        sphere = Sphere(center=prim_p0[index], radius=prim_radius[index])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)
    elif kind == int(PrimitiveKind.PLANE):
        plane = Plane(point=prim_p0[index], normal=prim_p1[index])
        rec = hit_plane(ray_origin, ray_direction, plane, t_min, t_max)
    elif kind == int(PrimitiveKind.TRIANGLE):
        tri = Triangle(v0=prim_p0[index], v1=prim_p1[index], v2=prim_p2[index])
        rec = hit_triangle(ray_origin, ray_direction, tri, t_min, t_max)
    elif kind == int(PrimitiveKind.QUAD):
        quad = Quad(Q=prim_p0[index], u=prim_p1[index], v=prim_p2[index])
        rec = hit_quad(ray_origin, ray_direction, quad, t_min, t_max)
    elif kind == int(PrimitiveKind.BOX):
        box = Box(low=prim_p0[index], high=prim_p1[index])
        rec = hit_box(ray_origin, ray_direction, box, t_min, t_max)
    return rec


@ti.func
def _make_miss_record() -> SceneHitRecord:
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        uv=vec2(0.0, 0.0),
        material_id=-1,
        primitive_id=-1,
    )


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SceneHitRecord:
    """Find the closest intersection of a ray with the scene.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Hits must satisfy t > t_min.
        t_max: Hits must satisfy t < t_max.

    Returns:
        A SceneHitRecord for the closest intersection, or a miss record
        (hit == 0) if nothing was hit.
    """
    closest_t = t_max
    result = _make_miss_record()

    for i in range(num_primitives[None]):
        rec = hit_primitive(i, ray_origin, ray_direction, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = SceneHitRecord(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                front_face=rec.front_face,
                uv=rec.uv,
                material_id=prim_material_id[i],
                primitive_id=i,
            )

    return result


@ti.func
def intersect_scene_any(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> ti.i32:
    """Test whether any primitive blocks the ray in (t_min, t_max).

    Returns:
        1 if any primitive was hit, 0 otherwise.
    """
    hit_any = 0
    for i in range(num_primitives[None]):
        if hit_any == 0:
            rec = hit_primitive(i, ray_origin, ray_direction, t_min, t_max)
            if rec.hit == 1:
                hit_any = 1
    return hit_any
