"""Hit record shared by all primitive intersection routines.

Every hit_* function returns a HitRecord whose normal is unit length and faces
the incoming ray. front_face records which side of the surface was struck, so
materials can tell entering from exiting a dielectric.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3
vec2 = tm.vec2


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: 1 if the ray intersected the primitive, 0 on a miss.
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the primitive.
        normal: Unit surface normal facing against the ray direction.
        front_face: 1 if the ray struck the outward-facing side.
        uv: Surface coordinates of the hit point, where the primitive
            defines them (zero otherwise).
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    uv: vec2


@ti.func
def miss_record() -> HitRecord:
    """Return a HitRecord describing no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        uv=vec2(0.0, 0.0),
    )


@ti.func
def face_normal(ray_direction: vec3, outward_normal: vec3):
    """Orient an outward normal against the ray.

    Args:
        ray_direction: Direction of the incoming ray.
        outward_normal: Unit normal pointing out of the surface.

    Returns:
        A tuple (normal, front_face). front_face is 1 when the ray hits the
        outward side; normal is flipped otherwise.
    """
    front_face = 1
    normal = outward_normal
    if tm.dot(ray_direction, outward_normal) > 0.0:
        front_face = 0
        normal = -outward_normal
    return normal, front_face
