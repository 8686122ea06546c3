"""Ray data structure and vector utilities for CPU ray tracing.

This module provides the Ray dataclass, the ray parameter bounds shared by
every intersection query, and the small vector kernel used by geometry,
materials and integrators. All operations are Taichi functions and are
inlined into the render kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction, t_min=T_MIN, t_max=T_MAX)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Ray parameter bounds. T_MIN also rejects hits on the surface a ray leaves.
T_MIN = 1e-4
T_MAX = 1e10

# Distance secondary ray origins are pushed off a surface
RAY_OFFSET = 1e-4


@ti.dataclass
class Ray:
    """A ray with an origin, a direction and a valid parameter interval.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Camera and
            secondary rays are normalized.
        t_min: Smallest parameter accepted as a hit.
        t_max: Largest parameter accepted as a hit.
    """

    origin: vec3
    direction: vec3
    t_min: ti.f32
    t_max: ti.f32


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray over the default interval (T_MIN, T_MAX)."""
    return Ray(origin=origin, direction=direction, t_min=T_MIN, t_max=T_MAX)


@ti.func
def offset_ray_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Offset a ray origin to avoid self-intersection.

    Pushes the origin along the normal, towards the side the new ray leaves
    from. Refracted rays move below the surface, reflected ones above it.

    Args:
        point: The surface hit point.
        normal: The surface normal facing the incoming ray.
        direction: The direction of the new ray.

    Returns:
        The offset origin.
    """
    offset = normal * RAY_OFFSET
    result = point + offset
    if tm.dot(direction, normal) < 0.0:
        result = point - offset
    return result


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length."""
    return tm.normalize(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta: ti.f32):
    """Refract an incident vector through a surface.

    Computes the refracted direction using Snell's law.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The surface normal, normalized and facing the incident ray.
        eta: The ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        A tuple (direction, ok). ok is 0 on total internal reflection, in
        which case direction is the zero vector.
    """
    cos_i = tm.min(-tm.dot(incident, normal), 1.0)
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)
    result = vec3(0.0, 0.0, 0.0)
    ok = 0
    if k >= 0.0:
        result = eta * incident + (eta * cos_i - ti.sqrt(k)) * normal
        ok = 1
    return result, ok


@ti.func
def schlick_fresnel(cosine: ti.f32, ref_idx: ti.f32) -> ti.f32:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        ref_idx: Ratio of refractive indices.

    Returns:
        The approximate Fresnel reflectance coefficient.
    """
    r0 = ((1.0 - ref_idx) / (1.0 + ref_idx)) ** 2
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Return 1 if every component of v is within 1e-8 of zero."""
    s = 1e-8
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


@ti.func
def max_component(v: vec3) -> ti.f32:
    """Return the largest component of v."""
    return tm.max(v.x, tm.max(v.y, v.z))


# =============================================================================
# Orthonormal Bases
# =============================================================================


@ti.func
def build_onb_from_normal(normal: vec3):
    """Build an orthonormal basis from a normal vector.

    Creates a local coordinate frame where the normal is the z-axis.

    Args:
        normal: The surface normal (should be normalized).

    Returns:
        A tuple (tangent, bitangent, normal) forming an orthonormal basis.
    """
    # Choose a vector not parallel to normal
    a = vec3(1.0, 0.0, 0.0)
    if ti.abs(normal.x) > 0.9:
        a = vec3(0.0, 1.0, 0.0)
    tangent = normalize(cross(a, normal))
    bitangent = cross(normal, tangent)
    return tangent, bitangent, normal


@ti.func
def local_to_world(local_dir: vec3, tangent: vec3, bitangent: vec3, normal: vec3) -> vec3:
    """Transform a direction from a z-up local frame to world coordinates."""
    return local_dir.x * tangent + local_dir.y * bitangent + local_dir.z * normal
