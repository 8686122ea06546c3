"""Whitted-style deterministic ray tracer.

Surfaces are shaded as follows:
    - Diffuse: direct light from every point and directional light, with
      Lambert and Phong terms, attenuated by shadow rays
    - Metal: the exact mirror reflection, tinted by the albedo (fuzz ignored),
      plus the Phong highlight of each visible light
    - Dielectric: both the reflected and the refracted ray, weighted by the
      Fresnel reflectance R and 1 - R (reflection only on total internal
      reflection), plus the Phong highlight of each visible light
    - Emissive: the surface's own radiance

Recursion is replaced by an explicit stack of pending rays, each carrying the
weight it contributes with and its depth. A ray at depth d is only spawned
when d < max_depth, so secondary rays past the depth limit contribute black.
The result uses no randomness: the same ray always returns the same color.
"""

import taichi as ti
import taichi.math as tm

from ..config import MAX_DETERMINISTIC_DEPTH
from ..materials.base import MaterialType
from ..materials.dielectric import dielectric_split, dielectric_transmission
from ..materials.diffuse import shade_diffuse
from ..materials.registry import (
    get_material_color,
    get_material_highlight,
    get_material_kind,
    get_material_param,
)
from ..scene.background import background_color
from ..scene.intersection import intersect_scene
from ..scene.lights import light_incidence, num_lights
from .ray import T_MAX, T_MIN, max_component, offset_ray_origin, reflect

# Type alias for 3D vectors
vec3 = tm.vec3

# Pending-ray stack capacity; a binary ray tree of depth D needs at most D + 1
WHITTED_STACK_SIZE = MAX_DETERMINISTIC_DEPTH + 2

# Rays whose weight falls below this are not traced
MIN_RAY_WEIGHT = 1e-4

# Dielectric surfaces a shadow ray may pass through before it counts as blocked
MAX_SHADOW_CROSSINGS = 8


@ti.func
def shadow_transmittance(origin: vec3, direction: vec3, distance: ti.f32) -> vec3:
    """Fraction of a light's radiance that reaches origin along direction.

    Opaque surfaces block the light completely. Each dielectric surface
    crossed scales it by 1 - R, matching the weighting of refracted rays.

    Args:
        origin: Offset surface point the shadow ray starts from.
        direction: Unit direction towards the light.
        distance: Distance from origin to the light.

    Returns:
        Per-channel transmittance in [0, 1].
    """
    transmittance = vec3(1.0, 1.0, 1.0)
    o = origin
    remaining = distance
    active = 1

    for _ in range(MAX_SHADOW_CROSSINGS):
        if active == 1:
            rec = intersect_scene(o, direction, T_MIN, remaining)
            if rec.hit == 0:
                active = 0
            elif get_material_kind(rec.material_id) == int(MaterialType.DIELECTRIC):
                ior = get_material_param(rec.material_id)
                transmittance *= dielectric_transmission(ior, direction, rec.normal, rec.front_face)
                o = offset_ray_origin(rec.point, rec.normal, direction)
                remaining = distance - tm.dot(o - origin, direction)
                if max_component(transmittance) <= 0.0:
                    active = 0
            else:
                transmittance = vec3(0.0, 0.0, 0.0)
                active = 0

    # Still crossing surfaces after the limit
    if active == 1:
        transmittance = vec3(0.0, 0.0, 0.0)

    return transmittance


@ti.func
def direct_lighting(
    point: vec3,
    normal: vec3,
    view_direction: vec3,
    albedo: vec3,
    specular: ti.f32,
    shininess: ti.f32,
) -> vec3:
    """Sum the contribution of every scene light at a surface point.

    Metal and dielectric surfaces pass a black albedo and only pick up the
    Phong highlight.
    """
    result = vec3(0.0, 0.0, 0.0)
    for light in range(num_lights[None]):
        to_light, distance, radiance = light_incidence(light, point)
        if tm.dot(normal, to_light) > 0.0:
            shadow_origin = offset_ray_origin(point, normal, to_light)
            shadow_distance = distance - tm.dot(shadow_origin - point, to_light)
            visibility = shadow_transmittance(shadow_origin, to_light, shadow_distance)
            if max_component(visibility) > 0.0:
                response = shade_diffuse(albedo, specular, shininess, normal, to_light, view_direction)
                result += radiance * visibility * response
    return result


@ti.func
def trace_whitted(ray_origin: vec3, ray_direction: vec3, max_depth: ti.i32) -> vec3:
    """Evaluate the deterministic color seen along a ray.

    Args:
        ray_origin: Origin of the primary ray.
        ray_direction: Normalized direction of the primary ray.
        max_depth: Maximum number of surface interactions along any branch,
            at most MAX_DETERMINISTIC_DEPTH.

    Returns:
        The radiance arriving along the ray.
    """
    radiance = vec3(0.0, 0.0, 0.0)

    stack_origin = ti.Matrix.zero(ti.f32, WHITTED_STACK_SIZE, 3)
    stack_direction = ti.Matrix.zero(ti.f32, WHITTED_STACK_SIZE, 3)
    stack_weight = ti.Matrix.zero(ti.f32, WHITTED_STACK_SIZE, 3)
    stack_depth = ti.Vector.zero(ti.i32, WHITTED_STACK_SIZE)

    for k in ti.static(range(3)):
        stack_origin[0, k] = ray_origin[k]
        stack_direction[0, k] = ray_direction[k]
        stack_weight[0, k] = 1.0
    top = 1

    while top > 0:
        top -= 1
        origin = vec3(stack_origin[top, 0], stack_origin[top, 1], stack_origin[top, 2])
        direction = vec3(stack_direction[top, 0], stack_direction[top, 1], stack_direction[top, 2])
        weight = vec3(stack_weight[top, 0], stack_weight[top, 1], stack_weight[top, 2])
        depth = stack_depth[top]

        rec = intersect_scene(origin, direction, T_MIN, T_MAX)

        # Up to two secondary rays per hit
        n_children = 0
        child_dir0 = vec3(0.0, 0.0, 0.0)
        child_weight0 = vec3(0.0, 0.0, 0.0)
        child_dir1 = vec3(0.0, 0.0, 0.0)
        child_weight1 = vec3(0.0, 0.0, 0.0)

        if rec.hit == 0:
            radiance += weight * background_color(direction)
        else:
            kind = get_material_kind(rec.material_id)
            color = get_material_color(rec.material_id)

            if kind == int(MaterialType.EMISSIVE):
                radiance += weight * color

            else:
                specular, shininess = get_material_highlight(rec.material_id)
                albedo = vec3(0.0, 0.0, 0.0)
                if kind == int(MaterialType.DIFFUSE):
                    albedo = color
                if kind == int(MaterialType.DIFFUSE) or specular > 0.0:
                    radiance += weight * direct_lighting(
                        rec.point, rec.normal, direction, albedo, specular, shininess
                    )

            if kind == int(MaterialType.METAL):
                child_dir0 = tm.normalize(reflect(direction, rec.normal))
                child_weight0 = weight * color
                n_children = 1

            elif kind == int(MaterialType.DIELECTRIC):
                ior = get_material_param(rec.material_id)
                reflected, refracted, reflectance, can_refract = dielectric_split(
                    ior, direction, rec.normal, rec.front_face
                )
                child_dir0 = reflected
                child_weight0 = weight * reflectance
                n_children = 1
                if can_refract == 1:
                    child_dir1 = refracted
                    child_weight1 = weight * (1.0 - reflectance)
                    n_children = 2

        if depth + 1 < max_depth:
            for c in ti.static(range(2)):
                child_dir = child_dir0
                child_weight = child_weight0
                if ti.static(c == 1):
                    child_dir = child_dir1
                    child_weight = child_weight1
                if c < n_children and top < WHITTED_STACK_SIZE and max_component(child_weight) > MIN_RAY_WEIGHT:
                    child_origin = offset_ray_origin(rec.point, rec.normal, child_dir)
                    for k in ti.static(range(3)):
                        stack_origin[top, k] = child_origin[k]
                        stack_direction[top, k] = child_dir[k]
                        stack_weight[top, k] = child_weight[k]
                    stack_depth[top] = depth + 1
                    top += 1

    return radiance
