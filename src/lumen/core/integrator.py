"""Path tracing integrator for Monte Carlo light transport.

The path tracer solves the rendering equation by tracing rays from the camera
through the scene, bouncing off surfaces according to their material
properties, and accumulating emitted radiance along each path.

Key features:
    - Material dispatch over the closed material family
    - Emissive surfaces as the only light sources (point and directional
      lights are ignored in this mode)
    - Optional Russian roulette termination after a minimum number of bounces
    - Self-intersection avoidance with ray origin offset

Every random decision draws from the explicit stream state passed in, so a
path is a pure function of (scene, ray, state).
"""

import taichi as ti
import taichi.math as tm

from ..materials.base import MaterialType
from ..materials.dielectric import scatter_dielectric
from ..materials.diffuse import scatter_diffuse
from ..materials.emissive import emitted_radiance
from ..materials.metal import scatter_metal
from ..materials.registry import get_material_color, get_material_kind, get_material_param
from ..scene.background import background_color
from ..scene.intersection import intersect_scene
from .ray import T_MAX, T_MIN, offset_ray_origin
from .sampler import next_float

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Minimum bounces before Russian roulette can terminate paths
MIN_BOUNCES_BEFORE_RR = 3

# Russian roulette survival probability cap
MAX_RR_PROBABILITY = 0.95


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def scatter_material(
    material_id: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
    state: ti.u32,
):
    """Dispatch to the scatter function of a material row.

    Args:
        material_id: Row in the material table.
        incident_direction: The incoming ray direction (normalized).
        normal: The surface normal, facing the incoming ray.
        front_face: 1 if the ray hit the outward side.
        state: Random stream state.

    Returns:
        A tuple (scattered_direction, attenuation, did_scatter, new_state).
        Emissive surfaces never scatter.
    """
    kind = get_material_kind(material_id)
    color = get_material_color(material_id)

    rng = state
    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if kind == int(MaterialType.DIFFUSE):
        scattered_direction, attenuation, _, rng = scatter_diffuse(color, normal, rng)
        did_scatter = 1

    elif kind == int(MaterialType.METAL):
        fuzz = get_material_param(material_id)
        scattered_direction, attenuation, did_scatter, rng = scatter_metal(
            color, fuzz, incident_direction, normal, rng
        )

    elif kind == int(MaterialType.DIELECTRIC):
        ior = get_material_param(material_id)
        scattered_direction, attenuation, did_scatter, rng = scatter_dielectric(
            ior, incident_direction, normal, front_face, rng
        )

    return scattered_direction, attenuation, did_scatter, rng


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def trace_path(
    ray_origin: vec3,
    ray_direction: vec3,
    max_depth: ti.i32,
    russian_roulette: ti.i32,
    state: ti.u32,
):
    """Trace a single path from a primary ray through the scene.

    Up to max_depth surface interactions are followed. A ray that escapes
    picks up throughput * background; a path that is absorbed, hits an
    emitter, or exhausts max_depth contributes nothing further.

    Args:
        ray_origin: Origin of the primary ray.
        ray_direction: Normalized direction of the primary ray.
        max_depth: Maximum number of surface interactions.
        russian_roulette: 1 to enable Russian roulette after
            MIN_BOUNCES_BEFORE_RR bounces.
        state: Random stream state of this sample.

    Returns:
        A tuple (radiance, new_state).
    """
    rng = state
    origin = ray_origin
    direction = ray_direction

    radiance = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)

    # Taichi has no break inside ti.func loops
    active = 1

    for depth in range(max_depth):
        if active == 1:
            hit_record = intersect_scene(origin, direction, T_MIN, T_MAX)

            if hit_record.hit == 0:
                radiance += throughput * background_color(direction)
                active = 0
            else:
                material_id = hit_record.material_id
                kind = get_material_kind(material_id)
                radiance += throughput * emitted_radiance(kind, get_material_color(material_id))

                scattered_direction, attenuation, did_scatter, rng = scatter_material(
                    material_id, direction, hit_record.normal, hit_record.front_face, rng
                )

                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation

                    if russian_roulette == 1 and depth >= MIN_BOUNCES_BEFORE_RR:
                        # Survival probability based on throughput luminance
                        luminance = 0.2126 * throughput.x + 0.7152 * throughput.y + 0.0722 * throughput.z
                        rr_prob = tm.min(luminance, MAX_RR_PROBABILITY)
                        u, rng = next_float(rng)
                        if u > rr_prob:
                            active = 0
                        else:
                            throughput /= rr_prob

                    if active == 1:
                        origin = offset_ray_origin(hit_record.point, hit_record.normal, scattered_direction)
                        direction = scattered_direction

    return radiance, rng
