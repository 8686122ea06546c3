"""Core rendering module.

Components:
    ray: Ray data structure and vector helpers for kernels
    sampler: Counter-based random streams and sampling routines
    vector: Host-side vector validation on NumPy
    integrator: Monte Carlo path tracing
    whitted: Deterministic Whitted-style ray tracing
    framebuffer: Accumulation buffers and frame finalization
    frame: Band kernels that sample and accumulate pixels
    progressive: ProgressiveRenderer over the frame kernels
    pixels: PixelBuffer, the finished image

Only the field-free modules are imported here. Import integrator, whitted,
framebuffer, frame and progressive directly; they allocate Taichi fields
and need an initialized backend.
"""

from .pixels import PixelBuffer
from .ray import (
    RAY_OFFSET,
    T_MAX,
    T_MIN,
    Ray,
    build_onb_from_normal,
    cross,
    dot,
    length,
    length_squared,
    local_to_world,
    make_ray,
    max_component,
    near_zero,
    normalize,
    offset_ray_origin,
    ray_at,
    reflect,
    refract,
    schlick_fresnel,
    vec3,
)
from .sampler import (
    hash_u32,
    next_float,
    random_cosine_direction,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    sample_cosine_hemisphere,
    seed_sample_stream,
)
from .vector import Vec3, as_vec3, unit_vector, vector_cross, vector_length

__all__ = [
    "PixelBuffer",
    "Ray",
    "ray_at",
    "make_ray",
    "offset_ray_origin",
    "vec3",
    "T_MIN",
    "T_MAX",
    "RAY_OFFSET",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "schlick_fresnel",
    "near_zero",
    "max_component",
    "build_onb_from_normal",
    "local_to_world",
    "hash_u32",
    "seed_sample_stream",
    "next_float",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
    "random_cosine_direction",
    "sample_cosine_hemisphere",
    "Vec3",
    "as_vec3",
    "unit_vector",
    "vector_cross",
    "vector_length",
]
