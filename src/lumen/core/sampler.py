"""Counter-based random streams for reproducible sampling.

Every camera sample owns an independent 32-bit generator state derived from
(global seed, pixel index, sample index). The state is threaded explicitly
through every sampling function, which returns the advanced state alongside
its value:

    value, state = next_float(state)

Because no state is shared between pixels or samples, the rendered image does
not depend on how pixels are split across worker threads or bands, and a
progressive render of 2 + 2 samples draws exactly the same numbers as a single
render of 4 samples.

The state update is a 32-bit LCG step; outputs are passed through the PCG
output hash so consecutive values are decorrelated.
"""

import taichi as ti
import taichi.math as tm

from .ray import build_onb_from_normal, local_to_world

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Upper bound on rejection sampling iterations
MAX_REJECTION_TRIES = 64

_INV_2_POW_24 = 1.0 / 16777216.0


@ti.func
def hash_u32(x: ti.u32) -> ti.u32:
    """PCG output permutation of a 32-bit integer."""
    state = x * ti.cast(747796405, ti.u32) + ti.cast(1442695041, ti.u32)
    shift = (state >> ti.cast(28, ti.u32)) + ti.cast(4, ti.u32)
    word = ((state >> shift) ^ state) * ti.cast(277803737, ti.u32)
    return (word >> ti.cast(22, ti.u32)) ^ word


@ti.func
def seed_sample_stream(seed: ti.u32, pixel_index: ti.u32, sample_index: ti.u32) -> ti.u32:
    """Derive the generator state for one camera sample.

    Args:
        seed: Folded 32-bit global seed.
        pixel_index: Linear pixel index (row * width + column).
        sample_index: Global sample index within the pixel.

    Returns:
        The initial generator state for this sample.
    """
    return hash_u32(seed + hash_u32(pixel_index + hash_u32(sample_index)))


@ti.func
def next_float(state: ti.u32):
    """Draw a uniform float in [0, 1).

    Args:
        state: Current generator state.

    Returns:
        A tuple (value, new_state).
    """
    rng = state * ti.cast(1664525, ti.u32) + ti.cast(1013904223, ti.u32)
    bits = hash_u32(rng) >> ti.cast(8, ti.u32)
    value = ti.cast(bits, ti.f32) * _INV_2_POW_24
    return value, rng


@ti.func
def random_in_unit_sphere(state: ti.u32):
    """Generate a random point inside the unit sphere.

    Uses rejection sampling over the enclosing cube.

    Returns:
        A tuple (point, new_state) with length(point) < 1.
    """
    rng = state
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_TRIES):
        if not found:
            x, rng = next_float(rng)
            y, rng = next_float(rng)
            z, rng = next_float(rng)
            p = vec3(x, y, z) * 2.0 - 1.0
            if tm.dot(p, p) < 1.0:
                found = True
    if not found:
        p = vec3(0.0, 0.0, 0.0)
    return p, rng


@ti.func
def random_unit_vector(state: ti.u32):
    """Generate a unit vector uniformly distributed on the sphere.

    Returns:
        A tuple (direction, new_state).
    """
    rng = state
    u1, rng = next_float(rng)
    u2, rng = next_float(rng)
    z = 1.0 - 2.0 * u1
    r = ti.sqrt(tm.max(0.0, 1.0 - z * z))
    phi = 2.0 * tm.pi * u2
    return vec3(r * ti.cos(phi), r * ti.sin(phi), z), rng


@ti.func
def random_in_unit_disk(state: ti.u32):
    """Generate a random point inside the unit disk in the xy-plane.

    Used for thin-lens depth of field.

    Returns:
        A tuple (point, new_state) where point is (x, y, 0) with x^2 + y^2 < 1.
    """
    rng = state
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_TRIES):
        if not found:
            x, rng = next_float(rng)
            y, rng = next_float(rng)
            p = vec3(x * 2.0 - 1.0, y * 2.0 - 1.0, 0.0)
            if p.x * p.x + p.y * p.y < 1.0:
                found = True
    if not found:
        p = vec3(0.0, 0.0, 0.0)
    return p, rng


@ti.func
def random_cosine_direction(state: ti.u32):
    """Generate a cosine-weighted direction in the local z-up frame.

    The distribution has PDF = cos(theta) / pi.

    Returns:
        A tuple (direction, new_state).
    """
    rng = state
    r1, rng = next_float(rng)
    r2, rng = next_float(rng)
    phi = 2.0 * tm.pi * r1
    sqrt_r2 = ti.sqrt(r2)
    x = ti.cos(phi) * sqrt_r2
    y = ti.sin(phi) * sqrt_r2
    z = ti.sqrt(1.0 - r2)
    return vec3(x, y, z), rng


@ti.func
def sample_cosine_hemisphere(normal: vec3, state: ti.u32):
    """Cosine-weighted hemisphere sampling around a normal.

    Args:
        normal: The surface normal defining the hemisphere orientation.
        state: Current generator state.

    Returns:
        A tuple (direction, pdf, new_state) where pdf = cos(theta) / pi.
    """
    local_dir, rng = random_cosine_direction(state)
    tangent, bitangent, n = build_onb_from_normal(normal)
    world_dir = local_to_world(local_dir, tangent, bitangent, n)
    pdf = tm.dot(world_dir, normal) / tm.pi
    return world_dir, pdf, rng
