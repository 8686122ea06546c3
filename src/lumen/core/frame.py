"""Frame kernels: per-pixel sampling and accumulation.

The image is processed in horizontal bands of config.tile_rows rows. Each
band is one kernel launch, parallel over its pixels. For every pixel and
sample index a random stream is derived from (seed, pixel index, sample
index) alone, so the result does not depend on the band size, the number of
worker threads, or the order pixels are visited.
"""

import logging

import taichi as ti
import taichi.math as tm
from tqdm import tqdm

from ..camera.camera import get_camera_ray
from ..config import RenderConfig, RenderMode, fold_seed
from .framebuffer import _color_sum, _sample_count, check_render_target_initialized, get_image_dimensions
from .integrator import trace_path
from .sampler import seed_sample_stream
from .whitted import trace_whitted

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Result slot for the single-ray debug kernel
_single_ray_result = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.func
def _sanitize(color: vec3) -> vec3:
    """Replace NaN, Inf and negative channels with zero."""
    result = tm.max(color, vec3(0.0, 0.0, 0.0))
    for c in ti.static(range(3)):
        if tm.isnan(color[c]) or tm.isinf(color[c]):
            result[c] = 0.0
    return result


@ti.func
def _sample_radiance(
    origin: vec3,
    direction: vec3,
    max_depth: ti.i32,
    russian_roulette: ti.i32,
    state: ti.u32,
    mode: ti.template(),
) -> vec3:
    radiance = vec3(0.0, 0.0, 0.0)
    if ti.static(mode == int(RenderMode.MONTE_CARLO)):
        radiance, _ = trace_path(origin, direction, max_depth, russian_roulette, state)
    else:
        radiance = trace_whitted(origin, direction, max_depth)
    return _sanitize(radiance)


@ti.kernel
def _render_band(
    row_start: ti.i32,
    row_end: ti.i32,
    width: ti.i32,
    height: ti.i32,
    sample_start: ti.i32,
    sample_count: ti.i32,
    seed: ti.u32,
    max_depth: ti.i32,
    jitter: ti.i32,
    russian_roulette: ti.i32,
    mode: ti.template(),
):
    """Trace sample_count samples for every pixel in rows [row_start, row_end).

    Args:
        row_start: First row of the band (0 = bottom).
        row_end: One past the last row of the band.
        width: Image width in pixels.
        height: Image height in pixels.
        sample_start: Index of the first sample, so that successive calls
            continue the same per-pixel streams.
        sample_count: Samples to add to each pixel.
        seed: Folded 32-bit render seed.
        max_depth: Maximum surface interactions per path.
        jitter: 1 to jitter samples inside the pixel.
        russian_roulette: 1 to enable Russian roulette (Monte Carlo only).
        mode: RenderMode value, fixed at compile time.
    """
    for i, j in ti.ndrange(width, (row_start, row_end)):
        pixel_index = ti.cast(j * width + i, ti.u32)
        total = vec3(0.0, 0.0, 0.0)

        for k in range(sample_count):
            sample_index = ti.cast(sample_start + k, ti.u32)
            state = seed_sample_stream(seed, pixel_index, sample_index)
            origin, direction, state = get_camera_ray(i, j, width, height, jitter, state)
            total += _sample_radiance(origin, direction, max_depth, russian_roulette, state, mode)

        _color_sum[i, j] += total
        _sample_count[i, j] += sample_count


@ti.kernel
def _trace_single_ray(
    origin: vec3,
    direction: vec3,
    max_depth: ti.i32,
    seed: ti.u32,
    russian_roulette: ti.i32,
    mode: ti.template(),
):
    # Serial outer loop keeps the integrator's own loops from being parallelized
    for _ in range(1):
        state = seed_sample_stream(seed, ti.u32(0), ti.u32(0))
        _single_ray_result[None] = _sample_radiance(
            origin, tm.normalize(direction), max_depth, russian_roulette, state, mode
        )


def accumulate_samples(config: RenderConfig, sample_start: int, sample_count: int) -> None:
    """Add sample_count samples to every pixel of the active render target.

    Args:
        config: Render settings. Its size must match the render target.
        sample_start: Index of the first sample to trace.
        sample_count: Number of samples per pixel to add.

    Raises:
        RuntimeError: If the render target is missing or has another size.
    """
    check_render_target_initialized()
    width, height = get_image_dimensions()
    if (width, height) != (config.width, config.height):
        raise RuntimeError(
            f"Render target is {width}x{height} but the config asks for "
            f"{config.width}x{config.height}"
        )
    if sample_count <= 0:
        return

    mode = int(config.mode)
    jitter = int(config.use_jitter)
    russian_roulette = int(config.russian_roulette)
    seed = config.folded_seed

    with tqdm(
        total=height,
        desc=f"spp {sample_start + 1}-{sample_start + sample_count}",
        unit="row",
        disable=not config.progress,
        leave=False,
    ) as bar:
        for row_start in range(0, height, config.tile_rows):
            row_end = min(row_start + config.tile_rows, height)
            _render_band(
                row_start,
                row_end,
                width,
                height,
                sample_start,
                sample_count,
                seed,
                config.max_depth,
                jitter,
                russian_roulette,
                mode,
            )
            bar.update(row_end - row_start)

    logger.debug(
        "Accumulated samples [%d, %d) over %d bands",
        sample_start,
        sample_start + sample_count,
        -(-height // config.tile_rows),
    )


def trace_single_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    mode: RenderMode = RenderMode.DETERMINISTIC,
    max_depth: int = 5,
    seed: int = 0,
    russian_roulette: bool = False,
) -> tuple[float, float, float]:
    """Evaluate the radiance along one ray against the uploaded scene.

    Intended for tests and debugging. The stream is the one pixel 0, sample 0
    would use for the given seed.

    Returns:
        Tuple of (R, G, B) radiance, with non-finite channels zeroed.
    """
    _trace_single_ray(
        vec3(*origin),
        vec3(*direction),
        max_depth,
        fold_seed(seed),
        int(russian_roulette),
        int(RenderMode(mode)),
    )
    color = _single_ray_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))
