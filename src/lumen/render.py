"""Primary rendering entry point.

render() validates its settings, uploads the scene and camera into the
device tables, accumulates samples_per_pixel samples for every pixel and
returns the finalized PixelBuffer.

Example:
    >>> from lumen.backend import init_backend
    >>> init_backend()
    >>> from lumen.config import RenderMode
    >>> from lumen.render import render
    >>> from lumen.scene.presets import create_cornell_box_scene
    >>> scene, camera = create_cornell_box_scene()
    >>> image = render(scene, camera, 256, 256, samples_per_pixel=64,
    ...                max_depth=8, mode=RenderMode.MONTE_CARLO, seed=1)
"""

import logging
import time
from typing import Any

from .camera.camera import Camera, setup_camera
from .config import RenderConfig, RenderMode
from .core.frame import trace_single_ray
from .core.pixels import PixelBuffer
from .core.progressive import ProgressiveRenderer
from .core.vector import as_vec3, unit_vector
from .scene.scene import Scene

logger = logging.getLogger(__name__)


def render(
    scene: Scene,
    camera: Camera,
    width: int,
    height: int,
    samples_per_pixel: int = 1,
    max_depth: int = 5,
    mode: RenderMode = RenderMode.DETERMINISTIC,
    *,
    seed: int = 0,
    **options: Any,
) -> PixelBuffer:
    """Render a scene to a finalized pixel buffer.

    Args:
        scene: Scene to render. It is uploaded, never modified.
        camera: Camera to view the scene through.
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Samples averaged per pixel.
        max_depth: Maximum surface interactions along a path.
        mode: RenderMode.DETERMINISTIC or RenderMode.MONTE_CARLO.
        seed: Unsigned 64-bit seed; equal seeds give identical images.
        **options: Any other RenderConfig field (gamma, tone_map, exposure,
            tile_rows, jitter, russian_roulette, progress).

    Returns:
        The rendered PixelBuffer.

    Raises:
        InvalidConfigError: If any setting is invalid. Nothing is rendered.
    """
    config = RenderConfig(
        width=width,
        height=height,
        samples_per_pixel=samples_per_pixel,
        max_depth=max_depth,
        mode=mode,
        seed=seed,
        **options,
    )
    return render_with_config(scene, camera, config)


def render_with_config(scene: Scene, camera: Camera, config: RenderConfig) -> PixelBuffer:
    """Render with a prepared RenderConfig."""
    logger.info(
        "Rendering %dx%d, %d spp, depth %d, %s mode, seed %d",
        config.width,
        config.height,
        config.samples_per_pixel,
        config.max_depth,
        config.mode.name,
        config.seed,
    )
    start = time.perf_counter()

    scene.upload()
    setup_camera(camera, config.width, config.height)

    renderer = ProgressiveRenderer(config)
    renderer.render(config.samples_per_pixel, batch_size=config.samples_per_pixel)
    buffer = renderer.get_pixel_buffer()

    logger.info("Rendered %r in %.3f s", buffer, time.perf_counter() - start)
    return buffer


def trace_ray(
    scene: Scene,
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    mode: RenderMode = RenderMode.DETERMINISTIC,
    max_depth: int = 5,
    seed: int = 0,
    upload: bool = True,
) -> tuple[float, float, float]:
    """Evaluate the linear radiance along a single ray.

    Args:
        scene: Scene to trace against.
        origin: Ray origin.
        direction: Ray direction; normalized here.
        mode: Integrator to use.
        max_depth: Maximum surface interactions.
        seed: Seed of the random stream (Monte Carlo only).
        upload: Upload the scene first. Pass False to reuse tables already
            uploaded for the same scene.

    Returns:
        Tuple of (R, G, B) radiance before tone mapping and gamma.

    Raises:
        DegenerateGeometryError: If direction has zero length.
        InvalidConfigError: If mode, max_depth or seed is invalid.
    """
    config = RenderConfig(width=1, height=1, max_depth=max_depth, mode=mode, seed=seed)
    ray_origin = as_vec3(origin, "origin")
    ray_direction = unit_vector(direction, "direction")
    if upload:
        scene.upload()
    return trace_single_ray(ray_origin, ray_direction, config.mode, config.max_depth, config.seed)
