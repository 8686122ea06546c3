"""Accumulation buffers for progressive rendering.

Each pixel stores the running sum of its radiance samples and the number of
samples taken. Dividing only at the end keeps the accumulated value
independent of how samples were batched.

The buffers are preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT so that
rendering at a new resolution never reallocates fields or recompiles kernels.
Pixel (i, j) is column i, row j counted from the bottom of the image.
"""

import numpy as np
import numpy.typing as npt
import taichi as ti

from ..config import MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH, RenderConfig
from ..errors import InvalidConfigError
from ..output.tonemap import process_image_for_display
from .pixels import PixelBuffer

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Per-pixel radiance sum and sample count (preallocated to max size)
_color_sum = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image size and clear the buffers.

    Raises:
        InvalidConfigError: If the size is non-positive or exceeds the
            preallocated buffers.
    """
    if width <= 0 or height <= 0:
        raise InvalidConfigError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise InvalidConfigError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )
    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Zero the accumulation buffers."""
    _color_sum.fill(0.0)
    _sample_count.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Return the active (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_total_samples() -> int:
    """Samples accumulated in pixel (0, 0); every pixel holds the same count."""
    check_render_target_initialized()
    return int(_sample_count[0, 0])


def get_linear_image() -> npt.NDArray[np.float32]:
    """Mean radiance per pixel as a (height, width, 3) array, top row first.

    Non-finite and negative values are replaced by zero.

    Raises:
        RuntimeError: If some pixel has no samples yet.
    """
    check_render_target_initialized()
    width, height = get_image_dimensions()

    sums = _color_sum.to_numpy()[:width, :height, :].astype(np.float64)
    counts = _sample_count.to_numpy()[:width, :height]
    if np.any(counts <= 0):
        raise RuntimeError("Every pixel must be sampled before the image can be read")

    mean = sums / counts[:, :, np.newaxis]
    mean = np.nan_to_num(mean, nan=0.0, posinf=0.0, neginf=0.0)
    mean = np.maximum(mean, 0.0)

    # (width, height) bottom-up -> (height, width) top-down
    image = np.flipud(np.transpose(mean, (1, 0, 2)))
    return np.ascontiguousarray(image, dtype=np.float32)


def finalize_frame(config: RenderConfig) -> PixelBuffer:
    """Average, tone map, gamma correct and clamp the accumulated samples.

    Args:
        config: Settings providing tone_map, exposure and gamma.

    Returns:
        The display-ready PixelBuffer.
    """
    image = get_linear_image()
    display = process_image_for_display(
        image,
        tone_map=config.tone_map,
        gamma=config.gamma,
        exposure=config.exposure,
    )
    width, height = get_image_dimensions()
    return PixelBuffer(
        width=width,
        height=height,
        samples_per_pixel=get_total_samples(),
        pixels=display,
    )
