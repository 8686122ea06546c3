"""Image export via Pillow.

Supported formats:
    - PNG (8-bit RGB)
    - PPM (binary P6)

The format is picked from the file suffix by save_image.
"""

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from ..core.pixels import PixelBuffer

# Suffix -> Pillow format name
_FORMATS = {
    ".png": "PNG",
    ".ppm": "PPM",
}


def image_to_uint8(image: npt.NDArray[np.float32]) -> npt.NDArray[np.uint8]:
    """Quantize a [0, 1] float image of shape (H, W, 3) to 8 bits."""
    return (np.clip(image, 0.0, 1.0) * 255).astype(np.uint8)


def to_pil_image(buffer: PixelBuffer) -> PILImage.Image:
    """Wrap a PixelBuffer as an RGB Pillow image."""
    return PILImage.fromarray(image_to_uint8(buffer.pixels))


def save_png(buffer: PixelBuffer, filepath: str | Path) -> None:
    """Save a PixelBuffer as an 8-bit PNG."""
    to_pil_image(buffer).save(filepath, format="PNG")


def save_ppm(buffer: PixelBuffer, filepath: str | Path) -> None:
    """Save a PixelBuffer as a binary PPM (P6)."""
    to_pil_image(buffer).save(filepath, format="PPM")


def save_image(buffer: PixelBuffer, filepath: str | Path) -> Path:
    """Save a PixelBuffer, choosing the format from the file suffix.

    Args:
        buffer: Rendered image.
        filepath: Destination ending in .png or .ppm.

    Returns:
        The path written.

    Raises:
        ValueError: If the suffix is not a supported format.
    """
    path = Path(filepath)
    fmt = _FORMATS.get(path.suffix.lower())
    if fmt is None:
        raise ValueError(
            f"Unsupported image format {path.suffix!r}, expected one of {sorted(_FORMATS)}"
        )
    to_pil_image(buffer).save(path, format=fmt)
    return path


def load_image(filepath: str | Path) -> npt.NDArray[np.float32]:
    """Read an image file back as a [0, 1] float32 (H, W, 3) array."""
    with PILImage.open(filepath) as img:
        data = np.asarray(img.convert("RGB"), dtype=np.float32)
    return data / 255.0


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
