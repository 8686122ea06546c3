"""Finished image returned by a render."""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """A rendered, display-ready image.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Samples averaged into every pixel.
        pixels: float32 array of shape (height, width, 3) with values in
            [0, 1]. Row 0 is the top of the image.
    """

    width: int
    height: int
    samples_per_pixel: int
    pixels: npt.NDArray[np.float32]

    def __post_init__(self) -> None:
        expected = (self.height, self.width, 3)
        if self.pixels.shape != expected:
            raise ValueError(f"Pixel array has shape {self.pixels.shape}, expected {expected}")

    def pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """Color at column x, row y (row 0 at the top)."""
        r, g, b = self.pixels[y, x]
        return float(r), float(g), float(b)

    def to_uint8(self) -> npt.NDArray[np.uint8]:
        """Quantize to 8 bits per channel."""
        return (np.clip(self.pixels, 0.0, 1.0) * 255).astype(np.uint8)

    def __repr__(self) -> str:
        return (
            f"PixelBuffer(width={self.width}, height={self.height}, "
            f"samples_per_pixel={self.samples_per_pixel})"
        )
