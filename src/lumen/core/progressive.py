"""Progressive renderer for iterative sample accumulation.

ProgressiveRenderer owns the sample counter of one render: every batch
continues the per-pixel random streams where the previous batch stopped, so
rendering 4 samples in one call or in batches of 1 gives the same image up
to float rounding.

Example:
    >>> renderer = ProgressiveRenderer(RenderConfig(width=320, height=240,
    ...                                             mode=RenderMode.MONTE_CARLO))
    >>> renderer.render(64, batch_size=8)
    >>> buffer = renderer.get_pixel_buffer()
"""

import logging
from collections.abc import Callable, Generator
from dataclasses import replace
from pathlib import Path

from ..config import RenderConfig
from .frame import accumulate_samples
from .framebuffer import clear_render_target, finalize_frame, get_linear_image, setup_render_target
from .pixels import PixelBuffer

logger = logging.getLogger(__name__)

# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """Accumulates samples for one configuration over several calls.

    The renderer drives the shared accumulation buffers. The scene and the
    camera must already be uploaded.

    Attributes:
        config: The active render settings.
    """

    def __init__(self, config: RenderConfig) -> None:
        self._config = config
        self._samples_done = 0
        setup_render_target(config.width, config.height)

    @property
    def config(self) -> RenderConfig:
        return self._config

    @property
    def width(self) -> int:
        return self._config.width

    @property
    def height(self) -> int:
        return self._config.height

    @property
    def sample_count(self) -> int:
        """Samples accumulated per pixel so far."""
        return self._samples_done

    def reset(self) -> None:
        """Discard accumulated samples and restart the random streams."""
        clear_render_target()
        self._samples_done = 0

    def resize(self, width: int, height: int) -> None:
        """Change the image size and reset.

        Raises:
            InvalidConfigError: If the new size is invalid.
        """
        self._config = replace(self._config, width=width, height=height)
        setup_render_target(width, height)
        self._samples_done = 0

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Add num_samples samples per pixel in batches.

        Args:
            num_samples: Total number of samples to add.
            batch_size: Samples per kernel pass before each callback.
            callback: Called after each batch with
                (current_total_samples, target_total_samples).
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Add samples in batches, yielding progress after each batch.

        Yields:
            Tuple of (current_total_samples, target_total_samples).
        """
        if num_samples <= 0:
            return

        batch_size = max(1, batch_size)
        target_samples = self._samples_done + num_samples

        while self._samples_done < target_samples:
            batch = min(batch_size, target_samples - self._samples_done)
            accumulate_samples(self._config, self._samples_done, batch)
            self._samples_done += batch
            logger.debug("Progress %d/%d samples", self._samples_done, target_samples)
            yield (self._samples_done, target_samples)

    def get_linear_image(self):
        """Mean linear radiance as a (height, width, 3) float32 array."""
        return get_linear_image()

    def get_pixel_buffer(self) -> PixelBuffer:
        """Tone mapped, gamma corrected image of the samples so far.

        Raises:
            RuntimeError: If no samples have been rendered.
        """
        if self._samples_done == 0:
            raise RuntimeError("No samples rendered yet")
        return finalize_frame(self._config)

    def save_image(self, filepath: str | Path) -> Path:
        """Save the current image; the format follows the file suffix."""
        from ..output.export import save_image

        return save_image(self.get_pixel_buffer(), filepath)

    def __repr__(self) -> str:
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count}, mode={self._config.mode.name})"
        )
