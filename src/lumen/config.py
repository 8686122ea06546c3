"""Render configuration and validation.

RenderConfig collects every knob of a single render call. It is validated
eagerly in __post_init__ so that bad settings are reported before any kernel
is compiled or launched.

Example:
    >>> from lumen.config import RenderConfig, RenderMode
    >>> config = RenderConfig(width=320, height=240, samples_per_pixel=16,
    ...                       max_depth=8, mode=RenderMode.MONTE_CARLO, seed=7)
    >>> config.use_jitter
    True
"""

import math
from dataclasses import dataclass
from enum import IntEnum

from .errors import InvalidConfigError

# Size of the preallocated accumulation buffers
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Bound on the Whitted integrator's explicit ray stack
MAX_DETERMINISTIC_DEPTH = 12

TONE_MAP_OPERATORS = ("none", "reinhard", "exposure")

_MASK64 = (1 << 64) - 1


class RenderMode(IntEnum):
    """Light transport algorithm used for a render."""

    DETERMINISTIC = 0
    MONTE_CARLO = 1


@dataclass(frozen=True)
class RenderConfig:
    """Settings for one render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Camera samples averaged per pixel.
        max_depth: Maximum number of surface interactions along a path.
        mode: DETERMINISTIC (Whitted) or MONTE_CARLO (path tracing).
        seed: Unsigned 64-bit seed for all random streams.
        gamma: Display gamma. 2.0 applies a square root, 1.0 disables it.
        tone_map: "none", "reinhard" or "exposure".
        exposure: Exposure multiplier for the "exposure" operator.
        tile_rows: Rows per work band handed to the kernel.
        jitter: Sub-pixel jitter. None jitters only when samples_per_pixel > 1.
        russian_roulette: Terminate dim Monte Carlo paths probabilistically.
        progress: Show a tqdm progress bar over work bands.
    """

    width: int
    height: int
    samples_per_pixel: int = 1
    max_depth: int = 5
    mode: RenderMode = RenderMode.DETERMINISTIC
    seed: int = 0
    gamma: float = 2.0
    tone_map: str = "none"
    exposure: float = 1.0
    tile_rows: int = 32
    jitter: bool | None = None
    russian_roulette: bool = False
    progress: bool = False

    def __post_init__(self) -> None:
        _require_positive_int("width", self.width)
        _require_positive_int("height", self.height)
        _require_positive_int("samples_per_pixel", self.samples_per_pixel)
        _require_positive_int("max_depth", self.max_depth)
        _require_positive_int("tile_rows", self.tile_rows)

        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise InvalidConfigError(
                f"Image {self.width}x{self.height} exceeds the maximum "
                f"{MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT}"
            )

        try:
            mode = RenderMode(self.mode)
        except ValueError as exc:
            raise InvalidConfigError(f"Unknown render mode: {self.mode!r}") from exc
        object.__setattr__(self, "mode", mode)

        if mode == RenderMode.DETERMINISTIC and self.max_depth > MAX_DETERMINISTIC_DEPTH:
            raise InvalidConfigError(
                f"max_depth {self.max_depth} exceeds {MAX_DETERMINISTIC_DEPTH} "
                "for deterministic rendering"
            )

        if isinstance(self.seed, bool) or not isinstance(self.seed, int):
            raise InvalidConfigError(f"seed must be an integer, got {self.seed!r}")
        if not 0 <= self.seed <= _MASK64:
            raise InvalidConfigError(f"seed must fit in an unsigned 64-bit integer, got {self.seed}")

        if not (math.isfinite(self.gamma) and self.gamma > 0.0):
            raise InvalidConfigError(f"gamma must be positive and finite, got {self.gamma}")
        if not (math.isfinite(self.exposure) and self.exposure > 0.0):
            raise InvalidConfigError(f"exposure must be positive and finite, got {self.exposure}")
        if self.tone_map not in TONE_MAP_OPERATORS:
            raise InvalidConfigError(
                f"tone_map must be one of {TONE_MAP_OPERATORS}, got {self.tone_map!r}"
            )

    @property
    def use_jitter(self) -> bool:
        """Whether camera rays are jittered inside their pixel."""
        if self.jitter is None:
            return self.samples_per_pixel > 1
        return bool(self.jitter)

    @property
    def folded_seed(self) -> int:
        """32-bit seed passed to the kernels."""
        return fold_seed(self.seed)


def _require_positive_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidConfigError(f"{name} must be a positive integer, got {value!r}")


def fold_seed(seed: int) -> int:
    """Reduce a 64-bit seed to 32 bits with the splitmix64 finaliser.

    Nearby seeds map to unrelated 32-bit values, so seeds 0, 1, 2, ... give
    independent images.

    Args:
        seed: Unsigned 64-bit seed.

    Returns:
        An integer in [0, 2**32).
    """
    z = (seed + 0x9E3779B97F4A7C15) & _MASK64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK64
    z ^= z >> 31
    return (z ^ (z >> 32)) & 0xFFFFFFFF
