"""Background radiance returned by rays that escape the scene.

The background is either a constant color, returned exactly, or a vertical
sky gradient blended from bottom to top by the y component of the ray
direction.
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from ..core.vector import Vec3, as_vec3
from ..errors import InvalidConfigError

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

background_bottom = ti.Vector.field(3, dtype=ti.f32, shape=())
background_top = ti.Vector.field(3, dtype=ti.f32, shape=())
background_is_gradient = ti.field(dtype=ti.i32, shape=())


@dataclass(frozen=True)
class Background:
    """Background description.

    Attributes:
        color: Constant color, or the horizon/bottom color of a gradient.
        top: Zenith color. None means a constant background.
    """

    color: Vec3 = (0.0, 0.0, 0.0)
    top: Vec3 | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", _check_radiance(self.color, "background color"))
        if self.top is not None:
            object.__setattr__(self, "top", _check_radiance(self.top, "background top"))

    @property
    def is_gradient(self) -> bool:
        return self.top is not None

    @classmethod
    def sky(cls) -> "Background":
        """White-to-blue sky gradient."""
        return cls(color=(1.0, 1.0, 1.0), top=(0.5, 0.7, 1.0))


def _check_radiance(value, name: str) -> Vec3:
    rgb = as_vec3(value, name)
    if any(c < 0.0 or not math.isfinite(c) for c in rgb):
        raise InvalidConfigError(f"{name} must be non-negative, got {rgb}")
    return rgb


def upload_background(background: Background) -> None:
    """Write the background into its device fields."""
    background_bottom[None] = vec3(*background.color)
    top = background.top if background.top is not None else background.color
    background_top[None] = vec3(*top)
    background_is_gradient[None] = 1 if background.is_gradient else 0


@ti.func
def background_color(direction: vec3) -> vec3:
    """Radiance of the background seen along direction."""
    result = background_bottom[None]
    if background_is_gradient[None] == 1:
        t = 0.5 * (tm.normalize(direction).y + 1.0)
        result = (1.0 - t) * background_bottom[None] + t * background_top[None]
    return result
