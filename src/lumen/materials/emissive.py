"""Emissive (area light) material.

Emissive surfaces add their radiance to any path that reaches them and never
scatter. In Monte Carlo mode they are the only light sources; in
deterministic mode they simply appear at their own radiance.
"""

import math
from dataclasses import dataclass
from typing import ClassVar

import taichi as ti
import taichi.math as tm

from .base import Color, Material, MaterialParams, MaterialType, check_color

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Emissive(Material):
    """Light-emitting surface.

    Attributes:
        radiance: Emitted RGB radiance. Components must be non-negative and
            may exceed 1.
    """

    radiance: Color

    material_type: ClassVar[MaterialType] = MaterialType.EMISSIVE

    def __post_init__(self) -> None:
        object.__setattr__(self, "radiance", check_color(self.radiance, "radiance", upper=math.inf))

    def device_params(self) -> MaterialParams:
        return self.radiance, 0.0, 0.0, 0.0


@ti.func
def emitted_radiance(kind: ti.i32, color: vec3) -> vec3:
    """Radiance emitted by a material row; zero unless it is emissive."""
    result = vec3(0.0, 0.0, 0.0)
    if kind == int(MaterialType.EMISSIVE):
        result = color
    return result
