"""Point and directional lights for deterministic rendering.

Lights illuminate diffuse surfaces in the Whitted integrator. Neither light
type falls off with distance: a light delivers radiance = intensity * color
to every unoccluded point. The Monte Carlo integrator ignores these lights
and is lit by emissive surfaces alone.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

import taichi as ti
import taichi.math as tm

from ..core.ray import T_MAX
from ..core.vector import Vec3, as_vec3, unit_vector
from ..errors import InvalidConfigError, SceneCapacityError

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of lights in a scene
MAX_LIGHTS = 64


class LightType(IntEnum):
    """Enumeration of light types."""

    POINT = 0
    DIRECTIONAL = 1


def _check_emission(intensity: float, color) -> tuple[float, Vec3]:
    value = float(intensity)
    if not (math.isfinite(value) and value >= 0.0):
        raise InvalidConfigError(f"Light intensity must be non-negative, got {intensity}")
    rgb = as_vec3(color, "light color")
    if any(c < 0.0 for c in rgb):
        raise InvalidConfigError(f"Light color must be non-negative, got {rgb}")
    return value, rgb


@dataclass(frozen=True)
class PointLight:
    """Light emitted from a single position.

    Attributes:
        position: World position of the light.
        intensity: Scalar brightness.
        color: RGB tint.
    """

    position: Vec3
    intensity: float = 1.0
    color: Vec3 = (1.0, 1.0, 1.0)

    def __post_init__(self) -> None:
        intensity, color = _check_emission(self.intensity, self.color)
        object.__setattr__(self, "position", as_vec3(self.position, "light position"))
        object.__setattr__(self, "intensity", intensity)
        object.__setattr__(self, "color", color)

    @property
    def radiance(self) -> Vec3:
        return tuple(self.intensity * c for c in self.color)


@dataclass(frozen=True)
class DirectionalLight:
    """Light arriving from infinitely far away along a fixed direction.

    Attributes:
        direction: Direction the light travels in (from the light towards
            the scene). Normalized on construction.
        intensity: Scalar brightness.
        color: RGB tint.
    """

    direction: Vec3
    intensity: float = 1.0
    color: Vec3 = (1.0, 1.0, 1.0)

    def __post_init__(self) -> None:
        intensity, color = _check_emission(self.intensity, self.color)
        object.__setattr__(self, "direction", unit_vector(self.direction, "light direction"))
        object.__setattr__(self, "intensity", intensity)
        object.__setattr__(self, "color", color)

    @property
    def radiance(self) -> Vec3:
        return tuple(self.intensity * c for c in self.color)


Light = PointLight | DirectionalLight

# light_vector holds the position of point lights and the direction towards
# the light (the negated travel direction) for directional lights
light_kind = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
light_vector = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_radiance = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights from the device table."""
    num_lights[None] = 0


def upload_lights(lights: Sequence[Light]) -> None:
    """Replace the device light table.

    Raises:
        SceneCapacityError: If there are more than MAX_LIGHTS lights.
    """
    if len(lights) > MAX_LIGHTS:
        raise SceneCapacityError(f"Scene has {len(lights)} lights, maximum is {MAX_LIGHTS}")
    for idx, light in enumerate(lights):
        if isinstance(light, PointLight):
            light_kind[idx] = int(LightType.POINT)
            light_vector[idx] = vec3(*light.position)
        else:
            light_kind[idx] = int(LightType.DIRECTIONAL)
            light_vector[idx] = -vec3(*light.direction)
        light_radiance[idx] = vec3(*light.radiance)
    num_lights[None] = len(lights)


def get_light_count() -> int:
    """Get the number of lights in the device table."""
    return int(num_lights[None])


@ti.func
def light_incidence(index: ti.i32, point: vec3):
    """Describe how light index reaches a surface point.

    Args:
        index: Row in the light table.
        point: Surface point being shaded.

    Returns:
        A tuple (to_light, distance, radiance). to_light is the unit
        direction from point towards the light; distance is T_MAX for
        directional lights.
    """
    to_light = light_vector[index]
    distance = T_MAX
    if light_kind[index] == int(LightType.POINT):
        offset = light_vector[index] - point
        distance = tm.length(offset)
        to_light = offset / tm.max(distance, 1e-12)
    return to_light, distance, light_radiance[index]
