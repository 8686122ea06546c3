"""Metal (specular reflective) material.

Metals reflect the incident ray about the surface normal and tint it by their
albedo. A fuzz parameter perturbs the mirror direction by a random offset in a
sphere of radius fuzz; rays pushed at or below the surface are absorbed.

The deterministic integrator ignores fuzz and follows the exact mirror
direction.
"""

from dataclasses import dataclass
from typing import ClassVar

import taichi as ti
import taichi.math as tm

from ..core.ray import reflect
from ..core.sampler import random_in_unit_sphere
from .base import Color, Material, MaterialParams, MaterialType, check_color, check_highlight, check_unit_interval

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Metal(Material):
    """Reflective surface.

    Attributes:
        albedo: Reflection tint, each component in [0, 1].
        fuzz: Perturbation radius in [0, 1]. 0 is a perfect mirror.
        specular: Weight of the Phong highlight from point and directional
            lights in deterministic mode.
        shininess: Phong exponent of that highlight.
    """

    albedo: Color
    fuzz: float = 0.0
    specular: float = 0.5
    shininess: float = 256.0

    material_type: ClassVar[MaterialType] = MaterialType.METAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", check_color(self.albedo, "albedo"))
        object.__setattr__(self, "fuzz", check_unit_interval(self.fuzz, "fuzz"))
        specular, shininess = check_highlight(self.specular, self.shininess)
        object.__setattr__(self, "specular", specular)
        object.__setattr__(self, "shininess", shininess)

    def device_params(self) -> MaterialParams:
        return self.albedo, self.fuzz, self.specular, self.shininess


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    state: ti.u32,
):
    """Compute scattered ray direction for metal material.

    Args:
        albedo: The reflective color (RGB).
        fuzz: Perturbation radius in [0, 1].
        incident_direction: The incoming ray direction (normalized).
        normal: The surface normal facing the incoming ray.
        state: Random stream state.

    Returns:
        A tuple (scattered_direction, attenuation, did_scatter, new_state).
        did_scatter is 0 when the perturbed ray points into the surface;
        scattered_direction is then the zero vector.
    """
    reflected = tm.normalize(reflect(incident_direction, normal))

    rng = state
    offset = vec3(0.0, 0.0, 0.0)
    if fuzz > 0.0:
        offset, rng = random_in_unit_sphere(rng)
    scattered_direction = tm.normalize(reflected + fuzz * offset)

    did_scatter = 1
    if tm.dot(scattered_direction, normal) <= 0.0:
        did_scatter = 0
        scattered_direction = vec3(0.0, 0.0, 0.0)

    return scattered_direction, albedo, did_scatter, rng
