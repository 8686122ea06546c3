"""Dielectric (glass/water) material implementation.

This module implements the dielectric BSDF, which models transparent materials
like glass and water with refraction and Fresnel reflectance.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when sin(theta_t) > 1

The Monte Carlo integrator picks reflection or refraction at random with the
Fresnel reflectance as probability. The deterministic integrator follows both
branches, weighting them by R and 1 - R (see dielectric_split).

Example:
    >>> from lumen.materials import Dielectric
    >>> glass = Dielectric(ior=1.5)
"""

import math
from dataclasses import dataclass
from typing import ClassVar

import taichi as ti
import taichi.math as tm

from ..core.ray import reflect, refract, schlick_fresnel
from ..core.sampler import next_float
from ..errors import InvalidMaterialError
from .base import Material, MaterialParams, MaterialType, check_highlight

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Dielectric(Material):
    """Clear refractive surface.

    Attributes:
        ior: Index of refraction relative to the surrounding medium. Common
            values are 1.33 (water), 1.5 (glass) and 2.4 (diamond).
        specular: Weight of the Phong highlight from point and directional
            lights in deterministic mode.
        shininess: Phong exponent of that highlight.
    """

    ior: float
    specular: float = 0.5
    shininess: float = 125.0

    material_type: ClassVar[MaterialType] = MaterialType.DIELECTRIC

    def __post_init__(self) -> None:
        ior = float(self.ior)
        if not (math.isfinite(ior) and ior >= 1.0):
            raise InvalidMaterialError(f"Index of refraction must be >= 1, got {self.ior}")
        object.__setattr__(self, "ior", ior)
        specular, shininess = check_highlight(self.specular, self.shininess)
        object.__setattr__(self, "specular", specular)
        object.__setattr__(self, "shininess", shininess)

    def device_params(self) -> MaterialParams:
        return (1.0, 1.0, 1.0), self.ior, self.specular, self.shininess


@ti.func
def refraction_ratio(ior: ti.f32, front_face: ti.i32) -> ti.f32:
    """n_incident / n_transmitted: 1/ior entering, ior leaving."""
    ratio = 1.0 / ior
    if front_face == 0:
        ratio = ior
    return ratio


@ti.func
def dielectric_split(
    ior: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Compute both branches of a dielectric interaction.

    Args:
        ior: Index of refraction of the material.
        incident_direction: The incoming ray direction (normalized).
        normal: The surface normal facing the incoming ray.
        front_face: 1 if the ray enters the material, 0 if it leaves.

    Returns:
        A tuple (reflected, refracted, reflectance, can_refract). On total
        internal reflection can_refract is 0, refracted is the zero vector
        and reflectance is 1. An ior of 1 gives reflectance 0 at every
        angle.
    """
    ratio = refraction_ratio(ior, front_face)
    cos_theta = tm.min(-tm.dot(incident_direction, normal), 1.0)

    reflected = tm.normalize(reflect(incident_direction, normal))
    refracted, can_refract = refract(incident_direction, normal, ratio)

    reflectance = 1.0
    if can_refract == 1:
        refracted = tm.normalize(refracted)
        reflectance = schlick_fresnel(cos_theta, ratio)
        # Index-matched boundary: no interface to reflect from
        if ratio == 1.0:
            reflectance = 0.0

    return reflected, refracted, reflectance, can_refract


@ti.func
def scatter_dielectric(
    ior: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
    state: ti.u32,
):
    """Stochastically reflect or refract through a dielectric surface.

    Args:
        ior: Index of refraction of the material.
        incident_direction: The incoming ray direction (normalized).
        normal: The surface normal facing the incoming ray.
        front_face: 1 if the ray enters the material, 0 if it leaves.
        state: Random stream state.

    Returns:
        A tuple (scattered_direction, attenuation, did_scatter, new_state).
        Attenuation is white and did_scatter is always 1.
    """
    reflected, refracted, reflectance, can_refract = dielectric_split(
        ior, incident_direction, normal, front_face
    )
    u, rng = next_float(state)

    scattered_direction = refracted
    if can_refract == 0 or u < reflectance:
        scattered_direction = reflected

    return scattered_direction, vec3(1.0, 1.0, 1.0), 1, rng


@ti.func
def dielectric_transmission(
    ior: ti.f32,
    direction: vec3,
    normal: vec3,
    front_face: ti.i32,
) -> ti.f32:
    """Fraction of light a shadow ray carries through one dielectric crossing.

    Returns 1 - R, or 0 on total internal reflection.
    """
    _, _, reflectance, can_refract = dielectric_split(ior, direction, normal, front_face)
    transmission = 0.0
    if can_refract == 1:
        transmission = 1.0 - reflectance
    return transmission
