"""Diffuse material with an optional Phong highlight.

The Lambertian BRDF is:
    f_r(wi, wo) = albedo / pi

In Monte Carlo mode the material scatters by cosine-weighted hemisphere
sampling, whose pdf cos(theta) / pi cancels the BRDF's cosine term, so the
path throughput is simply multiplied by the albedo.

In deterministic mode the material is lit directly by the scene's lights:
    L = sum_lights radiance * (albedo * max(0, n.l) + specular * max(0, r.v)^shininess)
where r is the light direction mirrored about the normal and v points back
along the view ray.

Example:
    >>> from lumen.materials import Diffuse
    >>> ivory = Diffuse(albedo=(0.4, 0.4, 0.3), specular=0.3, shininess=50.0)
"""

from dataclasses import dataclass
from typing import ClassVar

import taichi as ti
import taichi.math as tm

from ..core.ray import near_zero, reflect
from ..core.sampler import sample_cosine_hemisphere
from .base import Color, Material, MaterialParams, MaterialType, check_color, check_highlight

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Diffuse(Material):
    """Matte surface.

    Attributes:
        albedo: Diffuse reflectance, each component in [0, 1].
        specular: Weight of the Phong highlight in deterministic mode.
        shininess: Phong exponent; larger values give tighter highlights.
    """

    albedo: Color
    specular: float = 0.0
    shininess: float = 32.0

    material_type: ClassVar[MaterialType] = MaterialType.DIFFUSE

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", check_color(self.albedo, "albedo"))
        specular, shininess = check_highlight(self.specular, self.shininess)
        object.__setattr__(self, "specular", specular)
        object.__setattr__(self, "shininess", shininess)

    def device_params(self) -> MaterialParams:
        return self.albedo, 0.0, self.specular, self.shininess


@ti.func
def eval_diffuse(albedo: vec3) -> vec3:
    """Evaluate the Lambertian BRDF albedo / pi."""
    return albedo / tm.pi


@ti.func
def pdf_diffuse(normal: vec3, scattered_direction: vec3) -> ti.f32:
    """PDF cos(theta) / pi of cosine-weighted sampling, 0 below the surface."""
    cos_theta = tm.dot(normal, scattered_direction)
    pdf = 0.0
    if cos_theta > 0.0:
        pdf = cos_theta / tm.pi
    return pdf


@ti.func
def scatter_diffuse(albedo: vec3, normal: vec3, state: ti.u32):
    """Sample a scattered ray direction for a diffuse surface.

    Args:
        albedo: The diffuse reflectance color (RGB).
        normal: The surface normal at the hit point, facing the incoming ray.
        state: Random stream state.

    Returns:
        A tuple (scattered_direction, attenuation, pdf, new_state).
        attenuation equals albedo because BRDF * cos / pdf cancels.
    """
    scattered_direction, pdf, rng = sample_cosine_hemisphere(normal, state)

    # Floating point can collapse the sample onto the surface
    if near_zero(scattered_direction):
        scattered_direction = normal

    return scattered_direction, albedo, pdf, rng


@ti.func
def shade_diffuse(
    albedo: vec3,
    specular: ti.f32,
    shininess: ti.f32,
    normal: vec3,
    to_light: vec3,
    view_direction: vec3,
) -> vec3:
    """Response of a diffuse surface to one unit-radiance light.

    Args:
        albedo: Diffuse reflectance.
        specular: Highlight weight.
        shininess: Phong exponent.
        normal: Surface normal facing the viewer.
        to_light: Unit direction from the surface to the light.
        view_direction: Direction of the incoming view ray.

    Returns:
        albedo * max(0, n.l) plus the Phong highlight.
    """
    n_dot_l = tm.dot(normal, to_light)
    response = vec3(0.0, 0.0, 0.0)
    if n_dot_l > 0.0:
        response = albedo * n_dot_l
        if specular > 0.0:
            mirrored = reflect(-to_light, normal)
            highlight = tm.max(0.0, tm.dot(mirrored, -view_direction))
            response += vec3(specular) * tm.pow(highlight, shininess)
    return response
