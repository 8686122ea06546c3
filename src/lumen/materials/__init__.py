"""Materials module for surface scattering models.

This module implements the closed family of surface materials:

Components:
    base: MaterialType tags, the Material base class and parameter checks
    diffuse: Lambertian reflection with an optional Phong highlight
    metal: Mirror reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick Fresnel reflectance
    emissive: Light-emitting surfaces
    registry: The device material table shared by all kernels

Materials are immutable host objects. A scene deduplicates them by identity
and uploads them into the registry table; kernels dispatch on the stored
MaterialType. Each scatter function threads an explicit random stream state.
"""

from .base import Material, MaterialType, check_color, check_unit_interval
from .dielectric import (
    Dielectric,
    dielectric_split,
    dielectric_transmission,
    refraction_ratio,
    scatter_dielectric,
)
from .diffuse import Diffuse, eval_diffuse, pdf_diffuse, scatter_diffuse, shade_diffuse
from .emissive import Emissive, emitted_radiance
from .metal import Metal, scatter_metal
from .registry import (
    MAX_MATERIALS,
    clear_materials,
    get_material_color,
    get_material_count,
    get_material_highlight,
    get_material_kind,
    get_material_param,
    upload_materials,
)

__all__ = [
    "Material",
    "MaterialType",
    "check_color",
    "check_unit_interval",
    "Diffuse",
    "eval_diffuse",
    "pdf_diffuse",
    "scatter_diffuse",
    "shade_diffuse",
    "Metal",
    "scatter_metal",
    "Dielectric",
    "dielectric_split",
    "dielectric_transmission",
    "refraction_ratio",
    "scatter_dielectric",
    "Emissive",
    "emitted_radiance",
    "MAX_MATERIALS",
    "clear_materials",
    "get_material_color",
    "get_material_count",
    "get_material_highlight",
    "get_material_kind",
    "get_material_param",
    "upload_materials",
]
