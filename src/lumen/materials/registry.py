"""Device material table.

All materials in a scene live in one structure-of-arrays table indexed by
material id:

    material_kind[id]       MaterialType value
    material_color[id]      albedo (diffuse, metal), white (dielectric) or
                            radiance (emissive)
    material_param[id]      fuzz (metal) or index of refraction (dielectric)
    material_specular[id]   Phong highlight weight (all but emissive)
    material_shininess[id]  Phong exponent (all but emissive)

The table is written by Scene.upload() before rendering and is read-only
while kernels run.
"""

from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

from ..errors import SceneCapacityError
from .base import Material

# Type alias for 3D vectors
vec3 = tm.vec3

# Maximum number of distinct materials in a scene
MAX_MATERIALS = 1024

material_kind = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_color = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_param = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_specular = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_shininess = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Reset the material count to zero."""
    num_materials[None] = 0


def upload_materials(materials: Sequence[Material]) -> None:
    """Replace the device table with the given materials, in order.

    Raises:
        SceneCapacityError: If there are more than MAX_MATERIALS materials.
    """
    if len(materials) > MAX_MATERIALS:
        raise SceneCapacityError(
            f"Scene uses {len(materials)} materials, maximum is {MAX_MATERIALS}"
        )
    for idx, material in enumerate(materials):
        color, param, specular, shininess = material.device_params()
        material_kind[idx] = int(material.material_type)
        material_color[idx] = vec3(color[0], color[1], color[2])
        material_param[idx] = param
        material_specular[idx] = specular
        material_shininess[idx] = shininess
    num_materials[None] = len(materials)


def get_material_count() -> int:
    """Get the number of materials in the device table."""
    return int(num_materials[None])


@ti.func
def get_material_kind(material_id: ti.i32) -> ti.i32:
    return material_kind[material_id]


@ti.func
def get_material_color(material_id: ti.i32) -> vec3:
    return material_color[material_id]


@ti.func
def get_material_param(material_id: ti.i32) -> ti.f32:
    return material_param[material_id]


@ti.func
def get_material_highlight(material_id: ti.i32):
    """Return (specular, shininess) for a material row."""
    return material_specular[material_id], material_shininess[material_id]
