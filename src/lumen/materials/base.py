"""Material type tags and host-side parameter validation.

Materials form a closed set. Each concrete material is a frozen dataclass
tagged with a MaterialType; the scene flattens them into one device table
of (kind, color, param, specular, shininess) rows, and kernels dispatch on
the kind.
"""

import math
from enum import IntEnum
from typing import ClassVar

from ..core.vector import Vec3, as_vec3
from ..errors import DegenerateGeometryError, InvalidMaterialError

Color = tuple[float, float, float]

# Row layout of the device material table
MaterialParams = tuple[Color, float, float, float]


class MaterialType(IntEnum):
    """Enumeration of supported material types."""

    DIFFUSE = 0
    METAL = 1
    DIELECTRIC = 2
    EMISSIVE = 3


class Material:
    """Base class of the closed material family."""

    material_type: ClassVar[MaterialType]

    def device_params(self) -> MaterialParams:
        """Return the (color, param, specular, shininess) table row."""
        raise NotImplementedError


def check_color(value, name: str, upper: float = 1.0) -> Color:
    """Coerce a color to a float triple within [0, upper].

    Args:
        value: RGB triple.
        name: Parameter name used in error messages.
        upper: Largest allowed component; math.inf for unbounded radiance.

    Raises:
        InvalidMaterialError: If the color is malformed or out of range.
    """
    try:
        color: Vec3 = as_vec3(value, name)
    except DegenerateGeometryError as exc:
        raise InvalidMaterialError(str(exc)) from exc
    for i, component in enumerate(color):
        if component < 0.0 or component > upper:
            raise InvalidMaterialError(
                f"{name} component {i} = {component} is outside [0, {upper}]"
            )
    return color


def check_unit_interval(value: float, name: str) -> float:
    """Return value as a float, requiring it to lie in [0, 1]."""
    v = float(value)
    if not (math.isfinite(v) and 0.0 <= v <= 1.0):
        raise InvalidMaterialError(f"{name} must be in [0, 1], got {value}")
    return v


def check_highlight(specular: float, shininess: float) -> tuple[float, float]:
    """Validate a Phong highlight weight in [0, 1] and a positive exponent."""
    weight = check_unit_interval(specular, "specular")
    exponent = float(shininess)
    if not (math.isfinite(exponent) and exponent > 0.0):
        raise InvalidMaterialError(f"shininess must be positive, got {shininess}")
    return weight, exponent
