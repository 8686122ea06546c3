"""Exception hierarchy for the renderer.

Every error raised by the host-side API derives from LumenError. The concrete
classes also inherit from the builtin exception a caller would naturally catch
(ValueError for bad input, RuntimeError for exhausted capacity), so code written
against the builtins keeps working.
"""


class LumenError(Exception):
    """Base class for all renderer errors."""


class DegenerateGeometryError(LumenError, ValueError):
    """Geometry that cannot be intersected or oriented.

    Raised for zero-length directions and normals, non-positive radii,
    collinear triangle vertices, parallel quad edges, inverted boxes,
    non-finite coordinates and degenerate camera bases.
    """


class InvalidConfigError(LumenError, ValueError):
    """Render settings that are out of range."""


class InvalidMaterialError(LumenError, ValueError):
    """Material parameters outside their physical range."""


class SceneCapacityError(LumenError, RuntimeError):
    """More primitives, materials or lights than the device tables can hold."""
