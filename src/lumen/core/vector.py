"""Host-side vector helpers for scene and camera construction.

Scene descriptions are built in Python before anything reaches a kernel.
These helpers coerce user input into immutable float triples and reject the
degenerate values that would otherwise surface as NaNs deep inside a render.
Arithmetic is done with NumPy; results that get stored on frozen records are
converted back to plain tuples.
"""

import numpy as np

from ..errors import DegenerateGeometryError

Vec3 = tuple[float, float, float]

# Lengths at or below this are treated as zero
LENGTH_EPSILON = 1e-12


def as_vec3(value, name: str = "vector") -> Vec3:
    """Coerce a 3-element sequence into a tuple of finite floats.

    Args:
        value: Any array-like of three numbers (tuple, list, numpy array).
        name: Name used in error messages.

    Returns:
        The components as a (x, y, z) tuple.

    Raises:
        DegenerateGeometryError: If value does not have exactly three numeric
            components or any component is NaN or infinite.
    """
    try:
        array = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise DegenerateGeometryError(
            f"{name} must have three numeric components, got {value!r}"
        ) from exc
    if array.shape != (3,):
        raise DegenerateGeometryError(f"{name} must have three numeric components, got {value!r}")
    if not np.all(np.isfinite(array)):
        raise DegenerateGeometryError(f"{name} must be finite, got {tuple(array.tolist())}")
    x, y, z = array.tolist()
    return (x, y, z)


def vector_length(v) -> float:
    """Euclidean length of v."""
    return float(np.linalg.norm(np.asarray(v, dtype=np.float64)))


def vector_cross(a, b) -> np.ndarray:
    """Cross product of two 3-vectors."""
    return np.cross(np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64))


def unit_vector(value, name: str = "vector", eps: float = LENGTH_EPSILON) -> Vec3:
    """Return value scaled to unit length.

    Args:
        value: Direction to normalize.
        name: Name used in error messages.
        eps: Lengths at or below this are treated as zero.

    Raises:
        DegenerateGeometryError: If value is zero-length or not a finite 3-vector.
    """
    v = np.asarray(as_vec3(value, name))
    n = np.linalg.norm(v)
    if n <= eps:
        raise DegenerateGeometryError(f"{name} must have non-zero length, got {tuple(v.tolist())}")
    x, y, z = (v / n).tolist()
    return (x, y, z)
