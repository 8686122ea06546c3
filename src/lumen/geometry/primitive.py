"""Host-side primitive descriptors.

A PrimitiveRecord is the immutable, validated description of one shape as it
is stored in the scene's device table. The meaning of the three point slots
depends on the kind:

    SPHERE    p0 = center                        radius = radius
    PLANE     p0 = point on plane, p1 = unit normal
    TRIANGLE  p0, p1, p2 = vertices (counter-clockwise seen from the front)
    QUAD      p0 = corner Q, p1 = edge u, p2 = edge v
    BOX       p0 = minimum corner, p1 = maximum corner
"""

from dataclasses import dataclass
from enum import IntEnum

from ..core.vector import Vec3

_ZERO: Vec3 = (0.0, 0.0, 0.0)


class PrimitiveKind(IntEnum):
    """Enumeration of primitive shapes."""

    SPHERE = 0
    PLANE = 1
    TRIANGLE = 2
    QUAD = 3
    BOX = 4


@dataclass(frozen=True)
class PrimitiveRecord:
    """Validated geometry of a single primitive."""

    kind: PrimitiveKind
    p0: Vec3 = _ZERO
    p1: Vec3 = _ZERO
    p2: Vec3 = _ZERO
    radius: float = 0.0
