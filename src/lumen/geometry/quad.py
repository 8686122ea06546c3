"""Quad (parallelogram) primitive.

A quad is defined by a corner Q and two edge vectors u and v; it spans
Q + alpha * u + beta * v for alpha, beta in [0, 1]. The outward normal is
normalize(cross(u, v)).

Ray-quad intersection is a plane test followed by a bounds check on the
plane coordinates (alpha, beta), which are also returned as the hit's uv.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lumen.geometry.quad import Quad, hit_quad
    >>> # Floor quad at y=0, spanning x=[0,1] and z=[0,1]
    >>> quad = Quad(
    ...     Q=ti.math.vec3(0, 0, 0),
    ...     u=ti.math.vec3(1, 0, 0),
    ...     v=ti.math.vec3(0, 0, 1)
    ... )
"""

import taichi as ti
import taichi.math as tm

from ..core.vector import as_vec3, vector_cross, vector_length
from ..errors import DegenerateGeometryError
from .hit import HitRecord, face_normal
from .primitive import PrimitiveKind, PrimitiveRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3
vec2 = tm.vec2


@ti.dataclass
class Quad:
    """A parallelogram with vertices Q, Q+u, Q+v, Q+u+v.

    Attributes:
        Q: The corner point of the quad (vec3).
        u: Edge vector from Q to adjacent corner (vec3).
        v: Edge vector from Q to other adjacent corner (vec3).
    """

    Q: vec3
    u: vec3
    v: vec3


def quad_record(corner, edge_u, edge_v) -> PrimitiveRecord:
    """Validate quad parameters and build its table record.

    Raises:
        DegenerateGeometryError: If the edges are zero-length or parallel.
    """
    q = as_vec3(corner, "quad corner")
    u = as_vec3(edge_u, "quad edge u")
    v = as_vec3(edge_v, "quad edge v")
    if vector_length(vector_cross(u, v)) <= 1e-12:
        raise DegenerateGeometryError(f"Quad edges must span a plane, got u={u} v={v}")
    return PrimitiveRecord(kind=PrimitiveKind.QUAD, p0=q, p1=u, p2=v)


@ti.func
def _compute_quad_frame(quad: Quad):
    """Compute the quad's plane and the dual vectors of its edges.

    With n = u x v, the vectors w_u = (v x n) / |n|^2 and w_v = (n x u) / |n|^2
    satisfy alpha = dot(w_u, P - Q) and beta = dot(w_v, P - Q) for any point P
    in the plane.

    Returns:
        Tuple of (normal, d, w_u, w_v) where normal is the unit plane normal
        and d the plane constant dot(normal, Q).
    """
    n = tm.cross(quad.u, quad.v)
    normal = tm.normalize(n)
    d = tm.dot(normal, quad.Q)
    n_dot_n = tm.dot(n, n)

    # Degenerate quads get zero duals and can never be hit
    w_u = vec3(0.0, 0.0, 0.0)
    w_v = vec3(0.0, 0.0, 0.0)
    if n_dot_n > 1e-10:
        w_u = tm.cross(quad.v, n) / n_dot_n
        w_v = tm.cross(n, quad.u) / n_dot_n

    return normal, d, w_u, w_v


@ti.func
def hit_quad(
    ray_origin: vec3,
    ray_direction: vec3,
    quad: Quad,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-quad intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        quad: The quad to test intersection against.
        t_min: Hits must satisfy t > t_min.
        t_max: Hits must satisfy t < t_max.

    Returns:
        A HitRecord; uv holds the (alpha, beta) plane coordinates.
    """
    normal, d, w_u, w_v = _compute_quad_frame(quad)
    denom = tm.dot(normal, ray_direction)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0
    hit_uv = vec2(0.0, 0.0)

    if ti.abs(denom) > 1e-8:
        t = (d - tm.dot(normal, ray_origin)) / denom
        if t > t_min and t < t_max:
            point = ray_origin + t * ray_direction
            p_minus_q = point - quad.Q
            alpha = tm.dot(w_u, p_minus_q)
            beta = tm.dot(w_v, p_minus_q)

            if alpha >= 0.0 and alpha <= 1.0 and beta >= 0.0 and beta <= 1.0:
                did_hit = 1
                hit_t = t
                hit_point = point
                hit_normal, is_front_face = face_normal(ray_direction, normal)
                hit_uv = vec2(alpha, beta)

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
        uv=hit_uv,
    )

