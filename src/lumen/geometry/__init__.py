"""Geometry module for shape primitives.

This module provides geometric primitives and their intersection algorithms:

Components:
    hit: HitRecord shared by every intersection routine
    primitive: Host-side PrimitiveRecord and PrimitiveKind
    sphere: Sphere with robust quadratic intersection
    plane: Infinite plane
    triangle: Triangle with Moller-Trumbore intersection
    quad: Parallelogram defined by a corner and two edges
    box: Axis-aligned box with slab intersection

Intersection routines are Taichi functions (@ti.func) and follow the pattern:
    record = hit_shape(ray_origin, ray_direction, shape, t_min, t_max)

The *_record helpers validate parameters on the host and raise
DegenerateGeometryError for shapes that cannot be intersected.
"""

from .box import Box, box_record, hit_box
from .hit import HitRecord, face_normal, miss_record
from .plane import Plane, hit_plane, plane_record
from .primitive import PrimitiveKind, PrimitiveRecord
from .quad import Quad, hit_quad, quad_record
from .sphere import Sphere, hit_sphere, make_sphere, sphere_record
from .triangle import Triangle, hit_triangle, triangle_record

__all__ = [
    "HitRecord",
    "face_normal",
    "miss_record",
    "PrimitiveKind",
    "PrimitiveRecord",
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "sphere_record",
    "Plane",
    "hit_plane",
    "plane_record",
    "Triangle",
    "hit_triangle",
    "triangle_record",
    "Quad",
    "hit_quad",
    "quad_record",
    "Box",
    "hit_box",
    "box_record",
]
