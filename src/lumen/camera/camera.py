"""Thin-lens camera model for perspective ray generation.

The camera supports:
- Look-at positioning (lookfrom, lookat, vup)
- Vertical field of view specification
- Automatic or fixed aspect ratio
- Depth of field through a finite aperture focused at focus_distance
- Per-pixel sub-pixel jitter driven by the sample's random stream

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

With aperture == 0 every ray starts at lookfrom and the camera is a pinhole.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lumen.camera import Camera, setup_camera
    >>> camera = Camera(lookfrom=(0.0, 0.0, 3.0), lookat=(0.0, 0.0, 0.0), vfov=60.0)
    >>> setup_camera(camera, width=320, height=240)
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from ..core.ray import Ray, make_ray, vec3
from ..core.sampler import next_float, random_in_unit_disk
from ..core.vector import Vec3, as_vec3, unit_vector, vector_cross, vector_length
from ..errors import DegenerateGeometryError, InvalidConfigError

logger = logging.getLogger(__name__)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """Configuration for a thin-lens perspective camera.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation.
        vfov: Vertical field of view in degrees, in (0, 180).
        aspect_ratio: Width divided by height of the viewport. None uses the
            aspect ratio of the rendered image.
        aperture: Lens diameter. 0 gives a pinhole camera.
        focus_distance: Distance to the plane in perfect focus. None uses
            the distance from lookfrom to lookat.
    """

    lookfrom: Vec3
    lookat: Vec3
    vup: Vec3 = (0.0, 1.0, 0.0)
    vfov: float = 60.0
    aspect_ratio: float | None = None
    aperture: float = 0.0
    focus_distance: float | None = None

    def __post_init__(self) -> None:
        lookfrom = as_vec3(self.lookfrom, "lookfrom")
        lookat = as_vec3(self.lookat, "lookat")
        vup = unit_vector(self.vup, "vup")
        view = np.subtract(lookfrom, lookat)
        if vector_length(view) <= 1e-12:
            raise DegenerateGeometryError("lookfrom and lookat must be distinct points")
        if vector_length(vector_cross(vup, unit_vector(view, "view direction"))) <= 1e-6:
            raise DegenerateGeometryError("vup must not be parallel to the view direction")
        object.__setattr__(self, "lookfrom", lookfrom)
        object.__setattr__(self, "lookat", lookat)
        object.__setattr__(self, "vup", vup)

        vfov = float(self.vfov)
        if not (0.0 < vfov < 180.0):
            raise InvalidConfigError(f"vfov must be in (0, 180) degrees, got {self.vfov}")
        object.__setattr__(self, "vfov", vfov)

        if self.aspect_ratio is not None:
            aspect = float(self.aspect_ratio)
            if not (math.isfinite(aspect) and aspect > 0.0):
                raise InvalidConfigError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
            object.__setattr__(self, "aspect_ratio", aspect)

        aperture = float(self.aperture)
        if not (math.isfinite(aperture) and aperture >= 0.0):
            raise InvalidConfigError(f"aperture must be non-negative, got {self.aperture}")
        object.__setattr__(self, "aperture", aperture)

        if self.focus_distance is not None:
            focus = float(self.focus_distance)
            if not (math.isfinite(focus) and focus > 0.0):
                raise InvalidConfigError(f"focus_distance must be positive, got {self.focus_distance}")
            object.__setattr__(self, "focus_distance", focus)

    def resolved_aspect_ratio(self, width: int, height: int) -> float:
        if self.aspect_ratio is not None:
            return self.aspect_ratio
        return width / height

    def resolved_focus_distance(self) -> float:
        if self.focus_distance is not None:
            return self.focus_distance
        return vector_length(np.subtract(self.lookfrom, self.lookat))


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

# Camera origin (position)
_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f32, shape=())  # Backward (opposite view)

# Viewport on the focus plane
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())  # Full width
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())  # Full height
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())  # Lower-left of viewport

_lens_radius = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per render)
# =============================================================================


def setup_camera(camera: Camera, width: int, height: int) -> None:
    """Write the camera's basis and viewport into the camera fields.

    The viewport lies on the focus plane, focus_distance in front of the
    camera, so rays through the lens all converge there.

    Args:
        camera: Camera configuration.
        width: Image width in pixels, used when aspect_ratio is None.
        height: Image height in pixels.
    """
    theta = math.radians(camera.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h
    viewport_width = camera.resolved_aspect_ratio(width, height) * viewport_height
    focus = camera.resolved_focus_distance()

    lookfrom = np.array(camera.lookfrom, dtype=np.float64)
    lookat = np.array(camera.lookat, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)

    w = lookfrom - lookat
    w = w / np.linalg.norm(w)
    u = np.cross(vup, w)
    u = u / np.linalg.norm(u)
    v = np.cross(w, u)

    horizontal = focus * viewport_width * u
    vertical = focus * viewport_height * v
    lower_left = lookfrom - focus * w - horizontal / 2.0 - vertical / 2.0

    _camera_origin[None] = lookfrom.tolist()
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()
    _viewport_horizontal[None] = horizontal.tolist()
    _viewport_vertical[None] = vertical.tolist()
    _lower_left_corner[None] = lower_left.tolist()
    _lens_radius[None] = camera.aperture / 2.0

    logger.debug(
        "Camera at %s looking at %s, vfov=%.1f, focus=%.3f, aperture=%.3f",
        camera.lookfrom,
        camera.lookat,
        camera.vfov,
        focus,
        camera.aperture,
    )


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(s: ti.f32, t: ti.f32, lens: vec3) -> Ray:
    """Generate a ray through normalized image coordinates (s, t).

    Coordinates run from 0 at the left/bottom edge to 1 at the right/top
    edge of the image.

    Args:
        s: Horizontal coordinate in [0, 1] (left to right).
        t: Vertical coordinate in [0, 1] (bottom to top).
        lens: Point in the unit disk selecting where on the lens the ray
            starts. Ignored for a pinhole camera.

    Returns:
        A normalized Ray over (T_MIN, T_MAX).
    """
    offset = (_camera_u[None] * lens.x + _camera_v[None] * lens.y) * _lens_radius[None]
    origin = _camera_origin[None] + offset
    target = _lower_left_corner[None] + s * _viewport_horizontal[None] + t * _viewport_vertical[None]
    return make_ray(origin, tm.normalize(target - origin))


@ti.func
def get_camera_ray(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    jitter: ti.i32,
    state: ti.u32,
):
    """Generate the primary ray for one sample of a pixel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
        jitter: 1 to place the sample uniformly inside the pixel, 0 to use
            the pixel center.
        state: Random stream state of this sample.

    Returns:
        A tuple (origin, direction, new_state).
    """
    rng = state
    du = 0.5
    dv = 0.5
    if jitter == 1:
        du, rng = next_float(rng)
        dv, rng = next_float(rng)

    lens = vec3(0.0, 0.0, 0.0)
    if _lens_radius[None] > 0.0:
        lens, rng = random_in_unit_disk(rng)

    s = (ti.cast(pixel_i, ti.f32) + du) / ti.cast(width, ti.f32)
    t = (ti.cast(pixel_j, ti.f32) + dv) / ti.cast(height, ti.f32)
    ray = get_ray(s, t, lens)
    return ray.origin, ray.direction, rng


def get_camera_info() -> dict[str, tuple[float, ...]]:
    """Return the current camera fields as plain tuples, for debugging."""
    fields = {
        "origin": _camera_origin,
        "u": _camera_u,
        "v": _camera_v,
        "w": _camera_w,
        "horizontal": _viewport_horizontal,
        "vertical": _viewport_vertical,
        "lower_left": _lower_left_corner,
    }
    info = {name: tuple(float(c) for c in f[None]) for name, f in fields.items()}
    info["lens_radius"] = (float(_lens_radius[None]),)
    return info
