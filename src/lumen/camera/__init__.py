"""Camera module for primary ray generation.

Components:
    camera: Thin-lens perspective camera with jittered pixel sampling

Cameras are immutable host objects. setup_camera() writes the derived basis
and viewport into Taichi fields read by get_camera_ray() in the render kernel.
"""

from .camera import (
    Camera,
    get_camera_info,
    get_camera_ray,
    get_ray,
    setup_camera,
)

__all__ = [
    "Camera",
    "setup_camera",
    "get_ray",
    "get_camera_ray",
    "get_camera_info",
]
