"""Display processing and image export."""

from .export import compute_rmse, image_to_uint8, load_image, save_image, save_png, save_ppm, to_pil_image
from .tonemap import (
    ToneMapMethod,
    apply_gamma,
    process_image_for_display,
    tone_map_exposure,
    tone_map_reinhard,
)

__all__ = [
    "ToneMapMethod",
    "apply_gamma",
    "compute_rmse",
    "image_to_uint8",
    "load_image",
    "process_image_for_display",
    "save_image",
    "save_png",
    "save_ppm",
    "to_pil_image",
    "tone_map_exposure",
    "tone_map_reinhard",
]
