"""Scene module for scene description and ray-scene queries.

Components:
    scene: Scene builder and upload into the device tables
    intersection: Unified primitive table and closest-hit queries
    lights: Point and directional lights
    background: Constant or gradient background radiance
    presets: Ready-made scenes with matching cameras

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout for geometric data
    - One material table shared by all primitives
    - Insertion order preserved, so ties resolve to the first primitive
"""

from .background import Background, background_color, upload_background
from .intersection import (
    MAX_PRIMITIVES,
    SceneHitRecord,
    clear_primitives,
    get_primitive_count,
    hit_primitive,
    intersect_scene,
    intersect_scene_any,
    upload_primitives,
)
from .lights import (
    MAX_LIGHTS,
    DirectionalLight,
    Light,
    LightType,
    PointLight,
    clear_lights,
    get_light_count,
    light_incidence,
    upload_lights,
)
from .presets import (
    create_cornell_box_scene,
    create_emissive_ground_scene,
    create_showcase_scene,
    create_single_sphere_scene,
)
from .scene import Scene, SceneObject, clear_device_scene

__all__ = [
    "Background",
    "background_color",
    "upload_background",
    "MAX_PRIMITIVES",
    "SceneHitRecord",
    "clear_primitives",
    "get_primitive_count",
    "hit_primitive",
    "intersect_scene",
    "intersect_scene_any",
    "upload_primitives",
    "MAX_LIGHTS",
    "DirectionalLight",
    "Light",
    "LightType",
    "PointLight",
    "clear_lights",
    "get_light_count",
    "light_incidence",
    "upload_lights",
    "Scene",
    "SceneObject",
    "clear_device_scene",
    "create_single_sphere_scene",
    "create_emissive_ground_scene",
    "create_cornell_box_scene",
    "create_showcase_scene",
]
