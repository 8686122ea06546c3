"""Ready-made scenes with matching cameras.

Each factory returns a (Scene, Camera) pair:

    create_single_sphere_scene     one diffuse sphere under a point light
    create_emissive_ground_scene   glowing sphere above a diffuse ground plane
    create_cornell_box_scene       Cornell box lit by an emissive ceiling quad
    create_showcase_scene          ivory, glass, rubber, mirror and gold spheres
                                   with a box on a floor, lit by three lights

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lumen.scene.presets import create_cornell_box_scene
    >>> scene, camera = create_cornell_box_scene()
    >>> scene.primitive_count
    9
"""

from ..camera.camera import Camera
from ..materials import Dielectric, Diffuse, Emissive, Metal
from .scene import Scene

# =============================================================================
# Single sphere
# =============================================================================

SINGLE_SPHERE_BACKGROUND = (0.2, 0.3, 0.6)


def create_single_sphere_scene(
    albedo: tuple[float, float, float] = (0.8, 0.3, 0.3),
    background: tuple[float, float, float] = SINGLE_SPHERE_BACKGROUND,
) -> tuple[Scene, Camera]:
    """Unit sphere at the origin, lit from straight above.

    The camera sits at (0, 0, 3) with a 56 degree field of view, so the
    sphere's silhouette covers about two thirds of the image width.
    """
    scene = Scene()
    scene.set_background(background)
    scene.add_sphere(center=(0.0, 0.0, 0.0), radius=1.0, material=Diffuse(albedo=albedo))
    scene.add_point_light(position=(0.0, 5.0, 0.0), intensity=1.0)

    camera = Camera(lookfrom=(0.0, 0.0, 3.0), lookat=(0.0, 0.0, 0.0), vfov=56.0)
    return scene, camera


# =============================================================================
# Emissive sphere over a ground plane
# =============================================================================

GROUND_ALBEDO = (0.8, 0.8, 0.8)
GLOW_RADIANCE = (4.0, 4.0, 4.0)
GLOW_CENTER = (0.0, 1.0, 0.0)
GLOW_RADIUS = 0.5


def create_emissive_ground_scene(include_light: bool = True) -> tuple[Scene, Camera]:
    """Diffuse plane y = 0 with an emissive sphere hovering above the origin.

    The camera looks straight down from (0, 10, 0) with world -z at the top
    of the image, so world x maps to image columns. The background is black,
    so with include_light=False nothing in the scene emits light.
    """
    scene = Scene()
    scene.set_background((0.0, 0.0, 0.0))
    scene.add_plane(point=(0.0, 0.0, 0.0), normal=(0.0, 1.0, 0.0), material=Diffuse(albedo=GROUND_ALBEDO))
    if include_light:
        scene.add_sphere(center=GLOW_CENTER, radius=GLOW_RADIUS, material=Emissive(radiance=GLOW_RADIANCE))

    camera = Camera(
        lookfrom=(0.0, 10.0, 0.0),
        lookat=(0.0, 0.0, 0.0),
        vup=(0.0, 0.0, -1.0),
        vfov=60.0,
    )
    return scene, camera


# =============================================================================
# Cornell box
# =============================================================================

# Classic Cornell box dimensions (approximately 555x555x555 units)
BOX_SIZE = 555.0

RED_WALL_ALBEDO = (0.65, 0.05, 0.05)
GREEN_WALL_ALBEDO = (0.12, 0.45, 0.15)
WHITE_WALL_ALBEDO = (0.73, 0.73, 0.73)

METAL_SPHERE_ALBEDO = (0.95, 0.93, 0.88)
METAL_SPHERE_FUZZ = 0.3
GLASS_SPHERE_IOR = 1.5

# Classic ceiling light is about 130 x 105 units
LIGHT_WIDTH = 130.0
LIGHT_DEPTH = 105.0


def create_cornell_box_scene(
    box_size: float = BOX_SIZE,
    light_intensity: float = 15.0,
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0),
) -> tuple[Scene, Camera]:
    """Cornell box with diffuse, metal and glass spheres.

    The box spans [0, box_size] on every axis with the front (z = 0) open.
    Red is on the left wall, green on the right. An emissive quad just below
    the ceiling lights the scene in Monte Carlo mode; a point light at the
    same spot lights it in deterministic mode.

    Args:
        box_size: Edge length of the box.
        light_intensity: Scale applied to light_color for both lights.
        light_color: RGB color of the ceiling light.
    """
    scene = Scene()
    s = box_size

    red = Diffuse(albedo=RED_WALL_ALBEDO)
    green = Diffuse(albedo=GREEN_WALL_ALBEDO)
    white = Diffuse(albedo=WHITE_WALL_ALBEDO)
    light = Emissive(radiance=tuple(light_intensity * c for c in light_color))

    # Walls, oriented to face into the box
    scene.add_quad(corner=(0.0, 0.0, 0.0), edge_u=(0.0, s, 0.0), edge_v=(0.0, 0.0, s), material=red)
    scene.add_quad(corner=(s, 0.0, s), edge_u=(0.0, s, 0.0), edge_v=(0.0, 0.0, -s), material=green)
    scene.add_quad(corner=(0.0, 0.0, s), edge_u=(s, 0.0, 0.0), edge_v=(0.0, s, 0.0), material=white)
    scene.add_quad(corner=(0.0, 0.0, 0.0), edge_u=(s, 0.0, 0.0), edge_v=(0.0, 0.0, s), material=white)
    scene.add_quad(corner=(0.0, s, s), edge_u=(s, 0.0, 0.0), edge_v=(0.0, 0.0, -s), material=white)

    # Ceiling light, one unit below the ceiling
    light_x = (s - LIGHT_WIDTH) / 2.0
    light_z = (s - LIGHT_DEPTH) / 2.0
    light_y = s - 1.0
    scene.add_quad(
        corner=(light_x, light_y, light_z),
        edge_u=(LIGHT_WIDTH, 0.0, 0.0),
        edge_v=(0.0, 0.0, LIGHT_DEPTH),
        material=light,
    )

    radius = 80.0
    scene.add_sphere(center=(s * 0.27, radius, s * 0.35), radius=radius, material=white)
    scene.add_sphere(
        center=(s * 0.73, radius, s * 0.35),
        radius=radius,
        material=Metal(albedo=METAL_SPHERE_ALBEDO, fuzz=METAL_SPHERE_FUZZ),
    )
    scene.add_sphere(center=(s * 0.5, radius, s * 0.65), radius=radius, material=Dielectric(ior=GLASS_SPHERE_IOR))

    scene.add_point_light(position=(s / 2.0, light_y - 2.0, s / 2.0), intensity=1.0, color=(1.0, 1.0, 1.0))

    camera = Camera(
        lookfrom=(s / 2.0, s / 2.0, -800.0),
        lookat=(s / 2.0, s / 2.0, s / 2.0),
        vfov=40.0,
        aspect_ratio=1.0,
    )
    return scene, camera


# =============================================================================
# Showcase
# =============================================================================

SHOWCASE_BACKGROUND = (0.2, 0.7, 0.8)


def create_showcase_scene() -> tuple[Scene, Camera]:
    """Spheres of several materials, a box, and a floor under three lights.

    Designed for deterministic mode: it exercises Phong highlights, shadows,
    mirror reflection and refraction through glass.
    """
    ivory = Diffuse(albedo=(0.24, 0.24, 0.18), specular=0.3, shininess=50.0)
    red_rubber = Diffuse(albedo=(0.27, 0.09, 0.09), specular=0.1, shininess=10.0)
    gold = Diffuse(albedo=(0.3, 0.25, 0.15), specular=0.5, shininess=80.0)
    magenta = Diffuse(albedo=(0.3, 0.0, 0.3), specular=0.3, shininess=20.0)
    floor = Diffuse(albedo=(0.16, 0.16, 0.16), specular=0.1, shininess=30.0)
    glass = Dielectric(ior=1.5)
    mirror = Metal(albedo=(0.95, 0.95, 0.9))

    scene = Scene()
    scene.set_background(SHOWCASE_BACKGROUND)

    scene.add_sphere(center=(-3.0, 0.0, -16.0), radius=2.0, material=ivory)
    scene.add_sphere(center=(-1.0, -1.5, -12.0), radius=2.0, material=glass)
    scene.add_sphere(center=(1.5, -0.5, -18.0), radius=3.0, material=red_rubber)
    scene.add_sphere(center=(5.0, 8.0, -18.0), radius=4.0, material=mirror)
    scene.add_sphere(center=(-3.0, 2.5, -8.0), radius=2.0, material=gold)
    scene.add_box(low=(-100.0, -20.0, -100.0), high=(100.0, -3.5, 100.0), material=floor)
    scene.add_box(low=(4.5, -3.5, -18.0), high=(10.0, -1.5, -8.0), material=magenta)

    scene.add_point_light(position=(-20.0, 20.0, 20.0), intensity=1.5)
    scene.add_point_light(position=(30.0, 50.0, -25.0), intensity=1.8)
    scene.add_point_light(position=(30.0, 20.0, 30.0), intensity=1.7)

    camera = Camera(lookfrom=(0.0, 0.0, 0.0), lookat=(0.0, 0.0, -1.0), vfov=60.0)
    return scene, camera
