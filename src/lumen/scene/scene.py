"""Scene description and upload to the device tables.

A Scene is an ordered list of (primitive, material) pairs plus lights and a
background, assembled in Python. Every add_* method validates its input
immediately, so a Scene that was built without errors can always be rendered.

Scene.upload() flattens the description into the device tables read by the
kernels: primitives in insertion order, materials deduplicated by identity,
lights, and background. Kernels never write these tables, so a render sees a
consistent, read-only snapshot.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lumen.materials import Diffuse
    >>> from lumen.scene import Scene
    >>> scene = Scene()
    >>> red = Diffuse(albedo=(0.8, 0.3, 0.3))
    >>> scene.add_sphere(center=(0, 0, -1), radius=0.5, material=red)
    0
    >>> scene.add_point_light(position=(0, 5, 0), intensity=1.0)
    >>> scene.upload()
"""

import logging
from dataclasses import dataclass

from ..errors import InvalidMaterialError, SceneCapacityError
from ..geometry.box import box_record
from ..geometry.plane import plane_record
from ..geometry.primitive import PrimitiveRecord
from ..geometry.quad import quad_record
from ..geometry.sphere import sphere_record
from ..geometry.triangle import triangle_record
from ..materials.base import Material
from ..materials.registry import clear_materials, upload_materials
from .background import Background, upload_background
from .intersection import MAX_PRIMITIVES, clear_primitives, upload_primitives
from .lights import MAX_LIGHTS, DirectionalLight, Light, PointLight, clear_lights, upload_lights

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SceneObject:
    """A primitive together with the material it is rendered with."""

    record: PrimitiveRecord
    material: Material


class Scene:
    """Programmatic scene description.

    Primitives keep their insertion order, which decides ties between
    surfaces hit at exactly the same distance (the earlier one wins).
    Materials are shared by reference: adding several primitives with the
    same Material object stores that material once.
    """

    def __init__(self, background: Background | None = None) -> None:
        self._objects: list[SceneObject] = []
        self._lights: list[Light] = []
        self._background = background if background is not None else Background()

    # -------------------------------------------------------------------------
    # Primitives
    # -------------------------------------------------------------------------

    def add_primitive(self, record: PrimitiveRecord, material: Material) -> int:
        """Append a validated primitive.

        Returns:
            The primitive's index in insertion order.

        Raises:
            InvalidMaterialError: If material is not a Material.
            SceneCapacityError: If the scene already holds MAX_PRIMITIVES.
        """
        if not isinstance(material, Material):
            raise InvalidMaterialError(f"Expected a Material, got {type(material).__name__}")
        if len(self._objects) >= MAX_PRIMITIVES:
            raise SceneCapacityError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
        self._objects.append(SceneObject(record=record, material=material))
        return len(self._objects) - 1

    def add_sphere(self, center, radius: float, material: Material) -> int:
        """Add a sphere. Raises DegenerateGeometryError for radius <= 0."""
        return self.add_primitive(sphere_record(center, radius), material)

    def add_plane(self, point, normal, material: Material) -> int:
        """Add an infinite plane through point with the given normal."""
        return self.add_primitive(plane_record(point, normal), material)

    def add_triangle(self, v0, v1, v2, material: Material) -> int:
        """Add a triangle. Raises DegenerateGeometryError for collinear vertices."""
        return self.add_primitive(triangle_record(v0, v1, v2), material)

    def add_quad(self, corner, edge_u, edge_v, material: Material) -> int:
        """Add the parallelogram corner + a * edge_u + b * edge_v, a, b in [0, 1]."""
        return self.add_primitive(quad_record(corner, edge_u, edge_v), material)

    def add_box(self, low, high, material: Material) -> int:
        """Add an axis-aligned box spanning low to high."""
        return self.add_primitive(box_record(low, high), material)

    @property
    def objects(self) -> tuple[SceneObject, ...]:
        return tuple(self._objects)

    @property
    def primitive_count(self) -> int:
        return len(self._objects)

    # -------------------------------------------------------------------------
    # Lights and background
    # -------------------------------------------------------------------------

    def add_light(self, light: Light) -> None:
        """Append a PointLight or DirectionalLight.

        Raises:
            TypeError: If light is neither.
            SceneCapacityError: If the scene already holds MAX_LIGHTS.
        """
        if not isinstance(light, (PointLight, DirectionalLight)):
            raise TypeError(f"Expected a PointLight or DirectionalLight, got {type(light).__name__}")
        if len(self._lights) >= MAX_LIGHTS:
            raise SceneCapacityError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
        self._lights.append(light)

    def add_point_light(self, position, intensity: float = 1.0, color=(1.0, 1.0, 1.0)) -> None:
        self.add_light(PointLight(position=position, intensity=intensity, color=color))

    def add_directional_light(self, direction, intensity: float = 1.0, color=(1.0, 1.0, 1.0)) -> None:
        self.add_light(DirectionalLight(direction=direction, intensity=intensity, color=color))

    @property
    def lights(self) -> tuple[Light, ...]:
        return tuple(self._lights)

    @property
    def light_count(self) -> int:
        return len(self._lights)

    def set_background(self, color, top=None) -> None:
        """Use a constant background, or a gradient when top is given."""
        self._background = Background(color=color, top=top)

    @property
    def background(self) -> Background:
        return self._background

    # -------------------------------------------------------------------------
    # Device upload
    # -------------------------------------------------------------------------

    def materials(self) -> list[Material]:
        """Distinct materials in order of first use, compared by identity."""
        seen: dict[int, Material] = {}
        for obj in self._objects:
            seen.setdefault(id(obj.material), obj.material)
        return list(seen.values())

    def upload(self) -> None:
        """Write the scene into the device tables used by the render kernels."""
        materials = self.materials()
        index_of = {id(m): i for i, m in enumerate(materials)}
        material_ids = [index_of[id(obj.material)] for obj in self._objects]

        upload_materials(materials)
        upload_primitives([obj.record for obj in self._objects], material_ids)
        upload_lights(self._lights)
        upload_background(self._background)
        logger.debug(
            "Uploaded scene: %d primitives, %d materials, %d lights",
            len(self._objects),
            len(materials),
            len(self._lights),
        )

    def __repr__(self) -> str:
        return (
            f"Scene(primitives={len(self._objects)}, lights={len(self._lights)}, "
            f"background={self._background!r})"
        )


def clear_device_scene() -> None:
    """Empty every device table and reset the background to black."""
    clear_primitives()
    clear_materials()
    clear_lights()
    upload_background(Background())
