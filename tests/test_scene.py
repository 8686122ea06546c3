"""Tests for the Scene builder, lights, background and preset scenes."""

import numpy as np
import pytest
import taichi as ti


class TestSceneBuilder:
    """Tests for adding primitives and validating input."""

    def test_indices_follow_insertion_order(self):
        from lumen.materials import Diffuse
        from lumen.scene import Scene

        scene = Scene()
        grey = Diffuse(albedo=(0.5, 0.5, 0.5))
        assert scene.add_sphere(center=(0, 0, -1), radius=0.5, material=grey) == 0
        assert scene.add_plane(point=(0, -1, 0), normal=(0, 1, 0), material=grey) == 1
        assert scene.add_triangle((0, 0, 0), (1, 0, 0), (0, 1, 0), material=grey) == 2
        assert scene.add_quad(corner=(0, 0, 0), edge_u=(1, 0, 0), edge_v=(0, 1, 0), material=grey) == 3
        assert scene.add_box(low=(0, 0, 0), high=(1, 1, 1), material=grey) == 4
        assert scene.primitive_count == 5
        assert len(scene.objects) == 5

    @pytest.mark.parametrize(
        "method, kwargs",
        [
            ("add_sphere", {"center": (0, 0, 0), "radius": 0.0}),
            ("add_sphere", {"center": (0, 0, 0), "radius": -1.0}),
            ("add_plane", {"point": (0, 0, 0), "normal": (0, 0, 0)}),
            ("add_triangle", {"v0": (0, 0, 0), "v1": (1, 1, 1), "v2": (2, 2, 2)}),
            ("add_quad", {"corner": (0, 0, 0), "edge_u": (1, 0, 0), "edge_v": (2, 0, 0)}),
            ("add_box", {"low": (1, 1, 1), "high": (0, 0, 0)}),
        ],
    )
    def test_degenerate_geometry_rejected(self, method, kwargs):
        from lumen.errors import DegenerateGeometryError
        from lumen.materials import Diffuse
        from lumen.scene import Scene

        scene = Scene()
        with pytest.raises(DegenerateGeometryError):
            getattr(scene, method)(material=Diffuse(albedo=(0.5, 0.5, 0.5)), **kwargs)
        assert scene.primitive_count == 0

    def test_material_type_checked(self):
        from lumen.errors import InvalidMaterialError
        from lumen.scene import Scene

        with pytest.raises(InvalidMaterialError):
            Scene().add_sphere(center=(0, 0, 0), radius=1.0, material="red")

    def test_materials_deduplicated_by_identity(self):
        from lumen.materials import Diffuse
        from lumen.scene import Scene

        scene = Scene()
        shared = Diffuse(albedo=(0.5, 0.5, 0.5))
        twin = Diffuse(albedo=(0.5, 0.5, 0.5))
        scene.add_sphere(center=(0, 0, 0), radius=1.0, material=shared)
        scene.add_sphere(center=(3, 0, 0), radius=1.0, material=twin)
        scene.add_sphere(center=(6, 0, 0), radius=1.0, material=shared)

        materials = scene.materials()
        assert len(materials) == 2
        assert materials[0] is shared
        assert materials[1] is twin


class TestLightsAndBackground:
    def test_add_lights(self):
        from lumen.scene import DirectionalLight, Scene

        scene = Scene()
        scene.add_point_light(position=(0, 5, 0), intensity=2.0, color=(1.0, 0.5, 0.0))
        scene.add_directional_light(direction=(0, -2, 0))
        scene.add_light(DirectionalLight(direction=(1, -1, 0), intensity=0.5))
        assert scene.light_count == 3
        assert scene.lights[0].radiance == (2.0, 1.0, 0.0)
        assert scene.lights[1].direction == (0.0, -1.0, 0.0)

    def test_bad_lights_rejected(self):
        from lumen.errors import DegenerateGeometryError, InvalidConfigError
        from lumen.scene import Scene

        scene = Scene()
        with pytest.raises(InvalidConfigError):
            scene.add_point_light(position=(0, 5, 0), intensity=-1.0)
        with pytest.raises(InvalidConfigError):
            scene.add_point_light(position=(0, 5, 0), color=(1.0, -0.5, 1.0))
        with pytest.raises(DegenerateGeometryError):
            scene.add_directional_light(direction=(0, 0, 0))
        with pytest.raises(TypeError):
            scene.add_light("sun")
        assert scene.light_count == 0

    def test_light_incidence(self):
        from lumen.scene import Scene, light_incidence

        scene = Scene()
        scene.add_point_light(position=(0, 4, 0), intensity=2.0)
        scene.add_directional_light(direction=(0, -1, 0), intensity=0.5)
        scene.upload()

        to_light = ti.Vector.field(3, dtype=ti.f32, shape=2)
        distance = ti.field(dtype=ti.f32, shape=2)
        radiance = ti.Vector.field(3, dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            for k in range(2):
                d, dist, rad = light_incidence(k, ti.math.vec3(0.0, 1.0, 0.0))
                to_light[k] = d
                distance[k] = dist
                radiance[k] = rad

        test_kernel()
        assert np.allclose(to_light.to_numpy(), [[0, 1, 0], [0, 1, 0]], atol=1e-6)
        assert abs(distance[0] - 3.0) < 1e-5
        assert distance[1] > 1e6
        assert np.allclose(radiance.to_numpy(), [[2, 2, 2], [0.5, 0.5, 0.5]])

    def test_background(self):
        from lumen.errors import InvalidConfigError
        from lumen.scene import Background, Scene

        scene = Scene()
        assert scene.background == Background()
        scene.set_background((0.2, 0.3, 0.6))
        assert not scene.background.is_gradient
        scene.set_background((1, 1, 1), top=(0.5, 0.7, 1.0))
        assert scene.background.is_gradient
        assert Background.sky() == scene.background
        with pytest.raises(InvalidConfigError):
            scene.set_background((-1, 0, 0))

    def test_background_color(self):
        from lumen.scene import Background, background_color, upload_background

        result = ti.Vector.field(3, dtype=ti.f32, shape=3)

        @ti.kernel
        def test_kernel():
            result[0] = background_color(ti.math.vec3(0.0, 1.0, 0.0))
            result[1] = background_color(ti.math.vec3(0.0, -1.0, 0.0))
            result[2] = background_color(ti.math.vec3(1.0, 0.0, 0.0))

        upload_background(Background(color=(0.2, 0.3, 0.6)))
        test_kernel()
        assert np.allclose(result.to_numpy(), [0.2, 0.3, 0.6])

        upload_background(Background(color=(1.0, 1.0, 1.0), top=(0.0, 0.0, 1.0)))
        test_kernel()
        out = result.to_numpy()
        assert np.allclose(out[0], [0.0, 0.0, 1.0])
        assert np.allclose(out[1], [1.0, 1.0, 1.0])
        assert np.allclose(out[2], [0.5, 0.5, 1.0])


class TestSceneUpload:
    def test_upload_fills_device_tables(self):
        from lumen.materials import Diffuse, Metal, get_material_count
        from lumen.scene import Scene, get_light_count, get_primitive_count

        scene = Scene()
        grey = Diffuse(albedo=(0.5, 0.5, 0.5))
        scene.add_sphere(center=(0, 0, -1), radius=0.5, material=grey)
        scene.add_sphere(center=(0, -100.5, -1), radius=100.0, material=grey)
        scene.add_sphere(center=(1, 0, -1), radius=0.5, material=Metal(albedo=(0.8, 0.8, 0.8), fuzz=0.0))
        scene.add_point_light(position=(0, 5, 0))
        scene.upload()

        assert get_primitive_count() == 3
        assert get_material_count() == 2
        assert get_light_count() == 1

    def test_clear_device_scene(self):
        from lumen.materials import Diffuse, get_material_count
        from lumen.scene import Scene, clear_device_scene, get_light_count, get_primitive_count

        scene = Scene()
        scene.add_sphere(center=(0, 0, -1), radius=0.5, material=Diffuse(albedo=(0.5, 0.5, 0.5)))
        scene.add_point_light(position=(0, 5, 0))
        scene.upload()
        clear_device_scene()
        assert get_primitive_count() == 0
        assert get_material_count() == 0
        assert get_light_count() == 0

    def test_repr(self):
        from lumen.scene import Scene

        assert repr(Scene()).startswith("Scene(primitives=0, lights=0")


class TestPresets:
    def test_single_sphere(self):
        from lumen.camera import Camera
        from lumen.scene import create_single_sphere_scene

        scene, camera = create_single_sphere_scene()
        assert scene.primitive_count == 1
        assert scene.light_count == 1
        assert isinstance(camera, Camera)

    def test_emissive_ground(self):
        from lumen.materials import Emissive
        from lumen.scene import create_emissive_ground_scene

        scene, _ = create_emissive_ground_scene()
        assert scene.primitive_count == 2
        assert any(isinstance(m, Emissive) for m in scene.materials())

        dark, _ = create_emissive_ground_scene(include_light=False)
        assert dark.primitive_count == 1
        assert not any(isinstance(m, Emissive) for m in dark.materials())

    def test_cornell_box(self):
        from lumen.scene import create_cornell_box_scene

        scene, _ = create_cornell_box_scene()
        assert scene.primitive_count == 9
        assert scene.light_count == 1
        # red, green, white, light, metal, glass
        assert len(scene.materials()) == 6

    def test_showcase(self):
        from lumen.scene import create_showcase_scene

        scene, _ = create_showcase_scene()
        assert scene.primitive_count == 7
        assert scene.light_count == 3
