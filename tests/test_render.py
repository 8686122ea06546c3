"""Tests for the render entry point and progressive accumulation.

Tests cover:
- PixelBuffer shape, range and orientation
- Reproducibility for a fixed seed and independence from band size
- Progressive batches matching a single pass
- Validation before any work is done
"""

import numpy as np
import pytest


def _small_scene():
    from lumen.scene import create_cornell_box_scene

    return create_cornell_box_scene()


class TestPixelBuffer:
    def test_shape_mismatch(self):
        from lumen.core.pixels import PixelBuffer

        with pytest.raises(ValueError):
            PixelBuffer(width=4, height=2, samples_per_pixel=1, pixels=np.zeros((4, 2, 3), np.float32))

    def test_pixel_and_quantize(self):
        from lumen.core.pixels import PixelBuffer

        pixels = np.zeros((2, 3, 3), np.float32)
        pixels[0, 2] = (1.0, 0.5, 0.0)
        buffer = PixelBuffer(width=3, height=2, samples_per_pixel=1, pixels=pixels)
        assert buffer.pixel(2, 0) == (1.0, 0.5, 0.0)
        assert buffer.to_uint8()[0, 2].tolist() == [255, 127, 0]
        assert repr(buffer) == "PixelBuffer(width=3, height=2, samples_per_pixel=1)"


class TestRender:
    def test_buffer_shape_and_range(self):
        from lumen.config import RenderMode
        from lumen.render import render

        scene, camera = _small_scene()
        buffer = render(scene, camera, 24, 16, samples_per_pixel=2, max_depth=4, mode=RenderMode.MONTE_CARLO)
        assert (buffer.width, buffer.height, buffer.samples_per_pixel) == (24, 16, 2)
        assert buffer.pixels.shape == (16, 24, 3)
        assert buffer.pixels.dtype == np.float32
        assert buffer.pixels.min() >= 0.0
        assert buffer.pixels.max() <= 1.0

    def test_same_seed_same_image(self):
        from lumen.config import RenderMode
        from lumen.render import render

        scene, camera = _small_scene()
        first = render(scene, camera, 16, 16, 4, 6, RenderMode.MONTE_CARLO, seed=11)
        second = render(scene, camera, 16, 16, 4, 6, RenderMode.MONTE_CARLO, seed=11)
        assert np.array_equal(first.pixels, second.pixels)

    def test_different_seeds_differ(self):
        from lumen.config import RenderMode
        from lumen.render import render

        scene, camera = _small_scene()
        first = render(scene, camera, 16, 16, 4, 6, RenderMode.MONTE_CARLO, seed=1)
        second = render(scene, camera, 16, 16, 4, 6, RenderMode.MONTE_CARLO, seed=2)
        assert not np.array_equal(first.pixels, second.pixels)

    def test_band_size_does_not_change_image(self):
        from lumen.config import RenderMode
        from lumen.render import render

        scene, camera = _small_scene()
        whole = render(scene, camera, 20, 12, 3, 5, RenderMode.MONTE_CARLO, seed=5, tile_rows=64)
        rows = render(scene, camera, 20, 12, 3, 5, RenderMode.MONTE_CARLO, seed=5, tile_rows=1)
        odd = render(scene, camera, 20, 12, 3, 5, RenderMode.MONTE_CARLO, seed=5, tile_rows=5)
        assert np.array_equal(whole.pixels, rows.pixels)
        assert np.array_equal(whole.pixels, odd.pixels)

    def test_deterministic_mode_ignores_seed(self):
        from lumen.render import render
        from lumen.scene import create_showcase_scene

        scene, camera = create_showcase_scene()
        first = render(scene, camera, 24, 16, seed=1)
        second = render(scene, camera, 24, 16, seed=999)
        assert np.array_equal(first.pixels, second.pixels)

    def test_progress_bar_option(self):
        from lumen.render import render
        from lumen.scene import create_single_sphere_scene

        scene, camera = create_single_sphere_scene()
        buffer = render(scene, camera, 8, 8, progress=True, tile_rows=2)
        assert buffer.pixels.shape == (8, 8, 3)

    @pytest.mark.parametrize(
        "args, kwargs",
        [
            ((0, 10), {}),
            ((10, 10), {"samples_per_pixel": 0}),
            ((10, 10), {"max_depth": -1}),
            ((10, 10), {"mode": 5}),
            ((10, 10), {"seed": -3}),
            ((10, 10), {"tone_map": "aces"}),
        ],
    )
    def test_invalid_settings_rejected(self, args, kwargs):
        from lumen.errors import InvalidConfigError
        from lumen.render import render
        from lumen.scene import create_single_sphere_scene

        scene, camera = create_single_sphere_scene()
        with pytest.raises(InvalidConfigError):
            render(scene, camera, *args, **kwargs)

    def test_unknown_option_rejected(self):
        from lumen.render import render
        from lumen.scene import create_single_sphere_scene

        scene, camera = create_single_sphere_scene()
        with pytest.raises(TypeError):
            render(scene, camera, 8, 8, brightness=2.0)

    def test_tone_mapping_options(self):
        from lumen.render import render
        from lumen.scene import create_emissive_ground_scene

        scene, camera = create_emissive_ground_scene()
        plain = render(scene, camera, 32, 32, gamma=1.0)
        mapped = render(scene, camera, 32, 32, gamma=1.0, tone_map="reinhard")
        # The glowing sphere (radiance 4) clips without tone mapping
        assert plain.pixels.max() == 1.0
        assert mapped.pixels.max() == pytest.approx(0.8, abs=1e-5)


class TestProgressiveRenderer:
    def _setup(self, width=16, height=12, spp=4):
        from lumen.camera import setup_camera
        from lumen.config import RenderConfig, RenderMode

        scene, camera = _small_scene()
        scene.upload()
        setup_camera(camera, width, height)
        return RenderConfig(
            width=width, height=height, samples_per_pixel=spp, max_depth=5, mode=RenderMode.MONTE_CARLO, seed=3
        )

    def test_batches_match_single_pass(self):
        from lumen.core.progressive import ProgressiveRenderer

        config = self._setup()
        renderer = ProgressiveRenderer(config)
        renderer.render(4, batch_size=4)
        single = renderer.get_linear_image()

        renderer.reset()
        renderer.render(2, batch_size=2)
        renderer.render(2, batch_size=1)
        assert renderer.sample_count == 4
        batched = renderer.get_linear_image()

        np.testing.assert_allclose(batched, single, rtol=1e-5, atol=1e-6)

    def test_callback_and_generator(self):
        from lumen.core.progressive import ProgressiveRenderer

        renderer = ProgressiveRenderer(self._setup())
        calls = []
        renderer.render(5, batch_size=2, callback=lambda cur, total: calls.append((cur, total)))
        assert calls == [(2, 5), (4, 5), (5, 5)]

        steps = list(renderer.render_progressive(3, batch_size=3))
        assert steps == [(8, 8)]
        assert renderer.get_pixel_buffer().samples_per_pixel == 8

    def test_no_samples_yet(self):
        from lumen.core.progressive import ProgressiveRenderer

        renderer = ProgressiveRenderer(self._setup())
        with pytest.raises(RuntimeError):
            renderer.get_pixel_buffer()
        renderer.render(0)
        assert renderer.sample_count == 0

    def test_resize(self):
        from lumen.core.progressive import ProgressiveRenderer
        from lumen.errors import InvalidConfigError

        renderer = ProgressiveRenderer(self._setup())
        renderer.render(1)
        renderer.resize(8, 6)
        assert renderer.sample_count == 0
        assert (renderer.width, renderer.height) == (8, 6)
        renderer.render(1)
        assert renderer.get_pixel_buffer().pixels.shape == (6, 8, 3)
        with pytest.raises(InvalidConfigError):
            renderer.resize(0, 6)
        assert "samples=1" in repr(renderer)

    def test_render_target_size_checked(self):
        from dataclasses import replace

        from lumen.core.frame import accumulate_samples
        from lumen.core.progressive import ProgressiveRenderer

        config = self._setup()
        ProgressiveRenderer(config)
        with pytest.raises(RuntimeError):
            accumulate_samples(replace(config, width=config.width + 1), 0, 1)

    def test_save_image(self, tmp_path):
        from lumen.core.progressive import ProgressiveRenderer
        from lumen.output import load_image

        renderer = ProgressiveRenderer(self._setup())
        renderer.render(1)
        path = renderer.save_image(tmp_path / "frame.png")
        assert load_image(path).shape == (12, 16, 3)
