"""Pytest configuration for lumen tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Empty the device scene tables and accumulation buffers around each test."""
    # Import here so Taichi is initialized before fields are declared
    from lumen.core.framebuffer import clear_render_target
    from lumen.scene.scene import clear_device_scene

    clear_device_scene()
    clear_render_target()
    yield
    clear_device_scene()
    clear_render_target()
