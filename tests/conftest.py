"""Pytest configuration for mirrortrace tests.

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
    """Reset scene, camera and tracer state around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so the fields are declared after ti.init()
    from mirrortrace.camera.pinhole import PinholeCamera, setup_camera
    from mirrortrace.core.tracer import RenderSettings, clear_render_target, configure_tracer
    from mirrortrace.scene.manager import clear_all

    def _clear_all():
        clear_all()
        setup_camera(PinholeCamera())
        configure_tracer(RenderSettings())
        clear_render_target()

    _clear_all()

    yield

    _clear_all()
