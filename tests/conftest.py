"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.

Note: test kernels that call functions containing loops (scene scans,
rejection sampling, ray_color) wrap the call in a single-iteration outer
loop. Taichi parallelizes the outermost loop of a kernel, and these inner
loops must run serially.
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


@pytest.fixture
def empty_scene():
    """A scene with no objects."""
    from pixeltrace.scene.world import Scene

    return Scene(max_spheres=8, max_materials=8)


@pytest.fixture
def two_sphere_scene():
    """Red diffuse sphere on a large ground sphere."""
    from pixeltrace.scene.default import create_two_sphere_scene

    return create_two_sphere_scene()
