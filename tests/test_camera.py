"""Unit tests for the pinhole camera.

Tests cover:
- Derived viewport vectors
- Rays through the corners and center of the viewport
- Configuration validation
"""

import pytest
import taichi as ti

from pixeltrace.camera.pinhole import Camera, CameraConfig


def _ray_through(camera, u, v):
    origin = ti.Vector.field(3, dtype=ti.f32, shape=())
    direction = ti.Vector.field(3, dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(camera: ti.template()):
        ray = camera.get_ray(u, v)
        origin[None] = ray.origin
        direction[None] = ray.direction

    test_kernel(camera)
    return origin[None], direction[None]


class TestCameraConfig:
    """Tests for CameraConfig."""

    def test_defaults(self):
        config = CameraConfig()
        assert config.aspect_ratio == pytest.approx(16.0 / 9.0)
        assert config.viewport_height == 2.0
        assert config.focal_length == 1.0
        assert config.viewport_width == pytest.approx(32.0 / 9.0)

    def test_for_resolution(self):
        config = CameraConfig.for_resolution(400, 200)
        assert config.aspect_ratio == 2.0
        assert config.viewport_width == 4.0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"aspect_ratio": 0.0},
            {"viewport_height": -2.0},
            {"focal_length": float("nan")},
            {"origin": (0.0, 0.0)},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            CameraConfig(**kwargs)

    def test_invalid_resolution(self):
        with pytest.raises(ValueError):
            CameraConfig.for_resolution(0, 100)


class TestCameraGeometry:
    """Tests for derived vectors and ray generation."""

    def test_info(self):
        info = Camera().info()
        assert info["origin"] == (0.0, 0.0, 0.0)
        assert info["horizontal"][0] == pytest.approx(32.0 / 9.0)
        assert info["vertical"] == (0.0, -2.0, 0.0)
        llc = info["lower_left_corner"]
        assert llc[0] == pytest.approx(-16.0 / 9.0)
        assert llc[1] == pytest.approx(1.0)
        assert llc[2] == pytest.approx(-1.0)

    def test_top_left_ray(self):
        """u=0, v=0 is the top-left corner of the image."""
        origin, direction = _ray_through(Camera(), 0.0, 0.0)
        assert abs(origin[0]) < 1e-6
        assert abs(direction[0] + 16.0 / 9.0) < 1e-5
        assert abs(direction[1] - 1.0) < 1e-5
        assert abs(direction[2] + 1.0) < 1e-5

    def test_bottom_right_ray(self):
        _, direction = _ray_through(Camera(), 1.0, 1.0)
        assert abs(direction[0] - 16.0 / 9.0) < 1e-5
        assert abs(direction[1] + 1.0) < 1e-5
        assert abs(direction[2] + 1.0) < 1e-5

    def test_center_ray_looks_down_minus_z(self):
        _, direction = _ray_through(Camera(), 0.5, 0.5)
        assert abs(direction[0]) < 1e-5
        assert abs(direction[1]) < 1e-5
        assert abs(direction[2] + 1.0) < 1e-5

    def test_offset_origin(self):
        camera = Camera(CameraConfig(aspect_ratio=1.0, focal_length=2.0, origin=(1.0, 2.0, 3.0)))
        origin, direction = _ray_through(camera, 0.5, 0.5)
        assert abs(origin[0] - 1.0) < 1e-6
        assert abs(origin[1] - 2.0) < 1e-6
        assert abs(origin[2] - 3.0) < 1e-6
        assert abs(direction[2] + 2.0) < 1e-5
