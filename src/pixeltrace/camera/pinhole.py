"""Pinhole camera model for primary ray generation.

The camera sits at ``origin`` looking down -z at a viewport placed
``focal_length`` away. The viewport is spanned by ``horizontal`` (left to
right) and ``vertical``; the vertical vector is stored pointing *down* so that
v = 0 is the top edge of the image and increasing v follows increasing buffer
rows.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pixeltrace.camera.pinhole import Camera, CameraConfig
    >>> camera = Camera(CameraConfig.for_resolution(400, 225))
    >>> camera.info()["horizontal"]
    (3.5555..., 0.0, 0.0)
    >>> # Use camera.get_ray(u, v) within a Taichi kernel
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import taichi as ti

from pixeltrace.core.ray import Ray, make_ray


@dataclass(frozen=True)
class CameraConfig:
    """Configuration for a pinhole camera.

    Attributes:
        aspect_ratio: Width divided by height of the viewport.
        viewport_height: Height of the viewport in world units.
        focal_length: Distance from the origin to the viewport.
        origin: Camera position in world space (x, y, z).
    """

    aspect_ratio: float = 16.0 / 9.0
    viewport_height: float = 2.0
    focal_length: float = 1.0
    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        for name in ("aspect_ratio", "viewport_height", "focal_length"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0.0:
                raise ValueError(f"Camera {name} = {value} must be positive")
        if len(self.origin) != 3 or not all(math.isfinite(c) for c in self.origin):
            raise ValueError(f"Camera origin {self.origin!r} must be three finite numbers")

    @classmethod
    def for_resolution(cls, width: int, height: int, **kwargs) -> "CameraConfig":
        """Create a configuration whose aspect ratio matches an image size."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
        return cls(aspect_ratio=width / height, **kwargs)

    @property
    def viewport_width(self) -> float:
        return self.aspect_ratio * self.viewport_height


@ti.data_oriented
class Camera:
    """Immutable viewport geometry with ray generation.

    Derived once on construction:
        origin, lower_left_corner, horizontal, vertical
    """

    def __init__(self, config: Optional[CameraConfig] = None) -> None:
        self.config = config if config is not None else CameraConfig()

        origin = np.array(self.config.origin, dtype=np.float32)
        horizontal = np.array([self.config.viewport_width, 0.0, 0.0], dtype=np.float32)
        # Inverted so that row 0 of the frame buffer is the top of the image
        vertical = np.array([0.0, -self.config.viewport_height, 0.0], dtype=np.float32)
        depth = np.array([0.0, 0.0, self.config.focal_length], dtype=np.float32)
        lower_left = origin - horizontal / 2.0 - vertical / 2.0 - depth

        self._origin = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._vertical = ti.Vector.field(3, dtype=ti.f32, shape=())

        self._origin[None] = origin.tolist()
        self._lower_left_corner[None] = lower_left.tolist()
        self._horizontal[None] = horizontal.tolist()
        self._vertical[None] = vertical.tolist()

    @ti.func
    def get_ray(self, u: ti.f32, v: ti.f32) -> Ray:
        """Generate a ray through normalized viewport coordinates (u, v).

        Args:
            u: Horizontal coordinate, 0 at the left edge and 1 at the right.
            v: Vertical coordinate, 0 at the top edge and 1 at the bottom.

        Returns:
            A ray from the camera origin toward the viewport point. The
            direction is not normalized.
        """
        origin = self._origin[None]
        target = (
            self._lower_left_corner[None] + u * self._horizontal[None] + v * self._vertical[None]
        )
        return make_ray(origin, target - origin)

    def info(self) -> dict[str, tuple[float, float, float]]:
        """Get the derived camera vectors for debugging.

        Returns:
            Dictionary with origin, lower_left_corner, horizontal, vertical.
        """
        fields = {
            "origin": self._origin,
            "lower_left_corner": self._lower_left_corner,
            "horizontal": self._horizontal,
            "vertical": self._vertical,
        }
        result = {}
        for name, field in fields.items():
            vec = field[None]
            result[name] = (float(vec[0]), float(vec[1]), float(vec[2]))
        return result
