"""Camera module for primary ray generation.

Components:
    pinhole: Simple pinhole (perspective) camera model

Ray generation uses normalized viewport coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: top to bottom across image (buffer row order)
"""

from .pinhole import Camera, CameraConfig

__all__ = [
    "Camera",
    "CameraConfig",
]
