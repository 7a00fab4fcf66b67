"""Preview module for output of finished renders.

Components:
    export: Frame buffer reshaping and PNG export

Example:
    >>> from pixeltrace.preview import save_png
    >>> save_png(frame, settings.width, settings.height, "output.png")
"""

from pixeltrace.preview.export import frame_to_array, save_png

__all__ = [
    "frame_to_array",
    "save_png",
]
