"""Image export utilities for finished frame buffers.

The integrator produces a flat, row-major RGBA byte buffer (row 0 is the top
of the image). These helpers reshape it for inspection and write it to disk.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> from pixeltrace.preview.export import save_png
    >>> save_png(frame, 400, 225, "output.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from pixeltrace.core.settings import CHANNELS

logger = logging.getLogger(__name__)


def frame_to_array(
    frame: Union[npt.NDArray[np.uint8], bytes, bytearray],
    width: int,
    height: int,
) -> npt.NDArray[np.uint8]:
    """Reshape a flat RGBA frame buffer into an image array.

    Args:
        frame: Flat buffer of width*height*4 bytes.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        Array of shape (height, width, 4) with dtype uint8. Shares memory
        with frame when possible.

    Raises:
        ValueError: If the buffer length doesn't match the dimensions.
    """
    array = np.frombuffer(frame, dtype=np.uint8) if not isinstance(frame, np.ndarray) else frame
    expected = width * height * CHANNELS
    if array.size != expected:
        raise ValueError(
            f"Frame buffer length {array.size} does not match {width}x{height}x{CHANNELS} = {expected}"
        )
    return array.reshape(height, width, CHANNELS)


def save_png(
    frame: Union[npt.NDArray[np.uint8], bytes, bytearray],
    width: int,
    height: int,
    filepath: Union[str, Path],
) -> Path:
    """Save a frame buffer as an RGBA PNG file.

    Args:
        frame: Flat buffer of width*height*4 bytes.
        width: Image width in pixels.
        height: Image height in pixels.
        filepath: Output file path (should end in .png).

    Returns:
        The path written.
    """
    image = frame_to_array(frame, width, height)
    path = Path(filepath)

    pil_image = PILImage.fromarray(np.ascontiguousarray(image))
    pil_image.save(path)

    logger.info("Saved %dx%d image to %s", width, height, path)
    return path
