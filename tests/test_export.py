"""Unit tests for frame buffer export."""

import numpy as np
import pytest
from PIL import Image

from pixeltrace.preview.export import frame_to_array, save_png


def _gradient_frame(width, height):
    frame = np.zeros(width * height * 4, dtype=np.uint8)
    image = frame.reshape(height, width, 4)
    image[:, :, 0] = np.arange(width, dtype=np.uint8)[None, :]
    image[:, :, 1] = np.arange(height, dtype=np.uint8)[:, None]
    image[:, :, 3] = 255
    return frame


class TestFrameToArray:
    """Tests for reshaping flat buffers."""

    def test_row_major_layout(self):
        frame = _gradient_frame(5, 3)
        image = frame_to_array(frame, 5, 3)
        assert image.shape == (3, 5, 4)
        # Pixel (x=4, y=2) starts at byte (2*5 + 4)*4
        assert image[2, 4, 0] == 4
        assert image[2, 4, 1] == 2
        assert frame[(2 * 5 + 4) * 4] == 4

    def test_accepts_bytearray(self):
        frame = bytearray(_gradient_frame(4, 2).tobytes())
        image = frame_to_array(frame, 4, 2)
        assert image[1, 3, 0] == 3

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="does not match"):
            frame_to_array(np.zeros(10, dtype=np.uint8), 4, 2)


class TestSavePng:
    """Tests for PNG export."""

    def test_save_png(self, tmp_path):
        frame = _gradient_frame(6, 4)
        path = save_png(frame, 6, 4, tmp_path / "gradient.png")

        assert path.exists()
        with Image.open(path) as loaded:
            assert loaded.size == (6, 4)
            assert loaded.mode == "RGBA"
            np.testing.assert_array_equal(np.asarray(loaded), frame.reshape(4, 6, 4))

    def test_save_png_str_path(self, tmp_path):
        frame = _gradient_frame(2, 2)
        path = save_png(bytes(frame), 2, 2, str(tmp_path / "small.png"))
        assert path.suffix == ".png"
        assert path.exists()
