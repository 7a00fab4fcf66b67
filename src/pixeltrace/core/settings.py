"""Render configuration.

The caller supplies scene composition, sample/depth counts and resolution
programmatically; nothing is parsed from files. ``RenderSettings`` validates
the numeric parameters once so that the tracer itself never has to.
"""

import numbers
from dataclasses import dataclass

# Defaults of the interactive viewer
ASPECT_RATIO = 16.0 / 9.0
DEFAULT_WIDTH = 800
DEFAULT_SAMPLES_PER_PIXEL = 100
DEFAULT_MAX_DEPTH = 50

# Bytes per RGBA pixel in the frame buffer
CHANNELS = 4

_MAX_SEED = 2**32


@dataclass(frozen=True)
class RenderSettings:
    """Parameters of a single render request.

    Attributes:
        width: Image width in pixels (at least 2).
        height: Image height in pixels (at least 2).
        samples_per_pixel: Number of jittered samples averaged per pixel.
        max_depth: Bounce budget; a path that exhausts it contributes black.
        seed: Seed for the per-pixel random streams, in [0, 2**32).
    """

    width: int
    height: int
    samples_per_pixel: int = DEFAULT_SAMPLES_PER_PIXEL
    max_depth: int = DEFAULT_MAX_DEPTH
    seed: int = 0

    def __post_init__(self) -> None:
        for name in ("width", "height", "samples_per_pixel", "max_depth", "seed"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ValueError(f"{name} = {value!r} must be an integer")

        # Pixel coordinates are normalized by (width - 1) and (height - 1)
        if self.width < 2 or self.height < 2:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) must be at least 2x2"
            )
        if self.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel = {self.samples_per_pixel} must be at least 1"
            )
        if self.max_depth < 1:
            raise ValueError(f"max_depth = {self.max_depth} must be at least 1")
        if not 0 <= self.seed < _MAX_SEED:
            raise ValueError(f"seed = {self.seed} is outside [0, 2**32)")

    @classmethod
    def for_aspect_ratio(
        cls,
        width: int = DEFAULT_WIDTH,
        aspect_ratio: float = ASPECT_RATIO,
        **kwargs: int,
    ) -> "RenderSettings":
        """Build settings whose height follows from width and aspect ratio.

        The height is truncated, as in ``int(width / aspect_ratio)``.
        """
        if aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio = {aspect_ratio} must be positive")
        return cls(width=width, height=int(width / aspect_ratio), **kwargs)

    @property
    def frame_size(self) -> int:
        """Required frame buffer length in bytes."""
        return self.width * self.height * CHANNELS

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height
