"""Material type tags shared by all scattering models.

The set of materials is closed, so dispatch uses an integer tag stored next to
each material's parameters instead of virtual calls, which Taichi kernels
cannot express.
"""

import math
from enum import IntEnum
from typing import Sequence


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the integrator to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1


def validate_albedo(albedo: Sequence[float]) -> tuple[float, float, float]:
    """Check an RGB albedo and return it as a tuple of floats.

    Raises:
        ValueError: If albedo does not have three components or any component
            is outside [0, 1].
    """
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if not math.isfinite(component) or component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
    return (float(albedo[0]), float(albedo[1]), float(albedo[2]))
