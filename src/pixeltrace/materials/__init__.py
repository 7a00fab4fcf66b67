"""Materials module for light scattering models.

Components:
    material: Material type tags and parameter validation
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection with optional fuzz

Each material is described on the host by a frozen dataclass and scattered on
the device by a Taichi function returning
``(scattered_ray, attenuation, did_scatter, state)``.
"""

from typing import Union

from .lambertian import Lambertian, scatter_lambertian
from .material import MaterialType, validate_albedo
from .metal import Metal, scatter_metal

# Any material a scene can store
Material = Union[Lambertian, Metal]

__all__ = [
    "Material",
    "MaterialType",
    "validate_albedo",
    "Lambertian",
    "scatter_lambertian",
    "Metal",
    "scatter_metal",
]
