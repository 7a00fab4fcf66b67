"""Lambertian (ideal diffuse) material implementation.

A diffuse surface scatters the incoming ray toward ``normal + u`` where ``u``
is uniform on the unit sphere. The resulting directions follow a cosine lobe
around the normal, so the attenuation is simply the albedo.

Example:
    >>> from pixeltrace.materials.lambertian import Lambertian
    >>> red = Lambertian(albedo=(0.7, 0.3, 0.3))
    >>> # Inside a Taichi kernel:
    >>> # scattered, attenuation, did_scatter, state = scatter_lambertian(
    >>> #     albedo, point, normal, state
    >>> # )
"""

from dataclasses import dataclass
from typing import ClassVar

import taichi as ti

from pixeltrace.core.ray import Ray, near_zero, vec3
from pixeltrace.core.rng import RngState, random_unit_vector
from pixeltrace.materials.material import MaterialType, validate_albedo


@dataclass(frozen=True)
class Lambertian:
    """Lambertian (ideal diffuse) material properties.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
    """

    albedo: tuple[float, float, float]

    material_type: ClassVar[MaterialType] = MaterialType.LAMBERTIAN

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", validate_albedo(self.albedo))

    @property
    def fuzz(self) -> float:
        """Diffuse surfaces carry no fuzz; present for uniform storage."""
        return 0.0


@ti.func
def diffuse_direction(normal: vec3, offset: vec3) -> vec3:
    """Offset the normal by a unit vector, falling back to the normal itself."""
    scatter_direction = normal + offset

    # Catch degenerate scatter direction
    if near_zero(scatter_direction):
        scatter_direction = normal
    return scatter_direction


@ti.func
def scatter_lambertian(albedo: vec3, point: vec3, normal: vec3, state: RngState):
    """Scatter a ray off a diffuse surface.

    Args:
        albedo: The diffuse reflectance color (RGB).
        point: The hit point; the scattered ray starts here.
        normal: The surface normal at the hit point, facing the incoming ray.
        state: Random stream state.

    Returns:
        A tuple of (scattered_ray, attenuation, did_scatter, state). Diffuse
        surfaces never absorb, so did_scatter is always 1.
    """
    offset, next_state = random_unit_vector(state)
    did_scatter = 1
    scattered = Ray(origin=point, direction=diffuse_direction(normal, offset))
    return scattered, albedo, did_scatter, next_state
