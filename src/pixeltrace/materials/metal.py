"""Metal (specular reflective) material implementation.

Metals mirror the incoming ray about the surface normal:

    R = D - 2(D . N)N

and then perturb the reflection by ``fuzz`` times a random point in the unit
sphere. A perturbed ray that ends up pointing into the surface is absorbed.

Example:
    >>> from pixeltrace.materials.metal import Metal
    >>> brushed = Metal(albedo=(0.8, 0.8, 0.8), fuzz=0.3)
    >>> Metal(albedo=(0.8, 0.6, 0.2), fuzz=4.0).fuzz
    1.0
"""

import math
from dataclasses import dataclass
from typing import ClassVar

import taichi as ti

from pixeltrace.core.ray import Ray, dot, normalize, reflect, vec3
from pixeltrace.core.rng import RngState, random_in_unit_sphere
from pixeltrace.materials.material import MaterialType, validate_albedo


@dataclass(frozen=True)
class Metal:
    """Metal (specular reflective) material properties.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Roughness of the reflection, clamped to [0, 1] on construction.
            0 is a perfect mirror.
    """

    albedo: tuple[float, float, float]
    fuzz: float = 0.0

    material_type: ClassVar[MaterialType] = MaterialType.METAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", validate_albedo(self.albedo))
        if not math.isfinite(self.fuzz):
            raise ValueError(f"Metal fuzz = {self.fuzz} must be a finite number")
        object.__setattr__(self, "fuzz", min(max(float(self.fuzz), 0.0), 1.0))


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f32,
    incident_direction: vec3,
    point: vec3,
    normal: vec3,
    state: RngState,
):
    """Reflect a ray off a metal surface.

    Args:
        albedo: The reflective color (RGB).
        fuzz: Roughness in [0, 1].
        incident_direction: Direction of the incoming ray (any length).
        point: The hit point; the scattered ray starts here.
        normal: The surface normal at the hit point, facing the incoming ray.
        state: Random stream state.

    Returns:
        A tuple of (scattered_ray, attenuation, did_scatter, state) where
        did_scatter is 1 only if the scattered direction leaves the surface
        on the visible side.
    """
    reflected = reflect(normalize(incident_direction), normal)
    offset, next_state = random_in_unit_sphere(state)
    scatter_direction = reflected + fuzz * offset

    did_scatter = 0
    if dot(scatter_direction, normal) > 0.0:
        did_scatter = 1

    scattered = Ray(origin=point, direction=scatter_direction)
    return scattered, albedo, did_scatter, next_state
