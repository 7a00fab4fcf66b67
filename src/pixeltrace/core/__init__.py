"""Core rendering module.

Components:
    ray: Ray data structure and vector helpers
    rng: Explicit, seedable random streams
    settings: Render configuration
    integrator: Recursive radiance estimator and render entry points

All per-ray arithmetic runs inside Taichi kernels.
"""

from .ray import (
    Ray,
    dot,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    ray_at,
    reflect,
    vec3,
)
from .rng import (
    RngState,
    pcg_hash,
    random_f32,
    random_in_unit_sphere,
    random_unit_vector,
    seed_state,
    stream_increment,
)
from .settings import RenderSettings

# Note: integrator is NOT imported here to avoid circular imports.
# Import it directly from pixeltrace.core.integrator.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length_squared",
    "dot",
    "normalize",
    "reflect",
    "near_zero",
    "RngState",
    "pcg_hash",
    "seed_state",
    "stream_increment",
    "random_f32",
    "random_in_unit_sphere",
    "random_unit_vector",
    "RenderSettings",
]
