"""Explicit random number streams for reproducible Monte Carlo sampling.

Taichi's built-in ``ti.random()`` draws from hidden per-thread state, so two
renders of the same scene never match. The tracer instead threads an explicit
PCG state through every sampling routine:

    value, state = random_f32(state)

Each pixel derives its own stream from the render seed and its flat index with
``seed_state``. The result is independent of how Taichi schedules the parallel
pixel loop, so a fixed seed always produces the same image.

The generator is the PCG-RXS-M-XS 32-bit variant: an LCG step followed by an
output permutation. Every stream has its own odd LCG increment
``(stream_index << 1) | 1``, so streams of different pixels walk different
LCG cycles instead of windows of one shared cycle. Increments repeat only for
stream indices that differ by 2**31.
"""

import taichi as ti

from pixeltrace.core.ray import length_squared, normalize, vec3

# LCG multiplier and default increment, permutation multiplier for PCG-RXS-M-XS 32
_PCG_MULTIPLIER = 747796405
_PCG_INCREMENT = 2891336453
_PCG_PERMUTE = 277803737

# 2^-24: maps the top 24 bits of a word onto [0, 1)
_INV_2_24 = 1.0 / 16777216.0

# Upper bound on rejection sampling attempts
MAX_REJECTION_ATTEMPTS = 64


@ti.dataclass
class RngState:
    """Position in one random stream.

    Attributes:
        state: Current LCG state.
        inc: Odd LCG increment selecting the stream.
    """

    state: ti.u32
    inc: ti.u32


@ti.func
def _pcg_step(state: ti.u32, inc: ti.u32) -> ti.u32:
    return state * ti.u32(_PCG_MULTIPLIER) + inc


@ti.func
def _pcg_output(state: ti.u32) -> ti.u32:
    shift = (state >> ti.u32(28)) + ti.u32(4)
    word = ((state >> shift) ^ state) * ti.u32(_PCG_PERMUTE)
    return (word >> ti.u32(22)) ^ word


@ti.func
def pcg_hash(value: ti.u32) -> ti.u32:
    """Hash a 32-bit integer with one PCG step and output permutation."""
    return _pcg_output(_pcg_step(value, ti.u32(_PCG_INCREMENT)))


@ti.func
def stream_increment(stream_index: ti.u32) -> ti.u32:
    """Odd LCG increment of a stream."""
    return (stream_index << ti.u32(1)) | ti.u32(1)


@ti.func
def seed_state(seed: ti.u32, stream_index: ti.u32) -> RngState:
    """Derive the initial state of an independent stream.

    Follows the PCG seeding procedure: step once from zero, add the hashed
    seed, step again.

    Args:
        seed: The render seed.
        stream_index: Index of the stream (the flat pixel index).

    Returns:
        The starting RngState of the stream.
    """
    inc = stream_increment(stream_index)
    state = _pcg_step(ti.u32(0), inc) + pcg_hash(seed)
    return RngState(state=_pcg_step(state, inc), inc=inc)


@ti.func
def random_f32(rng: RngState):
    """Draw a uniform float in [0, 1).

    Args:
        rng: The current stream state.

    Returns:
        A tuple of (value, next_state).
    """
    next_state = RngState(state=_pcg_step(rng.state, rng.inc), inc=rng.inc)
    value = ti.cast(_pcg_output(next_state.state) >> ti.u32(8), ti.f32) * _INV_2_24
    return value, next_state


@ti.func
def _sample_ball(state: RngState, min_length_squared: ti.f32):
    p = vec3(0.0, 0.0, 0.0)
    s = state
    found = 0
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if found == 0:
            x, s1 = random_f32(s)
            y, s2 = random_f32(s1)
            z, s3 = random_f32(s2)
            s = s3
            candidate = vec3(2.0 * x - 1.0, 2.0 * y - 1.0, 2.0 * z - 1.0)
            l2 = length_squared(candidate)
            if min_length_squared < l2 and l2 < 1.0:
                p = candidate
                found = 1
    return p, s


@ti.func
def random_in_unit_sphere(state: RngState):
    """Generate a random point inside the unit sphere.

    Uses rejection sampling over the enclosing cube.

    Returns:
        A tuple of (point with length < 1, next_state).
    """
    return _sample_ball(state, -1.0)


@ti.func
def random_unit_vector(state: RngState):
    """Generate a random unit vector uniformly distributed on the sphere.

    Samples the ball, skipping points too close to the center to normalize
    reliably, and projects onto the surface.

    Returns:
        A tuple of (unit vector, next_state).
    """
    p, s = _sample_ball(state, 1e-12)
    result = vec3(0.0, 1.0, 0.0)
    if length_squared(p) > 0.0:
        result = normalize(p)
    return result, s
