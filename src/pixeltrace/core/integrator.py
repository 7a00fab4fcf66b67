"""Recursive ray tracing integrator.

This module implements the color pipeline: for every pixel, average a number of
jittered camera samples, trace each one through the scene, and encode the
result into an 8-bit RGBA frame buffer owned by the caller.

The radiance estimator ``ray_color`` is defined recursively:

    ray_color(ray, depth) =
        black                                     if depth <= 0
        attenuation * ray_color(scattered, depth-1)  on hit with scatter
        black                                     on hit with absorption
        sky(ray.direction)                        on miss

Taichi functions cannot recurse, so the implementation carries the product of
attenuations along the path and stops at the first miss, absorption, or when
the depth budget is spent. The result is identical to the recursion.

Encoding convention: ``sqrt(sum / samples)`` gamma correction, clamp to
[0, 0.999], scale by 256 and truncate. The sky gradient is white for rays
pointing straight up and blue (0.5, 0.7, 1.0) toward the horizon and below.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pixeltrace.camera.pinhole import Camera, CameraConfig
    >>> from pixeltrace.core.integrator import render_image
    >>> from pixeltrace.core.settings import RenderSettings
    >>> from pixeltrace.scene.default import create_default_scene
    >>>
    >>> settings = RenderSettings(width=400, height=225, samples_per_pixel=16)
    >>> camera = Camera(CameraConfig.for_resolution(settings.width, settings.height))
    >>> frame = render_image(create_default_scene(), camera, settings)
"""

import logging
import time
from typing import Sequence, Union

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pixeltrace.camera.pinhole import Camera
from pixeltrace.core.ray import Ray, normalize, vec3
from pixeltrace.core.rng import RngState, random_f32, seed_state
from pixeltrace.core.settings import CHANNELS, RenderSettings
from pixeltrace.materials import MaterialType, scatter_lambertian, scatter_metal
from pixeltrace.scene.world import Scene

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Lower bound on accepted hits, suppresses self-intersection ("shadow acne")
T_MIN = 0.001

# Sky gradient endpoints
SKY_WHITE = vec3(1.0, 1.0, 1.0)
SKY_BLUE = vec3(0.5, 0.7, 1.0)

# Channel quantization: 256 * clamp(c, 0, 0.999) never reaches 256
CHANNEL_MAX = 0.999
CHANNEL_SCALE = 256.0
ALPHA_OPAQUE = 255

FrameBuffer = Union[npt.NDArray[np.uint8], bytearray]


# =============================================================================
# Radiance Estimation
# =============================================================================


@ti.func
def background_color(direction: vec3) -> vec3:
    """Vertical sky gradient for rays that escape the scene.

    Args:
        direction: Ray direction (any length).

    Returns:
        White for straight-up rays, blending to sky blue at and below the
        horizon.
    """
    unit_direction = normalize(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return t * SKY_WHITE + (1.0 - t) * SKY_BLUE


@ti.func
def _scatter_material(scene: ti.template(), ray: Ray, rec, state: RngState):
    """Dispatch to the scattering function of the hit surface's material.

    Returns:
        A tuple of (scattered_ray, attenuation, did_scatter, state).
    """
    material_id = rec.material_id
    mat_type = scene.material_types[material_id]
    albedo = scene.material_albedos[material_id]

    # Default values
    scattered = Ray(origin=rec.point, direction=rec.normal)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0
    s = state

    if mat_type == int(MaterialType.LAMBERTIAN):
        scattered, attenuation, did_scatter, s = scatter_lambertian(
            albedo, rec.point, rec.normal, s
        )

    elif mat_type == int(MaterialType.METAL):
        fuzz = scene.material_fuzz[material_id]
        scattered, attenuation, did_scatter, s = scatter_metal(
            albedo, fuzz, ray.direction, rec.point, rec.normal, s
        )

    return scattered, attenuation, did_scatter, s


@ti.func
def ray_color(scene: ti.template(), ray: Ray, depth: ti.i32, state: RngState):
    """Estimate the radiance arriving along a ray.

    Args:
        scene: The scene to trace against.
        ray: The ray to trace.
        depth: Remaining bounce budget. Zero or less yields black.
        state: Random stream state.

    Returns:
        A tuple of (color, state).
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = ray
    s = state

    # Active flag for path continuation
    active = 1

    for _ in range(depth):
        if active == 1:
            rec = scene.hit(current, T_MIN, tm.inf)

            if rec.hit == 0:
                color = throughput * background_color(current.direction)
                active = 0
            else:
                scattered, attenuation, did_scatter, s = _scatter_material(scene, current, rec, s)
                if did_scatter == 0:
                    # Absorbed
                    active = 0
                else:
                    throughput *= attenuation
                    current = scattered

    # Paths still active here ran out of budget and stay black
    return color, s


@ti.func
def _encode_channel(value: ti.f32, scale: ti.f32) -> ti.u8:
    """Average, gamma correct and quantize one color channel."""
    corrected = ti.sqrt(tm.max(value * scale, 0.0))
    if tm.isnan(corrected):
        corrected = 0.0
    clamped = tm.clamp(corrected, 0.0, CHANNEL_MAX)
    return ti.cast(ti.cast(CHANNEL_SCALE * clamped, ti.i32), ti.u8)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_kernel(
    scene: ti.template(),
    camera: ti.template(),
    frame: ti.types.ndarray(dtype=ti.u8, ndim=1),
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    seed: ti.u32,
):
    """Fill the frame buffer, one parallel task per pixel.

    Pixels are row-major with row 0 first. Each pixel draws from its own
    random stream, so results do not depend on scheduling.
    """
    scale = 1.0 / ti.cast(samples_per_pixel, ti.f32)
    inv_w = 1.0 / ti.cast(width - 1, ti.f32)
    inv_h = 1.0 / ti.cast(height - 1, ti.f32)

    for y, x in ti.ndrange(height, width):
        index = y * width + x
        state = seed_state(seed, ti.cast(index, ti.u32))
        color = vec3(0.0, 0.0, 0.0)

        for _ in range(samples_per_pixel):
            jitter_x, s1 = random_f32(state)
            jitter_y, s2 = random_f32(s1)
            u = (ti.cast(x, ti.f32) + jitter_x) * inv_w
            v = (ti.cast(y, ti.f32) + jitter_y) * inv_h
            ray = camera.get_ray(u, v)
            sample, s3 = ray_color(scene, ray, max_depth, s2)
            color += sample
            state = s3

        base = index * CHANNELS
        for c in ti.static(range(3)):
            frame[base + c] = _encode_channel(color[c], scale)
        frame[base + 3] = ti.u8(ALPHA_OPAQUE)


@ti.kernel
def _trace_kernel(
    scene: ti.template(),
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    depth: ti.i32,
    seed: ti.u32,
) -> vec3:
    result = vec3(0.0, 0.0, 0.0)
    # Single-iteration outer loop keeps the scene scan serial
    for _ in range(1):
        ray = Ray(origin=vec3(ox, oy, oz), direction=vec3(dx, dy, dz))
        color, _state = ray_color(scene, ray, depth, seed_state(seed, ti.u32(0)))
        result = color
    return result


# =============================================================================
# Public Rendering API
# =============================================================================


def new_frame_buffer(width: int, height: int) -> npt.NDArray[np.uint8]:
    """Allocate a zeroed RGBA frame buffer for the given image size."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    return np.zeros(width * height * CHANNELS, dtype=np.uint8)


def _as_frame_array(frame: FrameBuffer, expected_size: int) -> npt.NDArray[np.uint8]:
    """View a caller-owned buffer as a flat, writable uint8 array.

    Raises:
        ValueError: If the buffer has the wrong type, length or layout.
    """
    if isinstance(frame, bytearray):
        array = np.frombuffer(frame, dtype=np.uint8)
    elif isinstance(frame, np.ndarray):
        array = frame
    else:
        raise ValueError(
            f"Frame buffer must be a numpy uint8 array or bytearray, got {type(frame).__name__}"
        )

    if array.dtype != np.uint8:
        raise ValueError(f"Frame buffer dtype must be uint8, got {array.dtype}")
    if array.ndim != 1 or array.size != expected_size:
        raise ValueError(
            f"Frame buffer length {array.size} (shape {array.shape}) does not match "
            f"width*height*{CHANNELS} = {expected_size}"
        )
    if not array.flags.c_contiguous or not array.flags.writeable:
        raise ValueError("Frame buffer must be contiguous and writable")
    return array


def render(
    scene: Scene,
    camera: Camera,
    frame: FrameBuffer,
    settings: RenderSettings,
) -> FrameBuffer:
    """Render the scene into a caller-owned frame buffer.

    The buffer is filled exactly once; its contents are undefined until this
    call returns.

    Args:
        scene: The scene to render.
        camera: The camera producing primary rays.
        frame: Row-major RGBA buffer (numpy uint8 array or bytearray) of
            exactly settings.frame_size bytes.
        settings: Resolution, sample count, depth budget and seed.

    Returns:
        The same frame object, now fully written.

    Raises:
        ValueError: If the frame buffer does not match the settings.
    """
    array = _as_frame_array(frame, settings.frame_size)

    logger.info(
        "Rendering %dx%d, %d spp, max depth %d, seed %d, %d spheres",
        settings.width,
        settings.height,
        settings.samples_per_pixel,
        settings.max_depth,
        settings.seed,
        scene.sphere_count,
    )
    start = time.perf_counter()

    _render_kernel(
        scene,
        camera,
        array,
        settings.width,
        settings.height,
        settings.samples_per_pixel,
        settings.max_depth,
        settings.seed,
    )
    ti.sync()

    logger.info("Render finished in %.2fs", time.perf_counter() - start)
    return frame


def render_image(scene: Scene, camera: Camera, settings: RenderSettings) -> npt.NDArray[np.uint8]:
    """Render the scene into a newly allocated frame buffer.

    Returns:
        Flat uint8 array of length settings.frame_size.
    """
    frame = new_frame_buffer(settings.width, settings.height)
    render(scene, camera, frame, settings)
    return frame


def trace_ray_color(
    scene: Scene,
    origin: Sequence[float],
    direction: Sequence[float],
    depth: int,
    seed: int = 0,
) -> tuple[float, float, float]:
    """Evaluate ray_color for a single ray.

    This is a Python-callable function for testing and debugging. The result
    is linear (before gamma correction).

    Args:
        scene: The scene to trace against.
        origin: Ray origin.
        direction: Ray direction (any non-zero length).
        depth: Bounce budget.
        seed: Random stream seed.

    Returns:
        Tuple of (R, G, B) color values.
    """
    color = _trace_kernel(
        scene,
        origin[0],
        origin[1],
        origin[2],
        direction[0],
        direction[1],
        direction[2],
        depth,
        seed,
    )
    return (float(color[0]), float(color[1]), float(color[2]))
