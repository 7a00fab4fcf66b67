"""Sphere primitive and ray-sphere intersection.

This module provides the Sphere and HitRecord dataclasses and the intersection
routine. The ray equation is substituted into the implicit sphere equation

    |origin + t * direction - center|^2 = radius^2

which gives the quadratic a*t^2 + 2*half_b*t + c = 0 with

    a = dot(direction, direction)
    half_b = dot(origin - center, direction)
    c = dot(origin - center, origin - center) - radius^2

The nearer root is tried first; if it falls outside [t_min, t_max] the farther
one is tried.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pixeltrace.geometry.sphere import Sphere, hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti

from pixeltrace.core.ray import Ray, dot, vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
        material_id: Handle into the owning scene's material table.
    """

    center: vec3
    radius: ti.f32
    material_id: ti.i32


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: Whether the ray intersected the surface (1 if hit, 0 if miss).
        t: The ray parameter of the intersection. This is the ordering key
            for "nearest". Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The surface normal at the intersection point (unit length,
            always facing against the incoming ray). Only valid if hit == 1.
        front_face: 1 if the geometric outward normal already faced the ray,
            0 if it had to be flipped (ray arrived from inside).
            Only valid if hit == 1.
        material_id: The material of the hit surface. -1 for a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def set_face_normal(ray_direction: vec3, outward_normal: vec3):
    """Orient a geometric normal against the incoming ray.

    Args:
        ray_direction: Direction of the incoming ray.
        outward_normal: Unit normal pointing out of the surface.

    Returns:
        A tuple of (normal, front_face) where normal . ray_direction <= 0 and
        front_face is 1 if no flip was needed.
    """
    front_face = 0
    normal = -outward_normal
    if dot(ray_direction, outward_normal) < 0.0:
        front_face = 1
        normal = outward_normal
    return normal, front_face


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray: The ray to test. The direction need not be normalized.
        sphere: The sphere to test intersection against.
        t_min: Smallest accepted ray parameter (rejects self-intersection).
        t_max: Largest accepted ray parameter (culls beyond a closer hit).

    Returns:
        A HitRecord for the nearest root in [t_min, t_max]. Check the hit
        field to determine if intersection occurred.
    """
    oc = ray.origin - sphere.center
    a = dot(ray.direction, ray.direction)
    half_b = dot(oc, ray.direction)
    c = dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = half_b * half_b - a * c

    # Taichi requires outer-scope declaration
    result = make_miss_record()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        # Nearest root that lies in the acceptable range
        root = (-half_b - sqrt_d) / a
        valid = t_min <= root and root <= t_max
        if not valid:
            root = (-half_b + sqrt_d) / a
            valid = t_min <= root and root <= t_max

        if valid:
            point = ray.at(root)
            outward_normal = (point - sphere.center) / sphere.radius
            normal, front_face = set_face_normal(ray.direction, outward_normal)
            result = HitRecord(
                hit=1,
                t=root,
                point=point,
                normal=normal,
                front_face=front_face,
                material_id=sphere.material_id,
            )

    return result
