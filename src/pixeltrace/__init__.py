"""Taichi-based recursive ray tracer.

This package computes an RGBA image of a sphere scene by casting rays from a
virtual camera, finding the nearest intersection and following scattered rays
until they escape to the sky or run out of bounce budget.

Subpackages:
    core: Ray type, random stream, render settings and the integrator
    geometry: Sphere primitive and hit records
    materials: Lambertian and metal scattering models
    scene: Scene container (linear-scan composite surface) and stock scenes
    camera: Camera ray generation
    preview: Frame buffer export utilities

Taichi must be initialized (``ti.init``) before any scene or camera is built.
"""

__version__ = "0.1.0"
