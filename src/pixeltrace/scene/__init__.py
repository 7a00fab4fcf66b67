"""Scene module for scene containers and stock scenes.

Components:
    world: Scene container and ray-scene intersection
    default: Ready-made scenes

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout for sphere data
    - A material table shared by all spheres
"""

from .default import create_default_scene, create_two_sphere_scene
from .world import MAX_MATERIALS, MAX_SPHERES, Scene, SphereInfo

__all__ = [
    "Scene",
    "SphereInfo",
    "MAX_SPHERES",
    "MAX_MATERIALS",
    "create_default_scene",
    "create_two_sphere_scene",
]
