"""Stock scenes used by the example renderer and the tests.

Both scenes share the same ground and center spheres: a large diffuse sphere
below the camera acting as a floor and a small red diffuse sphere straight
ahead.
"""

from pixeltrace.materials import Lambertian, Metal
from pixeltrace.scene.world import Scene

GROUND_CENTER = (0.0, -100.5, -1.0)
GROUND_RADIUS = 100.0
CENTER_SPHERE = (0.0, 0.0, -1.0)
SMALL_RADIUS = 0.5


def create_two_sphere_scene(ground_albedo: tuple[float, float, float] = (0.8, 0.8, 0.0)) -> Scene:
    """Create a red diffuse sphere resting on a large ground sphere.

    Args:
        ground_albedo: Albedo of the ground material.

    Returns:
        A Scene with two spheres and two materials.
    """
    scene = Scene()
    scene.add_sphere(CENTER_SPHERE, SMALL_RADIUS, Lambertian((0.7, 0.3, 0.3)))
    scene.add_sphere(GROUND_CENTER, GROUND_RADIUS, Lambertian(ground_albedo))
    return scene


def create_default_scene() -> Scene:
    """Create the four-sphere demo scene.

    Layout (camera at the origin looking down -z):
        - Center: red diffuse sphere
        - Ground: yellow-green diffuse sphere
        - Left: silver metal with fuzz 0.3
        - Right: gold metal with fuzz 1.0

    Returns:
        A Scene with four spheres.
    """
    scene = create_two_sphere_scene()
    scene.add_sphere((-1.0, 0.0, -1.0), SMALL_RADIUS, Metal((0.8, 0.8, 0.8), fuzz=0.3))
    scene.add_sphere((1.0, 0.0, -1.0), SMALL_RADIUS, Metal((0.8, 0.6, 0.2), fuzz=1.0))
    return scene
