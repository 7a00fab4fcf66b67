"""Scene container: a list of spheres that is itself a hittable surface.

The scene stores spheres and materials in Taichi fields (Structure of Arrays
layout) so the integrator can scan them from inside a kernel. Materials live
in a table indexed by material id; any number of spheres may refer to the same
id, and a material is never copied per sphere.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pixeltrace.materials import Lambertian
    >>> from pixeltrace.scene.world import Scene
    >>> scene = Scene()
    >>> red = Lambertian((0.7, 0.3, 0.3))
    >>> scene.add_sphere((0.0, 0.0, -1.0), 0.5, red)
    0
    >>> # Use scene.hit(ray, t_min, t_max) within a Taichi kernel
"""

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Union

import taichi as ti

from pixeltrace.core.ray import Ray
from pixeltrace.geometry.sphere import Sphere, hit_sphere, make_miss_record
from pixeltrace.materials import Material, MaterialType

logger = logging.getLogger(__name__)

# Default capacities; fields are preallocated to avoid kernel recompilation
MAX_SPHERES = 1024
MAX_MATERIALS = 256


@dataclass(frozen=True)
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material id assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@ti.data_oriented
class Scene:
    """An unordered collection of spheres with shared materials.

    Attributes:
        max_spheres: Sphere capacity of this scene.
        max_materials: Material capacity of this scene.
    """

    def __init__(self, max_spheres: int = MAX_SPHERES, max_materials: int = MAX_MATERIALS) -> None:
        if max_spheres < 1 or max_materials < 1:
            raise ValueError("Scene capacities must be at least 1")

        self.max_spheres = max_spheres
        self.max_materials = max_materials

        # Sphere storage
        self.sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=max_spheres)
        self.sphere_radii = ti.field(dtype=ti.f32, shape=max_spheres)
        self.sphere_material_ids = ti.field(dtype=ti.i32, shape=max_spheres)
        self.num_spheres = ti.field(dtype=ti.i32, shape=())

        # Material table, indexed by material id
        self.material_types = ti.field(dtype=ti.i32, shape=max_materials)
        self.material_albedos = ti.Vector.field(3, dtype=ti.f32, shape=max_materials)
        self.material_fuzz = ti.field(dtype=ti.f32, shape=max_materials)
        self.num_materials = ti.field(dtype=ti.i32, shape=())

        self._material_ids: dict[Material, int] = {}
        self._materials: list[Material] = []
        self._spheres: list[SphereInfo] = []

    # -------------------------------------------------------------------------
    # Construction (Python side)
    # -------------------------------------------------------------------------

    def add_material(self, material: Material) -> int:
        """Register a material and return its id.

        Registering an equal material again returns the existing id.

        Raises:
            TypeError: If material is not a Lambertian or Metal.
            RuntimeError: If the material table is full.
        """
        if not isinstance(getattr(material, "material_type", None), MaterialType):
            raise TypeError(f"Unsupported material: {material!r}")

        existing = self._material_ids.get(material)
        if existing is not None:
            return existing

        idx = len(self._materials)
        if idx >= self.max_materials:
            raise RuntimeError(f"Maximum number of materials ({self.max_materials}) exceeded")

        self.material_types[idx] = int(material.material_type)
        self.material_albedos[idx] = material.albedo
        self.material_fuzz[idx] = material.fuzz
        self.num_materials[None] = idx + 1

        self._material_ids[material] = idx
        self._materials.append(material)
        logger.debug("Registered material %d: %r", idx, material)
        return idx

    def add_sphere(
        self,
        center: Sequence[float],
        radius: float,
        material: Union[Material, int],
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere.
            radius: The radius of the sphere (must be positive).
            material: A material object, or an id from add_material().

        Returns:
            The index of the added sphere.

        Raises:
            ValueError: If radius is not positive, center is malformed or
                the material id is unknown.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        if len(center) != 3 or not all(math.isfinite(c) for c in center):
            raise ValueError(f"Sphere center {center!r} must be three finite numbers")
        if not math.isfinite(radius) or radius <= 0.0:
            raise ValueError(f"Sphere radius = {radius} must be positive")

        if isinstance(material, int):
            if not 0 <= material < len(self._materials):
                raise ValueError(f"Unknown material id {material}")
            material_id = material
        else:
            material_id = self.add_material(material)

        idx = len(self._spheres)
        if idx >= self.max_spheres:
            raise RuntimeError(f"Maximum number of spheres ({self.max_spheres}) exceeded")

        center_tuple = (float(center[0]), float(center[1]), float(center[2]))
        self.sphere_centers[idx] = center_tuple
        self.sphere_radii[idx] = radius
        self.sphere_material_ids[idx] = material_id
        self.num_spheres[None] = idx + 1

        self._spheres.append(SphereInfo(idx, center_tuple, float(radius), material_id))
        logger.debug("Added sphere %d at %s r=%g material=%d", idx, center_tuple, radius, material_id)
        return idx

    def clear(self) -> None:
        """Remove all spheres and materials.

        The field data is not cleared but will be overwritten when new
        primitives are added.
        """
        self.num_spheres[None] = 0
        self.num_materials[None] = 0
        self._material_ids.clear()
        self._materials.clear()
        self._spheres.clear()

    @property
    def sphere_count(self) -> int:
        return len(self._spheres)

    @property
    def material_count(self) -> int:
        return len(self._materials)

    def spheres(self) -> list[SphereInfo]:
        """Get host-side records of all spheres, in insertion order."""
        return list(self._spheres)

    def materials(self) -> list[Material]:
        """Get all registered materials, indexed by material id."""
        return list(self._materials)

    def material(self, material_id: int) -> Material:
        return self._materials[material_id]

    # -------------------------------------------------------------------------
    # Intersection (Taichi side)
    # -------------------------------------------------------------------------

    @ti.func
    def hit(self, ray: Ray, t_min: ti.f32, t_max: ti.f32):
        """Find the nearest intersection among all spheres.

        Scans every sphere, shrinking the search interval to the closest hit
        found so far.

        Args:
            ray: The ray to test.
            t_min: Smallest accepted ray parameter.
            t_max: Largest accepted ray parameter.

        Returns:
            The nearest HitRecord, or a miss record if nothing was hit.
        """
        closest_t = t_max
        result = make_miss_record()

        for i in range(self.num_spheres[None]):
            sphere = Sphere(
                center=self.sphere_centers[i],
                radius=self.sphere_radii[i],
                material_id=self.sphere_material_ids[i],
            )
            rec = hit_sphere(ray, sphere, t_min, closest_t)
            if rec.hit == 1:
                closest_t = rec.t
                result = rec

        return result
