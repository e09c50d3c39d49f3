"""Upload of an immutable Scene into the device-side Taichi fields.

The tracer reads primitives, materials and lights from module-level fields.
load_scene() clears those fields and fills them from a Scene value, assigning
one material id per distinct Material. The fields are only written here,
between renders, so kernels always see a consistent, read-only scene.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mirrortrace.scene.manager import load_scene
    >>> from mirrortrace.scene.reference import create_reference_scene
    >>> scene, camera = create_reference_scene()
    >>> counts = load_scene(scene)
    >>> counts.spheres
    3
"""

import logging
from dataclasses import dataclass

import taichi.math as tm

from mirrortrace.materials.material import add_material, clear_materials
from mirrortrace.scene.intersection import add_plane, add_sphere, clear_scene
from mirrortrace.scene.lights import add_light, clear_lights
from mirrortrace.scene.model import Material, Scene

logger = logging.getLogger(__name__)

vec3 = tm.vec3


@dataclass(frozen=True)
class SceneCounts:
    """Number of entities uploaded by load_scene().

    Attributes:
        spheres: Number of spheres.
        planes: Number of planes.
        lights: Number of lights.
        materials: Number of distinct materials.
    """

    spheres: int
    planes: int
    lights: int
    materials: int


def clear_all() -> None:
    """Clear primitives, materials and lights from the device fields."""
    clear_scene()
    clear_materials()
    clear_lights()


def _register_material(material: Material, material_ids: dict[Material, int]) -> int:
    """Return the id for a material, adding it on first use."""
    if material not in material_ids:
        material_ids[material] = add_material(
            material.color,
            reflectivity=material.reflectivity,
            refractivity=material.refractivity,
            ior=material.ior,
        )
    return material_ids[material]


def load_scene(scene: Scene) -> SceneCounts:
    """Replace the device-side scene with the contents of a Scene.

    Args:
        scene: The validated scene to upload.

    Returns:
        The number of entities uploaded.

    Raises:
        RuntimeError: If the scene exceeds a primitive, material or light
            capacity. The device scene is left cleared in that case.
    """
    clear_all()
    material_ids: dict[Material, int] = {}

    try:
        for sphere in scene.spheres:
            add_sphere(
                vec3(*sphere.center),
                sphere.radius,
                _register_material(sphere.material, material_ids),
            )
        for plane in scene.planes:
            add_plane(
                vec3(*plane.point),
                vec3(*plane.normal),
                _register_material(plane.material, material_ids),
            )
        for light in scene.lights:
            add_light(vec3(*light.position), light.intensity)
    except RuntimeError:
        clear_all()
        raise

    counts = SceneCounts(
        spheres=len(scene.spheres),
        planes=len(scene.planes),
        lights=len(scene.lights),
        materials=len(material_ids),
    )
    logger.info(
        f"Loaded scene: {counts.spheres} spheres, {counts.planes} planes, "
        f"{counts.lights} lights, {counts.materials} materials"
    )
    return counts
