"""Scene module for scene description, storage and queries.

Components:
    model: Immutable Scene value objects, dict/JSON loading
    manager: Upload of a Scene into the device fields
    intersection: Primitive storage, nearest-hit and any-hit queries
    lights: Point light storage
    visibility: Shadow ray test between a point and a light
    reference: The reference demo scene

Scene data is organized for device access:
    - Structure-of-Arrays layout for geometric data
    - One material id per distinct material
    - Fields written only between renders
"""

from .intersection import (
    MAX_PLANES,
    MAX_SPHERES,
    PRIMITIVE_NONE,
    PRIMITIVE_PLANE,
    PRIMITIVE_SPHERE,
    SceneHitRecord,
    add_plane,
    add_sphere,
    clear_scene,
    get_plane_count,
    get_sphere_count,
    intersect_scene,
    intersect_scene_any,
)
from .lights import MAX_LIGHTS, add_light, clear_lights, get_light_count
from .manager import SceneCounts, clear_all, load_scene
from .model import (
    LightInfo,
    Material,
    PlaneInfo,
    Scene,
    SphereInfo,
    load_scene_file,
    save_scene_file,
)
from .reference import create_reference_scene
from .visibility import SHADOW_EPSILON, is_shadowed

__all__ = [
    # Model
    "Scene",
    "Material",
    "SphereInfo",
    "PlaneInfo",
    "LightInfo",
    "load_scene_file",
    "save_scene_file",
    # Manager
    "load_scene",
    "clear_all",
    "SceneCounts",
    # Intersection
    "SceneHitRecord",
    "add_sphere",
    "add_plane",
    "clear_scene",
    "get_sphere_count",
    "get_plane_count",
    "intersect_scene",
    "intersect_scene_any",
    "MAX_SPHERES",
    "MAX_PLANES",
    "PRIMITIVE_NONE",
    "PRIMITIVE_SPHERE",
    "PRIMITIVE_PLANE",
    # Lights
    "add_light",
    "clear_lights",
    "get_light_count",
    "MAX_LIGHTS",
    # Visibility
    "is_shadowed",
    "SHADOW_EPSILON",
    # Reference scene
    "create_reference_scene",
]
