"""Immutable scene description.

A Scene is a read-only aggregate of spheres, planes and lights, each carrying
its own Material. It is built once (by hand, from a dictionary, or from a
JSON file), uploaded to the device with mirrortrace.scene.manager.load_scene,
and never mutated while rendering.

Validation happens at construction, so a Scene that exists is renderable:
- sphere radii are positive
- plane normals are non-zero and get normalized to unit length
- light intensities are non-negative
- reflectivity and refractivity lie in [0, 1]

Example:
    >>> from mirrortrace.scene.model import LightInfo, Material, Scene, SphereInfo
    >>> red = Material(color=(1.0, 0.0, 0.0))
    >>> scene = Scene(
    ...     spheres=(SphereInfo(center=(0, 0, 0), radius=1.0, material=red),),
    ...     lights=(LightInfo(position=(0, 0, -10), intensity=1.0),),
    ... )
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

Vector3 = tuple[float, float, float]


def _as_vector3(values: Any, name: str) -> Vector3:
    """Convert any 3-element sequence to a tuple of floats."""
    array = np.asarray(values, dtype=np.float64)
    if array.shape != (3,):
        raise ValueError(f"{name} must have exactly 3 components, got {values!r}")
    if not np.all(np.isfinite(array)):
        raise ValueError(f"{name} must be finite, got {values!r}")
    return (float(array[0]), float(array[1]), float(array[2]))


def _as_mapping(value: Any, name: str) -> dict[str, Any]:
    """Check that a deserialized scene entry is a dictionary."""
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be a mapping, got {value!r}")
    return value


@dataclass(frozen=True)
class Material:
    """Surface material.

    Attributes:
        color: Base color as (R, G, B).
        reflectivity: Fraction of the outgoing color taken from the reflected
            ray, in [0, 1]. Zero means purely diffuse.
        refractivity: Reserved for refraction, in [0, 1]. Never rendered.
        ior: Reserved index of refraction. Never rendered.
    """

    color: Vector3 = (1.0, 1.0, 1.0)
    reflectivity: float = 0.0
    refractivity: float = 0.0
    ior: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", _as_vector3(self.color, "Material color"))
        if not 0.0 <= self.reflectivity <= 1.0:
            raise ValueError(f"Reflectivity {self.reflectivity} is outside [0, 1]")
        if not 0.0 <= self.refractivity <= 1.0:
            raise ValueError(f"Refractivity {self.refractivity} is outside [0, 1]")
        if self.ior <= 0.0:
            raise ValueError(f"Index of refraction {self.ior} must be positive")

    def to_dict(self) -> dict[str, Any]:
        """Export the material to a dictionary (for JSON serialization)."""
        return {
            "color": list(self.color),
            "reflectivity": self.reflectivity,
            "refractivity": self.refractivity,
            "ior": self.ior,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Material:
        """Build a material from a dictionary, filling missing keys with defaults.

        Raises:
            ValueError: If data is not a mapping or holds an invalid value.
        """
        data = _as_mapping(data, "Material")
        return cls(
            color=data.get("color", (1.0, 1.0, 1.0)),
            reflectivity=float(data.get("reflectivity", 0.0)),
            refractivity=float(data.get("refractivity", 0.0)),
            ior=float(data.get("ior", 1.0)),
        )


@dataclass(frozen=True)
class SphereInfo:
    """A sphere in the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (positive).
        material: The sphere's material.
    """

    center: Vector3
    radius: float
    material: Material = field(default_factory=Material)

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _as_vector3(self.center, "Sphere center"))
        if not self.radius > 0.0:
            raise ValueError(f"Sphere radius {self.radius} must be positive")


@dataclass(frozen=True)
class PlaneInfo:
    """An infinite plane in the scene.

    The normal is normalized on construction. The plane's diffuse color comes
    from the checkerboard pattern; only the material's reflectivity is used.

    Attributes:
        point: A point on the plane.
        normal: The unit normal of the plane.
        material: The plane's material.
    """

    point: Vector3
    normal: Vector3
    material: Material = field(default_factory=Material)

    def __post_init__(self) -> None:
        object.__setattr__(self, "point", _as_vector3(self.point, "Plane point"))
        normal = np.asarray(_as_vector3(self.normal, "Plane normal"))
        norm = float(np.linalg.norm(normal))
        if norm < 1e-12:
            raise ValueError("Plane normal must be non-zero")
        object.__setattr__(self, "normal", _as_vector3(normal / norm, "Plane normal"))


@dataclass(frozen=True)
class LightInfo:
    """A point light.

    Attributes:
        position: World-space position.
        intensity: Scalar intensity (non-negative). Not attenuated by distance.
    """

    position: Vector3
    intensity: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _as_vector3(self.position, "Light position"))
        if self.intensity < 0.0:
            raise ValueError(f"Light intensity {self.intensity} is negative")


@dataclass(frozen=True)
class Scene:
    """Read-only collection of everything a render needs.

    Attributes:
        spheres: The spheres in the scene.
        planes: The planes in the scene.
        lights: The point lights in the scene.
    """

    spheres: tuple[SphereInfo, ...] = ()
    planes: tuple[PlaneInfo, ...] = ()
    lights: tuple[LightInfo, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "spheres", tuple(self.spheres))
        object.__setattr__(self, "planes", tuple(self.planes))
        object.__setattr__(self, "lights", tuple(self.lights))

    @property
    def materials(self) -> tuple[Material, ...]:
        """Distinct materials in first-use order (spheres, then planes)."""
        seen: dict[Material, None] = {}
        for primitive in (*self.spheres, *self.planes):
            seen.setdefault(primitive.material, None)
        return tuple(seen)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {
            "spheres": [
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material": sphere.material.to_dict(),
                }
                for sphere in self.spheres
            ],
            "planes": [
                {
                    "point": list(plane.point),
                    "normal": list(plane.normal),
                    "material": plane.material.to_dict(),
                }
                for plane in self.planes
            ],
            "lights": [
                {"position": list(light.position), "intensity": light.intensity}
                for light in self.lights
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scene:
        """Build a scene from a dictionary.

        Args:
            data: Dictionary with optional 'spheres', 'planes' and 'lights'
                lists, in the layout produced by to_dict().

        Raises:
            ValueError: If the data or an entry is not a mapping, an entry is
                missing a required key, or a value is invalid.
        """
        data = _as_mapping(data, "Scene")
        try:
            spheres = tuple(
                SphereInfo(
                    center=entry["center"],
                    radius=float(entry["radius"]),
                    material=Material.from_dict(entry.get("material", {})),
                )
                for entry in (_as_mapping(e, "Sphere entry") for e in data.get("spheres", []))
            )
            planes = tuple(
                PlaneInfo(
                    point=entry["point"],
                    normal=entry["normal"],
                    material=Material.from_dict(entry.get("material", {})),
                )
                for entry in (_as_mapping(e, "Plane entry") for e in data.get("planes", []))
            )
            lights = tuple(
                LightInfo(
                    position=entry["position"],
                    intensity=float(entry.get("intensity", 1.0)),
                )
                for entry in (_as_mapping(e, "Light entry") for e in data.get("lights", []))
            )
        except KeyError as e:
            raise ValueError(f"Scene entry is missing required key {e}") from e
        except TypeError as e:
            raise ValueError(f"Scene entry holds a value of the wrong type: {e}") from e
        return cls(spheres=spheres, planes=planes, lights=lights)


def load_scene_file(filepath: str | Path) -> Scene:
    """Read a scene from a JSON file in the to_dict() layout.

    Raises:
        ValueError: If the file is not valid JSON or describes an invalid scene.
    """
    path = Path(filepath)
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Scene file {path} is not valid JSON: {e}") from e
    return Scene.from_dict(data)


def save_scene_file(scene: Scene, filepath: str | Path) -> None:
    """Write a scene to a JSON file."""
    Path(filepath).write_text(json.dumps(scene.to_dict(), indent=2))
