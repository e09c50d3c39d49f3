"""Material storage and the procedural checkerboard pattern.

Every primitive references a material by id. A material carries a base color,
a reflectivity in [0, 1] (the fraction of outgoing color taken from the
mirror-reflected ray), and a refractivity and index of refraction. The last
two are stored alongside the rest but nothing in the tracer reads them; they
are reserved for refraction support.

Planes ignore their material color for the diffuse term and use a two-color
checkerboard instead, while still honoring the material's reflectivity.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mirrortrace.materials.material import add_material
    >>> red = add_material((1.0, 0.0, 0.0), reflectivity=0.0)
    >>> mirror = add_material((1.0, 1.0, 1.0), reflectivity=1.0)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Checkerboard colors: even cells white, odd cells mid-gray
CHECKER_EVEN_COLOR = vec3(1.0, 1.0, 1.0)
CHECKER_ODD_COLOR = vec3(0.5, 0.5, 0.5)


@ti.dataclass
class MaterialRecord:
    """Material properties as seen inside kernels.

    Attributes:
        color: The base color (RGB).
        reflectivity: Fraction of color taken from the reflected ray, in [0, 1].
        refractivity: Reserved, never read by the tracer.
        ior: Index of refraction. Reserved, never read by the tracer.
    """

    color: vec3
    reflectivity: ti.f32
    refractivity: ti.f32
    ior: ti.f32


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

material_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_reflectivities = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_refractivities = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_iors = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_material(
    color: tuple[float, float, float],
    reflectivity: float = 0.0,
    refractivity: float = 0.0,
    ior: float = 1.0,
) -> int:
    """Add a material to the material registry.

    Args:
        color: The base color as (R, G, B).
        reflectivity: Reflected fraction of the outgoing color, in [0, 1].
        refractivity: Reserved for refraction, in [0, 1].
        ior: Reserved index of refraction (positive).

    Returns:
        The material id.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If reflectivity or refractivity is outside [0, 1].
    """
    if not 0.0 <= reflectivity <= 1.0:
        raise ValueError(f"Reflectivity {reflectivity} is outside [0, 1]")
    if not 0.0 <= refractivity <= 1.0:
        raise ValueError(f"Refractivity {refractivity} is outside [0, 1]")

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_colors[idx] = vec3(color[0], color[1], color[2])
    material_reflectivities[idx] = reflectivity
    material_refractivities[idx] = refractivity
    material_iors[idx] = ior
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material(material_id: ti.i32) -> MaterialRecord:
    """Look up a material by id inside a kernel."""
    return MaterialRecord(
        color=material_colors[material_id],
        reflectivity=material_reflectivities[material_id],
        refractivity=material_refractivities[material_id],
        ior=material_iors[material_id],
    )


@ti.func
def get_material_color(material_id: ti.i32) -> vec3:
    """Get the base color of a material."""
    return material_colors[material_id]


@ti.func
def get_material_reflectivity(material_id: ti.i32) -> ti.f32:
    """Get the reflectivity of a material."""
    return material_reflectivities[material_id]


@ti.func
def checkerboard(point: vec3) -> vec3:
    """Two-color checkerboard from the floor of the x and z coordinates.

    Cells where floor(x) + floor(z) is even are white, odd cells mid-gray.
    Parity is taken with a floored modulo in floating point, so negative
    coordinates alternate the same way as positive ones and coordinates far
    outside the 32-bit integer range cannot overflow.

    Args:
        point: World-space point on a plane.

    Returns:
        The pattern color at that point.
    """
    cell = ti.floor(point.x) + ti.floor(point.z)
    odd = tm.mod(cell, 2.0)
    return CHECKER_EVEN_COLOR * (1.0 - odd) + CHECKER_ODD_COLOR * odd
