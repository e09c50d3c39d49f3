"""Materials module.

Components:
    material: Material registry stored in Taichi fields, plus the procedural
        checkerboard used for plane base colors

Only diffuse shading and mirror reflection read the material. Refractivity
and index of refraction are carried through to the device but unused.
"""

from .material import (
    CHECKER_EVEN_COLOR,
    CHECKER_ODD_COLOR,
    MAX_MATERIALS,
    MaterialRecord,
    add_material,
    checkerboard,
    clear_materials,
    get_material,
    get_material_color,
    get_material_count,
    get_material_reflectivity,
)

__all__ = [
    "MaterialRecord",
    "add_material",
    "clear_materials",
    "get_material",
    "get_material_color",
    "get_material_count",
    "get_material_reflectivity",
    "checkerboard",
    "CHECKER_EVEN_COLOR",
    "CHECKER_ODD_COLOR",
    "MAX_MATERIALS",
]
