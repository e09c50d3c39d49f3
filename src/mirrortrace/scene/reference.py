"""Reference demo scene.

A small scene that exercises every feature of the tracer:
- A checkerboard floor that is slightly reflective
- A matte red sphere
- A mirror sphere reflecting the floor and the red sphere
- A small, partly reflective blue sphere in front
- Two point lights casting hard shadows onto the floor

The camera sits at the origin looking down +z; everything visible lies at
positive z.

Example:
    >>> from mirrortrace.scene.reference import create_reference_scene
    >>> scene, camera = create_reference_scene()
    >>> len(scene.spheres)
    3
"""

from mirrortrace.camera.pinhole import PinholeCamera
from mirrortrace.scene.model import LightInfo, Material, PlaneInfo, Scene, SphereInfo

# =============================================================================
# Reference Scene Constants
# =============================================================================

FLOOR_HEIGHT = -1.0

RED_MATTE = Material(color=(0.9, 0.1, 0.1), reflectivity=0.0)
MIRROR = Material(color=(0.9, 0.9, 0.9), reflectivity=0.8)
BLUE_GLOSSY = Material(color=(0.1, 0.2, 0.9), reflectivity=0.3)
FLOOR = Material(color=(1.0, 1.0, 1.0), reflectivity=0.2)

# Intensities sum to 1 so a surface facing both lights stays within [0, 1]
KEY_LIGHT = LightInfo(position=(5.0, 5.0, -2.0), intensity=0.7)
FILL_LIGHT = LightInfo(position=(-4.0, 6.0, 1.0), intensity=0.3)

CAMERA_POSITION = (0.0, 0.0, 0.0)
CAMERA_FOV = 60.0


def create_reference_scene() -> tuple[Scene, PinholeCamera]:
    """Create the reference demo scene and its camera.

    Returns:
        A tuple of (Scene, PinholeCamera).
    """
    scene = Scene(
        spheres=(
            SphereInfo(center=(-1.2, 0.0, 5.0), radius=1.0, material=RED_MATTE),
            SphereInfo(center=(1.3, 0.0, 6.0), radius=1.0, material=MIRROR),
            SphereInfo(center=(0.2, -0.5, 3.5), radius=0.5, material=BLUE_GLOSSY),
        ),
        planes=(
            PlaneInfo(point=(0.0, FLOOR_HEIGHT, 0.0), normal=(0.0, 1.0, 0.0), material=FLOOR),
        ),
        lights=(KEY_LIGHT, FILL_LIGHT),
    )
    camera = PinholeCamera(position=CAMERA_POSITION, fov=CAMERA_FOV)
    return scene, camera
