"""Unit tests for shadow rays and local diffuse shading.

Tests cover:
- is_shadowed with and without occluders
- Occluders beyond the light and self-occlusion
- Lambert term, intensity scaling and multi-light sums
- Surface color selection (material color vs. checkerboard)
"""

import pytest
import taichi as ti


class TestIsShadowed:
    """Tests for the shadow-ray visibility test."""

    def test_unoccluded_light(self):
        """Test an empty segment reports no shadow."""
        from mirrortrace.scene.visibility import is_shadowed, vec3

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                result[None] = is_shadowed(vec3(0.0, 0.0, 0.0), vec3(0.0, 10.0, 0.0))

        test_kernel()
        assert result[None] == 0

    def test_occluder_between_point_and_light(self):
        """Test a sphere on the segment casts a shadow."""
        from mirrortrace.scene.intersection import add_sphere
        from mirrortrace.scene.visibility import is_shadowed, vec3

        add_sphere(vec3(0.0, 5.0, 0.0), 1.0)

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                result[None] = is_shadowed(vec3(0.0, 0.0, 0.0), vec3(0.0, 10.0, 0.0))

        test_kernel()
        assert result[None] == 1

    def test_occluder_beyond_light(self):
        """Test a primitive past the light does not cast a shadow."""
        from mirrortrace.scene.intersection import add_sphere
        from mirrortrace.scene.visibility import is_shadowed, vec3

        add_sphere(vec3(0.0, 15.0, 0.0), 1.0)

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                result[None] = is_shadowed(vec3(0.0, 0.0, 0.0), vec3(0.0, 10.0, 0.0))

        test_kernel()
        assert result[None] == 0

    def test_surface_does_not_shadow_itself(self):
        """Test points on a sphere and a plane are not occluded by their own surface."""
        from mirrortrace.scene.intersection import add_plane, add_sphere
        from mirrortrace.scene.visibility import is_shadowed, vec3

        add_sphere(vec3(0.0, 0.0, 0.0), 1.0)
        add_plane(vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        on_sphere = ti.field(dtype=ti.i32, shape=())
        on_plane = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                light = vec3(3.0, 10.0, 0.0)
                on_sphere[None] = is_shadowed(vec3(0.0, 1.0, 0.0), light)
                on_plane[None] = is_shadowed(vec3(3.0, -1.0, 0.0), light)

        test_kernel()
        assert on_sphere[None] == 0
        assert on_plane[None] == 0


class TestShadeLocal:
    """Tests for the diffuse fold over lights."""

    def test_aligned_light_gives_color_times_intensity(self):
        """Test a light along the normal contributes base_color * intensity."""
        from mirrortrace.core.shading import shade_local, vec3
        from mirrortrace.scene.lights import add_light

        add_light(vec3(0.0, 10.0, 0.0), 0.75)

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                result[None] = shade_local(
                    vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), vec3(0.2, 0.4, 0.6)
                )

        test_kernel()
        r = result[None]
        assert abs(r[0] - 0.15) < 1e-6
        assert abs(r[1] - 0.3) < 1e-6
        assert abs(r[2] - 0.45) < 1e-6

    def test_occluded_light_contributes_exactly_zero(self):
        """Test a light behind an opaque occluder adds nothing."""
        from mirrortrace.core.shading import shade_local, vec3
        from mirrortrace.scene.intersection import add_sphere
        from mirrortrace.scene.lights import add_light

        add_light(vec3(0.0, 10.0, 0.0), 1.0)
        add_sphere(vec3(0.0, 5.0, 0.0), 1.0)

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                result[None] = shade_local(
                    vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), vec3(1.0, 1.0, 1.0)
                )

        test_kernel()
        r = result[None]
        assert r[0] == 0.0
        assert r[1] == 0.0
        assert r[2] == 0.0

    def test_light_behind_surface_contributes_zero(self):
        """Test the Lambert term is clamped at zero for back-facing lights."""
        from mirrortrace.core.shading import shade_local, vec3
        from mirrortrace.scene.lights import add_light

        add_light(vec3(0.0, -10.0, 0.0), 1.0)

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                result[None] = shade_local(
                    vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), vec3(1.0, 1.0, 1.0)
                )

        test_kernel()
        assert result[None][0] == 0.0

    def test_oblique_light_uses_cosine(self):
        """Test the contribution scales with cos(theta) and ignores distance."""
        from mirrortrace.core.shading import shade_local, vec3
        from mirrortrace.scene.lights import add_light

        # 60 degrees from the normal, far away
        add_light(vec3(100.0 * 3.0**0.5, 100.0, 0.0), 1.0)

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                result[None] = shade_local(
                    vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), vec3(1.0, 1.0, 1.0)
                )

        test_kernel()
        assert abs(result[None][0] - 0.5) < 1e-5

    def test_lights_are_summed(self):
        """Test contributions of several unoccluded lights add up."""
        from mirrortrace.core.shading import shade_local, vec3
        from mirrortrace.scene.lights import add_light

        add_light(vec3(0.0, 10.0, 0.0), 0.7)
        add_light(vec3(0.0, 3.0, 0.0), 0.6)

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                result[None] = shade_local(
                    vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), vec3(1.0, 0.5, 0.0)
                )

        test_kernel()
        r = result[None]
        # Sums above 1 are kept
        assert abs(r[0] - 1.3) < 1e-5
        assert abs(r[1] - 0.65) < 1e-5
        assert r[2] == 0.0

    def test_no_lights_gives_black(self):
        """Test an unlit scene shades to zero."""
        from mirrortrace.core.shading import shade_local, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                result[None] = shade_local(
                    vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), vec3(1.0, 1.0, 1.0)
                )

        test_kernel()
        assert result[None][0] == 0.0


class TestSurfaceColor:
    """Tests for base color selection."""

    @pytest.mark.parametrize("x, expected", [(0.5, 1.0), (1.5, 0.5)])
    def test_plane_uses_checkerboard(self, x, expected):
        """Test planes ignore their material color in favor of the pattern."""
        from mirrortrace.core.shading import surface_color, vec3
        from mirrortrace.materials.material import add_material
        from mirrortrace.scene.intersection import add_plane, intersect_scene

        material_id = add_material((0.1, 0.9, 0.1))
        add_plane(vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), material_id)

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(px: ti.f32):
            for _ in range(1):
                rec = intersect_scene(vec3(px, 1.0, 0.5), vec3(0.0, -1.0, 0.0), 0.0, 1e30)
                result[None] = surface_color(rec)

        test_kernel(x)
        r = result[None]
        for i in range(3):
            assert abs(r[i] - expected) < 1e-6

    def test_sphere_uses_material_color(self):
        """Test spheres take the color of their material."""
        from mirrortrace.core.shading import surface_color, vec3
        from mirrortrace.materials.material import add_material
        from mirrortrace.scene.intersection import add_sphere, intersect_scene

        add_material((1.0, 1.0, 1.0))
        material_id = add_material((0.1, 0.9, 0.3))
        add_sphere(vec3(0.0, 0.0, 5.0), 1.0, material_id)

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                rec = intersect_scene(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0), 0.0, 1e30)
                result[None] = surface_color(rec)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 0.1) < 1e-6
        assert abs(r[1] - 0.9) < 1e-6
        assert abs(r[2] - 0.3) < 1e-6
