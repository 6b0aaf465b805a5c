"""
Tests for the sky-strip projection and zodiac label layout.
"""
import math
import pytest

from retrograde_sim.visualization.sky_view import project_to_sky_view, zodiac_label_positions

R = 200.0
CX = 300.0
CY = 250.0


def by_name(labels, name):
    return next(lab for lab in labels if lab.label == name)


class TestProjectToSkyView:
    @pytest.mark.parametrize("lam, expected", [
        (0.0, 0.0),
        (90.0, 150.0),
        (180.0, 300.0),
        (270.0, 450.0),
        (360.0, 600.0),
    ])
    def test_linear_map(self, lam, expected):
        assert project_to_sky_view(lam, 600.0) == expected

    def test_monotonic(self):
        xs = [project_to_sky_view(lam, 600.0) for lam in (100.0, 200.0, 300.0)]
        assert xs[0] < xs[1] < xs[2]

    def test_scales_with_width(self):
        assert project_to_sky_view(180.0, 1000.0) == 500.0
        assert project_to_sky_view(180.0, 200.0) == 100.0


class TestZodiacLabels:
    def test_twelve_signs_in_order(self):
        labels = zodiac_label_positions(R, CX, CY)
        assert [lab.label for lab in labels] == [
            "Ari", "Tau", "Gem", "Cnc", "Leo", "Vir",
            "Lib", "Sco", "Sgr", "Cap", "Aqr", "Psc",
        ]

    def test_mid_sign_angles(self):
        labels = zodiac_label_positions(R, CX, CY)
        assert [lab.angle_deg for lab in labels] == [15.0 + 30.0 * k for k in range(12)]

    def test_on_circle(self):
        for lab in zodiac_label_positions(R, CX, CY):
            assert math.isclose(math.hypot(lab.x - CX, lab.y - CY), R, abs_tol=1e-9)
        ari = by_name(zodiac_label_positions(100.0, 500.0, 400.0), "Ari")
        assert math.isclose(math.hypot(ari.x - 500.0, ari.y - 400.0), 100.0, abs_tol=1e-9)

    def test_screen_y_points_down(self):
        labels = zodiac_label_positions(R, CX, CY)
        ari = by_name(labels, "Ari")
        assert ari.x > CX and ari.y < CY
        lib = by_name(labels, "Lib")
        assert lib.x < CX and lib.y > CY
        assert by_name(labels, "Cnc").y < CY
        assert by_name(labels, "Cap").y > CY

    def test_math_y_points_up(self):
        labels = zodiac_label_positions(R, 0.0, 0.0, y_axis_down=False)
        assert by_name(labels, "Cnc").y > 0.0
        assert by_name(labels, "Cap").y < 0.0
