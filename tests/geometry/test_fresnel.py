"""Tests for first Fresnel zone radii and clearance outlines.

Reference path: (0, 0) -> (0, 1) on the equator at 5.8 GHz.
D = 111319.49 m, lambda = 0.05169 m, r_max = sqrt(lambda * D / 4) = 37.93 m.
"""

from __future__ import annotations

import math

import pytest

from domain.geometry.services import (
    DEFAULT_FRESNEL_STEPS,
    SPEED_OF_LIGHT_M_S,
    distance,
    fresnel_clearance_polygon,
    fresnel_profile,
    fresnel_radius,
    geodesic_fresnel_polygon,
    wavelength_m,
)
from domain.geometry.value_objects import FresnelProfile, GeoPoint

P1 = GeoPoint(latitude=0.0, longitude=0.0)
P2 = GeoPoint(latitude=0.0, longitude=1.0)
FREQ_GHZ = 5.8
N = DEFAULT_FRESNEL_STEPS
MID = N // 2


def expected_max_radius(distance_m: float, frequency_ghz: float) -> float:
    return math.sqrt(wavelength_m(frequency_ghz) * distance_m / 4)


# ===========================================================================
# Wavelength and radius
# ===========================================================================
def test_wavelength_uses_speed_of_light():
    assert wavelength_m(5.8) == pytest.approx(SPEED_OF_LIGHT_M_S / 5.8e9)
    assert wavelength_m(2.4) == pytest.approx(0.12491, abs=1e-5)


@pytest.mark.parametrize("frequency", [0.0, -2.4, float("nan"), float("inf")])
def test_wavelength_rejects_invalid_frequency(frequency):
    with pytest.raises(ValueError):
        wavelength_m(frequency)


def test_fresnel_radius_is_zero_at_endpoints():
    assert fresnel_radius(0.0, 1000.0, FREQ_GHZ) == 0.0
    assert fresnel_radius(1000.0, 0.0, FREQ_GHZ) == 0.0
    assert fresnel_radius(0.0, 0.0, FREQ_GHZ) == 0.0


def test_fresnel_radius_at_midpoint():
    d = 10_000.0
    r = fresnel_radius(d / 2, d / 2, FREQ_GHZ)

    assert r == pytest.approx(expected_max_radius(d, FREQ_GHZ), rel=1e-12)


# ===========================================================================
# Profile
# ===========================================================================
def test_profile_radius_vanishes_at_both_ends_and_peaks_at_midpoint():
    d = distance(P1, P2)
    profile = fresnel_profile(d, FREQ_GHZ)

    assert profile.steps == N
    assert len(profile.radii_m) == N + 1
    assert profile.fractions[0] == 0.0
    assert profile.fractions[-1] == 1.0
    assert profile.radii_m[0] == 0.0
    assert profile.radii_m[-1] == 0.0
    assert profile.fractions[MID] == pytest.approx(0.5)
    expected = expected_max_radius(d, FREQ_GHZ)
    assert profile.radii_m[MID] == pytest.approx(expected, rel=1e-9)
    assert profile.max_radius_m == pytest.approx(37.93, abs=0.01)
    assert max(profile.radii_m) == pytest.approx(profile.max_radius_m, rel=1e-9)


def test_profile_is_symmetric():
    profile = fresnel_profile(5_000.0, 2.4, steps=10)

    for i in range(11):
        assert profile.radii_m[i] == pytest.approx(profile.radii_m[10 - i], abs=1e-9)


def test_profile_distances():
    profile = fresnel_profile(1_000.0, 5.8, steps=4)

    assert profile.distances_m() == pytest.approx((0.0, 250.0, 500.0, 750.0, 1000.0))


def test_profile_rejects_zero_distance():
    with pytest.raises(ValueError, match="distance_m"):
        fresnel_profile(0.0, FREQ_GHZ)


def test_profile_rejects_zero_steps():
    with pytest.raises(ValueError, match="steps"):
        fresnel_profile(1_000.0, FREQ_GHZ, steps=0)


def test_profile_value_object_requires_vanishing_endpoints():
    with pytest.raises(ValueError):
        FresnelProfile(
            distance_m=100.0,
            frequency_ghz=5.8,
            wavelength_m=wavelength_m(5.8),
            fractions=(0.0, 1.0),
            radii_m=(1.0, 0.0),
        )


# ===========================================================================
# Screen-space clearance polygon
# ===========================================================================
def test_polygon_has_two_passes_of_n_plus_one_points(projector):
    polygon = fresnel_clearance_polygon(P1, P2, FREQ_GHZ, projector)

    assert len(polygon) == 2 * N + 2


def test_polygon_passes_start_and_end_on_the_towers(projector):
    polygon = fresnel_clearance_polygon(P1, P2, FREQ_GHZ, projector)

    for index, tower in ((0, P1), (N, P2), (N + 1, P2), (2 * N + 1, P1)):
        assert polygon[index].latitude == pytest.approx(tower.latitude, abs=1e-12)
        assert polygon[index].longitude == pytest.approx(tower.longitude, abs=1e-12)


def test_polygon_midpoint_offset_equals_max_radius_in_screen_units(projector):
    d = distance(P1, P2)
    polygon = fresnel_clearance_polygon(P1, P2, FREQ_GHZ, projector)

    # Projected segment is 1 degree long, so r meters -> r / D degrees
    offset_deg = expected_max_radius(d, FREQ_GHZ) / d
    outbound = polygon[MID]
    back = polygon[2 * N + 1 - MID]

    assert outbound.longitude == pytest.approx(0.5)
    assert back.longitude == pytest.approx(0.5)
    assert abs(outbound.latitude) == pytest.approx(offset_deg, rel=1e-9)
    assert outbound.latitude == pytest.approx(-back.latitude, rel=1e-12)


def test_polygon_for_coincident_towers_is_empty(projector):
    assert fresnel_clearance_polygon(P1, P1, FREQ_GHZ, projector) == ()
    assert projector.project_calls == 0


def test_polygon_uses_given_distance_primitive(projector):
    polygon = fresnel_clearance_polygon(
        P1, P2, FREQ_GHZ, projector, distance_fn=lambda a, b: 0.0
    )

    assert polygon == ()


def test_polygon_respects_steps(projector):
    polygon = fresnel_clearance_polygon(P1, P2, FREQ_GHZ, projector, steps=8)

    assert len(polygon) == 18


def test_polygon_rejects_invalid_frequency(projector):
    with pytest.raises(ValueError):
        fresnel_clearance_polygon(P1, P2, 0.0, projector)


def test_polygon_for_single_screen_point_is_empty():
    class CollapsedProjector:
        def project(self, point):
            from domain.geometry.value_objects import ScreenPoint

            return ScreenPoint(x=0.0, y=0.0)

        def unproject(self, point):  # pragma: no cover - never reached
            raise AssertionError("unproject should not be called")

    assert fresnel_clearance_polygon(P1, P2, FREQ_GHZ, CollapsedProjector()) == ()


# ===========================================================================
# Geodesic clearance polygon
# ===========================================================================
def test_geodesic_polygon_shape():
    polygon = geodesic_fresnel_polygon(P1, P2, FREQ_GHZ)

    assert len(polygon) == 2 * N + 2
    assert distance(polygon[0], P1) < 1e-6
    assert distance(polygon[N], P2) < 1e-6
    assert distance(polygon[2 * N + 1], P1) < 1e-6


def test_geodesic_polygon_midpoint_offset_is_max_radius_in_meters():
    d = distance(P1, P2)
    midpoint = GeoPoint(latitude=0.0, longitude=0.5)
    polygon = geodesic_fresnel_polygon(P1, P2, FREQ_GHZ)

    outbound = polygon[MID]
    back = polygon[2 * N + 1 - MID]

    assert distance(midpoint, outbound) == pytest.approx(
        expected_max_radius(d, FREQ_GHZ), rel=1e-6
    )
    assert distance(midpoint, back) == pytest.approx(
        expected_max_radius(d, FREQ_GHZ), rel=1e-6
    )
    # Opposite sides of the path
    assert outbound.latitude * back.latitude < 0


def test_geodesic_polygon_for_coincident_towers_is_empty():
    assert geodesic_fresnel_polygon(P2, P2, FREQ_GHZ) == ()
