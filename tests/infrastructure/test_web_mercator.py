"""Tests for the Web Mercator ScreenProjector adapter."""

from __future__ import annotations

import warnings

import pytest
from affine import Affine

from domain.geometry.services import (
    distance,
    fresnel_clearance_polygon,
    fresnel_profile,
)
from domain.geometry.value_objects import GeoPoint, ScreenPoint
from infrastructure.projection import WebMercatorProjector

ORIGIN = GeoPoint(latitude=0.0, longitude=0.0)


def test_center_projects_to_viewport_center():
    center = GeoPoint(latitude=20.5937, longitude=78.9629)
    projector = WebMercatorProjector(center, 5, viewport=(800, 600))

    point = projector.project(center)

    assert point.x == pytest.approx(400.0, abs=1e-6)
    assert point.y == pytest.approx(300.0, abs=1e-6)


def test_zoom_zero_world_tile():
    projector = WebMercatorProjector(ORIGIN, 0, viewport=(256, 256))

    east = projector.project(GeoPoint(latitude=0.0, longitude=90.0))
    west_edge = projector.project(GeoPoint(latitude=0.0, longitude=-180.0))

    assert (east.x, east.y) == pytest.approx((192.0, 128.0), abs=1e-6)
    assert west_edge.x == pytest.approx(0.0, abs=1e-6)


def test_north_is_up():
    projector = WebMercatorProjector(ORIGIN, 3)

    north = projector.project(GeoPoint(latitude=10.0, longitude=0.0))
    south = projector.project(GeoPoint(latitude=-10.0, longitude=0.0))

    assert north.y < south.y


@pytest.mark.parametrize(
    "lat, lon", [(0.0, 0.0), (45.5, -73.6), (-33.9, 151.2), (60.0, 179.0)]
)
def test_unproject_inverts_project(lat, lon):
    projector = WebMercatorProjector(GeoPoint(latitude=lat, longitude=lon), 12)
    point = GeoPoint(latitude=lat + 0.01, longitude=lon - 0.01)

    back = projector.unproject(projector.project(point))

    assert back.latitude == pytest.approx(point.latitude, abs=1e-9)
    assert back.longitude == pytest.approx(point.longitude, abs=1e-9)


def test_zoom_in_doubles_screen_distances():
    projector = WebMercatorProjector(ORIGIN, 8)
    a = GeoPoint(latitude=0.0, longitude=0.0)
    b = GeoPoint(latitude=0.0, longitude=0.1)
    before = projector.project(b).x - projector.project(a).x

    projector.set_zoom(9)
    after = projector.project(b).x - projector.project(a).x

    assert after == pytest.approx(2 * before, rel=1e-9)


def test_pan_moves_the_pixel_origin():
    projector = WebMercatorProjector(ORIGIN, 6, viewport=(1000, 500))
    target = GeoPoint(latitude=5.0, longitude=5.0)

    projector.pan_to(target)

    assert projector.center == target
    point = projector.project(target)
    assert (point.x, point.y) == pytest.approx((500.0, 250.0), abs=1e-6)


def test_resize_keeps_center_in_the_middle():
    projector = WebMercatorProjector(ORIGIN, 4, viewport=(400, 400))

    projector.resize((600, 200))

    point = projector.project(ORIGIN)
    assert (point.x, point.y) == pytest.approx((300.0, 100.0), abs=1e-6)


def test_transform_is_affine_scale_with_flipped_y():
    projector = WebMercatorProjector(ORIGIN, 0, viewport=(256, 256))

    transform = projector.transform

    assert isinstance(transform, Affine)
    assert transform.a == pytest.approx(-transform.e)
    assert transform.b == 0 and transform.d == 0


def test_meters_per_pixel_at_zoom_zero():
    projector = WebMercatorProjector(ORIGIN, 0)

    assert projector.meters_per_pixel() == pytest.approx(156_543.03, abs=0.01)


def test_poles_are_clamped():
    projector = WebMercatorProjector(ORIGIN, 2)

    point = projector.project(GeoPoint(latitude=90.0, longitude=0.0))

    assert isinstance(point, ScreenPoint)
    assert projector.unproject(point).latitude == pytest.approx(85.0511287798, abs=1e-6)


def test_round_trip_raises_no_warnings():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        projector = WebMercatorProjector(ORIGIN, 7)
        projector.pan_to(GeoPoint(latitude=10.0, longitude=20.0))
        projector.unproject(projector.project(ORIGIN))


def test_invalid_viewport_rejected():
    with pytest.raises(ValueError):
        WebMercatorProjector(ORIGIN, 2, viewport=(0, 100))


def test_clearance_polygon_through_mercator_view():
    p1 = GeoPoint(latitude=0.0, longitude=0.0)
    p2 = GeoPoint(latitude=0.0, longitude=0.05)
    projector = WebMercatorProjector(GeoPoint(latitude=0.0, longitude=0.025), 14)
    d = distance(p1, p2)
    midpoint = GeoPoint(latitude=0.0, longitude=0.025)

    polygon = fresnel_clearance_polygon(p1, p2, 5.8, projector)

    assert len(polygon) == 102
    # Spherical Mercator vs ellipsoid differ by < 1% near the equator
    assert distance(midpoint, polygon[25]) == pytest.approx(
        fresnel_profile(d, 5.8).max_radius_m, rel=1e-2
    )
