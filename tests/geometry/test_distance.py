"""Tests for path distance (geodesic, WGS84)."""

from __future__ import annotations

import pytest
from pyproj import Geod

from domain.geometry.services import distance
from domain.geometry.value_objects import GeoPoint

# One degree of longitude on the WGS84 equator: a * pi / 180
EQUATOR_DEGREE_M = 111_319.49079327357


def test_one_degree_longitude_at_equator():
    p1 = GeoPoint(latitude=0.0, longitude=0.0)
    p2 = GeoPoint(latitude=0.0, longitude=1.0)

    d = distance(p1, p2)

    assert d == pytest.approx(EQUATOR_DEGREE_M, abs=0.01)
    assert round(d / 1000, 1) == 111.3


def test_distance_is_symmetric():
    p1 = GeoPoint(latitude=-20.0, longitude=-45.0)
    p2 = GeoPoint(latitude=-20.1, longitude=-45.1)

    assert distance(p1, p2) == pytest.approx(distance(p2, p1), abs=1e-6)


def test_distance_matches_pyproj_geod():
    p1 = GeoPoint(latitude=48.8566, longitude=2.3522)
    p2 = GeoPoint(latitude=51.5074, longitude=-0.1278)
    _, _, expected = Geod(ellps="WGS84").inv(
        p1.longitude, p1.latitude, p2.longitude, p2.latitude
    )

    assert distance(p1, p2) == pytest.approx(expected, abs=0.001)


def test_coincident_points_have_zero_distance():
    p = GeoPoint(latitude=12.5, longitude=77.5)

    assert distance(p, p) == 0.0


def test_geopoint_rejects_out_of_range_latitude():
    with pytest.raises(ValueError):
        GeoPoint(latitude=91.0, longitude=0.0)


def test_geopoint_rejects_out_of_range_longitude():
    with pytest.raises(ValueError):
        GeoPoint(latitude=0.0, longitude=-180.5)


def test_geopoint_value_equality():
    assert GeoPoint(latitude=1, longitude=2) == GeoPoint(latitude=1, longitude=2)
    assert GeoPoint(latitude=1, longitude=2).as_lonlat() == (2.0, 1.0)
