"""Geometry Bounded Context - Domain Services.

Pure functions for path length and first Fresnel zone geometry.
NO I/O and NO state - the current map view reaches these functions only
through the ScreenProjector port.

The first Fresnel zone radius at a point on a path of length D is

    r = sqrt(lambda * d1 * d2 / D)

where d1 and d2 are the distances from that point to each endpoint. It is
zero at both towers and maximal at the midpoint, r_max = sqrt(lambda * D / 4).
"""

from __future__ import annotations

import logging
import math

import numpy as np
from numpy.typing import NDArray
from pyproj import Geod

from domain.geometry.ports import DistanceFunction, ScreenProjector
from domain.geometry.value_objects import FresnelProfile, GeoPoint, ScreenPoint

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
SPEED_OF_LIGHT_M_S = 299_792_458.0  # Speed of light in vacuum
DEFAULT_FRESNEL_STEPS = 50  # Reference sampling resolution along the path

# WGS84 ellipsoid for geodesic calculations (same as GPS, EPSG:4326)
_geod = Geod(ellps="WGS84")


# ---------------------------------------------------------------------------
# Distance
# ---------------------------------------------------------------------------
def distance(p1: GeoPoint, p2: GeoPoint) -> float:
    """Calculate geodesic distance between two points in meters.

    Uses the WGS84 ellipsoid; along the equator one degree of longitude
    is about 111.32 km.

    Args:
        p1: First geographic point
        p2: Second geographic point

    Returns:
        Distance in meters (always positive, 0 for coincident points)
    """
    _, _, dist = _geod.inv(p1.longitude, p1.latitude, p2.longitude, p2.latitude)
    return float(abs(dist))


# ---------------------------------------------------------------------------
# Fresnel Zone Radius
# ---------------------------------------------------------------------------
def wavelength_m(frequency_ghz: float) -> float:
    """Return the free-space wavelength in meters for a frequency in GHz.

    Raises:
        ValueError: If frequency_ghz is not a positive finite number
    """
    if not math.isfinite(frequency_ghz) or frequency_ghz <= 0:
        raise ValueError(f"frequency_ghz must be positive, got {frequency_ghz}")
    return SPEED_OF_LIGHT_M_S / (frequency_ghz * 1e9)


def fresnel_radius(d1_m: float, d2_m: float, frequency_ghz: float) -> float:
    """First Fresnel zone radius in meters at distances d1/d2 from the endpoints."""
    total = d1_m + d2_m
    if total <= 0:
        return 0.0
    return math.sqrt(wavelength_m(frequency_ghz) * d1_m * d2_m / total)


def _check_steps(steps: int) -> None:
    if steps < 1:
        raise ValueError(f"steps must be >= 1, got {steps}")


def _sample_radii(
    distance_m: float, frequency_ghz: float, steps: int
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Return (t, r) arrays for t_i = i/N, i = 0..N."""
    lam = wavelength_m(frequency_ghz)
    t = np.linspace(0.0, 1.0, steps + 1)
    d1 = t * distance_m
    d2 = (1.0 - t) * distance_m
    # Clamp tiny negative products from rounding before the square root
    radii = np.sqrt(np.maximum(lam * d1 * d2 / distance_m, 0.0))
    return t, radii


def fresnel_profile(
    distance_m: float,
    frequency_ghz: float,
    steps: int = DEFAULT_FRESNEL_STEPS,
) -> FresnelProfile:
    """Sample the first Fresnel zone radius along a path.

    Args:
        distance_m: Path length D in meters (must be positive)
        frequency_ghz: Link frequency in GHz
        steps: Number of intervals N; N + 1 samples are produced

    Returns:
        FresnelProfile with fractions t_i = i/N and matching radii

    Raises:
        ValueError: If distance_m, frequency_ghz or steps is out of range
    """
    _check_steps(steps)
    if not math.isfinite(distance_m) or distance_m <= 0:
        raise ValueError(f"distance_m must be positive, got {distance_m}")

    t, radii = _sample_radii(distance_m, frequency_ghz, steps)
    return FresnelProfile(
        distance_m=distance_m,
        frequency_ghz=frequency_ghz,
        wavelength_m=wavelength_m(frequency_ghz),
        fractions=tuple(t.tolist()),
        radii_m=tuple(radii.tolist()),
    )


# ---------------------------------------------------------------------------
# Clearance Polygon (screen space)
# ---------------------------------------------------------------------------
def fresnel_clearance_polygon(
    p1: GeoPoint,
    p2: GeoPoint,
    frequency_ghz: float,
    projector: ScreenProjector,
    *,
    steps: int = DEFAULT_FRESNEL_STEPS,
    distance_fn: DistanceFunction | None = None,
) -> tuple[GeoPoint, ...]:
    """Build the closed first Fresnel zone outline around the path p1 -> p2.

    The outline is laid out in the projector's screen space: radii are
    converted from meters to screen units with the ratio
    (projected segment length / D) and offset along the perpendicular of the
    projected segment. The outbound pass (+r, i = 0..N) and the return pass
    (-r, i = N..0) give 2N + 2 points, each unprojected back to WGS84.

    The result is only valid for the view the projector reflected at call
    time; regenerate it when the view changes.

    Args:
        p1: First tower position
        p2: Second tower position
        frequency_ghz: Link frequency in GHz
        projector: Current map view projection
        steps: Number of intervals N along the path
        distance_fn: Distance primitive in meters (defaults to distance())

    Returns:
        Tuple of 2N + 2 GeoPoints, or an empty tuple for a zero-length path

    Raises:
        ValueError: If frequency_ghz is not positive or steps < 1
    """
    _check_steps(steps)
    measure = distance_fn or distance
    total = float(measure(p1, p2))
    if total <= 0:
        logger.debug("Fresnel polygon skipped: coincident endpoints")
        return ()

    s1 = projector.project(p1)
    s2 = projector.project(p2)
    dx = s2.x - s1.x
    dy = s2.y - s1.y
    length = math.hypot(dx, dy)
    if length == 0:
        logger.warning(
            "Fresnel polygon skipped: %.1fm path projects to a single screen point",
            total,
        )
        return ()

    # Unit perpendicular of the projected segment
    px = -dy / length
    py = dx / length

    t, radii = _sample_radii(total, frequency_ghz, steps)
    r_screen = radii * (length / total)

    base_x = s1.x + dx * t
    base_y = s1.y + dy * t

    xs = np.concatenate([base_x + px * r_screen, (base_x - px * r_screen)[::-1]])
    ys = np.concatenate([base_y + py * r_screen, (base_y - py * r_screen)[::-1]])

    polygon = tuple(
        projector.unproject(ScreenPoint(x=float(x), y=float(y)))
        for x, y in zip(xs, ys)
    )
    logger.debug(
        "Fresnel polygon: %d points, D=%.1fm, f=%.3fGHz",
        len(polygon),
        total,
        frequency_ghz,
    )
    return polygon


# ---------------------------------------------------------------------------
# Clearance Polygon (geodesic)
# ---------------------------------------------------------------------------
def geodesic_fresnel_polygon(
    p1: GeoPoint,
    p2: GeoPoint,
    frequency_ghz: float,
    *,
    steps: int = DEFAULT_FRESNEL_STEPS,
) -> tuple[GeoPoint, ...]:
    """Build the first Fresnel zone outline directly on the WGS84 ellipsoid.

    Base points are spaced along the geodesic p1 -> p2 and each radius is
    applied along the local perpendicular azimuth, so the outline does not
    depend on any map view. Point order and count match
    fresnel_clearance_polygon().

    Returns:
        Tuple of 2N + 2 GeoPoints, or an empty tuple for a zero-length path
    """
    _check_steps(steps)
    lon1, lat1 = p1.as_lonlat()
    lon2, lat2 = p2.as_lonlat()
    az12, _, total = _geod.inv(lon1, lat1, lon2, lat2)
    total = float(abs(total))
    if total <= 0:
        logger.debug("Geodesic Fresnel polygon skipped: coincident endpoints")
        return ()

    t, radii = _sample_radii(total, frequency_ghz, steps)
    n = len(t)

    base_lon, base_lat, back_az = _geod.fwd(
        np.full(n, lon1), np.full(n, lat1), np.full(n, az12), t * total
    )
    # Forward azimuth of the path at each base point
    heading = np.asarray(back_az) + 180.0

    out_lon, out_lat, _ = _geod.fwd(base_lon, base_lat, heading + 90.0, radii)
    ret_lon, ret_lat, _ = _geod.fwd(base_lon, base_lat, heading - 90.0, radii)

    lons = np.concatenate([np.asarray(out_lon), np.asarray(ret_lon)[::-1]])
    lats = np.concatenate([np.asarray(out_lat), np.asarray(ret_lat)[::-1]])

    return tuple(
        GeoPoint(latitude=float(lat), longitude=float(lon))
        for lon, lat in zip(lons, lats)
    )
