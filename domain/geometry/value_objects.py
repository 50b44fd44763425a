"""Geometry Bounded Context - Value Objects.

Immutable data structures for geographic and screen-space coordinates.
All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Numeric Constants
# ---------------------------------------------------------------------------
# Tolerance for floating-point comparisons of radii (meters)
RADIUS_TOLERANCE_M = 1e-9


# ---------------------------------------------------------------------------
# GeoPoint
# ---------------------------------------------------------------------------
class GeoPoint(BaseModel):
    """Geographic coordinate in WGS84 (Value Object).

    Represents a single point on the Earth's surface using latitude and longitude
    in the WGS84 coordinate reference system.

    Invariants:
        1. latitude in [-90, 90]
        2. longitude in [-180, 180]

    Note on __eq__ and __hash__: Pydantic frozen models compare by value automatically,
    so GeoPoint can be used as a dict key or set member.
    """

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    model_config = ConfigDict(frozen=True)

    def as_lonlat(self) -> tuple[float, float]:
        """Return (longitude, latitude), the axis order pyproj expects."""
        return (self.longitude, self.latitude)


# ---------------------------------------------------------------------------
# ScreenPoint
# ---------------------------------------------------------------------------
class ScreenPoint(BaseModel):
    """Point in the projector's screen (layer pixel) space (Value Object).

    Axis orientation is owned by the projector; the geometry services only
    rely on the space being locally Euclidean.
    """

    x: float
    y: float

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# FresnelProfile
# ---------------------------------------------------------------------------
class FresnelProfile(BaseModel):
    """First Fresnel zone radii sampled along a path (Value Object).

    Invariants:
        1. len(fractions) == len(radii_m) >= 2
        2. fractions[0] == 0 and fractions[-1] == 1
        3. radii_m[0] == radii_m[-1] == 0
        4. every radius is finite and >= 0

    Fields:
        fractions: Position along the path as a fraction of distance_m (t_i = i/N)
        radii_m: Zone radius at each fraction, in meters
    """

    distance_m: float = Field(gt=0)  # Total path length in meters
    frequency_ghz: float = Field(gt=0)
    wavelength_m: float = Field(gt=0)
    fractions: tuple[float, ...]
    radii_m: tuple[float, ...]

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_profile(self) -> "FresnelProfile":
        if len(self.fractions) != len(self.radii_m):
            raise ValueError(
                f"fractions ({len(self.fractions)}) and radii ({len(self.radii_m)}) "
                "must have the same length"
            )
        if len(self.fractions) < 2:
            raise ValueError(
                f"Profile must have >= 2 samples, got {len(self.fractions)}"
            )
        if self.fractions[0] != 0 or self.fractions[-1] != 1:
            raise ValueError("Fractions must start at 0 and end at 1")
        if (
            abs(self.radii_m[0]) > RADIUS_TOLERANCE_M
            or abs(self.radii_m[-1]) > RADIUS_TOLERANCE_M
        ):
            raise ValueError("Radius must vanish at both endpoints")
        if any(not math.isfinite(r) or r < 0 for r in self.radii_m):
            raise ValueError("Radii must be finite and non-negative")
        return self

    @property
    def steps(self) -> int:
        """Number of intervals N (samples are N + 1)."""
        return len(self.fractions) - 1

    @property
    def max_radius_m(self) -> float:
        """Radius at the path midpoint, sqrt(lambda * D / 4)."""
        return math.sqrt(self.wavelength_m * self.distance_m / 4.0)

    def distances_m(self) -> tuple[float, ...]:
        """Return distance from the first endpoint for each sample."""
        return tuple(t * self.distance_m for t in self.fractions)
