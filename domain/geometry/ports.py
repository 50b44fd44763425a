"""Domain Port(s) for view projection.

Defines interfaces (Protocols) that the map surface must implement so the
geometry services can work in screen space. No concrete projection here.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from .value_objects import GeoPoint, ScreenPoint

# Geodesic distance primitive in meters, e.g. the map's own distance function.
DistanceFunction = Callable[[GeoPoint, GeoPoint], float]


class ScreenProjector(Protocol):
    """Port for converting between geographic and screen coordinates.

    Implementations live in infrastructure (e.g., Web Mercator adapter) and
    reflect the view state (center, zoom) at call time.
    """

    def project(self, point: GeoPoint) -> ScreenPoint:
        """Project a geographic point into screen space for the current view."""
        ...

    def unproject(self, point: ScreenPoint) -> GeoPoint:
        """Inverse of project for the current view."""
        ...
