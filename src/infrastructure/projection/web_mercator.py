"""Web Mercator adapter for ScreenProjector.

Implements the map view projection used by slippy-map surfaces: WGS84 is
projected to EPSG:3857 meters with pyproj, then mapped to layer pixels with
an affine transform derived from the zoom level and the view's pixel origin
(top-left corner of the viewport).

Lifecycle:
1) Build transformers once per projector (they are reusable and thread-free)
2) Recompute the affine transform whenever center, zoom or viewport changes
3) project()/unproject() apply the current transform only
"""

from __future__ import annotations

import logging
import math

from affine import Affine
from pyproj import Transformer

from domain.geometry.value_objects import GeoPoint, ScreenPoint

logger = logging.getLogger(__name__)

# Spherical Mercator constants (EPSG:3857)
_EARTH_RADIUS_M = 6378137.0
_HALF_CIRCUMFERENCE_M = math.pi * _EARTH_RADIUS_M
_MAX_LATITUDE = 85.0511287798  # Latitude where the square world tile ends


def _wrap_longitude(lon: float) -> float:
    if -180.0 <= lon <= 180.0:
        return lon
    return ((lon + 180.0) % 360.0) - 180.0


class WebMercatorProjector:
    """ScreenProjector for a Web Mercator map view.

    Parameters
    ----------
    center: GeoPoint
        Geographic point displayed at the middle of the viewport.
    zoom: float
        Zoom level; the world is tile_size * 2**zoom pixels wide.
    tile_size: int
        Edge of a map tile in pixels.
    viewport: tuple[int, int]
        (width, height) of the map surface in pixels.
    """

    def __init__(
        self,
        center: GeoPoint,
        zoom: float,
        *,
        tile_size: int = 256,
        viewport: tuple[int, int] = (1024, 768),
    ) -> None:
        if tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {tile_size}")
        if viewport[0] <= 0 or viewport[1] <= 0:
            raise ValueError(f"viewport must be positive, got {viewport}")
        self._to_mercator = Transformer.from_crs(
            "EPSG:4326", "EPSG:3857", always_xy=True
        )
        self._to_geographic = Transformer.from_crs(
            "EPSG:3857", "EPSG:4326", always_xy=True
        )
        self.tile_size = tile_size
        self._center = center
        self._zoom = float(zoom)
        self._viewport = viewport
        self._transform = self._build_transform()

    # -----------------------------------------------------------------------
    # View state
    # -----------------------------------------------------------------------
    @property
    def center(self) -> GeoPoint:
        return self._center

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def viewport(self) -> tuple[int, int]:
        return self._viewport

    @property
    def transform(self) -> Affine:
        """Mercator meters -> layer pixels for the current view."""
        return self._transform

    def pan_to(self, center: GeoPoint) -> None:
        self._center = center
        self._transform = self._build_transform()

    def set_zoom(self, zoom: float) -> None:
        self._zoom = float(zoom)
        self._transform = self._build_transform()

    def resize(self, viewport: tuple[int, int]) -> None:
        if viewport[0] <= 0 or viewport[1] <= 0:
            raise ValueError(f"viewport must be positive, got {viewport}")
        self._viewport = viewport
        self._transform = self._build_transform()

    def meters_per_pixel(self, latitude: float = 0.0) -> float:
        """Ground resolution at a latitude for the current zoom."""
        world_px = self.tile_size * 2.0**self._zoom
        return 2 * _HALF_CIRCUMFERENCE_M * math.cos(math.radians(latitude)) / world_px

    # -----------------------------------------------------------------------
    # ScreenProjector
    # -----------------------------------------------------------------------
    def project(self, point: GeoPoint) -> ScreenPoint:
        x, y = self._transform @ self._mercator(point)
        return ScreenPoint(x=x, y=y)

    def unproject(self, point: ScreenPoint) -> GeoPoint:
        mx, my = ~self._transform @ (point.x, point.y)
        lon, lat = self._to_geographic.transform(mx, my)
        return GeoPoint(latitude=float(lat), longitude=_wrap_longitude(float(lon)))

    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------
    def _mercator(self, point: GeoPoint) -> tuple[float, float]:
        # Poles project to infinity; clamp to the edge of the square world
        lat = max(-_MAX_LATITUDE, min(_MAX_LATITUDE, point.latitude))
        x, y = self._to_mercator.transform(point.longitude, lat)
        return (float(x), float(y))

    def _build_transform(self) -> Affine:
        scale = self.tile_size * 2.0**self._zoom / (2 * _HALF_CIRCUMFERENCE_M)
        # Mercator meters -> world pixels (origin top-left, y down)
        offset = _HALF_CIRCUMFERENCE_M * scale
        world = Affine(scale, 0.0, offset, 0.0, -scale, offset)
        cx, cy = world @ self._mercator(self._center)
        width, height = self._viewport
        origin = Affine.translation(-(cx - width / 2.0), -(cy - height / 2.0))
        logger.debug(
            "View transform: center=(%.5f, %.5f) zoom=%.2f",
            self._center.latitude,
            self._center.longitude,
            self._zoom,
        )
        return origin @ world
