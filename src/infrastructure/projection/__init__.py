"""Infrastructure adapters for map view projection.

Adapter exported for simplified imports.
"""

from .web_mercator import WebMercatorProjector

__all__ = ["WebMercatorProjector"]
