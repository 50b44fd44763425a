"""Planner configuration.

All knobs of a planning session live in one immutable PlannerSettings
object; validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from domain.geometry.services import DEFAULT_FRESNEL_STEPS
from domain.geometry.value_objects import GeoPoint
from domain.network.model import DEFAULT_FREQUENCY_GHZ, DEFAULT_NAME_PREFIX

# Which outline the controller draws for a selected link:
# "screen" follows the current map projection and is redrawn on view changes,
# "geodesic" is computed on the ellipsoid and independent of the view.
ClearanceGeometry = Literal["screen", "geodesic"]


class PlannerSettings(BaseModel):
    """Session configuration (Value Object)."""

    default_frequency_ghz: float = Field(default=DEFAULT_FREQUENCY_GHZ, gt=0)
    tower_name_prefix: str = Field(default=DEFAULT_NAME_PREFIX, min_length=1)
    fresnel_steps: int = Field(default=DEFAULT_FRESNEL_STEPS, ge=1)
    clearance_geometry: ClearanceGeometry = "screen"
    initial_center: GeoPoint = GeoPoint(latitude=20.5937, longitude=78.9629)
    initial_zoom: int = Field(default=5, ge=0, le=22)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "PlannerSettings":
        """Build settings from a plain mapping, treating None as "use default"."""
        return cls.model_validate({k: v for k, v in mapping.items() if v is not None})
