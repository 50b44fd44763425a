"""Network Bounded Context - Entities.

Towers and links are identified by opaque ids. Instances are immutable
snapshots: the NetworkModel replaces a tower with an updated copy instead of
mutating it, so a snapshot handed to the UI never changes underneath it.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from domain.geometry.value_objects import GeoPoint


class Tower(BaseModel):
    """Fixed transmitter/receiver on the map (Entity).

    Invariants:
        1. frequency_ghz is positive and finite
        2. name is not blank
    """

    id: str = Field(min_length=1)
    position: GeoPoint
    frequency_ghz: float = Field(gt=0)
    name: str

    model_config = ConfigDict(frozen=True)

    @field_validator("frequency_ghz")
    @classmethod
    def _finite_frequency(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError(f"frequency_ghz must be finite, got {value}")
        return value

    @field_validator("name")
    @classmethod
    def _non_blank_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value


class Link(BaseModel):
    """Undirected line-of-sight connection between two towers (Entity).

    Source/target order is kept for display only; equality of endpoints is
    order independent (see connects()).
    """

    id: str = Field(min_length=1)
    source_tower_id: str
    target_tower_id: str

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_endpoints(self) -> "Link":
        if self.source_tower_id == self.target_tower_id:
            raise ValueError(f"Link {self.id} connects tower to itself")
        return self

    @property
    def endpoints(self) -> frozenset[str]:
        return frozenset((self.source_tower_id, self.target_tower_id))

    def involves(self, tower_id: str) -> bool:
        return tower_id in (self.source_tower_id, self.target_tower_id)

    def connects(self, tower_a: str, tower_b: str) -> bool:
        """True if this link joins tower_a and tower_b in either order."""
        return self.endpoints == frozenset((tower_a, tower_b))

    def other_end(self, tower_id: str) -> str | None:
        if tower_id == self.source_tower_id:
            return self.target_tower_id
        if tower_id == self.target_tower_id:
            return self.source_tower_id
        return None
