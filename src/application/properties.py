"""Read-model for the properties panel.

Plain, immutable snapshots of the selected tower or link with the derived
values the panel displays (coordinates, path length, clearance radius).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from domain.geometry.ports import DistanceFunction
from domain.geometry.services import distance, fresnel_radius
from domain.network.model import NetworkModel


class TowerProperties(BaseModel):
    id: str
    name: str
    frequency_ghz: float
    latitude: float
    longitude: float
    link_count: int

    model_config = ConfigDict(frozen=True)

    @property
    def coordinates_label(self) -> str:
        return f"{self.latitude:.5f}, {self.longitude:.5f}"


class LinkProperties(BaseModel):
    id: str
    source_name: str
    target_name: str
    distance_m: float
    frequency_ghz: float
    max_clearance_radius_m: float  # First Fresnel zone radius at midpoint

    model_config = ConfigDict(frozen=True)

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000.0


def link_label(distance_m: float, frequency_ghz: float) -> str:
    """Hover label of a link line, e.g. "111.32 km | 5.8 GHz"."""
    return f"{distance_m / 1000.0:.2f} km | {frequency_ghz:g} GHz"


def describe_tower(model: NetworkModel, tower_id: str) -> TowerProperties | None:
    tower = model.find_tower(tower_id)
    if tower is None:
        return None
    return TowerProperties(
        id=tower.id,
        name=tower.name,
        frequency_ghz=tower.frequency_ghz,
        latitude=tower.position.latitude,
        longitude=tower.position.longitude,
        link_count=len(model.links_incident_to(tower.id)),
    )


def describe_link(
    model: NetworkModel,
    link_id: str,
    distance_fn: DistanceFunction = distance,
) -> LinkProperties | None:
    """Snapshot a link for display; None if the link or an endpoint is gone."""
    link = model.find_link(link_id)
    if link is None:
        return None
    source = model.find_tower(link.source_tower_id)
    target = model.find_tower(link.target_tower_id)
    if source is None or target is None:
        return None

    path_m = distance_fn(source.position, target.position)
    return LinkProperties(
        id=link.id,
        source_name=source.name,
        target_name=target.name,
        distance_m=path_m,
        frequency_ghz=source.frequency_ghz,
        max_clearance_radius_m=fresnel_radius(
            path_m / 2.0, path_m / 2.0, source.frequency_ghz
        ),
    )
