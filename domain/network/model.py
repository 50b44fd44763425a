"""Network Bounded Context - NetworkModel aggregate.

Owns the towers and links of a planning session and enforces:

    1. Every link endpoint references a tower in the model (cascading delete).
    2. No link connects a tower to itself.
    3. At most one link per unordered pair of towers.
    4. Link endpoints share the same frequency at creation time.
    5. Ids are never reused within the lifetime of the model.

A rejected operation raises before touching any state, so the model is
never left partially mutated.
"""

from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict

from domain.geometry.value_objects import GeoPoint
from domain.network.entities import Link, Tower
from domain.network.errors import (
    DuplicateLinkError,
    FrequencyMismatchError,
    NetworkError,
    PendingDecisionError,
    SelfLinkError,
    TowerNotFoundError,
    ValidationError,
)
from domain.network.ports import NetworkListener
from domain.network.value_objects import TowerUpdate, UpdateStatus

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_FREQUENCY_GHZ = 5.8
DEFAULT_NAME_PREFIX = "Tower"

# Editable tower fields, keyed by accepted spelling
_FIELD_ALIASES: dict[str, str] = {
    "name": "name",
    "frequency": "frequency_ghz",
    "frequency_ghz": "frequency_ghz",
}


def _new_uuid() -> str:
    return uuid.uuid4().hex


def _coerce_frequency(field: str, value: Any) -> float:
    """Parse a frequency as typed into a form (number or numeric string)."""
    if isinstance(value, bool):
        raise ValidationError(field, value, "expected a number")
    try:
        frequency = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(field, value, "expected a number") from e
    if not math.isfinite(frequency) or frequency <= 0:
        raise ValidationError(field, value, "frequency must be a positive number")
    return frequency


def _coerce_name(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(field, value, "expected text")
    name = value.strip()
    if not name:
        raise ValidationError(field, value, "name must not be blank")
    return name


class PendingFrequencyChange(BaseModel):
    """Frequency change waiting for the operator's yes/no decision."""

    tower_id: str
    frequency_ghz: float
    affected_link_ids: tuple[str, ...]

    model_config = ConfigDict(frozen=True)


class NetworkModel:
    """Tower/link aggregate with validated CRUD operations.

    Parameters
    ----------
    default_frequency_ghz: float
        Frequency assigned to newly placed towers.
    name_prefix: str
        Prefix of the sequential default tower name ("Tower 1", "Tower 2", ...).
    id_factory: Callable[[], str] | None
        Source of new entity ids; uuid4 hex strings by default.
    """

    def __init__(
        self,
        *,
        default_frequency_ghz: float = DEFAULT_FREQUENCY_GHZ,
        name_prefix: str = DEFAULT_NAME_PREFIX,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        if not math.isfinite(default_frequency_ghz) or default_frequency_ghz <= 0:
            raise ValueError(
                f"default_frequency_ghz must be positive, got {default_frequency_ghz}"
            )
        self.default_frequency_ghz = default_frequency_ghz
        self.name_prefix = name_prefix
        self._id_factory = id_factory or _new_uuid
        self._towers: dict[str, Tower] = {}
        self._links: dict[str, Link] = {}
        self._issued_ids: set[str] = set()
        self._tower_counter = 0
        self._pending: dict[str, PendingFrequencyChange] = {}
        self._listeners: list[NetworkListener] = []

    # -----------------------------------------------------------------------
    # Listeners
    # -----------------------------------------------------------------------
    def subscribe(self, listener: NetworkListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: NetworkListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: str, entity: Tower | Link) -> None:
        for listener in list(self._listeners):
            getattr(listener, event)(entity)

    # -----------------------------------------------------------------------
    # Lookups (never raise on missing ids)
    # -----------------------------------------------------------------------
    @property
    def towers(self) -> tuple[Tower, ...]:
        return tuple(self._towers.values())

    @property
    def links(self) -> tuple[Link, ...]:
        return tuple(self._links.values())

    def find_tower(self, tower_id: str) -> Tower | None:
        return self._towers.get(tower_id)

    def find_link(self, link_id: str) -> Link | None:
        return self._links.get(link_id)

    def links_incident_to(self, tower_id: str) -> tuple[Link, ...]:
        return tuple(link for link in self._links.values() if link.involves(tower_id))

    def find_link_between(self, tower_a: str, tower_b: str) -> Link | None:
        for link in self._links.values():
            if link.connects(tower_a, tower_b):
                return link
        return None

    def pending_change(self, tower_id: str) -> PendingFrequencyChange | None:
        return self._pending.get(tower_id)

    # -----------------------------------------------------------------------
    # Towers
    # -----------------------------------------------------------------------
    def add_tower(
        self,
        position: GeoPoint,
        *,
        name: str | None = None,
        frequency_ghz: float | None = None,
    ) -> Tower:
        """Create a tower at position with default (or given) name and frequency."""
        frequency = (
            self.default_frequency_ghz
            if frequency_ghz is None
            else _coerce_frequency("frequency_ghz", frequency_ghz)
        )
        if name is not None:
            name = _coerce_name("name", name)

        tower_id = self._next_id()
        self._tower_counter += 1
        tower = Tower(
            id=tower_id,
            position=position,
            frequency_ghz=frequency,
            name=name or f"{self.name_prefix} {self._tower_counter}",
        )
        self._towers[tower.id] = tower
        logger.info(
            "Tower %s placed at (%.5f, %.5f), %gGHz",
            tower.name,
            position.latitude,
            position.longitude,
            tower.frequency_ghz,
        )
        self._emit("tower_added", tower)
        return tower

    def update_tower(
        self,
        tower_id: str,
        field: str,
        value: Any,
        *,
        confirmed: bool | None = None,
    ) -> TowerUpdate:
        """Apply a validated change to a tower field.

        Changing frequency_ghz on a tower with incident links deletes those
        links, so it needs the operator's decision:

        - confirmed=None: nothing changes; returns PENDING_CONFIRMATION and
          locks the tower until resolve_frequency_change() is called
        - confirmed=False: nothing changes; returns DECLINED
        - confirmed=True: incident links are deleted, then the frequency set

        Repeating the pending frequency change with confirmed=True or False
        resolves it, as resolve_frequency_change() would.

        Raises:
            ValidationError: Unknown field or invalid value
            PendingDecisionError: The tower already awaits a decision and the
                call is not an answer to it
        """
        canonical = _FIELD_ALIASES.get(field)
        if canonical is None:
            raise ValidationError(field, value, "unknown field")

        tower = self._towers.get(tower_id)
        if tower is None:
            logger.warning("Update of unknown tower %s ignored", tower_id)
            return TowerUpdate(
                status=UpdateStatus.NOT_FOUND, tower_id=tower_id, field=canonical
            )
        pending = self._pending.get(tower_id)
        if (
            pending is not None
            and canonical == "frequency_ghz"
            and confirmed is not None
            and _coerce_frequency(field, value) == pending.frequency_ghz
        ):
            return self.resolve_frequency_change(tower_id, confirmed)
        self._ensure_not_pending(tower_id)

        if canonical == "name":
            updated = self._replace_tower(tower, name=_coerce_name(field, value))
            return TowerUpdate(
                status=UpdateStatus.APPLIED,
                tower_id=tower_id,
                field=canonical,
                tower=updated,
            )

        frequency = _coerce_frequency(field, value)
        incident = self.links_incident_to(tower_id)
        if frequency == tower.frequency_ghz or not incident:
            updated = self._replace_tower(tower, frequency_ghz=frequency)
            return TowerUpdate(
                status=UpdateStatus.APPLIED,
                tower_id=tower_id,
                field=canonical,
                tower=updated,
            )

        if confirmed is None:
            pending = PendingFrequencyChange(
                tower_id=tower_id,
                frequency_ghz=frequency,
                affected_link_ids=tuple(link.id for link in incident),
            )
            self._pending[tower_id] = pending
            logger.debug(
                "Tower %s: frequency change to %gGHz awaits confirmation (%d links)",
                tower.name,
                frequency,
                len(incident),
            )
            return TowerUpdate(
                status=UpdateStatus.PENDING_CONFIRMATION,
                tower_id=tower_id,
                field=canonical,
                tower=tower,
                affected_link_ids=pending.affected_link_ids,
            )

        return self._decide_frequency_change(tower, frequency, confirmed)

    def resolve_frequency_change(self, tower_id: str, confirmed: bool) -> TowerUpdate:
        """Resolve a PENDING_CONFIRMATION update with the operator's answer."""
        pending = self._pending.pop(tower_id, None)
        tower = self._towers.get(tower_id)
        if pending is None or tower is None:
            logger.warning("No pending frequency change for tower %s", tower_id)
            return TowerUpdate(
                status=UpdateStatus.NOT_FOUND, tower_id=tower_id, field="frequency_ghz"
            )
        return self._decide_frequency_change(tower, pending.frequency_ghz, confirmed)

    def cancel_pending(self, tower_id: str) -> bool:
        """Drop an unresolved decision; the tower stays unchanged."""
        return self._pending.pop(tower_id, None) is not None

    def delete_tower(self, tower_id: str) -> Tower | None:
        """Delete a tower and, first, every link incident to it.

        Returns the removed tower, or None if the id is unknown.

        Raises:
            PendingDecisionError: The tower awaits a frequency change decision
        """
        tower = self._towers.get(tower_id)
        if tower is None:
            return None
        self._ensure_not_pending(tower_id)

        for link in self.links_incident_to(tower_id):
            self.delete_link(link.id)
        del self._towers[tower_id]
        logger.info("Tower %s deleted", tower.name)
        self._emit("tower_removed", tower)
        return tower

    # -----------------------------------------------------------------------
    # Links
    # -----------------------------------------------------------------------
    def add_link(self, source_id: str, target_id: str) -> Link:
        """Create an undirected link between two towers.

        Raises:
            SelfLinkError: source_id == target_id
            TowerNotFoundError: Either tower is not in the model
            PendingDecisionError: Either tower awaits a frequency decision
            FrequencyMismatchError: Towers operate on different frequencies
            DuplicateLinkError: The pair is already linked (in either order)
        """
        if source_id == target_id:
            raise SelfLinkError(source_id)

        source = self._towers.get(source_id)
        if source is None:
            raise TowerNotFoundError(source_id)
        target = self._towers.get(target_id)
        if target is None:
            raise TowerNotFoundError(target_id)

        self._ensure_not_pending(source_id)
        self._ensure_not_pending(target_id)

        if source.frequency_ghz != target.frequency_ghz:
            raise FrequencyMismatchError(source.frequency_ghz, target.frequency_ghz)

        existing = self.find_link_between(source_id, target_id)
        if existing is not None:
            raise DuplicateLinkError(existing.id)

        link = Link(
            id=self._next_id(), source_tower_id=source_id, target_tower_id=target_id
        )
        self._links[link.id] = link
        logger.info("Link %s created: %s <-> %s", link.id, source.name, target.name)
        self._emit("link_added", link)
        return link

    def delete_link(self, link_id: str) -> Link | None:
        """Delete a link; returns it, or None if the id is unknown."""
        link = self._links.pop(link_id, None)
        if link is None:
            return None
        logger.info("Link %s deleted", link_id)
        self._emit("link_removed", link)
        return link

    def clear(self) -> None:
        """Remove every link and tower, discarding pending decisions."""
        self._pending.clear()
        for tower_id in list(self._towers):
            self.delete_tower(tower_id)

    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------
    def _next_id(self) -> str:
        entity_id = self._id_factory()
        if entity_id in self._issued_ids:
            raise NetworkError(f"Id factory produced a reused id: {entity_id}")
        self._issued_ids.add(entity_id)
        return entity_id

    def _ensure_not_pending(self, tower_id: str) -> None:
        if tower_id in self._pending:
            raise PendingDecisionError(tower_id)

    def _replace_tower(self, tower: Tower, **changes: Any) -> Tower:
        # Rebuild through the constructor so entity invariants are re-checked
        updated = Tower(**{**dict(tower), **changes})
        self._towers[tower.id] = updated
        logger.debug("Tower %s updated: %s", tower.id, changes)
        self._emit("tower_updated", updated)
        return updated

    def _decide_frequency_change(
        self, tower: Tower, frequency: float, confirmed: bool
    ) -> TowerUpdate:
        if not confirmed:
            logger.info("Frequency change on %s declined", tower.name)
            return TowerUpdate(
                status=UpdateStatus.DECLINED,
                tower_id=tower.id,
                field="frequency_ghz",
                tower=tower,
            )

        removed: list[str] = []
        for link in self.links_incident_to(tower.id):
            if self.delete_link(link.id) is not None:
                removed.append(link.id)
        updated = self._replace_tower(tower, frequency_ghz=frequency)
        return TowerUpdate(
            status=UpdateStatus.APPLIED,
            tower_id=tower.id,
            field="frequency_ghz",
            tower=updated,
            removed_link_ids=tuple(removed),
        )
