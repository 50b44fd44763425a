"""Network Bounded Context - Value Objects.

Selection pointer and tower update outcomes.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from domain.network.entities import Tower


class EntityKind(str, Enum):
    TOWER = "tower"
    LINK = "link"


class Selection(BaseModel):
    """The single selected entity, tagged by kind (Value Object)."""

    kind: EntityKind
    entity_id: str

    model_config = ConfigDict(frozen=True)


class UpdateStatus(str, Enum):
    """Outcome of NetworkModel.update_tower()."""

    APPLIED = "applied"
    DECLINED = "declined"  # Operator refused a destructive change; tower unchanged
    PENDING_CONFIRMATION = "pending_confirmation"  # Awaiting resolve_frequency_change()
    NOT_FOUND = "not_found"


class TowerUpdate(BaseModel):
    """Result of a tower field update (Value Object).

    Fields:
        tower: Snapshot after the operation (None when NOT_FOUND)
        removed_link_ids: Links deleted to apply a frequency change
        affected_link_ids: Links that a pending frequency change would delete
    """

    status: UpdateStatus
    tower_id: str
    field: str
    tower: Tower | None = None
    removed_link_ids: tuple[str, ...] = ()
    affected_link_ids: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def applied(self) -> bool:
        return self.status is UpdateStatus.APPLIED

    @property
    def needs_confirmation(self) -> bool:
        return self.status is UpdateStatus.PENDING_CONFIRMATION
