"""Network Bounded Context - Error Hierarchy.

Custom exceptions for tower and link operations. Every error is local and
recoverable: an operation that raises leaves the NetworkModel unchanged.
"""

from __future__ import annotations

from typing import Any


class NetworkError(Exception):
    """Base error for network operations."""


class ValidationError(NetworkError):
    """Unknown field or invalid value on a tower update.

    Attributes:
        field: The field the caller tried to change
        value: The rejected value
    """

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field!r}: {reason}")


class PendingDecisionError(NetworkError):
    """Tower has an unresolved confirmation and cannot be mutated yet."""

    def __init__(self, tower_id: str) -> None:
        self.tower_id = tower_id
        super().__init__(f"Tower {tower_id} is awaiting a frequency change decision")


# ---------------------------------------------------------------------------
# Link Creation Errors
# ---------------------------------------------------------------------------
class LinkError(NetworkError):
    """Base error for rejected link creation."""


class SelfLinkError(LinkError):
    """Both endpoints are the same tower."""

    def __init__(self, tower_id: str) -> None:
        self.tower_id = tower_id
        super().__init__("Cannot connect tower to itself")


class TowerNotFoundError(LinkError):
    """An endpoint does not reference a tower in the model."""

    def __init__(self, tower_id: str) -> None:
        self.tower_id = tower_id
        super().__init__(f"Tower {tower_id} does not exist")


class FrequencyMismatchError(LinkError):
    """Endpoints operate on different frequencies.

    Attributes:
        source_frequency_ghz: Frequency of the first endpoint
        target_frequency_ghz: Frequency of the second endpoint
    """

    def __init__(
        self, source_frequency_ghz: float, target_frequency_ghz: float
    ) -> None:
        self.source_frequency_ghz = source_frequency_ghz
        self.target_frequency_ghz = target_frequency_ghz
        super().__init__(
            f"Frequency mismatch! {source_frequency_ghz:g}GHz"
            f" vs {target_frequency_ghz:g}GHz"
        )

    @property
    def frequencies(self) -> tuple[float, float]:
        return (self.source_frequency_ghz, self.target_frequency_ghz)


class DuplicateLinkError(LinkError):
    """A link between the same unordered pair of towers already exists."""

    def __init__(self, existing_link_id: str) -> None:
        self.existing_link_id = existing_link_id
        super().__init__("Link already exists")
