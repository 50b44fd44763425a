"""Application Port(s) for the map surface and operator notices.

Defines interfaces (Protocols) that UI adapters must implement.
No concrete drawing here.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Protocol

from domain.geometry.value_objects import GeoPoint


class StyleVariant(str, Enum):
    DEFAULT = "default"
    SELECTED = "selected"
    HOVER = "hover"
    CLEARANCE = "clearance"  # Fresnel zone outline


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


def clearance_visual_id(link_id: str) -> str:
    """Id of the Fresnel outline drawn for a link."""
    return f"{link_id}:fresnel"


class Renderer(Protocol):
    """Port for drawing visuals keyed by entity id.

    Drawing an id that is already displayed replaces the previous visual.
    Removing an unknown id is a no-op.
    """

    def draw_tower_marker(
        self, visual_id: str, position: GeoPoint, style: StyleVariant
    ) -> None: ...

    def draw_link_line(
        self,
        visual_id: str,
        start: GeoPoint,
        end: GeoPoint,
        style: StyleVariant,
        label: str,
    ) -> None: ...

    def draw_polygon(
        self, visual_id: str, points: Sequence[GeoPoint], style: StyleVariant
    ) -> None: ...

    def remove_visual(self, visual_id: str) -> None: ...


class Notifier(Protocol):
    """Port for short operator notices (toasts)."""

    def notify(self, message: str, level: NoticeLevel = NoticeLevel.INFO) -> None: ...


class InteractionHandler(Protocol):
    """What a renderer forwards user input to."""

    def handle_map_click(self, position: GeoPoint) -> None: ...

    def handle_tower_click(self, tower_id: str) -> None: ...

    def handle_link_click(self, link_id: str) -> None: ...

    def handle_link_hover(self, link_id: str, hovering: bool) -> None: ...

    def handle_view_changed(self) -> None: ...
