"""In-memory adapter for the Renderer port.

Keeps the visual handles of a session in an id-keyed registry, parallel to
the domain model, and forwards simulated user input (clicks, hover, view
changes) to an attached InteractionHandler. Used headless and in tests.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict

from application.ports import InteractionHandler, StyleVariant
from domain.geometry.value_objects import GeoPoint

logger = logging.getLogger(__name__)


class VisualKind(str, Enum):
    MARKER = "marker"
    LINE = "line"
    POLYGON = "polygon"


class Visual(BaseModel):
    """A drawn primitive as the map surface holds it."""

    id: str
    kind: VisualKind
    points: tuple[GeoPoint, ...]
    style: StyleVariant
    label: str = ""

    model_config = ConfigDict(frozen=True)


class InMemoryRenderer:
    """Renderer that records visuals instead of painting them."""

    def __init__(self, operations_limit: int = 1000) -> None:
        self._visuals: dict[str, Visual] = {}
        self._handler: InteractionHandler | None = None
        # Most recent (operation, visual_id) pairs
        self.operations: deque[tuple[str, str]] = deque(maxlen=operations_limit)

    # -----------------------------------------------------------------------
    # Registry
    # -----------------------------------------------------------------------
    @property
    def visuals(self) -> dict[str, Visual]:
        return dict(self._visuals)

    def get(self, visual_id: str) -> Visual | None:
        return self._visuals.get(visual_id)

    def of_kind(self, kind: VisualKind) -> tuple[Visual, ...]:
        return tuple(v for v in self._visuals.values() if v.kind is kind)

    def __contains__(self, visual_id: object) -> bool:
        return visual_id in self._visuals

    def __len__(self) -> int:
        return len(self._visuals)

    # -----------------------------------------------------------------------
    # Renderer port
    # -----------------------------------------------------------------------
    def draw_tower_marker(
        self, visual_id: str, position: GeoPoint, style: StyleVariant
    ) -> None:
        self._put(
            Visual(
                id=visual_id, kind=VisualKind.MARKER, points=(position,), style=style
            )
        )

    def draw_link_line(
        self,
        visual_id: str,
        start: GeoPoint,
        end: GeoPoint,
        style: StyleVariant,
        label: str,
    ) -> None:
        self._put(
            Visual(
                id=visual_id,
                kind=VisualKind.LINE,
                points=(start, end),
                style=style,
                label=label,
            )
        )

    def draw_polygon(
        self, visual_id: str, points: Sequence[GeoPoint], style: StyleVariant
    ) -> None:
        self._put(
            Visual(
                id=visual_id,
                kind=VisualKind.POLYGON,
                points=tuple(points),
                style=style,
            )
        )

    def remove_visual(self, visual_id: str) -> None:
        if self._visuals.pop(visual_id, None) is not None:
            self.operations.append(("remove", visual_id))

    def _put(self, visual: Visual) -> None:
        self._visuals[visual.id] = visual
        self.operations.append(("draw", visual.id))

    # -----------------------------------------------------------------------
    # Input forwarding
    # -----------------------------------------------------------------------
    def attach(self, handler: InteractionHandler) -> None:
        self._handler = handler

    def click_map(self, position: GeoPoint) -> None:
        if self._handler is not None:
            self._handler.handle_map_click(position)

    def click(self, visual_id: str) -> None:
        """Click a drawn visual; markers and lines forward to the handler."""
        visual = self._visuals.get(visual_id)
        if visual is None or self._handler is None:
            logger.debug("Click on %s not forwarded", visual_id)
            return
        if visual.kind is VisualKind.MARKER:
            self._handler.handle_tower_click(visual_id)
        elif visual.kind is VisualKind.LINE:
            self._handler.handle_link_click(visual_id)

    def hover(self, visual_id: str, hovering: bool) -> None:
        visual = self._visuals.get(visual_id)
        if (
            visual is not None
            and visual.kind is VisualKind.LINE
            and self._handler is not None
        ):
            self._handler.handle_link_hover(visual_id, hovering)

    def view_changed(self) -> None:
        if self._handler is not None:
            self._handler.handle_view_changed()
