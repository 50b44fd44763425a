"""Interaction controller - operator intent state machine.

Routes map, tower and link clicks to NetworkModel operations, owns the
selection pointer and tells the Renderer what to draw.

States:

    VIEW --(tool TOWER)--> PLACE_TOWER --(map click: place + select)--> VIEW
    VIEW --(tool LINK)--> LINK_AWAIT_FIRST --(tower click)--> LINK_AWAIT_SECOND
    LINK_AWAIT_SECOND --(tower click: add_link, ok or error)--> LINK_AWAIT_FIRST

Switching tools from any state clears the selection and abandons an
incomplete link draft without touching the model.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from domain.geometry.ports import ScreenProjector
from domain.geometry.services import (
    distance,
    fresnel_clearance_polygon,
    geodesic_fresnel_polygon,
)
from domain.geometry.value_objects import GeoPoint
from domain.network.entities import Link, Tower
from domain.network.errors import NetworkError
from domain.network.model import NetworkModel
from domain.network.value_objects import (
    EntityKind,
    Selection,
    TowerUpdate,
    UpdateStatus,
)

from .ports import NoticeLevel, Notifier, Renderer, StyleVariant, clearance_visual_id
from .properties import (
    LinkProperties,
    TowerProperties,
    describe_link,
    describe_tower,
    link_label,
)
from .settings import PlannerSettings

logger = logging.getLogger(__name__)


class ToolMode(str, Enum):
    """Tool picked by the operator in the toolbar."""

    VIEW = "view"
    TOWER = "tower"
    LINK = "link"


class InteractionState(str, Enum):
    VIEW = "view"
    PLACE_TOWER = "place_tower"
    LINK_AWAIT_FIRST = "link_await_first"
    LINK_AWAIT_SECOND = "link_await_second"


_ENTRY_STATE: dict[ToolMode, InteractionState] = {
    ToolMode.VIEW: InteractionState.VIEW,
    ToolMode.TOWER: InteractionState.PLACE_TOWER,
    ToolMode.LINK: InteractionState.LINK_AWAIT_FIRST,
}

_LINK_STATES = (InteractionState.LINK_AWAIT_FIRST, InteractionState.LINK_AWAIT_SECOND)


class InteractionController:
    """Finite state machine over operator intent.

    The controller subscribes to the model, so every committed mutation
    (including cascaded link deletions) is mirrored on the renderer.

    Parameters
    ----------
    model: NetworkModel
        The session's tower/link aggregate.
    renderer: Renderer
        Map surface that draws visuals keyed by entity id.
    notifier: Notifier
        Sink for operator notices.
    projector: ScreenProjector | None
        Current map view; needed for screen-space clearance outlines.
    settings: PlannerSettings | None
        Session configuration; defaults apply when omitted.
    """

    def __init__(
        self,
        model: NetworkModel,
        renderer: Renderer,
        notifier: Notifier,
        projector: ScreenProjector | None = None,
        settings: PlannerSettings | None = None,
    ) -> None:
        self.model = model
        self.renderer = renderer
        self.notifier = notifier
        self.projector = projector
        self.settings = settings or PlannerSettings()

        self._state = InteractionState.VIEW
        self._pending_tower_id: str | None = None
        self._selection: Selection | None = None
        self._clearance_link_id: str | None = None
        self._decision_tower_id: str | None = None

        model.subscribe(self)
        for tower in model.towers:
            self.tower_added(tower)
        for link in model.links:
            self.link_added(link)

    def detach(self) -> None:
        """Stop mirroring the model (session teardown)."""
        self.model.unsubscribe(self)

    # -----------------------------------------------------------------------
    # Read accessors
    # -----------------------------------------------------------------------
    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def mode(self) -> ToolMode:
        if self._state in _LINK_STATES:
            return ToolMode.LINK
        if self._state is InteractionState.PLACE_TOWER:
            return ToolMode.TOWER
        return ToolMode.VIEW

    @property
    def selection(self) -> Selection | None:
        return self._selection

    @property
    def pending_tower_id(self) -> str | None:
        """First endpoint of the link draft (only set in LINK_AWAIT_SECOND)."""
        return self._pending_tower_id

    @property
    def clearance_link_id(self) -> str | None:
        """Link whose clearance outline is currently displayed."""
        return self._clearance_link_id

    def selected_entity(self) -> Tower | Link | None:
        if self._selection is None:
            return None
        if self._selection.kind is EntityKind.TOWER:
            return self.model.find_tower(self._selection.entity_id)
        return self.model.find_link(self._selection.entity_id)

    def selection_properties(self) -> TowerProperties | LinkProperties | None:
        """Snapshot of the selection for the properties panel."""
        if self._selection is None:
            return None
        if self._selection.kind is EntityKind.TOWER:
            return describe_tower(self.model, self._selection.entity_id)
        return describe_link(self.model, self._selection.entity_id)

    # -----------------------------------------------------------------------
    # Modes
    # -----------------------------------------------------------------------
    def set_mode(self, mode: ToolMode | str) -> None:
        tool = ToolMode(mode)
        self.deselect_all()
        if self._pending_tower_id is not None:
            logger.debug("Link draft from %s abandoned", self._pending_tower_id)
        self._pending_tower_id = None
        self._transition(_ENTRY_STATE[tool])
        self.notifier.notify(f"Mode: {tool.value.capitalize()}")

    def _transition(self, state: InteractionState) -> None:
        logger.debug("Interaction state %s -> %s", self._state.value, state.value)
        self._state = state

    # -----------------------------------------------------------------------
    # Input events
    # -----------------------------------------------------------------------
    def handle_map_click(self, position: GeoPoint) -> None:
        if self._state is InteractionState.VIEW:
            self.deselect_all()
        elif self._state is InteractionState.PLACE_TOWER:
            tower = self.model.add_tower(position)
            self.select_tower(tower.id)
            # Placement is single-shot; the new tower stays selected
            self._transition(InteractionState.VIEW)
            self.notifier.notify("Mode: View")
        else:
            logger.debug("Map click ignored in %s", self._state.value)

    def handle_tower_click(self, tower_id: str) -> None:
        if self.model.find_tower(tower_id) is None:
            logger.warning("Click on unknown tower %s ignored", tower_id)
            return

        if self._state is InteractionState.LINK_AWAIT_FIRST:
            self._pending_tower_id = tower_id
            self._transition(InteractionState.LINK_AWAIT_SECOND)
            self.notifier.notify("Select second tower to connect")
        elif self._state is InteractionState.LINK_AWAIT_SECOND:
            self._complete_link(tower_id)
        else:
            self.select_tower(tower_id)

    def handle_link_click(self, link_id: str) -> None:
        if self.model.find_link(link_id) is None:
            logger.warning("Click on unknown link %s ignored", link_id)
            return
        self.select_link(link_id)

    def handle_link_hover(self, link_id: str, hovering: bool) -> None:
        link = self.model.find_link(link_id)
        if link is None:
            return
        if hovering:
            self._draw_link(link, StyleVariant.HOVER)
        else:
            self._draw_link(link, self._link_style(link.id))

    def handle_view_changed(self) -> None:
        """Redraw view-dependent geometry after a pan, zoom or resize."""
        if self._clearance_link_id is None:
            return
        if self.settings.clearance_geometry == "geodesic":
            return
        link = self.model.find_link(self._clearance_link_id)
        if link is not None:
            self._show_clearance(link)

    def _complete_link(self, tower_id: str) -> None:
        pending = self._pending_tower_id
        self._pending_tower_id = None
        self._transition(InteractionState.LINK_AWAIT_FIRST)

        if pending is None:
            return
        if pending == tower_id:
            self.notifier.notify("Cannot connect tower to itself", NoticeLevel.ERROR)
            return

        try:
            self.model.add_link(pending, tower_id)
        except NetworkError as e:
            logger.warning("Link %s -> %s rejected: %s", pending, tower_id, e)
            self.notifier.notify(str(e), NoticeLevel.ERROR)
            return
        self.notifier.notify("Link created successfully", NoticeLevel.SUCCESS)

    # -----------------------------------------------------------------------
    # Selection
    # -----------------------------------------------------------------------
    def select_tower(self, tower_id: str) -> None:
        tower = self.model.find_tower(tower_id)
        if tower is None:
            return
        self.deselect_all()
        self._selection = Selection(kind=EntityKind.TOWER, entity_id=tower.id)
        self.renderer.draw_tower_marker(tower.id, tower.position, StyleVariant.SELECTED)

    def select_link(self, link_id: str) -> None:
        link = self.model.find_link(link_id)
        if link is None:
            return
        self.deselect_all()
        self._selection = Selection(kind=EntityKind.LINK, entity_id=link.id)
        self._draw_link(link, StyleVariant.SELECTED)
        self._show_clearance(link)

    def deselect_all(self) -> None:
        """Clear selection, restore default styles and hide the clearance outline.

        An unanswered frequency change prompt is abandoned as well.
        """
        self._abandon_decision()
        self._selection = None
        self._hide_clearance()
        for tower in self.model.towers:
            self.renderer.draw_tower_marker(
                tower.id, tower.position, StyleVariant.DEFAULT
            )
        for link in self.model.links:
            self._draw_link(link, StyleVariant.DEFAULT)

    def _is_selected(self, kind: EntityKind, entity_id: str) -> bool:
        return self._selection == Selection(kind=kind, entity_id=entity_id)

    def _link_style(self, link_id: str) -> StyleVariant:
        if self._is_selected(EntityKind.LINK, link_id):
            return StyleVariant.SELECTED
        return StyleVariant.DEFAULT

    # -----------------------------------------------------------------------
    # Properties-panel entry points
    # -----------------------------------------------------------------------
    def update_tower(
        self,
        tower_id: str,
        field: str,
        value: Any,
        confirmed: bool | None = None,
    ) -> TowerUpdate:
        try:
            result = self.model.update_tower(
                tower_id, field, value, confirmed=confirmed
            )
        except NetworkError as e:
            self.notifier.notify(str(e), NoticeLevel.ERROR)
            raise
        if result.needs_confirmation:
            # One prompt at a time
            if self._decision_tower_id != tower_id:
                self._abandon_decision()
            self._decision_tower_id = tower_id
        elif self._decision_tower_id == tower_id:
            self._decision_tower_id = None
        self._report_update(result)
        return result

    def resolve_frequency_change(self, tower_id: str, confirmed: bool) -> TowerUpdate:
        if self._decision_tower_id == tower_id:
            self._decision_tower_id = None
        result = self.model.resolve_frequency_change(tower_id, confirmed)
        self._report_update(result)
        return result

    def delete_tower(self, tower_id: str) -> Tower | None:
        if self._decision_tower_id == tower_id:
            self._abandon_decision()
        try:
            removed = self.model.delete_tower(tower_id)
        except NetworkError as e:
            self.notifier.notify(str(e), NoticeLevel.ERROR)
            raise
        if removed is not None:
            self.deselect_all()
            self.notifier.notify("Tower deleted")
        return removed

    def delete_link(self, link_id: str) -> Link | None:
        removed = self.model.delete_link(link_id)
        if removed is not None:
            self.deselect_all()
            self.notifier.notify("Link deleted")
        return removed

    def cancel_frequency_change(self, tower_id: str) -> bool:
        """Dismiss the confirmation prompt; the tower keeps its frequency."""
        if self._decision_tower_id == tower_id:
            self._decision_tower_id = None
        cancelled = self.model.cancel_pending(tower_id)
        if cancelled:
            self.notifier.notify("Frequency change cancelled")
        return cancelled

    def _abandon_decision(self) -> None:
        tower_id = self._decision_tower_id
        if tower_id is None:
            return
        self._decision_tower_id = None
        if self.model.cancel_pending(tower_id):
            logger.debug("Frequency change prompt for %s abandoned", tower_id)

    def _report_update(self, result: TowerUpdate) -> None:
        if result.status is UpdateStatus.APPLIED:
            self.notifier.notify("Updated successfully", NoticeLevel.SUCCESS)
        elif result.status is UpdateStatus.PENDING_CONFIRMATION:
            self.notifier.notify(
                "Changing frequency will remove "
                f"{len(result.affected_link_ids)} connected link(s). Continue?"
            )
        elif result.status is UpdateStatus.DECLINED:
            self.notifier.notify("Frequency change cancelled")

    # -----------------------------------------------------------------------
    # NetworkListener - mirror the model on the renderer
    # -----------------------------------------------------------------------
    def tower_added(self, tower: Tower) -> None:
        self.renderer.draw_tower_marker(tower.id, tower.position, StyleVariant.DEFAULT)

    def tower_updated(self, tower: Tower) -> None:
        style = (
            StyleVariant.SELECTED
            if self._is_selected(EntityKind.TOWER, tower.id)
            else StyleVariant.DEFAULT
        )
        self.renderer.draw_tower_marker(tower.id, tower.position, style)
        for link in self.model.links_incident_to(tower.id):
            self._draw_link(link, self._link_style(link.id))

    def tower_removed(self, tower: Tower) -> None:
        self.renderer.remove_visual(tower.id)
        if self._is_selected(EntityKind.TOWER, tower.id):
            self._selection = None
        if self._pending_tower_id == tower.id:
            self._pending_tower_id = None
            self._transition(InteractionState.LINK_AWAIT_FIRST)
        if self._decision_tower_id == tower.id:
            self._decision_tower_id = None

    def link_added(self, link: Link) -> None:
        self._draw_link(link, StyleVariant.DEFAULT)

    def link_removed(self, link: Link) -> None:
        self.renderer.remove_visual(link.id)
        if self._clearance_link_id == link.id:
            self._hide_clearance()
        if self._is_selected(EntityKind.LINK, link.id):
            self._selection = None

    # -----------------------------------------------------------------------
    # Drawing helpers
    # -----------------------------------------------------------------------
    def _endpoints(self, link: Link) -> tuple[Tower, Tower] | None:
        source = self.model.find_tower(link.source_tower_id)
        target = self.model.find_tower(link.target_tower_id)
        if source is None or target is None:
            return None
        return source, target

    def _draw_link(self, link: Link, style: StyleVariant) -> None:
        endpoints = self._endpoints(link)
        if endpoints is None:
            return
        source, target = endpoints
        path_m = distance(source.position, target.position)
        label = link_label(path_m, source.frequency_ghz)
        self.renderer.draw_link_line(
            link.id, source.position, target.position, style, label
        )

    def _show_clearance(self, link: Link) -> None:
        endpoints = self._endpoints(link)
        if endpoints is None:
            return
        source, target = endpoints

        if self.settings.clearance_geometry == "geodesic":
            points = geodesic_fresnel_polygon(
                source.position,
                target.position,
                source.frequency_ghz,
                steps=self.settings.fresnel_steps,
            )
        elif self.projector is None:
            logger.warning(
                "No screen projector; clearance outline for %s skipped", link.id
            )
            return
        else:
            points = fresnel_clearance_polygon(
                source.position,
                target.position,
                source.frequency_ghz,
                self.projector,
                steps=self.settings.fresnel_steps,
            )

        if not points:
            self._hide_clearance()
            return
        self.renderer.draw_polygon(
            clearance_visual_id(link.id), points, StyleVariant.CLEARANCE
        )
        self._clearance_link_id = link.id

    def _hide_clearance(self) -> None:
        if self._clearance_link_id is not None:
            self.renderer.remove_visual(clearance_visual_id(self._clearance_link_id))
            self._clearance_link_id = None
