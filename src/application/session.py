"""Planning session - owned context for one operator session.

Ties a NetworkModel and its InteractionController to the session lifetime
instead of module-level state. Usable as a context manager:

    >>> with PlannerSession.start(renderer, notifier, projector) as session:
    ...     session.controller.set_mode("tower")
    ...     session.controller.handle_map_click(GeoPoint(latitude=0, longitude=0))
"""

from __future__ import annotations

import logging
from types import TracebackType

from domain.geometry.ports import ScreenProjector
from domain.network.model import NetworkModel

from .interaction import InteractionController
from .ports import Notifier, Renderer
from .settings import PlannerSettings

logger = logging.getLogger(__name__)


class PlannerSession:
    """Model + controller pair with explicit start/close."""

    def __init__(self, model: NetworkModel, controller: InteractionController) -> None:
        self.model = model
        self.controller = controller
        self.closed = False

    @classmethod
    def start(
        cls,
        renderer: Renderer,
        notifier: Notifier,
        projector: ScreenProjector | None = None,
        settings: PlannerSettings | None = None,
    ) -> "PlannerSession":
        settings = settings or PlannerSettings()
        model = NetworkModel(
            default_frequency_ghz=settings.default_frequency_ghz,
            name_prefix=settings.tower_name_prefix,
        )
        controller = InteractionController(
            model, renderer, notifier, projector, settings
        )
        logger.info("Planner session started")
        return cls(model, controller)

    def close(self) -> None:
        """Remove every visual and drop all towers and links."""
        if self.closed:
            return
        self.controller.deselect_all()
        # Cascading clear lets the controller remove each visual
        self.model.clear()
        self.controller.detach()
        self.closed = True
        logger.info("Planner session closed")

    def __enter__(self) -> "PlannerSession":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
