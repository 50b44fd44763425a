"""Root pytest configuration for all tests.

Provides headless collaborators so the controller and model can be tested
without a map surface:
- EquirectangularProjector: trivial ScreenProjector (K pixels per degree)
- deterministic id factory for readable entity ids
- model/renderer/notifier/controller factories
"""

from __future__ import annotations

import itertools
from collections.abc import Callable

import pytest

from application.interaction import InteractionController
from application.settings import PlannerSettings
from domain.geometry.value_objects import GeoPoint, ScreenPoint
from domain.network.model import NetworkModel
from infrastructure.notifications import LoggingNotifier
from infrastructure.rendering import InMemoryRenderer


class EquirectangularProjector:
    """Plate carree view: x = lon * K, y = -lat * K (y grows downwards)."""

    def __init__(self, pixels_per_degree: float = 1000.0) -> None:
        self.pixels_per_degree = pixels_per_degree
        self.project_calls = 0

    def project(self, point: GeoPoint) -> ScreenPoint:
        self.project_calls += 1
        k = self.pixels_per_degree
        return ScreenPoint(x=point.longitude * k, y=-point.latitude * k)

    def unproject(self, point: ScreenPoint) -> GeoPoint:
        k = self.pixels_per_degree
        return GeoPoint(latitude=-point.y / k, longitude=point.x / k)


def sequential_ids(prefix: str = "id") -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def projector() -> EquirectangularProjector:
    return EquirectangularProjector()


@pytest.fixture
def model() -> NetworkModel:
    return NetworkModel(id_factory=sequential_ids())


@pytest.fixture
def renderer() -> InMemoryRenderer:
    return InMemoryRenderer()


@pytest.fixture
def notifier() -> LoggingNotifier:
    return LoggingNotifier()


@pytest.fixture
def make_controller(model, renderer, notifier, projector):
    """Factory so tests can pick settings or drop the projector."""

    def _make(
        settings: PlannerSettings | None = None, with_projector: bool = True
    ) -> InteractionController:
        controller = InteractionController(
            model,
            renderer,
            notifier,
            projector if with_projector else None,
            settings,
        )
        renderer.attach(controller)
        return controller

    return _make


@pytest.fixture
def controller(make_controller) -> InteractionController:
    return make_controller()


@pytest.fixture
def equator_pair(model):
    """Two 5.8 GHz towers one degree of longitude apart on the equator."""
    a = model.add_tower(GeoPoint(latitude=0.0, longitude=0.0))
    b = model.add_tower(GeoPoint(latitude=0.0, longitude=1.0))
    return a, b
