"""Domain Port(s) for observing network changes.

Renderers and controllers implement NetworkListener to mirror the model
without the model holding any rendering handles.
"""

from __future__ import annotations

from typing import Protocol

from .entities import Link, Tower


class NetworkListener(Protocol):
    """Receives one callback per committed mutation.

    Cascading deletes report every link removal individually before the
    tower removal that caused them.
    """

    def tower_added(self, tower: Tower) -> None: ...

    def tower_updated(self, tower: Tower) -> None: ...

    def tower_removed(self, tower: Tower) -> None: ...

    def link_added(self, link: Link) -> None: ...

    def link_removed(self, link: Link) -> None: ...
