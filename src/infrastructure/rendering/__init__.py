"""Infrastructure adapters for the map surface."""

from .memory_renderer import InMemoryRenderer, Visual, VisualKind

__all__ = ["InMemoryRenderer", "Visual", "VisualKind"]
