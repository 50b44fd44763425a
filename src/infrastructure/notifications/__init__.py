"""Infrastructure adapters for operator notices."""

from .logging_notifier import LoggingNotifier, Notice

__all__ = ["LoggingNotifier", "Notice"]
