"""Logging adapter for the Notifier port.

Routes operator notices to the standard logging module and remembers them
so headless callers can inspect what the operator would have seen.
"""

from __future__ import annotations

import logging
from collections import deque

from pydantic import BaseModel, ConfigDict

from application.ports import NoticeLevel

_LOG_LEVELS: dict[NoticeLevel, int] = {
    NoticeLevel.INFO: logging.INFO,
    NoticeLevel.SUCCESS: logging.INFO,
    NoticeLevel.ERROR: logging.WARNING,  # Recoverable, shown to the operator
}


class Notice(BaseModel):
    message: str
    level: NoticeLevel

    model_config = ConfigDict(frozen=True)


class LoggingNotifier:
    """Notifier that logs each notice under a dedicated logger.

    Only the most recent history_size notices are kept; the log holds the rest.
    """

    def __init__(
        self, logger_name: str = "planner.notices", history_size: int = 50
    ) -> None:
        if history_size < 1:
            raise ValueError(f"history_size must be >= 1, got {history_size}")
        self._logger = logging.getLogger(logger_name)
        self.history: deque[Notice] = deque(maxlen=history_size)

    @property
    def last(self) -> Notice | None:
        return self.history[-1] if self.history else None

    def notify(self, message: str, level: NoticeLevel = NoticeLevel.INFO) -> None:
        notice = Notice(message=message, level=NoticeLevel(level))
        self.history.append(notice)
        self._logger.log(
            _LOG_LEVELS[notice.level], "[%s] %s", notice.level.value, message
        )
