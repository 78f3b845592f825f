"""
Observability port: components receive an EventSink instead of reaching
for a module-level logger.
"""

import logging
from typing import Any, Optional, Protocol


class EventSink(Protocol):
    def emit(self, event: str, level: int = logging.INFO, **fields: Any) -> None:
        ...

    def child(self, suffix: str) -> "EventSink":
        ...


def _render(fields: dict[str, Any]) -> str:
    return " ".join(f"{key}={value}" for key, value in fields.items())


class LoggingEventSink:
    """Writes `event key=value ...` lines through a stdlib logger."""

    def __init__(self, name: str = "mcp_relay", logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(name)

    def child(self, suffix: str) -> "LoggingEventSink":
        return LoggingEventSink(logger=self._logger.getChild(suffix))

    def emit(self, event: str, level: int = logging.INFO, **fields: Any) -> None:
        if fields:
            self._logger.log(level, "%s %s", event, _render(fields))
        else:
            self._logger.log(level, "%s", event)

