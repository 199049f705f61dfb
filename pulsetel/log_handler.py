"""A telemetry handler that writes events to the log."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from .handler import EventRegistrar, HandleEventFunc, TelemetryHandler

__all__ = ["LogHandler", "handle_event"]

_log = logging.getLogger(__name__)

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "error": logging.ERROR,
    "panic": logging.CRITICAL,
}


def handle_event(level: str) -> HandleEventFunc:
    """Return a handler function that logs each event tagged with ``level``."""
    log_level = _LEVELS.get(level, logging.INFO)

    def handler(
        event: str,
        measurement: Dict[str, Any],
        metadata: Dict[str, Any],
        config: Any,
    ) -> None:
        _log.log(
            log_level,
            "event: %s, [%s] [%s], metadata: %s",
            event,
            level,
            measurement,
            metadata,
        )

    return handler


class LogHandler(TelemetryHandler):
    """Logs the ``gopulse.event.test`` family of events."""

    def __init__(self, handler_id: str, config: Any) -> None:
        super().__init__(handler_id, config)

    def id(self) -> str:
        """Return the identifier of this handler."""
        return self._id

    def config(self) -> Any:
        """Return the config passed to the log functions."""
        return self._config

    def attached_handlers(self) -> List[EventRegistrar]:
        """Return the events this handler logs, each with its level."""
        return [
            EventRegistrar("gopulse.event.test", handle_event("info")),
            EventRegistrar("gopulse.event.test.error", handle_event("error")),
            EventRegistrar("gopulse.event.test.panic", handle_event("panic")),
            EventRegistrar("gopulse.event.test.start", handle_event("debug")),
            EventRegistrar("gopulse.event.test.end", handle_event("info")),
        ]