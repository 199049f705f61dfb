"""Handler registration types shared by telemetry providers and handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

__all__ = [
    "HandleEventFunc",
    "SpanFunc",
    "EventRegistrar",
    "TelemetryHandler",
]

HandleEventFunc = Callable[[str, Dict[str, Any], Dict[str, Any], Any], None]
"""Called as handler(event, measurement, metadata, config)."""

SpanFunc = Callable[
    [], Tuple[Any, Optional[BaseException], Dict[str, Any], Dict[str, Any]]
]
"""Returns (result, error, measurement, metadata) for a span."""


@dataclass(frozen=True)
class EventRegistrar:
    """Binds an event name to the function that handles it."""

    event: str
    handler: HandleEventFunc


class TelemetryHandler:
    """A named group of event handlers sharing one config.

    Subclasses may override ``attached_handlers`` to compute their
    registrations instead of passing them in.
    """

    def __init__(
        self,
        handler_id: str,
        config: Any = None,
        registrars: Iterable[EventRegistrar] = (),
    ) -> None:
        self._id = handler_id
        self._config = config
        self._registrars: List[EventRegistrar] = list(registrars)

    def id(self) -> str:
        """Return the identifier the provider registers this handler under."""
        return self._id

    def attached_handlers(self) -> List[EventRegistrar]:
        """Return the event registrations of this handler."""
        return list(self._registrars)

    def config(self) -> Any:
        """Return the config passed to every handler function."""
        return self._config