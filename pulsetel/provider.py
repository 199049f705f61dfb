"""Telemetry provider that dispatches events and spans to registered handlers."""

from __future__ import annotations

import functools
import logging
import threading
import time
import traceback
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .config import TelemetryConfig
from .handler import HandleEventFunc, SpanFunc, TelemetryHandler
from .pool import Pool

__all__ = ["Telemetry"]

_log = logging.getLogger(__name__)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class _Executable:
    handler_id: str
    handler: HandleEventFunc
    config: Any


class Telemetry:
    """Routes triggered events to every handler registered for them.

    Handlers are keyed by their ``id()``; adding a handler with an id that is
    already registered replaces the earlier one. When the config allows
    concurrent execution, handler functions run on a worker pool and events
    that the pool cannot accept are dropped.
    """

    def __init__(self, config: TelemetryConfig) -> None:
        self._config = config
        self._handlers: Dict[str, TelemetryHandler] = {}
        self._lock = threading.RLock()
        self._pool: Optional[Pool] = None
        if config.allow_concurrent_execution:
            self._pool = Pool(config.concurrent_pool_size, config.concurrent_buffer_size)
            self._pool.start_workers()

    def __enter__(self) -> "Telemetry":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def add_handlers(self, *handlers: TelemetryHandler) -> None:
        """Register handlers, replacing any already registered under the same id."""
        with self._lock:
            for handler in handlers:
                self._handlers[handler.id()] = handler

    def remove_handlers(self, *handlers: TelemetryHandler) -> None:
        """Unregister handlers by their id; unknown ids are ignored."""
        with self._lock:
            for handler in handlers:
                self._handlers.pop(handler.id(), None)

    def trigger_event(
        self,
        event: str,
        measurement: Dict[str, Any],
        metadata: Dict[str, Any],
    ) -> None:
        """Invoke every handler function registered for ``event``."""
        with self._lock:
            executables = self._executables_for(event)
        for executable in executables:
            if self._pool is not None:
                self._pool.submit(
                    functools.partial(
                        self._run_safely, executable, event, measurement, metadata
                    )
                )
            else:
                self._run_safely(executable, event, measurement, metadata)

    def trigger_span(
        self,
        event: str,
        metadata: Dict[str, Any],
        span_func: SpanFunc,
    ) -> Any:
        """Run ``span_func`` between ``<event>.start`` and ``<event>.end`` events.

        The end event carries the span's measurement extended with
        ``duration`` and ``end_time`` (milliseconds). If ``span_func`` raises,
        a ``<event>.panic`` event is triggered and the exception propagates.
        If it returns an error, that error is raised after the end event.
        Otherwise the span's result is returned.
        """
        try:
            start_time = _now_ms()
            self.trigger_event(event + ".start", {"start_time": start_time}, metadata)

            result, error, span_measurement, span_metadata = span_func()

            end_time = _now_ms()
            if span_measurement is None:
                span_measurement = {}
            span_measurement["duration"] = end_time - start_time
            span_measurement["end_time"] = end_time
            self.trigger_event(event + ".end", span_measurement, span_metadata)
        except BaseException as exc:
            panic_metadata = {
                "error": exc,
                "errorTime": _now_ms(),
                "stackTrace": traceback.format_exc(),
            }
            self.trigger_event(event + ".panic", {}, panic_metadata)
            raise

        if error is not None:
            raise error
        return result

    def close(self) -> None:
        """Stop the worker pool, if any, waiting for running handlers."""
        if self._pool is not None:
            self._pool.stop()

    def _executables_for(self, event: str) -> List[_Executable]:
        return [
            _Executable(handler.id(), registrar.handler, handler.config())
            for handler in self._handlers.values()
            for registrar in handler.attached_handlers()
            if registrar.event == event
        ]

    @staticmethod
    def _run_safely(
        executable: _Executable,
        event: str,
        measurement: Dict[str, Any],
        metadata: Dict[str, Any],
    ) -> None:
        try:
            executable.handler(event, measurement, metadata, executable.config)
        except Exception:
            _log.error(
                "Handler raised:\n  Handler ID: %s\n  Event: %s",
                executable.handler_id,
                event,
                exc_info=True,
            )