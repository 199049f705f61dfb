"""A telemetry handler that records events so tests can assert on them."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .handler import EventRegistrar, TelemetryHandler

__all__ = ["MailData", "MailboxFunc", "Mailer"]


@dataclass(frozen=True)
class MailData:
    """The measurement and metadata of one received event."""

    measurement: Dict[str, Any]
    metadata: Dict[str, Any]


MailboxFunc = Callable[[str, List[MailData]], bool]
"""Called as mailbox_func(event, received); returns whether the check passed."""


class Mailer(TelemetryHandler):
    """Collects every event it is registered for into a per-event mailbox.

    Register the events with ``build_handlers``, add the mailer to a
    telemetry provider, then check what arrived with the assert and refute
    methods. Timeouts are in milliseconds.
    """

    def __init__(self, handler_id: str) -> None:
        super().__init__(handler_id)
        self._mailbox: Dict[str, List[MailData]] = {}
        self._cond = threading.Condition()
        self._version = 0

    def build_handlers(self, *events: str) -> "Mailer":
        """Register a recording handler for each event; return the mailer."""
        with self._cond:
            self._registrars.extend(
                EventRegistrar(event=event, handler=self._record) for event in events
            )
        return self

    def id(self) -> str:
        """Return the identifier of this mailer."""
        return self._id

    def attached_handlers(self) -> List[EventRegistrar]:
        """Return the registrations built so far."""
        with self._cond:
            return list(self._registrars)

    def config(self) -> Any:
        """A mailer has no config."""
        return None

    def assert_receive(self, event: str, timeout: int, mailbox_func: MailboxFunc) -> bool:
        """Wait up to ``timeout`` ms for the mailbox of ``event`` to satisfy ``mailbox_func``."""
        deadline = time.monotonic() + timeout / 1000
        seen = -1
        while True:
            with self._cond:
                while self._version == seen:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        return False
                    self._cond.wait(remaining)
                seen = self._version
                box = self._snapshot(event)
            if box is not None and mailbox_func(event, box):
                return True
            if time.monotonic() >= deadline:
                return False

    def assert_received(self, event: str, mailbox_func: MailboxFunc) -> bool:
        """Return whether ``event`` was received and its mailbox satisfies ``mailbox_func``."""
        with self._cond:
            box = self._snapshot(event)
        return box is not None and bool(mailbox_func(event, box))

    def refute_receive(self, event: str, timeout: int, mailbox_func: MailboxFunc) -> bool:
        """Return the opposite of ``assert_receive``."""
        return not self.assert_receive(event, timeout, mailbox_func)

    def refute_received(self, event: str, mailbox_func: MailboxFunc) -> bool:
        """Return the opposite of ``assert_received``."""
        return not self.assert_received(event, mailbox_func)

    def _snapshot(self, event: str) -> Optional[List[MailData]]:
        box = self._mailbox.get(event)
        return list(box) if box is not None else None

    def _record(
        self,
        event: str,
        measurement: Dict[str, Any],
        metadata: Dict[str, Any],
        config: Any,
    ) -> None:
        with self._cond:
            self._mailbox.setdefault(event, []).append(
                MailData(measurement=measurement, metadata=metadata)
            )
            self._version += 1
            self._cond.notify_all()