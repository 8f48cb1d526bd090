"""Classification of unsolicited supplicant messages into typed events."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterator, Protocol

from wpactrl.core.errors import CommandTimeoutError, ConnectionClosedError
from wpactrl.core.model import (
    BssAddedEvent,
    ConnectedEvent,
    DisconnectedEvent,
    GenericEvent,
    NetworkNotFoundEvent,
    ScanFailedEvent,
    ScanResultsEvent,
    ScanStartedEvent,
    SupplicantEvent,
)
from wpactrl.core.queues import ClosableQueue, Empty, QueueClosed
from wpactrl.core.reasons import format_reason, parse_reason

LOGGER = logging.getLogger(__name__)


class Ctrl(Protocol):
    """What the event layer needs from a control connection."""

    def command(self, cmd: str) -> str: ...

    def ok_command(self, cmd: str) -> None: ...

    def fail_command(self, cmd: str) -> str: ...

    def attach(self) -> None: ...

    def detach(self) -> None: ...

    def unsolicited(self) -> Iterator[str]: ...

    def close(self) -> None: ...


def disconnected_event(message: str) -> DisconnectedEvent:
    code = parse_reason(message)
    return DisconnectedEvent(raw=message, reason_code=code, reason=format_reason(code))


# First match wins; the prefixes do not overlap.
_PREFIXES: tuple[tuple[str, Callable[[str], SupplicantEvent]], ...] = (
    ("CTRL-EVENT-CONNECTED", ConnectedEvent),
    ("CTRL-EVENT-DISCONNECTED", disconnected_event),
    ("CTRL-EVENT-NETWORK-NOT-FOUND", NetworkNotFoundEvent),
    ("CTRL-EVENT-SCAN-FAILED", ScanFailedEvent),
    ("CTRL-EVENT-SCAN-STARTED", ScanStartedEvent),
    ("CTRL-EVENT-SCAN-RESULTS", ScanResultsEvent),
    ("CTRL-EVENT-BSS-ADDED", BssAddedEvent),
)


def classify(message: str) -> SupplicantEvent:
    for prefix, build in _PREFIXES:
        if message.startswith(prefix):
            return build(message)
    return GenericEvent(raw=message)


class SupplicantEvents:
    """Typed event stream on top of a control connection.

    A background thread drains ``ctrl.unsolicited()`` and hands each decoded
    event to the consumer, waiting until the consumer has taken it before
    reading the next raw message.
    """

    def __init__(self, ctrl: Ctrl) -> None:
        self._ctrl = ctrl
        self._events: ClosableQueue[SupplicantEvent] = ClosableQueue(handoff=True)
        self._thread = threading.Thread(
            target=self._classify_loop,
            name="wpactrl-events",
            daemon=True,
        )
        self._thread.start()

    @property
    def ctrl(self) -> Ctrl:
        return self._ctrl

    def _classify_loop(self) -> None:
        try:
            for msg in self._ctrl.unsolicited():
                event = classify(msg)
                LOGGER.debug("Event %s: %s", event.kind.value, msg)
                try:
                    self._events.put(event)
                except QueueClosed:
                    return
        finally:
            self._events.close()

    def events(self) -> Iterator[SupplicantEvent]:
        return iter(self._events)

    def next_event(self, timeout_s: float | None = None) -> SupplicantEvent:
        try:
            return self._events.get(timeout=timeout_s)
        except Empty:
            raise CommandTimeoutError(f"no event within {timeout_s}s") from None
        except QueueClosed:
            raise ConnectionClosedError("event stream closed") from None

    def close(self) -> None:
        self._ctrl.close()
        self._events.close()
