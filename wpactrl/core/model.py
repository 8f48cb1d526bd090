"""Core data models shared by the control connection, events, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union


@dataclass(frozen=True)
class Network:
    id: str
    ssid: str


class EventKind(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    NETWORK_NOT_FOUND = "network-not-found"
    SCAN_FAILED = "scan-failed"
    SCAN_STARTED = "scan-started"
    SCAN_RESULTS = "scan-results"
    BSS_ADDED = "bss-added"
    GENERIC = "generic"


@dataclass(frozen=True)
class ConnectedEvent:
    kind: ClassVar[EventKind] = EventKind.CONNECTED
    raw: str


@dataclass(frozen=True)
class DisconnectedEvent:
    """Disconnect notification.

    `reason_code` is the bare numeric code ("0" when absent) and `reason`
    is rendered as "<code>:<label>", with an empty label for codes outside
    the reason table.
    """

    kind: ClassVar[EventKind] = EventKind.DISCONNECTED
    raw: str
    reason_code: str
    reason: str


@dataclass(frozen=True)
class NetworkNotFoundEvent:
    kind: ClassVar[EventKind] = EventKind.NETWORK_NOT_FOUND
    raw: str


@dataclass(frozen=True)
class ScanFailedEvent:
    kind: ClassVar[EventKind] = EventKind.SCAN_FAILED
    raw: str


@dataclass(frozen=True)
class ScanStartedEvent:
    kind: ClassVar[EventKind] = EventKind.SCAN_STARTED
    raw: str


@dataclass(frozen=True)
class ScanResultsEvent:
    kind: ClassVar[EventKind] = EventKind.SCAN_RESULTS
    raw: str


@dataclass(frozen=True)
class BssAddedEvent:
    kind: ClassVar[EventKind] = EventKind.BSS_ADDED
    raw: str


@dataclass(frozen=True)
class GenericEvent:
    """Catch-all for events that have no dedicated variant."""

    kind: ClassVar[EventKind] = EventKind.GENERIC
    raw: str


SupplicantEvent = Union[
    ConnectedEvent,
    DisconnectedEvent,
    NetworkNotFoundEvent,
    ScanFailedEvent,
    ScanStartedEvent,
    ScanResultsEvent,
    BssAddedEvent,
    GenericEvent,
]
