"""Stable public API for building tooling on top of wpactrl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from wpactrl.core.config import ClientConfig, load_config
from wpactrl.core.ctrl import WPACtrl
from wpactrl.core.errors import (
    CommandFailedError,
    CommandTimeoutError,
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
    ConnectionClosedError,
    NetworkParseError,
    TransportConnectError,
    TransportError,
    TransportReceiveError,
    TransportSendError,
    WpaCtrlError,
)
from wpactrl.core.events import SupplicantEvents, classify
from wpactrl.core.model import (
    BssAddedEvent,
    ConnectedEvent,
    DisconnectedEvent,
    EventKind,
    GenericEvent,
    Network,
    NetworkNotFoundEvent,
    ScanFailedEvent,
    ScanResultsEvent,
    ScanStartedEvent,
    SupplicantEvent,
)
from wpactrl.core.supplicant import SupplicantCtrl
from wpactrl.transports.base import Conn, ListenConn
from wpactrl.transports.memory import MemoryConn
from wpactrl.transports.unix import UnixDatagramConn, UnixListenConn

__all__ = [
    "WpaCtrlError",
    "TransportError",
    "TransportConnectError",
    "TransportSendError",
    "TransportReceiveError",
    "CommandTimeoutError",
    "ConnectionClosedError",
    "CommandFailedError",
    "NetworkParseError",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "ClientConfig",
    "load_config",
    "Network",
    "EventKind",
    "SupplicantEvent",
    "ConnectedEvent",
    "DisconnectedEvent",
    "NetworkNotFoundEvent",
    "ScanFailedEvent",
    "ScanStartedEvent",
    "ScanResultsEvent",
    "BssAddedEvent",
    "GenericEvent",
    "classify",
    "Conn",
    "ListenConn",
    "MemoryConn",
    "UnixDatagramConn",
    "UnixListenConn",
    "WPACtrl",
    "SupplicantEvents",
    "SupplicantCtrl",
    "Client",
]


class Client:
    """Public client for a wpa_supplicant control interface.

    A `Client` owns one control connection and exposes the network commands
    and the typed event stream. Use `Client.open()` to connect to the socket
    named by the configuration, or pass any `Conn` to the constructor.
    """

    def __init__(self, conn: Conn, *, config: ClientConfig | None = None) -> None:
        self.config = config or ClientConfig()
        self._ctrl = WPACtrl(
            conn,
            self.config.cmd_timeout_s,
            event_queue_size=self.config.event_queue_size,
            read_buffer_size=self.config.read_buffer_size,
            poll_interval_s=self.config.poll_interval_s,
        )
        self._supplicant = SupplicantCtrl(self._ctrl)

    @classmethod
    def open(
        cls,
        config: ClientConfig | None = None,
        *,
        config_path: str | Path | None = None,
    ) -> Client:
        config = config or load_config(config_path)
        conn = UnixDatagramConn.connect(config.ctrl_dir, config.interface)
        return cls(conn, config=config)

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def ctrl(self) -> WPACtrl:
        return self._ctrl

    def command(self, cmd: str) -> str:
        return self._ctrl.command(cmd)

    def ping(self) -> None:
        self._ctrl.ping()

    def attach(self) -> None:
        self._ctrl.attach()

    def detach(self) -> None:
        self._ctrl.detach()

    def events(self) -> Iterator[SupplicantEvent]:
        return self._supplicant.events()

    def next_event(self, timeout_s: float | None = None) -> SupplicantEvent:
        return self._supplicant.next_event(timeout_s)

    def list_networks(self) -> list[Network]:
        return self._supplicant.list_networks()

    def add_network(self, ssid: str | None = None, psk: str | None = None, *, enable: bool = False) -> str:
        """Add a network, optionally configuring and enabling it; return its id."""
        network_id = self._supplicant.add_network()
        if ssid is not None:
            self._supplicant.set_ssid(network_id, ssid)
        if psk is not None:
            self._supplicant.set_psk(network_id, psk)
        if enable:
            self._supplicant.enable_network(network_id)
        return network_id

    def set_ssid(self, network_id: str, ssid: str) -> None:
        self._supplicant.set_ssid(network_id, ssid)

    def set_psk(self, network_id: str, psk: str) -> None:
        self._supplicant.set_psk(network_id, psk)

    def enable_network(self, network_id: str) -> None:
        self._supplicant.enable_network(network_id)

    def remove_network(self, network_id: str) -> None:
        self._supplicant.remove_network(network_id)

    def close(self) -> None:
        self._supplicant.close()
