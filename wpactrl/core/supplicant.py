"""wpa_supplicant commands and typed events on top of a control connection."""

from __future__ import annotations

from typing import Iterator

from wpactrl.core.events import Ctrl, SupplicantEvents
from wpactrl.core.model import Network, SupplicantEvent
from wpactrl.core.networks import parse_network_list


class SupplicantCtrl:
    # Not all supplicant commands are wrapped; they are added as needed.
    # Anything else can go through `ctrl` directly.

    def __init__(self, ctrl: Ctrl) -> None:
        self._events = SupplicantEvents(ctrl)

    @property
    def ctrl(self) -> Ctrl:
        return self._events.ctrl

    def events(self) -> Iterator[SupplicantEvent]:
        return self._events.events()

    def next_event(self, timeout_s: float | None = None) -> SupplicantEvent:
        return self._events.next_event(timeout_s)

    def close(self) -> None:
        self._events.close()

    def add_network(self) -> str:
        """Create an empty network and return the id the daemon assigned."""
        return self.ctrl.fail_command("ADD_NETWORK")

    def set_network(self, network_id: str, key: str, value: str) -> None:
        self.ctrl.ok_command(f'SET_NETWORK {network_id} {key} "{value}"')

    def set_ssid(self, network_id: str, ssid: str) -> None:
        self.set_network(network_id, "ssid", ssid)

    def set_psk(self, network_id: str, psk: str) -> None:
        self.set_network(network_id, "psk", psk)

    def enable_network(self, network_id: str) -> None:
        self.ctrl.ok_command(f"ENABLE_NETWORK {network_id}")

    def remove_network(self, network_id: str) -> None:
        self.ctrl.ok_command(f"REMOVE_NETWORK {network_id}")

    def list_networks(self) -> list[Network]:
        return parse_network_list(self.ctrl.fail_command("LIST_NETWORKS"))
