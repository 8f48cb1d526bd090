from __future__ import annotations

from pathlib import Path

import pytest

from wpactrl import api
from wpactrl.api import Client, ClientConfig, Network
from wpactrl.core.errors import TransportConnectError
from wpactrl.testing.mock_supplicant import MockSupplicant
from wpactrl.transports.memory import MemoryConn

FAST = ClientConfig(cmd_timeout_s=1.0, poll_interval_s=0.02)


@pytest.fixture
def client_and_mock():
    listen = MemoryConn()
    mock = MockSupplicant(listen, poll_interval_s=0.02)
    client = Client(listen.dial(), config=FAST)
    yield client, mock
    if not client.ctrl.closed:
        client.close()
    mock.stop()


def test_public_client_add_network(client_and_mock) -> None:
    client, mock = client_and_mock

    network_id = client.add_network("foossid", "foopsk", enable=True)
    assert network_id == "0"
    assert mock.commands[-3:] == [
        'SET_NETWORK 0 ssid "foossid"',
        'SET_NETWORK 0 psk "foopsk"',
        "ENABLE_NETWORK 0",
    ]
    assert client.list_networks() == [Network(id="0", ssid="foossid")]

    client.remove_network(network_id)
    assert client.list_networks() == []


def test_public_client_events(client_and_mock) -> None:
    client, mock = client_and_mock
    client.attach()
    mock.send_unsolicited("<2>CTRL-EVENT-CONNECTED - Connection to 00:1a:dd:18:a4:25 completed")

    event = client.next_event(1.0)
    assert event.kind is api.EventKind.CONNECTED


def test_public_client_context_manager() -> None:
    listen = MemoryConn()
    mock = MockSupplicant(listen, poll_interval_s=0.02)
    with Client(listen.dial(), config=FAST) as client:
        client.ping()
        assert client.command("PING") == "PONG"
    assert client.ctrl.closed
    mock.stop()


def test_open_uses_config(tmp_path: Path) -> None:
    config = ClientConfig(ctrl_dir=str(tmp_path), interface="wlan7")
    with pytest.raises(TransportConnectError) as exc:
        Client.open(config)
    assert "wlan7" in str(exc.value)


def test_exports_are_importable() -> None:
    for name in api.__all__:
        assert hasattr(api, name), name
