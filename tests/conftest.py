from __future__ import annotations

from collections.abc import Iterator

import pytest

from wpactrl.core.ctrl import WPACtrl
from wpactrl.core.supplicant import SupplicantCtrl
from wpactrl.testing.mock_supplicant import MockSupplicant
from wpactrl.transports.memory import MemoryConn

POLL_S = 0.02


@pytest.fixture
def conn_pair() -> tuple[MemoryConn, MemoryConn]:
    """Listening side and the client side dialed from it."""
    listen = MemoryConn()
    return listen, listen.dial()


@pytest.fixture
def mock_ctrl(conn_pair: tuple[MemoryConn, MemoryConn]) -> Iterator[tuple[MockSupplicant, WPACtrl]]:
    listen, client = conn_pair
    mock = MockSupplicant(listen, poll_interval_s=POLL_S)
    ctrl = WPACtrl(client, 1.0, poll_interval_s=POLL_S)
    yield mock, ctrl
    if not ctrl.closed:
        ctrl.close()
    mock.stop()


@pytest.fixture
def mock_supplicant(conn_pair: tuple[MemoryConn, MemoryConn]) -> Iterator[tuple[MockSupplicant, SupplicantCtrl]]:
    listen, client = conn_pair
    mock = MockSupplicant(listen, poll_interval_s=POLL_S)
    ctrl = WPACtrl(client, 5.0, poll_interval_s=POLL_S)
    supplicant = SupplicantCtrl(ctrl)
    yield mock, supplicant
    if not ctrl.closed:
        supplicant.close()
    mock.stop()
