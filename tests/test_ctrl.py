from __future__ import annotations

import threading
import time

import pytest

from wpactrl.core.ctrl import WPACtrl
from wpactrl.core.errors import (
    CommandFailedError,
    CommandTimeoutError,
    ConnectionClosedError,
    TransportSendError,
)
from wpactrl.testing.mock_supplicant import MockSupplicant
from wpactrl.transports.memory import MemoryConn

POLL_S = 0.02


class BrokenWriteConn:
    def write(self, payload: bytes) -> int:
        raise TransportSendError("boom")

    def read(self, bufsize: int, timeout_s: float | None = None) -> bytes | None:
        time.sleep(timeout_s or 0)
        return None

    def close(self) -> None:
        pass


def _next_unsolicited(ctrl: WPACtrl, timeout_s: float = 1.0) -> str:
    result: list[str] = []

    def _take() -> None:
        for msg in ctrl.unsolicited():
            result.append(msg)
            return

    worker = threading.Thread(target=_take, daemon=True)
    worker.start()
    worker.join(timeout_s)
    assert result, "no unsolicited message"
    return result[0]


def test_command(mock_ctrl) -> None:
    _, ctrl = mock_ctrl
    assert ctrl.command("PING") == "PONG"


def test_command_timeout(conn_pair) -> None:
    _, client = conn_pair
    ctrl = WPACtrl(client, 0.2, poll_interval_s=POLL_S)

    started = time.monotonic()
    with pytest.raises(CommandTimeoutError):
        ctrl.command("PING")
    elapsed = time.monotonic() - started

    assert 0.2 <= elapsed < 1.0
    ctrl.close()


def test_timeout_is_recoverable(conn_pair) -> None:
    listen, client = conn_pair
    ctrl = WPACtrl(client, 0.1, poll_interval_s=POLL_S)
    with pytest.raises(CommandTimeoutError):
        ctrl.command("PING")

    # Nobody answered; throw the unanswered command away and bring the daemon up.
    assert listen.read(4096, timeout_s=0.5) == b"PING"
    mock = MockSupplicant(listen, poll_interval_s=POLL_S)
    ctrl.cmd_timeout_s = 1.0
    assert ctrl.command("PING") == "PONG"

    ctrl.close()
    mock.stop()


def test_ok_command(mock_ctrl) -> None:
    mock, ctrl = mock_ctrl
    mock.expect("TEST_CMD", "OK")
    ctrl.ok_command("TEST_CMD")


@pytest.mark.parametrize("reply", ["FAIL", "PONG", "1", "UNKNOWN COMMAND"])
def test_ok_command_rejects_anything_but_ok(mock_ctrl, reply: str) -> None:
    mock, ctrl = mock_ctrl
    mock.expect("TEST_CMD", reply)
    with pytest.raises(CommandFailedError) as exc:
        ctrl.ok_command("TEST_CMD")
    assert str(exc.value) == reply
    assert exc.value.reply == reply


def test_fail_command(mock_ctrl) -> None:
    mock, ctrl = mock_ctrl
    mock.expect("TEST_BAD_CMD", "FAIL")
    with pytest.raises(CommandFailedError) as exc:
        ctrl.fail_command("TEST_BAD_CMD")
    assert str(exc.value) == "FAIL"


@pytest.mark.parametrize("reply", ["OK", "0", "some data"])
def test_fail_command_passes_other_replies_through(mock_ctrl, reply: str) -> None:
    mock, ctrl = mock_ctrl
    mock.expect("TEST_CMD", reply)
    assert ctrl.fail_command("TEST_CMD") == reply


def test_write_error_is_wrapped() -> None:
    ctrl = WPACtrl(BrokenWriteConn(), 0.1, poll_interval_s=POLL_S)
    with pytest.raises(TransportSendError) as exc:
        ctrl.command("PING")
    assert "command error" in str(exc.value)
    assert isinstance(exc.value.__cause__, TransportSendError)
    ctrl.close()


def test_attach_and_unsolicited(mock_ctrl) -> None:
    mock, ctrl = mock_ctrl
    ctrl.attach()
    assert mock.attached

    mock.send_unsolicited("<2>CTRL-EVENT-SOMETHING")
    assert _next_unsolicited(ctrl) == "CTRL-EVENT-SOMETHING"


def test_unsolicited_preserves_order(mock_ctrl) -> None:
    mock, ctrl = mock_ctrl
    ctrl.attach()
    for i in range(5):
        mock.send_unsolicited(f"<3>EVENT-{i}  ")

    received = [_next_unsolicited(ctrl) for _ in range(5)]
    assert received == [f"EVENT-{i}" for i in range(5)]


def test_events_do_not_disturb_replies(mock_ctrl) -> None:
    mock, ctrl = mock_ctrl
    ctrl.attach()
    mock.send_unsolicited("<1>CTRL-EVENT-SCAN-STARTED")
    assert ctrl.command("PING") == "PONG"
    assert _next_unsolicited(ctrl) == "CTRL-EVENT-SCAN-STARTED"


def test_malformed_marker_is_dropped(conn_pair, caplog: pytest.LogCaptureFixture) -> None:
    listen, client = conn_pair
    ctrl = WPACtrl(client, 0.1, poll_interval_s=POLL_S)

    listen.write(b"<2")
    listen.write(b"<2x broken")
    listen.write(b"<1>NEXT")

    assert _next_unsolicited(ctrl) == "NEXT"
    assert "invalid unsolicited message" in caplog.text
    ctrl.close()


def test_reply_without_waiter_fills_slot_and_extra_is_dropped(conn_pair, caplog: pytest.LogCaptureFixture) -> None:
    listen, client = conn_pair
    ctrl = WPACtrl(client, 0.2, poll_interval_s=POLL_S)

    listen.write(b"stray")
    listen.write(b"second")
    listen.write(b"<1>MARK")
    # The reader handles datagrams in order, so both replies were routed by now.
    assert _next_unsolicited(ctrl) == "MARK"
    assert "unexpected solicited message" in caplog.text

    assert ctrl.command("PING") == "stray"
    with pytest.raises(CommandTimeoutError):
        ctrl.command("PING")
    ctrl.close()


def test_closed_while_waiting(conn_pair) -> None:
    listen, client = conn_pair
    ctrl = WPACtrl(client, 5.0, poll_interval_s=POLL_S)
    errors: list[Exception] = []

    def _call() -> None:
        try:
            ctrl.command("PING")
        except Exception as exc:
            errors.append(exc)

    worker = threading.Thread(target=_call, daemon=True)
    worker.start()
    assert listen.read(4096, timeout_s=1.0) == b"PING"
    listen.close()
    worker.join(2.0)

    assert not worker.is_alive()
    assert len(errors) == 1
    assert isinstance(errors[0], ConnectionClosedError)
    ctrl.close()


def test_close_unblocks_unsolicited_consumer(conn_pair) -> None:
    _, client = conn_pair
    ctrl = WPACtrl(client, 0.05, poll_interval_s=POLL_S)
    received: list[list[str]] = []

    worker = threading.Thread(target=lambda: received.append(list(ctrl.unsolicited())), daemon=True)
    worker.start()
    time.sleep(0.05)
    ctrl.close()
    worker.join(2.0)

    assert not worker.is_alive()
    assert received == [[]]


def test_close_detaches(mock_ctrl) -> None:
    mock, ctrl = mock_ctrl
    ctrl.attach()
    ctrl.close()
    assert mock.commands[-1] == "DETACH"
    assert ctrl.closed


def test_second_close_is_rejected(mock_ctrl) -> None:
    _, ctrl = mock_ctrl
    ctrl.close()
    with pytest.raises(ConnectionClosedError):
        ctrl.close()


def test_command_after_close_fails(mock_ctrl) -> None:
    _, ctrl = mock_ctrl
    ctrl.close()
    with pytest.raises((TransportSendError, ConnectionClosedError)):
        ctrl.command("PING")


def test_ping(mock_ctrl) -> None:
    mock, ctrl = mock_ctrl
    ctrl.ping()
    mock.expect("PING", "NOPE")
    with pytest.raises(CommandFailedError):
        ctrl.ping()


def test_context_manager_closes(conn_pair) -> None:
    listen, client = conn_pair
    with WPACtrl(client, 0.05, poll_interval_s=POLL_S) as ctrl:
        pass
    assert ctrl.closed
    assert listen.read(4096, timeout_s=0.5) == b"DETACH"


def test_large_datagram_is_truncated(conn_pair) -> None:
    listen, client = conn_pair
    ctrl = WPACtrl(client, 0.1, read_buffer_size=16, poll_interval_s=POLL_S)
    listen.write(b"<2>" + b"A" * 100)
    assert _next_unsolicited(ctrl) == "A" * 13
    ctrl.close()


def test_closed_listen_side_does_not_hang_memory_conn() -> None:
    listen = MemoryConn()
    client = listen.dial()
    ctrl = WPACtrl(client, 0.1, poll_interval_s=POLL_S)
    listen.close()
    with pytest.raises((TransportSendError, ConnectionClosedError)):
        ctrl.command("PING")
    ctrl.close()
