"""Command/reply demultiplexer for the wpa_supplicant control interface.

For protocol details see https://w1.fi/wpa_supplicant/devel/ctrl_iface_page.html

Replies to commands ("solicited" messages) and events ("unsolicited"
messages) share one datagram socket. Events can arrive at any time and are
prefixed with a priority in angle brackets, e.g. ``<3>CTRL-EVENT-CONNECTED``.
Replies only follow a command and carry no prefix and no correlation id.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterator

from wpactrl.core.errors import (
    CommandFailedError,
    CommandTimeoutError,
    ConnectionClosedError,
    TransportError,
    TransportSendError,
    WpaCtrlError,
)
from wpactrl.core.queues import ClosableQueue, Empty, Full, QueueClosed
from wpactrl.transports.base import Conn

LOGGER = logging.getLogger(__name__)

DEFAULT_CMD_TIMEOUT_S = 1.0
DEFAULT_EVENT_QUEUE_SIZE = 100
# Datagrams longer than this are truncated; the size of the next datagram
# cannot be peeked portably.
DEFAULT_READ_BUFFER_SIZE = 4096
DEFAULT_POLL_INTERVAL_S = 0.2
_JOIN_TIMEOUT_S = 2.0


def _verb(cmd: str) -> str:
    return cmd.split(" ", 1)[0]


class WPACtrl:
    """Command interface to wpa_supplicant or hostapd over one connection.

    A background reader routes every inbound datagram either to the reply
    slot or to the event queue. At most one command may be in flight per
    instance: a second concurrent `command()` can receive the first one's
    reply. Callers sharing an instance across threads must serialize their
    calls.
    """

    def __init__(
        self,
        conn: Conn,
        cmd_timeout_s: float = DEFAULT_CMD_TIMEOUT_S,
        *,
        event_queue_size: int = DEFAULT_EVENT_QUEUE_SIZE,
        read_buffer_size: int = DEFAULT_READ_BUFFER_SIZE,
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    ) -> None:
        self._conn = conn
        self.cmd_timeout_s = cmd_timeout_s
        self._read_buffer_size = read_buffer_size
        self._poll_interval_s = poll_interval_s

        self._solicited: ClosableQueue[str] = ClosableQueue(1)
        self._unsolicited: ClosableQueue[str] = ClosableQueue(event_queue_size)

        self._stop_event = threading.Event()
        self._closed = False
        self._reader = threading.Thread(
            target=self._receive_loop,
            name="wpactrl-reader",
            daemon=True,
        )
        self._reader.start()

    def __enter__(self) -> WPACtrl:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def _receive_loop(self) -> None:
        try:
            while True:
                error: TransportError | None = None
                data: bytes | None = None
                try:
                    data = self._conn.read(self._read_buffer_size, timeout_s=self._poll_interval_s)
                except TransportError as exc:
                    error = exc

                if self._stop_event.is_set():
                    # Cancelled; a read error here is most likely the close.
                    return
                if error is not None:
                    LOGGER.debug("Control connection read failed, reader exiting: %s", error)
                    return
                if data is None:
                    continue
                self._route(data)
        finally:
            self._solicited.close()
            self._unsolicited.close()
            LOGGER.debug("Reader loop exited")

    def _route(self, data: bytes) -> None:
        if data[:1] == b"<":
            # Should be <P> where P is a single digit priority, which we ignore.
            if len(data) < 3 or data[2:3] != b">":
                LOGGER.warning("Dropping invalid unsolicited message: %r", data)
                return
            self._publish_event(data[3:].decode("utf-8", errors="replace").strip())
            return

        try:
            self._solicited.put_nowait(data.decode("utf-8", errors="replace").strip())
        except (Full, QueueClosed):
            LOGGER.warning("Dropping unexpected solicited message: %r", data)

    def _publish_event(self, msg: str) -> None:
        while not self._stop_event.is_set():
            try:
                self._unsolicited.put(msg, timeout=self._poll_interval_s)
                return
            except Full:
                continue
            except QueueClosed:
                return

    def unsolicited(self) -> Iterator[str]:
        """Yield events in arrival order until the connection is closed."""
        return iter(self._unsolicited)

    def command(self, cmd: str) -> str:
        LOGGER.debug("wpa-cmd %s", _verb(cmd))
        try:
            self._conn.write(cmd.encode("utf-8"))
        except TransportError as exc:
            raise TransportSendError(f"command error: {exc}") from exc

        try:
            return self._solicited.get(timeout=self.cmd_timeout_s)
        except Empty:
            raise CommandTimeoutError(
                f"cmd timeout after {self.cmd_timeout_s}s: {_verb(cmd)}"
            ) from None
        except QueueClosed:
            raise ConnectionClosedError("control connection closed") from None

    def ok_command(self, cmd: str) -> None:
        """Run a command whose normal response is just "OK".

        Any other response is raised as a CommandFailedError carrying it.
        """
        rsp = self.command(cmd)
        if rsp != "OK":
            raise CommandFailedError(rsp)

    def fail_command(self, cmd: str) -> str:
        """Run a command that answers "FAIL" when it doesn't work.

        Any other reply, "OK" included, is returned as is.
        """
        rsp = self.command(cmd)
        if rsp == "FAIL":
            raise CommandFailedError(rsp)
        return rsp

    def ping(self) -> None:
        rsp = self.command("PING")
        if rsp != "PONG":
            raise CommandFailedError(rsp)

    def attach(self) -> None:
        self.ok_command("ATTACH")

    def detach(self) -> None:
        self.ok_command("DETACH")

    def close(self) -> None:
        """Detach, stop the reader and close the connection.

        An instance can only be closed once; a second call raises
        ConnectionClosedError.
        """
        if self._closed:
            raise ConnectionClosedError("control connection already closed")
        self._closed = True

        try:
            self.detach()
        except WpaCtrlError as exc:
            LOGGER.debug("Detach on close failed: %s", exc)

        self._stop_event.set()
        self._conn.close()
        self._solicited.close()
        self._unsolicited.close()

        if threading.current_thread() is not self._reader:
            self._reader.join(timeout=_JOIN_TIMEOUT_S)
            if self._reader.is_alive():
                LOGGER.warning("Reader thread did not stop gracefully")
