"""Unix datagram socket transport, as used by wpa_supplicant's control interface."""

from __future__ import annotations

import logging
import os
import select
import socket
import tempfile
from pathlib import Path

from wpactrl.core.errors import (
    TransportConnectError,
    TransportReceiveError,
    TransportSendError,
)

LOGGER = logging.getLogger(__name__)


def _wait_readable(sock: socket.socket, timeout_s: float | None) -> bool:
    try:
        readable, _, _ = select.select([sock], [], [], timeout_s)
    except (OSError, ValueError) as exc:
        raise TransportReceiveError(f"Control socket is not readable: {exc}") from exc
    return bool(readable)


def _local_endpoint(iface: str) -> str:
    # Reserve a unique name, then free it so bind() can create the socket file.
    fd, path = tempfile.mkstemp(prefix=f"wpactrl-{iface}-")
    os.close(fd)
    os.unlink(path)
    return path


class UnixDatagramConn:
    """Client side of a control socket.

    The socket is bound to a private path so the daemon has an address to
    send replies and events back to.
    """

    def __init__(self, sock: socket.socket, local_path: str | None = None) -> None:
        self._sock = sock
        self.local_path = local_path

    @classmethod
    def connect(cls, ctrl_dir: str | Path, iface: str) -> UnixDatagramConn:
        remote_path = str(Path(ctrl_dir) / iface)
        local_path = _local_endpoint(iface)
        try:
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
        except OSError as exc:
            raise TransportConnectError(f"Could not create control socket: {exc}") from exc
        try:
            sock.bind(local_path)
            sock.connect(remote_path)
        except OSError as exc:
            sock.close()
            _unlink(local_path)
            raise TransportConnectError(
                f"Could not connect control socket {remote_path}: {exc}"
            ) from exc
        LOGGER.debug("Connected %s -> %s", local_path, remote_path)
        return cls(sock, local_path)

    def write(self, payload: bytes) -> int:
        try:
            return self._sock.send(payload)
        except OSError as exc:
            raise TransportSendError(f"Control socket send failed: {exc}") from exc

    def read(self, bufsize: int, timeout_s: float | None = None) -> bytes | None:
        if not _wait_readable(self._sock, timeout_s):
            return None
        try:
            return self._sock.recv(bufsize)
        except OSError as exc:
            raise TransportReceiveError(f"Control socket receive failed: {exc}") from exc

    def close(self) -> None:
        self._sock.close()
        if self.local_path:
            _unlink(self.local_path)


class UnixReplyConn:
    """Sends to one client from the listening socket.

    A connected client only accepts datagrams from its peer, so replies must
    originate from the bound endpoint rather than from a fresh socket.
    """

    def __init__(self, sock: socket.socket, address: str) -> None:
        self._sock = sock
        self.address = address

    def write(self, payload: bytes) -> int:
        try:
            return self._sock.sendto(payload, self.address)
        except OSError as exc:
            raise TransportSendError(f"Reply to {self.address} failed: {exc}") from exc

    def read(self, bufsize: int, timeout_s: float | None = None) -> bytes | None:
        raise TransportReceiveError("Reply connections are write-only")

    def close(self) -> None:
        # The socket belongs to the listening endpoint.
        pass


class UnixListenConn:
    """Bound control endpoint, the role wpa_supplicant itself plays."""

    def __init__(self, ctrl_dir: str | Path, iface: str) -> None:
        self.ctrl_dir = Path(ctrl_dir)
        self.iface = iface
        self.path = str(self.ctrl_dir / iface)
        try:
            self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
        except OSError as exc:
            raise TransportConnectError(f"Could not create control socket: {exc}") from exc
        try:
            self._sock.bind(self.path)
        except OSError as exc:
            self._sock.close()
            raise TransportConnectError(f"Could not bind control socket {self.path}: {exc}") from exc

    def write(self, payload: bytes) -> int:
        raise TransportSendError("A listening endpoint has no peer; use get(sender)")

    def read(self, bufsize: int, timeout_s: float | None = None) -> bytes | None:
        received = self.read_from(bufsize, timeout_s)
        return None if received is None else received[0]

    def read_from(self, bufsize: int, timeout_s: float | None = None) -> tuple[bytes, str] | None:
        if not _wait_readable(self._sock, timeout_s):
            return None
        try:
            return self._sock.recvfrom(bufsize)
        except OSError as exc:
            raise TransportReceiveError(f"Control socket receive failed: {exc}") from exc

    def get(self, sender: str) -> UnixReplyConn:
        if not isinstance(sender, str) or not sender:
            raise TransportConnectError(f"Cannot reply to unbound sender {sender!r}")
        return UnixReplyConn(self._sock, sender)

    def dial(self) -> UnixDatagramConn:
        return UnixDatagramConn.connect(self.ctrl_dir, self.iface)

    def close(self) -> None:
        self._sock.close()
        _unlink(self.path)


def _unlink(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
