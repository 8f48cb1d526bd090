"""Transport interfaces."""

from __future__ import annotations

from typing import Any, Protocol


class Conn(Protocol):
    def write(self, payload: bytes) -> int:
        """Send one datagram and return the number of bytes written."""

    def read(self, bufsize: int, timeout_s: float | None = None) -> bytes | None:
        """Receive one datagram, or None if nothing arrived within timeout_s."""

    def close(self) -> None:
        """Release the connection."""


class ListenConn(Conn, Protocol):
    """Server side of a datagram endpoint that answers whoever sent to it."""

    def read_from(self, bufsize: int, timeout_s: float | None = None) -> tuple[bytes, Any] | None:
        """Receive one datagram together with its sender address."""

    def get(self, sender: Any) -> Conn:
        """Return a connection for replying to sender."""

    def dial(self) -> Conn:
        """Return a client connection to this endpoint."""
