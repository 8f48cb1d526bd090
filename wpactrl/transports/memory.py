"""In-memory datagram transport for tests and simulations.

Only supports the 1:1 pattern the control interface needs: one listening
side and one client obtained from `dial()`.
"""

from __future__ import annotations

from typing import Any

from wpactrl.core.errors import TransportReceiveError, TransportSendError
from wpactrl.core.queues import ClosableQueue, Empty, Full, QueueClosed

_QUEUE_SIZE = 100


class MemoryConn:
    def __init__(
        self,
        inbound: ClosableQueue[bytes] | None = None,
        outbound: ClosableQueue[bytes] | None = None,
    ) -> None:
        self._inbound = inbound if inbound is not None else ClosableQueue(_QUEUE_SIZE)
        self._outbound = outbound if outbound is not None else ClosableQueue(_QUEUE_SIZE)

    def write(self, payload: bytes) -> int:
        try:
            self._outbound.put_nowait(bytes(payload))
        except QueueClosed as exc:
            raise TransportSendError("memory connection closed") from exc
        except Full as exc:
            raise TransportSendError("memory connection buffer full") from exc
        return len(payload)

    def read(self, bufsize: int, timeout_s: float | None = None) -> bytes | None:
        try:
            msg = self._inbound.get(timeout=timeout_s)
        except Empty:
            return None
        except QueueClosed as exc:
            raise TransportReceiveError("memory connection closed") from exc
        return msg[:bufsize]

    def read_from(self, bufsize: int, timeout_s: float | None = None) -> tuple[bytes, Any] | None:
        msg = self.read(bufsize, timeout_s)
        return None if msg is None else (msg, None)

    def get(self, sender: Any) -> MemoryConn:
        return self

    def dial(self) -> MemoryConn:
        """Return the peer of this connection; the queues are swapped."""
        return MemoryConn(inbound=self._outbound, outbound=self._inbound)

    def close(self) -> None:
        self._inbound.close()
        self._outbound.close()
