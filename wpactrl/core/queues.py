"""Bounded, closable FIFO queue used between the reader threads and consumers.

`queue.Queue` cannot be closed, so a consumer blocked in `get()` would hang
forever once its producer exits. `ClosableQueue` wakes every waiter on
`close()`: producers get `QueueClosed` immediately, consumers drain what is
left and then get `QueueClosed`.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from queue import Empty, Full
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")

__all__ = ["ClosableQueue", "Empty", "Full", "QueueClosed"]


class QueueClosed(Exception):
    """Raised by put/get on a closed queue."""


class ClosableQueue(Generic[T]):
    """FIFO with a fixed capacity.

    With ``handoff=True`` the queue holds at most one item and `put()` only
    returns once a consumer has taken the item, so the producer never runs
    ahead of the consumer.
    """

    def __init__(self, maxsize: int = 1, *, handoff: bool = False) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = 1 if handoff else maxsize
        self.handoff = handoff
        self._items: deque[T] = deque()
        self._cond = threading.Condition()
        self._closed = False
        self._put_count = 0
        self._get_count = 0

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def qsize(self) -> int:
        with self._cond:
            return len(self._items)

    def put(self, item: T, block: bool = True, timeout: float | None = None) -> None:
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            if not block:
                if self._closed:
                    raise QueueClosed()
                if len(self._items) >= self.maxsize:
                    raise Full()
            elif not self._wait(lambda: self._closed or len(self._items) < self.maxsize, deadline):
                raise Full()
            if self._closed:
                raise QueueClosed()

            self._items.append(item)
            self._put_count += 1
            ticket = self._put_count
            self._cond.notify_all()

            if self.handoff:
                # Wait for the consumer even past the deadline; the item is
                # already visible and cannot be withdrawn.
                self._cond.wait_for(lambda: self._closed or self._get_count >= ticket)

    def put_nowait(self, item: T) -> None:
        self.put(item, block=False)

    def get(self, block: bool = True, timeout: float | None = None) -> T:
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            if not block:
                ready = bool(self._items) or self._closed
            else:
                ready = self._wait(lambda: bool(self._items) or self._closed, deadline)
            if not ready:
                raise Empty()
            if not self._items:
                raise QueueClosed()
            item = self._items.popleft()
            self._get_count += 1
            self._cond.notify_all()
            return item

    def get_nowait(self) -> T:
        return self.get(block=False)

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except QueueClosed:
                return

    def _wait(self, predicate, deadline: float | None) -> bool:
        if deadline is None:
            return self._cond.wait_for(predicate)
        return self._cond.wait_for(predicate, max(0.0, deadline - time.monotonic()))
