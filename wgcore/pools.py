"""Object pools that can bound the number of outstanding items."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Callable

QUEUE_OUTBOUND_SIZE = 1024
QUEUE_INBOUND_SIZE = 1024
QUEUE_HANDSHAKE_SIZE = 1024
MAX_SEGMENT_SIZE = (1 << 16) - 1  # largest possible UDP datagram
PREALLOCATED_BUFFERS_PER_POOL = 0  # unbounded


class WaitPool:
    """A reuse pool; with a nonzero ``max_count``, ``get`` blocks while that
    many items are out."""

    def __init__(self, max_count: int, factory: Callable[[], Any]) -> None:
        if max_count < 0:
            raise ValueError("max_count must not be negative")
        self.max_count = max_count
        self._factory = factory
        self._free: deque = deque()
        self._count = 0
        self._cond = threading.Condition()

    def get(self) -> Any:
        """Take an item, reusing a returned one when available."""
        with self._cond:
            if self.max_count:
                self._cond.wait_for(lambda: self._count < self.max_count)
                self._count += 1
            if self._free:
                return self._free.pop()
        return self._factory()

    def put(self, item: Any) -> None:
        """Return an item to the pool, waking one waiting ``get``."""
        with self._cond:
            self._free.append(item)
            if not self.max_count:
                return
            self._count -= 1
            self._cond.notify()