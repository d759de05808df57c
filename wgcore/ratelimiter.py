"""Per-address token-bucket rate limiter for handshake messages."""

from __future__ import annotations

import ipaddress
import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union

PACKETS_PER_SECOND = 20
PACKETS_BURSTABLE = 5
GARBAGE_COLLECT_TIME = 1_000_000_000
PACKET_COST = 1_000_000_000 // PACKETS_PER_SECOND
MAX_TOKENS = PACKET_COST * PACKETS_BURSTABLE

_GC_INTERVAL = 1.0
_RESET = object()
_STOP = object()

Address = Union[str, ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass
class _Entry:
    last_time: int
    tokens: int


class Ratelimiter:
    """Allows a short burst per address, then a steady rate.

    ``time_now`` returns the current time in nanoseconds.
    Call ``init`` before ``allow``; ``close`` stops background cleanup.
    """

    def __init__(self, time_now: Optional[Callable[[], int]] = None) -> None:
        self._time_now = time_now or time.monotonic_ns
        self._lock = threading.Lock()
        self._table: dict = {}
        self._control: Optional[queue.SimpleQueue] = None

    def __enter__(self) -> Ratelimiter:
        self.init()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def init(self) -> None:
        """Reset the table and start the garbage collection worker."""
        with self._lock:
            if self._control is not None:
                self._control.put(_STOP)
            control: queue.SimpleQueue = queue.SimpleQueue()
            self._control = control
            self._table = {}
        threading.Thread(target=self._collect_garbage, args=(control,), daemon=True).start()

    def close(self) -> None:
        """Stop the garbage collection worker."""
        with self._lock:
            if self._control is not None:
                self._control.put(_STOP)
                self._control = None

    def _collect_garbage(self, control: queue.SimpleQueue) -> None:
        ticking = False
        while True:
            try:
                message = control.get(timeout=_GC_INTERVAL if ticking else None)
            except queue.Empty:
                if self.cleanup():
                    ticking = False
                continue
            if message is _STOP:
                return
            ticking = True

    def cleanup(self) -> bool:
        """Drop idle entries; return True if the table is now empty."""
        with self._lock:
            current = self._time_now()
            stale = [
                key
                for key, entry in self._table.items()
                if current - entry.last_time > GARBAGE_COLLECT_TIME
            ]
            for key in stale:
                del self._table[key]
            return not self._table

    def allow(self, ip: Address) -> bool:
        """Return True if a packet from this address may be processed."""
        address = ipaddress.ip_address(ip)
        with self._lock:
            if self._control is None:
                raise RuntimeError("ratelimiter is not initialised")
            current = self._time_now()
            entry = self._table.get(address)
            if entry is None:
                self._table[address] = _Entry(current, MAX_TOKENS - PACKET_COST)
                if len(self._table) == 1:
                    self._control.put(_RESET)
                return True

            entry.tokens = min(entry.tokens + current - entry.last_time, MAX_TOKENS)
            entry.last_time = current
            if entry.tokens > PACKET_COST:
                entry.tokens -= PACKET_COST
                return True
            return False