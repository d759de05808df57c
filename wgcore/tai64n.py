"""TAI64N timestamps with whitened sub-second precision."""

from __future__ import annotations

import struct
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

TIMESTAMP_SIZE = 12
BASE = 0x400000000000000A
WHITENER_MASK = 0x1000000 - 1

_NANOS_PER_SECOND = 1_000_000_000
_UINT64 = (1 << 64) - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_LAYOUT = struct.Struct(">QI")


@dataclass(frozen=True)
class Timestamp:
    """A 12-byte TAI64N label: big-endian seconds then nanoseconds."""

    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != TIMESTAMP_SIZE:
            raise ValueError(f"timestamp must be {TIMESTAMP_SIZE} bytes, got {len(self.data)}")

    def after(self, other: Timestamp) -> bool:
        """Return True if this timestamp sorts strictly after the other."""
        return self.data > other.data

    def __bytes__(self) -> bytes:
        return self.data

    def __str__(self) -> str:
        secs, nanos = _LAYOUT.unpack(self.data)
        unix = secs - BASE
        carry, nanos = divmod(nanos, _NANOS_PER_SECOND)
        moment = _EPOCH + timedelta(seconds=unix + carry)
        fraction = f".{nanos:09d}".rstrip("0") if nanos else ""
        return f"{moment:%Y-%m-%d %H:%M:%S}{fraction} +0000 UTC"


def stamp(unix_nanos: int) -> Timestamp:
    """Build a timestamp from nanoseconds since the Unix epoch."""
    secs, nanos = divmod(unix_nanos, _NANOS_PER_SECOND)
    nanos &= ~WHITENER_MASK
    return Timestamp(_LAYOUT.pack((BASE + secs) & _UINT64, nanos))


def now() -> Timestamp:
    """Return the timestamp for the current time."""
    return stamp(time.time_ns())