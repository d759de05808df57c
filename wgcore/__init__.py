"""Building blocks for a userspace WireGuard implementation: replay filter,
TAI64N timestamps, rate limiter, pools, timers, cancellable I/O, the control
socket and the text configuration protocol."""

__version__ = "0.1.0"

__all__ = [
    "ipc",
    "peerkey",
    "pools",
    "ratelimiter",
    "replay",
    "rwcancel",
    "tai64n",
    "timers",
    "uapi",
    "wire",
]