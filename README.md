# wgcore

Pure-Python building blocks for a userspace WireGuard implementation. The
package uses only the standard library. Some modules (`rwcancel`, `ipc`) rely
on `select.poll` and UNIX-domain sockets, so they need a POSIX system such as
Linux.

## What is inside

| Module | Contents |
| --- | --- |
| `wgcore.replay` | `Filter`: a sliding-window anti-replay filter in the style of RFC 6479. |
| `wgcore.tai64n` | `Timestamp`, `stamp()` and `now()`: 12-byte TAI64N timestamps. The nanosecond field is whitened so that timestamps only reveal coarse timing. |
| `wgcore.ratelimiter` | `Ratelimiter`: a per-address token bucket for handshake messages. It allows 20 packets per second with a burst of 5, and idle entries are dropped by a background cleanup thread. |
| `wgcore.pools` | `WaitPool`: an object pool. With a nonzero `max_count`, `get()` blocks while that many objects are out. Also the queue and segment size constants. |
| `wgcore.timers` | `Timer`: a re-armable one-shot timer with `mod()`, `delete()`, `delete_sync()` and `is_pending()`. |
| `wgcore.rwcancel` | `RWCancel` and `retry_after_error()`: reads and writes on a non-blocking descriptor that another thread can cancel. Cancelled operations raise `OSError` with `errno.ECANCELED`. |
| `wgcore.ipc` | `sock_path()`, `uapi_open()` and `UAPIListener`: the UNIX control socket. `uapi_open()` replaces a stale socket file and raises `EADDRINUSE` if the socket is still in use. The listener's `accept()` raises `FileNotFoundError` once the socket file is removed. The `IPC_ERROR_*` status codes live here too. |
| `wgcore.uapi` | `IPCError`, `format_key()`, `parse_set_lines()` and `ipc_handle()`: the text configuration protocol with its `get=1` and `set=1` operations. |
| `wgcore.wire` | `calculate_padding_size()`: pads transport payloads to a multiple of 16 bytes without going past the MTU. |
| `wgcore.peerkey` | `abbreviate_key()`: the short form of a peer's public key used in log lines, for example `peer(AAAA…AAAA)`. |

## Installation

```
pip install .
```

## Examples

Replay protection:

```python
from wgcore.replay import Filter

f = Filter()
assert f.validate_counter(1, 2**64 - 2**13 - 1)
assert not f.validate_counter(1, 2**64 - 2**13 - 1)  # replayed
```

Timestamps:

```python
from wgcore.tai64n import now, stamp

earlier = stamp(0)
assert now().after(earlier)
```

Rate limiting handshakes:

```python
from wgcore.ratelimiter import Ratelimiter

with Ratelimiter() as limiter:
    allowed = limiter.allow("192.0.2.1")
```

Parsing a `set=1` request body. Reading stops at the blank line:

```python
import io
from wgcore.uapi import parse_set_lines

body = io.StringIO("listen_port=51820\nfwmark=0\n\nnot read=1\n")
assert list(parse_set_lines(body)) == [("listen_port", "51820"), ("fwmark", "0")]
```

Serving requests: `ipc_handle(stream, get_operation, set_operation)` reads
operations from a binary stream such as `sock.makefile("rwb")`. For `get=1`
it writes the text that `get_operation()` returns. For `set=1` it passes the
stream to `set_operation`. Every request is answered with `errno=<code>`
followed by a blank line. An `IPCError` raised by either callback is reported
with its code. Any other exception is reported as `IPC_ERROR_UNKNOWN`.

Padding:

```python
from wgcore.wire import calculate_padding_size

assert calculate_padding_size(1, 1420) == 15
```

## What this package does not do

These are building blocks. There is no daemon and no command to run. There is
no TUN device handling, no UDP transport, no Noise handshake or packet
encryption, and no device or peer state. `ipc_handle()` frames the
configuration protocol. Applying `set=1` settings and producing the `get=1`
output is up to the callbacks you pass in.

## Running the tests

```
pip install .[test]
pytest
```