"""Reads and writes on a file descriptor that another thread can cancel."""

from __future__ import annotations

import errno
import os
import select

_RETRY_ERRNOS = (errno.EAGAIN, errno.EWOULDBLOCK, errno.EINTR)


def retry_after_error(err: BaseException) -> bool:
    """Return True if the error means the operation should simply be retried."""
    return isinstance(err, OSError) and err.errno in _RETRY_ERRNOS


def _cancelled() -> OSError:
    return OSError(errno.ECANCELED, "operation cancelled")


class RWCancel:
    """Wraps a descriptor, made non-blocking, so that blocked I/O can be cancelled.

    ``cancel`` wakes every blocked ``read``/``write``, which then raise an
    ``OSError`` with ``errno.ECANCELED``.
    """

    def __init__(self, fd: int) -> None:
        os.set_blocking(fd, False)
        self.fd = fd
        self._closing_reader, self._closing_writer = os.pipe()

    def __enter__(self) -> RWCancel:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _ready(self, events: int) -> bool:
        poller = select.poll()
        poller.register(self.fd, events)
        poller.register(self._closing_reader, select.POLLIN)
        try:
            results = dict(poller.poll())
        except OSError:
            return False
        if results.get(self._closing_reader, 0):
            return False
        return bool(results.get(self.fd, 0))

    def ready_read(self) -> bool:
        """Block until the descriptor is readable; False if cancelled."""
        return self._ready(select.POLLIN)

    def ready_write(self) -> bool:
        """Block until the descriptor is writable; False if cancelled."""
        return self._ready(select.POLLOUT)

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes, waiting until data arrives or cancellation."""
        while True:
            try:
                return os.read(self.fd, size)
            except OSError as err:
                if not retry_after_error(err):
                    raise
            if not self.ready_read():
                raise _cancelled()

    def write(self, data: bytes) -> int:
        """Write ``data``, waiting until writable or cancelled; return bytes written."""
        while True:
            try:
                return os.write(self.fd, data)
            except OSError as err:
                if not retry_after_error(err):
                    raise
            if not self.ready_write():
                raise _cancelled()

    def cancel(self) -> None:
        """Wake all blocked operations and make later waits fail."""
        os.write(self._closing_writer, b"\0")

    def close(self) -> None:
        """Release the cancellation pipe; the wrapped descriptor stays open."""
        for fd in (self._closing_reader, self._closing_writer):
            try:
                os.close(fd)
            except OSError:
                pass