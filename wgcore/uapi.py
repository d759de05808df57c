"""The text configuration protocol spoken over the configuration socket."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, Tuple

from wgcore.ipc import IPC_ERROR_IO, IPC_ERROR_INVALID, IPC_ERROR_PROTOCOL, IPC_ERROR_UNKNOWN

KEY_SIZE = 32

_log = logging.getLogger(__name__)


class IPCError(Exception):
    """A configuration protocol failure carrying a negative errno-style code."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def error_code(self) -> int:
        """Return the code reported to the client as ``errno=``."""
        return self.code

    def __str__(self) -> str:
        return f"IPC error {self.code}: {self.message}"


def format_key(prefix: str, key: bytes) -> str:
    """Return a ``prefix=<lowercase hex>`` line for a 32-byte key."""
    if len(key) != KEY_SIZE:
        raise ValueError(f"key must be {KEY_SIZE} bytes, got {len(key)}")
    return f"{prefix}={bytes(key).hex()}"


def _raw_lines(reader: Any) -> Iterator[Any]:
    readline = getattr(reader, "readline", None)
    if readline is None:
        yield from reader
        return
    while True:
        line = readline()
        if not line:
            return
        yield line


def _decode(line: Any) -> str:
    if isinstance(line, (bytes, bytearray)):
        line = bytes(line).decode("utf-8", errors="replace")
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def parse_set_lines(reader: Any) -> Iterator[Tuple[str, str]]:
    """Yield ``(key, value)`` pairs of a set operation.

    Reading stops at a blank line or at the end of input; nothing after the
    blank line is consumed. A line without ``=`` raises an ``IPCError`` with
    the protocol code, and a failing read one with the I/O code.
    """
    lines: Iterable[Any] = _raw_lines(reader)
    iterator = iter(lines)
    while True:
        try:
            raw = next(iterator)
        except StopIteration:
            return
        except OSError as err:
            raise IPCError(IPC_ERROR_IO, f"failed to read input: {err}") from err
        line = _decode(raw)
        if line == "":
            return
        key, sep, value = line.partition("=")
        if not sep:
            raise IPCError(IPC_ERROR_PROTOCOL, f"failed to parse line {line!r}")
        yield key, value


def ipc_handle(
    stream: Any,
    get_operation: Callable[[], str],
    set_operation: Callable[[Any], object],
) -> None:
    """Serve configuration requests on a binary stream until it ends.

    ``get_operation`` returns the text of the current configuration;
    ``set_operation`` receives the stream to read the settings from. Each
    request is answered with an ``errno=<code>`` line and a blank line. The
    stream is closed on return.
    """
    try:
        while True:
            try:
                op = stream.readline()
            except OSError:
                return
            if not op or not op.endswith(b"\n"):
                return

            output = b""
            status: IPCError | None = None
            try:
                if op == b"set=1\n":
                    set_operation(stream)
                elif op == b"get=1\n":
                    try:
                        next_byte = stream.read(1)
                    except OSError:
                        return
                    if not next_byte:
                        return
                    if next_byte != b"\n":
                        raise IPCError(
                            IPC_ERROR_INVALID, f"trailing character in UAPI get: {next_byte!r}"
                        )
                    output = get_operation().encode("utf-8")
                else:
                    _log.error("invalid UAPI operation: %r", op)
                    return
            except IPCError as err:
                status = err
            except Exception as err:  # reported to the client, never fatal
                status = IPCError(IPC_ERROR_UNKNOWN, f"other UAPI error: {err}")

            if status is not None:
                _log.error("%s", status)
                reply = f"errno={status.error_code()}\n\n".encode()
            else:
                reply = output + b"errno=0\n\n"
            try:
                stream.write(reply)
                stream.flush()
            except OSError:
                return
    finally:
        stream.close()