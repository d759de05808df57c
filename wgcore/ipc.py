"""The Unix-domain configuration socket and its listener."""

from __future__ import annotations

import errno
import os
import queue
import socket
import threading
from typing import Optional

from wgcore.rwcancel import RWCancel, retry_after_error

IPC_ERROR_IO = -errno.EIO
IPC_ERROR_PROTOCOL = -errno.EPROTO
IPC_ERROR_INVALID = -errno.EINVAL
IPC_ERROR_PORT_IN_USE = -errno.EADDRINUSE
IPC_ERROR_UNKNOWN = -55  # ENOANO

SOCKET_DIRECTORY = "/var/run/wireguard"

_WATCH_INTERVAL = 0.2


def sock_path(iface: str, socket_directory: str = SOCKET_DIRECTORY) -> str:
    """Return the path of the configuration socket for an interface."""
    return f"{socket_directory}/{iface}.sock"


def _listen(path: str) -> socket.socket:
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(path)
        sock.listen()
    except OSError:
        sock.close()
        raise
    return sock


def uapi_open(name: str, socket_directory: str = SOCKET_DIRECTORY) -> socket.socket:
    """Create the listening configuration socket for an interface.

    A stale socket file left by a dead process is replaced; a socket that
    still accepts connections raises ``OSError`` with ``EADDRINUSE``.
    """
    os.makedirs(socket_directory, mode=0o755, exist_ok=True)
    path = sock_path(name, socket_directory)
    old_umask = os.umask(0o077)
    try:
        try:
            return _listen(path)
        except OSError:
            pass
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as probe:
            try:
                probe.connect(path)
            except OSError:
                pass
            else:
                raise OSError(errno.EADDRINUSE, "unix socket in use")
        os.remove(path)
        return _listen(path)
    finally:
        os.umask(old_umask)


class UAPIListener:
    """Accepts connections on a configuration socket.

    ``accept`` raises ``FileNotFoundError`` once the socket file is deleted,
    and ``OSError`` with ``ECANCELED`` after the listener is closed. Closing
    removes the socket file.
    """

    def __init__(
        self, name: str, sock: socket.socket, socket_directory: str = SOCKET_DIRECTORY
    ) -> None:
        self._path = sock_path(name, socket_directory)
        os.lstat(self._path)
        self._sock = sock
        self._incoming: queue.SimpleQueue = queue.SimpleQueue()
        self._stop = threading.Event()
        self._closed = False
        self._cancel = RWCancel(sock.fileno())
        self._watcher = threading.Thread(target=self._watch_socket_file, daemon=True)
        self._acceptor = threading.Thread(target=self._accept_loop, daemon=True)
        self._watcher.start()
        self._acceptor.start()

    def __enter__(self) -> UAPIListener:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _watch_socket_file(self) -> None:
        while not self._stop.wait(_WATCH_INTERVAL):
            if not os.path.lexists(self._path):
                self._incoming.put(
                    FileNotFoundError(errno.ENOENT, "socket file removed", self._path)
                )
                return

    def _accept_loop(self) -> None:
        while True:
            try:
                conn, _ = self._sock.accept()
            except OSError as err:
                if retry_after_error(err):
                    if self._cancel.ready_read():
                        continue
                    self._incoming.put(OSError(errno.ECANCELED, "listener closed"))
                    return
                self._incoming.put(err)
                return
            conn.setblocking(True)
            self._incoming.put(conn)

    def accept(self) -> socket.socket:
        """Wait for and return the next connection."""
        item = self._incoming.get()
        if isinstance(item, BaseException):
            self._incoming.put(item)
            raise item
        return item

    def close(self) -> None:
        """Stop listening and remove the socket file."""
        if self._closed:
            return
        self._closed = True
        self._stop.set()
        self._watcher.join()
        self._cancel.cancel()
        self._acceptor.join()
        self._sock.close()
        try:
            os.unlink(self._path)
        except FileNotFoundError:
            pass
        self._cancel.close()

    def addr(self) -> str:
        """Return the path the listener is bound to."""
        return self._path