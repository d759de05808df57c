import errno
import os
import socket
import stat

import pytest

from wgcore.ipc import UAPIListener, sock_path, uapi_open


@pytest.fixture
def sockdir(tmp_path):
    return str(tmp_path)


def test_sock_path_layout():
    assert sock_path("wg0", "/var/run/wireguard") == "/var/run/wireguard/wg0.sock"


def test_sock_path_default_directory():
    assert sock_path("wg0") == "/var/run/wireguard/wg0.sock"


def test_uapi_open_creates_private_socket(sockdir):
    sock = uapi_open("wg0", sockdir)
    try:
        mode = os.lstat(sock_path("wg0", sockdir)).st_mode
        assert stat.S_ISSOCK(mode)
        assert stat.S_IMODE(mode) & 0o077 == 0
    finally:
        sock.close()


def test_uapi_open_refuses_socket_in_use(sockdir):
    first = uapi_open("wg0", sockdir)
    try:
        with pytest.raises(OSError, match="in use"):
            uapi_open("wg0", sockdir)
    finally:
        first.close()


def test_uapi_open_replaces_stale_socket(sockdir):
    path = sock_path("wg0", sockdir)
    stale = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    stale.bind(path)
    stale.close()
    assert os.path.lexists(path)
    sock = uapi_open("wg0", sockdir)
    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as client:
            client.connect(path)
            assert client.getpeername() == path
    finally:
        sock.close()


def test_listener_requires_socket_file(sockdir):
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        with pytest.raises(FileNotFoundError):
            UAPIListener("missing", sock, sockdir)
    finally:
        sock.close()


def test_listener_accepts_and_exchanges_data(sockdir):
    listener = UAPIListener("wg0", uapi_open("wg0", sockdir), sockdir)
    try:
        assert listener.addr() == sock_path("wg0", sockdir)
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as client:
            client.connect(listener.addr())
            server = listener.accept()
            with server:
                client.sendall(b"get=1\n\n")
                assert server.recv(64) == b"get=1\n\n"
                server.sendall(b"errno=0\n\n")
                assert client.recv(64) == b"errno=0\n\n"
    finally:
        listener.close()


def test_close_unlinks_and_stops_accepting(sockdir):
    listener = UAPIListener("wg0", uapi_open("wg0", sockdir), sockdir)
    listener.close()
    assert not os.path.lexists(sock_path("wg0", sockdir))
    with pytest.raises(OSError) as info:
        listener.accept()
    assert info.value.errno == errno.ECANCELED


def test_deleted_socket_file_ends_accept(sockdir):
    listener = UAPIListener("wg0", uapi_open("wg0", sockdir), sockdir)
    try:
        os.unlink(sock_path("wg0", sockdir))
        with pytest.raises(FileNotFoundError):
            listener.accept()
    finally:
        listener.close()