"""
Unit tests for the listening socket and accept loop.
"""

import errno
import socket
import threading

import pytest

from helloserver.config import ServerConfig
from helloserver.core.socket_server import SocketServer


class FailingListener:
    """A real listening socket whose accept() always fails."""

    def __init__(self):
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

    def __getattr__(self, name):
        return getattr(self._sock, name)

    def accept(self):
        raise OSError(errno.EBADF, "listener failed")


def make_config(**overrides) -> ServerConfig:
    return ServerConfig(**{"host": "127.0.0.1", "port": 0, **overrides})


class TestSocketServer:
    """Tests for SocketServer."""

    def test_bind_reports_real_port(self):
        server = SocketServer(make_config())
        try:
            host, port = server.bind()
            assert host == "127.0.0.1"
            assert port != 0
            assert server.address == (host, port)
        finally:
            server._cleanup()

    def test_bind_on_taken_port_raises(self):
        first = SocketServer(make_config())
        first.bind()
        try:
            second = SocketServer(make_config(port=first.address[1]))
            with pytest.raises(OSError):
                second.bind()
        finally:
            first._cleanup()

    def test_accept_failure_propagates(self, monkeypatch, caplog):
        monkeypatch.setattr(SocketServer, "_create_socket", lambda self: FailingListener())
        server = SocketServer(make_config())
        handled = []

        with pytest.raises(OSError) as exc_info:
            server.serve(handled.append)

        assert exc_info.value.errno == errno.EBADF
        assert handled == []
        assert server._socket is None
        assert "Accept error" in caplog.text

    def test_shutdown_ends_loop_cleanly(self):
        server = SocketServer(make_config())
        server.bind()
        errors = []

        def run():
            try:
                server.serve(lambda conn: conn.close())
            except Exception as e:
                errors.append(e)

        thread = threading.Thread(target=run, daemon=True)
        thread.start()
        server.shutdown()
        thread.join(timeout=5)

        assert not thread.is_alive()
        assert errors == []
        assert server._socket is None

    def test_accepted_connections_reach_handler(self):
        server = SocketServer(make_config())
        server.bind()
        accepted = threading.Event()

        def handle(conn):
            conn.close()
            accepted.set()

        thread = threading.Thread(target=server.serve, args=(handle,), daemon=True)
        thread.start()
        try:
            with socket.create_connection(server.address, timeout=5):
                assert accepted.wait(timeout=5)
        finally:
            server.shutdown()
            thread.join(timeout=5)
