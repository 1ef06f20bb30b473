"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

Owns the listening socket: create, bind, listen, accept. Each accepted
client socket is wrapped in a Connection and handed to a callback.

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create a socket file descriptor
    2. bind()      Associate the socket with an IP:PORT   ← may fail
    3. listen()    OS starts queueing incoming connections
    4. accept()    Returns a NEW socket just for that client
    5. close()     Release the socket resources

                    ┌───────────────────────┐
                    │   Listening Socket    │ ◄── Created once at startup
                    │   0.0.0.0:8080        │     Never sends/receives data
                    └───────────┬───────────┘
                                │
        ┌───────────────────────┼───────────────────────┐
        ▼                       ▼                       ▼
    ┌───────────┐         ┌───────────┐         ┌───────────┐
    │ Client 1  │         │ Client 2  │         │ Client 3  │
    └───────────┘         └───────────┘         └───────────┘

bind() and the accept loop are separate steps. HTTPServer binds first so a
busy port surfaces as an OSError before any worker thread exists.

=============================================================================
SOCKET OPTIONS
=============================================================================

SO_REUSEADDR:
    Lets a restarted server bind while old connections sit in TIME_WAIT.
    It does NOT let two live listeners share a port on Linux or macOS.

SO_REUSEPORT:
    Never set. With it, a second instance would silently share port 8080
    with the first instead of failing at startup.

TCP_NODELAY:
    Disables Nagle's algorithm. Responses are small and written in one
    sendall(), so there is nothing to gain from coalescing.

=============================================================================
"""

import socket
import logging
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP socket server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      SocketServer Internals                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    bind()            Create socket, set options, bind, listen        │
    │        │             OSError propagates to the caller                │
    │        ▼                                                             │
    │    serve(handler)    Accept loop (blocks until shutdown())           │
    │        │                                                             │
    │        └──► while running:                                           │
    │                accept()        Wait up to 1s for a connection        │
    │                Connection()    Wrap client socket                    │
    │                handler(conn)   Hand off to HTTP server               │
    │                accept() error  Re-raised as OSError (fatal)          │
    │                                                                      │
    │    shutdown()        Stop the loop from another thread               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Usage:
        server = SocketServer(config)
        server.bind()
        server.serve(handle_connection)
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False

    @property
    def address(self) -> Tuple[str, int]:
        """
        Get the server's bound address (IP, port).

        After bind() this is the real address, so port=0 in the config
        reports the port the OS picked.
        """
        if self._socket is not None:
            host, port = self._socket.getsockname()[:2]
            return (host, port)
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # accept() wakes up every second so shutdown() is noticed
        sock.settimeout(1.0)
        return sock

    def bind(self) -> Tuple[str, int]:
        """
        Create the listening socket, bind it and start listening.

        Returns:
            The bound (host, port).

        Raises:
            OSError: Address already in use, permission denied, etc.
        """
        sock = self._create_socket()

        try:
            sock.bind((self.config.host, self.config.port))
            sock.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            sock.close()
            raise

        self._socket = sock
        # Set here so a shutdown() between bind() and serve() is not lost
        self._running = True
        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        return host, port

    def serve(self, connection_handler: Callable[[Connection], None]):
        """
        Run the accept loop until shutdown() is called.

        Binds first if bind() has not been called yet.

        Args:
            connection_handler: Called with each new Connection. Must not
                                block; HTTPServer submits to its pool.

        Raises:
            OSError: accept() failed while the loop was still meant to run.
                     The listening socket is closed first.
        """
        if self._socket is None:
            self.bind()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                # Socket closed by shutdown(); anything else is fatal
                if not self._running:
                    break
                logger.error(f"Accept error: {e}")
                raise

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
                keep_alive_timeout=self.config.keep_alive_timeout,
                max_request_size=self.config.max_request_size,
            )
            connection_handler(conn)

    def shutdown(self):
        """
        Stop the accept loop.

        Safe to call from any thread and more than once. The loop notices
        within one accept() timeout.
        """
        logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._running = False
        if self._socket:
            self._socket.close()
            self._socket = None
        logger.info("Socket server stopped")
