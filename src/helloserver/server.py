"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together: socket server, thread pool, request parser,
middleware pipeline and router.

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   main thread                        worker thread                   │
    │   ───────────                        ─────────────                   │
    │   SocketServer.bind()                                                │
    │   ThreadPool.start()                                                 │
    │   accept() ──► submit(conn) ───────► _process_connection(conn)      │
    │   accept() ──► submit(conn) ──┐        read_request()               │
    │   ...                         │        RequestParser.parse()        │
    │                               │        middleware → router.handle   │
    │                               │        response.to_bytes()          │
    │                               │        send_response()              │
    │                               │        keep-alive? loop : close     │
    │                               └────► (another worker)               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ERROR RESPONSES
=============================================================================

    Parse error (HTTPParseError)     400 / 413 / 505, then close
    Request over max_request_size    413, then close
    First request never arrives      408, then close
    Handler raises                   500 text/plain, traceback logged
    Client gone mid-write            warning logged, connection dropped

=============================================================================
INTERVIEW QUESTIONS
=============================================================================

Q: "Why bind before starting the worker threads?"
A: "A busy port is the most likely startup failure. Binding first makes it
   surface as an OSError with nothing else to tear down."

Q: "What happens on Ctrl+C?"
A: "KeyboardInterrupt unwinds the accept loop. The listening socket is
   closed and the pool is told to stop without waiting; the workers are
   daemons, so in-flight requests end with the process."

=============================================================================
"""

import logging
import threading
from typing import Optional, Callable, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection, ThreadPool
from .http import (
    HTTPRequest, RequestParser, HTTPParseError,
    HTTPResponse, HTTPStatus, Router,
    internal_error, error_response,
)
from .middleware import MiddlewarePipeline, Middleware


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Multi-threaded HTTP/1.1 server.

    =========================================================================
    USAGE
    =========================================================================

        router = Router()
        router.add_route("/", hello_handler)

        server = HTTPServer(ServerConfig(), router=router)
        server.use(LoggingMiddleware())
        server.run()    # blocks

    The router is passed in; the server never registers routes itself.

    =========================================================================
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        router: Optional[Router] = None,
    ):
        """
        Args:
            config: Server configuration. Defaults to ServerConfig().
            router: Routing table. An empty Router answers 404 to everything.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
        )
        self._parser = RequestParser(max_request_size=self.config.max_request_size)
        self._router = router if router is not None else Router()
        self._middleware = MiddlewarePipeline()

        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None
        self._running = False
        self._ready = threading.Event()

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def use(self, middleware: Middleware) -> "HTTPServer":
        """
        Add middleware. Executed in the order added.

        Returns:
            Self for method chaining.
        """
        self._middleware.add(middleware)
        return self

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port once listening."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Bind, start workers and serve until stop() or Ctrl+C.

        Raises:
            OSError: The listening socket could not be bound (nothing has
                     been started yet), or accept() failed while serving
                     (workers are stopped before it propagates).
        """
        self._setup_logging()
        self._handler = self._middleware.wrap(self._router.handle)

        self._socket_server.bind()

        self._running = True
        self._thread_pool.start()
        self._ready.set()

        host, port = self.address
        logger.info(f"Starting HTTP server on {host}:{port}")

        try:
            self._socket_server.serve(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
            raise
        finally:
            self._shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until run() is listening. Returns False on timeout."""
        return self._ready.wait(timeout)

    def stop(self):
        """
        Ask the accept loop to exit. Used by embedders and tests; the
        command-line server simply runs until interrupted.
        """
        self._socket_server.shutdown()

    def _setup_logging(self):
        """Configure the root logger once; later calls are no-ops."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("helloserver").setLevel(level)

    def _shutdown(self):
        logger.info("Shutting down server...")
        self._running = False
        self._ready.clear()

        # Daemon workers; in-flight requests are not awaited
        self._thread_pool.shutdown(wait=False)
        logger.info("Server stopped")

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Called by SocketServer for each accepted connection."""
        self._thread_pool.submit(self._process_connection, args=(conn,))

    def _process_connection(self, conn: Connection):
        """
        Serve requests on one connection (runs in a worker thread).

        Loops while the client keeps the connection alive.
        """
        with conn:
            while self._running:
                try:
                    raw_request = conn.read_request()
                except TimeoutError:
                    self._send_error(conn, HTTPStatus.REQUEST_TIMEOUT, "Request timeout")
                    break
                except ValueError as e:
                    logger.warning(f"[{conn.id}] {e}")
                    self._send_error(conn, HTTPStatus.PAYLOAD_TOO_LARGE)
                    break

                if raw_request is None:
                    break

                try:
                    request = self._parser.parse(raw_request, conn.address)
                except HTTPParseError as e:
                    logger.info(f"[{conn.id}] Bad request from {conn.client_ip}: {e}")
                    self._send_error(conn, e.status_code)
                    break

                response = self._dispatch(conn, request)
                keep_alive = request.is_keep_alive and self.config.keep_alive

                if keep_alive:
                    response.headers.setdefault("Connection", "keep-alive")
                    response.headers.setdefault(
                        "Keep-Alive",
                        f"timeout={int(self.config.keep_alive_timeout)}"
                    )
                else:
                    response.headers["Connection"] = "close"

                response_bytes = response.to_bytes(
                    self.config.server_name,
                    include_body=not request.is_head,
                )
                if not conn.send_response(response_bytes):
                    break

                if not keep_alive:
                    break

                conn.set_keep_alive()

    def _dispatch(self, conn: Connection, request: HTTPRequest) -> HTTPResponse:
        """Run the middleware chain and router; a raising handler becomes 500."""
        try:
            return self._handler(request)
        except Exception as e:
            logger.exception(f"[{conn.id}] Handler error: {e}")
            return internal_error()

    def _send_error(
        self,
        conn: Connection,
        status: HTTPStatus,
        message: Optional[str] = None,
    ):
        """Send an error raised before a handler ran; the caller closes."""
        response = error_response(status, message)
        conn.send_response(response.to_bytes(self.config.server_name))
