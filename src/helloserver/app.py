"""
=============================================================================
APPLICATION COMPOSITION
=============================================================================

Builds the routing table and the server explicitly. Nothing is registered
through import side effects or a module-level default router.

    build_router()              Router with / and /api
          │
          ▼
    create_app(config)          HTTPServer(config, router) + LoggingMiddleware
          │
          ▼
    print_startup_banner()      stdout, before the socket is bound

=============================================================================
"""

from typing import Optional, TextIO
import sys

from .config import ServerConfig
from .server import HTTPServer
from .http.router import Router
from .middleware import LoggingMiddleware
from .handlers import hello_handler, api_handler


def build_router() -> Router:
    """Create the routing table: ``/`` and ``/api``, any method."""
    router = Router()
    router.add_route("/", hello_handler, name="hello")
    router.add_route("/api", api_handler, name="api")
    return router


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """
    Create the hello server.

    Args:
        config: Server configuration. Defaults to port 8080 on all
                interfaces.

    Returns:
        HTTPServer ready for run().

    Example:
        app = create_app(ServerConfig(port=0))
        app.run()
    """
    server = HTTPServer(config, router=build_router())
    server.use(LoggingMiddleware())
    return server


def print_startup_banner(config: ServerConfig, stream: Optional[TextIO] = None):
    """
    Print the startup lines.

        Go web server starting...
         Server running on http://localhost:8080
         Visit http://localhost:8080 in your browser
         API endpoint: http://localhost:8080/api
          Press Ctrl+C to stop the server

    The URL always says localhost, whatever host is bound.
    """
    out = stream if stream is not None else sys.stdout
    url = config.base_url

    print("Go web server starting...", file=out)
    print(f" Server running on {url}", file=out)
    print(f" Visit {url} in your browser", file=out)
    print(f" API endpoint: {url}/api", file=out)
    print("  Press Ctrl+C to stop the server", file=out)
    print(file=out)
    out.flush()
