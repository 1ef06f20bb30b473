"""
=============================================================================
HELLOSERVER - Hello World HTTP/1.1 Server on Raw Sockets
=============================================================================

A small web server with two routes, built directly on Python sockets and a
worker thread pool:

    GET /       HTML page showing the time, method, path and user agent
    GET /api    JSON document with a message, a timestamp and a status
    anything    404 page not found

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    helloserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # Entry point (python -m helloserver)
    ├── app.py               # build_router(), create_app(), banner
    ├── server.py            # HTTPServer: accept, parse, dispatch, reply
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Low-level components
    │   ├── socket_server.py # Listening socket and accept loop
    │   ├── connection.py    # Buffered client connection
    │   └── thread_pool.py   # Worker threads
    ├── http/                # HTTP protocol components
    │   ├── request.py       # Request parsing
    │   ├── response.py      # Response building, timestamps
    │   ├── router.py        # Exact-path routing
    │   └── status_codes.py  # HTTP status enum
    ├── middleware/
    │   ├── base.py          # Middleware ABC and pipeline
    │   └── logging.py       # Access log
    └── handlers/
        ├── hello.py         # /
        └── api.py           # /api

=============================================================================
QUICK START
=============================================================================

    from helloserver import create_app, ServerConfig

    app = create_app(ServerConfig(port=8080))
    app.run()

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import HTTPServer
from .app import build_router, create_app, print_startup_banner

__all__ = [
    "HTTPServer",
    "ServerConfig",
    "build_router",
    "create_app",
    "print_startup_banner",
    "__version__",
]
