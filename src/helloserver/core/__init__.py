"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking plumbing under the HTTP layer.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  • Binds 0.0.0.0:8080 and listens                                   │
    │  • Runs the accept() loop in the calling thread                     │
    └─────────────────────────────────────────────────────────────────────┘
                                    │ new Connection
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          THREAD POOL                                 │
    │  • Daemon workers pulling from an unbounded queue                   │
    └─────────────────────────────────────────────────────────────────────┘
                                    │ worker runs the connection
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  • Buffered request reads, sendall() writes, keep-alive timeouts    │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection
from .thread_pool import ThreadPool

__all__ = [
    "SocketServer",
    "Connection",
    "ThreadPool",
]
