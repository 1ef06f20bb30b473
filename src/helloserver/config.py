"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the hello server.

=============================================================================
WHY A CONFIG CLASS?
=============================================================================

The server has no config files, no environment variables and no CLI flags.
Every knob still lives in one typed place so that:

1. The fixed production values (port 8080, all interfaces) are visible
2. Tests and embedders can override them in code (port=0 for a free port)
3. Bad values are rejected before a socket is ever created

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    WHERE VALUES COME FROM                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   python -m helloserver                                             │
    │        └── ServerConfig()            (defaults below, port 8080)    │
    │                                                                      │
    │   tests / embedding                                                 │
    │        └── ServerConfig(port=0, log_level="WARNING", ...)           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout

    HTTP SETTINGS
    - keep_alive, keep_alive_timeout, max_request_size

    THREADING SETTINGS
    - min_workers, max_workers

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IP address to bind to.
    - "0.0.0.0" - All network interfaces (default, same as ":8080")
    - "127.0.0.1" - Localhost only
    """

    port: int = 8080
    """
    The port number to listen on.
    - 8080 - The fixed production port
    - 0 - Let the OS pick a free port (tests)
    """

    backlog: int = 128
    """
    Maximum number of queued connections.
    When the accept queue is full, new connections are refused.
    """

    buffer_size: int = 8192
    """Size of each recv() call in bytes."""

    timeout: Optional[float] = 30.0
    """
    Socket timeout in seconds for reading the first request.
    None = blocking (infinite wait).
    """

    # ─────────────────────────────────────────────────────────────────────
    # HTTP SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    keep_alive: bool = True
    """
    Enable HTTP keep-alive connections.
    Allows multiple requests on same TCP connection.
    """

    keep_alive_timeout: float = 5.0
    """Idle seconds before a keep-alive connection is closed."""

    max_request_size: int = 10 * 1024 * 1024  # 10 MB
    """
    Maximum allowed request size in bytes.
    Larger requests are answered with 413 Payload Too Large.
    """

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    min_workers: int = 4
    """
    Minimum number of worker threads.
    These threads are created at startup.
    """

    max_workers: int = 16
    """
    Maximum number of worker threads.
    The pool grows toward this when every worker is busy.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    INFO prints one access line per request.
    """

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "helloserver/1.0"
    """Value of the Server response header."""

    @property
    def base_url(self) -> str:
        """URL printed in the startup banner (always localhost)."""
        return f"http://localhost:{self.port}"

    def validate(self) -> None:
        """
        Validate configuration values.

        =====================================================================
        FAIL-FAST PRINCIPLE
        =====================================================================

        We validate configuration at startup, not at first use.
        A bad value surfaces as a ValueError before the socket is bound.

        =====================================================================
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.min_workers < 1:
            raise ValueError("min_workers must be >= 1")

        if self.max_workers < self.min_workers:
            raise ValueError("max_workers must be >= min_workers")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.keep_alive_timeout <= 0:
            raise ValueError("keep_alive_timeout must be > 0")
