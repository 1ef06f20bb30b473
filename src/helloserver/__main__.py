"""
=============================================================================
HELLO SERVER ENTRY POINT
=============================================================================

    python -m helloserver
    helloserver                 (console script)

There are no command-line flags and no environment variables: the server
always listens on 0.0.0.0:8080.

    1. print the startup banner
    2. bind 0.0.0.0:8080       ── OSError ──► CRITICAL log, exit status 1
    3. serve until Ctrl+C

=============================================================================
"""

import logging
import sys
from typing import Optional

from .app import create_app, print_startup_banner
from .config import ServerConfig


logger = logging.getLogger("helloserver")


def main(config: Optional[ServerConfig] = None):
    """
    Run the server in the foreground.

    Args:
        config: Override for tests and embedding. Defaults to ServerConfig().
    """
    config = config or ServerConfig()
    server = create_app(config)

    print_startup_banner(config)

    try:
        server.run()
    except OSError as e:
        logger.critical(f"Server failed to start: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
