"""
=============================================================================
HANDLERS MODULE
=============================================================================

The two request handlers the server ships with.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Path  │ Handler        │ Content-Type       │ Body                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │ /     │ hello_handler  │ text/html          │ page echoing request  │
    │ /api  │ api_handler    │ application/json   │ message + timestamp   │
    └─────────────────────────────────────────────────────────────────────┘

Both are plain functions ``(HTTPRequest) -> HTTPResponse``. They accept any
method, leave the status at 200, share no state and read only the request
and the clock, so any number of worker threads can run them at once.

=============================================================================
"""

from .hello import hello_handler, render_hello_page
from .api import api_handler, render_api_payload

__all__ = [
    "hello_handler",
    "render_hello_page",
    "api_handler",
    "render_api_payload",
]
