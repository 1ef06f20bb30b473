"""
=============================================================================
MIDDLEWARE
=============================================================================

Code that runs around every request, between the server and the router.

    base.py      Middleware ABC, MiddlewarePipeline, FunctionMiddleware
    logging.py   LoggingMiddleware (text access log)

=============================================================================
"""

from .base import (
    Middleware,
    MiddlewarePipeline,
    FunctionMiddleware,
    function_middleware,
    NextHandler,
)
from .logging import LoggingMiddleware, RequestLog

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "FunctionMiddleware",
    "function_middleware",
    "NextHandler",
    "LoggingMiddleware",
    "RequestLog",
]
