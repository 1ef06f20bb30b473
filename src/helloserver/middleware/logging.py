"""
=============================================================================
LOGGING MIDDLEWARE
=============================================================================

Writes one access line per request to the ``helloserver.access`` logger.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ 127.0.0.1 - - [19/Oct/2026:10:55:36 +0200] "GET /api" 200 96 0.41ms │
    │ ───────────────────────────────────────────────────────────────────│
    │ IP          Timestamp                 Method/Path Status Size Time  │
    └─────────────────────────────────────────────────────────────────────┘

Plain text in the Apache common-log spirit; no JSON output and no request
IDs. The record goes through the standard logging tree, so it picks up
the handler and format that HTTPServer._setup_logging() installs.

=============================================================================
"""

import time
import logging
from dataclasses import dataclass

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("helloserver.access")


@dataclass
class RequestLog:
    """One access log entry."""

    method: str
    path: str
    client_ip: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_text(self) -> str:
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Add it first so the timing covers everything after it:

        pipeline.add(LoggingMiddleware())

    A handler exception is logged at ERROR with the request line and
    re-raised; the server turns it into a 500.
    """

    def __init__(self, log_level: int = logging.INFO):
        """
        Args:
            log_level: Level for access lines. INFO by default, so they
                       disappear when the server runs at WARNING.
        """
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        start_time = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        entry = RequestLog(
            method=request.method,
            path=request.path,
            client_ip=request.client_address[0],
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )
        logger.log(self.log_level, entry.to_text())

        return response
