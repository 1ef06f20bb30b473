"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds HTTP/1.1 responses and serializes them for the socket.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ STATUS LINE ──────────────────────────────────────────────────┐ │
    │  │    HTTP/1.1 200 OK\r\n                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS ──────────────────────────────────────────────────────┐ │
    │  │    Content-Type: application/json\r\n     ← set by handler     │ │
    │  │    Content-Length: 96\r\n                 ← added by to_bytes │ │
    │  │    Date: Mon, 19 Oct 2026 12:00:00 GMT\r\n ← added by to_bytes│ │
    │  │    Server: helloserver/1.0\r\n            ← added by to_bytes │ │
    │  │    Connection: keep-alive\r\n             ← added by server    │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE ───────────────────────────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY (written once, omitted on the wire for HEAD) ────────────┐ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
TWO KINDS OF TIMESTAMP
=============================================================================

    Date header    format_http_date()   Mon, 19 Oct 2026 12:00:00 GMT
                   always UTC, RFC 7231 IMF-fixdate

    /api payload   format_rfc3339()     2026-10-19T14:00:00+02:00
                   local time, second precision, zero offset written as "Z"

=============================================================================
INTERVIEW QUESTIONS ABOUT HTTP RESPONSES
=============================================================================

Q: "How does the client know when the response body ends?"
A: "Content-Length gives the exact byte count. The alternative is
   Transfer-Encoding: chunked. This server always knows the full body up
   front, so it always sends Content-Length."

Q: "What does a HEAD response look like?"
A: "Exactly the GET headers, including the Content-Length the GET body
   would have had, followed by no body at all."

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Union

from .status_codes import HTTPStatus


DEFAULT_SERVER_NAME = "helloserver/1.0"

NOT_FOUND_BODY = "404 page not found\n"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    =========================================================================
    RESPONSE LIFECYCLE
    =========================================================================

        Handler returns          to_bytes()              Socket sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes

        HTTPResponse(            b"HTTP/1.1 200 OK\r\n   socket.sendall(
          status=200,              Content-Type: ...\r\n     response_bytes
          headers={...},           \r\n                    )
          body=b"..."              <html>..."
        )

    =========================================================================
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Example: "HTTP/1.1 404 Not Found"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def content_type(self) -> str:
        return self.headers.get("Content-Type", "")

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a response header. Returns self for chaining."""
        self.headers[name] = value
        return self

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the response body. Strings are encoded as UTF-8."""
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        else:
            self.body = body
        return self

    def to_bytes(
        self,
        server_name: str = DEFAULT_SERVER_NAME,
        include_body: bool = True
    ) -> bytes:
        """
        Serialize the response to bytes for sending over socket.

        =====================================================================
        SERIALIZATION FORMAT
        =====================================================================

            HTTP/1.1 200 OK\r\n          ← Status line
            Content-Type: text/html\r\n
            Content-Length: 812\r\n      ← Auto-calculated
            Date: Mon, 19 Oct ...\r\n    ← Auto-added
            Server: helloserver/1.0\r\n  ← Auto-added
            \r\n                         ← Empty line (separator)
            <html>...                    ← Body bytes (unless include_body
                                            is False, as for HEAD)

        =====================================================================

        Args:
            server_name: Value for the Server header.
            include_body: False drops the body but keeps Content-Length.

        Returns:
            Complete HTTP response as bytes ready for socket.sendall()
        """
        response_headers = dict(self.headers)

        if "Content-Length" not in response_headers:
            response_headers["Content-Length"] = str(len(self.body))

        if "Date" not in response_headers:
            response_headers["Date"] = format_http_date(datetime.now(timezone.utc))

        if "Server" not in response_headers:
            response_headers["Server"] = server_name

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"

        if not include_body:
            return header_bytes
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

    ==========================================================================
    USAGE
    ==========================================================================

        response = (ResponseBuilder()
            .content_type("application/json")
            .body(payload)
            .build())

    Status defaults to 200 OK, so the hello handlers never call status().

    ==========================================================================
    """

    def __init__(self, server_name: str = DEFAULT_SERVER_NAME):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body = b""
        self._server_name = server_name

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        """Set the HTTP status code."""
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Add a single response header."""
        self._headers[name] = value
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        """
        Set the Content-Type header verbatim.

        No charset parameter is appended, so content_type("text/html")
        puts exactly "text/html" on the wire.
        """
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set the response body (string auto-encoded to UTF-8)."""
        if isinstance(body, str):
            self._body = body.encode("utf-8")
        else:
            self._body = body
        return self

    def text(self, text: str, content_type: str = "text/plain; charset=utf-8") -> "ResponseBuilder":
        """Set a plain text body and its Content-Type."""
        self._body = text.encode("utf-8")
        self._headers["Content-Type"] = content_type
        return self

    def close_connection(self) -> "ResponseBuilder":
        """
        Set Connection: close header.

        Used for error responses after which the server drops the socket.
        """
        self._headers["Connection"] = "close"
        return self

    def build(self) -> HTTPResponse:
        """Build and return the HTTPResponse object."""
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )

    def to_bytes(self) -> bytes:
        """Build and serialize the response in one step."""
        return self.build().to_bytes(self._server_name)


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Mon, 19 Oct 2026 12:00:00 GMT

    HTTP dates are ALWAYS in GMT (UTC), never local time.
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


def format_rfc3339(dt: Optional[datetime] = None) -> str:
    """
    Format a datetime as RFC 3339 with second precision.

    Naive datetimes (and the default "now") are taken as local time.

        2026-10-19T14:00:00+02:00     local zone east of UTC
        2026-10-19T12:00:00Z          zero offset uses "Z"
        2026-10-19T07:00:00-05:00     local zone west of UTC

    Args:
        dt: Datetime to format. Defaults to the current local time.

    Returns:
        Timestamp string.
    """
    if dt is None:
        dt = datetime.now()
    if dt.tzinfo is None:
        dt = dt.astimezone()

    stamp = dt.isoformat(timespec="seconds")
    if stamp.endswith("+00:00"):
        stamp = stamp[:-6] + "Z"
    return stamp


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def not_found() -> HTTPResponse:
    """
    Create the default 404 response for unrouted paths.

        HTTP/1.1 404 Not Found
        Content-Type: text/plain; charset=utf-8

        404 page not found
    """
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).text(NOT_FOUND_BODY).build()


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    """
    Create a 500 Internal Server Error response.

    The message is generic; the traceback goes to the log, not the client.
    """
    return (ResponseBuilder()
        .status(HTTPStatus.INTERNAL_SERVER_ERROR)
        .text(message + "\n")
        .build())


def error_response(status: HTTPStatus, message: Optional[str] = None) -> HTTPResponse:
    """
    Create a plain-text error response that closes the connection.

    Used by the server for parse failures (400, 413, 505) and timeouts (408).
    """
    return (ResponseBuilder()
        .status(status)
        .text(f"{int(status)} {message or status.phrase}\n")
        .close_connection()
        .build())
