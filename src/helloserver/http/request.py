"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Parses raw HTTP/1.1 request bytes into structured HTTPRequest objects.
Implements the parts of RFC 7230 the hello server needs.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ REQUEST LINE ─────────────────────────────────────────────────┐ │
    │  │    GET /api?verbose=1 HTTP/1.1\r\n                              │ │
    │  │    ─┬─ ───────┬──────  ────┬────                                │ │
    │  │   Method     URI        Version                                 │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS ──────────────────────────────────────────────────────┐ │
    │  │    Host: localhost:8080\r\n                                    │ │
    │  │    User-Agent: curl/8.4.0\r\n     ← echoed by the / handler    │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE ───────────────────────────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY (optional, Content-Length bytes) ────────────────────────┐ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
METHODS
=============================================================================

Neither route checks the method, so the parser does not keep a whitelist.
Any RFC 7230 token is accepted as a method (GET, POST, PURGE, ...). The
method is reported verbatim on the / page.

=============================================================================
TEXT ENCODING
=============================================================================

The request line and headers are decoded as latin-1, and percent-escapes in
the path are decoded the same way. Every byte maps to exactly one character,
so a non-UTF-8 User-Agent such as b"caf\xe9" survives as "caf\xe9" and
encodes back to the same bytes. Handlers that echo request text encode it
with latin-1 again.

No ".." check is made on the path. Nothing is read from disk, so
"/v1..2" is simply an unregistered path and gets a 404.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict
from urllib.parse import urlparse, unquote
import re

from .status_codes import HTTPStatus


class HTTPParseError(Exception):
    """
    Raised when HTTP request parsing fails.

    Carries the HTTP status that should be returned to the client:

        400 Bad Request               - Malformed request syntax
        413 Payload Too Large         - Request exceeds size limit
        505 HTTP Version Not Supported - Unknown HTTP version
    """

    def __init__(self, message: str, status_code: HTTPStatus = HTTPStatus.BAD_REQUEST):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class HTTPRequest:
    """
    Represents a parsed HTTP request.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:         The HTTP method exactly as sent ("GET", "PURGE", ...)

        path:           Request path WITHOUT query string, URL-decoded
                        byte for byte (latin-1)
                        "/api" not "/api?x=1"

        version:        "HTTP/1.1" or "HTTP/1.0" (affects keep-alive)

        headers:        Dictionary of headers with LOWERCASE keys,
                        values decoded as latin-1

        body:           Raw request body bytes

        client_address: (ip, port) of the client, used by the access log

    =========================================================================
    """

    method: str
    path: str
    version: str = "HTTP/1.1"

    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    client_address: tuple[str, int] = ("", 0)

    @property
    def user_agent(self) -> str:
        """
        Get the User-Agent header value.

        Returns an empty string when the client did not send one, which is
        what the / page shows in that case.
        """
        return self.get_header("user-agent")

    @property
    def is_head(self) -> bool:
        """HEAD responses carry headers only."""
        return self.method == "HEAD"

    @property
    def is_keep_alive(self) -> bool:
        """
        Check if this connection should be kept alive.

        HTTP/1.1 (default: keep-alive):
            Connection: close     → close after response
            (missing)             → keep alive

        HTTP/1.0 (default: close):
            Connection: keep-alive → keep alive
            (missing)              → close after response
        """
        connection = self.headers.get("connection", "").lower()

        if self.version == "HTTP/1.1":
            return connection != "close"
        return connection == "keep-alive"

    def get_header(self, name: str, default: str = "") -> str:
        """
        Get a header value (case-insensitive lookup).

        Example:
            request.get_header("User-Agent") == request.get_header("user-agent")
        """
        return self.headers.get(name.lower(), default)


class RequestParser:
    """
    Parses raw HTTP request bytes into HTTPRequest objects.

    ==========================================================================
    PARSER ARCHITECTURE
    ==========================================================================

        Raw Request Bytes
              │
              ▼
        ┌───────────────────────────────────────────────────────────────────┐
        │  1. Size Check            Too large? → HTTPParseError(413)        │
        │  2. Find \r\n\r\n         Not found? → HTTPParseError(400)        │
        │  3. Parse Request Line    METHOD SP URI SP VERSION                │
        │                           Invalid? → HTTPParseError(400/505)      │
        │  4. Parse Headers         "Name: Value", names lowercased         │
        │  5. Extract Body          Exactly Content-Length bytes            │
        │  6. Build HTTPRequest                                             │
        └───────────────────────────────────────────────────────────────────┘

    ==========================================================================
    """

    # token = 1*tchar (RFC 7230 section 3.2.6)
    REQUEST_LINE_PATTERN = re.compile(
        r"^([!#$%&'*+\-.^_`|~0-9A-Za-z]+) ([^ ]+) (HTTP/\d\.\d)$"
    )
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    SUPPORTED_VERSIONS = ("HTTP/1.0", "HTTP/1.1")

    def __init__(self, max_request_size: int = 10 * 1024 * 1024):
        """
        Initialize the request parser.

        Args:
            max_request_size: Maximum allowed request size in bytes.
                              Larger requests are rejected with 413.
        """
        self.max_request_size = max_request_size

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse raw HTTP request data into an HTTPRequest object.

        Args:
            data: Raw HTTP request bytes from socket.
            client_address: Client's (ip, port) tuple for logging.

        Returns:
            Parsed HTTPRequest object.

        Raises:
            HTTPParseError: If the request is malformed.
        """
        # =====================================================================
        # STEP 1: Reject oversized requests
        # =====================================================================
        if len(data) > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(data)} bytes",
                status_code=HTTPStatus.PAYLOAD_TOO_LARGE,
            )

        # =====================================================================
        # STEP 2: Split headers and body at the \r\n\r\n boundary
        # =====================================================================
        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        header_section = data[:header_end].decode("latin-1")
        body = data[header_end + 4:]

        lines = header_section.split("\r\n")

        # =====================================================================
        # STEP 3: Request line
        # =====================================================================
        method, path, version = self._parse_request_line(lines[0])

        # =====================================================================
        # STEP 4: Headers
        # =====================================================================
        headers = self._parse_headers(lines[1:])

        # =====================================================================
        # STEP 5: Body (exactly Content-Length bytes)
        # =====================================================================
        try:
            content_length = int(headers.get("content-length", 0))
        except ValueError:
            raise HTTPParseError("Invalid Content-Length header")

        if content_length < 0:
            raise HTTPParseError("Invalid Content-Length header")

        if len(body) < content_length:
            raise HTTPParseError(
                f"Incomplete body: expected {content_length} bytes, got {len(body)}"
            )

        body = body[:content_length]

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            body=body,
            client_address=client_address,
        )

    def _parse_request_line(
        self,
        line: str
    ) -> tuple[str, str, str]:
        """
        Parse the HTTP request line.

            METHOD SP REQUEST-URI SP HTTP-VERSION

        Returns:
            Tuple of (method, path, version)

        Raises:
            HTTPParseError: If line is malformed
        """
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line}")

        method, uri, version = match.groups()

        if version not in self.SUPPORTED_VERSIONS:
            raise HTTPParseError(
                f"Unsupported HTTP version: {version}",
                status_code=HTTPStatus.HTTP_VERSION_NOT_SUPPORTED,
            )

        # "/api?verbose=1" → "/api"; the query string is not used
        path = unquote(urlparse(uri).path, encoding="latin-1") or "/"

        return method, path, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse HTTP headers into a dictionary.

        =====================================================================
        SPECIAL CASES HANDLED
        =====================================================================

        1. CASE NORMALIZATION: names are lowercased
           ("User-Agent" and "user-agent" are the same header)

        2. HEADER CONTINUATION (obsolete line folding):
           lines starting with whitespace continue the previous header

        3. REPEATED HEADERS: combined with ", "

        =====================================================================
        """
        headers: Dict[str, str] = {}
        current_name = None

        for line in lines:
            if not line:
                continue

            if line[0] in (" ", "\t"):
                if current_name is not None:
                    headers[current_name] += " " + line.strip()
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue  # Lenient: skip malformed header lines

            name, value = match.groups()
            name = name.strip().lower()
            value = value.strip()
            current_name = name

            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value

        return headers


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    max_size: int = 10 * 1024 * 1024
) -> HTTPRequest:
    """
    Convenience function to parse an HTTP request in one call.

    Use RequestParser directly to parse many requests with the same settings.
    """
    parser = RequestParser(max_request_size=max_size)
    return parser.parse(data, client_address)
