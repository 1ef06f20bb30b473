"""
=============================================================================
HTTP STATUS CODES (RFC 7231)
=============================================================================

The status codes this server can actually send, with their reason phrases.

    ┌────────────────────────────────────────────────────────────────────┐
    │                   STATUS CODES IN USE                              │
    ├────────┬───────────────────────────────────────────────────────────┤
    │  2xx   │ 200 OK            - Both routes (never set explicitly)    │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  4xx   │ 400 Bad Request   - Malformed request line / ".." path    │
    │        │ 404 Not Found     - Any path other than / and /api        │
    │        │ 408 Request Timeout - Client connected but sent nothing   │
    │        │ 413 Payload Too Large - Request over max_request_size     │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  5xx   │ 500 Internal Error - Handler raised                       │
    │        │ 505 HTTP Version Not Supported - Not HTTP/1.0 or 1.1      │
    └────────┴───────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    This enum extends IntEnum, so status codes can be used as integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200                            # Standard success response

    BAD_REQUEST = 400                   # Malformed request syntax
    NOT_FOUND = 404                     # Resource doesn't exist
    REQUEST_TIMEOUT = 408               # Client took too long to send request
    PAYLOAD_TOO_LARGE = 413             # Request body too large

    INTERNAL_SERVER_ERROR = 500         # Unexpected server error (catch-all)
    HTTP_VERSION_NOT_SUPPORTED = 505    # HTTP version not supported

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── Reason phrase
                      └───────── Status code
        """
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_error(self) -> bool:
        """Check if this is an error status code (4xx or 5xx)."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.REQUEST_TIMEOUT: "Request Timeout",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}
