"""
=============================================================================
API HANDLER
=============================================================================

Serves ``/api`` with a fixed JSON document and the current time:

    {
            "message": "Hello world from Go API!",
            "timestamp": "2026-10-19T14:03:07+02:00",
            "status": "success"
        }

    (indented with two tabs per field and one before the closing brace)

The body is assembled from a string template rather than json.dumps so the
field order and whitespace (tabs included) stay exactly as clients have
always seen them. The only variable part is an RFC 3339 timestamp, which
never needs JSON escaping.

=============================================================================
"""

from datetime import datetime
from typing import Optional

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, format_rfc3339


CONTENT_TYPE = "application/json"

MESSAGE = "Hello world from Go API!"
STATUS = "success"

JSON_TEMPLATE = (
    '{\n'
    '\t\t"message": "' + MESSAGE + '",\n'
    '\t\t"timestamp": "%s",\n'
    '\t\t"status": "' + STATUS + '"\n'
    '\t}'
)


def render_api_payload(now: Optional[datetime] = None) -> str:
    """Fill the payload template; ``now`` defaults to the local time."""
    return JSON_TEMPLATE % format_rfc3339(now)


def api_handler(request: HTTPRequest) -> HTTPResponse:
    """Handle any method on ``/api``."""
    return (ResponseBuilder()
        .content_type(CONTENT_TYPE)
        .body(render_api_payload())
        .build())
