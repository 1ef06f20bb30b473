"""
=============================================================================
HELLO PAGE HANDLER
=============================================================================

Serves ``/``: a small HTML page that echoes back who asked and how.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Hello World from Go!                                              │
    │   Congratulations! Your Go web server is running successfully.      │
    │   ┌───────────────────────────────────────────────────────────────┐ │
    │   │ Server Info:                                                  │ │
    │   │ Time: 2026-10-19 14:03:07          ← local wall clock         │ │
    │   │ Method: GET                        ← request method           │ │
    │   │ URL Path: /                        ← request path             │ │
    │   │ User Agent: curl/8.4.0             ← User-Agent header        │ │
    │   └───────────────────────────────────────────────────────────────┘ │
    └─────────────────────────────────────────────────────────────────────┘

The page text predates this Python port and is served byte for byte,
tab indentation included, so existing clients and screenshots still match.

The four values are substituted WITHOUT HTML escaping. A User-Agent of
``<script>...`` ends up in the page as markup.

=============================================================================
"""

from datetime import datetime
from typing import Optional

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder


CONTENT_TYPE = "text/html"

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Substituted with %: time, method, path, user agent
HTML_TEMPLATE = """
	<!DOCTYPE html>
	<html>
	<head>
		<title>Go Web Server - Hello World</title>
		<style>
			body { 
				font-family: Arial, sans-serif; 
				max-width: 800px; 
				margin: 50px auto; 
				padding: 20px;
				background-color: #f5f5f5;
			}
			.container {
				background: white;
				padding: 30px;
				border-radius: 10px;
				box-shadow: 0 2px 10px rgba(0,0,0,0.1);
			}
			h1 { color: #00ADD8; }
			.info { 
				background: #e8f4f8; 
				padding: 15px; 
				border-radius: 5px; 
				margin: 20px 0;
			}
		</style>
	</head>
	<body>
		<div class="container">
			<h1> Hello World from Go!</h1>
			<p>Congratulations! Your Go web server is running successfully.</p>
			<div class="info">
				<strong>Server Info:</strong><br>
				Time: %s<br>
				Method: %s<br>
				URL Path: %s<br>
				User Agent: %s
			</div>
			<p>This is a simple HTTP server built with Go's standard library.</p>
		</div>
	</body>
	</html>
\t"""


def render_hello_page(
    method: str,
    path: str,
    user_agent: str,
    now: Optional[datetime] = None,
) -> str:
    """
    Fill the page template.

    Args:
        method: Request method, verbatim.
        path: Request path, verbatim.
        user_agent: Raw User-Agent value ("" when absent).
        now: Time to show. Defaults to the current local time.
    """
    if now is None:
        now = datetime.now()
    return HTML_TEMPLATE % (now.strftime(TIME_FORMAT), method, path, user_agent)


def hello_handler(request: HTTPRequest) -> HTTPResponse:
    """
    Handle any method on ``/``.

    Request text arrives latin-1 decoded; encoding the page the same way
    puts the client's original bytes back on the wire.
    """
    page = render_hello_page(request.method, request.path, request.user_agent)
    return (ResponseBuilder()
        .content_type(CONTENT_TYPE)
        .body(page.encode("latin-1"))
        .build())
