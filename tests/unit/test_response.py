"""
Unit tests for HTTP response building.
"""

from datetime import datetime, timedelta, timezone

import pytest

from helloserver.http.response import (
    HTTPResponse,
    ResponseBuilder,
    format_http_date,
    format_rfc3339,
    not_found,
    internal_error,
    error_response,
)
from helloserver.http.status_codes import HTTPStatus


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        response = HTTPResponse(status=HTTPStatus.OK)
        assert response.status_line == "HTTP/1.1 200 OK"

        response = HTTPResponse(status=HTTPStatus.NOT_FOUND)
        assert response.status_line == "HTTP/1.1 404 Not Found"

    def test_default_status_is_ok(self):
        assert HTTPResponse().status == HTTPStatus.OK

    def test_to_bytes_includes_headers(self):
        """Test that to_bytes includes all headers."""
        response = HTTPResponse(
            status=HTTPStatus.OK,
            headers={"Content-Type": "text/html"},
            body=b"test",
        )

        result = response.to_bytes()

        assert result.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"Content-Type: text/html\r\n" in result
        assert b"Content-Length: 4\r\n" in result
        assert b"Date: " in result
        assert b"Server: helloserver/1.0\r\n" in result
        assert result.endswith(b"\r\n\r\ntest")

    def test_to_bytes_counts_utf8_bytes(self):
        """Content-Length is the encoded length, not the character count."""
        response = HTTPResponse().set_body("héllo")
        result = response.to_bytes()

        assert b"Content-Length: 6\r\n" in result

    def test_to_bytes_without_body_keeps_content_length(self):
        """HEAD responses drop the body but keep the GET Content-Length."""
        response = HTTPResponse(body=b"hello world")
        result = response.to_bytes(include_body=False)

        assert b"Content-Length: 11\r\n" in result
        assert result.endswith(b"\r\n\r\n")
        assert b"hello world" not in result

    def test_custom_server_name(self):
        result = HTTPResponse().to_bytes("custom/2.0")
        assert b"Server: custom/2.0\r\n" in result

    def test_set_header_chaining(self):
        """Test method chaining for headers."""
        response = (HTTPResponse()
            .set_header("X-One", "1")
            .set_header("X-Two", "2"))

        assert response.headers["X-One"] == "1"
        assert response.headers["X-Two"] == "2"


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_status(self):
        """Test setting status code."""
        response = ResponseBuilder().status(HTTPStatus.NOT_FOUND).build()
        assert response.status == HTTPStatus.NOT_FOUND

    def test_content_type_is_verbatim(self):
        """No charset parameter is added."""
        response = ResponseBuilder().content_type("text/html").body("<p>").build()

        assert response.headers["Content-Type"] == "text/html"
        assert response.content_type == "text/html"

    def test_text_body(self):
        """Test plain text body."""
        response = ResponseBuilder().text("Hello, World!").build()

        assert response.headers["Content-Type"] == "text/plain; charset=utf-8"
        assert response.body == b"Hello, World!"

    def test_close_connection(self):
        """Test connection close header."""
        response = ResponseBuilder().close_connection().build()
        assert response.headers["Connection"] == "close"

    def test_builds_are_independent(self):
        """Mutating one built response does not leak into the next."""
        builder = ResponseBuilder().content_type("text/html")
        first = builder.build()
        first.set_header("X-Extra", "1")

        assert "X-Extra" not in builder.build().headers

    def test_method_chaining(self):
        """Test fluent API chaining."""
        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .header("X-Custom", "value")
            .content_type("application/json")
            .body('{"key": "value"}')
            .build())

        assert response.status == HTTPStatus.OK
        assert response.headers["X-Custom"] == "value"
        assert response.body == b'{"key": "value"}'


class TestConvenienceFunctions:
    """Tests for convenience response functions."""

    def test_not_found(self):
        """The default 404 is plain text."""
        response = not_found()

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.headers["Content-Type"] == "text/plain; charset=utf-8"
        assert response.body == b"404 page not found\n"

    def test_internal_error(self):
        """Test internal_error() function."""
        response = internal_error()

        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert response.headers["Content-Type"].startswith("text/plain")
        assert b"Internal Server Error" in response.body

    @pytest.mark.parametrize("status", [
        HTTPStatus.BAD_REQUEST,
        HTTPStatus.REQUEST_TIMEOUT,
        HTTPStatus.PAYLOAD_TOO_LARGE,
        HTTPStatus.HTTP_VERSION_NOT_SUPPORTED,
    ])
    def test_error_response_closes(self, status):
        response = error_response(status)

        assert response.status == status
        assert response.headers["Connection"] == "close"
        assert response.body.startswith(str(int(status)).encode())


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_status_phrases(self):
        """Test that all statuses have phrases."""
        for status in HTTPStatus:
            assert status.phrase != "Unknown"

        assert HTTPStatus.OK.phrase == "OK"
        assert HTTPStatus.NOT_FOUND.phrase == "Not Found"

    def test_is_error(self):
        assert HTTPStatus.NOT_FOUND.is_error
        assert HTTPStatus.INTERNAL_SERVER_ERROR.is_error
        assert not HTTPStatus.OK.is_error


class TestFormatHTTPDate:
    """Tests for HTTP date formatting."""

    def test_format(self):
        """Test HTTP date format."""
        dt = datetime(2026, 1, 15, 12, 30, 45, tzinfo=timezone.utc)

        assert format_http_date(dt) == "Thu, 15 Jan 2026 12:30:45 GMT"


class TestFormatRFC3339:
    """Tests for RFC 3339 timestamps."""

    def test_utc_uses_z(self):
        dt = datetime(2026, 10, 19, 12, 0, 5, tzinfo=timezone.utc)
        assert format_rfc3339(dt) == "2026-10-19T12:00:05Z"

    def test_positive_offset(self):
        tz = timezone(timedelta(hours=2))
        dt = datetime(2026, 10, 19, 14, 0, 5, tzinfo=tz)
        assert format_rfc3339(dt) == "2026-10-19T14:00:05+02:00"

    def test_negative_offset(self):
        tz = timezone(timedelta(hours=-5, minutes=-30))
        dt = datetime(2026, 10, 19, 6, 30, 0, tzinfo=tz)
        assert format_rfc3339(dt) == "2026-10-19T06:30:00-05:30"

    def test_drops_sub_second_precision(self):
        dt = datetime(2026, 10, 19, 12, 0, 5, 987654, tzinfo=timezone.utc)
        assert format_rfc3339(dt) == "2026-10-19T12:00:05Z"

    def test_default_is_now_with_offset(self):
        """Without an argument the current local time carries its offset."""
        stamp = format_rfc3339()
        parsed = datetime.fromisoformat(stamp.replace("Z", "+00:00"))

        assert parsed.tzinfo is not None
        assert abs((datetime.now(timezone.utc) - parsed).total_seconds()) < 5
