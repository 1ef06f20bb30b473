"""
Unit tests for the middleware pipeline and access logging.
"""

import logging

import pytest

from helloserver.middleware import (
    Middleware,
    MiddlewarePipeline,
    FunctionMiddleware,
    function_middleware,
    LoggingMiddleware,
)
from helloserver.http.request import HTTPRequest
from helloserver.http.response import HTTPResponse, ResponseBuilder, not_found
from helloserver.http.status_codes import HTTPStatus


def ok_handler(request: HTTPRequest) -> HTTPResponse:
    return ResponseBuilder().text("ok").build()


class RecordingMiddleware(Middleware):
    """Appends before/after markers to a shared list."""

    def __init__(self, label: str, calls: list):
        self.label = label
        self.calls = calls

    def __call__(self, request, next):
        self.calls.append(f"{self.label}:before")
        response = next(request)
        self.calls.append(f"{self.label}:after")
        return response


class TestMiddlewarePipeline:
    """Tests for MiddlewarePipeline."""

    def test_empty_pipeline_returns_handler(self):
        pipeline = MiddlewarePipeline()
        handler = pipeline.wrap(ok_handler)

        assert handler(HTTPRequest(method="GET", path="/")).body == b"ok"

    def test_first_added_is_outermost(self):
        calls = []
        pipeline = MiddlewarePipeline()
        pipeline.add(RecordingMiddleware("A", calls)).add(RecordingMiddleware("B", calls))

        pipeline.wrap(ok_handler)(HTTPRequest(method="GET", path="/"))

        assert calls == ["A:before", "B:before", "B:after", "A:after"]

    def test_use_adds_several(self):
        calls = []
        pipeline = MiddlewarePipeline().use(
            RecordingMiddleware("A", calls),
            RecordingMiddleware("B", calls),
        )

        assert len(pipeline) == 2
        assert [mw.label for mw in pipeline] == ["A", "B"]

    def test_short_circuit(self):
        @function_middleware
        def deny(request, next):
            return not_found()

        handler = MiddlewarePipeline().add(deny).wrap(ok_handler)
        response = handler(HTTPRequest(method="GET", path="/"))

        assert response.status == HTTPStatus.NOT_FOUND

    def test_function_middleware_name(self):
        def add_header(request, next):
            response = next(request)
            response.set_header("X-Test", "1")
            return response

        mw = FunctionMiddleware(add_header)
        response = MiddlewarePipeline().add(mw).wrap(ok_handler)(
            HTTPRequest(method="GET", path="/")
        )

        assert mw.name == "add_header"
        assert response.headers["X-Test"] == "1"


class TestLoggingMiddleware:
    """Tests for the access log."""

    def test_writes_access_line(self, caplog):
        request = HTTPRequest(method="GET", path="/api", client_address=("10.0.0.7", 5555))
        handler = MiddlewarePipeline().add(LoggingMiddleware()).wrap(ok_handler)

        with caplog.at_level(logging.INFO, logger="helloserver.access"):
            response = handler(request)

        assert response.body == b"ok"
        records = [r for r in caplog.records if r.name == "helloserver.access"]
        assert len(records) == 1
        line = records[0].getMessage()
        assert line.startswith("10.0.0.7 - - [")
        assert '"GET /api" 200 2 ' in line
        assert line.endswith("ms")

    def test_does_not_add_headers(self):
        handler = MiddlewarePipeline().add(LoggingMiddleware()).wrap(ok_handler)
        response = handler(HTTPRequest(method="GET", path="/"))

        assert set(response.headers) == {"Content-Type"}

    def test_logs_and_reraises_handler_errors(self, caplog):
        def broken(request):
            raise RuntimeError("boom")

        handler = MiddlewarePipeline().add(LoggingMiddleware()).wrap(broken)

        with caplog.at_level(logging.INFO, logger="helloserver.access"):
            with pytest.raises(RuntimeError):
                handler(HTTPRequest(method="GET", path="/"))

        assert any(
            r.levelno == logging.ERROR and "RuntimeError: boom" in r.getMessage()
            for r in caplog.records
        )
