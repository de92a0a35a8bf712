"""
Tests for the exception hierarchy and classification helpers.
"""

from __future__ import annotations

import pytest

from restmodel import Parameter, Response, ResponseStatus
from restmodel.exceptions import (
    ClientError,
    HTTPError,
    IncompleteResponseError,
    InvalidFieldError,
    InvalidStatusTransitionError,
    ResponseError,
    ServerError,
    TransportAbortedError,
    TransportError,
    TransportFailedError,
    TransportTimeoutError,
    ValidationError,
    classify_http_error,
    classify_transport_failure,
)


def completed(status_code, **kwargs):
    return Response(
        response_status=ResponseStatus.COMPLETED,
        status_code=status_code,
        response_uri="https://example.com/items",
        **kwargs,
    )


class TestHierarchy:
    """Test the exception tree."""

    def test_transport_and_http_errors_are_disjoint(self):
        assert issubclass(TransportTimeoutError, TransportError)
        assert issubclass(ClientError, HTTPError)
        assert issubclass(ServerError, HTTPError)
        assert not issubclass(TransportTimeoutError, HTTPError)
        assert not issubclass(ClientError, ServerError)

    def test_everything_derives_from_base(self):
        for cls in (ValidationError, TransportError, HTTPError, InvalidStatusTransitionError):
            assert issubclass(cls, ResponseError)
            assert issubclass(cls, Exception)

    def test_str_includes_url_and_context(self):
        err = ResponseError(message="boom", url="https://x", context={"attempt": 2})
        assert str(err) == "boom | url=https://x | context=(attempt=2)"

    def test_cause_is_chained(self):
        cause = OSError("dns")
        err = TransportFailedError(message="dns failed", cause=cause)
        assert err.__cause__ is cause
        assert err.status is ResponseStatus.ERROR

    def test_auto_messages(self):
        assert TransportTimeoutError(message="").message == "Request timed out"
        assert TransportAbortedError(message="").message == "Request aborted"
        assert IncompleteResponseError(message="").status is ResponseStatus.NONE
        assert InvalidFieldError(message="", field_name="content_length", field_value=-1).message == (
            "Invalid value content_length=-1"
        )
        assert "Completed" in InvalidStatusTransitionError(
            message="", current=ResponseStatus.COMPLETED, requested=ResponseStatus.ERROR
        ).message

    def test_http_error_message(self):
        assert HTTPError(message="", status_code=404, status_description="Not Found").message == (
            "HTTP 404 Not Found"
        )
        assert HTTPError(message="", status_code=400, response_excerpt="bad field").message == (
            "HTTP 400: 'bad field'"
        )

    def test_can_be_raised_and_caught(self):
        with pytest.raises(HTTPError):
            raise ClientError(message="", url="https://example.com/missing", status_code=404)


class TestClassifyHttpError:
    """Test status code to exception mapping."""

    @pytest.mark.parametrize(
        "status, expected",
        [
            (400, ClientError),
            (404, ClientError),
            (499, ClientError),
            (500, ServerError),
            (503, ServerError),
            (302, HTTPError),
            (600, HTTPError),
        ],
    )
    def test_mapping_by_range(self, status, expected):
        response = completed(status)
        err = classify_http_error(response)

        assert type(err) is expected
        assert err.status_code == status
        assert err.url == "https://example.com/items"
        assert err.response is response

    def test_carries_status_line_and_headers(self):
        response = completed(
            429,
            status_description="Too Many Requests",
            headers=[("Retry-After", "30"), ("X-Trace", "a"), ("X-Trace", "b")],
        )
        err = classify_http_error(response)

        assert err.status_description == "Too Many Requests"
        assert err.headers == (
            Parameter("Retry-After", "30"),
            Parameter("X-Trace", "a"),
            Parameter("X-Trace", "b"),
        )
        assert err.get_header("retry-after") == "30"
        assert err.get_header("x-trace") == "a"
        assert err.get_header("missing", "dflt") == "dflt"
        assert err.message == "HTTP 429 Too Many Requests"

    def test_excerpt_truncated(self):
        err = classify_http_error(completed(500, raw_bytes=b"x" * 40), excerpt_limit=8)
        assert err.response_excerpt == "x" * 8

    def test_empty_body_has_no_excerpt(self):
        assert classify_http_error(completed(404)).response_excerpt is None

    def test_transport_failure_is_rejected(self):
        with pytest.raises(ValueError):
            classify_http_error(Response(response_status=ResponseStatus.TIMED_OUT))


class TestClassifyTransportFailure:
    """Test transport outcome to exception mapping."""

    @pytest.mark.parametrize(
        "status, expected",
        [
            (ResponseStatus.ERROR, TransportFailedError),
            (ResponseStatus.TIMED_OUT, TransportTimeoutError),
            (ResponseStatus.ABORTED, TransportAbortedError),
            (ResponseStatus.NONE, IncompleteResponseError),
        ],
    )
    def test_mapping(self, status, expected):
        response = Response(response_status=status, response_uri="https://example.com")
        err = classify_transport_failure(response)

        assert type(err) is expected
        assert err.response is response
        assert err.url == "https://example.com"

    def test_completed_is_rejected(self):
        with pytest.raises(ValueError):
            classify_transport_failure(Response(response_status=ResponseStatus.COMPLETED))
