"""
Tests for populating responses from httpx results.

Tests cover:
- Completed exchanges (2xx and 4xx/5xx alike)
- Header order, duplicates and original casing
- Set-Cookie parsing
- Transport failures (timeouts, connect errors, cancellation)
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from restmodel import (
    Response,
    ResponseStatus,
    TypedResponse,
    classify_transport_error,
    from_httpx_response,
    from_transport_error,
    parse_set_cookie,
)
from restmodel.exceptions import ServerError, TransportTimeoutError


def make_response(
    status_code: int = 200,
    headers: list[tuple[str, str]] | None = None,
    content: bytes = b"",
    url: str = "https://example.com/resource",
) -> httpx.Response:
    """Build an in-memory httpx response with a bound request."""
    return httpx.Response(
        status_code,
        headers=headers or [],
        content=content,
        request=httpx.Request("GET", url),
    )


class TestFromHttpxResponse:
    """Test completed exchanges."""

    def test_success_populates_fields(self):
        resp = make_response(
            headers=[
                ("Content-Type", "application/json; charset=utf-8"),
                ("Server", "gunicorn"),
            ],
            content=b'{"ok": true}',
        )

        response = from_httpx_response(resp)

        assert isinstance(response, Response)
        assert response.response_status is ResponseStatus.COMPLETED
        assert response.status_code == 200
        assert response.status_description == "OK"
        assert response.response_uri == "https://example.com/resource"
        assert response.server == "gunicorn"
        assert response.content_type == "application/json; charset=utf-8"
        assert response.content_length == len(b'{"ok": true}')
        assert response.raw_bytes == b'{"ok": true}'
        assert response.content == '{"ok": true}'
        assert response.request is resp.request
        assert response.is_successful

    def test_http_error_is_still_completed(self):
        """Test a 500 is a completed transport with an error status code."""
        response = from_httpx_response(make_response(status_code=500, content=b"oops"))

        assert response.response_status is ResponseStatus.COMPLETED
        assert response.status_code == 500
        assert response.error_message is None
        with pytest.raises(ServerError):
            response.ensure_success()

    def test_headers_keep_order_duplicates_and_case(self):
        resp = make_response(
            headers=[
                ("X-Trace", "1"),
                ("Set-Cookie", "a=1"),
                ("Set-Cookie", "b=2"),
                ("x-trace", "2"),
            ]
        )

        response = from_httpx_response(resp)
        pairs = [(h.name, h.value) for h in response.headers]

        assert ("X-Trace", "1") in pairs
        assert pairs.index(("Set-Cookie", "a=1")) < pairs.index(("Set-Cookie", "b=2"))
        assert response.get_headers("x-trace") == ["1", "2"]

    def test_cookies_parsed_in_order(self):
        resp = make_response(
            headers=[
                ("Set-Cookie", "sid=abc; Path=/; HttpOnly; Secure"),
                ("Set-Cookie", "sid=def; Domain=example.com"),
            ]
        )

        response = from_httpx_response(resp)

        assert [(c.name, c.value) for c in response.cookies] == [("sid", "abc"), ("sid", "def")]
        first, second = response.cookies
        assert first.path == "/"
        assert first.http_only and first.secure
        assert second.domain == "example.com"

    def test_content_length_header_preferred(self):
        resp = make_response(headers=[("Content-Length", "3")], content=b"abc")
        assert from_httpx_response(resp).content_length == 3

    def test_typed_response_class(self):
        response = from_httpx_response(make_response(content=b"[]"), response_cls=TypedResponse)

        assert isinstance(response, TypedResponse)
        assert response.data is None

    def test_explicit_request_description(self):
        description = {"method": "GET", "resource": "/resource"}
        response = from_httpx_response(make_response(), request=description)
        assert response.request == description


class TestFromTransportError:
    """Test failed exchanges."""

    def test_timeout(self):
        request = httpx.Request("GET", "https://slow.example.com/")
        exc = httpx.ReadTimeout("request timed out", request=request)

        response = from_transport_error(exc)

        assert response.response_status is ResponseStatus.TIMED_OUT
        assert response.error_message == "request timed out"
        assert response.error_exception is exc
        assert response.status_code is None
        assert response.response_uri == "https://slow.example.com/"
        assert response.content == ""
        assert "RawBytes=null" in response.to_diagnostic_string()
        with pytest.raises(TransportTimeoutError):
            response.ensure_success()

    def test_connect_error(self):
        exc = httpx.ConnectError("connection refused")
        response = from_transport_error(exc)

        assert response.response_status is ResponseStatus.ERROR
        assert response.response_uri is None
        assert not response.is_successful

    def test_cancelled(self):
        request = httpx.Request("GET", "https://example.com/")
        response = from_transport_error(asyncio.CancelledError(), request=request)

        assert response.response_status is ResponseStatus.ABORTED
        assert response.error_message == "CancelledError"
        assert response.response_uri == "https://example.com/"

    @pytest.mark.parametrize(
        "exc, expected",
        [
            (httpx.ConnectTimeout("t"), ResponseStatus.TIMED_OUT),
            (TimeoutError(), ResponseStatus.TIMED_OUT),
            (httpx.ConnectError("c"), ResponseStatus.ERROR),
            (OSError("dns"), ResponseStatus.ERROR),
            (KeyboardInterrupt(), ResponseStatus.ABORTED),
        ],
    )
    def test_classify_transport_error(self, exc, expected):
        assert classify_transport_error(exc) is expected


class TestParseSetCookie:
    """Test Set-Cookie parsing."""

    def test_expires(self):
        (cookie,) = parse_set_cookie("old=1; Expires=Wed, 21 Oct 2015 07:28:00 GMT")

        assert cookie.expires is not None
        assert cookie.expires.year == 2015
        assert cookie.expired

    def test_max_age(self):
        (cookie,) = parse_set_cookie("fresh=1; Max-Age=3600")
        assert cookie.expires is not None
        assert not cookie.expired

    def test_session_cookie(self):
        (cookie,) = parse_set_cookie("s=v")
        assert cookie.expires is None
        assert not cookie.expired
        assert cookie.timestamp is not None

    def test_unknown_attribute_ignored(self):
        cookies = parse_set_cookie("sid=abc; Path=/; Priority=High")

        assert [(c.name, c.value, c.path) for c in cookies] == [("sid", "abc", "/")]

    def test_unknown_flag_ignored(self):
        (cookie,) = parse_set_cookie("sid=abc; Path=/; Secure; Partitioned")

        assert cookie.name == "sid"
        assert cookie.secure
        assert not cookie.http_only

    def test_flags_and_domain(self):
        (cookie,) = parse_set_cookie("sid=abc; Domain=example.com; HttpOnly; SameSite=Lax")

        assert cookie.domain == "example.com"
        assert cookie.http_only
        assert not cookie.secure

    def test_empty_header_yields_nothing(self):
        assert parse_set_cookie("") == []
