"""
Populate responses from httpx results.

This is the executor side of the model: whoever performs the request hands the
finished ``httpx.Response`` (or the exception that stopped it) to these helpers
and gets a fully populated Response back. Nothing here sends requests, retries
or deserializes.

Usage:
    async with httpx.AsyncClient() as client:
        try:
            resp = await client.get(url)
        except httpx.HTTPError as exc:
            response = from_transport_error(exc)
        else:
            response = from_httpx_response(resp)
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from http.cookiejar import parse_ns_headers
from typing import Any, List, Optional, Type, TypeVar

import httpx

from .models.enums import ResponseStatus
from .models.parameters import ResponseCookie
from .models.response import ResponseBase, Response
from .observability.logging import get_restmodel_logger

__all__ = [
    "from_httpx_response",
    "from_transport_error",
    "classify_transport_error",
    "parse_set_cookie",
]

R = TypeVar("R", bound=ResponseBase)

_logger = get_restmodel_logger(__name__)


def classify_transport_error(exc: BaseException) -> ResponseStatus:
    """
    Map an exception raised while executing a request to a transport outcome.

    Timeouts -> TIMED_OUT, cancellation -> ABORTED, everything else -> ERROR.
    """
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return ResponseStatus.TIMED_OUT
    if isinstance(exc, (asyncio.CancelledError, KeyboardInterrupt)):
        return ResponseStatus.ABORTED
    return ResponseStatus.ERROR


def parse_set_cookie(header_value: str) -> List[ResponseCookie]:
    """
    Parse one Set-Cookie header value into ResponseCookie entries.

    One header carries one cookie; attributes the parser does not know
    (Priority, Partitioned, SameSite, ...) are ignored. A header with no
    cookie name yields an empty list; the raw header stays in the response
    headers either way.
    """
    now = datetime.now(timezone.utc)
    cookies: List[ResponseCookie] = []
    for pairs in parse_ns_headers([header_value]):
        name, value = pairs[0]
        attrs = {key.lower(): val for key, val in pairs[1:]}

        expires: Optional[datetime] = None
        if attrs.get("expires") is not None:
            expires = datetime.fromtimestamp(attrs["expires"], tz=timezone.utc)
        max_age = attrs.get("max-age")
        if max_age and max_age.lstrip("-").isdigit():
            expires = now + timedelta(seconds=int(max_age))
        version = attrs.get("version")

        cookies.append(
            ResponseCookie(
                name=name,
                value=(value or "").strip('"'),
                comment=attrs.get("comment"),
                domain=attrs.get("domain"),
                expired=expires is not None and expires <= now,
                expires=expires,
                http_only="httponly" in attrs,
                path=attrs.get("path"),
                port=attrs.get("port"),
                secure="secure" in attrs,
                timestamp=now,
                version=int(version) if version and version.isdigit() else None,
            )
        )

    if not cookies:
        _logger.warning("cookie.parse_failed", header=header_value)
    return cookies


def _request_of(source: Any) -> Optional[httpx.Request]:
    # httpx raises RuntimeError when a response/error was built without a request
    try:
        return source.request
    except RuntimeError:
        return None


def from_httpx_response(
    resp: httpx.Response,
    request: Any = None,
    response_cls: Type[R] = Response,
) -> R:
    """
    Build a COMPLETED response from an httpx.Response whose body has been read.

    Every status code, 4xx and 5xx included, produces COMPLETED: the transport
    succeeded even if the server said no.

    Args:
        resp: httpx response (body already read)
        request: Request description to attach; defaults to ``resp.request``
        response_cls: Response class to instantiate

    Returns:
        Populated response
    """
    http_request = _request_of(resp)
    if request is None:
        request = http_request

    raw = resp.content
    length_header = resp.headers.get("Content-Length", "")
    content_length = int(length_header) if length_header.strip().isdigit() else len(raw)

    response = response_cls(
        request=request,
        content_type=resp.headers.get("Content-Type"),
        content_length=content_length,
        content_encoding=resp.headers.get("Content-Encoding"),
        raw_bytes=raw,
        status_code=resp.status_code,
        status_description=resp.reason_phrase,
        response_uri=str(http_request.url) if http_request is not None else None,
        server=resp.headers.get("Server"),
    )

    encoding = resp.headers.encoding
    for raw_name, raw_value in resp.headers.raw:
        name = raw_name.decode(encoding)
        value = raw_value.decode(encoding)
        response.add_header(name, value)
        if name.lower() == "set-cookie":
            for cookie in parse_set_cookie(value):
                response.add_cookie(cookie)

    response.response_status = ResponseStatus.COMPLETED

    _logger.debug(
        "response.populated",
        url=response.response_uri,
        status_code=response.status_code,
        header_count=len(response.headers),
        cookie_count=len(response.cookies),
        size_bytes=len(raw),
    )
    return response


def from_transport_error(
    exc: BaseException,
    request: Any = None,
    response_cls: Type[R] = Response,
) -> R:
    """
    Build a response for an exchange that failed before a response arrived.

    status_code stays unset; error_message/error_exception describe the failure.
    """
    http_request = _request_of(exc) if isinstance(exc, httpx.RequestError) else None
    if request is None:
        request = http_request

    uri: Optional[str] = None
    if http_request is not None:
        uri = str(http_request.url)
    elif isinstance(request, httpx.Request):
        uri = str(request.url)

    status = classify_transport_error(exc)
    response = response_cls(
        request=request,
        response_uri=uri,
        response_status=status,
        error_message=str(exc) or exc.__class__.__name__,
        error_exception=exc,
    )

    _logger.warning(
        "response.transport_error",
        url=uri,
        response_status=str(status),
        error_type=exc.__class__.__name__,
        error_message=response.error_message,
    )
    return response
