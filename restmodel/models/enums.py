from __future__ import annotations

from enum import Enum


class ResponseStatus(Enum):
    """
    Transport outcome of an HTTP exchange.

    Independent of the HTTP status code: a 404 or 500 that arrived intact is
    COMPLETED. Only failures that prevented a well-formed response (DNS,
    connect, TLS, timeout, cancellation) are ERROR / TIMED_OUT / ABORTED.
    """

    NONE = "None"
    COMPLETED = "Completed"
    ERROR = "Error"
    TIMED_OUT = "TimedOut"
    ABORTED = "Aborted"

    @property
    def is_terminal(self) -> bool:
        return self is not ResponseStatus.NONE

    @property
    def is_transport_failure(self) -> bool:
        return self in (ResponseStatus.ERROR, ResponseStatus.TIMED_OUT, ResponseStatus.ABORTED)

    def __str__(self) -> str:
        return self.value


class ParameterType(Enum):
    """Where a name/value pair lives in an HTTP exchange."""

    COOKIE = "Cookie"
    GET_OR_POST = "GetOrPost"
    URL_SEGMENT = "UrlSegment"
    HTTP_HEADER = "HttpHeader"
    REQUEST_BODY = "RequestBody"
    QUERY_STRING = "QueryString"

    def __str__(self) -> str:
        return self.value
