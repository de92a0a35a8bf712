"""
Exception hierarchy for the restmodel package.

A response never raises for HTTP 4xx/5xx or for transport failures on its own;
those are data. These exceptions are produced when a caller asks for it
(``ResponseBase.ensure_success()``) or when an executor breaks the model's
invariants (invalid field values, illegal status transitions).

Exception Hierarchy:
    ResponseError (base)
    ├── ValidationError
    │   ├── InvalidFieldError
    │   └── InvalidStatusTransitionError
    ├── TransportError
    │   ├── TransportFailedError       (ResponseStatus.ERROR)
    │   ├── TransportTimeoutError      (ResponseStatus.TIMED_OUT)
    │   ├── TransportAbortedError      (ResponseStatus.ABORTED)
    │   └── IncompleteResponseError    (ResponseStatus.NONE)
    └── HTTPError                      (completed, non-2xx)
        ├── ClientError (4xx)
        └── ServerError (5xx)

Usage:
    from restmodel.exceptions import ClientError, TransportTimeoutError

    try:
        response.ensure_success()
    except TransportTimeoutError as e:
        logger.warning(f"Timed out: {e.url}")
    except ClientError as e:
        logger.warning(f"Rejected with {e.status_code} {e.status_description}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from .models.enums import ResponseStatus

if TYPE_CHECKING:
    from .models.parameters import Parameter
    from .models.response import ResponseBase

__all__ = [
    # Base exceptions
    "ResponseError",
    # Validation errors
    "ValidationError",
    "InvalidFieldError",
    "InvalidStatusTransitionError",
    # Transport errors
    "TransportError",
    "TransportFailedError",
    "TransportTimeoutError",
    "TransportAbortedError",
    "IncompleteResponseError",
    # HTTP errors
    "HTTPError",
    "ClientError",
    "ServerError",
    # Utilities
    "classify_http_error",
    "classify_transport_failure",
]

EXCERPT_LIMIT = 512


# ============================================================================
# Base Exception
# ============================================================================


@dataclass(slots=True)
class ResponseError(Exception):
    """
    Base exception for all restmodel failures.

    Carries the response URL, the response itself (when there is one) and the
    causal exception chain.
    """

    message: str
    url: Optional[str] = None
    response: Optional["ResponseBase"] = None
    cause: Optional[BaseException] = None
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)
        if self.cause is not None:
            self.__cause__ = self.cause

    def __str__(self) -> str:
        parts = [self.message]
        if self.url:
            parts.append(f"url={self.url}")
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"context=({ctx_str})")
        return " | ".join(parts)


# ============================================================================
# Validation Errors
# ============================================================================


@dataclass(slots=True)
class ValidationError(ResponseError):
    """Base class for values an executor is not allowed to put on a response."""
    pass


@dataclass(slots=True)
class InvalidFieldError(ValidationError):
    """Raised when a response field is given an out-of-range value."""

    field_name: Optional[str] = None
    field_value: Optional[Any] = None

    def __post_init__(self) -> None:
        if not self.message and self.field_name:
            self.message = f"Invalid value {self.field_name}={self.field_value!r}"
        ResponseError.__post_init__(self)


@dataclass(slots=True)
class InvalidStatusTransitionError(ValidationError):
    """
    Raised when response_status is changed after reaching a terminal value.

    The transport outcome moves NONE -> terminal exactly once.
    """

    current: Optional[ResponseStatus] = None
    requested: Optional[ResponseStatus] = None

    def __post_init__(self) -> None:
        if not self.message:
            self.message = (
                f"Cannot change response status from {self.current} to {self.requested}"
            )
        ResponseError.__post_init__(self)


# ============================================================================
# Transport Errors
# ============================================================================


@dataclass(slots=True)
class TransportError(ResponseError):
    """
    Base class for exchanges that never produced a well-formed HTTP response.

    The status_code of such a response is meaningless and is not reported.
    """

    status: ResponseStatus = ResponseStatus.ERROR

    def __post_init__(self) -> None:
        if not self.message:
            self.message = f"Transport failure ({self.status})"
        ResponseError.__post_init__(self)


@dataclass(slots=True)
class TransportFailedError(TransportError):
    """Raised for DNS, connect, TLS and other transport-level errors."""
    status: ResponseStatus = ResponseStatus.ERROR


@dataclass(slots=True)
class TransportTimeoutError(TransportError):
    """Raised when the exchange timed out before a response was obtained."""

    status: ResponseStatus = ResponseStatus.TIMED_OUT

    def __post_init__(self) -> None:
        if not self.message:
            self.message = "Request timed out"
        ResponseError.__post_init__(self)


@dataclass(slots=True)
class TransportAbortedError(TransportError):
    """Raised when the exchange was cancelled before it completed."""

    status: ResponseStatus = ResponseStatus.ABORTED

    def __post_init__(self) -> None:
        if not self.message:
            self.message = "Request aborted"
        ResponseError.__post_init__(self)


@dataclass(slots=True)
class IncompleteResponseError(TransportError):
    """Raised when the executor never recorded a transport outcome."""

    status: ResponseStatus = ResponseStatus.NONE

    def __post_init__(self) -> None:
        if not self.message:
            self.message = "Response has no transport outcome"
        ResponseError.__post_init__(self)


# ============================================================================
# HTTP Errors
# ============================================================================


@dataclass(slots=True)
class HTTPError(ResponseError):
    """
    A completed exchange whose status code is not 2xx.

    Carries the status line and the header pairs exactly as the response
    recorded them, plus an excerpt of the decoded content.
    """

    status_code: int = 0
    status_description: Optional[str] = None
    headers: Tuple["Parameter", ...] = ()
    response_excerpt: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.message:
            reason = f" {self.status_description}" if self.status_description else ""
            excerpt = f": {self.response_excerpt!r}" if self.response_excerpt else ""
            self.message = f"HTTP {self.status_code}{reason}{excerpt}"
        ResponseError.__post_init__(self)

    def get_header(self, name: str, default: Optional[Any] = None) -> Optional[Any]:
        """First value of a recorded header, matched case-insensitively."""
        name_lower = name.lower()
        for header in self.headers:
            if header.name.lower() == name_lower:
                return header.value
        return default


@dataclass(slots=True)
class ClientError(HTTPError):
    """Completed exchange with a 4xx status code."""
    pass


@dataclass(slots=True)
class ServerError(HTTPError):
    """Completed exchange with a 5xx status code."""
    pass


# ============================================================================
# Utility Functions
# ============================================================================


def classify_http_error(response: "ResponseBase", excerpt_limit: int = EXCERPT_LIMIT) -> HTTPError:
    """
    Build the HTTPError for a completed response, picked by status range.

    4xx -> ClientError, 5xx -> ServerError, anything else non-2xx -> HTTPError.
    Must only be called for responses whose status is COMPLETED.
    """
    if response.response_status is not ResponseStatus.COMPLETED:
        raise ValueError("response did not complete; use classify_transport_failure")

    status_code = response.status_code or 0
    if 400 <= status_code < 500:
        error_class: type[HTTPError] = ClientError
    elif 500 <= status_code < 600:
        error_class = ServerError
    else:
        error_class = HTTPError

    return error_class(
        message="",
        url=response.response_uri,
        response=response,
        status_code=status_code,
        status_description=response.status_description,
        headers=tuple(response.headers),
        response_excerpt=response.content[:excerpt_limit] or None,
    )


def classify_transport_failure(response: "ResponseBase") -> TransportError:
    """
    Build the TransportError subclass matching a response's transport outcome.

    Must only be called for responses whose status is not COMPLETED.
    """
    error_map: Dict[ResponseStatus, type[TransportError]] = {
        ResponseStatus.ERROR: TransportFailedError,
        ResponseStatus.TIMED_OUT: TransportTimeoutError,
        ResponseStatus.ABORTED: TransportAbortedError,
        ResponseStatus.NONE: IncompleteResponseError,
    }
    status = response.response_status
    if status is ResponseStatus.COMPLETED:
        raise ValueError("response completed; transport did not fail")

    return error_map[status](
        message=response.error_message or "",
        url=response.response_uri,
        response=response,
        cause=response.error_exception,
    )
