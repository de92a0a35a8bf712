"""
Response models for a single outbound HTTP exchange.

ResponseBase holds everything known about a completed or failed exchange that
does not depend on a payload type. Response is the untyped concrete form and
TypedResponse[T] adds a deserialized ``data`` value on top of the same metadata.

Two error axes are kept apart:
  - transport outcome: ``response_status`` (NONE/COMPLETED/ERROR/TIMED_OUT/ABORTED)
  - HTTP outcome: ``status_code`` / ``status_description`` on COMPLETED exchanges

A 404 that arrived intact is COMPLETED with status_code=404; only failures that
prevented a well-formed response set ERROR, TIMED_OUT or ABORTED.

Responses are populated once by an executor (headers and status, then body)
and are read-only artifacts afterwards.
"""

from __future__ import annotations

import threading
import weakref
from collections.abc import Sequence
from typing import Any, Generic, Iterator, List, Optional, TypeVar, Union, overload

from ..exceptions import (
    InvalidFieldError,
    InvalidStatusTransitionError,
    classify_http_error,
    classify_transport_failure,
)
from ..observability.logging import RestLoggerAdapter, get_restmodel_logger, log_content_processing
from ..utils import (
    charset_from_encoding,
    decode_text,
    decompress_transfer,
    extract_charset,
    sniff_bom,
)
from .config import DEFAULT_SETTINGS, ResponseSettings
from .enums import ParameterType, ResponseStatus
from .parameters import Parameter, ResponseCookie

T = TypeVar("T")
R = TypeVar("R", bound="ResponseBase")
E = TypeVar("E")

__all__ = ["SequenceView", "ResponseBase", "Response", "TypedResponse"]


class SequenceView(Sequence, Generic[E]):
    """
    Read-only ordered view over a list owned by a response.

    Views created from the same storage see the same entries, so a
    TypedResponse converted from a Response shares its headers and cookies.
    """

    __slots__ = ("_items",)

    def __init__(self, items: List[E]):
        self._items = items

    @overload
    def __getitem__(self, index: int) -> E: ...

    @overload
    def __getitem__(self, index: slice) -> List[E]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[E]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SequenceView):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return self._items == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"SequenceView({self._items!r})"

    def shares_storage_with(self, other: "SequenceView[Any]") -> bool:
        return self._items is other._items


def _to_owned_bytes(value: Optional[Union[bytes, bytearray, memoryview]]) -> Optional[bytes]:
    if value is None or isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    raise InvalidFieldError(
        message="",
        field_name="raw_bytes",
        field_value=type(value).__name__,
    )


class ResponseBase:
    """
    Metadata shared by Response and TypedResponse.

    ``content`` is decoded lazily from ``raw_bytes`` on first read and cached;
    repeated reads return the same string and decode at most once, including
    under concurrent first reads.
    """

    def __init__(
        self,
        *,
        request: Any = None,
        content_type: Optional[str] = None,
        content_length: int = 0,
        content_encoding: Optional[str] = None,
        raw_bytes: Optional[bytes] = None,
        content: Optional[str] = None,
        status_code: Optional[int] = None,
        status_description: Optional[str] = None,
        response_uri: Optional[str] = None,
        server: Optional[str] = None,
        headers: Optional[Sequence] = None,
        cookies: Optional[Sequence[ResponseCookie]] = None,
        response_status: ResponseStatus = ResponseStatus.NONE,
        error_message: Optional[str] = None,
        error_exception: Optional[BaseException] = None,
        settings: Optional[ResponseSettings] = None,
    ):
        self.settings = settings or DEFAULT_SETTINGS
        self._logger: RestLoggerAdapter = self.settings.logger or get_restmodel_logger(__name__)
        self._content_lock = threading.Lock()
        self._content: Optional[str] = content

        self._request_ref: Any = None
        self.request = request

        self.content_type = content_type
        self.content_length = content_length
        self.content_encoding = content_encoding
        self.raw_bytes = raw_bytes
        self.status_code = status_code
        self.status_description = status_description
        self.response_uri = response_uri
        self.server = server

        self._headers: List[Parameter] = []
        self._cookies: List[ResponseCookie] = []
        for header in headers or ():
            if isinstance(header, Parameter):
                self._headers.append(header)
            else:
                self.add_header(*header)
        for cookie in cookies or ():
            self.add_cookie(cookie)

        self._response_status = ResponseStatus.NONE
        self.response_status = response_status

        self.error_message = error_message
        self.error_exception = error_exception

    # ------------------------------------------------------------------
    # Fields with invariants
    # ------------------------------------------------------------------

    @property
    def request(self) -> Any:
        """The originating request, if it is still alive. Only used for diagnostics."""
        ref = self._request_ref
        if isinstance(ref, weakref.ref):
            return ref()
        return ref

    @request.setter
    def request(self, value: Any) -> None:
        if value is None:
            self._request_ref = None
            return
        try:
            self._request_ref = weakref.ref(value)
        except TypeError:
            # str, dict and other builtins cannot be weakly referenced
            self._request_ref = value

    @property
    def content_length(self) -> int:
        return self._content_length

    @content_length.setter
    def content_length(self, value: Optional[int]) -> None:
        value = 0 if value is None else int(value)
        if value < 0:
            raise InvalidFieldError(message="", field_name="content_length", field_value=value)
        self._content_length = value

    @property
    def raw_bytes(self) -> Optional[bytes]:
        return self._raw_bytes

    @raw_bytes.setter
    def raw_bytes(self, value: Optional[Union[bytes, bytearray, memoryview]]) -> None:
        self._raw_bytes = _to_owned_bytes(value)

    @property
    def response_status(self) -> ResponseStatus:
        """
        Transport outcome. Errors are reported here for transport failures only;
        HTTP errors still produce COMPLETED, check status_code instead.
        """
        return self._response_status

    @response_status.setter
    def response_status(self, value: ResponseStatus) -> None:
        value = ResponseStatus(value)
        current = self._response_status
        if value is current:
            return
        if current.is_terminal:
            self._logger.error(
                "response.invalid_transition",
                current=str(current),
                requested=str(value),
                url=self.response_uri,
            )
            raise InvalidStatusTransitionError(
                message="",
                url=self.response_uri,
                current=current,
                requested=value,
            )
        self._response_status = value

    @property
    def headers(self) -> SequenceView[Parameter]:
        """Response headers in the order received; duplicate names are kept."""
        return SequenceView(self._headers)

    @property
    def cookies(self) -> SequenceView[ResponseCookie]:
        """Cookies returned by the server, in the order received."""
        return SequenceView(self._cookies)

    # ------------------------------------------------------------------
    # Population (executor side)
    # ------------------------------------------------------------------

    def add_header(self, name: str, value: Any) -> Parameter:
        header = Parameter(name=name, value=value, type=ParameterType.HTTP_HEADER)
        self._headers.append(header)
        return header

    def add_cookie(self, cookie: ResponseCookie) -> ResponseCookie:
        self._cookies.append(cookie)
        return cookie

    def get_header(self, name: str, default: Optional[Any] = None) -> Optional[Any]:
        """First value of a header, matched case-insensitively."""
        name_lower = name.lower()
        for header in self._headers:
            if header.name.lower() == name_lower:
                return header.value
        return default

    def get_headers(self, name: str) -> List[Any]:
        """All values of a header in order (e.g. each Set-Cookie line)."""
        name_lower = name.lower()
        return [h.value for h in self._headers if h.name.lower() == name_lower]

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    @property
    def content(self) -> str:
        """String representation of the response body."""
        cached = self._content
        if cached is not None:
            return cached
        with self._content_lock:
            if self._content is None:
                self._content = self._decode_content()
            return self._content

    @content.setter
    def content(self, value: Optional[str]) -> None:
        with self._content_lock:
            self._content = value

    @property
    def has_decoded_content(self) -> bool:
        return self._content is not None

    def _decode_content(self) -> str:
        raw = self._raw_bytes
        if not raw:
            return ""

        data = raw
        if self.settings.decompress and self.content_encoding:
            data = decompress_transfer(raw, self.content_encoding)
            if len(data) != len(raw):
                log_content_processing(
                    self._logger,
                    operation="decompress",
                    content_type=self.content_type,
                    size_bytes=len(data),
                    compression=self.content_encoding,
                    url=self.response_uri,
                )

        declared = (
            extract_charset(self.content_type)
            or charset_from_encoding(self.content_encoding)
            or sniff_bom(data)
        )
        text, charset, note = decode_text(
            data,
            declared,
            fallbacks=self.settings.fallback_charsets,
            errors=self.settings.decode_errors,
        )
        log_content_processing(
            self._logger,
            operation="decode",
            content_type=self.content_type,
            charset=charset,
            size_bytes=len(data),
            declared_charset=declared,
            note=note,
            url=self.response_uri,
        )
        return text

    # ------------------------------------------------------------------
    # Outcome helpers
    # ------------------------------------------------------------------

    @property
    def is_successful(self) -> bool:
        """True when the transport completed and the server returned 2xx."""
        if self._response_status is not ResponseStatus.COMPLETED:
            return False
        return self.status_code is not None and 200 <= self.status_code <= 299

    def ensure_success(self: R) -> R:
        """
        Return self when successful, otherwise raise the matching ResponseError.

        Raises:
            TransportError: transport outcome is not COMPLETED
            HTTPError: completed with a 4xx/5xx (or other non-2xx) status
        """
        if self._response_status is not ResponseStatus.COMPLETED:
            raise classify_transport_failure(self)
        if self.is_successful:
            return self
        raise classify_http_error(self)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def to_diagnostic_string(self) -> str:
        """Human-readable dump of every field, for logs only."""

        def fmt(value: Any) -> str:
            return "" if value is None else str(value)

        exc = self.error_exception
        exc_text = f"{exc.__class__.__name__}: {exc}" if exc is not None else ""
        name = type(self).__name__

        lines = [
            f"{name} -- Start",
            f"ResponseUri={fmt(self.response_uri)}",
            f"ContentEncoding={fmt(self.content_encoding)}",
            f"ContentLength={self.content_length}",
            f"ContentType={fmt(self.content_type)}",
            f"ErrorException={exc_text}",
            f"ErrorMessage={fmt(self.error_message)}",
            "Headers=",
            "".join(f"{header} " for header in self._headers),
            f"ResponseStatus={self._response_status}",
            f"Server={fmt(self.server)}",
            f"StatusCode={fmt(self.status_code)}",
            f"StatusDescription={fmt(self.status_description)}",
            "Content=<on next line>",
            self.content,
        ]
        if self._raw_bytes is not None:
            lines.append(f"RawBytes.length={len(self._raw_bytes)}")
        else:
            lines.append("RawBytes=null")
        lines.append(f"{name} -- End")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_diagnostic_string()

    def __repr__(self) -> str:
        code = "" if self.status_code is None else f"{self.status_code} "
        return f"<{type(self).__name__} [{code}{self._response_status}]>"


    # ------------------------------------------------------------------
    # Copying / pickling
    # ------------------------------------------------------------------

    def __getstate__(self) -> dict:
        """
        State for copy/pickle. The content lock and logger are rebuilt on
        restore; a weakly held request is not owned and comes back as None.
        """
        state = self.__dict__.copy()
        del state["_content_lock"]
        del state["_logger"]
        if isinstance(state["_request_ref"], weakref.ref):
            state["_request_ref"] = None
        return state

    def __setstate__(self, state: dict) -> None:
        self.__dict__.update(state)
        self._content_lock = threading.Lock()
        self._logger = self.settings.logger or get_restmodel_logger(__name__)


class Response(ResponseBase):
    """Container for data sent back from an HTTP exchange."""


class TypedResponse(ResponseBase, Generic[T]):
    """Container for data sent back from an HTTP exchange, including deserialized data."""

    def __init__(self, *, data: Optional[T] = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.data: Optional[T] = data

    @classmethod
    def from_base_response(cls, response: ResponseBase, data: Optional[T] = None) -> "TypedResponse[T]":
        """
        Build a typed response carrying every metadata field of ``response``.

        Headers and cookies share storage with the source (read-only views on
        both sides). Decoded text is carried over when the source already has
        it, otherwise the new response decodes lazily on its own. ``data`` is
        whatever the caller's deserializer produced; nothing is deserialized here.
        """
        typed = cls(
            data=data,
            content_encoding=response.content_encoding,
            content_length=response.content_length,
            content_type=response.content_type,
            error_message=response.error_message,
            error_exception=response.error_exception,
            raw_bytes=response.raw_bytes,
            response_status=response.response_status,
            response_uri=response.response_uri,
            server=response.server,
            status_code=response.status_code,
            status_description=response.status_description,
            settings=response.settings,
        )
        typed._request_ref = response._request_ref
        typed._headers = response._headers
        typed._cookies = response._cookies
        typed._content = response._content

        typed._logger.debug(
            "response.converted",
            target=cls.__name__,
            url=response.response_uri,
            response_status=str(response.response_status),
            has_data=data is not None,
        )
        return typed

    def __repr__(self) -> str:
        code = "" if self.status_code is None else f"{self.status_code} "
        return f"<{type(self).__name__} [{code}{self.response_status}] data={type(self.data).__name__}>"
