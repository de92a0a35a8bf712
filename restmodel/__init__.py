# models must be imported before exceptions (exceptions -> models.enums -> models)
from .models import (
    ResponseStatus,
    ParameterType,
    Parameter,
    ResponseCookie,
    ResponseSettings,
    SequenceView,
    ResponseBase,
    Response,
    TypedResponse,
)
from .exceptions import (
    # Base exceptions
    ResponseError,
    # Validation errors
    ValidationError,
    InvalidFieldError,
    InvalidStatusTransitionError,
    # Transport errors
    TransportError,
    TransportFailedError,
    TransportTimeoutError,
    TransportAbortedError,
    IncompleteResponseError,
    # HTTP errors
    HTTPError,
    ClientError,
    ServerError,
    # Utilities
    classify_http_error,
    classify_transport_failure,
)
from .adapters import (
    from_httpx_response,
    from_transport_error,
    classify_transport_error,
    parse_set_cookie,
)
from .utils import (
    extract_charset,
    decode_text,
    decompress_transfer,
)
from .observability.logging import configure_logging, get_restmodel_logger


__all__ = [
    # Response models
    "ResponseBase",
    "Response",
    "TypedResponse",
    "SequenceView",
    "ResponseStatus",
    "ParameterType",
    "Parameter",
    "ResponseCookie",

    # Configuration
    "ResponseSettings",
    "configure_logging",
    "get_restmodel_logger",

    # Executor adapters
    "from_httpx_response",
    "from_transport_error",
    "classify_transport_error",
    "parse_set_cookie",

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
    # Utility functions
    "classify_http_error",
    "classify_transport_failure",

    # Content utility functions
    "extract_charset",
    "decode_text",
    "decompress_transfer",
]
