from .enums import ResponseStatus, ParameterType
from .parameters import Parameter, ResponseCookie
from .config import ResponseSettings, DEFAULT_SETTINGS
from .response import SequenceView, ResponseBase, Response, TypedResponse

__all__ = [
    # Enumerations
    "ResponseStatus",
    "ParameterType",

    # Value types
    "Parameter",
    "ResponseCookie",

    # Config Models
    "ResponseSettings",
    "DEFAULT_SETTINGS",

    # Response Models
    "SequenceView",
    "ResponseBase",
    "Response",
    "TypedResponse",
]
