from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from .enums import ParameterType


@dataclass(frozen=True)
class Parameter:
    """A single name/value pair, e.g. one response header line."""

    name: str
    value: Any
    type: ParameterType = ParameterType.HTTP_HEADER

    def __str__(self) -> str:
        return f"[{self.type}:{self.name}={'' if self.value is None else self.value}]"


@dataclass
class ResponseCookie:
    """Cookie returned by the server with a response."""

    name: str
    value: str = ""
    comment: Optional[str] = None
    comment_uri: Optional[str] = None
    discard: bool = False
    domain: Optional[str] = None
    expired: bool = False
    expires: Optional[datetime] = None
    http_only: bool = False
    path: Optional[str] = None
    port: Optional[str] = None
    secure: bool = False
    timestamp: Optional[datetime] = None
    version: Optional[int] = None
