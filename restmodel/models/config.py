from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from ..utils import DEFAULT_FALLBACK_CHARSETS

if TYPE_CHECKING:
    from ..observability.logging import RestLoggerAdapter


@dataclass
class ResponseSettings:
    # Text decoding
    fallback_charsets: Tuple[str, ...] = DEFAULT_FALLBACK_CHARSETS  # tried in order when no charset is declared
    decode_errors: str = "replace"  # codec error handler for the declared charset
    decompress: bool = True  # undo gzip/deflate/br named by Content-Encoding before decoding

    # Logging
    logger: Optional["RestLoggerAdapter"] = None  # Optional custom logger instance


DEFAULT_SETTINGS = ResponseSettings()
