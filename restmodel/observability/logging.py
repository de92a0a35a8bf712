"""
Structured logging for restmodel.

Every message restmodel emits is a dotted event name ("content.decode",
"response.invalid_transition", ...) plus keyword fields. The fields travel in
``extra`` so any LoggerAdapter backend can render them.

restmodel never configures handlers. An embedding application that wants its
own backend installs a factory once:

    from restmodel.observability.logging import configure_logging

    configure_logging(lambda name, **ctx: my_adapter_for(name, ctx))
"""

from __future__ import annotations

import logging
from logging import LoggerAdapter
from typing import Any, Callable, Dict, Optional


_logger_factory: Optional[Callable[..., LoggerAdapter]] = None


class RestLoggerAdapter:
    """Event-name front end over a LoggerAdapter, with fixed response context."""

    def __init__(self, logger: LoggerAdapter, context: Optional[Dict[str, Any]] = None):
        self._logger = logger
        self._context = context or {}

    def _fields(self, extra: Dict[str, Any]) -> Dict[str, Any]:
        return {**self._context, **extra}

    def debug(self, event: str, **extra: Any) -> None:
        self._logger.debug(event, extra=self._fields(extra))

    def info(self, event: str, **extra: Any) -> None:
        self._logger.info(event, extra=self._fields(extra))

    def warning(self, event: str, **extra: Any) -> None:
        self._logger.warning(event, extra=self._fields(extra))

    def error(self, event: str, exc_info: Optional[BaseException] = None, **extra: Any) -> None:
        self._logger.error(event, extra=self._fields(extra), exc_info=exc_info)


def _stdlib_factory(name: str, **context: Any) -> LoggerAdapter:
    return logging.LoggerAdapter(logging.getLogger(name), {"extra": context})


def configure_logging(logger_factory: Optional[Callable[..., LoggerAdapter]]) -> None:
    """
    Install a factory ``(name, **context) -> LoggerAdapter`` used for every
    restmodel logger created afterwards. None restores stdlib logging.
    """
    global _logger_factory
    _logger_factory = logger_factory


def get_restmodel_logger(
    name: str,
    url: Optional[str] = None,
    method: Optional[str] = None,
    status_code: Optional[int] = None,
    **extra_context: Any
) -> RestLoggerAdapter:
    """
    Logger for module ``name``; url, method and status_code are attached to
    every event when given.
    """
    context: Dict[str, Any] = dict(extra_context)
    for key, value in (("url", url), ("method", method), ("status_code", status_code)):
        if value is not None:
            context[key] = value

    factory = _logger_factory or _stdlib_factory
    return RestLoggerAdapter(factory(name, **context), context)


def log_content_processing(
    logger: RestLoggerAdapter,
    operation: str,
    content_type: Optional[str] = None,
    charset: Optional[str] = None,
    size_bytes: Optional[int] = None,
    **context: Any
) -> None:
    """Emit ``content.<operation>`` for a decompress or decode step."""
    logger.debug(
        f"content.{operation}",
        content_type=content_type,
        charset=charset,
        size_bytes=size_bytes,
        **context
    )
