from .logging import (
    RestLoggerAdapter,
    configure_logging,
    get_restmodel_logger,
    log_content_processing,
)

__all__ = [
    "RestLoggerAdapter",
    "configure_logging",
    "get_restmodel_logger",
    "log_content_processing",
]
