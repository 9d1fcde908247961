"""Logging setup for the API engine."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import ClientSettings
from .exceptions import ApiClientError

LOGGER_NAME = "api_engine"

console = Console(stderr=True)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """
    Set up logging for the API engine.

    Library modules log through children of the ``api_engine`` logger; this
    attaches handlers to that parent only, so applications that configure
    logging themselves never need to call it.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file to write JSON logs to
        json_format: Use JSON format on stderr instead of rich output

    Returns:
        Configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    if json_format:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    else:
        handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JsonFormatter())
        logger.addHandler(file_handler)

    return logger


def setup_logging_from_settings(settings: ClientSettings) -> logging.Logger:
    """Configure logging from a ``ClientSettings`` instance."""
    return setup_logging(level=settings.log_level, json_format=settings.log_json)


class JsonFormatter(logging.Formatter):
    """JSON log formatter with API error context."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        error_context = getattr(record, "error_context", None)
        if error_context:
            log_data["error_context"] = error_context

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            log_data.update({
                "exception_type": exc_type.__name__,
                "exception_message": str(exc_value),
            })
            if isinstance(exc_value, ApiClientError):
                log_data["error_context"] = exc_value.context

        return json.dumps(log_data, default=str)
