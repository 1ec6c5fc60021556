"""Logging configuration for the secrets client entry points.

Example:
    >>> from libs.common.logging.config import configure_logging
    >>> logger = configure_logging(service_name="secrets_client", log_level="INFO")
    >>> logger.info("Started", extra={"context": {"provider": "vault"}})
"""

import logging
import sys
from typing import TextIO

from libs.common.logging.formatter import JSONFormatter

# Chatty third-party loggers that would otherwise log full request URLs at INFO
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    include_context: bool = True,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure structured JSON logging on the root logger.

    Replaces any existing root handlers with a single stream handler using
    JSONFormatter. httpx/httpcore are capped at WARNING.

    Args:
        service_name: Name reported in every log line
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        include_context: Whether to include context fields in output
        stream: Output stream (default: stderr, keeping stdout for command output)

    Returns:
        Configured root logger

    Raises:
        ValueError: If log_level is invalid
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter(service_name=service_name, include_context=include_context))
    root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    return root_logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance (typically ``get_logger(__name__)``)."""
    return logging.getLogger(name)
