"""Structured JSON logging shared by the secrets client entry points.

Usage:
    from libs.common.logging import configure_logging, get_logger
    configure_logging(service_name="secrets_client", log_level="INFO")
    logger = get_logger(__name__)
"""

from libs.common.logging.config import configure_logging, get_logger
from libs.common.logging.formatter import JSONFormatter, is_sensitive_field

__all__ = [
    "configure_logging",
    "get_logger",
    "JSONFormatter",
    "is_sensitive_field",
]
