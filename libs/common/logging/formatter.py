"""JSON log formatter with secret redaction.

Formats log records as one JSON object per line for log aggregation. Context
fields whose names look like credentials are redacted, so an accidental
``extra={"token": ...}`` never reaches the log sink.

Example log output:
    {
        "timestamp": "2026-10-19T10:30:00.000Z",
        "level": "INFO",
        "service": "secrets_client",
        "logger": "libs.secrets_client.vault_backend",
        "message": "Secret loaded from Vault",
        "context": {
            "secret_path": "integration/systemA",
            "secret_key": "password",
            "backend": "vault"
        }
    }
"""

import json
import logging
import traceback
from datetime import UTC, datetime
from types import TracebackType
from typing import Any

REDACTED = "***"

# Substrings of context field names whose values are never emitted
SENSITIVE_FIELD_MARKERS = ("token", "secret_id", "role_id", "password", "secret_value", "authorization")

_RESERVED_FIELDS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "context",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
        "asctime",
    }
)


def is_sensitive_field(name: str) -> bool:
    lowered = name.lower()
    return any(marker in lowered for marker in SENSITIVE_FIELD_MARKERS)


class JSONFormatter(logging.Formatter):
    """Formatter that outputs log records as redacted JSON.

    Attributes:
        service_name: Name of the service emitting logs
        include_context: Whether to include extra context fields

    Example:
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(JSONFormatter(service_name="secrets_client"))
        >>> logger.info("Secret cache hit", extra={"secret_path": "db/main"})
    """

    def __init__(
        self, service_name: str, include_context: bool = True, *args: Any, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_context:
            context = self._extract_context(record)
            if context:
                log_entry["context"] = context

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self._format_exception(record.exc_info),
            }

        log_entry["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        return json.dumps(log_entry, default=str)

    def _format_timestamp(self, created: float) -> str:
        """Format timestamp as ISO 8601 in UTC with millisecond precision."""
        dt = datetime.fromtimestamp(created, tz=UTC)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    def _extract_context(self, record: logging.LogRecord) -> dict[str, Any] | None:
        """Collect context from ``extra={"context": {...}}`` or plain extra fields, redacted."""
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            fields = dict(context)
        else:
            fields = {
                key: value for key, value in record.__dict__.items() if key not in _RESERVED_FIELDS
            }

        if not fields:
            return None
        return {
            key: REDACTED if is_sensitive_field(key) else value for key, value in fields.items()
        }

    def _format_exception(
        self,
        exc_info: tuple[type[BaseException] | None, BaseException | None, TracebackType | None],
    ) -> str:
        return "".join(traceback.format_exception(*exc_info))
