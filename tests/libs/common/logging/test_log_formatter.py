"""Tests for JSON log formatter.

Tests verify that logs are formatted correctly with:
- Required schema fields (timestamp, level, service, logger, message)
- Context fields, with credential-like names redacted
- Exception information
- Source location
"""

import json
import logging
import sys

import pytest

from libs.common.logging.formatter import REDACTED, JSONFormatter, is_sensitive_field


def _record(msg: str = "Test message", level: int = logging.INFO, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="libs.secrets_client.vault_backend",
        level=level,
        pathname="/path/to/file.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Test suite for JSONFormatter."""

    @pytest.fixture()
    def formatter(self) -> JSONFormatter:
        return JSONFormatter(service_name="secrets_client")

    def test_basic_log_format(self, formatter: JSONFormatter) -> None:
        """Test that basic log is formatted as valid JSON with required fields."""
        log_dict = json.loads(formatter.format(_record()))

        assert log_dict["level"] == "INFO"
        assert log_dict["service"] == "secrets_client"
        assert log_dict["logger"] == "libs.secrets_client.vault_backend"
        assert log_dict["message"] == "Test message"
        assert "context" not in log_dict

    def test_timestamp_format(self, formatter: JSONFormatter) -> None:
        """Test that timestamp is ISO 8601 in UTC with milliseconds."""
        timestamp = json.loads(formatter.format(_record()))["timestamp"]

        assert timestamp.endswith("Z")
        assert len(timestamp) == len("2026-01-01T12:00:00.000Z")

    def test_extra_fields_become_context(self, formatter: JSONFormatter) -> None:
        record = _record(secret_path="integration/systemA", secret_key="password", backend="vault")

        log_dict = json.loads(formatter.format(record))

        assert log_dict["context"] == {
            "secret_path": "integration/systemA",
            "secret_key": "password",
            "backend": "vault",
        }

    def test_explicit_context_dict_used_as_is(self, formatter: JSONFormatter) -> None:
        record = _record(context={"provider": "vault"}, unrelated="ignored")

        log_dict = json.loads(formatter.format(record))

        assert log_dict["context"] == {"provider": "vault"}

    def test_sensitive_fields_redacted(self, formatter: JSONFormatter) -> None:
        record = _record(
            client_token="hvs.abc",
            secret_id="sid",
            db_password="pw",
            secret_path="integration/systemA",
        )

        formatted = formatter.format(record)
        log_dict = json.loads(formatted)

        assert log_dict["context"]["client_token"] == REDACTED
        assert log_dict["context"]["secret_id"] == REDACTED
        assert log_dict["context"]["db_password"] == REDACTED
        assert log_dict["context"]["secret_path"] == "integration/systemA"
        for value in ("hvs.abc", "sid", "pw"):
            assert f'"{value}"' not in formatted

    def test_context_excluded_when_disabled(self) -> None:
        formatter = JSONFormatter(service_name="secrets_client", include_context=False)

        log_dict = json.loads(formatter.format(_record(backend="vault")))

        assert "context" not in log_dict

    def test_exception_info_included(self, formatter: JSONFormatter) -> None:
        try:
            raise ValueError("bad value")
        except ValueError:
            record = _record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        log_dict = json.loads(formatter.format(record))

        assert log_dict["exception"]["type"] == "ValueError"
        assert log_dict["exception"]["message"] == "bad value"
        assert "Traceback" in log_dict["exception"]["traceback"]

    def test_source_location(self, formatter: JSONFormatter) -> None:
        log_dict = json.loads(formatter.format(_record()))

        assert log_dict["source"]["file"] == "/path/to/file.py"
        assert log_dict["source"]["line"] == 42

    def test_non_serializable_context_uses_str(self, formatter: JSONFormatter) -> None:
        log_dict = json.loads(formatter.format(_record(cache_ttl=object)))

        assert "object" in log_dict["context"]["cache_ttl"]


@pytest.mark.parametrize(
    ("name", "sensitive"),
    [
        ("token", True),
        ("X-Vault-Token", True),
        ("role_id", True),
        ("secret_id", True),
        ("Authorization", True),
        ("secret_path", False),
        ("secret_key", False),
        ("backend", False),
    ],
)
def test_is_sensitive_field(name: str, sensitive: bool) -> None:
    assert is_sensitive_field(name) is sensitive
