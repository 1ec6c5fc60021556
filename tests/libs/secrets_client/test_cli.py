"""Tests for the secrets-client command-line entry point."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from libs.secrets_client.cli import EXIT_FAILURE, EXIT_NOT_FOUND, EXIT_OK, main


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """main() reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def file_config(tmp_path: Path) -> Path:
    secrets_file = tmp_path / "secrets.properties"
    secrets_file.write_text("myapp/config.password=hunter2\n")
    config_file = tmp_path / "client.properties"
    config_file.write_text(f"secrets.provider=file\nsecrets.file.path={secrets_file}\n")
    return config_file


@pytest.mark.unit()
def test_prints_length_not_value(file_config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main([str(file_config)])

    captured = capsys.readouterr()
    assert exit_code == EXIT_OK
    assert captured.out.strip() == "Secret retrieved for myapp/config.password (length=7)"
    assert "hunter2" not in captured.out
    assert "hunter2" not in captured.err


@pytest.mark.unit()
def test_missing_secret_exits_1(file_config: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main([str(file_config), "myapp/config", "api_key"])

    assert exit_code == EXIT_NOT_FOUND
    assert "Secret not found" in capsys.readouterr().err


@pytest.mark.unit()
def test_missing_config_file_exits_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main([str(tmp_path / "missing.properties")])

    assert exit_code == EXIT_FAILURE
    assert "Configuration file not found" in capsys.readouterr().err


@pytest.mark.unit()
def test_config_file_from_environment(
    file_config: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("SECRETS_CONFIG_FILE", str(file_config))

    assert main([]) == EXIT_OK
    assert "length=7" in capsys.readouterr().out


@pytest.mark.unit()
def test_env_provider(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("INTEGRATION_SYSTEMA_API_KEY", "abcd")
    config_file = tmp_path / "client.properties"
    config_file.write_text("secrets.provider=env\n")

    exit_code = main([str(config_file), "integration/systemA", "api_key"])

    assert exit_code == EXIT_OK
    assert "length=4" in capsys.readouterr().out
