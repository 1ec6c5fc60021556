"""Shared fixtures for secrets client tests."""

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import httpx
import pytest
import respx

from libs.secrets_client.config import VaultSettings
from libs.secrets_client.vault_backend import VaultAppRoleKvV2Client

VAULT_ADDR = "https://vault.example.com:8200"
LOGIN_PATH = "/v1/auth/approle/login"


class FakeClock:
    """Manually advanced UTC clock for TTL tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def login_response(token: str) -> httpx.Response:
    return httpx.Response(200, json={"auth": {"client_token": token, "lease_duration": 3600}})


def kv_response(data: dict) -> httpx.Response:
    return httpx.Response(200, json={"data": {"data": data, "metadata": {"version": 1}}})


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def vault_properties() -> dict[str, str]:
    return {
        "secrets.provider": "vault",
        "vault.addr": VAULT_ADDR,
        "vault.approle.role_id": "test-role-id",
        "vault.approle.secret_id": "test-secret-id",
    }


@pytest.fixture()
def vault_settings(vault_properties: dict[str, str]) -> VaultSettings:
    return VaultSettings.from_properties(vault_properties)


@pytest.fixture()
def vault_mock() -> Iterator[respx.MockRouter]:
    """Intercept all httpx traffic to the test Vault address."""
    with respx.mock(base_url=VAULT_ADDR, assert_all_called=False) as mock:
        yield mock


@pytest.fixture()
def vault_client(
    vault_settings: VaultSettings, vault_mock: respx.MockRouter, clock: FakeClock
) -> Iterator[VaultAppRoleKvV2Client]:
    client = VaultAppRoleKvV2Client(vault_settings, clock=clock)
    yield client
    client.close()
