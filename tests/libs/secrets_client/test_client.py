"""Tests for the SecretsClient interface and the exception hierarchy."""

import pytest

from libs.secrets_client.client import SecretCapability, SecretsClient
from libs.secrets_client.exceptions import (
    AuthError,
    BackendError,
    ConfigError,
    PermissionDeniedError,
    SecretError,
    SecretNotFoundError,
)


class _StaticClient(SecretsClient):
    def __init__(self) -> None:
        self.closed = 0

    def capabilities(self) -> frozenset[SecretCapability]:
        return frozenset({SecretCapability.KV_READ})

    def get_required(self, path: str, key: str) -> str:
        return f"{path}:{key}"

    def close(self) -> None:
        self.closed += 1


class TestSecretsClientInterface:
    @pytest.mark.unit()
    def test_cannot_instantiate_abstract_client(self) -> None:
        with pytest.raises(TypeError):
            SecretsClient()  # type: ignore[abstract]

    @pytest.mark.unit()
    def test_context_manager_calls_close(self) -> None:
        with _StaticClient() as client:
            assert client.get_required("a", "b") == "a:b"
        assert client.closed == 1

    @pytest.mark.unit()
    def test_context_manager_closes_on_error(self) -> None:
        client = _StaticClient()
        with pytest.raises(RuntimeError), client:
            raise RuntimeError("boom")
        assert client.closed == 1

    @pytest.mark.unit()
    def test_default_close_is_noop(self) -> None:
        class MinimalClient(SecretsClient):
            def capabilities(self) -> frozenset[SecretCapability]:
                return frozenset()

            def get_required(self, path: str, key: str) -> str:
                return ""

        MinimalClient().close()

    @pytest.mark.unit()
    def test_capability_is_string_enum(self) -> None:
        assert SecretCapability.KV_READ == "kv_read"


class TestExceptionHierarchy:
    @pytest.mark.unit()
    @pytest.mark.parametrize(
        "exc_class",
        [ConfigError, AuthError, SecretNotFoundError, BackendError, PermissionDeniedError],
    )
    def test_all_errors_are_secret_errors(self, exc_class: type[SecretError]) -> None:
        assert issubclass(exc_class, SecretError)

    @pytest.mark.unit()
    def test_permission_denied_is_backend_error(self) -> None:
        assert issubclass(PermissionDeniedError, BackendError)
        assert not issubclass(SecretNotFoundError, BackendError)

    @pytest.mark.unit()
    def test_str_includes_context(self) -> None:
        error = SecretError("Timeout", path="db/main", key="password", backend="vault")
        assert str(error) == "Timeout (path: db/main, key: password, backend: vault)"

    @pytest.mark.unit()
    def test_str_without_context_is_message(self) -> None:
        assert str(SecretError("Something failed")) == "Something failed"

    @pytest.mark.unit()
    def test_config_error_carries_property_name(self) -> None:
        error = ConfigError("Missing property: vault.addr", property_name="vault.addr")
        assert error.property_name == "vault.addr"
        assert str(error) == "Missing property: vault.addr"

    @pytest.mark.unit()
    def test_auth_error_defaults_to_vault_backend(self) -> None:
        error = AuthError("login failed", status_code=400)
        assert error.status_code == 400
        assert error.backend == "vault"

    @pytest.mark.unit()
    def test_backend_error_keeps_status_and_body(self) -> None:
        error = PermissionDeniedError(
            "denied", path="p", key="k", status_code=403, body='{"errors":["permission denied"]}'
        )
        assert error.status_code == 403
        assert error.body == '{"errors":["permission denied"]}'
        assert "(path: p, key: k, backend: vault)" in str(error)
