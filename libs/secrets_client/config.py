"""
Configuration loading for secrets providers.

Configuration is a flat string key-value mapping, normally read from a
properties-style file:

    secrets.provider=vault
    vault.addr=https://vault.company.com:8200
    vault.mount=secret
    vault.approle.role_id=...
    vault.approle.secret_id=...
    vault.timeoutMs=5000
    secrets.cache.ttlSeconds=300
    secrets.cache.maxEntries=200

The mapping is validated into typed settings models with Pydantic. Blank
values count as absent: required keys then raise ConfigError, optional keys
fall back to their defaults.
"""

from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path
from typing import Any, Self

from dotenv import dotenv_values
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)

from libs.secrets_client.exceptions import ConfigError

DEFAULT_LOGIN_PATH = "/v1/auth/approle/login"
DEFAULT_PROVIDER = "vault"


def load_properties(path: str | Path) -> dict[str, str]:
    """
    Read ``key=value`` lines from a file into a dict.

    Comments (``#``), blank lines and quoted values are handled by
    python-dotenv's parser. Keys without a value are dropped.

    Raises:
        ConfigError: File missing or unreadable
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigError(f"Configuration file not found: {file_path}")
    try:
        raw = dotenv_values(dotenv_path=file_path, interpolate=False)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read configuration file {file_path}: {e}") from e
    return {name: value for name, value in raw.items() if value is not None}


class _PropertiesModel(BaseModel):
    """Base for settings models populated from property keys via aliases."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {
                name: value.strip() if isinstance(value, str) else value
                for name, value in data.items()
                if not (isinstance(value, str) and not value.strip())
            }
        return data

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> Self:
        """
        Validate a flat property mapping.

        Raises:
            ConfigError: Naming the first missing or invalid property
        """
        try:
            return cls.model_validate(dict(properties))
        except ValidationError as e:
            error = e.errors()[0]
            property_name = ".".join(str(part) for part in error["loc"])
            if error["type"] == "missing":
                message = f"Missing property: {property_name}"
            else:
                message = f"Invalid property {property_name}: {error['msg']}"
            raise ConfigError(message, property_name=property_name) from e


class ProviderSettings(_PropertiesModel):
    """Provider selection and the settings of the non-Vault providers."""

    provider: str = Field(default=DEFAULT_PROVIDER, alias="secrets.provider")
    file_path: str | None = Field(default=None, alias="secrets.file.path")
    dotenv_path: str | None = Field(default=None, alias="secrets.env.dotenvPath")

    @field_validator("provider")
    @classmethod
    def _normalize_provider(cls, value: str) -> str:
        return value.lower()


class VaultSettings(_PropertiesModel):
    """
    Settings of the Vault/OpenBao AppRole KV v2 client.

    Example:
        >>> settings = VaultSettings.from_properties({
        ...     "vault.addr": "https://vault.company.com:8200/",
        ...     "vault.approle.role_id": "role",
        ...     "vault.approle.secret_id": "secret",
        ... })
        >>> settings.address
        'https://vault.company.com:8200'
        >>> settings.login_url
        'https://vault.company.com:8200/v1/auth/approle/login'
    """

    address: str = Field(alias="vault.addr")
    mount: str = Field(default="secret", alias="vault.mount")
    login_path: str = Field(default=DEFAULT_LOGIN_PATH, alias="vault.approle.loginPath")
    role_id: SecretStr = Field(alias="vault.approle.role_id")
    secret_id: SecretStr = Field(alias="vault.approle.secret_id")
    timeout_ms: int = Field(default=5000, gt=0, alias="vault.timeoutMs")
    connect_timeout_ms: int | None = Field(default=None, gt=0, alias="vault.connectTimeoutMs")
    read_timeout_ms: int | None = Field(default=None, gt=0, alias="vault.readTimeoutMs")
    cache_ttl_seconds: int = Field(default=300, alias="secrets.cache.ttlSeconds")
    cache_max_entries: int = Field(default=200, alias="secrets.cache.maxEntries")

    @field_validator("address")
    @classmethod
    def _trim_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def login_url(self) -> str:
        login_path = self.login_path if self.login_path.startswith("/") else f"/{self.login_path}"
        return f"{self.address}{login_path}"

    @property
    def connect_timeout(self) -> float:
        """Connect timeout in seconds."""
        return (self.connect_timeout_ms or self.timeout_ms) / 1000

    @property
    def read_timeout(self) -> float:
        """Read timeout in seconds."""
        return (self.read_timeout_ms or self.timeout_ms) / 1000

    @property
    def cache_ttl(self) -> timedelta:
        """Cache TTL; zero when caching is disabled."""
        return timedelta(seconds=max(0, self.cache_ttl_seconds))
