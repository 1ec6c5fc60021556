"""
Provider-agnostic static secrets client.

Application code depends on the SecretsClient interface only; the concrete
provider is chosen by configuration (secrets.provider).

Architecture (Abstract Factory Pattern):
    - SecretsClient: Abstract interface (client.py)
    - Providers: VaultAppRoleKvV2Client, EnvSecretsClient, PropertiesFileSecretsClient
    - Factory: create_secrets_client() selects the provider from configuration
    - Cache: bounded LRU + TTL cache in front of Vault reads

Quick Start:
    >>> from libs.secrets_client import create_secrets_client, load_properties
    >>> with create_secrets_client(load_properties("secrets.properties")) as secrets:
    ...     password = secrets.get_required("integration/systemA", "password")

Provider Selection (secrets.provider):
    - "vault" / "openbao" → VaultAppRoleKvV2Client (AppRole login + KV v2 read)
    - "env" → EnvSecretsClient (INTEGRATION_SYSTEMA_PASSWORD style variables)
    - "file" → PropertiesFileSecretsClient (integration/systemA.password=... lines)
"""

from typing import TYPE_CHECKING, Any

# Lazy import: the Vault provider pulls in httpx/tenacity, which the env and
# file providers do not need.
if TYPE_CHECKING:
    from libs.secrets_client.vault_backend import (
        VaultAppRoleKvV2Client as VaultAppRoleKvV2Client,
    )

from libs.secrets_client.cache import SecretCache
from libs.secrets_client.client import SecretCapability, SecretsClient
from libs.secrets_client.config import ProviderSettings, VaultSettings, load_properties
from libs.secrets_client.env_backend import EnvSecretsClient
from libs.secrets_client.exceptions import (
    AuthError,
    BackendError,
    ConfigError,
    PermissionDeniedError,
    SecretError,
    SecretNotFoundError,
)
from libs.secrets_client.factory import create_secrets_client
from libs.secrets_client.file_backend import PropertiesFileSecretsClient


def __getattr__(name: str) -> Any:
    """Lazy load the Vault provider on first access."""
    if name == "VaultAppRoleKvV2Client":
        from libs.secrets_client.vault_backend import VaultAppRoleKvV2Client

        return VaultAppRoleKvV2Client
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Core interface
    "SecretsClient",
    "SecretCapability",
    # Factory and configuration
    "create_secrets_client",
    "load_properties",
    "ProviderSettings",
    "VaultSettings",
    # Providers
    "VaultAppRoleKvV2Client",
    "EnvSecretsClient",
    "PropertiesFileSecretsClient",
    # Cache utility
    "SecretCache",
    # Exceptions (callers should catch these)
    "SecretError",
    "ConfigError",
    "AuthError",
    "SecretNotFoundError",
    "BackendError",
    "PermissionDeniedError",
]
