"""
Factory for creating SecretsClient instances from configuration.

Provider selection (secrets.provider, case-insensitive, default "vault"):
    - "vault" / "openbao" → VaultAppRoleKvV2Client (AppRole + KV v2)
    - "env" → EnvSecretsClient (environment variables, optional .env file)
    - "file" → PropertiesFileSecretsClient (secrets.file.path required)

Example Usage:
    >>> from libs.secrets_client import create_secrets_client, load_properties
    >>> secrets = create_secrets_client(
    ...     load_properties("secrets.properties"),
    ...     required={SecretCapability.KV_READ},
    ... )
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Final

from libs.secrets_client.client import SecretCapability, SecretsClient
from libs.secrets_client.config import ProviderSettings
from libs.secrets_client.exceptions import ConfigError

logger = logging.getLogger(__name__)

VAULT_PROVIDERS: Final[frozenset[str]] = frozenset({"vault", "openbao"})
VALID_PROVIDERS: Final[tuple[str, ...]] = ("vault", "openbao", "env", "file")


def _build_provider(settings: ProviderSettings, config: Mapping[str, str]) -> SecretsClient:
    provider = settings.provider

    if provider in VAULT_PROVIDERS:
        # Imported lazily: httpx is only needed by the Vault provider
        from libs.secrets_client.vault_backend import VaultAppRoleKvV2Client

        return VaultAppRoleKvV2Client.from_properties(config)

    if provider == "env":
        from libs.secrets_client.env_backend import EnvSecretsClient

        return EnvSecretsClient(dotenv_path=settings.dotenv_path)

    if provider == "file":
        from libs.secrets_client.file_backend import PropertiesFileSecretsClient

        if not settings.file_path:
            raise ConfigError("Missing property: secrets.file.path", property_name="secrets.file.path")
        return PropertiesFileSecretsClient(settings.file_path)

    raise ConfigError(
        f"Unknown secrets.provider: '{provider}'. Valid options: {', '.join(VALID_PROVIDERS)}",
        property_name="secrets.provider",
    )


def create_secrets_client(
    config: Mapping[str, str],
    required: Iterable[SecretCapability] = (),
) -> SecretsClient:
    """
    Create the SecretsClient selected by ``secrets.provider``.

    Args:
        config: Flat property mapping (see config.py for the keys)
        required: Capabilities the caller depends on. If the selected provider
                  does not advertise all of them it is closed and ConfigError
                  is raised.

    Returns:
        SecretsClient: Configured provider instance

    Raises:
        ConfigError: Unknown provider, missing/invalid settings, or missing capability
        SecretError: Provider failed to initialize (e.g., unreadable secrets file)
    """
    settings = ProviderSettings.from_properties(config)
    client = _build_provider(settings, config)

    missing = frozenset(required) - client.capabilities()
    if missing:
        client.close()
        names = ", ".join(sorted(capability.value for capability in missing))
        raise ConfigError(
            f"secrets.provider '{settings.provider}' does not support: {names}",
            property_name="secrets.provider",
        )

    logger.info("Secrets provider selected", extra={"provider": settings.provider})
    return client
