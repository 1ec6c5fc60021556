"""
Abstract SecretsClient Interface for Pluggable Secrets Providers.

Application code depends ONLY on this interface, so the concrete provider
(Vault/OpenBao over AppRole, environment variables, local properties file)
can be swapped through configuration without code changes.

Architecture:
    SecretsClient (ABC)
    ├── VaultAppRoleKvV2Client - Vault/OpenBao KV v2 via AppRole (vault_backend.py)
    ├── EnvSecretsClient - Environment variables (env_backend.py)
    └── PropertiesFileSecretsClient - Local key-value file (file_backend.py)

Provider selection via factory (factory.py):
    - secrets.provider=vault|openbao → VaultAppRoleKvV2Client
    - secrets.provider=env → EnvSecretsClient
    - secrets.provider=file → PropertiesFileSecretsClient

Usage Example:
    >>> from libs.secrets_client import create_secrets_client, load_properties
    >>> with create_secrets_client(load_properties("secrets.properties")) as secrets:
    ...     password = secrets.get_required("integration/systemA", "password")
"""

from abc import ABC, abstractmethod
from enum import Enum
from types import TracebackType


class SecretCapability(str, Enum):
    """Operations a secrets provider can perform."""

    KV_READ = "kv_read"


class SecretsClient(ABC):
    """
    Abstract base class for all secrets providers.

    Thread Safety:
        Implementations MUST be safe for concurrent get_required() calls.

    Security:
        - NEVER log secret values (only path/key)
        - close() SHOULD drop any secret material held in memory
    """

    @abstractmethod
    def capabilities(self) -> frozenset[SecretCapability]:
        """
        Advertise the operations this provider supports.

        Lets callers (and the factory) validate compatibility before use
        without knowing the concrete provider type.

        Example:
            >>> SecretCapability.KV_READ in secrets.capabilities()
            True
        """

    @abstractmethod
    def get_required(self, path: str, key: str) -> str:
        """
        Read a secret value from a logical path and key.

        Args:
            path: Hierarchical secret path (e.g., "integration/systemA")
            key: Field name within the secret (e.g., "password")

        Returns:
            Secret value as string

        Raises:
            SecretNotFoundError: Path or key does not exist
            AuthError: Provider could not authenticate
            BackendError: Provider unreachable or answered with an error
        """

    def close(self) -> None:  # noqa: B027 - Intentionally optional hook with default no-op
        """Release resources and drop secret material held in memory (optional hook)."""

    def __enter__(self) -> "SecretsClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
