"""
Environment Variable Secrets Provider.

EnvSecretsClient reads secrets from process environment variables, optionally
seeded from a .env file via python-dotenv. Intended for local development and
CI, where no Vault is available.

Naming convention:
    (path, key) → upper(path + "_" + key) with "/", "-" and "." replaced by "_"

    ("integration/systemA", "password")  → INTEGRATION_SYSTEMA_PASSWORD
    ("db-main", "conn.url")              → DB_MAIN_CONN_URL

Security Considerations:
    - Secret values NEVER logged (only the variable name)
    - .env files MUST be in .gitignore
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from libs.secrets_client.client import SecretCapability, SecretsClient
from libs.secrets_client.exceptions import ConfigError, SecretNotFoundError

logger = logging.getLogger(__name__)

_SEPARATORS = str.maketrans({"/": "_", "-": "_", ".": "_"})


def env_var_name(path: str, key: str) -> str:
    """
    Map a (path, key) pair to its environment variable name.

    Example:
        >>> env_var_name("integration/systemA", "password")
        'INTEGRATION_SYSTEMA_PASSWORD'
    """
    return f"{path}_{key}".translate(_SEPARATORS).upper()


class EnvSecretsClient(SecretsClient):
    """
    Secrets provider backed by environment variables.

    Example:
        >>> secrets = EnvSecretsClient(dotenv_path=".env")
        >>> secrets.get_required("integration/systemA", "password")
    """

    backend = "env"

    def __init__(self, dotenv_path: str | Path | None = None) -> None:
        """
        Args:
            dotenv_path: Optional .env file loaded into os.environ. Variables
                         already set in the environment take precedence.

        Raises:
            ConfigError: dotenv_path given but the file does not exist
        """
        if dotenv_path is not None:
            dotenv_file = Path(dotenv_path)
            if not dotenv_file.is_file():
                raise ConfigError(
                    f".env file not found: {dotenv_file}",
                    property_name="secrets.env.dotenvPath",
                )
            load_dotenv(dotenv_path=dotenv_file, override=False)
            logger.info(
                "Loaded .env file for secrets",
                extra={"dotenv_path": str(dotenv_file), "backend": self.backend},
            )

    def capabilities(self) -> frozenset[SecretCapability]:
        return frozenset({SecretCapability.KV_READ})

    def get_required(self, path: str, key: str) -> str:
        name = env_var_name(path, key)
        value = os.environ.get(name)
        if value is None or not value.strip():
            raise SecretNotFoundError(
                f"Missing environment secret: {name}",
                path=path,
                key=key,
                backend=self.backend,
            )
        logger.debug(
            "Secret loaded from environment",
            extra={"secret_path": path, "secret_key": key, "backend": self.backend},
        )
        return value
