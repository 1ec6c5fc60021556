"""
Local Key-Value File Secrets Provider.

PropertiesFileSecretsClient reads secrets from a local file of
``<path>.<key>=<value>`` lines, loaded once at construction:

    # integration secrets
    integration/systemA.password=SuperSecret123
    integration/systemA.api_key="abc 123"

The file is parsed with python-dotenv (comments, quoting, ``export`` prefix).
Values are trimmed; blank values count as missing.
"""

import logging
import threading
from pathlib import Path

from dotenv import dotenv_values

from libs.secrets_client.client import SecretCapability, SecretsClient
from libs.secrets_client.exceptions import SecretError, SecretNotFoundError

logger = logging.getLogger(__name__)


class PropertiesFileSecretsClient(SecretsClient):
    """Secrets provider backed by a local ``path.key=value`` file."""

    backend = "file"

    def __init__(self, file_path: str | Path) -> None:
        """
        Args:
            file_path: Secrets file to load

        Raises:
            SecretError: File missing or unreadable
        """
        self._file_path = Path(file_path)
        self._lock = threading.Lock()
        self._values = self._load_from_disk()
        logger.info(
            "Loaded secrets file",
            extra={"file_path": str(self._file_path), "count": len(self._values), "backend": self.backend},
        )

    def _load_from_disk(self) -> dict[str, str]:
        if not self._file_path.is_file():
            raise SecretError(f"Secrets file not found: {self._file_path}", backend=self.backend)
        try:
            raw = dotenv_values(dotenv_path=self._file_path, interpolate=False)
        except (OSError, UnicodeDecodeError) as e:
            raise SecretError(
                f"Failed to load secrets file: {self._file_path}", backend=self.backend
            ) from e
        return {name: value for name, value in raw.items() if value is not None}

    def capabilities(self) -> frozenset[SecretCapability]:
        return frozenset({SecretCapability.KV_READ})

    def get_required(self, path: str, key: str) -> str:
        property_key = f"{path}.{key}"
        with self._lock:
            value = self._values.get(property_key)
        if value is None or not value.strip():
            raise SecretNotFoundError(
                f"Missing property secret: {property_key} in file: {self._file_path}",
                path=path,
                key=key,
                backend=self.backend,
            )
        return value.strip()

    def close(self) -> None:
        """Drop the loaded secret values from memory."""
        with self._lock:
            self._values.clear()
