"""
Vault/OpenBao KV v2 read protocol.

Read protocol:
    GET <addr>/v1/<mount>/data/<percent-encoded path>
    X-Vault-Token: <client token>

    200 OK
    {"data": {"data": {"<key>": "<value>", ...}, "metadata": {...}}}

Status mapping:
    - 404 → SecretNotFoundError (path does not exist)
    - 403 → PermissionDeniedError (token expired/revoked or policy denies read)
    - other non-2xx → BackendError (status code + backend body attached)
    - transport failure/timeout → BackendError (no status code)
"""

import json
import logging
from typing import Any
from urllib.parse import quote

import httpx

from libs.secrets_client.exceptions import (
    BackendError,
    PermissionDeniedError,
    SecretNotFoundError,
)

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Vault-Token"


def encode_path(path: str) -> str:
    """
    Percent-encode each path segment independently, keeping '/' separators.

    Example:
        >>> encode_path("team a/db#1")
        'team%20a/db%231'
    """
    if not path:
        return ""
    return "/".join(quote(segment, safe="") for segment in path.split("/"))


def canonical_value(value: Any) -> str:
    """Return strings verbatim, serialize anything else to canonical compact JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class KvV2Reader:
    """
    Fetch one field of a KV v2 secret with a caller-supplied token.

    The reader is stateless apart from its HTTP connection pool; token
    management and retries belong to the caller.
    """

    def __init__(self, http: httpx.Client, address: str, mount: str) -> None:
        self._http = http
        self._address = address
        self._mount = mount

    def url_for(self, path: str) -> str:
        return f"{self._address}/v1/{self._mount}/data/{encode_path(path)}"

    def read(self, path: str, key: str, token: str) -> str:
        """
        Read ``key`` from the secret stored at ``path``.

        Returns:
            The field value; non-string values as canonical JSON text

        Raises:
            SecretNotFoundError: Path (404) or key (missing/null) absent
            PermissionDeniedError: HTTP 403
            BackendError: Any other failure
        """
        try:
            response = self._http.get(self.url_for(path), headers={TOKEN_HEADER: token})
        except httpx.HTTPError as e:
            logger.error(
                "Vault read failed - backend unreachable",
                extra={"secret_path": path, "backend": "vault", "error_type": type(e).__name__},
            )
            raise BackendError(
                f"Vault read request failed: {type(e).__name__}: {e}",
                path=path,
                key=key,
            ) from e

        status = response.status_code
        if status == 404:
            raise SecretNotFoundError(f"Secret path not found: {path}", path=path, key=key, backend="vault")
        if status == 403:
            raise PermissionDeniedError(
                f"Vault read denied HTTP 403: {response.text}",
                path=path,
                key=key,
                status_code=status,
                body=response.text,
            )
        if not response.is_success:
            raise BackendError(
                f"Vault read failed HTTP {status}: {response.text}",
                path=path,
                key=key,
                status_code=status,
                body=response.text,
            )

        try:
            payload = response.json()
        except ValueError as e:  # JSONDecodeError, or UnicodeDecodeError on undecodable bytes
            raise BackendError(
                "Vault read response is not valid JSON",
                path=path,
                key=key,
                status_code=status,
            ) from e

        # KV v2 response structure: {data: {data: {key: value}}}
        outer = payload.get("data") if isinstance(payload, dict) else None
        secret_data = outer.get("data") if isinstance(outer, dict) else None
        value = secret_data.get(key) if isinstance(secret_data, dict) else None
        if value is None:
            raise SecretNotFoundError(
                f"Key '{key}' not found at '{path}'", path=path, key=key, backend="vault"
            )

        logger.debug("Secret fetched from Vault", extra={"secret_path": path, "secret_key": key, "backend": "vault"})
        return canonical_value(value)
