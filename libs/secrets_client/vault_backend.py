"""
Vault/OpenBao AppRole KV v2 Secrets Client.

This module implements VaultAppRoleKvV2Client, the production secrets provider.
It authenticates with AppRole (role_id + secret_id), reads static secrets from
a KV v2 mount, and keeps a bounded, time-expiring cache of the values it read.

Architecture:
    VaultAppRoleKvV2Client (orchestrator, retry policy, close)
    ├── SecretCache - LRU + TTL cache (cache.py)
    ├── AppRoleSession - token login/holder/invalidation (auth.py)
    └── KvV2Reader - KV v2 read protocol (reader.py)

Read algorithm (get_required):
    1. Cache hit (caching enabled and entry unexpired) → return, no network
    2. session.ensure_token() → logs in once if no token is held
    3. reader.read(); on HTTP 403 invalidate the token, log in again and
       read exactly once more; any other failure propagates with path/key attached
    4. Cache the value with expires_at = now + TTL

Security Considerations:
    - Secret values, tokens and AppRole credentials are NEVER logged
    - close() clears the cache and drops the token to shorten the time
      secret material stays resident in memory

Usage Example:
    >>> from libs.secrets_client.config import VaultSettings, load_properties
    >>> settings = VaultSettings.from_properties(load_properties("vault.properties"))
    >>> with VaultAppRoleKvV2Client(settings) as secrets:
    ...     password = secrets.get_required("integration/systemA", "password")
"""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime

import httpx
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_none,
)

from libs.secrets_client.auth import AppRoleSession
from libs.secrets_client.cache import SecretCache
from libs.secrets_client.client import SecretCapability, SecretsClient
from libs.secrets_client.config import VaultSettings
from libs.secrets_client.exceptions import PermissionDeniedError, SecretError
from libs.secrets_client.reader import KvV2Reader

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class VaultAppRoleKvV2Client(SecretsClient):
    """
    Vault/OpenBao KV v2 reader authenticating via AppRole.

    Thread Safety:
        get_required() may be called from many threads. The cache and the
        token are the only shared mutable state; each is guarded by its own
        lock. Instances share nothing with each other.

    Caching:
        - TTL from secrets.cache.ttlSeconds (default 300s); <= 0 disables it
        - Capacity from secrets.cache.maxEntries (default 200), LRU eviction
        - Keyed by the (path, key) pair

    Example:
        >>> secrets = VaultAppRoleKvV2Client.from_properties({
        ...     "vault.addr": "https://vault.company.com:8200",
        ...     "vault.approle.role_id": os.environ["VAULT_ROLE_ID"],
        ...     "vault.approle.secret_id": os.environ["VAULT_SECRET_ID"],
        ... })
        >>> try:
        ...     api_key = secrets.get_required("integration/systemA", "api_key")
        ... finally:
        ...     secrets.close()
    """

    backend = "vault"

    def __init__(
        self,
        settings: VaultSettings,
        http_client: httpx.Client | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize the client. No network activity happens until the first read.

        Args:
            settings: Validated Vault settings
            http_client: Optional pre-built httpx client (not closed by close()).
                         If None, a pooled client with the configured timeouts is created.
            clock: Returns the current UTC time. Injectable for tests.
        """
        self._settings = settings
        self._clock = clock
        self._ttl = settings.cache_ttl
        self._closed = False

        self._owns_http = http_client is None
        if http_client is None:
            http_client = httpx.Client(
                timeout=httpx.Timeout(
                    settings.read_timeout,
                    connect=settings.connect_timeout,
                    read=settings.read_timeout,
                )
            )
        self._http = http_client

        self._cache = SecretCache(max_entries=settings.cache_max_entries, clock=clock)
        self._session = AppRoleSession(
            http=self._http,
            login_url=settings.login_url,
            role_id=settings.role_id.get_secret_value(),
            secret_id=settings.secret_id.get_secret_value(),
        )
        self._reader = KvV2Reader(self._http, settings.address, settings.mount)

        logger.info(
            "Vault AppRole KV v2 client initialized",
            extra={
                "vault_url": settings.address,
                "mount_point": settings.mount,
                "cache_ttl_seconds": int(self._ttl.total_seconds()),
                "cache_max_entries": self._cache.max_entries,
                "backend": self.backend,
            },
        )

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> "VaultAppRoleKvV2Client":
        """Build a client from a flat property mapping (raises ConfigError)."""
        return cls(VaultSettings.from_properties(properties))

    @property
    def caching_enabled(self) -> bool:
        return self._ttl.total_seconds() > 0

    def capabilities(self) -> frozenset[SecretCapability]:
        return frozenset({SecretCapability.KV_READ})

    def get_required(self, path: str, key: str) -> str:
        """
        Read ``key`` from the KV v2 secret at ``path``.

        Raises:
            SecretNotFoundError: Path or key absent
            AuthError: AppRole login failed
            PermissionDeniedError: Read denied twice (after one re-login)
            BackendError: Vault unreachable, timed out or answered an error
            SecretError: Client already closed
        """
        if self._closed:
            raise SecretError("Secrets client is closed", path=path, key=key, backend=self.backend)

        cache_key = (path, key)
        if self.caching_enabled:
            cached_value = self._cache.get(cache_key)
            if cached_value is not None:
                logger.debug(
                    "Secret cache hit",
                    extra={"secret_path": path, "secret_key": key, "backend": self.backend},
                )
                return cached_value

        try:
            value = self._read_with_reauth(path, key)
        except SecretError as e:
            # Login failures are raised without knowing which secret was requested
            e.path = e.path or path
            e.key = e.key or key
            e.backend = e.backend or self.backend
            raise
        except RuntimeError as e:
            # httpx refuses to send on a client closed by a concurrent close()
            if not self._closed:
                raise
            raise SecretError(
                "Secrets client is closed", path=path, key=key, backend=self.backend
            ) from e

        if self.caching_enabled:
            self._cache.put(cache_key, value, self._clock() + self._ttl)
            # close() sets _closed before clearing; drop a value put after that clear
            if self._closed:
                self._cache.clear()

        logger.info(
            "Secret loaded from Vault",
            extra={"secret_path": path, "secret_key": key, "backend": self.backend},
        )
        return value

    def _read_with_reauth(self, path: str, key: str) -> str:
        retrying = Retrying(
            stop=stop_after_attempt(2),
            wait=wait_none(),
            retry=retry_if_exception_type(PermissionDeniedError),
            before_sleep=self._on_permission_denied,
            reraise=True,
        )
        return retrying(self._read_once, path, key)

    def _read_once(self, path: str, key: str) -> str:
        token = self._session.ensure_token()
        return self._reader.read(path, key, token)

    def _on_permission_denied(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Vault read denied, re-authenticating once",
            extra={
                "secret_path": getattr(error, "path", None),
                "secret_key": getattr(error, "key", None),
                "backend": self.backend,
            },
        )
        self._session.invalidate()

    def close(self) -> None:
        """
        Clear cached secrets, drop the token and close the owned connection pool.

        Idempotent. Any later get_required() raises SecretError.
        """
        if self._closed:
            return
        self._closed = True
        self._cache.clear()
        self._session.invalidate()
        if self._owns_http:
            self._http.close()
        logger.info("Vault client closed, cache cleared", extra={"backend": self.backend})
