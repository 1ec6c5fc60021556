"""
AppRole authentication session for Vault/OpenBao.

AppRoleSession performs the AppRole login exchange (role_id + secret_id for a
client token) and holds the resulting token for reuse. The token has no
client-side expiry: it is discarded reactively, when a read is rejected with
HTTP 403, via invalidate().

Login protocol:
    POST <addr>/v1/auth/approle/login
    Content-Type: application/json
    {"role_id": "...", "secret_id": "..."}

    200 OK
    {"auth": {"client_token": "hvs.CAES...", ...}, ...}

Security Considerations:
    - The token, role_id and secret_id are NEVER logged
    - The token lives in memory only and is dropped by invalidate()
"""

import logging
import threading

import httpx

from libs.secrets_client.exceptions import AuthError, BackendError

logger = logging.getLogger(__name__)


class AppRoleSession:
    """
    Lazily acquired, lock-protected AppRole client token.

    Concurrent callers of ensure_token() that find no token perform exactly
    one login between them (double-checked locking) and all observe the same
    token.

    Example:
        >>> session = AppRoleSession(
        ...     http=httpx.Client(timeout=5.0),
        ...     login_url="https://vault.company.com:8200/v1/auth/approle/login",
        ...     role_id=role_id,
        ...     secret_id=secret_id,
        ... )
        >>> token = session.ensure_token()  # logs in
        >>> token = session.ensure_token()  # reuses the held token
        >>> session.invalidate()            # next ensure_token() logs in again
    """

    def __init__(
        self,
        http: httpx.Client,
        login_url: str,
        role_id: str,
        secret_id: str,
    ) -> None:
        self._http = http
        self._login_url = login_url
        self._role_id = role_id
        self._secret_id = secret_id
        self._token: str | None = None
        self._lock = threading.Lock()

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    def ensure_token(self) -> str:
        """
        Return the held token, logging in first if none is held.

        Raises:
            AuthError: Login rejected or response carried no usable token
            BackendError: Vault unreachable or timed out during login
        """
        token = self._token
        if token:
            return token

        with self._lock:
            if not self._token:
                self._token = self.login()
            return self._token

    def invalidate(self) -> None:
        """Drop the held token so the next ensure_token() performs a fresh login."""
        with self._lock:
            self._token = None
        logger.info("Vault client token invalidated", extra={"backend": "vault"})

    def login(self) -> str:
        """
        Perform one AppRole login exchange and return the client token.

        Does not touch the held token; use ensure_token() for that.
        """
        try:
            response = self._http.post(
                self._login_url,
                json={"role_id": self._role_id, "secret_id": self._secret_id},
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.error(
                "Vault AppRole login failed - backend unreachable",
                extra={"login_url": self._login_url, "backend": "vault", "error_type": type(e).__name__},
            )
            raise BackendError(
                f"Vault AppRole login request failed: {type(e).__name__}: {e}"
            ) from e

        if not response.is_success:
            logger.warning(
                "Vault AppRole login rejected",
                extra={"status_code": response.status_code, "backend": "vault"},
            )
            raise AuthError(
                f"Vault AppRole login failed HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:  # JSONDecodeError, or UnicodeDecodeError on undecodable bytes
            raise AuthError(
                "Vault AppRole login response is not valid JSON",
                status_code=response.status_code,
            ) from e

        auth = payload.get("auth") if isinstance(payload, dict) else None
        token = auth.get("client_token") if isinstance(auth, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthError(
                "Vault AppRole login response missing auth.client_token",
                status_code=response.status_code,
            )

        logger.info("Vault AppRole login succeeded", extra={"backend": "vault"})
        return token
