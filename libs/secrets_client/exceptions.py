"""
Secrets Client Exception Hierarchy.

This module defines all exceptions raised by the secrets client, giving callers
clear semantics to tell "the secret does not exist" apart from "the backend
could not be asked".

Exception hierarchy:
    SecretError (base)
    ├── ConfigError - Missing or invalid configuration value (fatal)
    ├── AuthError - AppRole login failed or returned no usable token
    ├── SecretNotFoundError - Path or key absent in the backend
    └── BackendError - Non-2xx response (other than 404), transport or timeout
        └── PermissionDeniedError - HTTP 403 on read (token expired/revoked)

All exceptions carry structured context (path, key, backend) and NEVER the
secret value or the client token.
"""


class SecretError(Exception):
    """
    Base exception for all secrets client errors.

    Attributes:
        message: Human-readable error message (MUST NOT include secret value)
        path: Secret path (e.g., "integration/systemA"), if known
        key: Field name within the secret at ``path``, if known
        backend: Provider type ("vault", "env", "file"), if known

    Example:
        >>> try:
        ...     password = client.get_required("integration/systemA", "password")
        ... except SecretError as e:
        ...     logger.error("Secret error: %s", e)
        ...     # Logs path/key/backend only, never the value
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        key: str | None = None,
        backend: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.key = key
        self.backend = backend

    def __str__(self) -> str:
        """
        Format error message with context.

        Example:
            >>> str(SecretError("Timeout", "db/main", "password", "vault"))
            'Timeout (path: db/main, key: password, backend: vault)'
        """
        context_parts = []
        if self.path:
            context_parts.append(f"path: {self.path}")
        if self.key:
            context_parts.append(f"key: {self.key}")
        if self.backend:
            context_parts.append(f"backend: {self.backend}")

        if context_parts:
            return f"{self.message} ({', '.join(context_parts)})"
        return self.message


class ConfigError(SecretError):
    """
    Raised when a required configuration value is missing or invalid.

    Configuration errors are fatal: they are surfaced immediately and never
    retried.

    Attributes:
        property_name: The offending configuration key (e.g., "vault.addr")
    """

    def __init__(self, message: str, property_name: str | None = None) -> None:
        super().__init__(message)
        self.property_name = property_name


class AuthError(SecretError):
    """
    Raised when the AppRole login exchange fails.

    Common causes:
    - Wrong role_id/secret_id (HTTP 400)
    - secret_id expired or exhausted its use count
    - Login path points at the wrong auth mount

    Resolution:
    - Verify role: `vault read auth/approle/role/<name>/role-id`
    - Generate a fresh secret_id: `vault write -f auth/approle/role/<name>/secret-id`
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        backend: str = "vault",
    ) -> None:
        super().__init__(message, backend=backend)
        self.status_code = status_code


class SecretNotFoundError(SecretError):
    """
    Raised when a requested secret path or key does not exist.

    Callers can treat this as a configuration bug (wrong path, missing key),
    as opposed to :class:`BackendError`, which signals an outage.

    Example:
        >>> client.get_required("integration/systemA", "pasword")
        SecretNotFoundError: Key 'pasword' not found at 'integration/systemA'
                             (path: integration/systemA, key: pasword, backend: vault)
    """


class BackendError(SecretError):
    """
    Raised when the backend cannot produce an answer.

    Covers non-2xx responses other than 404, network failures and timeouts.

    Attributes:
        status_code: HTTP status code, or None for transport failures
        body: Raw response body as returned by the backend (diagnostics only)
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        key: str | None = None,
        backend: str | None = "vault",
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message, path=path, key=key, backend=backend)
        self.status_code = status_code
        self.body = body


class PermissionDeniedError(BackendError):
    """
    Raised when a read is rejected with HTTP 403.

    Vault answers 403 both for an expired/revoked token and for a policy that
    does not grant read access. The client re-authenticates and retries exactly
    once; a second 403 is surfaced to the caller.
    """
