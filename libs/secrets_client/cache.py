"""
Thread-safe bounded in-memory cache for secret values with per-entry expiry.

This module provides SecretCache, an LRU (least-recently-used) map whose
entries also carry an absolute expiration time. It reduces load on the
secrets backend and bounds how long secret material stays resident in memory.

Architecture:
    - Thread-safe with a single threading.Lock (every operation is one
      critical section, so recency order and capacity accounting never
      interleave)
    - collections.OrderedDict ordered by recency of access (oldest first)
    - Explicit post-insert capacity check evicts the least-recently-used entry
    - Lazy expiry: expired entries are purged when they are next read
    - In-memory only (NO disk persistence)

Example Usage:
    >>> from datetime import UTC, datetime, timedelta
    >>> cache = SecretCache(max_entries=2)
    >>> expires = datetime.now(UTC) + timedelta(minutes=5)
    >>> cache.put(("integration/systemA", "password"), "s3cr3t", expires)
    >>> cache.get(("integration/systemA", "password"))
    's3cr3t'
    >>> cache.clear()
"""

import threading
from collections import OrderedDict
from collections.abc import Callable, Hashable
from datetime import UTC, datetime
from typing import NamedTuple


def _utcnow() -> datetime:
    return datetime.now(UTC)


class _Entry(NamedTuple):
    value: str
    expires_at: datetime


class SecretCache:
    """
    Thread-safe LRU cache with absolute per-entry expiration.

    An entry is visible only while ``now < expires_at``; at or past
    ``expires_at`` it is treated as absent and removed on that access. The
    number of entries never exceeds ``max_entries``: a ``put`` that overflows
    evicts the least-recently-used entry, where both ``get`` hits and ``put``
    count as use.

    Attributes:
        max_entries: Maximum number of cached entries (at least 1)

    Thread Safety:
        All public methods are thread-safe and mutually exclusive.
    """

    def __init__(
        self,
        max_entries: int = 200,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize SecretCache.

        Args:
            max_entries: Capacity. Non-positive values are coerced to 1.
            clock: Returns the current UTC time. Injectable for tests.
        """
        self.max_entries = max(1, max_entries)
        self._clock = clock
        self._entries: OrderedDict[Hashable, _Entry] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> str | None:
        """
        Return the cached value, or None if absent or expired.

        A hit promotes the entry to most-recently-used. An expired entry is
        removed as a side effect (a second get also returns None).
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            if self._clock() >= entry.expires_at:
                del self._entries[key]
                return None

            self._entries.move_to_end(key)
            return entry.value

    def put(self, key: Hashable, value: str, expires_at: datetime) -> None:
        """
        Insert or replace an entry and evict the LRU entry on overflow.

        Args:
            key: Lookup key (the client uses a ``(path, key)`` tuple)
            value: Secret value
            expires_at: Absolute UTC time at which the entry expires
        """
        with self._lock:
            self._entries[key] = _Entry(value, expires_at)
            self._entries.move_to_end(key)
            if len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def invalidate(self, key: Hashable) -> None:
        """Remove a single entry if present (idempotent)."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove all entries, scrubbing residual secret material."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        """Number of entries, including expired ones not yet accessed."""
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        """Membership without touching recency or expiry (monitoring/tests)."""
        with self._lock:
            return key in self._entries
