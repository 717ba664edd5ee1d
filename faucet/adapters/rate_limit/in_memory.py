"""In-memory TTL store.

Notes:
- Per-process only: running multiple workers gives each its own cooldowns.
- Thread-safe: every operation runs under one reentrant lock.
- Expired entries are purged lazily, on the next access to the store.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from faucet.adapters.rate_limit.base import AbstractTTLStore

logger = logging.getLogger(__name__)


class InMemoryTTLStore(AbstractTTLStore):
    """Dictionary of key -> expiry deadline with lazy expiration.

    Lookups do not refresh the deadline, so an entry always lives exactly
    as long as the TTL it was stored with (or until removed).
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the store.

        Args:
            clock: Monotonic time source in seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._deadlines: dict[str, float] = {}
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"InMemoryTTLStore(size={len(self._deadlines)}, hits={self._hits}, "
            f"misses={self._misses}, evictions={self._evictions})"
        )

    def set(self, key: str, ttl_seconds: float) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")

        with self._lock:
            self._evict_expired_locked()
            self._deadlines[key] = self._clock() + ttl_seconds

    def remaining(self, key: str) -> float | None:
        with self._lock:
            deadline = self._deadlines.get(key)
            if deadline is None:
                self._misses += 1
                return None

            left = deadline - self._clock()
            if left <= 0:
                del self._deadlines[key]
                self._evictions += 1
                self._misses += 1
                return None

            self._hits += 1
            return left

    def remove(self, key: str) -> bool:
        with self._lock:
            deadline = self._deadlines.pop(key, None)
            return deadline is not None and deadline > self._clock()

    def clear(self) -> None:
        with self._lock:
            self._deadlines.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired_locked()
            return len(self._deadlines)

    def stats(self) -> dict[str, int]:
        """Return lightweight counters without exposing keys."""

        with self._lock:
            self._evict_expired_locked()
            return {
                "entries": len(self._deadlines),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def _evict_expired_locked(self) -> None:
        now = self._clock()
        expired = [key for key, deadline in self._deadlines.items() if deadline <= now]
        for key in expired:
            del self._deadlines[key]
        if expired:
            self._evictions += len(expired)
            logger.debug("ttl_store.evicted", extra={"count": len(expired)})
