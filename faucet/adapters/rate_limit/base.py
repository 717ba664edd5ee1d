"""TTL store interface used by the cooldown limiter."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractTTLStore(ABC):
    """Keys that expire on their own after a per-entry time-to-live.

    A key that is present always has a positive remaining time. Reading a
    key never extends its lifetime.
    """

    @abstractmethod
    def set(self, key: str, ttl_seconds: float) -> None:
        """Store ``key`` for ``ttl_seconds``, replacing any existing entry."""
        raise NotImplementedError

    @abstractmethod
    def remaining(self, key: str) -> float | None:
        """Return the seconds left for ``key``, or None if absent/expired."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, key: str) -> bool:
        """Delete ``key``. Returns True if a live entry was removed."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        """Number of live entries."""
        raise NotImplementedError
