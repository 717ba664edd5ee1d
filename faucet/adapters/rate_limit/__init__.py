"""Cooldown storage adapters.

The limiter depends on the abstract TTL store so the in-memory backend can
later be replaced by a shared store (e.g., Redis) without touching the HTTP
layer.
"""

from faucet.adapters.rate_limit.base import AbstractTTLStore
from faucet.adapters.rate_limit.in_memory import InMemoryTTLStore

__all__ = ["AbstractTTLStore", "InMemoryTTLStore"]
