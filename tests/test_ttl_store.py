"""Unit tests for the in-memory TTL store."""

import threading
from unittest.mock import Mock

import pytest

from faucet.adapters.rate_limit.in_memory import InMemoryTTLStore


def test_set_and_remaining() -> None:
    clock = Mock(return_value=1000.0)
    store = InMemoryTTLStore(clock=clock)

    assert store.remaining("k") is None

    store.set("k", 60)
    clock.return_value = 1015.0

    assert store.remaining("k") == pytest.approx(45.0)
    assert len(store) == 1


def test_entry_expires() -> None:
    clock = Mock(return_value=1000.0)
    store = InMemoryTTLStore(clock=clock)
    store.set("k", 10)

    clock.return_value = 1010.0

    assert store.remaining("k") is None
    assert len(store) == 0
    assert store.stats()["evictions"] == 1


def test_lookup_does_not_extend_ttl() -> None:
    clock = Mock(return_value=1000.0)
    store = InMemoryTTLStore(clock=clock)
    store.set("k", 10)

    for now in (1002.0, 1005.0, 1009.0):
        clock.return_value = now
        assert store.remaining("k") == pytest.approx(1010.0 - now)

    clock.return_value = 1010.5
    assert store.remaining("k") is None


def test_expired_key_can_start_new_countdown() -> None:
    clock = Mock(return_value=1000.0)
    store = InMemoryTTLStore(clock=clock)
    store.set("k", 10)

    clock.return_value = 1020.0
    assert store.remaining("k") is None

    store.set("k", 10)
    assert store.remaining("k") == pytest.approx(10.0)


def test_remove() -> None:
    store = InMemoryTTLStore()
    store.set("k", 60)

    assert store.remove("k") is True
    assert store.remaining("k") is None
    assert store.remove("k") is False


def test_empty_string_is_a_valid_key() -> None:
    store = InMemoryTTLStore()
    store.set("", 60)

    assert store.remaining("") is not None


def test_invalid_ttl() -> None:
    store = InMemoryTTLStore()

    with pytest.raises(ValueError):
        store.set("k", 0)


def test_len_purges_expired_entries() -> None:
    clock = Mock(return_value=1000.0)
    store = InMemoryTTLStore(clock=clock)
    store.set("short", 5)
    store.set("long", 50)

    clock.return_value = 1006.0

    assert len(store) == 1


def test_clear_resets_state() -> None:
    store = InMemoryTTLStore()
    store.set("a", 60)
    store.remaining("a")
    store.remaining("missing")

    store.clear()

    assert store.stats() == {"entries": 0, "hits": 0, "misses": 0, "evictions": 0}


def test_thread_safety_under_concurrent_sets() -> None:
    store = InMemoryTTLStore()
    total_keys = 50

    def _writer(idx: int) -> None:
        store.set(f"k-{idx}", 60)

    threads = [threading.Thread(target=_writer, args=(i,)) for i in range(total_keys)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == total_keys
