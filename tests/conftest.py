"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any test module imports settings.
"""

import os
from typing import Callable, Mapping

import pytest
from starlette.requests import Request

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

os.environ.setdefault("CHAIN_SENDER_ADDRESS", "0x" + "11" * 20)
os.environ.setdefault("CHAIN_RPC_URL", "http://node.test:8545")
os.environ.setdefault("FAUCET_PAYOUT", "1")
os.environ.setdefault("FAUCET_INTERVAL_MINUTES", "1440")
os.environ.setdefault("FAUCET_PROXY_COUNT", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")

RequestFactory = Callable[..., Request]


@pytest.fixture
def make_request() -> RequestFactory:
    """Build a bare Starlette request with the given headers and peer address."""

    def _make(headers: Mapping[str, str] | None = None, client: tuple[str, int] | None = ("198.51.100.20", 40000)) -> Request:
        scope = {
            "type": "http",
            "method": "POST",
            "path": "/api/claim",
            "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
            "client": client,
        }
        return Request(scope)

    return _make
