"""Claim cooldown enforcement.

A claim is identified by two keys: the payout address from the request body
and the resolved client IP. If either key claimed within the cooldown
window, the request is rejected with the time left on that key. On
admission both keys start a fresh cooldown; if the protected action then
fails, both entries are removed again so the failed attempt costs nothing.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

from faucet.adapters.rate_limit.base import AbstractTTLStore
from faucet.adapters.rate_limit.in_memory import InMemoryTTLStore
from faucet.core.client_ip import client_ip_from_request
from faucet.core.config import settings
from faucet.core.interceptors import Handler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdmissionDecision:
    """Outcome of an admission check.

    Attributes:
        allowed: Whether the request may proceed.
        primary_key: Claimed address.
        secondary_key: Resolved client IP (None when limiting is disabled).
        retry_after_seconds: Time left on the blocking key when rejected.
        message: Human-readable rejection message.
        recorded: Whether cooldown entries were written for this decision.
    """

    allowed: bool
    primary_key: str
    secondary_key: str | None = None
    retry_after_seconds: float | None = None
    message: str | None = None
    recorded: bool = False


def format_duration(seconds: float) -> str:
    """Format a duration rounded to the nearest second, e.g. ``1h2m3s``."""
    total = max(0, int(round(seconds)))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


def rejection_message(key: str, remaining_seconds: float) -> str:
    return (
        f"You have exceeded the rate limit for {key}. "
        f"Please wait {format_duration(remaining_seconds)} before you try again"
    )


class CooldownLimiter:
    """Dual-key cooldown limiter.

    The check of both keys and the insertion of both entries happen under a
    single lock, so two concurrent claims for the same key can never both be
    admitted. The protected action itself runs without the lock.
    """

    def __init__(
        self,
        *,
        cooldown_seconds: float,
        proxy_count: int = 0,
        store: AbstractTTLStore | None = None,
    ) -> None:
        if proxy_count < 0:
            raise ValueError("proxy_count must be >= 0")

        self.cooldown_seconds = cooldown_seconds
        self.proxy_count = proxy_count
        self._store = store if store is not None else InMemoryTTLStore()
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.cooldown_seconds > 0

    @property
    def store(self) -> AbstractTTLStore:
        return self._store

    def _rejected(self, primary_key: str, secondary_key: str, hot_key: str, remaining: float) -> AdmissionDecision:
        return AdmissionDecision(
            allowed=False,
            primary_key=primary_key,
            secondary_key=secondary_key,
            retry_after_seconds=remaining,
            message=rejection_message(hot_key, remaining),
        )

    def check_and_record(self, primary_key: str, secondary_key: str) -> AdmissionDecision:
        """Admit the key pair if neither key is cooling down, recording both.

        Args:
            primary_key: Claimed address.
            secondary_key: Resolved client IP (may be empty).

        Returns:
            AdmissionDecision; rejected decisions carry the blocking key's
            remaining time.
        """
        if not self.enabled:
            return AdmissionDecision(allowed=True, primary_key=primary_key, secondary_key=secondary_key)

        with self._lock:
            for key in (primary_key, secondary_key):
                remaining = self._store.remaining(key)
                if remaining is not None:
                    return self._rejected(primary_key, secondary_key, key, remaining)

            self._store.set(primary_key, self.cooldown_seconds)
            self._store.set(secondary_key, self.cooldown_seconds)

        return AdmissionDecision(
            allowed=True,
            primary_key=primary_key,
            secondary_key=secondary_key,
            recorded=True,
        )

    def admit(self, primary_key: str, request: Request) -> AdmissionDecision:
        """Decide whether a claim for ``primary_key`` from ``request`` may proceed."""
        if not self.enabled:
            return AdmissionDecision(allowed=True, primary_key=primary_key)

        secondary_key = client_ip_from_request(self.proxy_count, request)
        return self.check_and_record(primary_key, secondary_key)

    def release(self, decision: AdmissionDecision) -> None:
        """Undo the cooldown entries written for ``decision``."""
        if not decision.recorded:
            return
        self._store.remove(decision.primary_key)
        if decision.secondary_key is not None:
            self._store.remove(decision.secondary_key)

    async def intercept(self, request: Request, call_next: Handler) -> Response:
        """Interceptor: enforce the cooldown around the rest of the chain.

        Expects the validated claim address on ``request.state.claim_address``.
        Any response other than 200, or an exception from ``call_next``,
        releases the cooldown before the outcome is passed on unchanged.
        """
        address: str = request.state.claim_address
        decision = self.admit(address, request)

        if not decision.allowed:
            retry_after = max(1, math.ceil(decision.retry_after_seconds or 0))
            logger.warning(
                "rate_limit.rejected",
                extra={
                    "address": decision.primary_key,
                    "client_ip": decision.secondary_key,
                    "retry_after_s": retry_after,
                },
            )
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"msg": decision.message},
                headers={"Retry-After": str(retry_after)},
            )

        try:
            response = await call_next(request)
        except BaseException:
            self._rollback(decision, reason="exception")
            raise

        if response.status_code != status.HTTP_200_OK:
            self._rollback(decision, reason=f"status_{response.status_code}")
            return response

        if decision.recorded:
            logger.info(
                "rate_limit.cooldown_started",
                extra={
                    "address": decision.primary_key,
                    "client_ip": decision.secondary_key,
                    "cooldown_s": self.cooldown_seconds,
                },
            )
        return response

    def _rollback(self, decision: AdmissionDecision, *, reason: str) -> None:
        if not decision.recorded:
            return
        self.release(decision)
        logger.info(
            "rate_limit.rolled_back",
            extra={
                "address": decision.primary_key,
                "client_ip": decision.secondary_key,
                "reason": reason,
            },
        )


_limiter: CooldownLimiter | None = None
_limiter_config: tuple[int, int] | None = None
_limiter_lock = threading.Lock()


def get_cooldown_limiter() -> CooldownLimiter:
    """Return the process-wide limiter, rebuilt if its configuration changed."""

    global _limiter, _limiter_config

    config = (settings.faucet.interval_minutes, settings.faucet.proxy_count)

    with _limiter_lock:
        if _limiter is None or _limiter_config != config:
            _limiter = CooldownLimiter(
                cooldown_seconds=config[0] * 60,
                proxy_count=config[1],
            )
            _limiter_config = config
        return _limiter
