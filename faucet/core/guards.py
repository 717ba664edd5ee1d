"""Claim interceptors backed by third-party verification.

Each guard passes the request through untouched when its verifier is not
configured.
"""

from __future__ import annotations

import logging

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

from faucet.adapters.verification.base import AbstractCaptchaVerifier, AbstractMembershipVerifier
from faucet.core.interceptors import Handler

logger = logging.getLogger(__name__)

CAPTCHA_HEADER = "h-captcha-response"
TOKEN_COOKIE = "token"

CAPTCHA_FAILED_MESSAGE = "Captcha verification failed, please try again"
LOGIN_REQUIRED_MESSAGE = "Invalid login. Please authenticate with discord first"


class CaptchaGuard:
    def __init__(self, verifier: AbstractCaptchaVerifier) -> None:
        self.verifier = verifier

    async def __call__(self, request: Request, call_next: Handler) -> Response:
        if not self.verifier.enabled:
            return await call_next(request)

        client_ip = getattr(request.state, "client_ip", None)
        if not await self.verifier.verify(request.headers.get(CAPTCHA_HEADER), client_ip):
            logger.info("captcha.failed", extra={"client_ip": client_ip})
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"msg": CAPTCHA_FAILED_MESSAGE},
            )

        return await call_next(request)


class MembershipGuard:
    def __init__(self, verifier: AbstractMembershipVerifier) -> None:
        self.verifier = verifier

    async def __call__(self, request: Request, call_next: Handler) -> Response:
        if not self.verifier.enabled:
            return await call_next(request)

        token = request.cookies.get(TOKEN_COOKIE)
        if not token or not await self.verifier.is_member(token):
            logger.info("membership.denied", extra={"token_present": bool(token)})
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"msg": LOGIN_REQUIRED_MESSAGE},
            )

        return await call_next(request)
