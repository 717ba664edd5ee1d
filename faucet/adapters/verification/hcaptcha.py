"""hCaptcha siteverify client."""

from __future__ import annotations

import logging

import httpx

from faucet.adapters.verification.base import AbstractCaptchaVerifier

logger = logging.getLogger(__name__)

SITEVERIFY_URL = "https://api.hcaptcha.com/siteverify"


class HCaptchaVerifier(AbstractCaptchaVerifier):
    def __init__(
        self,
        secret: str | None,
        site_key: str | None = None,
        *,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._secret = secret
        self._site_key = site_key
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    @property
    def enabled(self) -> bool:
        return bool(self._secret)

    async def verify(self, response_token: str | None, remote_ip: str | None = None) -> bool:
        if not response_token:
            return False

        form = {"secret": self._secret, "response": response_token}
        if self._site_key:
            form["sitekey"] = self._site_key
        if remote_ip:
            form["remoteip"] = remote_ip

        try:
            response = await self._client.post(SITEVERIFY_URL, data=form)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("captcha.verify_failed", extra={"error": str(exc)})
            return False

        success = bool(body.get("success"))
        if not success:
            logger.info("captcha.rejected", extra={"error_codes": body.get("error-codes", [])})
        return success

    async def aclose(self) -> None:
        await self._client.aclose()
