"""Discord guild membership check."""

from __future__ import annotations

import logging

import httpx

from faucet.adapters.verification.base import AbstractMembershipVerifier

logger = logging.getLogger(__name__)

DISCORD_API_BASE = "https://discord.com/api"


class DiscordMembershipVerifier(AbstractMembershipVerifier):
    """Accept users who are members of a guild and have passed its screening.

    Uses the ``/users/@me/guilds/{guild_id}/member`` endpoint with the
    user's OAuth access token.
    """

    def __init__(
        self,
        guild_id: str | None,
        *,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._guild_id = guild_id
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    @property
    def enabled(self) -> bool:
        return bool(self._guild_id)

    async def is_member(self, access_token: str) -> bool:
        url = f"{DISCORD_API_BASE}/users/@me/guilds/{self._guild_id}/member"
        try:
            response = await self._client.get(url, headers={"Authorization": f"Bearer {access_token}"})
        except httpx.HTTPError as exc:
            logger.warning("membership.request_failed", extra={"error": str(exc)})
            return False

        if response.status_code != httpx.codes.OK:
            return False

        try:
            member = response.json()
        except ValueError as exc:
            logger.error("membership.bad_response", extra={"error": str(exc)})
            return False

        # Members still in the guild's screening step are pending
        return not member.get("pending", False)

    async def aclose(self) -> None:
        await self._client.aclose()
