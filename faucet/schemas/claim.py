"""Pydantic schemas for the faucet API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ClaimRequest(BaseModel):
    """Body of ``POST /api/claim``. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    address: str = Field(..., description="Recipient account address (0x-prefixed hex).")


class ClaimResponse(BaseModel):
    msg: str = Field(..., description="Transaction hash on success, reason otherwise.")


class InfoResponse(BaseModel):
    """Public faucet parameters plus what the server sees of the caller."""

    account: str = Field(..., description="Funding account address.")
    network: str
    payout: str = Field(..., description="Ether paid per claim.")
    symbol: str
    hcaptcha_sitekey: str | None = None
    discord_client_id: str | None = None
    remote_addr: str | None = Field(None, description="Transport peer address.")
    forward: str | None = Field(None, description="Raw X-Forwarded-For header.")
    real_ip: str | None = Field(None, description="Raw X-Real-Ip header.")
    client_ip: str = Field(..., description="Client IP as resolved for rate limiting.")
