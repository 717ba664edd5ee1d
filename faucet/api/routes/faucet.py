from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from faucet.adapters.chain.base import AbstractTxBuilder, is_valid_address
from faucet.adapters.chain.factory import create_tx_builder
from faucet.adapters.verification.base import AbstractCaptchaVerifier, AbstractMembershipVerifier
from faucet.adapters.verification.discord import DiscordMembershipVerifier
from faucet.adapters.verification.hcaptcha import HCaptchaVerifier
from faucet.core.client_ip import FORWARDED_FOR_HEADER, REAL_IP_HEADER, client_ip_from_request
from faucet.core.config import settings
from faucet.core.errors import ValidationAppError
from faucet.core.guards import CaptchaGuard, MembershipGuard
from faucet.core.interceptors import build_chain
from faucet.core.rate_limit import CooldownLimiter, get_cooldown_limiter
from faucet.schemas.claim import ClaimRequest, ClaimResponse, InfoResponse
from faucet.services.payout_service import PayoutService

router = APIRouter(prefix="/api", tags=["Faucet"])


@lru_cache
def get_tx_builder() -> AbstractTxBuilder:
    return create_tx_builder()


def get_payout_service(
    tx_builder: Annotated[AbstractTxBuilder, Depends(get_tx_builder)],
) -> PayoutService:
    return PayoutService(
        tx_builder,
        payout_ether=settings.faucet.payout,
        timeout_seconds=settings.faucet.claim_timeout_seconds,
    )


@lru_cache
def get_captcha_verifier() -> AbstractCaptchaVerifier:
    return HCaptchaVerifier(settings.faucet.hcaptcha_secret, settings.faucet.hcaptcha_site_key)


@lru_cache
def get_membership_verifier() -> AbstractMembershipVerifier:
    return DiscordMembershipVerifier(settings.faucet.discord_guild_id)


async def close_clients() -> None:
    """Close the cached outbound clients and drop them from the cache."""
    for provider in (get_tx_builder, get_captcha_verifier, get_membership_verifier):
        if provider.cache_info().currsize:
            await provider().aclose()
        provider.cache_clear()


def read_address(payload: ClaimRequest) -> str:
    """Return the claimed address or raise if it is not a valid account address."""
    if not is_valid_address(payload.address):
        raise ValidationAppError(
            code="invalid_address",
            message="invalid address",
            details={"field": "address"},
        )
    return payload.address


@router.post(
    "/claim",
    response_model=ClaimResponse,
    responses={
        401: {"model": ClaimResponse, "description": "Discord membership required"},
        429: {"model": ClaimResponse, "description": "Cooldown active or captcha failed"},
    },
)
async def claim(
    request: Request,
    payload: ClaimRequest,
    limiter: Annotated[CooldownLimiter, Depends(get_cooldown_limiter)],
    payout: Annotated[PayoutService, Depends(get_payout_service)],
    captcha: Annotated[AbstractCaptchaVerifier, Depends(get_captcha_verifier)],
    membership: Annotated[AbstractMembershipVerifier, Depends(get_membership_verifier)],
) -> Response:
    """Send the configured payout to an address.

    The request runs through the cooldown limiter, the captcha check and
    the membership check before the transfer. A failed or timed-out
    transfer does not start a cooldown.

    Raises:
        ValidationAppError: 400 if the address is invalid (before any cooldown check).
        ChainAppError: 500 if the transfer fails.
    """
    address = read_address(payload)
    request.state.claim_address = address
    request.state.client_ip = client_ip_from_request(limiter.proxy_count, request)

    async def send_payout(_: Request) -> Response:
        tx_hash = await payout.send(address)
        return JSONResponse(content=ClaimResponse(msg=f"Txhash: {tx_hash}").model_dump())

    chain = build_chain(
        [limiter.intercept, CaptchaGuard(captcha), MembershipGuard(membership)],
        send_payout,
    )
    return await chain(request)


@router.get("/info", response_model=InfoResponse)
async def info(
    request: Request,
    payout: Annotated[PayoutService, Depends(get_payout_service)],
) -> InfoResponse:
    """Faucet parameters and the caller's address as seen by the server."""
    return InfoResponse(
        account=payout.sender,
        network=settings.faucet.network,
        payout=str(settings.faucet.payout),
        symbol=settings.faucet.symbol,
        hcaptcha_sitekey=settings.faucet.hcaptcha_site_key,
        discord_client_id=settings.faucet.discord_client_id,
        remote_addr=request.client.host if request.client else None,
        forward=request.headers.get(FORWARDED_FOR_HEADER),
        real_ip=request.headers.get(REAL_IP_HEADER),
        client_ip=client_ip_from_request(settings.faucet.proxy_count, request),
    )
