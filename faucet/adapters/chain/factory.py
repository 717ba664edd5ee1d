"""Factory for the payout transaction client."""

from faucet.adapters.chain.base import AbstractTxBuilder, is_valid_address
from faucet.adapters.chain.jsonrpc import JsonRpcTxBuilder
from faucet.core.config import settings
from faucet.core.errors import ValidationAppError


def create_tx_builder() -> AbstractTxBuilder:
    """Build the transaction client from ``settings.chain``.

    Raises:
        ValidationAppError: If the funding account is missing or malformed.
    """
    sender = settings.chain.sender_address
    if not sender:
        raise ValidationAppError(
            code="chain_missing_sender",
            message="Payouts require CHAIN_SENDER_ADDRESS",
        )
    if not is_valid_address(sender):
        raise ValidationAppError(
            code="chain_invalid_sender",
            message=f"CHAIN_SENDER_ADDRESS is not a valid address: '{sender}'",
        )

    return JsonRpcTxBuilder(
        rpc_url=settings.chain.rpc_url,
        sender=sender,
        timeout_seconds=settings.chain.timeout_seconds,
    )
