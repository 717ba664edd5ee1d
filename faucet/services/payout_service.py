"""Payout service: the action protected by the claim cooldown."""

import asyncio
import logging

from faucet.adapters.chain.base import AbstractTxBuilder, ether_to_wei
from faucet.core.errors import ChainAppError

logger = logging.getLogger(__name__)


class PayoutService:
    """Send a fixed payout to an address within a bounded time."""

    def __init__(self, tx_builder: AbstractTxBuilder, *, payout_ether: int, timeout_seconds: float = 5.0) -> None:
        self._tx_builder = tx_builder
        self._value_wei = ether_to_wei(payout_ether)
        self._timeout_seconds = timeout_seconds

    @property
    def sender(self) -> str:
        return self._tx_builder.sender

    async def send(self, address: str) -> str:
        """Transfer the payout to ``address``.

        Args:
            address: Validated recipient address.

        Returns:
            Transaction hash.

        Raises:
            ChainAppError: If the transfer fails or exceeds the timeout.
        """
        try:
            tx_hash = await asyncio.wait_for(
                self._tx_builder.transfer(address, self._value_wei),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(
                "payout.timeout",
                extra={"address": address, "timeout_seconds": self._timeout_seconds},
            )
            raise ChainAppError(
                code="transfer_timeout",
                message=f"Transaction was not sent within {self._timeout_seconds:g}s",
                details={"timeout_seconds": self._timeout_seconds},
            ) from None
        except ChainAppError as exc:
            logger.error(
                "payout.failed",
                extra={"address": address, "error_code": exc.code, "error_msg": exc.message},
            )
            raise

        logger.info("payout.sent", extra={"tx_hash": tx_hash, "address": address})
        return tx_hash
