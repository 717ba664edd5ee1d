import re
from abc import ABC, abstractmethod
from decimal import Decimal

WEI_PER_ETHER = 10**18

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_valid_address(address: str) -> bool:
    """Check that ``address`` is a 0x-prefixed, 20-byte hex account address."""
    return bool(_ADDRESS_RE.match(address))


def ether_to_wei(amount: int | Decimal) -> int:
    return int(Decimal(amount) * WEI_PER_ETHER)


class AbstractTxBuilder(ABC):
    """Interface for clients that move funds from the faucet account."""

    @property
    @abstractmethod
    def sender(self) -> str:
        """Address of the funding account."""
        ...

    @abstractmethod
    async def transfer(self, to: str, value_wei: int) -> str:
        """Send ``value_wei`` to ``to``.

        Args:
            to: Recipient address.
            value_wei: Amount in wei.

        Returns:
            str: Transaction hash.

        Raises:
            ChainAppError: If the node rejects the transaction or is unreachable.
        """
        ...

    async def aclose(self) -> None:
        """Release any connections held by the client."""
        return None
