"""Chain adapter layer - sends payout transactions."""

from faucet.adapters.chain.base import AbstractTxBuilder, ether_to_wei
from faucet.adapters.chain.factory import create_tx_builder
from faucet.adapters.chain.jsonrpc import JsonRpcTxBuilder

__all__ = [
    "AbstractTxBuilder",
    "JsonRpcTxBuilder",
    "create_tx_builder",
    "ether_to_wei",
]
