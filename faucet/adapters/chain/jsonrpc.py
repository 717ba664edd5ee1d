"""JSON-RPC transaction client for Ethereum-compatible nodes."""

import itertools
from typing import Any

import httpx

from faucet.adapters.chain.base import AbstractTxBuilder
from faucet.core.errors import ChainAppError


class JsonRpcTxBuilder(AbstractTxBuilder):
    """Send payouts with ``eth_sendTransaction`` from a node-managed account.

    The node holds (and unlocks) the funding key; this client never sees it.
    """

    def __init__(
        self,
        rpc_url: str,
        sender: str,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the JSON-RPC client.

        Args:
            rpc_url: Node JSON-RPC endpoint.
            sender: Funding account address.
            timeout_seconds: HTTP timeout in seconds.
            client: Optional preconfigured httpx client (used by tests).
        """
        self._rpc_url = rpc_url
        self._sender = sender
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._ids = itertools.count(1)

    @property
    def sender(self) -> str:
        return self._sender

    async def _call(self, method: str, params: list[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        try:
            response = await self._client.post(self._rpc_url, json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ChainAppError(
                code="rpc_unavailable",
                message=f"RPC request failed: {exc}",
            ) from exc

        error = data.get("error") if isinstance(data, dict) else None
        if error:
            raise ChainAppError(
                code="rpc_error",
                message=str(error.get("message", "RPC error")),
                details={"rpc_code": error.get("code", 0)},
            )
        return data.get("result")

    async def transfer(self, to: str, value_wei: int) -> str:
        tx = {
            "from": self._sender,
            "to": to,
            "value": hex(value_wei),
        }
        tx_hash = await self._call("eth_sendTransaction", [tx])
        if not isinstance(tx_hash, str):
            raise ChainAppError(
                code="rpc_bad_response",
                message="Node returned no transaction hash",
            )
        return tx_hash

    async def aclose(self) -> None:
        await self._client.aclose()
