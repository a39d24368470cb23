"""ChainConnection protocol - the subset of the async RPC client the minter uses."""

from __future__ import annotations

from typing import Any, Protocol

from solders.pubkey import Pubkey
from solders.signature import Signature


class ChainConnection(Protocol):
    """Async JSON-RPC client (satisfied by solana.rpc.async_api.AsyncClient)."""

    async def get_balance(self, pubkey: Pubkey, commitment: Any = None) -> Any:
        """Return a response whose ``value`` is the balance in lamports."""
        ...

    async def get_account_info(self, pubkey: Pubkey, commitment: Any = None) -> Any:
        """Return a response whose ``value`` is the account or None."""
        ...

    async def get_latest_blockhash(self, commitment: Any = None) -> Any:
        """Return a response whose ``value`` has ``blockhash`` and ``last_valid_block_height``."""
        ...

    async def send_transaction(self, txn: Any, opts: Any = None) -> Any:
        """Submit a signed transaction; ``value`` is its signature."""
        ...

    async def confirm_transaction(
        self,
        tx_sig: Signature,
        commitment: Any = None,
        sleep_seconds: float = 0.5,
        last_valid_block_height: int | None = None,
    ) -> Any:
        """Wait until the signature reaches ``commitment``."""
        ...

    async def close(self) -> None:
        ...
