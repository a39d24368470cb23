"""Read-only chain queries used by the ``info`` command."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from solana.rpc.commitment import Commitment
from solders.pubkey import Pubkey

from gorb_minter.chain.connection import network_errors
from gorb_minter.interfaces.connection import ChainConnection

log = logging.getLogger(__name__)


@dataclass
class ProgramStatus:
    """What the RPC node knows about a program address."""

    program_id: str
    exists: bool
    executable: bool = False
    owner: str | None = None

    @property
    def deployed(self) -> bool:
        return self.exists and self.executable


class ChainQueries:
    """Balance and program lookups against one connection."""

    def __init__(self, connection: ChainConnection, rpc_url: str, commitment: str) -> None:
        self._conn = connection
        self._rpc_url = rpc_url
        self._commitment = Commitment(commitment)

    async def get_wallet_balance(self, address: Pubkey) -> int:
        """Native balance in lamports."""
        with network_errors(self._rpc_url, "balance query"):
            resp = await self._conn.get_balance(address, self._commitment)
        return resp.value

    async def get_program_status(self, program_id: Pubkey) -> ProgramStatus:
        with network_errors(self._rpc_url, "program lookup"):
            resp = await self._conn.get_account_info(program_id, self._commitment)
        account = resp.value
        if account is None:
            log.debug("Program account %s not found", program_id)
            return ProgramStatus(program_id=str(program_id), exists=False)
        return ProgramStatus(
            program_id=str(program_id),
            exists=True,
            executable=bool(account.executable),
            owner=str(account.owner),
        )
