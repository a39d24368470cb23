"""Mint orchestration - wires credentials, connection, context and submitter."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from solders.keypair import Keypair

from gorb_minter.chain.connection import open_connection
from gorb_minter.chain.context import ClientContext, build_client_context
from gorb_minter.chain.keys import load_keypair
from gorb_minter.chain.submitter import CoreAssetSubmitter
from gorb_minter.errors import MintError
from gorb_minter.interfaces.connection import ChainConnection
from gorb_minter.interfaces.submitter import AssetSubmitter
from gorb_minter.models.config import MinterConfig, MintKind
from gorb_minter.models.records import MintOutcome, MintRequest, MintResult

log = logging.getLogger(__name__)


class MintDeployer:
    """Runs one create-asset or create-collection flow end to end.

    Credentials are loaded before any connection is opened, so a bad keypair
    file never touches the network. Expected failures come back as a
    ``failed`` MintResult rather than an exception.
    """

    def __init__(
        self,
        cfg: MinterConfig,
        connection_factory: Callable[[MinterConfig], ChainConnection] = open_connection,
        submitter_factory: Callable[[ClientContext, MinterConfig], AssetSubmitter] = CoreAssetSubmitter,
        keypair_loader: Callable[[str], Keypair] = load_keypair,
    ) -> None:
        self._cfg = cfg
        self._connect = connection_factory
        self._make_submitter = submitter_factory
        self._load_keypair = keypair_loader

    def request_for(self, kind: MintKind) -> MintRequest:
        meta = self._cfg.collection if kind is MintKind.COLLECTION else self._cfg.asset
        return MintRequest(
            kind=kind,
            name=meta.name,
            uri=meta.uri,
            symbol=meta.symbol,
            description=meta.description,
            royalty_bps=meta.royalty_bps,
        )

    async def run(self, kind: MintKind) -> MintResult:
        cfg = self._cfg
        request = self.request_for(kind)
        log.info("Starting %s creation on %s", kind.value, cfg.network_name)
        log.info("  RPC: %s", cfg.rpc_url)
        log.info("  Program: %s", cfg.program_id)
        log.info("  Metadata URI: %s", request.uri)

        try:
            identity = self._load_keypair(cfg.keypair_path)
        except MintError as exc:
            log.error("%s", exc)
            return MintResult(
                outcome=MintOutcome.FAILED, kind=kind, name=request.name,
                symbol=request.symbol, uri=request.uri, error=exc,
            )
        log.info("  Payer: %s", identity.pubkey())

        connection = self._connect(cfg)
        try:
            context = build_client_context(
                connection, identity, cfg.program_id, strict=cfg.strict_program_check,
            )
            submitter = self._make_submitter(context, cfg)
            result = await submitter.submit(request)
            await self._drain(getattr(submitter, "abandoned", None))
            return result
        except MintError as exc:
            log.error("%s", exc)
            return MintResult(
                outcome=MintOutcome.FAILED, kind=kind, name=request.name,
                symbol=request.symbol, uri=request.uri, error=exc,
            )
        finally:
            await connection.close()

    async def _drain(self, pending: asyncio.Task | None) -> None:
        """Give a timed-out submission up to ``drain_timeout`` before the connection closes."""
        if pending is None or pending.done():
            return
        timeout = self._cfg.drain_timeout
        log.info("Waiting up to %gs for the pending submission before closing", timeout)
        done, _ = await asyncio.wait({pending}, timeout=timeout)
        if not done:
            log.warning(
                "Submission still pending after %gs; closing the connection, "
                "check the transaction on the explorer", timeout,
            )


async def deploy_nft(cfg: MinterConfig) -> MintResult:
    """Create a single MPL Core asset from ``cfg.asset``."""
    return await MintDeployer(cfg).run(MintKind.ASSET)


async def create_collection(cfg: MinterConfig) -> MintResult:
    """Create an MPL Core collection from ``cfg.collection``."""
    return await MintDeployer(cfg).run(MintKind.COLLECTION)
