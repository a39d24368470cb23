"""MPL Core create submitter - builds, signs, sends and confirms one create tx."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from solana.rpc.commitment import Commitment
from solana.rpc.core import (
    RPCException,
    TransactionExpiredBlockheightExceededError,
    UnconfirmedTxError,
)
from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction

from gorb_minter.chain import mpl_core
from gorb_minter.chain.connection import network_errors
from gorb_minter.chain.context import MPL_CORE, ClientContext
from gorb_minter.chain.keys import generate_signer
from gorb_minter.errors import (
    ErrorKind,
    InsufficientFundsError,
    MintError,
    MintTimeoutError,
    NetworkError,
    ProgramNotFoundError,
    SubmissionError,
    classify_message,
)
from gorb_minter.models.config import MinterConfig, MintKind
from gorb_minter.models.records import (
    BalanceCheck,
    MintOutcome,
    MintRequest,
    MintResult,
    SubmitterState,
)

log = logging.getLogger(__name__)


def _rejection(exc: RPCException) -> MintError:
    """Turn a node-side rejection into a typed error.

    The RPC payload carries the simulation error and program logs when
    preflight fails; those are matched by substring since the node only
    reports them as text.
    """
    detail = exc.args[0] if exc.args else exc
    message = getattr(detail, "message", None) or str(detail)
    data = getattr(detail, "data", None)
    logs = list(getattr(data, "logs", None) or [])
    err = getattr(data, "err", None)

    kind = classify_message(" ".join([message, str(err or ""), *logs]))
    if kind is ErrorKind.INSUFFICIENT_FUNDS:
        return InsufficientFundsError(f"insufficient funds: {message}")
    if kind is ErrorKind.PROGRAM_NOT_FOUND:
        return ProgramNotFoundError(f"Attempt to load a program that does not exist: {message}")
    return SubmissionError(message, logs)


def _log_abandoned(task: asyncio.Task) -> None:
    """Record what an abandoned submission eventually did."""
    if task.cancelled():
        log.debug("Abandoned submission was cancelled at shutdown")
        return
    exc = task.exception()
    if exc is not None:
        log.debug("Abandoned submission failed after the deadline: %s", exc)
    else:
        log.info("Abandoned submission confirmed after the deadline: %s", task.result())


class _Pending:
    """Signature of an in-flight submission, known once the node accepts it."""

    signature: str | None = None


class CoreAssetSubmitter:
    """Creates MPL Core assets and collections through a ClientContext.

    One submission walks idle → balance-checked → signer-generated →
    submitted and ends confirmed, timed out or failed. A timeout only stops
    waiting: the send/confirm task is left running and the transaction may
    still land.
    """

    def __init__(
        self,
        context: ClientContext,
        cfg: MinterConfig,
        signer_factory: Callable[[], Keypair] = generate_signer,
    ) -> None:
        self._context = context
        self._cfg = cfg
        self._new_signer = signer_factory
        self._commitment = Commitment(cfg.commitment)
        self.state = SubmitterState.IDLE
        self.abandoned: asyncio.Task | None = None

    def _transition(self, state: SubmitterState) -> None:
        log.debug("Submitter state %s -> %s", self.state.value, state.value)
        self.state = state

    @property
    def program_id(self) -> Pubkey:
        return self._context.programs.get_public_key(MPL_CORE)

    async def check_balance(self) -> BalanceCheck:
        """Query the payer balance; a low balance only warns."""
        payer = self._context.identity.pubkey()
        try:
            with network_errors(self._cfg.rpc_url, "balance query"):
                resp = await self._context.connection.get_balance(payer, self._commitment)
        except RPCException as exc:
            raise NetworkError(f"balance query failed against {self._cfg.rpc_url}: {exc}") from exc

        check = BalanceCheck(
            address=str(payer),
            lamports=resp.value,
            threshold_lamports=self._cfg.low_balance_lamports,
        )
        log.info("Current balance: %s %s", check.native, self._cfg.native_symbol)
        if check.is_low:
            log.warning(
                "Low balance (%s %s < %s); make sure you have enough for transaction fees",
                check.native, self._cfg.native_symbol, self._cfg.low_balance_threshold,
            )
        return check

    def build_instruction(self, request: MintRequest, address: Pubkey) -> Instruction:
        """Create instruction for ``request`` at the freshly generated ``address``."""
        payer = self._context.identity.pubkey()
        plugins = list(request.plugins)
        if request.royalty_bps != 0:
            plugins.insert(0, mpl_core.royalties_plugin(request.royalty_bps, payer))

        if request.kind is MintKind.COLLECTION:
            return mpl_core.create_collection_v1(
                collection=address,
                payer=payer,
                name=request.name,
                uri=request.uri,
                plugins=plugins,
                program_id=self.program_id,
            )
        return mpl_core.create_v1(
            asset=address,
            payer=payer,
            name=request.name,
            uri=request.uri,
            plugins=plugins,
            program_id=self.program_id,
        )

    async def _send_and_confirm(
        self, instruction: Instruction, signer: Keypair, pending: _Pending,
    ) -> str:
        conn = self._context.connection
        identity = self._context.identity
        rpc_url = self._cfg.rpc_url

        with network_errors(rpc_url, "blockhash fetch"):
            latest = (await conn.get_latest_blockhash(self._commitment)).value

        message = MessageV0.try_compile(identity.pubkey(), [instruction], [], latest.blockhash)
        tx = VersionedTransaction(message, [identity, signer])
        opts = TxOpts(
            skip_preflight=self._cfg.skip_preflight,
            preflight_commitment=self._commitment,
            max_retries=self._cfg.max_retries,
        )

        try:
            with network_errors(rpc_url, "transaction submission"):
                resp = await conn.send_transaction(tx, opts=opts)
        except RPCException as exc:
            raise _rejection(exc) from exc

        signature = resp.value
        pending.signature = str(signature)
        log.info("Transaction sent: %s", signature)

        try:
            with network_errors(rpc_url, "confirmation"):
                conf = await conn.confirm_transaction(
                    signature,
                    self._commitment,
                    last_valid_block_height=latest.last_valid_block_height,
                )
        except (UnconfirmedTxError, TransactionExpiredBlockheightExceededError) as exc:
            raise SubmissionError(f"transaction {signature} was not confirmed: {exc}") from exc

        statuses = conf.value or []
        status = statuses[0] if statuses else None
        if status is not None and status.err is not None:
            raise SubmissionError(f"transaction {signature} failed on-chain: {status.err}")
        return str(signature)

    async def submit(self, request: MintRequest) -> MintResult:
        """Create one asset or collection, waiting at most ``submit_timeout``."""
        start = time.monotonic()
        self.state = SubmitterState.IDLE
        self.abandoned = None

        def _elapsed() -> int:
            return int((time.monotonic() - start) * 1000)

        try:
            balance = await self.check_balance()
        except MintError as exc:
            self._transition(SubmitterState.FAILED)
            return MintResult(
                outcome=MintOutcome.FAILED, kind=request.kind, name=request.name,
                uri=request.uri, error=exc, duration_ms=_elapsed(),
            )
        self._transition(SubmitterState.BALANCE_CHECKED)

        signer = self._new_signer()
        address = signer.pubkey()
        self._transition(SubmitterState.SIGNER_GENERATED)
        log.info("Generated %s address: %s", request.kind.value, address)

        result = MintResult(
            outcome=MintOutcome.FAILED,
            kind=request.kind,
            address=str(address),
            name=request.name,
            symbol=request.symbol,
            description=request.description,
            uri=request.uri,
            balance=balance,
        )

        try:
            instruction = self.build_instruction(request, address)
        except ValueError as exc:
            self._transition(SubmitterState.FAILED)
            result.error = SubmissionError(f"invalid {request.kind.value} request: {exc}")
            result.duration_ms = _elapsed()
            return result

        pending = _Pending()
        task = asyncio.ensure_future(self._send_and_confirm(instruction, signer, pending))
        self._transition(SubmitterState.SUBMITTED)
        log.info("Creating %s '%s' with program %s", request.kind.value, request.name, self.program_id)

        # asyncio.wait does not cancel on timeout; the task keeps running.
        done, _ = await asyncio.wait({task}, timeout=self._cfg.submit_timeout)
        result.duration_ms = _elapsed()

        if not done:
            task.add_done_callback(_log_abandoned)
            self.abandoned = task
            self._transition(SubmitterState.TIMED_OUT)
            result.outcome = MintOutcome.TIMED_OUT
            result.signature = pending.signature
            result.error = MintTimeoutError(self._cfg.submit_timeout, pending.signature)
            log.warning(
                "No confirmation within %ss for %s (signature=%s); outcome unknown",
                self._cfg.submit_timeout, address, pending.signature or "?",
            )
            return result

        exc = task.exception()
        if exc is not None:
            self._transition(SubmitterState.FAILED)
            result.signature = pending.signature
            result.error = exc
            log.error("Create %s failed: %s", request.kind.value, exc)
            return result

        self._transition(SubmitterState.CONFIRMED)
        result.outcome = MintOutcome.CONFIRMED
        result.signature = task.result()
        log.info(
            "Create %s confirmed in %d ms (tx=%s)",
            request.kind.value, result.duration_ms, result.signature,
        )
        return result
