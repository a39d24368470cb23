"""CoreAssetSubmitter state machine, timeout race and error typing."""

from __future__ import annotations

import asyncio
import logging
from types import SimpleNamespace

import httpx
from solana.rpc.core import RPCException

from gorb_minter.chain.context import build_client_context
from gorb_minter.chain.submitter import CoreAssetSubmitter
from gorb_minter.errors import (
    InsufficientFundsError,
    MintTimeoutError,
    NetworkError,
    ProgramNotFoundError,
    SubmissionError,
)
from gorb_minter.models.config import MintKind
from gorb_minter.models.records import MintOutcome, SubmitterState
from tests.conftest import PROGRAM_ID, make_test_config
from tests.factories import make_request
from tests.mocks import MockConnection


def _submitter(conn, payer, **cfg_overrides):
    cfg = make_test_config(**cfg_overrides)
    ctx = build_client_context(conn, payer, PROGRAM_ID)
    return CoreAssetSubmitter(ctx, cfg)


async def test_confirmed_asset(mock_connection, payer):
    submitter = _submitter(mock_connection, payer)

    result = await submitter.submit(make_request())

    assert result.outcome is MintOutcome.CONFIRMED
    assert result.success
    assert submitter.state is SubmitterState.CONFIRMED
    assert result.signature == str(mock_connection.confirmed[0])
    assert mock_connection.last_instruction_data[0] == 0  # CreateV1

    txn, opts = mock_connection.sent[0]
    assert opts.max_retries == 3
    assert opts.skip_preflight is False
    # Payer and the generated asset both signed
    signers = txn.message.account_keys[:txn.message.header.num_required_signatures]
    assert payer.pubkey() in signers
    assert str(signers[1]) == result.address


async def test_collection_uses_collection_instruction(mock_connection, payer):
    submitter = _submitter(mock_connection, payer)

    result = await submitter.submit(make_request(kind=MintKind.COLLECTION, name="Coll"))

    assert result.outcome is MintOutcome.CONFIRMED
    assert result.kind is MintKind.COLLECTION
    assert mock_connection.last_instruction_data[0] == 1  # CreateCollectionV1


async def test_low_balance_warns_and_proceeds(payer, caplog):
    conn = MockConnection(balance=50_000_000)  # 0.05 < 0.1
    submitter = _submitter(conn, payer)

    with caplog.at_level(logging.WARNING, logger="gorb_minter.chain.submitter"):
        result = await submitter.submit(make_request())

    assert any("Low balance" in r.getMessage() for r in caplog.records)
    assert result.balance.is_low
    assert result.outcome is MintOutcome.CONFIRMED
    assert len(conn.sent) == 1


async def test_fresh_signer_per_submission(mock_connection, payer):
    submitter = _submitter(mock_connection, payer)

    first = await submitter.submit(make_request())
    second = await submitter.submit(make_request())

    assert first.address != second.address


async def test_timeout_reports_pending_unknown_and_does_not_cancel(payer, caplog):
    conn = MockConnection(confirm_delay=0.3)
    submitter = _submitter(conn, payer, submit_timeout=0.05)

    result = await submitter.submit(make_request())

    assert result.outcome is MintOutcome.TIMED_OUT
    assert submitter.state is SubmitterState.TIMED_OUT
    assert isinstance(result.error, MintTimeoutError)
    # The node had already accepted the transaction
    assert result.signature is not None
    assert result.error.signature == result.signature
    assert conn.confirmed == []

    # The abandoned submission keeps running and eventually confirms
    with caplog.at_level(logging.INFO, logger="gorb_minter.chain.submitter"):
        await asyncio.sleep(0.5)
    assert len(conn.confirmed) == 1
    assert any("after the deadline" in r.getMessage() for r in caplog.records)


async def test_insufficient_funds_rejection(payer):
    conn = MockConnection(send_error=RPCException(
        "Transaction simulation failed: Attempt to debit an account but found "
        "no record of a prior credit."
    ))
    submitter = _submitter(conn, payer)

    result = await submitter.submit(make_request())

    assert result.outcome is MintOutcome.FAILED
    assert submitter.state is SubmitterState.FAILED
    assert isinstance(result.error, InsufficientFundsError)


async def test_program_not_found_rejection(payer):
    conn = MockConnection(send_error=RPCException(
        "Transaction simulation failed: Attempt to load a program that does not exist"
    ))

    result = await _submitter(conn, payer).submit(make_request())

    assert isinstance(result.error, ProgramNotFoundError)


async def test_rejection_keeps_program_logs(payer):
    detail = SimpleNamespace(
        message="Transaction simulation failed: Error processing Instruction 0",
        data=SimpleNamespace(logs=["Program log: Error: Invalid authority"], err=None),
    )
    conn = MockConnection(send_error=RPCException(detail))

    result = await _submitter(conn, payer).submit(make_request())

    assert isinstance(result.error, SubmissionError)
    assert result.error.logs == ["Program log: Error: Invalid authority"]


async def test_transport_error_is_network_error(payer):
    conn = MockConnection(send_error=httpx.ConnectError("connection refused"))

    result = await _submitter(conn, payer).submit(make_request())

    assert isinstance(result.error, NetworkError)


async def test_balance_failure_aborts_before_signing(payer):
    conn = MockConnection(balance_error=httpx.ConnectError("connection refused"))
    submitter = _submitter(conn, payer)

    result = await submitter.submit(make_request())

    assert result.outcome is MintOutcome.FAILED
    assert isinstance(result.error, NetworkError)
    assert result.address == ""
    assert conn.sent == []


async def test_on_chain_error_fails(payer):
    conn = MockConnection(confirm_err="InstructionError(0, Custom(1))")

    result = await _submitter(conn, payer).submit(make_request())

    assert result.outcome is MintOutcome.FAILED
    assert isinstance(result.error, SubmissionError)
    assert result.signature is not None


async def test_invalid_royalty_fails_without_sending(mock_connection, payer):
    result = await _submitter(mock_connection, payer).submit(make_request(royalty_bps=20_000))

    assert result.outcome is MintOutcome.FAILED
    assert isinstance(result.error, SubmissionError)
    assert mock_connection.sent == []


async def test_negative_royalty_is_rejected(mock_connection, payer):
    submitter = _submitter(mock_connection, payer)

    result = await submitter.submit(make_request(royalty_bps=-1))

    assert result.outcome is MintOutcome.FAILED
    assert isinstance(result.error, SubmissionError)
    assert "basis_points" in str(result.error)
    assert submitter.abandoned is None
    assert mock_connection.sent == []


async def test_result_carries_description(mock_connection, payer):
    result = await _submitter(mock_connection, payer).submit(
        make_request(description="first drop")
    )

    assert result.description == "first drop"
