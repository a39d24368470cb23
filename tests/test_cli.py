"""CLI dispatch and exit codes."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from click.testing import CliRunner
from solders.pubkey import Pubkey

from gorb_minter import cli as cli_module
from gorb_minter.cli import cli
from gorb_minter.models.config import MintKind
from gorb_minter.models.records import MintOutcome
from tests.factories import make_result
from tests.mocks import MockConnection


class FakeDeployer:
    """Stands in for MintDeployer; records which path ran."""

    runs: list[MintKind] = []
    outcome = MintOutcome.CONFIRMED

    def __init__(self, cfg) -> None:
        self.cfg = cfg

    async def run(self, kind: MintKind):
        FakeDeployer.runs.append(kind)
        return make_result(outcome=FakeDeployer.outcome, kind=kind)


@pytest.fixture(autouse=True)
def fake_deployer(monkeypatch):
    for var in ("KEYPAIR", "RPC_URL", "WS_URL", "PROGRAM_ID", "EXPLORER_URL", "TIMEOUT"):
        monkeypatch.delenv(f"GORB_MINTER_{var}", raising=False)
    FakeDeployer.runs = []
    FakeDeployer.outcome = MintOutcome.CONFIRMED
    monkeypatch.setattr(cli_module, "MintDeployer", FakeDeployer)
    return FakeDeployer


def test_default_mints_single_asset():
    result = CliRunner().invoke(cli, [])

    assert result.exit_code == 0, result.output
    assert FakeDeployer.runs == [MintKind.ASSET]
    assert "🚀 Starting NFT deployment" in result.output
    assert "https://explorer.gorbchain.xyz/address/ABC123" in result.output
    assert "https://explorer.gorbchain.xyz/tx/XYZ789" in result.output


def test_collection_flag_mints_collection_only():
    result = CliRunner().invoke(cli, ["--collection"])

    assert result.exit_code == 0, result.output
    assert FakeDeployer.runs == [MintKind.COLLECTION]
    assert "🏛️ Creating NFT Collection" in result.output
    assert "📍 Collection Address: ABC123" in result.output


@pytest.mark.parametrize(
    "outcome, code",
    [(MintOutcome.FAILED, 1), (MintOutcome.TIMED_OUT, 2)],
)
def test_exit_codes(outcome, code):
    FakeDeployer.outcome = outcome

    result = CliRunner().invoke(cli, [])

    assert result.exit_code == code


def test_keypair_option_overrides_config():
    result = CliRunner().invoke(cli, ["-k", "/tmp/other.json", "status"])

    assert result.exit_code == 0, result.output
    assert "Keypair:    /tmp/other.json" in result.output
    assert FakeDeployer.runs == []


def test_status_shows_endpoints():
    result = CliRunner().invoke(cli, ["status"])

    assert "RPC URL:    https://rpc.gorbchain.xyz" in result.output
    assert "WS URL:     wss://rpc.gorbchain.xyz/ws/" in result.output
    assert "Program:    BvoSmPBF6mBRxBMY9FPguw1zUoUg3xrc5CaWf7y5ACkc" in result.output


def test_info_with_missing_keypair_exits_with_hint(tmp_path):
    result = CliRunner().invoke(cli, ["-k", str(tmp_path / "missing.json"), "info"])

    assert result.exit_code == 1
    assert "Make sure your keypair file exists" in result.output


def test_info_with_invalid_program_id_exits_with_hint(monkeypatch, keypair_file):
    monkeypatch.setenv("GORB_MINTER_PROGRAM_ID", "not-a-program-id")
    monkeypatch.setattr(cli_module, "open_connection", lambda cfg: MockConnection())

    result = CliRunner().invoke(cli, ["-k", str(keypair_file), "info"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, ValueError)
    assert "invalid program id 'not-a-program-id'" in result.output
    assert "Make sure your MPL Core program is deployed" in result.output


def _info(monkeypatch, keypair_file, conn):
    monkeypatch.setattr(cli_module, "open_connection", lambda cfg: conn)
    return CliRunner().invoke(cli, ["-k", str(keypair_file), "info"])


def test_info_reports_deployed_program(monkeypatch, keypair_file, payer):
    owner = Pubkey.new_unique()
    conn = MockConnection(
        balance=2_500_000_000,
        program_account=SimpleNamespace(executable=True, owner=owner),
    )

    result = _info(monkeypatch, keypair_file, conn)

    assert result.exit_code == 0, result.output
    assert f"Address:    {payer.pubkey()}" in result.output
    assert "Balance:    2.500000000 SOL" in result.output
    assert "⚠️ below" not in result.output
    assert "Program:    DEPLOYED (BvoSmPBF6mBRxBMY9FPguw1zUoUg3xrc5CaWf7y5ACkc)" in result.output
    assert f"  Owner:    {owner}" in result.output
    assert conn.closed


def test_info_flags_low_balance_and_non_executable_account(monkeypatch, keypair_file):
    conn = MockConnection(
        balance=50_000_000,
        program_account=SimpleNamespace(executable=False, owner=Pubkey.new_unique()),
    )

    result = _info(monkeypatch, keypair_file, conn)

    assert result.exit_code == 0, result.output
    assert "Balance:    0.050000000 SOL" in result.output
    assert "⚠️ below 0.1 SOL" in result.output
    assert "Program:    NOT EXECUTABLE" in result.output


def test_info_reports_missing_program(monkeypatch, keypair_file):
    result = _info(monkeypatch, keypair_file, MockConnection(program_account=None))

    assert result.exit_code == 0, result.output
    assert "Program:    NOT FOUND" in result.output
    assert "solana program show BvoSmPBF6mBRxBMY9FPguw1zUoUg3xrc5CaWf7y5ACkc" in result.output
