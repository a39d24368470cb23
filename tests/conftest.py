"""Shared fixtures for gorb_minter tests."""

from __future__ import annotations

import pytest
from solders.keypair import Keypair

from gorb_minter.chain.context import build_client_context
from gorb_minter.models.config import MinterConfig

from tests.factories import write_keypair_file
from tests.mocks import MockConnection

PROGRAM_ID = "BvoSmPBF6mBRxBMY9FPguw1zUoUg3xrc5CaWf7y5ACkc"
EXPLORER = "https://explorer.gorbchain.xyz"


def make_test_config(**overrides) -> MinterConfig:
    """Build a MinterConfig suitable for testing."""
    defaults = dict(
        rpc_url="https://rpc.example.test",
        program_id=PROGRAM_ID,
        explorer_url=EXPLORER,
        keypair_path="/nonexistent/id.json",
        submit_timeout=5.0,
    )
    defaults.update(overrides)
    return MinterConfig(**defaults)


@pytest.fixture
def payer() -> Keypair:
    return Keypair()


@pytest.fixture
def keypair_file(tmp_path, payer):
    path = tmp_path / "id.json"
    write_keypair_file(path, payer)
    return path


@pytest.fixture
def test_config(keypair_file):
    return make_test_config(keypair_path=str(keypair_file))


@pytest.fixture
def mock_connection():
    return MockConnection()


@pytest.fixture
def context(mock_connection, payer):
    return build_client_context(mock_connection, payer, PROGRAM_ID)
