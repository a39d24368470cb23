"""Solana-compatible chain integration components."""

from gorb_minter.chain.connection import open_connection
from gorb_minter.chain.context import ClientContext, build_client_context
from gorb_minter.chain.keys import generate_signer, load_keypair
from gorb_minter.chain.queries import ChainQueries, ProgramStatus
from gorb_minter.chain.submitter import CoreAssetSubmitter

__all__ = [
    "open_connection",
    "ClientContext", "build_client_context",
    "generate_signer", "load_keypair",
    "ChainQueries", "ProgramStatus",
    "CoreAssetSubmitter",
]
