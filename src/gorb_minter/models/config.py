"""Configuration models for the minter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

LAMPORTS_PER_SOL = 1_000_000_000


class MintKind(str, Enum):
    """What the run creates on-chain."""

    ASSET = "asset"
    COLLECTION = "collection"


@dataclass
class AssetMetadata:
    """Fields used when creating a single asset."""

    name: str = "My first nft Gorbchain"
    symbol: str = "GCMPL"
    description: str = "An NFT created using custom MPL Core program on Gorbchain"
    uri: str = "https://arweave.net/placeholder-metadata-uri"
    royalty_bps: int = 500  # 5%


@dataclass
class CollectionMetadata:
    """Fields used when creating a collection."""

    name: str = "GCMPL Collection"
    symbol: str = "GCMPL"
    description: str = "A collection of NFTs using custom MPL Core program on Gorbchain"
    uri: str = "https://arweave.net/placeholder-collection-metadata"
    royalty_bps: int = 500


@dataclass
class MinterConfig:
    """Complete minter configuration."""

    # Network
    network_name: str = "Gorbchain"
    rpc_url: str = "https://rpc.gorbchain.xyz"
    ws_url: str = "wss://rpc.gorbchain.xyz/ws/"
    commitment: str = "confirmed"
    explorer_url: str = "https://explorer.gorbchain.xyz"
    native_symbol: str = "SOL"
    rpc_timeout: float = 30.0  # seconds per HTTP request

    # Program
    program_id: str = "BvoSmPBF6mBRxBMY9FPguw1zUoUg3xrc5CaWf7y5ACkc"
    strict_program_check: bool = False

    # Wallet
    keypair_path: str = "~/.config/solana/id.json"

    # Submission
    submit_timeout: float = 60.0  # seconds
    max_retries: int = 3
    skip_preflight: bool = False
    low_balance_threshold: float = 0.1  # native units
    drain_timeout: float = 30.0  # seconds to wait on a timed-out submission before exit

    # Logging
    log_level: str = "info"

    asset: AssetMetadata = field(default_factory=AssetMetadata)
    collection: CollectionMetadata = field(default_factory=CollectionMetadata)

    @property
    def low_balance_lamports(self) -> int:
        return int(self.low_balance_threshold * LAMPORTS_PER_SOL)
