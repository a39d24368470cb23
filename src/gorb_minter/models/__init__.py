"""Data models for gorb_minter."""

from gorb_minter.models.config import (
    LAMPORTS_PER_SOL,
    AssetMetadata,
    CollectionMetadata,
    MinterConfig,
    MintKind,
)
from gorb_minter.models.records import (
    BalanceCheck,
    MintOutcome,
    MintRequest,
    MintResult,
    SubmitterState,
)

__all__ = [
    "LAMPORTS_PER_SOL",
    "AssetMetadata", "CollectionMetadata", "MinterConfig", "MintKind",
    "BalanceCheck", "MintOutcome", "MintRequest", "MintResult", "SubmitterState",
]
