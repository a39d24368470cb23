"""Request and result types passed between the submitter and the reporter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from gorb_minter.models.config import LAMPORTS_PER_SOL, MintKind


class MintOutcome(str, Enum):
    """Terminal outcome of one submission."""

    CONFIRMED = "confirmed"
    TIMED_OUT = "timed-out-pending-unknown"  # deadline hit, tx may still land
    FAILED = "failed"


class SubmitterState(str, Enum):
    """Lifecycle of a single submission."""

    IDLE = "idle"
    BALANCE_CHECKED = "balance-checked"
    SIGNER_GENERATED = "signer-generated"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    TIMED_OUT = "timed-out"
    FAILED = "failed"


@dataclass
class MintRequest:
    """Everything needed to build one create instruction."""

    kind: MintKind
    name: str
    uri: str
    symbol: str = ""
    description: str = ""
    royalty_bps: int = 0
    plugins: list = field(default_factory=list)  # extra mpl_core.PluginAuthorityPair


@dataclass
class BalanceCheck:
    """Payer balance at the start of a submission."""

    address: str
    lamports: int
    threshold_lamports: int

    @property
    def is_low(self) -> bool:
        return self.lamports < self.threshold_lamports

    @property
    def native(self) -> float:
        return self.lamports / LAMPORTS_PER_SOL


@dataclass
class MintResult:
    """Result of a create-asset or create-collection submission."""

    outcome: MintOutcome
    kind: MintKind
    address: str = ""
    name: str = ""
    symbol: str = ""
    description: str = ""
    uri: str = ""
    signature: str | None = None
    error: Exception | None = None
    balance: BalanceCheck | None = None
    duration_ms: int = 0

    @property
    def success(self) -> bool:
        return self.outcome is MintOutcome.CONFIRMED
