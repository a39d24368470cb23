"""MPL Core instruction builders.

Only the two create instructions are implemented. Data is Borsh encoded:
a one-byte instruction discriminator followed by the instruction args.
Omitted optional accounts are passed as the program id itself, which is
how the program recognises "not provided".
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID

MPL_CORE_PROGRAM_ID = Pubkey.from_string("CoREENxT6tW1HoK8ypY1SxRMZTcVPm7R94rH4PZNhX7d")

MAX_BASIS_POINTS = 10_000


class Discriminator(IntEnum):
    CREATE_V1 = 0
    CREATE_COLLECTION_V1 = 1


class DataState(IntEnum):
    ACCOUNT_STATE = 0
    LEDGER_STATE = 1


class PluginType(IntEnum):
    ROYALTIES = 0


class AuthorityType(IntEnum):
    NONE = 0
    OWNER = 1
    UPDATE_AUTHORITY = 2
    ADDRESS = 3


# ── Borsh primitives ────────────────────────────────────────


def _u8(v: int) -> bytes:
    return struct.pack("<B", v)


def _u16(v: int) -> bytes:
    return struct.pack("<H", v)


def _u32(v: int) -> bytes:
    return struct.pack("<I", v)


def _string(s: str) -> bytes:
    encoded = s.encode("utf-8")
    return _u32(len(encoded)) + encoded


def _vec(items: list[bytes]) -> bytes:
    return _u32(len(items)) + b"".join(items)


def _option(payload: bytes | None) -> bytes:
    if payload is None:
        return _u8(0)
    return _u8(1) + payload


# ── Plugins ─────────────────────────────────────────────────


@dataclass
class Creator:
    address: Pubkey
    percentage: int

    def encode(self) -> bytes:
        return bytes(self.address) + _u8(self.percentage)


@dataclass
class Royalties:
    """Royalties plugin with an empty rule set."""

    basis_points: int
    creators: list[Creator] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 0 <= self.basis_points <= MAX_BASIS_POINTS:
            raise ValueError(f"basis_points must be within 0..{MAX_BASIS_POINTS}")
        if self.creators and sum(c.percentage for c in self.creators) != 100:
            raise ValueError("creator percentages must add up to 100")

    def encode(self) -> bytes:
        return (
            _u8(PluginType.ROYALTIES)
            + _u16(self.basis_points)
            + _vec([c.encode() for c in self.creators])
            + _u8(0)  # RuleSet::None
        )


@dataclass
class PluginAuthority:
    kind: AuthorityType
    address: Pubkey | None = None

    def encode(self) -> bytes:
        if self.kind is AuthorityType.ADDRESS:
            if self.address is None:
                raise ValueError("address authority requires an address")
            return _u8(self.kind) + bytes(self.address)
        return _u8(self.kind)


@dataclass
class PluginAuthorityPair:
    plugin: Royalties
    authority: PluginAuthority | None = None  # None → program default

    def encode(self) -> bytes:
        auth = self.authority.encode() if self.authority is not None else None
        return self.plugin.encode() + _option(auth)


def royalties_plugin(basis_points: int, creator: Pubkey) -> PluginAuthorityPair:
    """Royalties paid entirely to a single creator."""
    return PluginAuthorityPair(
        plugin=Royalties(basis_points, [Creator(creator, 100)]),
    )


def _plugins(plugins: list[PluginAuthorityPair] | None) -> bytes:
    if plugins is None:
        return _option(None)
    return _option(_vec([p.encode() for p in plugins]))


# ── Instructions ────────────────────────────────────────────


def _optional(pubkey: Pubkey | None, program_id: Pubkey, *, writable: bool = False,
              signer: bool = False) -> AccountMeta:
    if pubkey is None:
        return AccountMeta(program_id, is_signer=False, is_writable=False)
    return AccountMeta(pubkey, is_signer=signer, is_writable=writable)


def create_v1(
    *,
    asset: Pubkey,
    payer: Pubkey,
    name: str,
    uri: str,
    plugins: list[PluginAuthorityPair] | None = None,
    collection: Pubkey | None = None,
    authority: Pubkey | None = None,
    owner: Pubkey | None = None,
    update_authority: Pubkey | None = None,
    program_id: Pubkey = MPL_CORE_PROGRAM_ID,
) -> Instruction:
    """Build a CreateV1 instruction for a new asset account.

    Both ``asset`` and ``payer`` must sign the transaction.
    """
    accounts = [
        AccountMeta(asset, is_signer=True, is_writable=True),
        _optional(collection, program_id, writable=True),
        _optional(authority, program_id, signer=True),
        AccountMeta(payer, is_signer=True, is_writable=True),
        _optional(owner, program_id),
        _optional(update_authority, program_id),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        _optional(None, program_id),  # log wrapper
    ]
    data = (
        _u8(Discriminator.CREATE_V1)
        + _u8(DataState.ACCOUNT_STATE)
        + _string(name)
        + _string(uri)
        + _plugins(plugins)
    )
    return Instruction(program_id, data, accounts)


def create_collection_v1(
    *,
    collection: Pubkey,
    payer: Pubkey,
    name: str,
    uri: str,
    plugins: list[PluginAuthorityPair] | None = None,
    update_authority: Pubkey | None = None,
    program_id: Pubkey = MPL_CORE_PROGRAM_ID,
) -> Instruction:
    """Build a CreateCollectionV1 instruction for a new collection account."""
    accounts = [
        AccountMeta(collection, is_signer=True, is_writable=True),
        _optional(update_authority, program_id),
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    data = (
        _u8(Discriminator.CREATE_COLLECTION_V1)
        + _string(name)
        + _string(uri)
        + _plugins(plugins)
    )
    return Instruction(program_id, data, accounts)
