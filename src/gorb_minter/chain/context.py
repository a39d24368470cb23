"""Client context: connection + signing identity + registered programs."""

from __future__ import annotations

import logging
from typing import Protocol

from solana.rpc.async_api import AsyncClient
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from gorb_minter.chain.mpl_core import MPL_CORE_PROGRAM_ID
from gorb_minter.errors import ProgramNotFoundError

log = logging.getLogger(__name__)

MPL_CORE = "mplCore"


class ProgramRegistry:
    """Name → program address lookup for the programs a context can call."""

    def __init__(self) -> None:
        self._programs: dict[str, Pubkey] = {}

    def add(self, name: str, program_id: Pubkey) -> None:
        self._programs[name] = program_id

    def get_public_key(self, name: str) -> Pubkey:
        try:
            return self._programs[name]
        except KeyError:
            raise ProgramNotFoundError(f"program '{name}' is not registered") from None

    def __contains__(self, name: str) -> bool:
        return name in self._programs


class ContextPlugin(Protocol):
    def install(self, context: ClientContext) -> None:
        ...


class ClientContext:
    """Everything a transaction builder needs to talk to the chain."""

    def __init__(self, connection: AsyncClient) -> None:
        self.connection = connection
        self.programs = ProgramRegistry()
        self._identity: Keypair | None = None

    @property
    def identity(self) -> Keypair:
        if self._identity is None:
            raise RuntimeError("no identity registered on the client context")
        return self._identity

    def set_identity(self, keypair: Keypair) -> None:
        self._identity = keypair

    def use(self, plugin: ContextPlugin) -> ClientContext:
        plugin.install(self)
        return self


class _KeypairIdentity:
    def __init__(self, keypair: Keypair) -> None:
        self._keypair = keypair

    def install(self, context: ClientContext) -> None:
        context.set_identity(self._keypair)


class _MplCorePlugin:
    def __init__(self, program_id: Pubkey) -> None:
        self._program_id = program_id

    def install(self, context: ClientContext) -> None:
        context.programs.add(MPL_CORE, self._program_id)


def keypair_identity(keypair: Keypair) -> ContextPlugin:
    """Plugin that makes ``keypair`` the payer and default signer."""
    return _KeypairIdentity(keypair)


def mpl_core(program_id: Pubkey | str | None = None) -> ContextPlugin:
    """Plugin that registers the MPL Core program.

    Without an argument the canonical MPL Core deployment is registered.
    """
    if program_id is None:
        program_id = MPL_CORE_PROGRAM_ID
    elif isinstance(program_id, str):
        program_id = Pubkey.from_string(program_id)
    return _MplCorePlugin(program_id)


def build_client_context(
    connection: AsyncClient,
    identity: Keypair,
    program_id: str,
    strict: bool = False,
    plugin: ContextPlugin | None = None,
) -> ClientContext:
    """Wrap a connection with the identity and the MPL Core plugin.

    A mismatch between the configured program id and the one the plugin
    registered is logged; it only raises when ``strict`` is set.
    """
    try:
        plugin = plugin or mpl_core(program_id)
    except ValueError as exc:
        raise ProgramNotFoundError(f"invalid program id {program_id!r}: {exc}") from exc

    context = ClientContext(connection).use(keypair_identity(identity)).use(plugin)
    log.info("Client context configured with MPL Core plugin")

    resolved = context.programs.get_public_key(MPL_CORE)
    log.info("Configured program id: %s", program_id)
    log.info("Resolved program id:   %s", resolved)
    if str(resolved) != program_id:
        msg = f"MPL Core plugin resolved {resolved}, configured program is {program_id}"
        if strict:
            raise ProgramNotFoundError(msg)
        log.warning("%s; transactions will target %s", msg, resolved)
    return context
