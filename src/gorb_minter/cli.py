"""CLI entry point for gorb-minter."""

from __future__ import annotations

import asyncio
import logging
import sys

import click
from solders.pubkey import Pubkey

from gorb_minter.chain.connection import open_connection
from gorb_minter.chain.keys import load_keypair
from gorb_minter.chain.queries import ChainQueries
from gorb_minter.config import load_config
from gorb_minter.deployer import MintDeployer
from gorb_minter.errors import MintError, ProgramNotFoundError, classify_error
from gorb_minter.models.config import LAMPORTS_PER_SOL, MinterConfig, MintKind
from gorb_minter.models.records import MintOutcome
from gorb_minter.reporter import explorer_address_url, hints_for, report

EXIT_CODES = {
    MintOutcome.CONFIRMED: 0,
    MintOutcome.FAILED: 1,
    MintOutcome.TIMED_OUT: 2,
}


def _native(lamports: int, cfg: MinterConfig) -> str:
    return f"{lamports / LAMPORTS_PER_SOL:.9f} {cfg.native_symbol}"


def _fail(exc: MintError, cfg: MinterConfig) -> None:
    """Print a pre-flight failure with its hints and exit 1."""
    click.echo(f"Error: {exc}", err=True)
    for hint in hints_for(classify_error(exc), cfg):
        click.echo(f"💡 {hint}", err=True)
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-k", "--keypair", "keypair_path", default=None, help="Path to keypair JSON file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("--collection", is_flag=True, help="Create a collection instead of a single NFT")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str | None,
    keypair_path: str | None,
    verbose: bool,
    collection: bool,
) -> None:
    """gorb-minter - mint MPL Core NFTs and collections on Gorbchain.

    Without a subcommand, creates one NFT (or one collection with --collection).
    """
    ctx.ensure_object(dict)
    cfg = load_config(config_path)
    if keypair_path:
        cfg.keypair_path = keypair_path
    ctx.obj["cfg"] = cfg

    level = logging.DEBUG if verbose else getattr(logging, cfg.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if ctx.invoked_subcommand is None:
        kind = MintKind.COLLECTION if collection else MintKind.ASSET
        code = _mint(cfg, kind)
        if code:
            sys.exit(code)


def _mint(cfg: MinterConfig, kind: MintKind) -> int:
    if kind is MintKind.COLLECTION:
        click.echo(f"🏛️ Creating NFT Collection on {cfg.network_name}...")
    else:
        click.echo(
            f"🚀 Starting NFT deployment with custom MPL Core program on {cfg.network_name}..."
        )

    result = asyncio.run(MintDeployer(cfg).run(kind))
    report(result, cfg)
    return EXIT_CODES[result.outcome]


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the effective configuration."""
    cfg: MinterConfig = ctx.obj["cfg"]
    click.echo(f"Network:    {cfg.network_name}")
    click.echo(f"RPC URL:    {cfg.rpc_url}")
    click.echo(f"WS URL:     {cfg.ws_url}")
    click.echo(f"Commitment: {cfg.commitment}")
    click.echo(f"Explorer:   {cfg.explorer_url}")
    click.echo(f"Program:    {cfg.program_id}{' (strict)' if cfg.strict_program_check else ''}")
    click.echo(f"Keypair:    {cfg.keypair_path}")
    click.echo(
        f"Timeout:    {cfg.submit_timeout:g}s (max retries {cfg.max_retries}, "
        f"drain {cfg.drain_timeout:g}s)"
    )
    click.echo(f"NFT:        {cfg.asset.name} [{cfg.asset.symbol}] {cfg.asset.uri}")
    click.echo(f"Collection: {cfg.collection.name} [{cfg.collection.symbol}] {cfg.collection.uri}")


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Query wallet balance and whether the MPL Core program is deployed."""
    cfg: MinterConfig = ctx.obj["cfg"]
    try:
        keypair = load_keypair(cfg.keypair_path)
    except MintError as exc:
        _fail(exc, cfg)

    try:
        program_id = Pubkey.from_string(cfg.program_id)
    except ValueError as exc:
        _fail(ProgramNotFoundError(f"invalid program id {cfg.program_id!r}: {exc}"), cfg)

    async def _info():
        connection = open_connection(cfg)
        queries = ChainQueries(connection, cfg.rpc_url, cfg.commitment)
        try:
            address = keypair.pubkey()
            click.echo(f"Address:    {address}")
            click.echo(f"            {explorer_address_url(cfg.explorer_url, str(address))}")

            balance = await queries.get_wallet_balance(address)
            click.echo(f"Balance:    {_native(balance, cfg)}")
            if balance < cfg.low_balance_lamports:
                click.echo(f"            ⚠️ below {cfg.low_balance_threshold:g} {cfg.native_symbol}")

            program = await queries.get_program_status(program_id)
            click.echo("")
            if program.deployed:
                click.echo(f"Program:    DEPLOYED ({program.program_id})")
                click.echo(f"  Owner:    {program.owner}")
            elif program.exists:
                click.echo(f"Program:    NOT EXECUTABLE ({program.program_id})")
            else:
                click.echo(f"Program:    NOT FOUND ({program.program_id})")
                click.echo(
                    f"  Try: solana program show {cfg.program_id} --url {cfg.rpc_url}"
                )
        finally:
            await connection.close()

    try:
        asyncio.run(_info())
    except MintError as exc:
        _fail(exc, cfg)


if __name__ == "__main__":
    cli()
