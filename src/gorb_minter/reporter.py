"""Console reporting of mint results, explorer links and failure hints."""

from __future__ import annotations

import traceback

import click

from gorb_minter.errors import ErrorKind, SubmissionError, classify_error
from gorb_minter.models.config import MinterConfig, MintKind
from gorb_minter.models.records import BalanceCheck, MintOutcome, MintResult

RULE = "━" * 40


def explorer_address_url(base: str, address: str) -> str:
    return f"{base.rstrip('/')}/address/{address}"


def explorer_tx_url(base: str, signature: str) -> str:
    return f"{base.rstrip('/')}/tx/{signature}"


def _label(kind: MintKind) -> str:
    return "Collection" if kind is MintKind.COLLECTION else "NFT"


def hints_for(kind: ErrorKind, cfg: MinterConfig) -> list[str]:
    """Targeted advice for a classified failure. UNKNOWN has none."""
    if kind is ErrorKind.TIMEOUT:
        return [
            "Transaction timed out. This might be due to network issues or RPC overload.",
            "The transaction may still land; check the explorer before minting again.",
            "Try running the command again.",
        ]
    if kind is ErrorKind.INSUFFICIENT_FUNDS:
        return [
            f"Make sure you have enough {cfg.native_symbol} for transaction fees "
            f"on {cfg.network_name}",
        ]
    if kind is ErrorKind.CREDENTIAL:
        return [
            "Make sure your keypair file exists and holds a 64-byte JSON array",
            f"Current keypair path: {cfg.keypair_path}",
        ]
    if kind is ErrorKind.NETWORK:
        return [
            f"Check your connection to {cfg.network_name} RPC",
            f"Current RPC: {cfg.rpc_url}",
        ]
    if kind is ErrorKind.PROGRAM_NOT_FOUND:
        return [
            f"Make sure your MPL Core program is deployed to {cfg.network_name}",
            f"Program ID should be: {cfg.program_id}",
            f"Try checking the program with: solana program show {cfg.program_id} "
            f"--url {cfg.rpc_url}",
        ]
    return []


def format_balance(check: BalanceCheck, cfg: MinterConfig) -> list[str]:
    lines = [f"💰 Current balance: {check.native} {cfg.native_symbol}"]
    if check.is_low:
        lines.append(
            f"⚠️ Low balance! Make sure you have enough {cfg.native_symbol} "
            "for transaction fees."
        )
    return lines


def format_success(result: MintResult, cfg: MinterConfig) -> list[str]:
    label = _label(result.kind)
    address_url = explorer_address_url(cfg.explorer_url, result.address)
    tx_url = explorer_tx_url(cfg.explorer_url, result.signature or "")
    lines = [
        f"✅ {label} created successfully!",
        f"📝 Transaction signature: {result.signature}",
        "",
        f"🎉 SUCCESS! Your {label} has been deployed on {cfg.network_name}!",
        RULE,
        f"📍 {label} Address: {result.address}",
        f"🔗 View {label}: {address_url}",
        f"🔗 View Transaction: {tx_url}",
        f"🏷️ Name: {result.name}",
        f"🏷️ Symbol: {result.symbol}",
    ]
    if result.description:
        lines.append(f"📝 Description: {result.description}")
    lines += [
        f"📄 Metadata URI: {result.uri}",
        f"🔧 Custom Program: {cfg.program_id}",
        f"🌐 Network: {cfg.network_name}",
        RULE,
    ]
    return lines


def format_timeout(result: MintResult, cfg: MinterConfig) -> list[str]:
    label = _label(result.kind)
    lines = [
        f"⏳ {label} not confirmed within {cfg.submit_timeout:g} seconds; "
        "its final state is unknown.",
        f"📍 {label} Address: {result.address}",
        f"🔗 Check {label}: {explorer_address_url(cfg.explorer_url, result.address)}",
    ]
    if result.signature:
        lines.append(f"🔗 Check Transaction: {explorer_tx_url(cfg.explorer_url, result.signature)}")
    else:
        lines.append("📝 The node had not returned a signature yet.")
    lines.extend(f"💡 {h}" for h in hints_for(ErrorKind.TIMEOUT, cfg))
    return lines


def format_failure(result: MintResult, cfg: MinterConfig) -> list[str]:
    action = "creating collection" if result.kind is MintKind.COLLECTION else "deploying NFT"
    exc = result.error
    lines = [f"❌ Error {action}: {exc}"]

    if isinstance(exc, SubmissionError) and exc.logs:
        lines.append("📋 Detailed transaction logs:")
        lines.extend(f"    {entry}" for entry in exc.logs)

    kind = classify_error(exc) if exc is not None else ErrorKind.UNKNOWN
    hints = hints_for(kind, cfg)
    if hints:
        lines.extend(f"💡 {h}" for h in hints)
    elif exc is not None:
        lines.extend(
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            .rstrip()
            .splitlines()
        )
    return lines


def format_result(result: MintResult, cfg: MinterConfig) -> list[str]:
    if result.outcome is MintOutcome.CONFIRMED:
        return format_success(result, cfg)
    if result.outcome is MintOutcome.TIMED_OUT:
        return format_timeout(result, cfg)
    return format_failure(result, cfg)


def report(result: MintResult, cfg: MinterConfig) -> None:
    """Print a result; failures and timeouts go to stderr."""
    err = result.outcome is not MintOutcome.CONFIRMED
    if result.balance is not None:
        for line in format_balance(result.balance, cfg):
            click.echo(line)
    if err:
        click.echo("", err=True)
    for line in format_result(result, cfg):
        click.echo(line, err=err)
