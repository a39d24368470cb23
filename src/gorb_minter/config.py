"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from gorb_minter.models.config import AssetMetadata, CollectionMetadata, MinterConfig


def _metadata(section: dict, defaults: AssetMetadata | CollectionMetadata):
    return type(defaults)(
        name=str(section.get("name", defaults.name)),
        symbol=str(section.get("symbol", defaults.symbol)),
        description=str(section.get("description", defaults.description)),
        uri=str(section.get("uri", defaults.uri)),
        royalty_bps=int(section.get("royalty_bps", defaults.royalty_bps)),
    )


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "GORB_MINTER_",
) -> MinterConfig:
    """Load minter configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (GORB_MINTER_KEYPAIR, etc.)
        2. TOML config file
        3. Defaults from MinterConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = MinterConfig()

    # ── Network section ────────────────────────────────────
    network = raw.get("network", {})
    if v := network.get("name"):
        cfg.network_name = str(v)
    if v := network.get("rpc_url"):
        cfg.rpc_url = str(v)
    if v := network.get("ws_url"):
        cfg.ws_url = str(v)
    if v := network.get("commitment"):
        cfg.commitment = str(v)
    if v := network.get("explorer_url"):
        cfg.explorer_url = str(v)
    if v := network.get("native_symbol"):
        cfg.native_symbol = str(v)
    if v := network.get("rpc_timeout"):
        cfg.rpc_timeout = float(v)

    # ── Program section ────────────────────────────────────
    program = raw.get("program", {})
    if v := program.get("program_id"):
        cfg.program_id = str(v)
    if "strict_check" in program:
        cfg.strict_program_check = bool(program["strict_check"])

    # ── Wallet section ─────────────────────────────────────
    wallet = raw.get("wallet", {})
    if v := wallet.get("keypair_path"):
        cfg.keypair_path = str(v)

    # ── Submit section ─────────────────────────────────────
    submit = raw.get("submit", {})
    if v := submit.get("timeout"):
        cfg.submit_timeout = float(v)
    if (v := submit.get("max_retries")) is not None:
        cfg.max_retries = int(v)
    if "skip_preflight" in submit:
        cfg.skip_preflight = bool(submit["skip_preflight"])
    if (v := submit.get("low_balance_threshold")) is not None:
        cfg.low_balance_threshold = float(v)
    if (v := submit.get("drain_timeout")) is not None:
        cfg.drain_timeout = float(v)

    # ── Metadata sections ──────────────────────────────────
    cfg.asset = _metadata(raw.get("asset", {}), cfg.asset)
    cfg.collection = _metadata(raw.get("collection", {}), cfg.collection)

    # ── Logging section ────────────────────────────────────
    if v := raw.get("logging", {}).get("level"):
        cfg.log_level = str(v)

    # ── Environment variable overrides (highest priority) ──
    if kp := os.environ.get(f"{env_prefix}KEYPAIR"):
        cfg.keypair_path = kp
    if rpc := os.environ.get(f"{env_prefix}RPC_URL"):
        cfg.rpc_url = rpc
    if ws := os.environ.get(f"{env_prefix}WS_URL"):
        cfg.ws_url = ws
    if pid := os.environ.get(f"{env_prefix}PROGRAM_ID"):
        cfg.program_id = pid
    if explorer := os.environ.get(f"{env_prefix}EXPLORER_URL"):
        cfg.explorer_url = explorer
    if timeout := os.environ.get(f"{env_prefix}TIMEOUT"):
        cfg.submit_timeout = float(timeout)

    cfg.explorer_url = cfg.explorer_url.rstrip("/")
    return cfg
