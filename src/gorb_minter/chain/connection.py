"""RPC connection factory and transport error mapping."""

from __future__ import annotations

import logging
from contextlib import contextmanager

import httpx
from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment

from gorb_minter.errors import NetworkError
from gorb_minter.models.config import MinterConfig

log = logging.getLogger(__name__)


def open_connection(cfg: MinterConfig) -> AsyncClient:
    """Build an async RPC client for the configured endpoint.

    No retries at this layer; transport failures surface to the caller.
    """
    log.debug("Opening RPC connection to %s (commitment=%s)", cfg.rpc_url, cfg.commitment)
    return AsyncClient(
        cfg.rpc_url,
        commitment=Commitment(cfg.commitment),
        timeout=cfg.rpc_timeout,
    )


@contextmanager
def network_errors(rpc_url: str, action: str):
    """Re-raise transport failures from the RPC client as NetworkError."""
    try:
        yield
    except (SolanaRpcException, httpx.HTTPError) as exc:
        cause = exc.__cause__ or exc
        raise NetworkError(f"network error during {action} against {rpc_url}: {cause}") from exc
