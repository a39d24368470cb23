"""Keypair loading from Solana CLI style JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from solders.keypair import Keypair

from gorb_minter.errors import CredentialError

log = logging.getLogger(__name__)

SECRET_KEY_LENGTH = 64


def load_keypair(path: str | Path) -> Keypair:
    """Load a keypair from a JSON array of 64 secret-key bytes.

    Raises CredentialError if the file is missing, unreadable or malformed.
    """
    p = Path(path).expanduser()
    try:
        raw = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise CredentialError(f"Failed to load keypair from {p}: file not found") from None
    except OSError as exc:
        raise CredentialError(f"Failed to load keypair from {p}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CredentialError(f"Failed to load keypair from {p}: invalid JSON ({exc})") from exc

    if not isinstance(data, list) or not all(
        isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in data
    ):
        raise CredentialError(f"Failed to load keypair from {p}: expected a JSON array of bytes")
    if len(data) != SECRET_KEY_LENGTH:
        raise CredentialError(
            f"Failed to load keypair from {p}: expected {SECRET_KEY_LENGTH} bytes, got {len(data)}"
        )

    try:
        keypair = Keypair.from_bytes(bytes(data))
    except ValueError as exc:
        raise CredentialError(f"Failed to load keypair from {p}: {exc}") from exc

    log.debug("Loaded keypair %s from %s", keypair.pubkey(), p)
    return keypair


def generate_signer() -> Keypair:
    """Fresh random keypair for a not-yet-existing account."""
    return Keypair()
