"""AssetSubmitter protocol - creates one asset or collection per call."""

from __future__ import annotations

import asyncio
from typing import Protocol

from gorb_minter.models.records import MintRequest, MintResult


class AssetSubmitter(Protocol):
    """Builds, signs and submits a create transaction."""

    abandoned: asyncio.Task | None  # set when the last submit timed out

    async def submit(self, request: MintRequest) -> MintResult:
        """Submit ``request`` and wait for confirmation or the local deadline."""
        ...
