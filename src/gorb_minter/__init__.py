"""gorb_minter - mint MPL Core NFTs and collections on Gorbchain."""

__version__ = "0.1.0"
