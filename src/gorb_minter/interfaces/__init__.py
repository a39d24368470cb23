"""Protocol interfaces for gorb_minter components."""

from gorb_minter.interfaces.connection import ChainConnection
from gorb_minter.interfaces.submitter import AssetSubmitter

__all__ = ["ChainConnection", "AssetSubmitter"]
