"""
Asset movement between custody accounts.
"""

from staking_ledger.kernel.assets.mover import AssetMover, MoveRequest
from staking_ledger.kernel.assets.ledger_mover import LedgerAssetMover

__all__ = [
    "AssetMover",
    "MoveRequest",
    "LedgerAssetMover",
]
