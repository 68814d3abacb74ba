"""
Stake Ledger engine.
"""

from staking_ledger.engines.ledger.reader import RegistryReader
from staking_ledger.engines.ledger.stake_ledger import Settlement, StakeLedger

__all__ = [
    "RegistryReader",
    "Settlement",
    "StakeLedger",
]
