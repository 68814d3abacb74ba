"""
Governance Operations - platform authorities and project policy.
"""

from staking_ledger.engines.governance.platform import PlatformGovernance
from staking_ledger.engines.governance.project import ProjectGovernance

__all__ = [
    "PlatformGovernance",
    "ProjectGovernance",
]
