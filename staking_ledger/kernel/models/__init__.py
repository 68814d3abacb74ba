"""
Kernel Data Models

SQLAlchemy models for the ledger records, custody accounts and audit log.
"""

from staking_ledger.kernel.models.base import (
    AllocatedRecordMixin,
    Base,
    TimestampMixin,
    Uint64,
    generate_uuid,
)
from staking_ledger.kernel.models.platform import PlatformRegistry
from staking_ledger.kernel.models.project import ProjectRegistry
from staking_ledger.kernel.models.stake import StakeRecord, StakeStatus, UnstakeRecord
from staking_ledger.kernel.models.asset_account import AssetAccount
from staking_ledger.kernel.models.event_log import EventLog, EventType

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "AllocatedRecordMixin",
    "Uint64",
    "generate_uuid",
    # Registries
    "PlatformRegistry",
    "ProjectRegistry",
    # Stakes
    "StakeRecord",
    "StakeStatus",
    "UnstakeRecord",
    # Custody
    "AssetAccount",
    # Event Log
    "EventLog",
    "EventType",
]
