"""
Record allocation and byte layouts.
"""

from staking_ledger.kernel.storage.layout import (
    IDENTITY,
    MAX_DURATIONS,
    MAX_NAME_BYTES,
    PROJECT_MAX_SIZE,
    STAKE_SIZE,
    UNSTAKE_SIZE,
    platform_size,
    project_size,
    required_size,
)
from staking_ledger.kernel.storage.record_store import RecordStore, StorageError

__all__ = [
    "IDENTITY",
    "MAX_DURATIONS",
    "MAX_NAME_BYTES",
    "PROJECT_MAX_SIZE",
    "STAKE_SIZE",
    "UNSTAKE_SIZE",
    "platform_size",
    "project_size",
    "required_size",
    "RecordStore",
    "StorageError",
]
