"""
Event payload schemas for the audit trail.

The three stake notifications carry exactly the fields downstream consumers
index on; the governance payloads are free-form beyond their declared fields.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseEvent(BaseModel):
    """Base event payload structure."""

    model_config = ConfigDict(extra="allow")

    timestamp: datetime = Field(default_factory=_utcnow)
    metadata: Dict[str, Any] = Field(default_factory=dict)


# Platform Events

class PlatformEvent(BaseEvent):
    authorities: List[str] = Field(default_factory=list)
    authority: Optional[str] = None


# Project Events

class ProjectEvent(BaseEvent):
    project_id: int
    name: Optional[str] = None


class ProjectRegisteredEvent(ProjectEvent):
    asset_id: str
    custody_ref: str
    allowed_durations: List[int]


class ProjectConfigUpdatedEvent(ProjectEvent):
    fee_recipient: str
    unstake_fee_bps: int
    emergency_unstake_fee_bps: int


class ProjectDurationsUpdatedEvent(ProjectEvent):
    previous_durations: List[int]
    allowed_durations: List[int]


# Stake notifications

class StakeEvent(BaseEvent):
    """Emitted when a deposit is locked."""

    depositor: str
    project_id: int
    stake_id: int
    amount: int
    duration_days: int


class UnstakeEvent(BaseEvent):
    """Emitted when a stake is withdrawn after its lockup."""

    depositor: str
    project_id: int
    stake_id: int
    amount: int


class EmergencyUnstakeEvent(UnstakeEvent):
    """Emitted when a stake is withdrawn before its lockup ends."""
