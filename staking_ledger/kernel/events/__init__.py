"""
Event sourcing infrastructure.

Provides append-only audit logging with immutable events.
"""

from staking_ledger.kernel.events.event_store import EventStore
from staking_ledger.kernel.events.event_types import (
    BaseEvent,
    EmergencyUnstakeEvent,
    PlatformEvent,
    ProjectConfigUpdatedEvent,
    ProjectDurationsUpdatedEvent,
    ProjectEvent,
    ProjectRegisteredEvent,
    StakeEvent,
    UnstakeEvent,
)

__all__ = [
    "EventStore",
    "BaseEvent",
    "PlatformEvent",
    "ProjectEvent",
    "ProjectRegisteredEvent",
    "ProjectConfigUpdatedEvent",
    "ProjectDurationsUpdatedEvent",
    "StakeEvent",
    "UnstakeEvent",
    "EmergencyUnstakeEvent",
]
