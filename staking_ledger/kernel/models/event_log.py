"""
Immutable event log for audit trail.

Every ledger mutation is logged here before commit, in the same unit of work
as the state change it describes.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Index, JSON, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from staking_ledger.kernel.models.base import Base, generate_uuid


class EventType(str, Enum):
    """All event types for the audit log."""

    # Platform events
    PLATFORM_INITIALIZED = "platform.initialized"
    PLATFORM_AUTHORITY_ADDED = "platform.authority_added"
    PLATFORM_AUTHORITY_REMOVED = "platform.authority_removed"

    # Project events
    PROJECT_REGISTERED = "project.registered"
    PROJECT_CONFIG_UPDATED = "project.config_updated"
    PROJECT_DURATIONS_UPDATED = "project.durations_updated"

    # Stake events
    STAKE_CREATED = "stake.created"
    STAKE_UNSTAKED = "stake.unstaked"
    STAKE_EMERGENCY_UNSTAKED = "stake.emergency_unstaked"


class EventLog(Base):
    """
    Immutable audit event log.

    This table is append-only - no updates or deletes allowed.
    """

    __tablename__ = "event_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )

    event_type: Mapped[EventType] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )

    # Entity reference (derived address of the record)
    entity_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    entity_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )

    # Actor identity
    actor: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        index=True,
    )

    payload: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    request_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
    )
    user_agent: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        Index("ix_event_logs_entity", "entity_type", "entity_id"),
        Index("ix_event_logs_actor_time", "actor", "created_at"),
        Index("ix_event_logs_type_time", "event_type", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<EventLog {self.event_type} {self.entity_type}:{self.entity_id}>"
