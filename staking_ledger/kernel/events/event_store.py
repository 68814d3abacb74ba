"""
Event Store service for append-only audit logging.

All state mutations are logged here before commit, inside the caller's unit
of work, so a rolled-back operation leaves no event behind.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from sqlalchemy import and_, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staking_ledger.kernel.models.event_log import EventLog, EventType
from staking_ledger.logging_config import get_request_id, get_user_agent


class EventStore:
    """
    Service for managing the immutable event log.

    Usage:
        event_store = EventStore(session)
        await event_store.log_from_model(
            event_type=EventType.STAKE_CREATED,
            entity_type="stake",
            entity_id=record.address,
            actor=depositor,
            payload_model=StakeEvent(...),
        )
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def log(
        self,
        event_type: EventType,
        entity_type: str,
        entity_id: str,
        actor: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> EventLog:
        """
        Log an event to the immutable audit log.

        Args:
            event_type: The type of event
            entity_type: The kind of record (platform, project, stake)
            entity_id: The hex derived address of the record
            actor: Hex identity of the caller (None for system events)
            payload: Additional event data, already JSON-serializable

        The request id and client user agent come from the request context
        set by RequestContextMiddleware; both are None outside a request.

        Returns:
            The created EventLog record
        """
        event = EventLog(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            actor=actor,
            payload=payload or {},
            request_id=get_request_id(),
            user_agent=get_user_agent(),
        )

        self.session.add(event)
        # Caller's unit of work flushes/commits
        return event

    async def log_from_model(
        self,
        event_type: EventType,
        entity_type: str,
        entity_id: str,
        actor: Optional[str],
        payload_model: BaseModel,
    ) -> EventLog:
        """Log an event using a Pydantic model as payload."""
        return await self.log(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            actor=actor,
            payload=payload_model.model_dump(mode="json"),
        )

    async def get_entity_history(
        self,
        entity_type: str,
        entity_id: str,
        event_types: Optional[List[EventType]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[EventLog]:
        """
        Get the event history for a specific record, newest first.
        """
        query = select(EventLog).where(
            and_(
                EventLog.entity_type == entity_type,
                EventLog.entity_id == entity_id,
            )
        )

        if event_types:
            query = query.where(EventLog.event_type.in_(event_types))

        query = query.order_by(desc(EventLog.created_at)).offset(offset).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_actor_activity(
        self,
        actor: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        event_types: Optional[List[EventType]] = None,
        limit: int = 100,
    ) -> List[EventLog]:
        """
        Get all events triggered by one identity, newest first.
        """
        query = select(EventLog).where(EventLog.actor == actor)

        if since:
            query = query.where(EventLog.created_at >= since)
        if until:
            query = query.where(EventLog.created_at <= until)
        if event_types:
            query = query.where(EventLog.event_type.in_(event_types))

        query = query.order_by(desc(EventLog.created_at)).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_events(
        self,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        event_type: Optional[EventType] = None,
        actor: Optional[str] = None,
        since: Optional[datetime] = None,
    ) -> int:
        """Count events matching the given criteria."""
        query = select(func.count(EventLog.id))

        if entity_type:
            query = query.where(EventLog.entity_type == entity_type)
        if entity_id:
            query = query.where(EventLog.entity_id == entity_id)
        if event_type:
            query = query.where(EventLog.event_type == event_type)
        if actor:
            query = query.where(EventLog.actor == actor)
        if since:
            query = query.where(EventLog.created_at >= since)

        result = await self.session.execute(query)
        return result.scalar() or 0
