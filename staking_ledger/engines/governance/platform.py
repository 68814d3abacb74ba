"""
Platform governance - the authority set that may register projects.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from staking_ledger.config import Settings, get_settings
from staking_ledger.engines.ledger.reader import RegistryReader
from staking_ledger.kernel.addressing import platform_address
from staking_ledger.kernel.errors import (
    AuthorityAlreadyExists,
    AuthorityNotFound,
    CannotRemoveLastAuthority,
    NotPlatformAuthority,
)
from staking_ledger.kernel.events import EventStore, PlatformEvent
from staking_ledger.kernel.identity import parse_identity
from staking_ledger.kernel.models import EventType, PlatformRegistry
from staking_ledger.kernel.storage import RecordStore, platform_size
from staking_ledger.logging_config import get_logger

logger = get_logger(__name__)


class PlatformGovernance:
    """
    Initializes the platform singleton and maintains its authority list.

    The list is never empty: it starts with the initializer and the last
    remaining authority cannot be removed. Each change resizes the record by
    exactly one identity width.
    """

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.program_id = self.settings.program_id_bytes
        self.store = RecordStore(session, self.settings.storage_deposit_per_byte)
        self.reader = RegistryReader(session, self.program_id)
        self.events = EventStore(session)

    async def initialize(self, caller: str) -> PlatformRegistry:
        caller = parse_identity(caller)
        derived = platform_address(self.program_id)
        platform = await self.store.create(
            PlatformRegistry,
            derived,
            platform_size(1),
            payer=caller,
            authorities=[caller],
            project_count=0,
        )
        await self.events.log_from_model(
            event_type=EventType.PLATFORM_INITIALIZED,
            entity_type="platform",
            entity_id=platform.address,
            actor=caller,
            payload_model=PlatformEvent(authorities=[caller], authority=caller),
        )
        logger.info("Platform initialized", extra={"authority": caller, "address": platform.address})
        return platform

    async def add_authority(self, caller: str, new_authority: str) -> PlatformRegistry:
        caller = parse_identity(caller)
        platform = await self._authorized_platform(caller)
        new_authority = parse_identity(new_authority)

        if new_authority in platform.authorities:
            raise AuthorityAlreadyExists(authority=new_authority)

        self.store.resize(platform, platform_size(len(platform.authorities) + 1), payer=caller)
        platform.authorities = [*platform.authorities, new_authority]
        self.store.check_fits(platform)

        await self._log(EventType.PLATFORM_AUTHORITY_ADDED, platform, caller, new_authority)
        logger.info(
            "Platform authority added",
            extra={"authority": new_authority, "by": caller, "count": len(platform.authorities)},
        )
        return platform

    async def remove_authority(self, caller: str, authority: str) -> PlatformRegistry:
        caller = parse_identity(caller)
        platform = await self._authorized_platform(caller)
        authority = parse_identity(authority)

        if len(platform.authorities) == 1:
            raise CannotRemoveLastAuthority()
        if authority not in platform.authorities:
            raise AuthorityNotFound(authority=authority)

        platform.authorities = [a for a in platform.authorities if a != authority]
        self.store.resize(platform, platform_size(len(platform.authorities)), payer=caller)
        self.store.check_fits(platform)

        await self._log(EventType.PLATFORM_AUTHORITY_REMOVED, platform, caller, authority)
        logger.info(
            "Platform authority removed",
            extra={"authority": authority, "by": caller, "count": len(platform.authorities)},
        )
        return platform

    async def _authorized_platform(self, caller: str) -> PlatformRegistry:
        platform = await self.reader.platform()
        if not platform.is_authority(caller):
            raise NotPlatformAuthority(caller=caller)
        return platform

    async def _log(
        self,
        event_type: EventType,
        platform: PlatformRegistry,
        caller: str,
        authority: str,
    ) -> None:
        await self.events.log_from_model(
            event_type=event_type,
            entity_type="platform",
            entity_id=platform.address,
            actor=caller,
            payload_model=PlatformEvent(authorities=list(platform.authorities), authority=authority),
        )
