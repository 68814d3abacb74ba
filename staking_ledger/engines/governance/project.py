"""
Project governance - registration and per-project policy.
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from staking_ledger.config import Settings, get_settings
from staking_ledger.engines.ledger.reader import RegistryReader
from staking_ledger.engines.policy import (
    validate_durations,
    validate_fee_bps,
    validate_project_name,
)
from staking_ledger.kernel.addressing import VaultAuthority, project_address, vault_address
from staking_ledger.kernel.assets import AssetMover
from staking_ledger.kernel.errors import NotPlatformAuthority, NotProjectAuthority
from staking_ledger.kernel.events import (
    EventStore,
    ProjectConfigUpdatedEvent,
    ProjectDurationsUpdatedEvent,
    ProjectRegisteredEvent,
)
from staking_ledger.kernel.identity import parse_identity
from staking_ledger.kernel.limits import checked_u64
from staking_ledger.kernel.models import EventType, ProjectRegistry
from staking_ledger.kernel.storage import PROJECT_MAX_SIZE, RecordStore, project_size
from staking_ledger.logging_config import get_logger

logger = get_logger(__name__)


class ProjectGovernance:
    """
    Registers projects under the platform and edits their policy.

    Registration is limited to platform authorities; every later change is
    limited to the project's own authority.
    """

    def __init__(
        self,
        session: AsyncSession,
        mover: AssetMover,
        settings: Optional[Settings] = None,
    ):
        self.session = session
        self.mover = mover
        self.settings = settings or get_settings()
        self.program_id = self.settings.program_id_bytes
        self.store = RecordStore(session, self.settings.storage_deposit_per_byte)
        self.reader = RegistryReader(session, self.program_id)
        self.events = EventStore(session)

    async def register_project(
        self,
        caller: str,
        name: str,
        allowed_durations: List[int],
        asset_id: str,
    ) -> ProjectRegistry:
        """
        Create the next project and open its vault.

        The caller becomes both project authority and fee recipient; fees
        start at 0. The record is allocated at maximum size so the name and
        durations never need to grow it later.
        """
        caller = parse_identity(caller)
        platform = await self.reader.platform()
        if not platform.is_authority(caller):
            raise NotPlatformAuthority(caller=caller)

        validate_project_name(name)
        durations = validate_durations(allowed_durations)
        asset_id = parse_identity(asset_id)

        project_id = platform.project_count
        vault = vault_address(self.program_id, project_id)
        vault_authority = VaultAuthority.derive(self.program_id, project_id)

        await self.mover.open_account(
            owner=vault_authority.authority,
            asset_id=asset_id,
            address=vault.hex,
        )

        project = await self.store.create(
            ProjectRegistry,
            project_address(self.program_id, project_id),
            PROJECT_MAX_SIZE,
            payer=caller,
            project_id=project_id,
            name=name,
            project_authority=caller,
            asset_id=asset_id,
            custody_ref=vault.hex,
            asset_mover_id=self.mover.mover_id,
            fee_recipient=caller,
            unstake_fee_bps=0,
            emergency_unstake_fee_bps=0,
            allowed_durations=durations,
        )
        platform.project_count = checked_u64(project_id + 1)

        await self.events.log_from_model(
            event_type=EventType.PROJECT_REGISTERED,
            entity_type="project",
            entity_id=project.address,
            actor=caller,
            payload_model=ProjectRegisteredEvent(
                project_id=project_id,
                name=name,
                asset_id=asset_id,
                custody_ref=vault.hex,
                allowed_durations=durations,
            ),
        )
        logger.info(
            "Project registered",
            extra={"project_id": project_id, "project_name": name, "authority": caller},
        )
        return project

    async def update_project_config(
        self,
        caller: str,
        project_id: int,
        fee_recipient: str,
        unstake_fee_bps: int,
        emergency_unstake_fee_bps: int,
    ) -> ProjectRegistry:
        caller = parse_identity(caller)
        project = await self._authorized_project(caller, project_id)

        validate_fee_bps(unstake_fee_bps)
        validate_fee_bps(emergency_unstake_fee_bps)
        fee_recipient = parse_identity(fee_recipient)

        project.fee_recipient = fee_recipient
        project.unstake_fee_bps = unstake_fee_bps
        project.emergency_unstake_fee_bps = emergency_unstake_fee_bps

        await self.events.log_from_model(
            event_type=EventType.PROJECT_CONFIG_UPDATED,
            entity_type="project",
            entity_id=project.address,
            actor=caller,
            payload_model=ProjectConfigUpdatedEvent(
                project_id=project.project_id,
                fee_recipient=fee_recipient,
                unstake_fee_bps=unstake_fee_bps,
                emergency_unstake_fee_bps=emergency_unstake_fee_bps,
            ),
        )
        logger.info(
            "Project config updated",
            extra={
                "project_id": project.project_id,
                "unstake_fee_bps": unstake_fee_bps,
                "emergency_unstake_fee_bps": emergency_unstake_fee_bps,
            },
        )
        return project

    async def update_allowed_durations(
        self,
        caller: str,
        project_id: int,
        allowed_durations: List[int],
    ) -> ProjectRegistry:
        """
        Replace the allowed durations, reallocating to the exact new size.

        Existing stakes keep the duration they were created with.
        """
        caller = parse_identity(caller)
        project = await self._authorized_project(caller, project_id)
        durations = validate_durations(allowed_durations)
        previous = list(project.allowed_durations)

        new_size = project_size(len(project.name.encode("utf-8")), len(durations))
        self.store.resize(project, new_size, payer=caller)
        project.allowed_durations = durations
        self.store.check_fits(project)

        await self.events.log_from_model(
            event_type=EventType.PROJECT_DURATIONS_UPDATED,
            entity_type="project",
            entity_id=project.address,
            actor=caller,
            payload_model=ProjectDurationsUpdatedEvent(
                project_id=project.project_id,
                previous_durations=previous,
                allowed_durations=durations,
            ),
        )
        logger.info(
            "Project durations updated",
            extra={"project_id": project.project_id, "durations": durations, "size": new_size},
        )
        return project

    async def _authorized_project(self, caller: str, project_id: int) -> ProjectRegistry:
        project = await self.reader.project(project_id)
        if project.project_authority != caller:
            raise NotProjectAuthority(caller=caller, project_id=project.project_id)
        return project
