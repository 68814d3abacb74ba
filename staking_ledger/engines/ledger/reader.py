"""
Lookups of ledger records by their derived addresses.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staking_ledger.kernel.addressing import platform_address, project_address, stake_address
from staking_ledger.kernel.errors import PlatformNotInitialized, ProjectNotFound, StakeNotFound
from staking_ledger.kernel.identity import identity_bytes
from staking_ledger.kernel.limits import U64_MAX
from staking_ledger.kernel.models import (
    PlatformRegistry,
    ProjectRegistry,
    StakeRecord,
    UnstakeRecord,
)


class RegistryReader:
    """
    Read access to the platform, project and stake records.

    Every ``get`` goes through the address derived from public seeds, never a
    secondary index, so a lookup can only find the record the seeds name.
    """

    def __init__(self, session: AsyncSession, program_id: bytes):
        self.session = session
        self.program_id = program_id

    async def platform(self) -> PlatformRegistry:
        record = await self.session.get(PlatformRegistry, platform_address(self.program_id).hex)
        if record is None:
            raise PlatformNotInitialized()
        return record

    async def find_project(self, project_id: int) -> Optional[ProjectRegistry]:
        if not isinstance(project_id, int) or project_id < 0 or project_id > U64_MAX:
            return None
        address = project_address(self.program_id, project_id).hex
        return await self.session.get(ProjectRegistry, address)

    async def project(self, project_id: int) -> ProjectRegistry:
        record = await self.find_project(project_id)
        if record is None:
            raise ProjectNotFound(project_id=project_id)
        return record

    def stake_address_for(self, project: ProjectRegistry, depositor: str, stake_id: int):
        return stake_address(
            self.program_id,
            bytes.fromhex(project.address),
            identity_bytes(depositor),
            stake_id,
        )

    async def find_stake(
        self,
        project: ProjectRegistry,
        depositor: str,
        stake_id: int,
        for_update: bool = False,
    ) -> Optional[StakeRecord]:
        """
        Load one stake.

        With ``for_update`` the row is locked where the backend supports it and
        re-read from the database even if the session already holds it.
        """
        if not isinstance(stake_id, int) or stake_id < 0 or stake_id > U64_MAX:
            return None
        address = self.stake_address_for(project, depositor, stake_id).hex
        return await self.session.get(
            StakeRecord,
            address,
            with_for_update=for_update or None,
            populate_existing=for_update,
        )

    async def stake(
        self,
        project: ProjectRegistry,
        depositor: str,
        stake_id: int,
        for_update: bool = False,
    ) -> StakeRecord:
        record = await self.find_stake(project, depositor, stake_id, for_update=for_update)
        if record is None:
            raise StakeNotFound(project_id=project.project_id, stake_id=stake_id)
        return record

    async def unstake_for(self, stake: StakeRecord) -> Optional[UnstakeRecord]:
        result = await self.session.execute(
            select(UnstakeRecord).where(UnstakeRecord.stake_ref == stake.address)
        )
        return result.scalar_one_or_none()

    async def list_projects(self, offset: int = 0, limit: int = 100) -> List[ProjectRegistry]:
        query = (
            select(ProjectRegistry)
            .order_by(ProjectRegistry.project_id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_stakes(
        self,
        project: ProjectRegistry,
        depositor: Optional[str] = None,
        active_only: bool = False,
        offset: int = 0,
        limit: int = 100,
    ) -> List[StakeRecord]:
        query = select(StakeRecord).where(StakeRecord.project_ref == project.address)
        if depositor:
            query = query.where(StakeRecord.depositor == depositor)
        if active_only:
            query = query.where(StakeRecord.active.is_(True))
        query = query.order_by(StakeRecord.stake_id).offset(offset).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())
