"""
FastAPI dependencies for identities, database sessions and ledger services.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from staking_ledger.config import Settings, get_settings
from staking_ledger.database import get_db
from staking_ledger.engines.governance import PlatformGovernance, ProjectGovernance
from staking_ledger.engines.ledger import RegistryReader, StakeLedger
from staking_ledger.kernel.assets import LedgerAssetMover
from staking_ledger.kernel.clock import Clock, SystemClock
from staking_ledger.kernel.errors import InvalidIdentity
from staking_ledger.kernel.identity import parse_identity, verify_access_token


# Security scheme
security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]

_system_clock = SystemClock()


def get_clock() -> Clock:
    """Time source for ledger operations (overridden in tests)."""
    return _system_clock


LedgerClock = Annotated[Clock, Depends(get_clock)]


async def get_current_identity(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> str:
    """Hex identity of the caller, taken from the bearer token subject."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return parse_identity(payload.sub)
    except InvalidIdentity:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token subject is not a valid identity",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None


CurrentIdentity = Annotated[str, Depends(get_current_identity)]


def get_mover(db: DbSession, settings: AppSettings) -> LedgerAssetMover:
    return LedgerAssetMover(db, settings.asset_mover_id, program_id=settings.program_id_bytes)


Mover = Annotated[LedgerAssetMover, Depends(get_mover)]


def get_reader(db: DbSession, settings: AppSettings) -> RegistryReader:
    return RegistryReader(db, settings.program_id_bytes)


def get_platform_governance(db: DbSession, settings: AppSettings) -> PlatformGovernance:
    return PlatformGovernance(db, settings)


def get_project_governance(
    db: DbSession,
    mover: Mover,
    settings: AppSettings,
) -> ProjectGovernance:
    return ProjectGovernance(db, mover, settings)


def get_stake_ledger(
    db: DbSession,
    mover: Mover,
    clock: LedgerClock,
    settings: AppSettings,
) -> StakeLedger:
    return StakeLedger(db, mover, clock, settings)


Reader = Annotated[RegistryReader, Depends(get_reader)]
PlatformGov = Annotated[PlatformGovernance, Depends(get_platform_governance)]
ProjectGov = Annotated[ProjectGovernance, Depends(get_project_governance)]
Ledger = Annotated[StakeLedger, Depends(get_stake_ledger)]
