"""
Pytest fixtures for staking ledger tests.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from nacl.signing import SigningKey
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from staking_ledger.config import Settings
from staking_ledger.engines.governance import PlatformGovernance, ProjectGovernance
from staking_ledger.engines.ledger import RegistryReader, StakeLedger
from staking_ledger.kernel.assets import LedgerAssetMover
from staking_ledger.kernel.clock import FixedClock
from staking_ledger.kernel.models import Base, ProjectRegistry


# In-memory SQLite shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PROGRAM_ID = "3c" * 32
TEST_MOVER_ID = "test-asset-mover"
ASSET_ID = "a5" * 32
OTHER_ASSET_ID = "b6" * 32
STARTING_BALANCE = 10_000


def make_signing_key(seed: int) -> SigningKey:
    return SigningKey(bytes([seed]) * 32)


def make_identity(seed: int) -> str:
    return make_signing_key(seed).verify_key.encode().hex()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url=TEST_DATABASE_URL,
        program_id=TEST_PROGRAM_ID,
        asset_mover_id=TEST_MOVER_ID,
        storage_deposit_per_byte=10,
        secret_key="test-secret-key-for-testing-only",
    )


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(start=1_700_000_000)


@pytest.fixture
def admin() -> str:
    """Platform authority; also authority and fee recipient of the test project."""
    return make_identity(1)


@pytest.fixture
def alice() -> str:
    return make_identity(2)


@pytest.fixture
def bob() -> str:
    return make_identity(3)


@pytest.fixture
def mover(db_session: AsyncSession, settings: Settings) -> LedgerAssetMover:
    return LedgerAssetMover(db_session, settings.asset_mover_id, program_id=settings.program_id_bytes)


@pytest.fixture
def reader(db_session: AsyncSession, settings: Settings) -> RegistryReader:
    return RegistryReader(db_session, settings.program_id_bytes)


@pytest.fixture
def platform_gov(db_session: AsyncSession, settings: Settings) -> PlatformGovernance:
    return PlatformGovernance(db_session, settings)


@pytest.fixture
def project_gov(
    db_session: AsyncSession,
    mover: LedgerAssetMover,
    settings: Settings,
) -> ProjectGovernance:
    return ProjectGovernance(db_session, mover, settings)


@pytest.fixture
def ledger(
    db_session: AsyncSession,
    mover: LedgerAssetMover,
    clock: FixedClock,
    settings: Settings,
) -> StakeLedger:
    return StakeLedger(db_session, mover, clock, settings)


@pytest_asyncio.fixture
async def platform(platform_gov: PlatformGovernance, db_session: AsyncSession, admin: str):
    """Initialized platform with ``admin`` as sole authority."""
    record = await platform_gov.initialize(admin)
    await db_session.commit()
    return record


@pytest_asyncio.fixture
async def project(
    platform,
    project_gov: ProjectGovernance,
    mover: LedgerAssetMover,
    db_session: AsyncSession,
    admin: str,
) -> ProjectRegistry:
    """Project 0 allowing 7, 14 and 30 day lockups, fees still at 0."""
    record = await project_gov.register_project(admin, "Alpha", [7, 14, 30], ASSET_ID)
    await mover.open_account(owner=admin, asset_id=ASSET_ID)
    await db_session.commit()
    return record


@pytest_asyncio.fixture
async def alice_account(
    project: ProjectRegistry,
    mover: LedgerAssetMover,
    db_session: AsyncSession,
    alice: str,
) -> str:
    """Alice's associated account holding STARTING_BALANCE of the project asset."""
    account = await mover.open_account(owner=alice, asset_id=ASSET_ID)
    await mover.mint_to(account.address, STARTING_BALANCE)
    await db_session.commit()
    return account.address


async def balance_of(mover: LedgerAssetMover, address: str) -> int:
    account = await mover.get_account(address)
    assert account is not None
    return account.balance
