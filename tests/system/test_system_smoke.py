"""
System smoke test: full API flow in-process with SQLite.
Verifies health, signed login, platform and project governance, staking,
both withdrawal paths and the error body of rejected operations.
Uses a temp file DB so all connections share the same database.
"""

import os
import tempfile
import time
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

# Use file-based SQLite so all connections share the same DB (in-memory is per-connection)
_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
TEST_DB_PATH = _tmp.name
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
# Force config reload so app uses test DB
from staking_ledger.config import get_settings
get_settings.cache_clear()

from staking_ledger.api.deps import get_clock
from staking_ledger.database import get_db
from staking_ledger.kernel.assets import LedgerAssetMover
from staking_ledger.kernel.clock import FixedClock
from staking_ledger.kernel.events import EventStore
from staking_ledger.kernel.identity import create_access_token, login_message
from staking_ledger.kernel.models import Base, EventType
from staking_ledger.main import app
from tests.conftest import ASSET_ID, make_identity, make_signing_key


TEST_ENGINE = create_async_engine(
    f"sqlite+aiosqlite:///{TEST_DB_PATH}",
    echo=False,
    connect_args={"check_same_thread": False},
)
TEST_SESSION_MAKER = async_sessionmaker(
    TEST_ENGINE,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

API = "/api/v1"
DAY = 86_400

ADMIN = make_identity(21)
ALICE = make_identity(22)
MALLORY = make_identity(23)


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TEST_SESSION_MAKER() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def auth(identity: str) -> dict:
    token, _, _ = create_access_token(identity)
    return {"Authorization": f"Bearer {token}"}


async def mint(address: str, amount: int) -> None:
    async with TEST_SESSION_MAKER() as session:
        mover = LedgerAssetMover(session, get_settings().asset_mover_id)
        await mover.mint_to(address, amount)
        await session.commit()


@pytest.fixture(scope="module", autouse=True)
def _remove_db_file():
    yield
    if os.path.exists(TEST_DB_PATH):
        os.unlink(TEST_DB_PATH)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(start=int(time.time()))


@pytest_asyncio.fixture
async def client(clock: FixedClock):
    """Async client with a fresh schema and a controllable clock."""
    async with TEST_ENGINE.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_clock, None)
    await TEST_ENGINE.dispose()


async def bootstrap(client: AsyncClient) -> dict:
    """Initialize the platform, register project 0 and fund Alice."""
    r = await client.post(f"{API}/platform/initialize", headers=auth(ADMIN))
    assert r.status_code == 201, r.text

    r = await client.post(
        f"{API}/projects",
        json={"name": "Smoke", "allowed_durations": [7, 14, 30], "asset_id": ASSET_ID},
        headers=auth(ADMIN),
    )
    assert r.status_code == 201, r.text
    project = r.json()

    for identity in (ADMIN, ALICE):
        r = await client.post(f"{API}/accounts", json={"asset_id": ASSET_ID}, headers=auth(identity))
        assert r.status_code == 201, r.text
        if identity == ALICE:
            alice_account = r.json()["address"]
        else:
            admin_account = r.json()["address"]

    await mint(alice_account, 10_000)
    return {"project": project, "alice_account": alice_account, "admin_account": admin_account}


async def balance(client: AsyncClient, address: str) -> int:
    r = await client.get(f"{API}/accounts/{address}")
    assert r.status_code == 200, r.text
    return r.json()["balance"]


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    """Health endpoint responds."""
    r = await client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["program_id"] == get_settings().program_id
    assert "X-Request-ID" in r.headers


@pytest.mark.asyncio
async def test_signed_login(client: AsyncClient, clock: FixedClock):
    """A signed login yields a token the API accepts."""
    key = make_signing_key(22)
    issued_at = clock.now()
    signature = key.sign(login_message(ALICE, issued_at)).signature.hex()

    r = await client.post(
        f"{API}/auth/token",
        json={"identity": ALICE, "issued_at": issued_at, "signature": signature},
    )
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["identity"] == ALICE
    assert data["token_type"] == "bearer"

    r = await client.post(
        f"{API}/platform/initialize",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert r.status_code == 201
    assert r.json()["authorities"] == [ALICE]


@pytest.mark.asyncio
async def test_login_with_wrong_key(client: AsyncClient, clock: FixedClock):
    issued_at = clock.now()
    signature = make_signing_key(23).sign(login_message(ALICE, issued_at)).signature.hex()

    r = await client.post(
        f"{API}/auth/token",
        json={"identity": ALICE, "issued_at": issued_at, "signature": signature},
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_mutations_require_token(client: AsyncClient):
    r = await client.post(f"{API}/platform/initialize")
    assert r.status_code == 401

    r = await client.post(
        f"{API}/platform/initialize",
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_full_flow(client: AsyncClient, clock: FixedClock):
    """Initialize -> register -> stake -> early unstake fails -> unstake -> receipt."""
    setup = await bootstrap(client)
    project = setup["project"]
    assert project["project_id"] == 0
    assert project["fee_recipient"] == ADMIN

    r = await client.put(
        f"{API}/projects/0/config",
        json={"fee_recipient": ADMIN, "unstake_fee_bps": 250, "emergency_unstake_fee_bps": 1000},
        headers=auth(ADMIN),
    )
    assert r.status_code == 200, r.text

    r = await client.post(
        f"{API}/projects/0/stakes",
        json={"amount": 1000, "duration_days": 14, "stake_id": 1},
        headers=auth(ALICE),
    )
    assert r.status_code == 201, r.text
    stake = r.json()
    assert stake["status"] == "active"
    assert stake["lockup_end"] == stake["deposit_time"] + 14 * DAY
    assert await balance(client, project["custody_ref"]) == 1000

    r = await client.post(f"{API}/projects/0/stakes/1/unstake", headers=auth(ALICE))
    assert r.status_code == 409
    assert r.json()["code"] == "LockupPeriodNotEnded"
    assert r.json()["category"] == "temporal"

    r = await client.get(f"{API}/projects/0/stakes/1/receipt", headers=auth(ALICE))
    assert r.status_code == 404
    assert r.json()["code"] == "UnstakeRecordNotFound"

    clock.advance_days(14)
    r = await client.post(f"{API}/projects/0/stakes/1/emergency-unstake", headers=auth(ALICE))
    assert r.status_code == 409
    assert r.json()["code"] == "LockupPeriodEnded"

    r = await client.post(f"{API}/projects/0/stakes/1/unstake", headers=auth(ALICE))
    assert r.status_code == 200, r.text
    settlement = r.json()
    assert settlement["stake"]["active"] is False
    assert settlement["stake"]["status"] == "unstaked"
    assert settlement["receipt"]["fee"] == 25
    assert settlement["receipt"]["payout"] == 975

    assert await balance(client, project["custody_ref"]) == 0
    assert await balance(client, setup["admin_account"]) == 25
    assert await balance(client, setup["alice_account"]) == 9_975

    r = await client.get(f"{API}/projects/0/stakes/1/receipt", headers=auth(ALICE))
    assert r.status_code == 200
    assert r.json()["status"] == "unstaked"

    r = await client.post(f"{API}/projects/0/stakes/1/unstake", headers=auth(ALICE))
    assert r.status_code == 409
    assert r.json()["code"] == "StakeNotActive"


@pytest.mark.asyncio
async def test_emergency_unstake_flow(client: AsyncClient, clock: FixedClock):
    setup = await bootstrap(client)
    await client.put(
        f"{API}/projects/0/config",
        json={"fee_recipient": ADMIN, "unstake_fee_bps": 0, "emergency_unstake_fee_bps": 1000},
        headers=auth(ADMIN),
    )
    r = await client.post(
        f"{API}/projects/0/stakes",
        json={"amount": 2000, "duration_days": 30, "stake_id": 5},
        headers=auth(ALICE),
    )
    assert r.status_code == 201, r.text

    clock.advance_days(1)
    r = await client.post(f"{API}/projects/0/stakes/5/emergency-unstake", headers=auth(ALICE))
    assert r.status_code == 200, r.text
    assert r.json()["receipt"]["fee"] == 200
    assert r.json()["stake"]["status"] == "emergency_unstaked"
    assert await balance(client, setup["alice_account"]) == 9_800

    r = await client.get(f"{API}/projects/0/stakes", params={"active_only": True}, headers=auth(ALICE))
    assert r.status_code == 200
    assert r.json() == []


@pytest.mark.asyncio
async def test_rejections_map_to_status(client: AsyncClient):
    await bootstrap(client)

    r = await client.post(
        f"{API}/projects",
        json={"name": "Rogue", "allowed_durations": [7], "asset_id": ASSET_ID},
        headers=auth(MALLORY),
    )
    assert r.status_code == 403
    assert r.json()["code"] == "NotPlatformAuthority"

    r = await client.post(
        f"{API}/projects",
        json={"name": "x" * 33, "allowed_durations": [7], "asset_id": ASSET_ID},
        headers=auth(ADMIN),
    )
    assert r.status_code == 422
    assert r.json()["code"] == "NameTooLong"

    r = await client.post(
        f"{API}/platform/authorities",
        json={"authority": ADMIN},
        headers=auth(ADMIN),
    )
    assert r.status_code == 409
    assert r.json()["code"] == "AuthorityAlreadyExists"

    r = await client.delete(f"{API}/platform/authorities/{ADMIN}", headers=auth(ADMIN))
    assert r.status_code == 409
    assert r.json()["code"] == "CannotRemoveLastAuthority"

    r = await client.post(
        f"{API}/projects/0/stakes",
        json={"amount": 100, "duration_days": 15, "stake_id": 1},
        headers=auth(ALICE),
    )
    assert r.status_code == 422
    assert r.json()["code"] == "InvalidDuration"

    r = await client.post(
        f"{API}/projects/0/stakes",
        json={"amount": 1_000_000, "duration_days": 7, "stake_id": 1},
        headers=auth(ALICE),
    )
    assert r.status_code == 400
    assert r.json()["code"] == "InsufficientFunds"

    r = await client.get(f"{API}/projects/0/stakes/1", headers=auth(ALICE))
    assert r.status_code == 404
    assert r.json()["code"] == "StakeNotFound"

    r = await client.get(f"{API}/projects/42")
    assert r.status_code == 404
    assert r.json()["code"] == "ProjectNotFound"

    r = await client.get(f"{API}/platform")
    assert r.status_code == 200
    assert r.json()["project_count"] == 1


@pytest.mark.asyncio
async def test_request_context_reaches_audit_log(client: AsyncClient):
    """Mutations record the caller's request id and user agent on their events."""
    r = await client.post(
        f"{API}/platform/initialize",
        headers={**auth(ADMIN), "X-Request-ID": "init-0001", "User-Agent": "ledger-cli/1.2"},
    )
    assert r.status_code == 201, r.text
    assert r.headers["X-Request-ID"] == "init-0001"

    r = await client.post(
        f"{API}/accounts",
        json={"asset_id": ASSET_ID},
        headers={**auth(ADMIN), "X-Request-ID": "bad id with spaces"},
    )
    assert r.status_code == 201, r.text
    assert r.headers["X-Request-ID"] != "bad id with spaces"

    async with TEST_SESSION_MAKER() as session:
        events = await EventStore(session).get_actor_activity(ADMIN)
    initialized = [e for e in events if EventType(e.event_type) == EventType.PLATFORM_INITIALIZED]
    assert len(initialized) == 1
    assert initialized[0].request_id == "init-0001"
    assert initialized[0].user_agent == "ledger-cli/1.2"


@pytest.mark.asyncio
async def test_reopening_account_is_conflict(client: AsyncClient):
    r = await client.post(f"{API}/accounts", json={"asset_id": ASSET_ID}, headers=auth(ALICE))
    assert r.status_code == 201, r.text

    r = await client.post(f"{API}/accounts", json={"asset_id": ASSET_ID}, headers=auth(ALICE))
    assert r.status_code == 409
    assert r.json()["code"] == "RecordAlreadyExists"
