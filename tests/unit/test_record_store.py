"""Unit tests for record allocation and the u64 column type."""

import pytest
from sqlalchemy.exc import StatementError

from staking_ledger.kernel.addressing import platform_address
from staking_ledger.kernel.errors import RecordAlreadyExists
from staking_ledger.kernel.limits import U64_MAX
from staking_ledger.kernel.models import PlatformRegistry
from staking_ledger.kernel.storage import RecordStore, StorageError, platform_size
from tests.conftest import TEST_PROGRAM_ID

PROGRAM_ID = bytes.fromhex(TEST_PROGRAM_ID)
ALICE = "11" * 32
BOB = "22" * 32


@pytest.fixture
def store(db_session) -> RecordStore:
    return RecordStore(db_session, deposit_per_byte=10)


class TestRecordStore:
    """Tests for RecordStore."""

    @pytest.mark.asyncio
    async def test_create_tracks_size_and_deposit(self, store):
        derived = platform_address(PROGRAM_ID)

        record = await store.create(
            PlatformRegistry, derived, platform_size(1), payer=ALICE,
            authorities=[ALICE], project_count=0,
        )

        assert record.address == derived.hex
        assert record.bump == derived.bump
        assert record.data_len == platform_size(1) == 52
        assert record.deposit == 520

    @pytest.mark.asyncio
    async def test_create_twice_rejected(self, store):
        derived = platform_address(PROGRAM_ID)
        await store.create(
            PlatformRegistry, derived, platform_size(1), payer=ALICE,
            authorities=[ALICE], project_count=0,
        )

        with pytest.raises(RecordAlreadyExists):
            await store.create(
                PlatformRegistry, derived, platform_size(1), payer=BOB,
                authorities=[BOB], project_count=0,
            )

    @pytest.mark.asyncio
    async def test_constraint_violation_maps_to_already_exists(self, store, db_session, monkeypatch):
        """A creation that loses the race to a committed record is still RecordAlreadyExists."""
        derived = platform_address(PROGRAM_ID)
        await store.create(
            PlatformRegistry, derived, platform_size(1), payer=ALICE,
            authorities=[ALICE], project_count=0,
        )
        await db_session.commit()
        db_session.expunge_all()

        async def never_exists(model, address):
            return False

        monkeypatch.setattr(store, "exists", never_exists)

        with pytest.raises(RecordAlreadyExists):
            await store.create(
                PlatformRegistry, derived, platform_size(1), payer=BOB,
                authorities=[BOB], project_count=0,
            )

    @pytest.mark.asyncio
    async def test_resize_returns_deposit_delta(self, store):
        record = await store.create(
            PlatformRegistry, platform_address(PROGRAM_ID), platform_size(1), payer=ALICE,
            authorities=[ALICE], project_count=0,
        )

        assert store.resize(record, platform_size(2), payer=ALICE) == 320
        assert record.data_len == 84
        assert store.resize(record, platform_size(1), payer=ALICE) == -320
        assert record.deposit == 520

    @pytest.mark.asyncio
    async def test_contents_larger_than_allocation_detected(self, store):
        record = await store.create(
            PlatformRegistry, platform_address(PROGRAM_ID), platform_size(1), payer=ALICE,
            authorities=[ALICE], project_count=0,
        )
        record.authorities = [ALICE, BOB]

        with pytest.raises(StorageError):
            store.check_fits(record)

    @pytest.mark.asyncio
    async def test_undersized_allocation_rejected_on_create(self, store):
        with pytest.raises(StorageError):
            await store.create(
                PlatformRegistry, platform_address(PROGRAM_ID), platform_size(0), payer=ALICE,
                authorities=[ALICE], project_count=0,
            )


class TestUint64Column:

    @pytest.mark.asyncio
    async def test_full_u64_range_round_trips(self, store, db_session):
        derived = platform_address(PROGRAM_ID)
        await store.create(
            PlatformRegistry, derived, platform_size(1), payer=ALICE,
            authorities=[ALICE], project_count=U64_MAX,
        )
        await db_session.commit()
        db_session.expunge_all()

        loaded = await db_session.get(PlatformRegistry, derived.hex)

        assert loaded.project_count == U64_MAX

    @pytest.mark.asyncio
    async def test_out_of_range_value_rejected(self, store, db_session):
        with pytest.raises((StatementError, ValueError)):
            await store.create(
                PlatformRegistry, platform_address(PROGRAM_ID), platform_size(1), payer=ALICE,
                authorities=[ALICE], project_count=U64_MAX + 1,
            )
