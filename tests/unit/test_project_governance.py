"""Unit tests for project registration and policy updates."""

import pytest

from staking_ledger.kernel.addressing import VaultAuthority, project_address, vault_address
from staking_ledger.kernel.errors import (
    InvalidDuration,
    InvalidFeeBps,
    NameTooLong,
    NotPlatformAuthority,
    NotProjectAuthority,
    ProjectNotFound,
    TooManyDurations,
)
from staking_ledger.kernel.events import EventStore
from staking_ledger.kernel.models import EventType
from staking_ledger.kernel.storage import PROJECT_MAX_SIZE, project_size
from tests.conftest import ASSET_ID, OTHER_ASSET_ID, TEST_MOVER_ID, TEST_PROGRAM_ID

PROGRAM_ID = bytes.fromhex(TEST_PROGRAM_ID)


class TestRegisterProject:

    @pytest.mark.asyncio
    async def test_registration_fields(self, project, admin):
        assert project.project_id == 0
        assert project.address == project_address(PROGRAM_ID, 0).hex
        assert project.name == "Alpha"
        assert project.project_authority == admin
        assert project.fee_recipient == admin
        assert project.asset_id == ASSET_ID
        assert project.asset_mover_id == TEST_MOVER_ID
        assert project.unstake_fee_bps == 0
        assert project.emergency_unstake_fee_bps == 0
        assert project.allowed_durations == [7, 14, 30]
        assert project.data_len == PROJECT_MAX_SIZE

    @pytest.mark.asyncio
    async def test_vault_owned_by_vault_authority(self, project, mover):
        vault = await mover.get_account(project.custody_ref)

        assert project.custody_ref == vault_address(PROGRAM_ID, 0).hex
        assert vault.owner == VaultAuthority.derive(PROGRAM_ID, 0).authority
        assert vault.asset_id == ASSET_ID
        assert vault.balance == 0

    @pytest.mark.asyncio
    async def test_project_ids_are_sequential(self, project_gov, project, reader, admin):
        second = await project_gov.register_project(admin, "Beta", [1], OTHER_ASSET_ID)

        assert second.project_id == 1
        assert second.custody_ref != project.custody_ref
        assert (await reader.platform()).project_count == 2
        assert [p.project_id for p in await reader.list_projects()] == [0, 1]

    @pytest.mark.asyncio
    async def test_empty_durations_allowed(self, project_gov, platform, admin):
        project = await project_gov.register_project(admin, "Closed", [], ASSET_ID)

        assert project.allowed_durations == []

    @pytest.mark.asyncio
    async def test_name_limit_counts_bytes(self, project_gov, platform, admin):
        await project_gov.register_project(admin, "x" * 32, [7], ASSET_ID)

        with pytest.raises(NameTooLong):
            await project_gov.register_project(admin, "é" * 17, [7], OTHER_ASSET_ID)

    @pytest.mark.asyncio
    async def test_too_many_durations(self, project_gov, platform, reader, admin):
        with pytest.raises(TooManyDurations):
            await project_gov.register_project(admin, "Wide", list(range(1, 12)), ASSET_ID)

        assert (await reader.platform()).project_count == 0

    @pytest.mark.asyncio
    async def test_duplicate_durations(self, project_gov, platform, admin):
        with pytest.raises(InvalidDuration):
            await project_gov.register_project(admin, "Dupes", [7, 7], ASSET_ID)

    @pytest.mark.asyncio
    async def test_requires_platform_authority(self, project_gov, platform, alice):
        with pytest.raises(NotPlatformAuthority):
            await project_gov.register_project(alice, "Rogue", [7], ASSET_ID)

    @pytest.mark.asyncio
    async def test_unknown_project(self, reader, platform):
        with pytest.raises(ProjectNotFound):
            await reader.project(5)


class TestUpdateProjectConfig:

    @pytest.mark.asyncio
    async def test_update_fees_and_recipient(self, project_gov, project, admin, bob):
        updated = await project_gov.update_project_config(admin, 0, bob, 250, 1000)

        assert updated.fee_recipient == bob
        assert updated.unstake_fee_bps == 250
        assert updated.emergency_unstake_fee_bps == 1000

    @pytest.mark.asyncio
    async def test_fee_bounds(self, project_gov, project, admin):
        await project_gov.update_project_config(admin, 0, admin, 10000, 0)

        with pytest.raises(InvalidFeeBps):
            await project_gov.update_project_config(admin, 0, admin, 0, 10001)

        assert project.unstake_fee_bps == 10000
        assert project.emergency_unstake_fee_bps == 0

    @pytest.mark.asyncio
    async def test_platform_authority_is_not_enough(self, project_gov, platform_gov, project, admin, alice):
        await platform_gov.add_authority(admin, alice)

        with pytest.raises(NotProjectAuthority):
            await project_gov.update_project_config(alice, 0, alice, 0, 0)

    @pytest.mark.asyncio
    async def test_missing_project(self, project_gov, project, admin):
        with pytest.raises(ProjectNotFound):
            await project_gov.update_project_config(admin, 9, admin, 0, 0)


class TestUpdateAllowedDurations:

    @pytest.mark.asyncio
    async def test_record_resized_to_exact_size(self, project_gov, project, admin):
        updated = await project_gov.update_allowed_durations(admin, 0, [1, 2, 3, 4, 5])

        assert updated.allowed_durations == [1, 2, 3, 4, 5]
        assert updated.data_len == project_size(len("Alpha"), 5)
        assert updated.deposit == updated.data_len * 10

    @pytest.mark.asyncio
    async def test_maximum_list_fits(self, project_gov, project, admin):
        durations = list(range(10, 20))

        updated = await project_gov.update_allowed_durations(admin, 0, durations)

        assert updated.allowed_durations == durations

    @pytest.mark.asyncio
    async def test_too_many_leaves_list_unchanged(self, project_gov, project, admin):
        with pytest.raises(TooManyDurations):
            await project_gov.update_allowed_durations(admin, 0, list(range(11)))

        assert project.allowed_durations == [7, 14, 30]
        assert project.data_len == PROJECT_MAX_SIZE

    @pytest.mark.asyncio
    async def test_requires_project_authority(self, project_gov, project, bob):
        with pytest.raises(NotProjectAuthority):
            await project_gov.update_allowed_durations(bob, 0, [1])

    @pytest.mark.asyncio
    async def test_changes_are_logged(self, project_gov, project, db_session, admin):
        await project_gov.update_allowed_durations(admin, 0, [90])
        await db_session.flush()

        history = await EventStore(db_session).get_entity_history(
            "project",
            project.address,
            event_types=[EventType.PROJECT_DURATIONS_UPDATED],
        )

        assert len(history) == 1
        assert history[0].payload["previous_durations"] == [7, 14, 30]
        assert history[0].payload["allowed_durations"] == [90]
