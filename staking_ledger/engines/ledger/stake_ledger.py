"""
Stake Ledger - deposits, lockups and the two withdrawal paths.

    Active --unstake (now >= lockup_end)--------------> Unstaked
    Active --emergency_unstake (now < lockup_end)-----> EmergencyUnstaked

Each operation reads the clock once, validates everything it can before
asking the asset mover to move anything, and leaves no partial state behind:
the mover applies all legs or none, and the surrounding unit of work rolls
back on any exception.
"""

from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from staking_ledger.config import Settings, get_settings
from staking_ledger.engines.ledger.reader import RegistryReader
from staking_ledger.engines.policy import (
    FeeSplit,
    ensure_lockup_ended,
    ensure_within_lockup,
    split_amount,
    validate_amount,
    validate_duration,
    validate_stake_id,
)
from staking_ledger.kernel.addressing import IdentitySigner, VaultAuthority, unstake_address
from staking_ledger.kernel.assets import AssetMover, MoveRequest
from staking_ledger.kernel.clock import Clock
from staking_ledger.kernel.errors import (
    InvalidAssetMover,
    InvalidFeeWallet,
    RecordAlreadyExists,
    StakeNotActive,
)
from staking_ledger.kernel.events import EmergencyUnstakeEvent, EventStore, StakeEvent, UnstakeEvent
from staking_ledger.kernel.identity import parse_identity
from staking_ledger.kernel.models import (
    EventType,
    ProjectRegistry,
    StakeRecord,
    StakeStatus,
    UnstakeRecord,
)
from staking_ledger.kernel.storage import STAKE_SIZE, UNSTAKE_SIZE, RecordStore
from staking_ledger.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Settlement:
    """Outcome of a withdrawal."""

    stake: StakeRecord
    receipt: UnstakeRecord
    split: FeeSplit
    lockup_end: int


class StakeLedger:
    """
    The staking state machine for every project on the platform.

    Args:
        session: Unit of work the operation runs in
        mover: Asset mover; must be the one the project pinned at registration
        clock: Time source read once per operation
        settings: Defaults to the cached application settings
    """

    def __init__(
        self,
        session: AsyncSession,
        mover: AssetMover,
        clock: Clock,
        settings: Optional[Settings] = None,
    ):
        self.session = session
        self.mover = mover
        self.clock = clock
        self.settings = settings or get_settings()
        self.program_id = self.settings.program_id_bytes
        self.store = RecordStore(session, self.settings.storage_deposit_per_byte)
        self.reader = RegistryReader(session, self.program_id)
        self.events = EventStore(session)

    async def stake(
        self,
        caller: str,
        project_id: int,
        amount: int,
        duration_days: int,
        stake_id: int,
        source_account: Optional[str] = None,
    ) -> StakeRecord:
        """
        Lock ``amount`` in the project's vault for ``duration_days``.

        ``source_account`` defaults to the depositor's associated account for
        the project's asset; the mover rejects it unless the depositor owns it.
        """
        depositor = parse_identity(caller)
        validate_amount(amount)
        validate_stake_id(stake_id)

        project = await self.reader.project(project_id)
        validate_duration(duration_days, project.allowed_durations)
        self._check_mover(project)

        derived = self.reader.stake_address_for(project, depositor, stake_id)
        if await self.store.exists(StakeRecord, derived.hex):
            raise RecordAlreadyExists(address=derived.hex, stake_id=stake_id)

        now = self.clock.now()
        source = source_account or self.mover.associated_address(depositor, project.asset_id)
        await self.mover.move(
            MoveRequest(
                from_custody=source,
                to_custody=project.custody_ref,
                authority=IdentitySigner(depositor),
                amount=amount,
            )
        )

        record = await self.store.create(
            StakeRecord,
            derived,
            STAKE_SIZE,
            payer=depositor,
            depositor=depositor,
            project_ref=project.address,
            project_id=project.project_id,
            stake_id=stake_id,
            amount=amount,
            deposit_time=now,
            duration_days=duration_days,
            active=True,
            status=StakeStatus.ACTIVE,
        )

        await self.events.log_from_model(
            event_type=EventType.STAKE_CREATED,
            entity_type="stake",
            entity_id=record.address,
            actor=depositor,
            payload_model=StakeEvent(
                depositor=depositor,
                project_id=project.project_id,
                stake_id=stake_id,
                amount=amount,
                duration_days=duration_days,
            ),
        )
        logger.info(
            "Stake created",
            extra={
                "depositor": depositor,
                "project_id": project.project_id,
                "stake_id": stake_id,
                "amount": amount,
                "duration_days": duration_days,
            },
        )
        return record

    async def unstake(
        self,
        caller: str,
        project_id: int,
        stake_id: int,
        fee_account: Optional[str] = None,
        destination_account: Optional[str] = None,
    ) -> Settlement:
        """Withdraw after the lockup, less ``unstake_fee_bps``."""
        return await self._settle(
            caller,
            project_id,
            stake_id,
            emergency=False,
            fee_account=fee_account,
            destination_account=destination_account,
        )

    async def emergency_unstake(
        self,
        caller: str,
        project_id: int,
        stake_id: int,
        fee_account: Optional[str] = None,
        destination_account: Optional[str] = None,
    ) -> Settlement:
        """Withdraw before the lockup ends, less ``emergency_unstake_fee_bps``."""
        return await self._settle(
            caller,
            project_id,
            stake_id,
            emergency=True,
            fee_account=fee_account,
            destination_account=destination_account,
        )

    async def _settle(
        self,
        caller: str,
        project_id: int,
        stake_id: int,
        *,
        emergency: bool,
        fee_account: Optional[str],
        destination_account: Optional[str],
    ) -> Settlement:
        depositor = parse_identity(caller)
        validate_stake_id(stake_id)

        project = await self.reader.project(project_id)
        self._check_mover(project)
        stake = await self.reader.stake(project, depositor, stake_id, for_update=True)
        if not stake.active:
            raise StakeNotActive(stake_id=stake_id, status=stake.status)

        now = self.clock.now()
        if emergency:
            end = ensure_within_lockup(now, stake.deposit_time, stake.duration_days)
            fee_bps = project.emergency_unstake_fee_bps
            status = StakeStatus.EMERGENCY_UNSTAKED
        else:
            end = ensure_lockup_ended(now, stake.deposit_time, stake.duration_days)
            fee_bps = project.unstake_fee_bps
            status = StakeStatus.UNSTAKED

        split = split_amount(stake.amount, fee_bps)
        vault_authority = VaultAuthority.derive(self.program_id, project.project_id)

        requests: List[MoveRequest] = []
        if split.fee > 0:
            fee_target = await self._fee_account(project, fee_account)
            requests.append(
                MoveRequest(
                    from_custody=project.custody_ref,
                    to_custody=fee_target,
                    authority=vault_authority,
                    amount=split.fee,
                )
            )
        if split.payout > 0:
            destination = destination_account or self.mover.associated_address(
                depositor, project.asset_id
            )
            requests.append(
                MoveRequest(
                    from_custody=project.custody_ref,
                    to_custody=destination,
                    authority=vault_authority,
                    amount=split.payout,
                )
            )
        await self.mover.move_all(requests)

        await self._claim(stake, status)
        receipt = await self._write_receipt(stake, split, now, status)

        await self._log_settlement(stake, status)
        logger.info(
            "Emergency unstake settled" if emergency else "Unstake settled",
            extra={
                "depositor": depositor,
                "project_id": project.project_id,
                "stake_id": stake_id,
                "amount": split.amount,
                "fee": split.fee,
                "payout": split.payout,
            },
        )
        return Settlement(stake=stake, receipt=receipt, split=split, lockup_end=end)

    async def _fee_account(self, project: ProjectRegistry, fee_account: Optional[str]) -> str:
        """Resolve the fee destination; it must belong to the fee recipient."""
        address = fee_account or self.mover.associated_address(
            project.fee_recipient, project.asset_id
        )
        account = await self.mover.get_account(address)
        if account is not None and (
            account.owner != project.fee_recipient or account.asset_id != project.asset_id
        ):
            raise InvalidFeeWallet(account=address, fee_recipient=project.fee_recipient)
        return address

    async def _claim(self, stake: StakeRecord, status: StakeStatus) -> None:
        """
        Flip the stake inactive in the database.

        The update only matches a row that is still active, so of two
        settlements racing on one stake exactly one claims it; the other
        raises and its unit of work rolls back its transfers.
        """
        result = await self.session.execute(
            update(StakeRecord)
            .where(StakeRecord.address == stake.address, StakeRecord.active.is_(True))
            .values(active=False, status=status.value)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise StakeNotActive(stake_id=stake.stake_id)
        stake.active = False
        stake.status = status

    async def _write_receipt(
        self,
        stake: StakeRecord,
        split: FeeSplit,
        now: int,
        status: StakeStatus,
    ) -> UnstakeRecord:
        """Create the stake's receipt; one already present means it was settled."""
        try:
            return await self.store.create(
                UnstakeRecord,
                unstake_address(self.program_id, bytes.fromhex(stake.address)),
                UNSTAKE_SIZE,
                payer=stake.depositor,
                stake_ref=stake.address,
                depositor=stake.depositor,
                project_ref=stake.project_ref,
                project_id=stake.project_id,
                stake_id=stake.stake_id,
                amount=split.amount,
                fee=split.fee,
                payout=split.payout,
                settlement_time=now,
                status=status,
            )
        except RecordAlreadyExists as exc:
            raise StakeNotActive(stake_id=stake.stake_id) from exc

    async def _log_settlement(self, stake: StakeRecord, status: StakeStatus) -> None:
        if status == StakeStatus.EMERGENCY_UNSTAKED:
            event_type = EventType.STAKE_EMERGENCY_UNSTAKED
            payload_cls = EmergencyUnstakeEvent
        else:
            event_type = EventType.STAKE_UNSTAKED
            payload_cls = UnstakeEvent

        await self.events.log_from_model(
            event_type=event_type,
            entity_type="stake",
            entity_id=stake.address,
            actor=stake.depositor,
            payload_model=payload_cls(
                depositor=stake.depositor,
                project_id=stake.project_id,
                stake_id=stake.stake_id,
                amount=stake.amount,
            ),
        )

    def _check_mover(self, project: ProjectRegistry) -> None:
        if self.mover.mover_id != project.asset_mover_id:
            raise InvalidAssetMover(expected=project.asset_mover_id, got=self.mover.mover_id)
