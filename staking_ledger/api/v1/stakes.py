"""
Stake endpoints. Every route acts for the bearer-token identity.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from staking_ledger.api.deps import CurrentIdentity, Ledger, Reader
from staking_ledger.engines.policy import lockup_end
from staking_ledger.kernel.errors import UnstakeRecordNotFound
from staking_ledger.kernel.models import StakeRecord, UnstakeRecord
from staking_ledger.schemas.stake import (
    SettlementResponse,
    StakeCreate,
    StakeResponse,
    UnstakeReceiptResponse,
    UnstakeRequest,
)

router = APIRouter()


def _enum_val(e):
    """Safely get enum value (freshly assigned attributes are still enums)."""
    return e.value if hasattr(e, "value") else e


def _stake_response(stake: StakeRecord) -> StakeResponse:
    return StakeResponse(
        address=stake.address,
        depositor=stake.depositor,
        project_id=stake.project_id,
        stake_id=stake.stake_id,
        amount=stake.amount,
        deposit_time=stake.deposit_time,
        duration_days=stake.duration_days,
        lockup_end=lockup_end(stake.deposit_time, stake.duration_days),
        active=stake.active,
        status=_enum_val(stake.status),
    )


def _receipt_response(receipt: UnstakeRecord) -> UnstakeReceiptResponse:
    return UnstakeReceiptResponse(
        address=receipt.address,
        stake_ref=receipt.stake_ref,
        depositor=receipt.depositor,
        project_id=receipt.project_id,
        stake_id=receipt.stake_id,
        amount=receipt.amount,
        fee=receipt.fee,
        payout=receipt.payout,
        settlement_time=receipt.settlement_time,
        status=_enum_val(receipt.status),
    )


@router.post("", response_model=StakeResponse, status_code=status.HTTP_201_CREATED)
async def create_stake(
    project_id: int,
    data: StakeCreate,
    identity: CurrentIdentity,
    ledger: Ledger,
):
    """Lock ``amount`` for ``duration_days`` under the caller-chosen ``stake_id``."""
    stake = await ledger.stake(
        identity,
        project_id,
        amount=data.amount,
        duration_days=data.duration_days,
        stake_id=data.stake_id,
        source_account=data.source_account,
    )
    return _stake_response(stake)


@router.get("", response_model=List[StakeResponse])
async def list_my_stakes(
    project_id: int,
    identity: CurrentIdentity,
    reader: Reader,
    active_only: bool = Query(False),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    project = await reader.project(project_id)
    stakes = await reader.list_stakes(
        project,
        depositor=identity,
        active_only=active_only,
        offset=(page - 1) * page_size,
        limit=page_size,
    )
    return [_stake_response(s) for s in stakes]


@router.get("/{stake_id}", response_model=StakeResponse)
async def get_stake(
    project_id: int,
    stake_id: int,
    identity: CurrentIdentity,
    reader: Reader,
):
    project = await reader.project(project_id)
    return _stake_response(await reader.stake(project, identity, stake_id))


@router.get("/{stake_id}/receipt", response_model=UnstakeReceiptResponse)
async def get_unstake_receipt(
    project_id: int,
    stake_id: int,
    identity: CurrentIdentity,
    reader: Reader,
):
    project = await reader.project(project_id)
    stake = await reader.stake(project, identity, stake_id)
    receipt = await reader.unstake_for(stake)
    if receipt is None:
        raise UnstakeRecordNotFound(stake_id=stake_id)
    return _receipt_response(receipt)


@router.post("/{stake_id}/unstake", response_model=SettlementResponse)
async def unstake(
    project_id: int,
    stake_id: int,
    identity: CurrentIdentity,
    ledger: Ledger,
    data: Optional[UnstakeRequest] = None,
):
    """Withdraw once the lockup has ended."""
    data = data or UnstakeRequest()
    settlement = await ledger.unstake(
        identity,
        project_id,
        stake_id,
        fee_account=data.fee_account,
        destination_account=data.destination_account,
    )
    return SettlementResponse(
        stake=_stake_response(settlement.stake),
        receipt=_receipt_response(settlement.receipt),
    )


@router.post("/{stake_id}/emergency-unstake", response_model=SettlementResponse)
async def emergency_unstake(
    project_id: int,
    stake_id: int,
    identity: CurrentIdentity,
    ledger: Ledger,
    data: Optional[UnstakeRequest] = None,
):
    """Withdraw before the lockup ends, paying the emergency fee."""
    data = data or UnstakeRequest()
    settlement = await ledger.emergency_unstake(
        identity,
        project_id,
        stake_id,
        fee_account=data.fee_account,
        destination_account=data.destination_account,
    )
    return SettlementResponse(
        stake=_stake_response(settlement.stake),
        receipt=_receipt_response(settlement.receipt),
    )
