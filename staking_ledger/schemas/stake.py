"""
Stake ledger schemas.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StakeCreate(BaseModel):
    amount: int
    duration_days: int
    stake_id: int
    source_account: Optional[str] = Field(
        None, description="Defaults to the caller's associated account for the project asset"
    )


class UnstakeRequest(BaseModel):
    """Optional account overrides for a withdrawal."""

    fee_account: Optional[str] = None
    destination_account: Optional[str] = None


class StakeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    address: str
    depositor: str
    project_id: int
    stake_id: int
    amount: int
    deposit_time: int
    duration_days: int
    lockup_end: int
    active: bool
    status: str


class UnstakeReceiptResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    address: str
    stake_ref: str
    depositor: str
    project_id: int
    stake_id: int
    amount: int
    fee: int
    payout: int
    settlement_time: int
    status: str


class SettlementResponse(BaseModel):
    stake: StakeResponse
    receipt: UnstakeReceiptResponse


class AccountOpen(BaseModel):
    asset_id: str


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    address: str
    owner: str
    asset_id: str
    mover_id: str
    balance: int
    frozen: bool
