"""
Project registry schemas.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ProjectCreate(BaseModel):
    """Register a project under the platform."""

    name: str
    allowed_durations: List[int] = Field(default_factory=list)
    asset_id: str = Field(..., description="Hex id of the staked asset")


class ProjectConfigUpdate(BaseModel):
    fee_recipient: str
    unstake_fee_bps: int
    emergency_unstake_fee_bps: int


class ProjectDurationsUpdate(BaseModel):
    allowed_durations: List[int]


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    address: str
    project_id: int
    name: str
    project_authority: str
    asset_id: str
    custody_ref: str
    asset_mover_id: str
    fee_recipient: str
    unstake_fee_bps: int
    emergency_unstake_fee_bps: int
    allowed_durations: List[int]
    data_len: int
    deposit: int
