"""
Project registry endpoints.
"""

from typing import List

from fastapi import APIRouter, Query, status

from staking_ledger.api.deps import CurrentIdentity, ProjectGov, Reader
from staking_ledger.schemas.project import (
    ProjectConfigUpdate,
    ProjectCreate,
    ProjectDurationsUpdate,
    ProjectResponse,
)

router = APIRouter()


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def register_project(
    data: ProjectCreate,
    identity: CurrentIdentity,
    governance: ProjectGov,
):
    """Register a project; the caller must be a platform authority."""
    project = await governance.register_project(
        identity,
        name=data.name,
        allowed_durations=data.allowed_durations,
        asset_id=data.asset_id,
    )
    return ProjectResponse.model_validate(project)


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    reader: Reader,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    projects = await reader.list_projects(offset=(page - 1) * page_size, limit=page_size)
    return [ProjectResponse.model_validate(p) for p in projects]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: int, reader: Reader):
    return ProjectResponse.model_validate(await reader.project(project_id))


@router.put("/{project_id}/config", response_model=ProjectResponse)
async def update_project_config(
    project_id: int,
    data: ProjectConfigUpdate,
    identity: CurrentIdentity,
    governance: ProjectGov,
):
    """Set fee recipient and both fee rates; project authority only."""
    project = await governance.update_project_config(
        identity,
        project_id,
        fee_recipient=data.fee_recipient,
        unstake_fee_bps=data.unstake_fee_bps,
        emergency_unstake_fee_bps=data.emergency_unstake_fee_bps,
    )
    return ProjectResponse.model_validate(project)


@router.put("/{project_id}/durations", response_model=ProjectResponse)
async def update_allowed_durations(
    project_id: int,
    data: ProjectDurationsUpdate,
    identity: CurrentIdentity,
    governance: ProjectGov,
):
    project = await governance.update_allowed_durations(
        identity,
        project_id,
        data.allowed_durations,
    )
    return ProjectResponse.model_validate(project)
