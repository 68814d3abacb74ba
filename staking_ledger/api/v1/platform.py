"""
Platform registry endpoints.
"""

from fastapi import APIRouter, status

from staking_ledger.api.deps import CurrentIdentity, PlatformGov, Reader
from staking_ledger.schemas.platform import AuthorityRequest, PlatformResponse

router = APIRouter()


@router.post("/initialize", response_model=PlatformResponse, status_code=status.HTTP_201_CREATED)
async def initialize_platform(identity: CurrentIdentity, governance: PlatformGov):
    """Create the platform with the caller as its only authority."""
    platform = await governance.initialize(identity)
    return PlatformResponse.model_validate(platform)


@router.get("", response_model=PlatformResponse)
async def get_platform(reader: Reader):
    return PlatformResponse.model_validate(await reader.platform())


@router.post("/authorities", response_model=PlatformResponse)
async def add_authority(
    data: AuthorityRequest,
    identity: CurrentIdentity,
    governance: PlatformGov,
):
    platform = await governance.add_authority(identity, data.authority)
    return PlatformResponse.model_validate(platform)


@router.delete("/authorities/{authority}", response_model=PlatformResponse)
async def remove_authority(
    authority: str,
    identity: CurrentIdentity,
    governance: PlatformGov,
):
    platform = await governance.remove_authority(identity, authority)
    return PlatformResponse.model_validate(platform)
