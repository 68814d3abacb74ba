"""
Custody account endpoints of the built-in asset mover.
"""

from fastapi import APIRouter, status

from staking_ledger.api.deps import CurrentIdentity, Mover
from staking_ledger.kernel.errors import AccountNotFound
from staking_ledger.schemas.stake import AccountOpen, AccountResponse

router = APIRouter()


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def open_account(data: AccountOpen, identity: CurrentIdentity, mover: Mover):
    """Open the caller's associated account for an asset."""
    account = await mover.open_account(owner=identity, asset_id=data.asset_id)
    return AccountResponse.model_validate(account)


@router.get("/{address}", response_model=AccountResponse)
async def get_account(address: str, mover: Mover):
    account = await mover.get_account(address.lower())
    if account is None:
        raise AccountNotFound(account=address)
    return AccountResponse.model_validate(account)
