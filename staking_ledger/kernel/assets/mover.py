"""
Asset mover interface.

The ledger never touches balances directly: it issues move requests and the
mover either applies all of them or raises. Refusals are ``AssetMoverError``
subclasses and reach the caller unmodified.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from staking_ledger.kernel.addressing import AuthorizesTransfer
from staking_ledger.kernel.models import AssetAccount


@dataclass(frozen=True)
class MoveRequest:
    from_custody: str
    to_custody: str
    authority: AuthorizesTransfer
    amount: int


class AssetMover(Protocol):
    """Anything that can move a fungible asset between custody accounts."""

    mover_id: str

    async def get_account(self, address: str, for_update: bool = False) -> Optional[AssetAccount]:
        ...

    async def open_account(
        self,
        owner: str,
        asset_id: str,
        address: Optional[str] = None,
    ) -> AssetAccount:
        ...

    def associated_address(self, owner: str, asset_id: str) -> str:
        ...

    async def move(self, request: MoveRequest) -> None:
        ...

    async def move_all(self, requests: Sequence[MoveRequest]) -> None:
        ...
