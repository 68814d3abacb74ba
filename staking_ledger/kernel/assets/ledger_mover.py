"""
Asset mover backed by ``AssetAccount`` rows in the ledger database.

Transfers run inside the caller's session, so they commit or roll back
together with the ledger records that caused them.
"""

import hashlib
from typing import Dict, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from staking_ledger.kernel.addressing import VaultAuthority, asset_account_address
from staking_ledger.kernel.assets.mover import MoveRequest
from staking_ledger.kernel.errors import (
    AccountFrozen,
    AccountNotFound,
    ArithmeticOverflow,
    AssetMismatch,
    InsufficientFunds,
    OwnerMismatch,
    RecordAlreadyExists,
)
from staking_ledger.kernel.identity import identity_bytes, parse_identity
from staking_ledger.kernel.limits import U64_MAX
from staking_ledger.kernel.models import AssetAccount
from staking_ledger.logging_config import get_logger

logger = get_logger(__name__)


class LedgerAssetMover:
    """
    Reference asset mover.

    Args:
        session: Unit of work shared with the ledger operation
        mover_id: Identifier projects pin at registration
        program_id: When set, vault-authority signers must re-derive under it
    """

    def __init__(
        self,
        session: AsyncSession,
        mover_id: str,
        program_id: Optional[bytes] = None,
    ):
        self.session = session
        self.mover_id = mover_id
        self.program_id = program_id
        self._namespace = hashlib.sha256(mover_id.encode("utf-8")).digest()

    def associated_address(self, owner: str, asset_id: str) -> str:
        """Default account of ``owner`` for ``asset_id``."""
        return asset_account_address(
            self._namespace,
            identity_bytes(owner),
            identity_bytes(asset_id),
        ).hex

    async def get_account(self, address: str, for_update: bool = False) -> Optional[AssetAccount]:
        return await self.session.get(AssetAccount, address, with_for_update=for_update or None)

    async def open_account(
        self,
        owner: str,
        asset_id: str,
        address: Optional[str] = None,
    ) -> AssetAccount:
        owner = parse_identity(owner)
        asset_id = parse_identity(asset_id)
        address = parse_identity(address) if address else self.associated_address(owner, asset_id)

        if await self.get_account(address) is not None:
            raise RecordAlreadyExists(address=address)

        account = AssetAccount(
            address=address,
            asset_id=asset_id,
            owner=owner,
            mover_id=self.mover_id,
            balance=0,
            frozen=False,
        )
        self.session.add(account)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise RecordAlreadyExists(address=address) from exc
        logger.info(
            "Asset account opened",
            extra={"account": address, "owner": owner, "asset_id": asset_id},
        )
        return account

    async def mint_to(self, address: str, amount: int) -> AssetAccount:
        """Credit new supply to an account (setup and tests)."""
        account = await self._require(address)
        if amount < 0:
            raise ValueError("mint amount must be non-negative")
        if account.balance + amount > U64_MAX:
            raise ArithmeticOverflow(account=address)
        account.balance = account.balance + amount
        return account

    async def freeze(self, address: str) -> AssetAccount:
        account = await self._require(address)
        account.frozen = True
        return account

    async def thaw(self, address: str) -> AssetAccount:
        account = await self._require(address)
        account.frozen = False
        return account

    async def move(self, request: MoveRequest) -> None:
        await self.move_all([request])

    async def move_all(self, requests: Sequence[MoveRequest]) -> None:
        """
        Apply every transfer or none.

        All legs are validated against running balances before the first
        balance changes.
        """
        accounts: Dict[str, AssetAccount] = {}
        balances: Dict[str, int] = {}

        for request in requests:
            if request.amount < 0:
                raise ValueError("transfer amount must be non-negative")

            source = await self._load(request.from_custody, accounts, balances)
            dest = await self._load(request.to_custody, accounts, balances)

            if source.asset_id != dest.asset_id:
                raise AssetMismatch(source=source.address, destination=dest.address)
            if source.frozen:
                raise AccountFrozen(account=source.address)
            if dest.frozen:
                raise AccountFrozen(account=dest.address)
            self._authorize(source, request)

            if balances[source.address] < request.amount:
                raise InsufficientFunds(
                    account=source.address,
                    balance=balances[source.address],
                    requested=request.amount,
                )
            balances[source.address] -= request.amount
            if balances[dest.address] + request.amount > U64_MAX:
                raise ArithmeticOverflow(account=dest.address)
            balances[dest.address] += request.amount

        for address, balance in balances.items():
            accounts[address].balance = balance

        for request in requests:
            logger.debug(
                "Asset moved",
                extra={
                    "from_custody": request.from_custody,
                    "to_custody": request.to_custody,
                    "amount": request.amount,
                },
            )

    def _authorize(self, source: AssetAccount, request: MoveRequest) -> None:
        authority = request.authority
        if authority.authority != source.owner:
            raise OwnerMismatch(account=source.address, authority=authority.authority)
        if (
            isinstance(authority, VaultAuthority)
            and self.program_id is not None
            and not authority.verify(self.program_id)
        ):
            raise OwnerMismatch(account=source.address, authority=authority.authority)

    async def _load(
        self,
        address: str,
        accounts: Dict[str, AssetAccount],
        balances: Dict[str, int],
    ) -> AssetAccount:
        if address not in accounts:
            account = await self._require(address)
            accounts[address] = account
            balances[address] = account.balance
        return accounts[address]

    async def _require(self, address: str) -> AssetAccount:
        account = await self.get_account(address, for_update=True)
        if account is None:
            raise AccountNotFound(account=address)
        return account
