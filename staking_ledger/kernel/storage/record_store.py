"""
Storage substrate for derived-address records.

Allocates a record at its derived address, resizes it when variable-length
contents grow or shrink, and keeps the backing deposit in step with the
allocated size. Records are never closed.
"""

from typing import Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from staking_ledger.kernel.addressing import DerivedAddress
from staking_ledger.kernel.errors import RecordAlreadyExists
from staking_ledger.kernel.storage.layout import required_size
from staking_ledger.logging_config import get_logger

logger = get_logger(__name__)

RecordT = TypeVar("RecordT")


class StorageError(RuntimeError):
    """A record's contents no longer fit its allocation."""


class RecordStore:
    """
    Allocation and deposit accounting over an AsyncSession.

    Usage:
        store = RecordStore(session, deposit_per_byte=settings.storage_deposit_per_byte)
        record = await store.create(StakeRecord, derived, STAKE_SIZE, payer, amount=...)
    """

    def __init__(self, session: AsyncSession, deposit_per_byte: int):
        self.session = session
        self.deposit_per_byte = deposit_per_byte

    def deposit_for(self, size: int) -> int:
        return size * self.deposit_per_byte

    async def get(self, model: Type[RecordT], address: str) -> Optional[RecordT]:
        return await self.session.get(model, address)

    async def exists(self, model: Type[RecordT], address: str) -> bool:
        return await self.get(model, address) is not None

    async def create(
        self,
        model: Type[RecordT],
        derived: DerivedAddress,
        size: int,
        payer: str,
        **fields,
    ) -> RecordT:
        """
        Allocate ``size`` bytes at the derived address and write ``fields``.

        Raises:
            RecordAlreadyExists: if anything already lives at the address,
                including a concurrent creation that committed first
        """
        address = derived.hex
        if await self.exists(model, address):
            raise RecordAlreadyExists(address=address)

        record = model(
            address=address,
            bump=derived.bump,
            data_len=size,
            deposit=self.deposit_for(size),
            **fields,
        )
        self.session.add(record)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise RecordAlreadyExists(address=address) from exc

        self.check_fits(record)
        logger.debug(
            "Record allocated",
            extra={"table": model.__tablename__, "address": address, "size": size, "payer": payer},
        )
        return record

    def resize(self, record, new_size: int, payer: str) -> int:
        """
        Set the allocation to exactly ``new_size`` bytes.

        Returns the deposit delta: positive is charged to ``payer``, negative
        refunded to them.
        """
        if new_size <= 0:
            raise StorageError("record size must be positive")
        new_deposit = self.deposit_for(new_size)
        delta = new_deposit - record.deposit
        record.data_len = new_size
        record.deposit = new_deposit
        logger.debug(
            "Record resized",
            extra={"address": record.address, "size": new_size, "deposit_delta": delta, "payer": payer},
        )
        return delta

    @staticmethod
    def check_fits(record) -> None:
        """Raise if the record's current contents exceed its allocation."""
        needed = required_size(record)
        if needed > record.data_len:
            raise StorageError(
                f"{record.__tablename__} at {record.address} needs {needed} bytes, "
                f"has {record.data_len}"
            )
