"""
Base model with common fields and utilities.
"""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, func, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from staking_ledger.kernel.limits import U64_MAX


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    type_annotation_map = {
        uuid.UUID: Uuid(),
    }


class Uint64(TypeDecorator):
    """
    Unsigned 64-bit integer stored as a zero-padded decimal string.

    Both SQLite and PostgreSQL integers are signed 64-bit, so the upper half of
    the u64 range would not survive a round trip. Zero padding keeps ORDER BY
    numeric.
    """

    impl = String(20)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        number = int(value)
        if number < 0 or number > U64_MAX:
            raise ValueError(f"{number} is outside the u64 range")
        return f"{number:020d}"

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return int(value)


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class AllocatedRecordMixin:
    """
    Columns the storage substrate keeps for every record it allocates.

    ``address`` is the derived address, ``data_len`` the byte size the record's
    layout occupies, and ``deposit`` the backing deposit held for that size.
    """

    address: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
    )
    bump: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    data_len: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    deposit: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
    )


def generate_uuid() -> uuid.UUID:
    """Generate a new UUID."""
    return uuid.uuid4()
