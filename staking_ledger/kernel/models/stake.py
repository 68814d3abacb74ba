"""
Stake ledger records.

A StakeRecord is created on deposit and kept forever; withdrawal flips it
inactive and writes the terminal event to its UnstakeRecord satellite.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staking_ledger.kernel.models.base import AllocatedRecordMixin, Base, TimestampMixin, Uint64

if TYPE_CHECKING:
    from staking_ledger.kernel.models.project import ProjectRegistry


class StakeStatus(str, Enum):
    """Lifecycle of one stake: Active, then exactly one terminal state."""
    ACTIVE = "active"
    UNSTAKED = "unstaked"
    EMERGENCY_UNSTAKED = "emergency_unstaked"


class StakeRecord(Base, AllocatedRecordMixin, TimestampMixin):
    """One depositor's stake in one project, keyed by client-chosen stake_id."""

    __tablename__ = "stake_records"

    depositor: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )
    project_ref: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("project_registry.address"),
        nullable=False,
    )
    project_id: Mapped[int] = mapped_column(
        Uint64(),
        nullable=False,
    )
    stake_id: Mapped[int] = mapped_column(
        Uint64(),
        nullable=False,
    )
    amount: Mapped[int] = mapped_column(
        Uint64(),
        nullable=False,
    )
    deposit_time: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )
    duration_days: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
    status: Mapped[StakeStatus] = mapped_column(
        String(32),
        nullable=False,
        default=StakeStatus.ACTIVE,
    )

    project: Mapped["ProjectRegistry"] = relationship(
        "ProjectRegistry",
        back_populates="stakes",
    )
    unstake: Mapped[Optional["UnstakeRecord"]] = relationship(
        "UnstakeRecord",
        back_populates="stake",
        uselist=False,
    )

    __table_args__ = (
        Index("ix_stake_records_project_depositor", "project_ref", "depositor"),
    )

    def __repr__(self) -> str:
        return f"<StakeRecord project={self.project_id} stake_id={self.stake_id} {self.status}>"


class UnstakeRecord(Base, AllocatedRecordMixin, TimestampMixin):
    """Terminal event of a stake, addressed from the stake's own address."""

    __tablename__ = "unstake_records"

    stake_ref: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("stake_records.address"),
        nullable=False,
        unique=True,
    )
    depositor: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    project_ref: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )
    project_id: Mapped[int] = mapped_column(
        Uint64(),
        nullable=False,
    )
    stake_id: Mapped[int] = mapped_column(
        Uint64(),
        nullable=False,
    )
    amount: Mapped[int] = mapped_column(
        Uint64(),
        nullable=False,
    )
    fee: Mapped[int] = mapped_column(
        Uint64(),
        nullable=False,
        default=0,
    )
    payout: Mapped[int] = mapped_column(
        Uint64(),
        nullable=False,
    )
    settlement_time: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )
    status: Mapped[StakeStatus] = mapped_column(
        String(32),
        nullable=False,
    )

    stake: Mapped["StakeRecord"] = relationship(
        "StakeRecord",
        back_populates="unstake",
    )

    def __repr__(self) -> str:
        return f"<UnstakeRecord stake={self.stake_ref[:12]} {self.status}>"
