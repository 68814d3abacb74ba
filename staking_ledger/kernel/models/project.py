"""
Project registry models.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staking_ledger.kernel.models.base import AllocatedRecordMixin, Base, TimestampMixin, Uint64

if TYPE_CHECKING:
    from staking_ledger.kernel.models.stake import StakeRecord


class ProjectRegistry(Base, AllocatedRecordMixin, TimestampMixin):
    """Per-project staking policy."""

    __tablename__ = "project_registry"

    project_id: Mapped[int] = mapped_column(
        Uint64(),
        nullable=False,
        unique=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
    )

    # Authorization
    project_authority: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )

    # Asset and custody
    asset_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )
    custody_ref: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )
    asset_mover_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )

    # Fee policy
    fee_recipient: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )
    unstake_fee_bps: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    emergency_unstake_fee_bps: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    # Lockup policy (day counts, at most 10)
    allowed_durations: Mapped[List[int]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    stakes: Mapped[List["StakeRecord"]] = relationship(
        "StakeRecord",
        back_populates="project",
    )

    def __repr__(self) -> str:
        return f"<ProjectRegistry {self.project_id} {self.name[:32]}>"
