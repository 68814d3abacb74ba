"""
Custody accounts kept by the in-database asset mover.
"""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from staking_ledger.kernel.models.base import Base, TimestampMixin, Uint64


class AssetAccount(Base, TimestampMixin):
    """A balance of one asset, debitable only with the owner's authorization."""

    __tablename__ = "asset_accounts"

    address: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
    )
    asset_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    owner: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    mover_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )
    balance: Mapped[int] = mapped_column(
        Uint64(),
        nullable=False,
        default=0,
    )
    frozen: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    def __repr__(self) -> str:
        return f"<AssetAccount {self.address[:12]} owner={self.owner[:12]} balance={self.balance}>"
