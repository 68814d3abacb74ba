"""
Platform registry: the singleton holding platform authorities.
"""

from typing import List

from sqlalchemy import JSON
from sqlalchemy.orm import Mapped, mapped_column

from staking_ledger.kernel.models.base import AllocatedRecordMixin, Base, TimestampMixin, Uint64


class PlatformRegistry(Base, AllocatedRecordMixin, TimestampMixin):
    """
    One row per ledger, addressed by the ``platform`` seed.

    ``authorities`` is a variable-length list stored in place: every mutation
    resizes the record first, then writes the new list.
    """

    __tablename__ = "platform_registry"

    authorities: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )
    project_count: Mapped[int] = mapped_column(
        Uint64(),
        nullable=False,
        default=0,
    )

    def is_authority(self, identity: str) -> bool:
        return identity in self.authorities

    def __repr__(self) -> str:
        return f"<PlatformRegistry authorities={len(self.authorities)} projects={self.project_count}>"
