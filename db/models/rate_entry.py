"""
db/models/rate_entry.py

RateEntry model — one validated shipping-rate rule from a rate file.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base

if TYPE_CHECKING:
    from db.models.rate_file import RateFile


class RateEntry(Base):
    """
    Shipping rate for an origin/destination/weight/service combination
    over an effective date range.

    weight is kept as the raw descriptor from the sheet (e.g. "5kg").
    """

    __tablename__ = "rate_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    file_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("rate_files.id", ondelete="CASCADE"),
        nullable=False,
    )

    origin: Mapped[str] = mapped_column(String(255), nullable=False)
    destination: Mapped[str] = mapped_column(String(255), nullable=False)
    weight: Mapped[str] = mapped_column(String(64), nullable=False)
    service_type: Mapped[str] = mapped_column(String(128), nullable=False)
    rate: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiry_date: Mapped[date] = mapped_column(Date, nullable=False)

    file: Mapped["RateFile"] = relationship(
        "RateFile",
        back_populates="entries",
    )

    __table_args__ = (
        Index("ix_rate_entries_file_id", "file_id"),
        Index("ix_rate_entries_effective_date", "effective_date"),
        Index("ix_rate_entries_lane", "origin", "destination"),
    )

    def __repr__(self) -> str:
        return (
            f"<RateEntry id={self.id} file_id={self.file_id} "
            f"{self.origin!r}->{self.destination!r} rate={self.rate} {self.currency}>"
        )
