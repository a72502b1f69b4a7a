"""
db/models/rate_file.py

RateFile model — one uploaded CSV document of shipping rates.
A file owns the rate entries created from it when validation succeeds.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base

if TYPE_CHECKING:
    from db.models.rate_entry import RateEntry


class RateFileStatus:
    """Valid status values for a rate file: pending → processed | error."""

    PENDING = "pending"
    PROCESSED = "processed"
    ERROR = "error"


class RateFile(Base):
    """
    Tracks the lifecycle of one uploaded rate sheet.

    error_details holds a JSON-encoded list of human-readable messages and is
    only populated when status is ``error``.
    """

    __tablename__ = "rate_files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    filename: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    upload_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=RateFileStatus.PENDING,
        comment="pending → processed | error",
    )

    error_details: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="JSON-encoded list of validation messages",
    )

    # ── Relationships ──────────────────────────────────────────────────────────

    entries: Mapped[list["RateEntry"]] = relationship(
        "RateEntry",
        back_populates="file",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RateEntry.id",
    )

    # ── Indexes ────────────────────────────────────────────────────────────────

    __table_args__ = (
        Index("ix_rate_files_status", "status"),
        Index("ix_rate_files_upload_date", "upload_date"),
    )

    @property
    def errors(self) -> list[str]:
        if not self.error_details:
            return []
        return list(json.loads(self.error_details))

    def __repr__(self) -> str:
        return f"<RateFile id={self.id} filename={self.filename!r} status={self.status!r}>"
