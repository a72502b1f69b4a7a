"""
app/services/rate_catalog_service.py

Read, maintenance, and export operations over ingested rate sheets.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.mappers.csv_serializer import render_rates_csv
from app.repositories.rate_repository import RateEntryRepository, RateFileRepository
from db.models.rate_entry import RateEntry
from db.models.rate_file import RateFile

logger = logging.getLogger(__name__)


class RateFileNotFoundError(LookupError):
    """
    Raised when a rate file id does not exist.
    """


class RateEntryUpdateError(RuntimeError):
    """
    Raised when rate entry edits cannot be persisted.
    """


@dataclass(frozen=True)
class RateHistoryPoint:
    date: date
    rate: float


class RateCatalogService:
    """
    Query and maintain rate files and entries after ingestion.
    """

    def list_files(self, *, db: Session, status: str | None = None) -> list[RateFile]:
        return RateFileRepository(db).list_files(status=status)

    def get_file(self, *, db: Session, file_id: int) -> RateFile:
        rate_file = RateFileRepository(db).get(file_id)
        if rate_file is None:
            raise RateFileNotFoundError(f"Rate file {file_id} not found.")
        return rate_file

    def get_entries(self, *, db: Session, file_id: int) -> list[RateEntry]:
        self.get_file(db=db, file_id=file_id)
        return RateEntryRepository(db).get_by_file_id(file_id)

    def update_entries(
        self,
        *,
        db: Session,
        updates: Sequence[Mapping[str, Any]],
    ) -> list[RateEntry]:
        """
        Apply partial edits to existing entries and commit them together.
        """

        try:
            updated = RateEntryRepository(db).update_many(updates)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise RateEntryUpdateError("Failed to update rate entries.") from exc

        logger.info(
            "Rate entries updated requested=%d updated=%d",
            len(updates),
            len(updated),
        )
        return updated

    def export_file_csv(self, *, db: Session, file_id: int) -> str:
        return render_rates_csv(self.get_entries(db=db, file_id=file_id))

    def rate_history(
        self,
        *,
        db: Session,
        start: date,
        end: date,
    ) -> list[RateHistoryPoint]:
        """
        One point per effective date in ``[start, end]``, newest first.

        When several entries share an effective date the lowest entry id wins.
        """

        points: dict[date, RateHistoryPoint] = {}
        for entry in RateEntryRepository(db).list_effective_between(start=start, end=end):
            if entry.effective_date not in points:
                points[entry.effective_date] = RateHistoryPoint(
                    date=entry.effective_date,
                    rate=entry.rate,
                )
        return list(points.values())


@lru_cache(maxsize=1)
def get_rate_catalog_service() -> RateCatalogService:
    return RateCatalogService()
