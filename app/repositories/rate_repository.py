"""
app/repositories/rate_repository.py

Persistence layer for rate files and their rate entries.

Repositories only flush; the calling service owns commit and rollback.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from app.domain.rate_ingestion import RateEntryCandidate
from db.models.rate_entry import RateEntry
from db.models.rate_file import RateFile, RateFileStatus

# Columns the maintenance interface may edit on an existing entry.
UPDATABLE_ENTRY_FIELDS: frozenset[str] = frozenset(
    {
        "origin",
        "destination",
        "weight",
        "service_type",
        "rate",
        "currency",
        "effective_date",
        "expiry_date",
    }
)


class RateFileRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, *, filename: str) -> RateFile:
        rate_file = RateFile(filename=filename, status=RateFileStatus.PENDING)
        self._session.add(rate_file)
        self._session.flush()
        self._session.refresh(rate_file)
        return rate_file

    def get(self, file_id: int) -> RateFile | None:
        return self._session.get(RateFile, file_id)

    def list_files(self, *, status: str | None = None) -> list[RateFile]:
        stmt: Select[tuple[RateFile]] = select(RateFile)
        if status:
            stmt = stmt.where(RateFile.status == status)
        stmt = stmt.order_by(RateFile.upload_date.desc(), RateFile.id.desc())
        return list(self._session.scalars(stmt).all())

    def mark_processed(self, rate_file: RateFile) -> RateFile:
        rate_file.status = RateFileStatus.PROCESSED
        rate_file.error_details = None
        self._session.flush()
        return rate_file

    def mark_error(self, rate_file: RateFile, errors: Sequence[str]) -> RateFile:
        """
        Move a file to ``error``. The error list must not be empty.
        """

        messages = [str(message) for message in errors]
        if not messages:
            raise ValueError("A rate file in error state needs at least one message.")
        rate_file.status = RateFileStatus.ERROR
        rate_file.error_details = json.dumps(messages)
        self._session.flush()
        return rate_file


class RateEntryRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_many(
        self,
        *,
        file_id: int,
        candidates: Sequence[RateEntryCandidate],
    ) -> list[RateEntry]:
        entries = [
            RateEntry(
                file_id=file_id,
                origin=candidate.origin,
                destination=candidate.destination,
                weight=candidate.weight,
                service_type=candidate.service_type,
                rate=candidate.rate,
                currency=candidate.currency,
                effective_date=candidate.effective_date,
                expiry_date=candidate.expiry_date,
            )
            for candidate in candidates
        ]
        self._session.add_all(entries)
        self._session.flush()
        return entries

    def get_by_file_id(self, file_id: int) -> list[RateEntry]:
        stmt = select(RateEntry).where(RateEntry.file_id == file_id).order_by(RateEntry.id)
        return list(self._session.scalars(stmt).all())

    def count_by_file_id(self, file_id: int) -> int:
        stmt = select(func.count()).select_from(RateEntry).where(RateEntry.file_id == file_id)
        return int(self._session.scalar(stmt) or 0)

    def update_many(self, updates: Sequence[Mapping[str, Any]]) -> list[RateEntry]:
        """
        Apply partial field edits keyed by entry id.

        Items without an id or naming an unknown entry are skipped. Keys
        outside UPDATABLE_ENTRY_FIELDS are ignored.
        """

        updated: list[RateEntry] = []
        for changes in updates:
            entry_id = changes.get("id")
            if entry_id is None:
                continue
            entry = self._session.get(RateEntry, entry_id)
            if entry is None:
                continue
            for field_name, value in changes.items():
                if field_name in UPDATABLE_ENTRY_FIELDS:
                    setattr(entry, field_name, value)
            updated.append(entry)

        self._session.flush()
        return updated

    def list_effective_between(self, *, start: date, end: date) -> list[RateEntry]:
        stmt = (
            select(RateEntry)
            .where(RateEntry.effective_date >= start, RateEntry.effective_date <= end)
            .order_by(RateEntry.effective_date.desc(), RateEntry.id)
        )
        return list(self._session.scalars(stmt).all())
