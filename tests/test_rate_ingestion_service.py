"""
tests/test_rate_ingestion_service.py

End-to-end tests for RateIngestionService against an in-memory SQLite store.

Coverage
--------
- Successful ingestion persists every row and marks the file processed
- Any invalid row rejects the whole file (zero entries)
- Header errors short-circuit row validation
- Empty and header-only uploads
- Blank-line tolerance
- Unexpected failures are downgraded to an error-state file
- Re-serialized entries parse back to the same values
"""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.mappers.csv_serializer import render_rates_csv
from app.mappers.csv_tokenizer import tokenize_rate_csv
from app.repositories.rate_repository import RateEntryRepository
from app.services.rate_ingestion_service import (
    PERSISTENCE_FAILURE_MESSAGE,
    RateIngestionService,
)
from app.validators.rate_csv_validator import RateSheetValidator
from db.models.rate_entry import RateEntry
from db.models.rate_file import RateFile, RateFileStatus

from conftest import make_csv

VALID_ROWS = (
    "Dubai,Riyadh,5kg,Express,45.00,USD,2023-01-01,2023-12-31",
    "Dubai,Jeddah,10kg,Economy,52.50,USD,2023-02-01,2023-12-31",
    "Cairo,Amman,2kg,Express,25,EGP,2023-03-15,2024-03-14",
)


@pytest.fixture()
def service() -> RateIngestionService:
    return RateIngestionService(log_validation_errors=False)


def _entry_count(db: Session) -> int:
    return int(db.scalar(select(func.count()).select_from(RateEntry)) or 0)


class TestSuccessfulIngestion:
    def test_single_row_is_persisted(self, service: RateIngestionService, db: Session) -> None:
        rate_file = service.process_rate_file(
            filename="rates.csv",
            content=make_csv(VALID_ROWS[0]),
            db=db,
        )

        assert rate_file.status == RateFileStatus.PROCESSED
        assert rate_file.errors == []
        assert rate_file.error_details is None

        entries = RateEntryRepository(db).get_by_file_id(rate_file.id)
        assert len(entries) == 1
        entry = entries[0]
        assert entry.file_id == rate_file.id
        assert entry.origin == "Dubai"
        assert entry.destination == "Riyadh"
        assert entry.weight == "5kg"
        assert entry.service_type == "Express"
        assert entry.rate == pytest.approx(45.0)
        assert isinstance(entry.rate, float)
        assert entry.currency == "USD"
        assert entry.effective_date == date(2023, 1, 1)
        assert entry.expiry_date == date(2023, 12, 31)

    def test_entry_count_equals_data_row_count(self, service: RateIngestionService, db: Session) -> None:
        rate_file = service.process_rate_file(
            filename="rates.csv",
            content=make_csv(*VALID_ROWS),
            db=db,
        )

        assert rate_file.status == RateFileStatus.PROCESSED
        entries = RateEntryRepository(db).get_by_file_id(rate_file.id)
        assert [entry.destination for entry in entries] == ["Riyadh", "Jeddah", "Amman"]
        assert RateEntryRepository(db).count_by_file_id(rate_file.id) == 3

    def test_file_record_is_stored(self, service: RateIngestionService, db: Session) -> None:
        rate_file = service.process_rate_file(
            filename="q3_rates.csv",
            content=make_csv(VALID_ROWS[0]),
            db=db,
        )

        stored = db.get(RateFile, rate_file.id)
        assert stored is not None
        assert stored.filename == "q3_rates.csv"
        assert stored.upload_date is not None

    def test_each_upload_creates_a_new_file(self, service: RateIngestionService, db: Session) -> None:
        first = service.process_rate_file(filename="a.csv", content=make_csv(VALID_ROWS[0]), db=db)
        second = service.process_rate_file(filename="a.csv", content=make_csv(VALID_ROWS[0]), db=db)

        assert first.id != second.id
        assert RateEntryRepository(db).count_by_file_id(first.id) == 1
        assert RateEntryRepository(db).count_by_file_id(second.id) == 1
        assert _entry_count(db) == 2


class TestRejectedIngestion:
    def test_one_bad_row_rejects_the_whole_file(self, service: RateIngestionService, db: Session) -> None:
        rate_file = service.process_rate_file(
            filename="rates.csv",
            content=make_csv(VALID_ROWS[0], "Dubai,Riyadh,5kg,Express,abc,USD,2023-01-01,2023-12-31", VALID_ROWS[1]),
            db=db,
        )

        assert rate_file.status == RateFileStatus.ERROR
        assert rate_file.errors == ["Row 3: Rate must be a number"]
        assert RateEntryRepository(db).get_by_file_id(rate_file.id) == []
        assert _entry_count(db) == 0

    def test_lowercase_currency(self, service: RateIngestionService, db: Session) -> None:
        rate_file = service.process_rate_file(
            filename="rates.csv",
            content=make_csv("Dubai,Riyadh,5kg,Express,45.00,usd,2023-01-01,2023-12-31"),
            db=db,
        )

        assert rate_file.status == RateFileStatus.ERROR
        assert rate_file.errors == ["Row 2: Currency must be a 3-letter code (e.g., USD)"]
        assert _entry_count(db) == 0

    def test_non_numeric_rate(self, service: RateIngestionService, db: Session) -> None:
        rate_file = service.process_rate_file(
            filename="rates.csv",
            content=make_csv("Dubai,Riyadh,5kg,Express,abc,USD,2023-01-01,2023-12-31"),
            db=db,
        )

        assert rate_file.status == RateFileStatus.ERROR
        assert rate_file.errors == ["Row 2: Rate must be a number"]

    def test_every_violation_is_reported(self, service: RateIngestionService, db: Session) -> None:
        rate_file = service.process_rate_file(
            filename="rates.csv",
            content=make_csv(
                ",Riyadh,,Express,abc,usd,2023-01-01,2023-02-30",
                "Dubai,,5kg,,,,,",
            ),
            db=db,
        )

        assert rate_file.errors == [
            "Row 2: Missing Origin",
            "Row 2: Missing Weight",
            "Row 2: Rate must be a number",
            "Row 2: Currency must be a 3-letter code (e.g., USD)",
            "Row 2: ExpiryDate must be in YYYY-MM-DD format",
            "Row 3: Missing Destination",
            "Row 3: Missing ServiceType",
            "Row 3: Missing Rate",
            "Row 3: Missing Currency",
            "Row 3: Missing EffectiveDate",
            "Row 3: Missing ExpiryDate",
        ]

    def test_missing_header_short_circuits_rows(self, service: RateIngestionService, db: Session) -> None:
        header = "Origin,Destination,Weight,ServiceType,Rate,Currency,EffectiveDate"
        rate_file = service.process_rate_file(
            filename="rates.csv",
            content=make_csv(",,,,abc,usd,nope", header=header),
            db=db,
        )

        assert rate_file.status == RateFileStatus.ERROR
        assert rate_file.errors == ["Missing required header: ExpiryDate"]
        assert _entry_count(db) == 0

    def test_empty_upload(self, service: RateIngestionService, db: Session) -> None:
        rate_file = service.process_rate_file(filename="empty.csv", content="", db=db)

        assert rate_file.status == RateFileStatus.ERROR
        assert rate_file.errors == ["CSV file is empty"]

    def test_header_only_upload(self, service: RateIngestionService, db: Session) -> None:
        rate_file = service.process_rate_file(filename="rates.csv", content=make_csv(), db=db)

        assert rate_file.status == RateFileStatus.ERROR
        assert rate_file.errors == ["CSV file has no data rows"]

    def test_error_details_are_json_encoded(self, service: RateIngestionService, db: Session) -> None:
        rate_file = service.process_rate_file(filename="empty.csv", content="", db=db)

        stored = db.get(RateFile, rate_file.id)
        assert stored.error_details == '["CSV file is empty"]'


class TestBlankLines:
    def test_blank_lines_do_not_change_the_outcome(self, service: RateIngestionService, db: Session) -> None:
        compact = service.process_rate_file(filename="a.csv", content=make_csv(*VALID_ROWS), db=db)
        spaced = service.process_rate_file(
            filename="b.csv",
            content=make_csv(VALID_ROWS[0], "", "   ", VALID_ROWS[1], "", VALID_ROWS[2], ""),
            db=db,
        )

        assert compact.status == spaced.status == RateFileStatus.PROCESSED

        def _values(file_id: int) -> list[tuple]:
            return [
                (e.origin, e.destination, e.weight, e.service_type, e.rate, e.currency, e.effective_date, e.expiry_date)
                for e in RateEntryRepository(db).get_by_file_id(file_id)
            ]

        assert _values(compact.id) == _values(spaced.id)

    def test_row_numbers_follow_source_lines(self, service: RateIngestionService, db: Session) -> None:
        rate_file = service.process_rate_file(
            filename="rates.csv",
            content=make_csv("", "Dubai,Riyadh,5kg,Express,45.00,usd,2023-01-01,2023-12-31"),
            db=db,
        )

        assert rate_file.errors == ["Row 3: Currency must be a 3-letter code (e.g., USD)"]


class _ExplodingValidator(RateSheetValidator):
    def validate(self, document):  # type: ignore[override]
        raise RuntimeError("validator exploded")


class TestUnexpectedFailures:
    def test_runtime_error_becomes_error_state(self, db: Session) -> None:
        service = RateIngestionService(log_validation_errors=False, validator=_ExplodingValidator())

        rate_file = service.process_rate_file(filename="rates.csv", content=make_csv(VALID_ROWS[0]), db=db)

        assert rate_file.status == RateFileStatus.ERROR
        assert rate_file.errors == ["validator exploded"]
        assert _entry_count(db) == 0

    def test_entry_persistence_failure_leaves_no_entries(
        self,
        service: RateIngestionService,
        db: Session,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def _fail(self, *, file_id, candidates):
            raise OperationalError("INSERT INTO rate_entries", {}, Exception("disk full"))

        monkeypatch.setattr(RateEntryRepository, "create_many", _fail)

        rate_file = service.process_rate_file(filename="rates.csv", content=make_csv(*VALID_ROWS), db=db)

        assert rate_file.status == RateFileStatus.ERROR
        assert rate_file.errors == [PERSISTENCE_FAILURE_MESSAGE]
        assert db.get(RateFile, rate_file.id).status == RateFileStatus.ERROR
        assert RateEntryRepository(db).count_by_file_id(rate_file.id) == 0
        assert _entry_count(db) == 0


class TestReserialization:
    def test_exported_entries_parse_back_to_the_same_values(
        self,
        service: RateIngestionService,
        db: Session,
    ) -> None:
        rate_file = service.process_rate_file(filename="rates.csv", content=make_csv(*VALID_ROWS), db=db)
        entries = RateEntryRepository(db).get_by_file_id(rate_file.id)

        exported = render_rates_csv(entries)
        result = RateSheetValidator().validate(tokenize_rate_csv(exported))

        assert result.valid
        assert len(result.candidates) == len(entries)
        for entry, candidate in zip(entries, result.candidates):
            assert candidate.origin == entry.origin
            assert candidate.destination == entry.destination
            assert candidate.weight == entry.weight
            assert candidate.service_type == entry.service_type
            assert candidate.currency == entry.currency
            assert candidate.rate == pytest.approx(entry.rate)
            assert candidate.effective_date == entry.effective_date
            assert candidate.expiry_date == entry.expiry_date
