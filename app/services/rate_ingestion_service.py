"""
app/services/rate_ingestion_service.py

Service layer for rate sheet ingestion.

One call takes an uploaded rate sheet from ``pending`` to a terminal status:

    pending → processed   every row valid; one RateEntry per data row
    pending → error       empty file, missing headers, no data rows, any
                          invalid row, or an unexpected failure

The file record is committed first so every upload leaves a trace. Entries
and the ``processed`` transition are committed together, so an errored file
never owns entries. Callers always get the terminal RateFile back; nothing
raised inside validation reaches them.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_rate_ingestion_settings
from app.domain.rate_ingestion import EmptyInputError
from app.mappers.csv_tokenizer import tokenize_rate_csv
from app.repositories.rate_repository import RateEntryRepository, RateFileRepository
from app.validators.rate_csv_validator import RateSheetValidator
from db.models.rate_file import RateFile

logger = logging.getLogger(__name__)

PERSISTENCE_FAILURE_MESSAGE = "Failed to persist rate entries."


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class RateFilePersistenceError(RuntimeError):
    """
    Raised when the rate file record itself cannot be written.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class RateIngestionService:
    """
    Coordinates tokenizing, validation, and all-or-nothing persistence.
    """

    def __init__(
        self,
        *,
        log_validation_errors: bool = True,
        validator: RateSheetValidator | None = None,
    ) -> None:
        self._log_validation_errors = log_validation_errors
        self._validator = validator or RateSheetValidator()

    def process_rate_file(
        self,
        *,
        filename: str,
        content: str,
        db: Session,
    ) -> RateFile:
        """
        Ingest one rate sheet and return its terminal RateFile record.

        Args:
            filename: Original upload name, stored as-is.
            content:  Full decoded text of the upload.
            db:       Active SQLAlchemy session (caller owns lifecycle).

        Raises:
            RateFilePersistenceError: the file record could not be created or
                its final status could not be written.
        """

        files = RateFileRepository(db)
        try:
            rate_file = files.create(filename=filename)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise RateFilePersistenceError("Failed to create rate file record.") from exc

        logger.info("Rate file received file_id=%s filename=%r", rate_file.id, filename)

        try:
            errors = self._ingest(db=db, rate_file=rate_file, content=content)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Rate entry persistence failed file_id=%s", rate_file.id)
            errors = [PERSISTENCE_FAILURE_MESSAGE]
        except Exception as exc:  # noqa: BLE001
            db.rollback()
            logger.exception("Rate file processing failed file_id=%s", rate_file.id)
            errors = [str(exc) or exc.__class__.__name__]

        if errors:
            self._mark_error(db=db, files=files, rate_file=rate_file, errors=errors)

        return rate_file

    # ------------------------------------------------------------------
    # Ingestion internals
    # ------------------------------------------------------------------

    def _ingest(self, *, db: Session, rate_file: RateFile, content: str) -> list[str]:
        """
        Run the pipeline; return error messages, or an empty list once the
        entries and the ``processed`` status are committed.
        """

        try:
            document = tokenize_rate_csv(content)
        except EmptyInputError as exc:
            return [str(exc)]

        result = self._validator.validate(document)
        if not result.valid:
            self._log_errors(rate_file=rate_file, errors=result.errors)
            return list(result.errors)

        entries = RateEntryRepository(db).create_many(
            file_id=rate_file.id,
            candidates=result.candidates,
        )
        RateFileRepository(db).mark_processed(rate_file)
        db.commit()

        logger.info(
            "Rate file processed file_id=%s entries=%d",
            rate_file.id,
            len(entries),
        )
        return []

    def _mark_error(
        self,
        *,
        db: Session,
        files: RateFileRepository,
        rate_file: RateFile,
        errors: list[str],
    ) -> None:
        try:
            files.mark_error(rate_file, errors)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise RateFilePersistenceError(
                f"Failed to record error status for rate file {rate_file.id}."
            ) from exc

        logger.info(
            "Rate file rejected file_id=%s error_count=%d",
            rate_file.id,
            len(errors),
        )

    def _log_errors(self, *, rate_file: RateFile, errors: list[str]) -> None:
        if not self._log_validation_errors:
            return
        for message in errors:
            logger.warning(
                "Rate file validation error file_id=%s message=%s",
                rate_file.id,
                message,
            )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_rate_ingestion_service() -> RateIngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """

    settings = get_rate_ingestion_settings()
    return RateIngestionService(log_validation_errors=settings.log_validation_errors)
