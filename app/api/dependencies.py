"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, File, HTTPException, UploadFile, status

from app.config import RateIngestionSettings, get_rate_ingestion_settings

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}


@dataclass(frozen=True)
class RateUpload:
    """
    Decoded rate sheet upload handed to the ingestion service.
    """

    filename: str
    content: str


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    is_csv_filename = filename.endswith(".csv")
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File must be a CSV.",
        )

    return file


def get_rate_upload(
    file: UploadFile = Depends(get_csv_upload),
    settings: RateIngestionSettings = Depends(get_rate_ingestion_settings),
) -> RateUpload:
    """
    Enforce the upload size ceiling and decode the body as UTF-8 text.
    """

    try:
        raw = file.file.read(settings.max_upload_bytes + 1)
    finally:
        file.file.close()

    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Rate file exceeds the {settings.max_upload_bytes} byte limit.",
        )

    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CSV must be UTF-8 encoded.",
        ) from exc

    return RateUpload(filename=file.filename or "upload.csv", content=content)
