"""
app/api/routers/rates.py

Rate management HTTP endpoints: upload, listing, maintenance, export.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status
from sqlalchemy.orm import Session

from app.api.dependencies import RateUpload, get_rate_upload
from app.schemas.rate_ingestion import (
    RateEntryResponse,
    RateEntryUpdateRequest,
    RateFileResponse,
    RateHistoryPointResponse,
)
from app.services.rate_catalog_service import (
    RateCatalogService,
    RateEntryUpdateError,
    RateFileNotFoundError,
    get_rate_catalog_service,
)
from app.services.rate_ingestion_service import (
    RateFilePersistenceError,
    RateIngestionService,
    get_rate_ingestion_service,
)
from db.session import get_db

router = APIRouter(prefix="/rates", tags=["rates"])


@router.post(
    "/upload",
    response_model=RateFileResponse,
    status_code=status.HTTP_201_CREATED,
)
def upload_rate_file(
    upload: RateUpload = Depends(get_rate_upload),
    db: Session = Depends(get_db),
    ingestion_service: RateIngestionService = Depends(get_rate_ingestion_service),
) -> RateFileResponse:
    """
    Ingest one rate sheet. Validation failures are reported in the returned
    file record (status ``error``), not as an HTTP error.
    """

    try:
        rate_file = ingestion_service.process_rate_file(
            filename=upload.filename,
            content=upload.content,
            db=db,
        )
    except RateFilePersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process rate file.",
        ) from exc

    return RateFileResponse.model_validate(rate_file)


@router.get("/files", response_model=list[RateFileResponse])
def list_rate_files(
    file_status: str | None = Query(default=None, alias="status", description="Filter by file status"),
    db: Session = Depends(get_db),
    catalog: RateCatalogService = Depends(get_rate_catalog_service),
) -> list[RateFileResponse]:
    files = catalog.list_files(db=db, status=file_status)
    return [RateFileResponse.model_validate(rate_file) for rate_file in files]


@router.get("/files/{file_id}/entries", response_model=list[RateEntryResponse])
def list_rate_entries(
    file_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    catalog: RateCatalogService = Depends(get_rate_catalog_service),
) -> list[RateEntryResponse]:
    try:
        entries = catalog.get_entries(db=db, file_id=file_id)
    except RateFileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return [RateEntryResponse.model_validate(entry) for entry in entries]


@router.get("/files/{file_id}/export")
def export_rate_file(
    file_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    catalog: RateCatalogService = Depends(get_rate_catalog_service),
) -> Response:
    """
    Download the entries of one file as a rate sheet CSV.
    """

    try:
        csv_text = catalog.export_file_csv(db=db, file_id=file_id)
    except RateFileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="rates_{file_id}.csv"'},
    )


@router.patch("/entries", response_model=list[RateEntryResponse])
def update_rate_entries(
    payload: RateEntryUpdateRequest,
    db: Session = Depends(get_db),
    catalog: RateCatalogService = Depends(get_rate_catalog_service),
) -> list[RateEntryResponse]:
    updates = [item.model_dump(exclude_unset=True, exclude_none=True) for item in payload.rates]
    try:
        updated = catalog.update_entries(db=db, updates=updates)
    except RateEntryUpdateError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update rate entries.",
        ) from exc
    return [RateEntryResponse.model_validate(entry) for entry in updated]


@router.get("/history", response_model=list[RateHistoryPointResponse])
def rate_history(
    start: date = Query(..., alias="from", description="First effective date (YYYY-MM-DD)"),
    end: date = Query(..., alias="to", description="Last effective date (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    catalog: RateCatalogService = Depends(get_rate_catalog_service),
) -> list[RateHistoryPointResponse]:
    if start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="'from' must not be after 'to'.",
        )
    points = catalog.rate_history(db=db, start=start, end=end)
    return [RateHistoryPointResponse.model_validate(point) for point in points]
