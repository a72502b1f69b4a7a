"""
app/schemas/rate_ingestion.py

Request and response schemas for rate management endpoints.
"""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

CURRENCY_CODE_PATTERN = r"^[A-Z]{3}$"


class RateFileResponse(BaseModel):
    """
    API response model for one rate file and its processing outcome.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    filename: str
    upload_date: datetime
    status: str
    errors: list[str] = Field(default_factory=list)


class RateEntryResponse(BaseModel):
    """
    API response model for one persisted rate entry.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    file_id: int
    origin: str
    destination: str
    weight: str
    service_type: str
    rate: float
    currency: str
    effective_date: date
    expiry_date: date


class RateEntryUpdate(BaseModel):
    """
    Partial edit for one existing rate entry. Only fields that are sent
    are changed.
    """

    model_config = ConfigDict(extra="forbid")

    id: int = Field(..., ge=1)
    origin: str | None = Field(default=None, min_length=1)
    destination: str | None = Field(default=None, min_length=1)
    weight: str | None = Field(default=None, min_length=1)
    service_type: str | None = Field(default=None, min_length=1)
    rate: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    currency: str | None = Field(default=None, pattern=CURRENCY_CODE_PATTERN)
    effective_date: date | None = None
    expiry_date: date | None = None


class RateEntryUpdateRequest(BaseModel):
    rates: list[RateEntryUpdate]


class RateHistoryPointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    rate: float
