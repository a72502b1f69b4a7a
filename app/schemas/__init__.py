"""
app/schemas package marker.
"""

from app.schemas.rate_ingestion import (
    RateEntryResponse,
    RateEntryUpdate,
    RateEntryUpdateRequest,
    RateFileResponse,
    RateHistoryPointResponse,
)

__all__ = [
    "RateEntryResponse",
    "RateEntryUpdate",
    "RateEntryUpdateRequest",
    "RateFileResponse",
    "RateHistoryPointResponse",
]
