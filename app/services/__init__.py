"""
app/services package marker.
"""

from app.services.rate_catalog_service import (
    RateCatalogService,
    RateEntryUpdateError,
    RateFileNotFoundError,
    RateHistoryPoint,
    get_rate_catalog_service,
)
from app.services.rate_ingestion_service import (
    RateFilePersistenceError,
    RateIngestionService,
    get_rate_ingestion_service,
)

__all__ = [
    "RateCatalogService",
    "RateEntryUpdateError",
    "RateFileNotFoundError",
    "RateHistoryPoint",
    "get_rate_catalog_service",
    "RateFilePersistenceError",
    "RateIngestionService",
    "get_rate_ingestion_service",
]
