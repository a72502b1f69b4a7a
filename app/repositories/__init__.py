"""
app/repositories package marker.
"""

from app.repositories.rate_repository import (
    UPDATABLE_ENTRY_FIELDS,
    RateEntryRepository,
    RateFileRepository,
)

__all__ = [
    "UPDATABLE_ENTRY_FIELDS",
    "RateEntryRepository",
    "RateFileRepository",
]
