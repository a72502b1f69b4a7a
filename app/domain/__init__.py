"""
app/domain package marker.
"""

from app.domain.rate_ingestion import (
    REQUIRED_HEADERS,
    EmptyInputError,
    RateEntryCandidate,
    RateValidationResult,
    RawRow,
    SourceRow,
    TokenizedCSV,
)

__all__ = [
    "REQUIRED_HEADERS",
    "EmptyInputError",
    "RateEntryCandidate",
    "RateValidationResult",
    "RawRow",
    "SourceRow",
    "TokenizedCSV",
]
