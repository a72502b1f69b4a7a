"""
app/domain/rate_ingestion.py

Domain types used by the rate file ingestion pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

# Column order here is also the export column order.
REQUIRED_HEADERS: tuple[str, ...] = (
    "Origin",
    "Destination",
    "Weight",
    "ServiceType",
    "Rate",
    "Currency",
    "EffectiveDate",
    "ExpiryDate",
)

EMPTY_FILE_MESSAGE = "CSV file is empty"
NO_DATA_ROWS_MESSAGE = "CSV file has no data rows"

# Header -> value mapping for one data line, before validation.
RawRow = dict[str, str]


class EmptyInputError(ValueError):
    """
    Raised when a rate CSV blob has no lines at all, not even a header.
    """

    def __init__(self, message: str = EMPTY_FILE_MESSAGE) -> None:
        super().__init__(message)


@dataclass(frozen=True)
class SourceRow:
    """
    One non-blank data line and its 1-based position in the source text.
    """

    line_number: int
    values: RawRow


@dataclass(frozen=True)
class TokenizedCSV:
    headers: tuple[str, ...]
    rows: tuple[SourceRow, ...] = ()


@dataclass(frozen=True)
class RateEntryCandidate:
    """
    Typed rate entry produced from a row that passed every field rule.
    """

    origin: str
    destination: str
    weight: str
    service_type: str
    rate: float
    currency: str
    effective_date: date
    expiry_date: date


@dataclass(frozen=True)
class RateValidationResult:
    """
    Outcome of validating a whole tokenized rate file.

    ``errors`` is ordered: header messages, or row messages by line then column.
    """

    candidates: list[RateEntryCandidate] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors
