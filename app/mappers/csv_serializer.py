"""
app/mappers/csv_serializer.py

Renders rate entries back into rate-sheet CSV text for export.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from app.domain.rate_ingestion import REQUIRED_HEADERS

_ATTRIBUTE_BY_HEADER: dict[str, str] = {
    "Origin": "origin",
    "Destination": "destination",
    "Weight": "weight",
    "ServiceType": "service_type",
    "Rate": "rate",
    "Currency": "currency",
    "EffectiveDate": "effective_date",
    "ExpiryDate": "expiry_date",
}


def render_rate_row(entry: Any) -> str:
    return ",".join(str(getattr(entry, _ATTRIBUTE_BY_HEADER[header])) for header in REQUIRED_HEADERS)


def render_rates_csv(entries: Iterable[Any]) -> str:
    """
    Render entries as CSV: the required header line plus one line per entry.

    Works with ORM ``RateEntry`` rows and ``RateEntryCandidate`` values alike.
    Values are written with ``str()`` and never quoted, matching the tokenizer.
    """

    lines = [",".join(REQUIRED_HEADERS)]
    lines.extend(render_rate_row(entry) for entry in entries)
    return "\n".join(lines)
