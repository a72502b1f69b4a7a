"""
app/validators package marker.
"""

from app.validators.rate_csv_validator import (
    RateHeaderValidator,
    RateRowValidator,
    RateSheetValidator,
    parse_iso_date,
)

__all__ = [
    "RateHeaderValidator",
    "RateRowValidator",
    "RateSheetValidator",
    "parse_iso_date",
]
