"""
app/validators/rate_csv_validator.py

Header and row-level validation for rate sheet ingestion.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from datetime import date
from typing import Any, Mapping

from app.domain.rate_ingestion import (
    NO_DATA_ROWS_MESSAGE,
    REQUIRED_HEADERS,
    RateEntryCandidate,
    RateValidationResult,
    TokenizedCSV,
)

CURRENCY_PATTERN = re.compile(r"[A-Z]{3}")
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
RATE_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class RateHeaderValidator:
    """
    Checks that every required column is present. Order and extra columns
    do not matter; names are matched exactly.
    """

    def __init__(self, required_headers: Sequence[str] = REQUIRED_HEADERS) -> None:
        self._required_headers = tuple(required_headers)

    def validate(self, headers: Sequence[str]) -> list[str]:
        present = set(headers)
        return [
            f"Missing required header: {name}"
            for name in self._required_headers
            if name not in present
        ]


class RateRowValidator:
    """
    Validates and parses one header-keyed rate row.

    Every rule is evaluated so a row reports all of its problems at once.
    """

    def validate_row(
        self,
        *,
        raw_row: Mapping[str, str],
        line_number: int,
    ) -> tuple[RateEntryCandidate | None, list[str]]:
        errors: list[str] = []
        prefix = f"Row {line_number}"

        origin = self._parse_required_string(raw_row, "Origin", prefix, errors)
        destination = self._parse_required_string(raw_row, "Destination", prefix, errors)
        weight = self._parse_required_string(raw_row, "Weight", prefix, errors)
        service_type = self._parse_required_string(raw_row, "ServiceType", prefix, errors)
        rate = self._parse_rate(raw_row, prefix, errors)
        currency = self._parse_currency(raw_row, prefix, errors)
        effective_date = self._parse_date(raw_row, "EffectiveDate", prefix, errors)
        expiry_date = self._parse_date(raw_row, "ExpiryDate", prefix, errors)

        if errors:
            return None, errors

        return (
            RateEntryCandidate(
                origin=origin,
                destination=destination,
                weight=weight,
                service_type=service_type,
                rate=rate,
                currency=currency,
                effective_date=effective_date,
                expiry_date=expiry_date,
            ),
            [],
        )

    def _parse_required_string(
        self,
        raw_row: Mapping[str, str],
        column: str,
        prefix: str,
        errors: list[str],
    ) -> str:
        value = self._clean(raw_row.get(column))
        if not value:
            errors.append(f"{prefix}: Missing {column}")
        return value

    def _parse_rate(
        self,
        raw_row: Mapping[str, str],
        prefix: str,
        errors: list[str],
    ) -> float:
        raw = self._parse_required_string(raw_row, "Rate", prefix, errors)
        if not raw:
            return 0.0

        rate = float(raw) if RATE_PATTERN.fullmatch(raw) else math.nan
        if not math.isfinite(rate):
            errors.append(f"{prefix}: Rate must be a number")
            return 0.0
        if rate < 0:
            errors.append(f"{prefix}: Rate must not be negative")
        return rate

    def _parse_currency(
        self,
        raw_row: Mapping[str, str],
        prefix: str,
        errors: list[str],
    ) -> str:
        raw = self._parse_required_string(raw_row, "Currency", prefix, errors)
        if raw and CURRENCY_PATTERN.fullmatch(raw) is None:
            errors.append(f"{prefix}: Currency must be a 3-letter code (e.g., USD)")
        return raw

    def _parse_date(
        self,
        raw_row: Mapping[str, str],
        column: str,
        prefix: str,
        errors: list[str],
    ) -> date:
        raw = self._parse_required_string(raw_row, column, prefix, errors)
        if not raw:
            return date.min

        parsed = parse_iso_date(raw)
        if parsed is None:
            errors.append(f"{prefix}: {column} must be in YYYY-MM-DD format")
            return date.min
        return parsed

    @staticmethod
    def _clean(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()


def parse_iso_date(value: str) -> date | None:
    """
    Parse a strict ``YYYY-MM-DD`` calendar date, or return None.
    """

    if DATE_PATTERN.fullmatch(value) is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


class RateSheetValidator:
    """
    Validates a tokenized rate sheet: headers first, then every data row.

    Header failures short-circuit row validation. Row errors are accumulated
    across the whole file in line order.
    """

    def __init__(
        self,
        *,
        header_validator: RateHeaderValidator | None = None,
        row_validator: RateRowValidator | None = None,
    ) -> None:
        self._header_validator = header_validator or RateHeaderValidator()
        self._row_validator = row_validator or RateRowValidator()

    def validate(self, document: TokenizedCSV) -> RateValidationResult:
        header_errors = self._header_validator.validate(document.headers)
        if header_errors:
            return RateValidationResult(errors=header_errors)

        if not document.rows:
            return RateValidationResult(errors=[NO_DATA_ROWS_MESSAGE])

        candidates: list[RateEntryCandidate] = []
        errors: list[str] = []
        for row in document.rows:
            candidate, row_errors = self._row_validator.validate_row(
                raw_row=row.values,
                line_number=row.line_number,
            )
            if row_errors:
                errors.extend(row_errors)
            elif candidate is not None:
                candidates.append(candidate)

        if errors:
            return RateValidationResult(errors=errors)
        return RateValidationResult(candidates=candidates)
