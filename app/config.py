"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

_DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class AppSettings:
    """
    Process-wide API settings.
    """

    title: str = "Rate Desk API"
    log_level: str = "INFO"


@dataclass(frozen=True)
class RateIngestionSettings:
    """
    Runtime settings for rate sheet ingestion.
    """

    max_upload_bytes: int = _DEFAULT_MAX_UPLOAD_BYTES
    log_validation_errors: bool = True


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Return cached API settings from environment variables.
    """

    return AppSettings(
        title=_get_str_env("APP_TITLE", "Rate Desk API"),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_rate_ingestion_settings() -> RateIngestionSettings:
    """
    Return cached rate ingestion settings from environment variables.
    """

    return RateIngestionSettings(
        max_upload_bytes=max(1, _get_int_env("RATE_UPLOAD_MAX_BYTES", _DEFAULT_MAX_UPLOAD_BYTES)),
        log_validation_errors=_get_bool_env("RATE_INGEST_LOG_VALIDATION_ERRORS", True),
    )
