"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.rate_entry import RateEntry
from db.models.rate_file import RateFile, RateFileStatus

__all__ = [
    "RateEntry",
    "RateFile",
    "RateFileStatus",
]
