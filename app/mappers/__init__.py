"""
app/mappers package marker.
"""

from app.mappers.csv_serializer import render_rate_row, render_rates_csv
from app.mappers.csv_tokenizer import split_fields, tokenize_rate_csv

__all__ = [
    "render_rate_row",
    "render_rates_csv",
    "split_fields",
    "tokenize_rate_csv",
]
