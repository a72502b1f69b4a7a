"""
app/mappers/csv_tokenizer.py

Splits raw rate-sheet text into a header row and header-keyed data rows.

Fields are separated by bare commas. Quoted fields are not supported, so a
value containing a literal comma shifts the remaining columns of its row.
"""

from __future__ import annotations

import re

from app.domain.rate_ingestion import EmptyInputError, RawRow, SourceRow, TokenizedCSV

_LINE_SEPARATOR = re.compile(r"\r?\n")
_FIELD_SEPARATOR = ","


def split_fields(line: str) -> list[str]:
    return [value.strip() for value in line.split(_FIELD_SEPARATOR)]


def tokenize_rate_csv(content: str) -> TokenizedCSV:
    """
    Tokenize a rate CSV blob.

    The first line is the header. Every following line that is non-empty
    after trimming becomes a ``SourceRow`` carrying its 1-based source line
    number, so the first data line under the header is line 2. Blank lines are
    skipped. Missing trailing values become ``""``; surplus values are dropped.

    Raises:
        EmptyInputError: the blob holds no text at all.
    """

    if not content or not content.strip():
        raise EmptyInputError()

    lines = _LINE_SEPARATOR.split(content)
    # A UTF-8 BOM that survived decoding would otherwise stick to "Origin".
    headers = tuple(split_fields(lines[0].lstrip("\ufeff")))

    rows: list[SourceRow] = []
    for index, raw_line in enumerate(lines[1:], start=2):
        line = raw_line.strip()
        if not line:
            continue

        values = split_fields(line)
        row: RawRow = {}
        for position, header in enumerate(headers):
            row[header] = values[position] if position < len(values) else ""
        rows.append(SourceRow(line_number=index, values=row))

    return TokenizedCSV(headers=headers, rows=tuple(rows))
