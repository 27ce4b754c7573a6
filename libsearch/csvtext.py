"""
CSV text -> rows -> records.

Responsibilities:
- quote-aware splitting of raw text into rows of string fields
- dropping fully blank rows (including rows made only of commas/whitespace)
- header normalization and placeholder names for empty headers
- building one Record per data row with a positional id
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from .models import Record
from .rules import BOM, PLACEHOLDER_PREFIX

_WS = re.compile(r"\s+")


def _is_blank(row: List[str]) -> bool:
    return all(not v.strip() for v in row)


def parse_csv(text: str) -> List[List[str]]:
    """
    Split CSV text into rows of string fields.

    Rules:
    - `"` toggles quoting; `""` inside quotes is a literal quote.
    - `,` and line terminators are literal while quoted.
    - CRLF counts as a single terminator.
    - Rows whose fields are all empty/whitespace are dropped.
    - An unterminated quote at end of input is accepted as-is.
    """
    rows: List[List[str]] = []
    row: List[str] = []
    field: List[str] = []
    in_quotes = False

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]

        if ch == '"':
            if in_quotes and i + 1 < n and text[i + 1] == '"':
                field.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
            i += 1
            continue

        if not in_quotes and ch == ",":
            row.append("".join(field))
            field = []
            i += 1
            continue

        if not in_quotes and ch in "\r\n":
            if ch == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
            row.append("".join(field))
            field = []
            if not _is_blank(row):
                rows.append(row)
            row = []
            i += 1
            continue

        field.append(ch)
        i += 1

    # last row
    row.append("".join(field))
    if not _is_blank(row):
        rows.append(row)

    return rows


def strip_bom(s: str) -> str:
    return s[1:] if s.startswith(BOM) else s


def normalize_header(h: Optional[str]) -> str:
    """Strip a leading BOM, trim, and remove all internal whitespace."""
    return _WS.sub("", strip_bom(h or "").strip())


def header_keys(header_row: Sequence[str]) -> List[str]:
    """Normalized header names; empty ones get a placeholder no real header uses."""
    names = [normalize_header(cell) for cell in header_row]
    taken = set(names)

    keys = []
    for i, name in enumerate(names):
        if not name:
            name = f"{PLACEHOLDER_PREFIX}{i}"
            while name in taken:
                name = "_" + name
            taken.add(name)
        keys.append(name)
    return keys


def rows_to_records(rows: Sequence[Sequence[str]]) -> List[Record]:
    """
    Turn a header row plus data rows into records.

    Short rows are padded with "" and cells past the header width are ignored.
    The record id is the zero-based index of the data row.
    """
    if not rows:
        return []

    keys = header_keys(rows[0])

    records: List[Record] = []
    for idx, r in enumerate(rows[1:]):
        fields = {}
        for i, key in enumerate(keys):
            fields[key] = r[i].strip() if i < len(r) else ""
        records.append(Record(id=str(idx), fields=fields))

    return records
