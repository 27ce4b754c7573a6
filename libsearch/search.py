"""
Query validation, substring filtering and pagination.

Everything here is a pure function of its arguments: records are never
mutated and repeated calls return equal results.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

from .errors import ValidationFailure
from .models import Page, Record
from .rules import LENIENT_MIN_LENGTH, PAGE_SIZE, STRICT_MIN_LENGTH
from .text import count_graphemes, normalize_base, normalize_no_space


@dataclass(frozen=True)
class SearchPolicy:
    min_length: int = STRICT_MIN_LENGTH
    whitespace_insensitive: bool = False

    @classmethod
    def for_mode(cls, mode: str) -> "SearchPolicy":
        if mode == "lenient":
            return cls(min_length=LENIENT_MIN_LENGTH, whitespace_insensitive=True)
        return cls(min_length=STRICT_MIN_LENGTH, whitespace_insensitive=False)


def validate_query(query: str, min_length: int = STRICT_MIN_LENGTH) -> str:
    """Return the trimmed query, or raise ValidationFailure."""
    trimmed = (query or "").strip()
    if not trimmed:
        raise ValidationFailure("Enter a search term.")
    if count_graphemes(trimmed) < min_length:
        raise ValidationFailure(
            f"Search term must be at least {min_length} characters, excluding surrounding spaces."
        )
    return trimmed


def filter_records(
    records: Sequence[Record],
    field: str,
    query: str,
    whitespace_insensitive: bool = False,
) -> List[Record]:
    """Records whose `field` contains `query`, in input order."""
    q = normalize_base(query)
    if not q:
        return []
    q_flat = normalize_no_space(query)

    out = []
    for r in records:
        candidate = r.get(field) or ""
        if q in normalize_base(candidate):
            out.append(r)
        elif whitespace_insensitive and q_flat in normalize_no_space(candidate):
            out.append(r)
    return out


def paginate(results: Sequence[Record], page_number: int, page_size: int = PAGE_SIZE) -> Page:
    """
    Slice `results` into a page.

    Out-of-range page numbers are clamped to [1, total_pages]; an empty
    result set has exactly one (empty) page.
    """
    total = len(results)
    total_pages = max(1, math.ceil(total / page_size))
    page = min(max(1, page_number), total_pages)
    start = (page - 1) * page_size
    return Page(
        items=list(results[start:start + page_size]),
        page=page,
        total_pages=total_pages,
        total_results=total,
        page_size=page_size,
    )
