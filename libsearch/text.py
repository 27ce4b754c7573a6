"""
Text canonicalization used for comparisons only.

Normalized values are never stored; records keep their trimmed originals.
"""

from __future__ import annotations

from typing import Optional

import regex

_WS = regex.compile(r"\s+")
_GRAPHEME = regex.compile(r"\X")


def normalize_base(s: Optional[str]) -> str:
    """Trim, lowercase and collapse internal whitespace runs to one space."""
    return _WS.sub(" ", (s or "").strip().lower())


def normalize_no_space(s: Optional[str]) -> str:
    """Like normalize_base, but with every whitespace character removed."""
    return _WS.sub("", normalize_base(s))


def count_graphemes(s: Optional[str]) -> int:
    """
    Count user-perceived characters.

    A base letter with combining marks, a flag or a ZWJ emoji sequence
    counts once even though it spans several code points.
    """
    if not s:
        return 0
    return len(_GRAPHEME.findall(s))
