"""
Bytes -> text for dataset files.

Catalogue exports arrive as UTF-8 (often with a BOM) or as a legacy
codepage such as cp949/euc-kr, so the encoding is detected rather than assumed.
"""

from __future__ import annotations

import codecs
import logging

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"

# Short double-byte exports often score as BOM-less UTF-16; only trust
# the wide codecs when the matching BOM is present.
_WIDE_BOMS = {
    "utf_32": (codecs.BOM_UTF32_LE, codecs.BOM_UTF32_BE),
    "utf_32_le": (codecs.BOM_UTF32_LE,),
    "utf_32_be": (codecs.BOM_UTF32_BE,),
    "utf_16": (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE),
    "utf_16_le": (codecs.BOM_UTF16_LE,),
    "utf_16_be": (codecs.BOM_UTF16_BE,),
}


def _is_utf8(name: str) -> bool:
    return name.lower().replace("-", "_") in ("utf_8", "utf8", "ascii")


def _excluded_codecs(raw: bytes) -> list[str]:
    return [name for name, boms in _WIDE_BOMS.items() if not raw.startswith(boms)]


def decode_csv_bytes(raw: bytes) -> str:
    """
    Decode raw CSV bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - UTF-16/32 are only candidates when the input starts with their BOM.
    - UTF-8 input with a BOM is decoded as utf-8-sig so the BOM is dropped.
    - If decoding fails, try UTF-8, then decode with replacement characters.
    - Never raises for undecodable input.
    """
    if not raw:
        return ""

    match = from_bytes(raw, cp_exclusion=_excluded_codecs(raw)).best()
    decode_used = match.encoding if match is not None else "utf-8"

    if raw.startswith(_UTF8_BOM) and _is_utf8(decode_used):
        decode_used = "utf-8-sig"

    try:
        return raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        logger.warning("decode with %s failed, falling back to utf-8", decode_used)

    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning("utf-8 decode failed, replacing undecodable bytes")
        return raw.decode("utf-8", errors="replace")
