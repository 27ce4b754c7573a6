"""
Fixed rules shared by the parser, the search engine and the API.

Anything deployment-specific lives in config.py instead.
"""

PAGE_SIZE = 10

BOM = "\ufeff"
PLACEHOLDER_PREFIX = "__col_"

# Minimum query length, counted in grapheme clusters
STRICT_MIN_LENGTH = 2
LENIENT_MIN_LENGTH = 1
