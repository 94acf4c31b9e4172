"""
Normalisation rules applied to raw spreadsheet data before it reaches the cache.
"""

from .row_normalizer import normalize_row, normalize_rows, parse_price, to_text

__all__ = ["normalize_row", "normalize_rows", "parse_price", "to_text"]
