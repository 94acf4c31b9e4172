"""
Integrations layer.
This package contains all code used to communicate with external systems:
- Google Sheets (product catalogue source)
- Google Drive (image proxy)

Key rule:
- Services and HTTP handlers MUST NOT call external APIs directly.
- They go through integration clients (under catalog_display/integrations/clients).
- The local sheet client stands in for Google Sheets during development.
"""

from .contracts.products import ProductRecord, ProductSource, ProxiedImage, SheetDiagnostics
from .policy.row_normalizer import normalize_rows, parse_price

__all__ = [
    "ProductRecord", "ProductSource", "ProxiedImage", "SheetDiagnostics",
    "normalize_rows", "parse_price",
]
