"""
Contracts shared by every product source and the HTTP layer.
"""

from .products import Price, ProductRecord, ProductSource, ProxiedImage, SheetDiagnostics

__all__ = ["Price", "ProductRecord", "ProductSource", "ProxiedImage", "SheetDiagnostics"]
