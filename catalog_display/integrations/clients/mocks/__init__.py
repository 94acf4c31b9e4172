"""
Local/mock integration clients used during development.
"""

from .local_sheet import LocalSheetClient

__all__ = ["LocalSheetClient"]
