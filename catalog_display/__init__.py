"""
Catalog display backend: spreadsheet-backed product listing, image listing,
remote image proxy and live image-folder update notifications.
"""

__version__ = "1.0.0"
