"""
Real HTTP integration clients.

These clients talk to external systems:
- Google Sheets (product rows)
- Google Drive (proxied product images)

Switching:
The selection of local vs real product source happens in
catalog_display/api/dependencies.py only.
"""

from .google_sheets import GoogleSheetsClient, decode_service_account
from .image_proxy import ImageProxyClient

__all__ = ["GoogleSheetsClient", "ImageProxyClient", "decode_service_account"]
