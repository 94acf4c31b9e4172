"""
Google Sheets Product Client.

Purpose:
- Authenticates with a service account supplied as a base64-encoded JSON blob
- Reads the configured product range and normalizes rows into ProductRecord

Usage:
- Built by catalog_display.api.dependencies.build_services when SHEET_ID is set
- Called only by the ProductCache (refresh) and the /products/debug endpoint

Implementation notes:
- One remote call per fetch, no retries; the cache decides what to do on failure
- googleapiclient is blocking, so public coroutines hop onto a worker thread
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
from typing import Any, Callable, Dict, List, Optional

import google_auth_httplib2
import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from catalog_display.error_handler import AuthError, SourceUnavailableError
from catalog_display.integrations.contracts.products import ProductRecord, ProductSource, SheetDiagnostics
from catalog_display.integrations.policy.row_normalizer import normalize_rows

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"
SAMPLE_ROWS = 3


def decode_service_account(blob_b64: Optional[str]) -> Dict[str, Any]:
    """
    Decode GOOGLE_SA_KEY_BASE64 into service account info.

    Escaped "\\n" sequences in private_key are turned into real line breaks,
    which is how keys usually survive being pasted into env files.
    """
    if not blob_b64:
        raise AuthError("Missing GOOGLE_SA_KEY_BASE64")
    try:
        raw = base64.b64decode(blob_b64.strip()).decode("utf-8")
        info = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise AuthError(f"GOOGLE_SA_KEY_BASE64 is not base64-encoded JSON: {exc}") from exc
    if not isinstance(info, dict):
        raise AuthError("GOOGLE_SA_KEY_BASE64 must decode to a JSON object")

    private_key = str(info.get("private_key") or "").replace("\\n", "\n")
    if not private_key:
        raise AuthError("Service Account private_key is empty")
    if not info.get("client_email"):
        raise AuthError("Service Account client_email is empty")

    info["private_key"] = private_key
    info.setdefault("token_uri", DEFAULT_TOKEN_URI)
    return info


class GoogleSheetsClient(ProductSource):
    def __init__(
        self,
        sheet_id: Optional[str] = None,
        sheet_range: str = "Products!A2:D",
        service_account_b64: Optional[str] = None,
        timeout_seconds: float = 20.0,
        service_factory: Optional[Callable[[], Any]] = None,
    ) -> None:
        self.sheet_id = sheet_id
        self.sheet_range = sheet_range
        self.service_account_b64 = service_account_b64
        self.timeout_seconds = timeout_seconds
        self._service_factory = service_factory or self._build_service

    def _build_service(self):
        info = decode_service_account(self.service_account_b64)
        try:
            credentials = Credentials.from_service_account_info(info, scopes=SCOPES)
        except (ValueError, KeyError) as exc:
            raise AuthError(f"Invalid service account credentials: {exc}") from exc

        http = google_auth_httplib2.AuthorizedHttp(credentials, http=httplib2.Http(timeout=self.timeout_seconds))
        return build("sheets", "v4", http=http, cache_discovery=False)

    def _require_sheet_id(self) -> str:
        if not self.sheet_id:
            raise SourceUnavailableError("Missing SHEET_ID")
        return self.sheet_id

    @staticmethod
    def _execute(request, what: str) -> Dict[str, Any]:
        try:
            return request.execute(num_retries=0) or {}
        except HttpError as exc:
            status = getattr(exc.resp, "status", None)
            reason = getattr(exc, "reason", None) or str(exc)
            raise SourceUnavailableError(
                f"Sheets {what} failed: {reason}",
                code=status,
                details=getattr(exc, "error_details", None) or None,
            ) from exc
        except GoogleAuthError as exc:
            raise AuthError(f"Sheets {what} rejected credentials: {exc}") from exc
        except (httplib2.HttpLib2Error, OSError) as exc:
            raise SourceUnavailableError(f"Sheets {what} unreachable: {exc}") from exc

    def read_values(self) -> List[List[Any]]:
        """Fetch the raw cell values of the configured range (blocking)."""
        sheet_id = self._require_sheet_id()
        service = self._service_factory()
        resp = self._execute(
            service.spreadsheets().values().get(
                spreadsheetId=sheet_id,
                range=self.sheet_range,
                valueRenderOption="UNFORMATTED_VALUE",
            ),
            "values.get",
        )
        return resp.get("values") or []

    def _fetch_records_blocking(self) -> List[ProductRecord]:
        products = normalize_rows(self.read_values())
        logger.info("[sheets] fetched %d products from %s", len(products), self.sheet_range)
        return products

    def _inspect_blocking(self) -> SheetDiagnostics:
        sheet_id = self._require_sheet_id()
        service = self._service_factory()
        meta = self._execute(service.spreadsheets().get(spreadsheetId=sheet_id), "spreadsheets.get")
        titles = [
            (sheet.get("properties") or {}).get("title", "")
            for sheet in meta.get("sheets") or []
        ]
        resp = self._execute(
            service.spreadsheets().values().get(
                spreadsheetId=sheet_id,
                range=self.sheet_range,
                valueRenderOption="UNFORMATTED_VALUE",
            ),
            "values.get",
        )
        values = resp.get("values") or []
        return SheetDiagnostics(
            sheet_id=sheet_id,
            range=self.sheet_range,
            available_sheets=titles,
            rows=len(values),
            sample=values[:SAMPLE_ROWS],
        )

    async def fetch_records(self) -> List[ProductRecord]:
        return await asyncio.to_thread(self._fetch_records_blocking)

    async def inspect(self) -> SheetDiagnostics:
        return await asyncio.to_thread(self._inspect_blocking)
