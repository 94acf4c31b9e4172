"""
Local Product Sheet Client (Mock/Local).

Purpose:
- Development-time product source when Google credentials are not available.
- Reads rows from a JSON file shaped like the Sheets API "values" payload,
  either a bare list of rows or {"values": [...]}.

Swap:
Set SHEET_ID + GOOGLE_SA_KEY_BASE64 and clear LOCAL_SHEET_PATH to use
clients/real_http/google_sheets.py instead.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from catalog_display.error_handler import SourceUnavailableError
from catalog_display.integrations.contracts.products import ProductRecord, ProductSource, SheetDiagnostics
from catalog_display.integrations.policy.row_normalizer import normalize_rows

logger = logging.getLogger(__name__)


class LocalSheetClient(ProductSource):
    def __init__(self, path: Union[str, Path], sheet_range: str = "local") -> None:
        self.path = Path(path)
        self.sheet_range = sheet_range

    def read_values(self) -> List[List[Any]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as exc:
            raise SourceUnavailableError(f"Local sheet not found: {self.path}") from exc
        except (OSError, ValueError) as exc:
            raise SourceUnavailableError(f"Local sheet unreadable: {self.path}: {exc}") from exc

        values: Optional[Any] = data.get("values") if isinstance(data, dict) else data
        if not isinstance(values, list):
            raise SourceUnavailableError(f"Local sheet must hold a list of rows: {self.path}")
        return values

    async def fetch_records(self) -> List[ProductRecord]:
        values = await asyncio.to_thread(self.read_values)
        products = normalize_rows(values)
        logger.info("[local-sheet] loaded %d products from %s", len(products), self.path)
        return products

    async def inspect(self) -> SheetDiagnostics:
        values = await asyncio.to_thread(self.read_values)
        return SheetDiagnostics(
            sheet_id=str(self.path),
            range=self.sheet_range,
            available_sheets=[self.path.stem],
            rows=len(values),
            sample=values[:3],
        )
