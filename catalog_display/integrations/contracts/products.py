"""
Product catalogue contracts.

Defines the shapes exchanged between the spreadsheet sources, the product
cache and the HTTP layer:
- ProductRecord: one normalised spreadsheet row
- SheetDiagnostics: what /products/debug reports about the source
- ProductSource: the interface both the Google Sheets client and the local
  development client implement
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

Price = Union[int, float]


@dataclass(frozen=True)
class ProductRecord:
    image: str
    name: str
    price: Price
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SheetDiagnostics:
    sheet_id: Optional[str]
    range: str
    available_sheets: List[str] = field(default_factory=list)
    rows: int = 0
    sample: List[List[Any]] = field(default_factory=list)  # first 3 raw rows

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": True,
            "sheetId": self.sheet_id,
            "range": self.range,
            "availableSheets": self.available_sheets,
            "rows": self.rows,
            "sample": self.sample,
        }


@dataclass(frozen=True)
class ProxiedImage:
    content_type: str
    content: bytes


class ProductSource(ABC):
    """Anything the product cache can refresh from."""

    @abstractmethod
    async def fetch_records(self) -> List[ProductRecord]:
        """Return every non-empty product row. Raises AuthError or SourceUnavailableError."""

    @abstractmethod
    async def inspect(self) -> SheetDiagnostics:
        """Describe the source for diagnostics."""
