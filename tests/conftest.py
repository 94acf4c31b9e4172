"""Pytest fixtures shared by the catalog backend tests."""

from typing import List

import pytest

from catalog_display.error_handler import SourceUnavailableError
from catalog_display.integrations.contracts.products import ProductRecord, ProductSource, SheetDiagnostics
from catalog_display.utils.config_loader import AppConfig


class FakeClock:
    def __init__(self, now_ms: int = 1_000_000):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class FakeSource(ProductSource):
    """Product source whose next result (or failure) is set by the test."""

    def __init__(self, records: List[ProductRecord] = None):
        self.records = records if records is not None else []
        self.error: Exception = None
        self.calls = 0
        self.inspect_calls = 0

    async def fetch_records(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.records)

    async def inspect(self):
        self.inspect_calls += 1
        if self.error is not None:
            raise self.error
        return SheetDiagnostics(
            sheet_id="sheet-123",
            range="Products!A2:D",
            available_sheets=["Products", "Archive"],
            rows=len(self.records),
            sample=[[r.image, r.name, r.price, r.description] for r in self.records[:3]],
        )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def records():
    return [
        ProductRecord(image="a.png", name="Espresso", price=2.5, description="Single shot"),
        ProductRecord(image="b.png", name="Latte", price=3.75, description=""),
    ]


@pytest.fixture
def source(records):
    return FakeSource(records)


@pytest.fixture
def unavailable():
    return SourceUnavailableError("Sheets values.get unreachable: timed out")


@pytest.fixture
def public_dir(tmp_path):
    public = tmp_path / "public"
    (public / "images").mkdir(parents=True)
    (public / "index.html").write_text("<html><body>catalog</body></html>", encoding="utf-8")
    return public


@pytest.fixture
def config(public_dir):
    return AppConfig(server={"public_dir": str(public_dir)}, watch={"enabled": False})
