"""
In-memory product cache with a time-to-live.

Serves the last successful spreadsheet fetch while it is fresh. When it goes
stale the next caller refreshes it; if the refresh fails the stale data (or
an empty list when nothing was ever fetched) is served instead of an error.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from catalog_display.integrations.contracts.products import ProductRecord, ProductSource

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CacheEntry:
    data: Optional[List[ProductRecord]] = None
    fetched_at_ms: int = 0


class ProductCache:
    def __init__(self, source: ProductSource, ttl_ms: int = 60000, clock: Optional[Callable[[], int]] = None) -> None:
        self.source = source
        self.ttl_ms = ttl_ms
        self._clock = clock or _now_ms
        self._entry = CacheEntry()
        # In-flight refresh; every caller that finds the cache stale awaits the same one.
        self._refresh_task: Optional[asyncio.Task] = None

    @property
    def entry(self) -> CacheEntry:
        return self._entry

    def is_fresh(self, now_ms: Optional[int] = None) -> bool:
        entry = self._entry
        if entry.data is None:
            return False
        now_ms = self._clock() if now_ms is None else now_ms
        return now_ms - entry.fetched_at_ms < self.ttl_ms

    def age_ms(self) -> Optional[int]:
        if self._entry.data is None:
            return None
        return self._clock() - self._entry.fetched_at_ms

    def invalidate(self) -> None:
        """Force the next get_products() to refresh. Stale data is kept as a fallback."""
        if self._entry.data is not None:
            self._entry = CacheEntry(data=self._entry.data, fetched_at_ms=self._clock() - self.ttl_ms)

    async def get_products(self) -> List[ProductRecord]:
        if self.is_fresh():
            return self._entry.data

        task = self._refresh_task
        if task is None:
            task = asyncio.ensure_future(self._refresh())
            self._refresh_task = task
            task.add_done_callback(self._refresh_done)
        # shield: a cancelled request must not cancel the fetch other callers wait on
        return await asyncio.shield(task)

    def _refresh_done(self, task: asyncio.Task) -> None:
        if self._refresh_task is task:
            self._refresh_task = None

    async def _refresh(self) -> List[ProductRecord]:
        started = self._clock()
        try:
            data = await self.source.fetch_records()
        except Exception as e:
            logger.error("[products] sheet fetch failed: %s", e, exc_info=True)
            return self._entry.data or []

        self._entry = CacheEntry(data=data, fetched_at_ms=started)
        return data
