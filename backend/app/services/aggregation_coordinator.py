"""Aggregation coordinator — parallel multi-source destination search with fallback."""

import asyncio
import logging
import time

from app.config import settings
from app.data.fallback_destinations import fallback_destinations
from app.schemas.destination import CanonicalDestination, ScrapedRecord, SearchResult
from app.services.deduplicator import merge_records
from app.services.source_adapter import SourceAdapter, build_default_adapters

logger = logging.getLogger(__name__)


class AggregationCoordinator:
    """Fans a query out to every source adapter and reconciles the results."""

    def __init__(
        self,
        adapters: list[SourceAdapter] | None = None,
        timeout: float | None = None,
    ):
        self.adapters = adapters if adapters is not None else build_default_adapters()
        self.timeout = timeout if timeout is not None else settings.aggregation_timeout_seconds

    async def aggregate(self, query: str) -> SearchResult:
        """
        Search all sources for ``query``.

        Never raises. When no source yields a usable record the fixed
        fallback dataset is returned with ``is_fallback`` set.
        """
        start_time = time.monotonic()

        try:
            slots = await self._collect(query)
            records = [record for slot in slots for record in slot]
            destinations = [
                CanonicalDestination.from_scraped(r) for r in merge_records(records)
            ]
        except Exception as e:
            logger.error(f"Aggregation failed for '{query}', serving fallback: {e!r}")
            slots, records, destinations = [], [], []

        elapsed_ms = int((time.monotonic() - start_time) * 1000)

        if not destinations:
            fallback = fallback_destinations()
            logger.warning(
                f"No live destinations for '{query}' ({elapsed_ms}ms), "
                f"serving {len(fallback)} fallback destinations"
            )
            return SearchResult(
                destinations=fallback,
                total_results=len(fallback),
                search_query=query,
                is_fallback=True,
            )

        logger.info(
            f"Aggregated '{query}': {len(records)} records from "
            f"{sum(1 for s in slots if s)}/{len(self.adapters)} sources -> "
            f"{len(destinations)} destinations in {elapsed_ms}ms"
        )
        return SearchResult(
            destinations=destinations,
            total_results=len(destinations),
            search_query=query,
            is_fallback=False,
        )

    async def _collect(self, query: str) -> list[list[ScrapedRecord]]:
        """Run every adapter concurrently, one result slot per adapter.

        Slots are filled by their own task only; whatever has not settled when
        the timeout fires is cancelled and keeps its empty slot.
        """
        slots: list[list[ScrapedRecord]] = [[] for _ in self.adapters]

        async def _fill(idx: int, adapter: SourceAdapter):
            slots[idx] = await adapter.fetch(query)

        tasks = [
            asyncio.create_task(_fill(idx, adapter), name=f"scrape:{adapter.provider}")
            for idx, adapter in enumerate(self.adapters)
        ]
        if not tasks:
            return slots

        done, pending = await asyncio.wait(tasks, timeout=self.timeout)

        for task in pending:
            logger.warning(f"{task.get_name()} timed out after {self.timeout}s")
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        for task in done:
            exc = task.exception()
            if exc is not None:
                logger.warning(f"{task.get_name()} failed: {exc!r}")

        return slots

    async def close(self):
        for adapter in self.adapters:
            await adapter.close()


aggregation_coordinator = AggregationCoordinator()
