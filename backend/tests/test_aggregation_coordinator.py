"""
Unit tests for the aggregation coordinator.

The coordinator must merge concurrent adapter output, bound the wait with
its timeout and degrade to the fallback dataset instead of raising.
"""

import asyncio
import time

from app.data.fallback_destinations import FALLBACK_DATASET_VERSION, fallback_destinations
from app.services.aggregation_coordinator import AggregationCoordinator
from app.services.source_adapter import SourceAdapter
from fakes import FakeAdapter, record, scrape_transport


class TestAggregate:
    """Tests for AggregationCoordinator.aggregate with live results."""

    async def test_merges_all_sources(self, fake_coordinator):
        result = await fake_coordinator.aggregate("france")

        assert result.is_fallback is False
        assert result.search_query == "france"
        assert result.total_results == len(result.destinations) == 2
        paris, lyon = result.destinations
        assert paris.key == "paris|france"
        assert paris.source == "Lonely Planet"
        assert paris.type == ["urban", "cultural", "romantic"]
        assert paris.highlights == ["Eiffel Tower", "Louvre Museum", "Montmartre"]
        assert lyon.name == "Lyon"

    async def test_canonical_fields_are_filled(self, fake_coordinator):
        paris = (await fake_coordinator.aggregate("france")).destinations[0]

        assert paris.climate == "Warm"
        assert paris.average_cost.accommodation == "€150-300/night"
        assert paris.currency == "Varies by country"
        assert paris.local_tips == ["Check local tourism website for tips"]

    async def test_every_adapter_gets_the_query(self, fake_coordinator):
        await fake_coordinator.aggregate("beach")
        assert all(a.calls == ["beach"] for a in fake_coordinator.adapters)

    async def test_failing_adapter_does_not_block_others(self):
        coordinator = AggregationCoordinator(adapters=[
            FakeAdapter("tripadvisor", error=RuntimeError("down")),
            FakeAdapter("lonelyplanet", [record("Kyoto", "Japan", "Lonely Planet")]),
        ], timeout=1.0)

        result = await coordinator.aggregate("temples")

        assert result.is_fallback is False
        assert [d.name for d in result.destinations] == ["Kyoto"]

    async def test_results_follow_adapter_order_not_completion_order(self):
        """The slow first adapter's record still comes first."""
        coordinator = AggregationCoordinator(adapters=[
            FakeAdapter("tripadvisor", [record("Rome", "Italy")], delay=0.05),
            FakeAdapter("booking", [record("Milan", "Italy", "Booking.com")]),
        ], timeout=1.0)

        result = await coordinator.aggregate("italy")

        assert [d.name for d in result.destinations] == ["Rome", "Milan"]

    async def test_works_with_http_adapters(self):
        transport = scrape_transport({
            "tripadvisor": [record("Paris", "France", rating=4.5)],
            "lonelyplanet": [],
            "booking": [record("Paris", "France", "Booking.com", highlights=["Seine"])],
        })
        adapters = [
            SourceAdapter(p, p, base_url="http://scrape.test/api", transport=transport)
            for p in ("tripadvisor", "lonelyplanet", "booking")
        ]
        coordinator = AggregationCoordinator(adapters=adapters, timeout=1.0)

        result = await coordinator.aggregate("paris")

        assert result.total_results == 1
        assert result.destinations[0].highlights == ["Seine"]
        await coordinator.close()


class TestTimeout:
    """Tests for the coordinator-level timeout."""

    async def test_slow_adapter_counts_as_empty(self):
        slow = FakeAdapter("booking", [record("Oslo", "Norway")], delay=5)
        coordinator = AggregationCoordinator(adapters=[
            FakeAdapter("tripadvisor", [record("Bergen", "Norway")]),
            slow,
        ], timeout=0.1)

        start = time.monotonic()
        result = await coordinator.aggregate("fjords")

        assert time.monotonic() - start < 2
        assert [d.name for d in result.destinations] == ["Bergen"]
        assert slow.cancelled is True

    async def test_all_adapters_timing_out_serves_fallback(self):
        coordinator = AggregationCoordinator(adapters=[
            FakeAdapter("tripadvisor", [record("Oslo", "Norway")], delay=5),
        ], timeout=0.05)

        result = await coordinator.aggregate("fjords")

        assert result.is_fallback is True


class TestFallback:
    """Tests for the fallback path."""

    async def test_total_failure_serves_fallback(self, failing_coordinator):
        result = await failing_coordinator.aggregate("anything")

        assert result.is_fallback is True
        assert result.total_results == 3
        assert [d.name for d in result.destinations] == ["Paris", "Tokyo", "Bali"]

    async def test_fallback_is_deterministic(self, failing_coordinator):
        first = await failing_coordinator.aggregate("one query")
        second = await failing_coordinator.aggregate("another query")

        assert first.destinations == second.destinations
        assert second.search_query == "another query"

    async def test_no_adapters_serves_fallback(self):
        result = await AggregationCoordinator(adapters=[], timeout=1.0).aggregate("x")
        assert result.is_fallback is True

    async def test_unexpected_error_never_propagates(self, monkeypatch):
        coordinator = AggregationCoordinator(adapters=[FakeAdapter("tripadvisor")], timeout=1.0)

        async def _boom(query):
            raise asyncio.InvalidStateError("broken join")

        monkeypatch.setattr(coordinator, "_collect", _boom)

        result = await coordinator.aggregate("x")

        assert result.is_fallback is True
        assert result.total_results == 3

    def test_fallback_dataset_is_versioned_and_fresh(self):
        assert FALLBACK_DATASET_VERSION == "2024.1"
        first, second = fallback_destinations(), fallback_destinations()
        assert first == second
        assert first[0] is not second[0]
        assert first[0].currency == "Euro (€)"
