"""
Unit tests for the accommodation service.

Hotel API calls go through an httpx MockTransport and an in-memory cache.
"""

from datetime import date

import pytest

from app.schemas.travel import TravelContext
from app.services.accommodation_service import (
    FETCH_ERROR_MESSAGE,
    AccommodationService,
    generate_mock_accommodations,
)
from fakes import booking_transport, hotel

TODAY = date(2026, 6, 1)


def _context(**fields) -> TravelContext:
    return TravelContext(**{"destination": "Paris", "budget": 1500, **fields})


class TestMockAccommodations:
    """Tests for generate_mock_accommodations."""

    def test_prices_scale_with_budget(self):
        stays = generate_mock_accommodations(1500)
        assert [s.name for s in stays] == [
            "Grand Hotel", "Cozy Boutique Hotel", "Seaside Resort", "Mountain View Lodge",
        ]
        assert [s.price for s in stays] == ["$129/night", "$86/night", "$116/night", "$54/night"]

    def test_prices_are_capped(self):
        stays = generate_mock_accommodations(100_000)
        assert [s.price for s in stays] == ["$500/night", "$300/night", "$450/night", "$150/night"]


class TestSearch:
    """Tests for AccommodationService.search."""

    async def test_without_api_key_serves_mock(self, fake_cache):
        service = AccommodationService(api_key="", cache=fake_cache)

        result = await service.search(_context(), today=TODAY)

        assert result.is_fallback is True
        assert result.error is None
        assert len(result.accommodations) == 4
        assert result.check_out == date(2026, 6, 8)
        assert result.nightly_budget == 214.29

    async def test_live_results_are_budget_filtered(self, fake_cache):
        seen = []
        transport = booking_transport(
            [hotel(1, "Hotel Lumière", 150), hotel(2, "Palais Royal", 300)], seen=seen
        )
        service = AccommodationService(api_key="secret", cache=fake_cache, transport=transport)

        result = await service.search(_context(), today=TODAY)

        assert result.is_fallback is False
        assert [a.name for a in result.accommodations] == ["Hotel Lumière"]
        assert result.accommodations[0].price == "$150/night"
        assert result.accommodations[0].location == "Paris, 1 Rue Test"
        request = seen[0]
        assert request.headers["X-RapidAPI-Key"] == "secret"
        assert request.url.params["checkin_date"] == "2026-06-01"
        assert request.url.params["checkout_date"] == "2026-06-08"
        assert request.url.params["dest_id"] == "Paris"
        await service.close()

    async def test_nothing_within_budget_is_empty_not_fallback(self, fake_cache):
        transport = booking_transport([hotel(2, "Palais Royal", 900)])
        service = AccommodationService(api_key="secret", cache=fake_cache, transport=transport)

        result = await service.search(_context(), today=TODAY)

        assert result.accommodations == []
        assert result.is_fallback is False

    async def test_api_error_serves_mock_with_message(self, fake_cache):
        service = AccommodationService(
            api_key="secret", cache=fake_cache, transport=booking_transport(status_code=500)
        )

        result = await service.search(_context(), today=TODAY)

        assert result.is_fallback is True
        assert result.error == FETCH_ERROR_MESSAGE
        assert len(result.accommodations) == 4

    async def test_cached_hotels_skip_the_api(self, fake_cache):
        fake_cache.store[("Paris", "2026-06-01", "2026-06-08")] = [hotel(7, "Cached Inn", 80)]
        seen = []
        service = AccommodationService(
            api_key="secret", cache=fake_cache, transport=booking_transport([], seen=seen)
        )

        result = await service.search(_context(), today=TODAY)

        assert [a.name for a in result.accommodations] == ["Cached Inn"]
        assert seen == []

    async def test_live_results_are_cached(self, fake_cache):
        service = AccommodationService(
            api_key="secret", cache=fake_cache, transport=booking_transport([hotel(1, "Hotel Lumière", 150)])
        )

        await service.search(_context(), today=TODAY)

        assert ("Paris", "2026-06-01", "2026-06-08") in fake_cache.store

    @pytest.mark.parametrize("fields", [{"destination": ""}, {"budget": 0}])
    async def test_requires_destination_and_budget(self, fake_cache, fields):
        service = AccommodationService(api_key="", cache=fake_cache)
        with pytest.raises(ValueError):
            await service.search(_context(**fields), today=TODAY)
