"""Accommodation search — Booking.com hotel search with budget filter and mock fallback."""

import logging
import math
from datetime import date, timedelta

import httpx

from app.config import settings
from app.schemas.accommodation import Accommodation, AccommodationSearchResult
from app.schemas.travel import TravelContext
from app.services.budget_filter import filter_by_budget, nightly_budget
from app.services.cache_service import CacheService, cache_service

logger = logging.getLogger(__name__)

DEFAULT_IMAGE = "https://images.unsplash.com/photo-1566073771259-6a8506099945?auto=format&fit=crop&w=800&q=80"

FETCH_ERROR_MESSAGE = "Failed to fetch accommodations. Please try again later."


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def generate_mock_accommodations(total_budget: float, nights: int = 7) -> list[Accommodation]:
    """Budget-scaled stand-in listings for when the hotel API is unavailable."""
    nightly = nightly_budget(total_budget, nights)
    luxury_price = min(nightly * 0.6, 500)
    mid_range_price = min(nightly * 0.4, 300)
    budget_price = min(nightly * 0.25, 150)

    return [
        Accommodation(
            id="1",
            name="Grand Hotel",
            type="Luxury Hotel",
            location="City Center",
            price=f"${_round(luxury_price)}/night",
            rating=4.8,
            image=DEFAULT_IMAGE,
            amenities=["Free WiFi", "Swimming Pool", "Spa", "Restaurant", "Gym", "Concierge", "Valet Parking"],
            description="Luxurious hotel in the heart of the city with stunning views and premium amenities.",
            booking_url="https://booking.com",
        ),
        Accommodation(
            id="2",
            name="Cozy Boutique Hotel",
            type="Boutique Hotel",
            location="Historic District",
            price=f"${_round(mid_range_price)}/night",
            rating=4.6,
            image="https://images.unsplash.com/photo-1551882547-ff40c63fe5fa?auto=format&fit=crop&w=800&q=80",
            amenities=["Free WiFi", "Breakfast", "Bar", "Room Service", "Business Center"],
            description="Charming boutique hotel with unique design and personalized service.",
            booking_url="https://booking.com",
        ),
        Accommodation(
            id="3",
            name="Seaside Resort",
            type="Resort",
            location="Beachfront",
            price=f"${_round(luxury_price * 0.9)}/night",
            rating=4.9,
            image="https://images.unsplash.com/photo-1520250497591-112f2f40a3f4?auto=format&fit=crop&w=800&q=80",
            amenities=["Private Beach", "Multiple Pools", "Spa", "Water Sports", "Multiple Restaurants", "Kids Club"],
            description="Exclusive beachfront resort with private beach access and luxury amenities.",
            booking_url="https://booking.com",
        ),
        Accommodation(
            id="4",
            name="Mountain View Lodge",
            type="Lodge",
            location="Mountain Area",
            price=f"${_round(budget_price)}/night",
            rating=4.7,
            image="https://images.unsplash.com/photo-1542314831-068cd1dbfeeb?auto=format&fit=crop&w=800&q=80",
            amenities=["Scenic Views", "Hiking Trails", "Restaurant", "Fireplace", "Free Parking"],
            description="Rustic lodge with breathtaking mountain views and outdoor activities.",
            booking_url="https://booking.com",
        ),
    ]


class AccommodationService:
    """Finds accommodations for the planned destination within the trip budget."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        host: str | None = None,
        nights: int | None = None,
        cache: CacheService | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = settings.rapidapi_key if api_key is None else api_key
        self._base_url = base_url or settings.booking_api_base_url
        self._host = host or settings.booking_api_host
        self.nights = nights or settings.default_nights
        self._cache = cache if cache is not None else cache_service
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=30.0,
                transport=self._transport,
            )
        return self._client

    async def search(
        self, context: TravelContext, today: date | None = None
    ) -> AccommodationSearchResult:
        """
        Search accommodations for ``context.destination``.

        Live results are filtered to the nightly budget (total budget spread
        over a 7-night stay) and may come back empty. When the API is
        unreachable or not configured, budget-scaled mock listings are
        returned instead with ``is_fallback`` set.
        """
        if not context.destination or context.budget <= 0:
            raise ValueError("A destination and a positive budget are required")

        check_in = today or date.today()
        check_out = check_in + timedelta(days=self.nights)
        limit = nightly_budget(context.budget, self.nights)

        def _fallback(error: str | None) -> AccommodationSearchResult:
            return AccommodationSearchResult(
                destination=context.destination,
                check_in=check_in,
                check_out=check_out,
                nightly_budget=round(limit, 2),
                accommodations=generate_mock_accommodations(context.budget, self.nights),
                is_fallback=True,
                error=error,
            )

        if not self._api_key:
            logger.info("RapidAPI key not configured, using mock accommodations")
            return _fallback(None)

        try:
            hotels = await self._fetch_hotels(context.destination, check_in, check_out)
            accommodations = [self._transform(h) for h in hotels]
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Hotel search failed for {context.destination}, falling back to mock: {e!r}")
            return _fallback(FETCH_ERROR_MESSAGE)

        filtered = filter_by_budget(accommodations, context.budget, self.nights)
        logger.info(
            f"Hotel search {context.destination}: {len(filtered)}/{len(accommodations)} "
            f"within ${limit:.2f}/night"
        )
        return AccommodationSearchResult(
            destination=context.destination,
            check_in=check_in,
            check_out=check_out,
            nightly_budget=round(limit, 2),
            accommodations=filtered,
        )

    async def _fetch_hotels(self, destination: str, check_in: date, check_out: date) -> list[dict]:
        cached = await self._cache.get_hotels(destination, check_in.isoformat(), check_out.isoformat())
        if cached is not None:
            return cached

        client = await self._get_client()
        resp = await client.get(
            "/v1/hotels/search",
            params={
                "units": "metric",
                "room_number": 1,
                "checkout_date": check_out.isoformat(),
                "checkin_date": check_in.isoformat(),
                "adults_number": 2,
                "order_by": "popularity",
                "filter_by_currency": "USD",
                "locale": "en-us",
                "dest_type": "city",
                "dest_id": destination,
                "page_number": 0,
                "categories_filter_ids": "class::2,class::4,free_cancellation::1",
                "include_adjacency": "true",
            },
            headers={
                "X-RapidAPI-Key": self._api_key,
                "X-RapidAPI-Host": self._host,
            },
        )
        resp.raise_for_status()
        hotels = resp.json()["result"]
        if not isinstance(hotels, list):
            raise ValueError("hotel search result is not a list")

        await self._cache.set_hotels(destination, check_in.isoformat(), check_out.isoformat(), hotels)
        return hotels

    @staticmethod
    def _transform(hotel: dict) -> Accommodation:
        location = hotel.get("location") or {}
        images = hotel.get("images") or []
        return Accommodation(
            id=str(hotel["hotel_id"]),
            name=hotel["name"],
            type=hotel.get("type") or "Hotel",
            location=f"{location.get('city', '')}, {location.get('address', '')}",
            price=f"${_round(float(hotel['price']['amount']))}/night",
            rating=hotel.get("rating") or 0,
            image=images[0] if images else DEFAULT_IMAGE,
            amenities=hotel.get("amenities") or [],
            description=hotel.get("description") or "No description available",
            booking_url=hotel.get("booking_url") or "",
        )

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


accommodation_service = AccommodationService()
