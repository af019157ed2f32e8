"""Destination source adapters — one per scraping endpoint, failures yield []."""

import logging

import httpx
from pydantic import ValidationError

from app.config import settings
from app.schemas.destination import ScrapedRecord

logger = logging.getLogger(__name__)

# (provider path segment, display source name), in merge priority order
PROVIDERS: list[tuple[str, str]] = [
    ("tripadvisor", "TripAdvisor"),
    ("lonelyplanet", "Lonely Planet"),
    ("booking", "Booking.com"),
]

SOURCE_PRIORITY: tuple[str, ...] = tuple(name for _, name in PROVIDERS)


class SourceAdapter:
    """Adapter for one ``/scrape/{provider}`` endpoint.

    ``fetch`` never raises: transport errors, non-200 responses and unparseable
    bodies all come back as an empty list. Optional fields a source does not
    expose are left empty and reconciled at merge time.
    """

    def __init__(
        self,
        provider: str,
        source_name: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.provider = provider
        self.source_name = source_name
        self._base_url = base_url or settings.scrape_base_url
        self._timeout = timeout if timeout is not None else settings.scrape_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def fetch(self, query: str) -> list[ScrapedRecord]:
        """Fetch destination records for a free-text query."""
        try:
            client = await self._get_client()
            resp = await client.get(f"/scrape/{self.provider}", params={"query": query})
            if resp.status_code != 200:
                logger.warning(
                    f"{self.source_name} scrape returned {resp.status_code} for '{query}'"
                )
                return []
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"{self.source_name} scrape failed for '{query}': {e!r}")
            return []

        if not isinstance(payload, list):
            logger.warning(f"{self.source_name} scrape returned a non-list payload for '{query}'")
            return []

        return self._parse(payload)

    def _parse(self, payload: list) -> list[ScrapedRecord]:
        records = []
        for item in payload:
            if not isinstance(item, dict):
                continue
            if not item.get("source"):
                item = {**item, "source": self.source_name}
            try:
                records.append(ScrapedRecord.model_validate(item))
            except ValidationError as e:
                logger.debug(f"{self.source_name}: skipping malformed record: {e}")
        return records

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


def build_default_adapters(
    base_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[SourceAdapter]:
    """The three production adapters in merge priority order."""
    return [
        SourceAdapter(provider, name, base_url=base_url, transport=transport)
        for provider, name in PROVIDERS
    ]
