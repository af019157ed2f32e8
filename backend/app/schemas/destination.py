"""Raw scraped destination records and the canonical merged form."""

from pydantic import BaseModel, Field, model_validator

UNKNOWN = "Varies by country"


def normalize(value: str) -> str:
    return (value or "").strip().lower()


def canonical_key(name: str, country: str) -> str:
    """Identity of a destination across sources: 'paris|france'."""
    return f"{normalize(name)}|{normalize(country)}"


class Weather(BaseModel):
    summer: str = ""
    winter: str = ""

    model_config = {"frozen": True}


class AverageCost(BaseModel):
    accommodation: str = ""
    food: str = "Varies"
    activities: str = "Varies"

    model_config = {"frozen": True}


class ScrapedRecord(BaseModel):
    name: str
    country: str = ""
    description: str = ""
    image: str = ""
    type: list[str] = Field(default_factory=list)
    rating: float = 0
    reviews: int = 0
    price_range: str = Field("", alias="priceRange")
    best_time_to_visit: str = Field("", alias="bestTimeToVisit")
    weather: Weather = Field(default_factory=Weather)
    highlights: list[str] = Field(default_factory=list)
    source: str = ""
    url: str = ""

    model_config = {"frozen": True, "populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # Scrapers emit null for fields a page did not expose
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @property
    def key(self) -> str:
        return canonical_key(self.name, self.country)

    def optional_field_count(self) -> int:
        """Number of populated optional fields, used to pick a merge winner."""
        return sum([
            self.rating > 0,
            self.reviews > 0,
            bool(self.highlights),
            bool(self.price_range.strip()),
        ])


class CanonicalDestination(ScrapedRecord):
    climate: str = UNKNOWN
    currency: str = UNKNOWN
    language: str = UNKNOWN
    time_zone: str = Field(UNKNOWN, alias="timeZone")
    local_tips: list[str] = Field(
        default_factory=lambda: ["Check local tourism website for tips"],
        alias="localTips",
    )
    average_cost: AverageCost = Field(default_factory=AverageCost, alias="averageCost")
    visa_info: str = Field("Check local embassy website", alias="visaInfo")
    safety: str = "Check travel advisories"

    @classmethod
    def from_scraped(cls, record: ScrapedRecord) -> "CanonicalDestination":
        """Promote a merged source record, filling what sources never expose."""
        climate = record.weather.summer.split("(")[0].strip()
        return cls(
            **record.model_dump(),
            climate=climate or UNKNOWN,
            average_cost=AverageCost(accommodation=record.price_range),
        )


class SearchResult(BaseModel):
    destinations: list[CanonicalDestination] = Field(default_factory=list)
    total_results: int = Field(0, alias="totalResults")
    search_query: str = Field("", alias="searchQuery")
    is_fallback: bool = Field(False, alias="isFallback")

    model_config = {"populate_by_name": True}
