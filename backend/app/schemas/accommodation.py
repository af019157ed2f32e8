from datetime import date

from pydantic import BaseModel, Field


class Accommodation(BaseModel):
    id: str
    name: str
    type: str = "Hotel"
    location: str = ""
    price: str
    rating: float = 0
    image: str = ""
    amenities: list[str] = Field(default_factory=list)
    description: str = ""
    booking_url: str = Field("", alias="bookingUrl")

    model_config = {"populate_by_name": True}


class AccommodationSearchResult(BaseModel):
    destination: str
    check_in: date
    check_out: date
    nightly_budget: float
    accommodations: list[Accommodation]
    is_fallback: bool = False
    error: str | None = None
