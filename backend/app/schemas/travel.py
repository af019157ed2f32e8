"""Travel context — the session-scoped aggregate the planning wizard builds up."""

from datetime import date

from pydantic import BaseModel, Field

# Selections a patch may reset with an explicit null
CLEARABLE_FIELDS = frozenset({"selected_accommodation", "selected_flight", "add_ons"})


class TripDates(BaseModel):
    start: date | None = None
    end: date | None = None

    model_config = {"frozen": True}


class Preferences(BaseModel):
    accommodation: str = ""
    activities: list[str] = Field(default_factory=list)
    transportation: str = ""

    model_config = {"frozen": True}


class SelectedAccommodation(BaseModel):
    id: str = ""
    name: str
    price: float = 0
    nights: int = 7

    model_config = {"frozen": True}


class SelectedFlight(BaseModel):
    id: str = ""
    airline: str
    price: float = 0

    model_config = {"frozen": True}


class SelectedAddOn(BaseModel):
    id: str = ""
    name: str
    price: float = 0

    model_config = {"frozen": True}


class TravelContext(BaseModel):
    destination: str = ""
    dates: TripDates = Field(default_factory=TripDates)
    budget: float = 0
    preferences: Preferences = Field(default_factory=Preferences)
    selected_accommodation: SelectedAccommodation | None = Field(None, alias="selectedAccommodation")
    selected_flight: SelectedFlight | None = Field(None, alias="selectedFlight")
    add_ons: list[SelectedAddOn] | None = Field(None, alias="addOns")

    model_config = {"frozen": True, "populate_by_name": True}

    def update(self, patch: "TravelContextPatch | dict") -> "TravelContext":
        """Return a new context with ``patch`` merged in field by field.

        Nested objects (dates, preferences, selections) merge recursively, so
        ``{"preferences": {"accommodation": "Ryokan"}}`` keeps the existing
        activities and transportation.

        An explicit null clears a selection (accommodation, flight, add-ons);
        anywhere else it is ignored.
        """
        if isinstance(patch, dict):
            patch = TravelContextPatch.model_validate(patch)
        incoming = {
            key: _drop_nones(value)
            for key, value in patch.model_dump(exclude_unset=True).items()
            if value is not None or key in CLEARABLE_FIELDS
        }
        merged = _deep_merge(self.model_dump(), incoming)
        return TravelContext.model_validate(merged)


class TripDatesPatch(BaseModel):
    start: date | None = None
    end: date | None = None


class PreferencesPatch(BaseModel):
    accommodation: str | None = None
    activities: list[str] | None = None
    transportation: str | None = None


class TravelContextPatch(BaseModel):
    """Partial TravelContext accepted by ``on_update``; unset fields are kept."""
    destination: str | None = None
    dates: TripDatesPatch | None = None
    budget: float | None = None
    preferences: PreferencesPatch | None = None
    selected_accommodation: dict | None = Field(None, alias="selectedAccommodation")
    selected_flight: dict | None = Field(None, alias="selectedFlight")
    add_ons: list[SelectedAddOn] | None = Field(None, alias="addOns")

    model_config = {"populate_by_name": True}


class AIRecommendations(BaseModel):
    accommodations: list[str] = Field(default_factory=list)
    activities: list[str] = Field(default_factory=list)
    transportation: list[str] = Field(default_factory=list)


class AIResponse(BaseModel):
    recommendations: AIRecommendations = Field(default_factory=AIRecommendations)
    suggestions: list[str] = Field(default_factory=list)
    next_step: str | None = Field(None, alias="nextStep")

    model_config = {"populate_by_name": True}


def _drop_nones(value):
    if isinstance(value, dict):
        return {k: _drop_nones(v) for k, v in value.items() if v is not None}
    return value


def _deep_merge(base: dict, incoming: dict) -> dict:
    merged = dict(base)
    for key, value in incoming.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
