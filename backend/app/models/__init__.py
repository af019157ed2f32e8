from app.models.trip import Trip, TripAccommodation, TripAddOn, TripFlight

__all__ = [
    "Trip",
    "TripAccommodation",
    "TripAddOn",
    "TripFlight",
]
