import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.trip import Trip, TripAccommodation, TripAddOn, TripFlight
from app.schemas.travel import TravelContext
from app.services.notification_service import notification_service
from app.services.planner_session import planner_sessions
from app.services.trip_store import accommodation_store, add_on_store, flight_store, trip_store

router = APIRouter()


class SaveTripRequest(BaseModel):
    user_id: str
    session_id: str | None = None
    context: TravelContext | None = None


class TripStatusRequest(BaseModel):
    status: str


def _accommodation_dict(acc: TripAccommodation) -> dict:
    return {
        "id": str(acc.id),
        "external_id": acc.external_id,
        "name": acc.name,
        "description": acc.description,
        "price": float(acc.price),
        "nights": acc.nights,
        "location": acc.location,
        "rating": acc.rating,
        "image": acc.image,
        "amenities": acc.amenities or [],
    }


def _flight_dict(flight: TripFlight) -> dict:
    return {
        "id": str(flight.id),
        "external_id": flight.external_id,
        "airline": flight.airline,
        "flight_number": flight.flight_number,
        "departure": flight.departure,
        "arrival": flight.arrival,
        "price": float(flight.price),
        "duration": flight.duration,
        "stops": flight.stops,
    }


def _add_on_dict(add_on: TripAddOn) -> dict:
    return {
        "id": str(add_on.id),
        "external_id": add_on.external_id,
        "name": add_on.name,
        "description": add_on.description,
        "price": float(add_on.price),
        "type": add_on.type,
    }


def _trip_dict(trip: Trip, detail: bool = False) -> dict:
    data = {
        "id": str(trip.id),
        "user_id": trip.user_id,
        "destination": trip.destination,
        "start_date": trip.start_date.isoformat() if trip.start_date else None,
        "end_date": trip.end_date.isoformat() if trip.end_date else None,
        "budget": float(trip.budget or 0),
        "status": trip.status,
        "preferences": trip.preferences or {},
        "created_at": trip.created_at.isoformat() if trip.created_at else None,
    }
    if detail:
        data["accommodation"] = _accommodation_dict(trip.accommodation) if trip.accommodation else None
        data["flight"] = _flight_dict(trip.flight) if trip.flight else None
        data["add_ons"] = [_add_on_dict(a) for a in trip.add_ons]
    return data


@router.post("", status_code=201)
async def save_trip(req: SaveTripRequest, db: AsyncSession = Depends(get_db)):
    """Save a planned trip, either from a live planner session or a posted context."""
    if req.session_id:
        session = planner_sessions.get(req.session_id)
        if not session:
            raise HTTPException(status_code=404, detail="Planner session not found")
        context = session.context
    elif req.context is not None:
        context = req.context
    else:
        raise HTTPException(status_code=400, detail="Provide session_id or context")

    try:
        trip = await trip_store.save_context(db, req.user_id, context)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    data = _trip_dict(trip, detail=True)
    data["notification"] = notification_service.build_payload(
        notification_service.trip_saved_message(trip.destination),
        url=f"/trips/{trip.id}",
    )
    return data


@router.get("")
async def list_trips(user_id: str = Query(...), db: AsyncSession = Depends(get_db)):
    trips = await trip_store.find_by_user_id(db, user_id)
    return [_trip_dict(t) for t in trips]


@router.get("/{trip_id}")
async def get_trip(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    trip = await trip_store.find_by_id(db, trip_id)
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    return _trip_dict(trip, detail=True)


@router.patch("/{trip_id}/status")
async def update_trip_status(
    trip_id: uuid.UUID, req: TripStatusRequest, db: AsyncSession = Depends(get_db)
):
    trip = await trip_store.update_status(db, trip_id, req.status)
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    return _trip_dict(trip)


@router.get("/{trip_id}/accommodations")
async def get_trip_accommodation(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    acc = await accommodation_store.find_by_trip_id(db, trip_id)
    if not acc:
        raise HTTPException(status_code=404, detail="Accommodation not found")
    return _accommodation_dict(acc)


@router.get("/{trip_id}/flights")
async def get_trip_flight(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    flight = await flight_store.find_by_trip_id(db, trip_id)
    if not flight:
        raise HTTPException(status_code=404, detail="Flight not found")
    return _flight_dict(flight)


@router.get("/{trip_id}/add-ons")
async def get_trip_add_ons(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    add_ons = await add_on_store.find_by_trip_id(db, trip_id)
    return [_add_on_dict(a) for a in add_ons]
