"""Persists finalized travel contexts with their selections."""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.trip import Trip, TripAccommodation, TripAddOn, TripFlight
from app.schemas.travel import TravelContext

logger = logging.getLogger(__name__)


def _money(value: float | None) -> Decimal:
    return Decimal(str(round(value or 0, 2)))


class TripStore:
    async def create(self, db: AsyncSession, trip: Trip) -> Trip:
        db.add(trip)
        await db.commit()
        await db.refresh(trip)
        return trip

    async def find_by_id(self, db: AsyncSession, trip_id: uuid.UUID) -> Trip | None:
        result = await db.execute(
            select(Trip)
            .where(Trip.id == trip_id)
            .options(
                selectinload(Trip.accommodation),
                selectinload(Trip.flight),
                selectinload(Trip.add_ons),
            )
        )
        return result.scalar_one_or_none()

    async def find_by_user_id(self, db: AsyncSession, user_id: str) -> list[Trip]:
        result = await db.execute(
            select(Trip).where(Trip.user_id == user_id).order_by(Trip.created_at.desc())
        )
        return list(result.scalars().all())

    async def update_status(self, db: AsyncSession, trip_id: uuid.UUID, status: str) -> Trip | None:
        trip = await db.get(Trip, trip_id)
        if not trip:
            return None
        trip.status = status
        await db.commit()
        return trip

    async def save_context(self, db: AsyncSession, user_id: str, context: TravelContext) -> Trip:
        """Persist a finished wizard context as a trip with its selections."""
        if not context.destination:
            raise ValueError("Cannot save a trip without a destination")

        trip = Trip(
            user_id=user_id,
            destination=context.destination,
            start_date=context.dates.start,
            end_date=context.dates.end,
            budget=_money(context.budget),
            preferences=context.preferences.model_dump(),
        )

        if context.selected_accommodation:
            acc = context.selected_accommodation
            trip.accommodation = TripAccommodation(
                external_id=acc.id or None,
                name=acc.name,
                price=_money(acc.price),
                nights=acc.nights,
            )
        if context.selected_flight:
            flight = context.selected_flight
            trip.flight = TripFlight(
                external_id=flight.id or None,
                airline=flight.airline,
                price=_money(flight.price),
            )
        for add_on in context.add_ons or []:
            trip.add_ons.append(TripAddOn(
                external_id=add_on.id or None,
                name=add_on.name,
                price=_money(add_on.price),
            ))

        trip = await self.create(db, trip)
        logger.info(f"Saved trip {trip.id} to {trip.destination} for user {user_id}")
        # Reload with selections eagerly attached; refresh() leaves them expired
        return await self.find_by_id(db, trip.id)


class AccommodationStore:
    async def find_by_trip_id(self, db: AsyncSession, trip_id: uuid.UUID) -> TripAccommodation | None:
        result = await db.execute(
            select(TripAccommodation).where(TripAccommodation.trip_id == trip_id)
        )
        return result.scalars().first()


class FlightStore:
    async def find_by_trip_id(self, db: AsyncSession, trip_id: uuid.UUID) -> TripFlight | None:
        result = await db.execute(select(TripFlight).where(TripFlight.trip_id == trip_id))
        return result.scalars().first()


class AddOnStore:
    async def find_by_trip_id(self, db: AsyncSession, trip_id: uuid.UUID) -> list[TripAddOn]:
        result = await db.execute(select(TripAddOn).where(TripAddOn.trip_id == trip_id))
        return list(result.scalars().all())


trip_store = TripStore()
accommodation_store = AccommodationStore()
flight_store = FlightStore()
add_on_store = AddOnStore()
