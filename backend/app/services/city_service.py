"""Trip cities: the ordered stops of a multi-city trip."""

import logging
import uuid

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.itinerary import ItinerarySection
from app.models.trip import City, Trip, TripCity
from app.schemas.trip import TripCityCreate
from app.services.cache_service import cache_service
from app.services.trip_service import trip_service

logger = logging.getLogger(__name__)


class CityService:
    async def list_cities(self, db: AsyncSession, trip_id: uuid.UUID) -> list[tuple[TripCity, City]]:
        result = await db.execute(
            select(TripCity, City)
            .join(City, City.id == TripCity.city_id)
            .where(TripCity.trip_id == trip_id)
            .order_by(TripCity.position)
        )
        return [(trip_city, city) for trip_city, city in result.all()]

    async def get_trip_city(
        self, db: AsyncSession, trip_id: uuid.UUID, city_id: uuid.UUID
    ) -> tuple[TripCity, City]:
        result = await db.execute(
            select(TripCity, City)
            .join(City, City.id == TripCity.city_id)
            .where(TripCity.trip_id == trip_id, TripCity.city_id == city_id)
        )
        row = result.first()
        if row is None:
            raise LookupError("City not found in this trip")
        return row[0], row[1]

    async def add_city(self, db: AsyncSession, trip: Trip, data: TripCityCreate) -> tuple[TripCity, City]:
        if data.city_id is not None:
            city = await db.get(City, data.city_id)
            if city is None:
                raise LookupError("City not found")
        else:
            city = await trip_service.find_or_create_city(db, data.destination.strip())

        existing = await db.execute(
            select(TripCity.id).where(TripCity.trip_id == trip.id, TripCity.city_id == city.id)
        )
        if existing.scalar_one_or_none() is not None:
            raise ValueError("City is already part of this trip")

        current = (await db.execute(
            select(func.max(TripCity.position)).where(TripCity.trip_id == trip.id)
        )).scalar()
        trip_city = TripCity(
            trip_id=trip.id,
            city_id=city.id,
            position=0 if current is None else current + 1,
            arrival_date=data.arrival_date,
            departure_date=data.departure_date,
        )
        db.add(trip_city)
        await db.commit()
        await db.refresh(trip_city)
        logger.info(f"Added city {city.id} to trip {trip.id}")
        return trip_city, city

    async def update_city(self, db: AsyncSession, trip_city: TripCity, changes: dict) -> TripCity:
        arrival = changes.get("arrival_date", trip_city.arrival_date)
        departure = changes.get("departure_date", trip_city.departure_date)
        if arrival and departure and departure < arrival:
            raise ValueError("Departure date must be on or after arrival date")
        trip_city.arrival_date = arrival
        trip_city.departure_date = departure
        await db.commit()
        await db.refresh(trip_city)
        return trip_city

    async def remove_city(self, db: AsyncSession, trip: Trip, trip_city: TripCity):
        """Detach the city's itinerary sections, delete it and close the gap in positions."""
        await db.execute(
            update(ItinerarySection)
            .where(ItinerarySection.trip_city_id == trip_city.id)
            .values(trip_city_id=None)
            .execution_options(synchronize_session=False)
        )
        removed_position = trip_city.position
        await db.delete(trip_city)
        await db.flush()
        await db.execute(
            update(TripCity)
            .where(TripCity.trip_id == trip.id, TripCity.position > removed_position)
            .values(position=TripCity.position - 1)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        await cache_service.invalidate_public_trip(trip.public_slug)
        logger.info(f"Removed city {trip_city.city_id} from trip {trip.id}")


city_service = CityService()
