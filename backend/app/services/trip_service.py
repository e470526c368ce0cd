"""Trip service: creation (signed-in and guest), listing, updates, public pages."""

import logging
import uuid
from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.constants import (
    CATEGORY_ACCOMMODATIONS,
    CATEGORY_FOOD_AND_DRINK,
    CATEGORY_ICONIC_LANDMARKS,
    CATEGORY_TRANSPORTATION,
    PRIVACY_PRIVATE,
    PRIVACY_PUBLIC,
    ROLE_ADMIN,
)
from app.models.itinerary import ItineraryItem, ItinerarySection
from app.models.profile import Profile
from app.models.trip import City, Trip, TripMember
from app.schemas.itinerary import ItineraryItemResponse, ItinerarySectionResponse
from app.schemas.trip import TripCreate, TripResponse
from app.services.cache_service import cache_service
from app.utils import unique_slug

logger = logging.getLogger(__name__)


def trip_duration(start: date | None, end: date | None) -> int | None:
    if start is None or end is None:
        return None
    return (end - start).days + 1


class TripService:
    async def find_or_create_city(self, db: AsyncSession, destination: str) -> City:
        """Case-insensitive substring match on city name; creates the city when missing."""
        result = await db.execute(
            select(City).where(City.name.ilike(f"%{destination}%")).order_by(City.name).limit(1)
        )
        city = result.scalar_one_or_none()
        if city is None:
            city = City(name=destination)
            db.add(city)
            await db.flush()
            logger.info(f"Created city '{destination}'")
        return city

    async def add_member(
        self, db: AsyncSession, trip_id: uuid.UUID, user_id: uuid.UUID, role: str,
        invited_by: uuid.UUID | None = None,
    ) -> TripMember:
        member = TripMember(trip_id=trip_id, user_id=user_id, role=role, invited_by=invited_by)
        db.add(member)
        return member

    def create_day_sections(self, db: AsyncSession, trip: Trip) -> list[ItinerarySection]:
        """One section per day of the trip, day_number and position from 1.

        Sections are dated when the trip has a start date.
        """
        days = trip_duration(trip.start_date, trip.end_date) or trip.duration_days
        if not days:
            return []
        sections = []
        for day in range(1, days + 1):
            section = ItinerarySection(
                trip_id=trip.id,
                day_number=day,
                position=day,
                date=trip.start_date + timedelta(days=day - 1) if trip.start_date else None,
                title=f"Day {day}",
            )
            db.add(section)
            sections.append(section)
        return sections

    async def create_trip(self, db: AsyncSession, user: Profile, data: TripCreate) -> Trip:
        city = None
        if data.destination:
            city = await self.find_or_create_city(db, data.destination.strip())

        trip = Trip(
            id=uuid.uuid4(),
            name=data.name,
            description=data.description,
            created_by=user.id,
            city_id=city.id if city else None,
            destination_name=city.name if city else None,
            start_date=data.start_date,
            end_date=data.end_date,
            duration_days=trip_duration(data.start_date, data.end_date),
            budget=data.budget,
            currency=data.currency,
            trip_type=data.trip_type,
            privacy_setting=data.privacy_setting,
            is_guest=user.is_guest,
        )
        if trip.privacy_setting == PRIVACY_PUBLIC:
            trip.public_slug = unique_slug(trip.name)
        db.add(trip)
        await db.flush()

        await self.add_member(db, trip.id, user.id, ROLE_ADMIN)
        self.create_day_sections(db, trip)
        await db.commit()
        await db.refresh(trip)
        logger.info(f"Trip {trip.id} created by {user.id}")
        return trip

    async def create_guest_trip(
        self, db: AsyncSession, actor: Profile, destination: str, custom_name: str | None = None
    ) -> Trip:
        """Quick-start trip: default dates, one section per day and four starter items."""
        city = await self.find_or_create_city(db, destination.strip())
        city_name = city.name or destination
        country = city.country or ""

        start = date.today()
        days = settings.guest_trip_days
        trip = Trip(
            id=uuid.uuid4(),
            name=custom_name or f"New trip to {city_name}{f', {country}' if country else ''}",
            description=f"Explore {city_name}{f' in {country}' if country else ''}",
            created_by=actor.id,
            city_id=city.id,
            destination_name=city_name,
            start_date=start,
            end_date=start + timedelta(days=days - 1),
            duration_days=days,
            privacy_setting=PRIVACY_PRIVATE,
            is_guest=actor.is_guest,
        )
        db.add(trip)
        await db.flush()

        await self.add_member(db, trip.id, actor.id, ROLE_ADMIN)
        sections = self.create_day_sections(db, trip)
        await db.flush()

        by_day = {s.day_number: s for s in sections}
        defaults = [
            (1, 0, f"Accommodation in {city_name}", CATEGORY_ACCOMMODATIONS, "Where will you be staying?"),
            (1, 1, f"Transportation to {city_name}", CATEGORY_TRANSPORTATION, "How will you get there?"),
            (2, 0, f"Explore {city_name}", CATEGORY_ICONIC_LANDMARKS, f"Check out the popular sights in {city_name}"),
            (2, 1, f"Dinner in {city_name}", CATEGORY_FOOD_AND_DRINK, f"Try the local cuisine in {city_name}"),
        ]
        for day, position, title, category, description in defaults:
            section = by_day.get(day)
            db.add(ItineraryItem(
                trip_id=trip.id,
                section_id=section.id if section else None,
                day_number=day,
                date=section.date if section else None,
                position=position,
                title=title,
                category=category,
                description=description,
                created_by=actor.id,
            ))

        await db.commit()
        await db.refresh(trip)
        logger.info(f"Quick-start trip {trip.id} created for {'guest' if actor.is_guest else 'user'} {actor.id}")
        return trip

    async def list_user_trips(
        self, db: AsyncSession, user_id: uuid.UUID, status: str | None = None,
        page: int = 1, limit: int = 20,
    ) -> tuple[list[Trip], int]:
        query = (
            select(Trip)
            .join(TripMember, TripMember.trip_id == Trip.id)
            .where(TripMember.user_id == user_id)
        )
        if status:
            query = query.where(Trip.status == status)

        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        result = await db.execute(
            query.order_by(Trip.created_at.desc()).offset((page - 1) * limit).limit(limit)
        )
        return list(result.scalars().all()), total

    async def update_trip(self, db: AsyncSession, trip: Trip, changes: dict) -> Trip:
        """Apply a validated partial update. Raises ValueError on inconsistent dates."""
        start = changes.get("start_date", trip.start_date)
        end = changes.get("end_date", trip.end_date)
        if start and end and end < start:
            raise ValueError("End date must be on or after start date")

        old_slug = trip.public_slug
        for field, value in changes.items():
            setattr(trip, field, value)

        if "start_date" in changes or "end_date" in changes:
            trip.duration_days = trip_duration(start, end)
        if trip.privacy_setting == PRIVACY_PUBLIC and not trip.public_slug:
            trip.public_slug = unique_slug(trip.name)

        await db.commit()
        await db.refresh(trip)
        await cache_service.invalidate_public_trip(old_slug)
        return trip

    async def delete_trip(self, db: AsyncSession, trip: Trip):
        slug = trip.public_slug
        await db.delete(trip)
        await db.commit()
        await cache_service.invalidate_public_trip(slug)
        logger.info(f"Trip {trip.id} deleted")

    async def get_public_trip(self, db: AsyncSession, slug: str) -> dict:
        cached = await cache_service.get_public_trip(slug)
        if cached is not None:
            return cached

        result = await db.execute(select(Trip).where(Trip.public_slug == slug))
        trip = result.scalar_one_or_none()
        if trip is None or trip.privacy_setting != PRIVACY_PUBLIC:
            raise LookupError("Trip not found")

        sections = await db.execute(
            select(ItinerarySection)
            .where(ItinerarySection.trip_id == trip.id)
            .order_by(ItinerarySection.position)
        )
        items = await db.execute(
            select(ItineraryItem)
            .where(ItineraryItem.trip_id == trip.id)
            .order_by(ItineraryItem.day_number, ItineraryItem.position)
        )
        page = {
            "trip": TripResponse.model_validate(trip).model_dump(mode="json"),
            "sections": [
                ItinerarySectionResponse.model_validate(s).model_dump(mode="json")
                for s in sections.scalars().all()
            ],
            "items": [
                ItineraryItemResponse.model_validate(i).model_dump(mode="json")
                for i in items.scalars().all()
            ],
        }
        await cache_service.set_public_trip(slug, page)
        return page


trip_service = TripService()
