"""Itinerary service: sections, items, imports, ordering and item votes."""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import ITEM_SUGGESTED, VOTE_DOWN, VOTE_UP
from app.models.itinerary import ItineraryItem, ItineraryItemVote, ItinerarySection
from app.models.trip import Trip, TripCity
from app.schemas.itinerary import ItineraryCreate
from app.services.cache_service import cache_service

logger = logging.getLogger(__name__)

ITEM_FIELDS = (
    "description", "section_id", "day_number", "date", "category", "start_time",
    "end_time", "address", "place_name", "latitude", "longitude", "place_id", "url",
    "estimated_cost", "currency", "notes",
)


def _first(*values):
    for value in values:
        if value not in (None, ""):
            return value
    return None


def _to_float(value) -> float | None:
    try:
        return float(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


def map_imported_item(raw: dict) -> dict:
    """Normalise one imported place (app format or Google Maps export format)."""
    location = raw.get("location") if isinstance(raw.get("location"), dict) else {}
    title = _first(raw.get("title"), raw.get("name"))
    if not title:
        raise ValueError("Every imported item needs a title or name")
    return {
        "title": str(title)[:255],
        "item_type": _first(raw.get("item_type"), raw.get("category")) or "activity",
        "category": raw.get("category"),
        "notes": _first(raw.get("notes"), raw.get("description")),
        "address": _first(raw.get("address"), location.get("address")),
        "latitude": _to_float(_first(raw.get("latitude"), raw.get("lat"), location.get("latitude"), location.get("lat"))),
        "longitude": _to_float(_first(raw.get("longitude"), raw.get("lng"), location.get("longitude"), location.get("lng"))),
        "place_id": _first(raw.get("place_id"), location.get("place_id")),
        "url": raw.get("url"),
    }


class ItineraryService:
    async def _invalidate_public_page(self, db: AsyncSession, trip_id: uuid.UUID):
        slug = await db.scalar(select(Trip.public_slug).where(Trip.id == trip_id))
        await cache_service.invalidate_public_trip(slug)

    async def get_itinerary(self, db: AsyncSession, trip_id: uuid.UUID) -> dict:
        sections = await db.execute(
            select(ItinerarySection)
            .where(ItinerarySection.trip_id == trip_id)
            .order_by(ItinerarySection.position, ItinerarySection.day_number)
        )
        items = await db.execute(
            select(ItineraryItem)
            .where(ItineraryItem.trip_id == trip_id)
            .order_by(ItineraryItem.position, ItineraryItem.created_at)
        )
        return {"sections": list(sections.scalars().all()), "items": list(items.scalars().all())}

    async def get_item(self, db: AsyncSession, trip_id: uuid.UUID, item_id: uuid.UUID) -> ItineraryItem:
        result = await db.execute(
            select(ItineraryItem).where(ItineraryItem.id == item_id, ItineraryItem.trip_id == trip_id)
        )
        item = result.scalar_one_or_none()
        if item is None:
            raise LookupError("Itinerary item not found")
        return item

    async def _next_item_position(
        self, db: AsyncSession, trip_id: uuid.UUID, section_id: uuid.UUID | None
    ) -> int:
        query = select(func.max(ItineraryItem.position)).where(ItineraryItem.trip_id == trip_id)
        if section_id is None:
            query = query.where(ItineraryItem.section_id.is_(None))
        else:
            query = query.where(ItineraryItem.section_id == section_id)
        current = (await db.execute(query)).scalar()
        return 0 if current is None else current + 1

    async def _check_section(self, db: AsyncSession, trip_id: uuid.UUID, section_id: uuid.UUID):
        result = await db.execute(
            select(ItinerarySection.id).where(
                ItinerarySection.id == section_id, ItinerarySection.trip_id == trip_id
            )
        )
        if result.scalar_one_or_none() is None:
            raise ValueError("Section does not belong to this trip")

    async def _check_trip_city(self, db: AsyncSession, trip_id: uuid.UUID, trip_city_id: uuid.UUID):
        result = await db.execute(
            select(TripCity.id).where(TripCity.id == trip_city_id, TripCity.trip_id == trip_id)
        )
        if result.scalar_one_or_none() is None:
            raise ValueError("City does not belong to this trip")

    async def create_item(
        self, db: AsyncSession, trip_id: uuid.UUID, user_id: uuid.UUID, data: ItineraryCreate
    ) -> ItineraryItem:
        title = _first(data.title, data.name)
        if not title:
            raise ValueError("Item title is required")
        if data.section_id is not None:
            await self._check_section(db, trip_id, data.section_id)

        item = ItineraryItem(
            trip_id=trip_id,
            title=title,
            item_type=data.item_type or "activity",
            status=data.status or ITEM_SUGGESTED,
            position=await self._next_item_position(db, trip_id, data.section_id),
            created_by=user_id,
            **{field: getattr(data, field) for field in ITEM_FIELDS},
        )
        db.add(item)
        await db.commit()
        await db.refresh(item)
        await self._invalidate_public_page(db, trip_id)
        return item

    async def create_section(
        self, db: AsyncSession, trip_id: uuid.UUID, data: ItineraryCreate
    ) -> ItinerarySection:
        title = _first(data.name, data.title)
        if not title:
            raise ValueError("Section name is required")
        if data.trip_city_id is not None:
            await self._check_trip_city(db, trip_id, data.trip_city_id)
        current = (await db.execute(
            select(func.max(ItinerarySection.position)).where(ItinerarySection.trip_id == trip_id)
        )).scalar()
        section = ItinerarySection(
            trip_id=trip_id,
            title=title,
            description=data.description,
            day_number=data.day_number or 0,
            date=data.date,
            trip_city_id=data.trip_city_id,
            position=0 if current is None else current + 1,
        )
        db.add(section)
        await db.commit()
        await db.refresh(section)
        await self._invalidate_public_page(db, trip_id)
        return section

    async def import_items(
        self, db: AsyncSession, trip_id: uuid.UUID, user_id: uuid.UUID, raw_items
    ) -> list[ItineraryItem]:
        if not isinstance(raw_items, list):
            raise ValueError("Import payload must contain an items list")
        if not raw_items:
            raise ValueError("No items to import")

        mapped = [map_imported_item(raw) for raw in raw_items if isinstance(raw, dict)]
        if not mapped:
            raise ValueError("No valid items to import")

        start = await self._next_item_position(db, trip_id, None)
        items = []
        for offset, fields in enumerate(mapped):
            item = ItineraryItem(
                trip_id=trip_id,
                position=start + offset,
                status=ITEM_SUGGESTED,
                created_by=user_id,
                **fields,
            )
            db.add(item)
            items.append(item)
        await db.commit()
        for item in items:
            await db.refresh(item)
        await self._invalidate_public_page(db, trip_id)
        logger.info(f"Imported {len(items)} items into trip {trip_id}")
        return items

    async def update_item(self, db: AsyncSession, item: ItineraryItem, changes: dict) -> ItineraryItem:
        if changes.get("section_id") is not None:
            await self._check_section(db, item.trip_id, changes["section_id"])
        for field, value in changes.items():
            setattr(item, field, value)
        await db.commit()
        await db.refresh(item)
        await self._invalidate_public_page(db, item.trip_id)
        return item

    async def delete_item(self, db: AsyncSession, item: ItineraryItem):
        trip_id = item.trip_id
        await db.delete(item)
        await db.commit()
        await self._invalidate_public_page(db, trip_id)

    async def reorder(
        self, db: AsyncSession, trip_id: uuid.UUID, section_id: uuid.UUID | None, item_ids: list[uuid.UUID]
    ) -> list[ItineraryItem]:
        """Positions 0..n-1 in the given order; every item must belong to the trip."""
        if len(set(item_ids)) != len(item_ids):
            raise ValueError("Duplicate item ids")
        if section_id is not None:
            await self._check_section(db, trip_id, section_id)

        result = await db.execute(select(ItineraryItem).where(ItineraryItem.id.in_(item_ids)))
        by_id = {item.id: item for item in result.scalars().all()}
        if len(by_id) != len(item_ids) or any(i.trip_id != trip_id for i in by_id.values()):
            raise ValueError("All items must belong to this trip")

        ordered = [by_id[item_id] for item_id in item_ids]
        for position, item in enumerate(ordered):
            item.position = position
            item.section_id = section_id
        await db.commit()
        await self._invalidate_public_page(db, trip_id)
        return ordered

    async def vote(
        self, db: AsyncSession, item: ItineraryItem, user_id: uuid.UUID, vote_type: str
    ) -> dict:
        """Upsert the user's vote; repeating the same vote removes it."""
        result = await db.execute(
            select(ItineraryItemVote).where(
                ItineraryItemVote.itinerary_item_id == item.id,
                ItineraryItemVote.user_id == user_id,
            )
        )
        existing = result.scalar_one_or_none()
        user_vote: str | None = vote_type
        if existing is None:
            db.add(ItineraryItemVote(itinerary_item_id=item.id, user_id=user_id, vote=vote_type))
        elif existing.vote == vote_type:
            await db.delete(existing)
            user_vote = None
        else:
            existing.vote = vote_type
        await db.flush()

        counts = await db.execute(
            select(ItineraryItemVote.vote, func.count())
            .where(ItineraryItemVote.itinerary_item_id == item.id)
            .group_by(ItineraryItemVote.vote)
        )
        tally = dict(counts.all())
        item.votes_up = tally.get(VOTE_UP, 0)
        item.votes_down = tally.get(VOTE_DOWN, 0)
        await db.commit()
        await self._invalidate_public_page(db, item.trip_id)
        return {"up": item.votes_up, "down": item.votes_down, "user_vote": user_vote}


itinerary_service = ItineraryService()
