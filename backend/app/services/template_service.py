"""Itinerary templates: save a trip's plan, start new trips from it, or append it to a trip."""

import logging
import uuid
from datetime import timedelta

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import ITEM_SUGGESTED, PRIVACY_PUBLIC, ROLE_ADMIN
from app.models.itinerary import (
    ItineraryItem,
    ItinerarySection,
    ItineraryTemplate,
    ItineraryTemplateItem,
)
from app.models.profile import Profile
from app.models.trip import Trip
from app.schemas.itinerary import TemplateCreate, TripFromTemplate
from app.services.cache_service import cache_service
from app.services.trip_service import trip_service
from app.utils import unique_slug

logger = logging.getLogger(__name__)

# Copied between itinerary items and template items unchanged
COPIED_FIELDS = (
    "title", "description", "item_type", "category", "start_time", "end_time",
    "address", "place_id", "latitude", "longitude", "estimated_cost", "currency",
)


def template_end_date(start, duration_days: int):
    """Last day of a trip of ``duration_days`` days starting on ``start``."""
    if start is None:
        return None
    return start + timedelta(days=duration_days - 1)


class TemplateService:
    async def list_templates(self, db: AsyncSession, city_id: uuid.UUID | None = None) -> list[ItineraryTemplate]:
        query = select(ItineraryTemplate).where(ItineraryTemplate.is_published.is_(True))
        if city_id:
            query = query.where(ItineraryTemplate.city_id == city_id)
        result = await db.execute(
            query.order_by(ItineraryTemplate.copied_count.desc(), ItineraryTemplate.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_template(
        self, db: AsyncSession, key: str, user_id: uuid.UUID | None
    ) -> ItineraryTemplate:
        """By slug or id. Unpublished templates are only visible to their creator."""
        conditions = [ItineraryTemplate.slug == key]
        try:
            conditions.append(ItineraryTemplate.id == uuid.UUID(key))
        except ValueError:
            pass
        template = await db.scalar(select(ItineraryTemplate).where(or_(*conditions)))
        if template is None or (not template.is_published and template.created_by != user_id):
            raise LookupError("Template not found")
        return template

    async def get_items(self, db: AsyncSession, template_id: uuid.UUID) -> list[ItineraryTemplateItem]:
        result = await db.execute(
            select(ItineraryTemplateItem)
            .where(ItineraryTemplateItem.template_id == template_id)
            .order_by(ItineraryTemplateItem.day, ItineraryTemplateItem.item_order)
        )
        return list(result.scalars().all())

    async def save_trip(
        self, db: AsyncSession, trip: Trip, user_id: uuid.UUID, data: TemplateCreate
    ) -> ItineraryTemplate:
        """Snapshot the trip's items, grouped by day, as a new template."""
        result = await db.execute(
            select(ItineraryItem, ItinerarySection.day_number)
            .outerjoin(ItinerarySection, ItinerarySection.id == ItineraryItem.section_id)
            .where(ItineraryItem.trip_id == trip.id)
            .order_by(ItinerarySection.position, ItineraryItem.position, ItineraryItem.created_at)
        )
        rows = result.all()
        if not rows:
            raise ValueError("Trip has no itinerary items to save")

        title = data.title or trip.name
        template = ItineraryTemplate(
            id=uuid.uuid4(),
            title=title,
            slug=unique_slug(title),
            description=data.description or trip.description,
            category=data.category,
            city_id=trip.city_id,
            destination_name=trip.destination_name,
            is_published=data.is_published,
            source_trip_id=trip.id,
            created_by=user_id,
        )
        db.add(template)

        next_order: dict[int, int] = {}
        for item, section_day in rows:
            day = max(item.day_number or section_day or 1, 1)
            order = next_order.get(day, 0)
            next_order[day] = order + 1
            db.add(ItineraryTemplateItem(
                template_id=template.id,
                day=day,
                item_order=order,
                **{field: getattr(item, field) for field in COPIED_FIELDS},
            ))
        template.duration_days = max([trip.duration_days or 1, *next_order])

        await db.commit()
        await db.refresh(template)
        logger.info(f"Trip {trip.id} saved as template {template.id} ({len(rows)} items)")
        return template

    def _copy_items(
        self, db: AsyncSession, trip: Trip, user_id: uuid.UUID,
        items: list[ItineraryTemplateItem], sections: dict[int, ItinerarySection], day_offset: int = 0,
    ) -> int:
        for entry in items:
            section = sections.get(entry.day + day_offset)
            db.add(ItineraryItem(
                trip_id=trip.id,
                section_id=section.id if section else None,
                day_number=entry.day + day_offset,
                date=section.date if section else None,
                position=entry.item_order,
                status=ITEM_SUGGESTED,
                created_by=user_id,
                **{field: getattr(entry, field) for field in COPIED_FIELDS},
            ))
        return len(items)

    async def create_trip(
        self, db: AsyncSession, template: ItineraryTemplate, user: Profile, data: TripFromTemplate
    ) -> Trip:
        """New trip with one section per template day and every template item copied in."""
        name = (data.name or template.title)[:100]
        trip = Trip(
            id=uuid.uuid4(),
            name=name,
            description=data.description or template.description,
            created_by=user.id,
            city_id=template.city_id,
            destination_name=template.destination_name,
            start_date=data.start_date,
            end_date=template_end_date(data.start_date, template.duration_days),
            duration_days=template.duration_days,
            privacy_setting=data.privacy_setting,
            is_guest=user.is_guest,
        )
        if trip.privacy_setting == PRIVACY_PUBLIC:
            trip.public_slug = unique_slug(trip.name)
        db.add(trip)
        await db.flush()

        await trip_service.add_member(db, trip.id, user.id, ROLE_ADMIN)
        sections = trip_service.create_day_sections(db, trip)
        await db.flush()
        self._copy_items(
            db, trip, user.id, await self.get_items(db, template.id), {s.day_number: s for s in sections}
        )

        template.copied_count += 1
        await db.commit()
        await db.refresh(trip)
        logger.info(f"Trip {trip.id} created from template {template.id}")
        return trip

    async def apply_to_trip(
        self, db: AsyncSession, template: ItineraryTemplate, trip: Trip, user_id: uuid.UUID
    ) -> dict:
        """Append the template's days after the trip's last day; extends the trip's dates."""
        last_day = (await db.execute(
            select(func.max(ItinerarySection.day_number)).where(ItinerarySection.trip_id == trip.id)
        )).scalar()
        offset = max(last_day or 0, trip.duration_days or 0)
        last_position = (await db.execute(
            select(func.max(ItinerarySection.position)).where(ItinerarySection.trip_id == trip.id)
        )).scalar() or 0

        sections = {}
        for day in range(1, template.duration_days + 1):
            trip_day = offset + day
            section = ItinerarySection(
                trip_id=trip.id,
                day_number=trip_day,
                position=last_position + day,
                date=trip.start_date + timedelta(days=trip_day - 1) if trip.start_date else None,
                title=f"Day {trip_day}",
            )
            db.add(section)
            sections[trip_day] = section
        await db.flush()

        added = self._copy_items(db, trip, user_id, await self.get_items(db, template.id), sections, offset)
        total_days = offset + template.duration_days
        trip.duration_days = total_days
        if trip.start_date:
            trip.end_date = template_end_date(trip.start_date, total_days)
        template.copied_count += 1
        await db.commit()
        await cache_service.invalidate_public_trip(trip.public_slug)
        logger.info(f"Template {template.id} applied to trip {trip.id}: {added} items, {total_days} days")
        return {"added_items": added, "new_total_days": total_days}


template_service = TemplateService()
