import logging
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import READ_ROLES
from app.database import get_db
from app.dependencies import get_optional_actor, trip_access
from app.models.itinerary import ItineraryItem
from app.models.profile import Profile
from app.services.activity_generator import extract_keywords, generate_activity_ideas

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{trip_id}/activity-ideas")
async def activity_ideas(
    trip_id: uuid.UUID,
    count: int = Query(6, ge=1, le=20),
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    """Suggest activities from the trip's description, destination and existing items."""
    access = await trip_access(db, trip_id, user, READ_ROLES)
    trip = access.trip

    result = await db.execute(
        select(ItineraryItem.title, ItineraryItem.description).where(ItineraryItem.trip_id == trip_id)
    )
    template_items = [{"title": title, "description": description} for title, description in result.all()]

    destination = trip.destination_name or trip.name
    keywords = extract_keywords(f"{trip.name} {trip.description or ''} {trip.destination_name or ''}")
    ideas = generate_activity_ideas(destination, keywords, template_items, count=count)
    logger.info(f"Generated {len(ideas)} activity ideas for trip {trip_id}")
    return {"destination": destination, "keywords": keywords, "ideas": [i.to_dict() for i in ideas]}
