"""Trip downloads: calendar, itinerary PDF and expenses CSV."""

import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import READ_ROLES
from app.database import get_db
from app.dependencies import get_optional_actor, trip_access
from app.models.profile import Profile
from app.services.export_service import export_service
from app.utils import slugify

router = APIRouter()


def _download(content, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{trip_id}/calendar.ics")
async def export_calendar(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    access = await trip_access(db, trip_id, user, READ_ROLES)
    ics = await export_service.generate_ics(db, access.trip)
    return _download(ics, "text/calendar; charset=utf-8", f"{slugify(access.trip.name)}.ics")


@router.get("/{trip_id}/itinerary.pdf")
async def export_itinerary_pdf(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    access = await trip_access(db, trip_id, user, READ_ROLES)
    pdf = await export_service.generate_itinerary_pdf(db, access.trip)
    return _download(pdf, "application/pdf", f"{slugify(access.trip.name)}-itinerary.pdf")


@router.get("/{trip_id}/expenses.csv")
async def export_expenses_csv(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    access = await trip_access(db, trip_id, user, READ_ROLES)
    csv_text = await export_service.generate_expenses_csv(db, access.trip)
    return _download(csv_text, "text/csv; charset=utf-8", f"{slugify(access.trip.name)}-expenses.csv")
