import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import MANAGE_ROLES
from app.database import get_db
from app.dependencies import get_actor, get_current_user, get_optional_user, trip_access
from app.errors import service_errors
from app.models.profile import Profile
from app.schemas.itinerary import (
    ApplyTemplateResult,
    TemplateCreate,
    TemplateDetailResponse,
    TemplateItemResponse,
    TemplateResponse,
    TripFromTemplate,
)
from app.schemas.trip import TripResponse
from app.services.template_service import template_service

router = APIRouter()


@router.get("/itinerary-templates", response_model=list[TemplateResponse])
async def list_templates(
    city_id: uuid.UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Published templates, most copied first."""
    return [TemplateResponse.model_validate(t) for t in await template_service.list_templates(db, city_id)]


@router.post("/itinerary-templates", status_code=201, response_model=TemplateResponse)
async def save_trip_as_template(
    req: TemplateCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    access = await trip_access(db, req.trip_id, user, MANAGE_ROLES)
    with service_errors():
        template = await template_service.save_trip(db, access.trip, user.id, req)
    return TemplateResponse.model_validate(template)


@router.get("/itinerary-templates/{key}", response_model=TemplateDetailResponse)
async def get_template(
    key: str,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_user),
):
    """Template by slug or id, with its items ordered by day."""
    with service_errors():
        template = await template_service.get_template(db, key, user.id if user else None)
    items = await template_service.get_items(db, template.id)
    return TemplateDetailResponse(
        template=TemplateResponse.model_validate(template),
        items=[TemplateItemResponse.model_validate(i) for i in items],
    )


@router.post("/itinerary-templates/{key}/trips", status_code=201, response_model=TripResponse)
async def create_trip_from_template(
    key: str,
    req: TripFromTemplate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    with service_errors():
        template = await template_service.get_template(db, key, user.id)
    trip = await template_service.create_trip(db, template, user, req)
    return TripResponse.model_validate(trip)


@router.post("/trips/{trip_id}/apply-template/{key}", response_model=ApplyTemplateResult)
async def apply_template(
    trip_id: uuid.UUID,
    key: str,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    access = await trip_access(db, trip_id, user, MANAGE_ROLES)
    with service_errors():
        template = await template_service.get_template(db, key, user.id)
    return await template_service.apply_to_trip(db, template, access.trip, user.id)
