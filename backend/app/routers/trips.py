import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.constants import ADMIN_ROLES, MANAGE_ROLES, TRIP_STATUSES
from app.database import get_db
from app.dependencies import (
    get_actor,
    get_current_user,
    get_optional_actor,
    get_optional_user,
    trip_access,
)
from app.errors import service_errors, update_fields
from app.models.profile import Profile
from app.routers.auth import set_guest_cookie
from app.schemas.trip import (
    GuestTripCreate,
    GuestTripResponse,
    TripCreate,
    TripDetailResponse,
    TripResponse,
    TripUpdate,
)
from app.services.guest_service import guest_service
from app.services.rate_limiter import rate_limit
from app.services.trip_service import trip_service

router = APIRouter()


@router.post("", status_code=201, response_model=TripResponse)
async def create_trip(
    req: TripCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    trip = await trip_service.create_trip(db, user, req)
    return TripResponse.model_validate(trip)


@router.post("/create-guest", response_model=GuestTripResponse)
async def create_guest_trip(
    req: GuestTripCreate,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_user),
):
    """Quick-start a trip for a signed-in user, or for a guest identified by cookie."""
    if not req.destination or not req.destination.strip():
        raise HTTPException(status_code=400, detail="Destination is required")

    guest_token = None
    actor = user
    if actor is None:
        actor, guest_token = await guest_service.get_or_create(
            db, request.cookies.get(settings.guest_cookie_name)
        )
        set_guest_cookie(response, guest_token)

    trip = await trip_service.create_guest_trip(db, actor, req.destination, req.custom_name)
    return GuestTripResponse(trip_id=trip.id, is_guest=actor.is_guest, guest_token=guest_token)


@router.get("")
async def list_trips(
    status: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    """Trips the user is a member of, newest first."""
    if status and status not in TRIP_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status filter")
    trips, total = await trip_service.list_user_trips(db, user.id, status, page, limit)
    return {
        "trips": [TripResponse.model_validate(t) for t in trips],
        "total": total,
        "page": page,
        "limit": limit,
    }


@router.get("/public/{slug}")
async def get_public_trip(slug: str, db: AsyncSession = Depends(get_db)):
    with service_errors():
        return await trip_service.get_public_trip(db, slug)


@router.get(
    "/{trip_id}",
    response_model=TripDetailResponse,
    dependencies=[Depends(rate_limit("trip_read"))],
)
async def get_trip(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    access = await trip_access(db, trip_id, user)
    return TripDetailResponse(trip=TripResponse.model_validate(access.trip), user_role=access.role)


@router.patch(
    "/{trip_id}",
    response_model=TripResponse,
    dependencies=[Depends(rate_limit("trip_update"))],
)
async def update_trip(
    trip_id: uuid.UUID,
    req: TripUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    access = await trip_access(db, trip_id, user, MANAGE_ROLES)
    changes = update_fields(req, required=("name", "privacy_setting", "status", "currency"))

    with service_errors():
        trip = await trip_service.update_trip(db, access.trip, changes)
    return TripResponse.model_validate(trip)


@router.delete("/{trip_id}", dependencies=[Depends(rate_limit("trip_delete"))])
async def delete_trip(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    access = await trip_access(db, trip_id, user, ADMIN_ROLES)
    await trip_service.delete_trip(db, access.trip)
    return {"success": True}
