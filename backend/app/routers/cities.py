import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import MANAGE_ROLES, READ_ROLES
from app.database import get_db
from app.dependencies import get_actor, get_optional_actor, trip_access
from app.errors import service_errors, update_fields
from app.models.profile import Profile
from app.models.trip import City, TripCity
from app.schemas.trip import CityResponse, TripCityCreate, TripCityResponse, TripCityUpdate
from app.services.city_service import city_service

router = APIRouter()


def _trip_city_out(trip_city: TripCity, city: City) -> TripCityResponse:
    return TripCityResponse(
        id=trip_city.id,
        trip_id=trip_city.trip_id,
        city_id=trip_city.city_id,
        position=trip_city.position,
        arrival_date=trip_city.arrival_date,
        departure_date=trip_city.departure_date,
        city=CityResponse.model_validate(city),
    )


@router.get("/{trip_id}/cities")
async def list_trip_cities(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    rows = await city_service.list_cities(db, trip_id)
    return {"cities": [_trip_city_out(trip_city, city) for trip_city, city in rows]}


@router.post("/{trip_id}/cities", status_code=201, response_model=TripCityResponse)
async def add_trip_city(
    trip_id: uuid.UUID,
    req: TripCityCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    access = await trip_access(db, trip_id, user, MANAGE_ROLES)
    with service_errors():
        trip_city, city = await city_service.add_city(db, access.trip, req)
    return _trip_city_out(trip_city, city)


@router.get("/{trip_id}/cities/{city_id}")
async def get_trip_city(
    trip_id: uuid.UUID,
    city_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    with service_errors():
        trip_city, city = await city_service.get_trip_city(db, trip_id, city_id)
    return {"trip_city": _trip_city_out(trip_city, city)}


@router.patch("/{trip_id}/cities/{city_id}")
async def update_trip_city(
    trip_id: uuid.UUID,
    city_id: uuid.UUID,
    req: TripCityUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    await trip_access(db, trip_id, user, MANAGE_ROLES)
    changes = update_fields(req)
    with service_errors():
        trip_city, city = await city_service.get_trip_city(db, trip_id, city_id)
        trip_city = await city_service.update_city(db, trip_city, changes)
    return {"message": "City updated successfully", "trip_city": _trip_city_out(trip_city, city)}


@router.delete("/{trip_id}/cities/{city_id}")
async def remove_trip_city(
    trip_id: uuid.UUID,
    city_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    """Remove a stop; its itinerary sections stay but lose the city link."""
    access = await trip_access(db, trip_id, user, MANAGE_ROLES)
    with service_errors():
        trip_city, _ = await city_service.get_trip_city(db, trip_id, city_id)
    await city_service.remove_city(db, access.trip, trip_city)
    return {"success": True, "removed_city_id": city_id}
