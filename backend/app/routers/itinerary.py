import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import MANAGE_ROLES, READ_ROLES, ROLE_CONTRIBUTOR, WRITE_ROLES
from app.database import get_db
from app.dependencies import get_actor, get_current_user, get_optional_actor, trip_access
from app.errors import service_errors, update_fields
from app.models.profile import Profile
from app.schemas.itinerary import (
    ItineraryCreate,
    ItineraryItemResponse,
    ItineraryItemUpdate,
    ItinerarySectionResponse,
    ReorderRequest,
    VoteRequest,
    VoteTally,
)
from app.services.itinerary_service import itinerary_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{trip_id}/itinerary")
async def get_itinerary(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    itinerary = await itinerary_service.get_itinerary(db, trip_id)
    return {
        "data": {
            "sections": [ItinerarySectionResponse.model_validate(s) for s in itinerary["sections"]],
            "items": [ItineraryItemResponse.model_validate(i) for i in itinerary["items"]],
        }
    }


@router.post("/{trip_id}/itinerary", status_code=201)
async def create_itinerary_entry(
    trip_id: uuid.UUID,
    req: ItineraryCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    """Create an item, a section, or bulk-import places, depending on ``type``."""
    await trip_access(db, trip_id, user, WRITE_ROLES)

    with service_errors():
        if req.type == "item":
            item = await itinerary_service.create_item(db, trip_id, user.id, req)
            return {"data": ItineraryItemResponse.model_validate(item)}

        if req.type == "section":
            section = await itinerary_service.create_section(db, trip_id, req)
            return {"data": ItinerarySectionResponse.model_validate(section)}

        if req.type == "google_maps_import":
            items = await itinerary_service.import_items(db, trip_id, user.id, req.items)
            return {
                "success": True,
                "message": f"Imported {len(items)} items",
                "data": [ItineraryItemResponse.model_validate(i) for i in items],
                "imported_count": len(items),
            }

    raise HTTPException(status_code=400, detail=f"Unknown itinerary entry type: {req.type}")


@router.post("/{trip_id}/itinerary/reorder")
async def reorder_items(
    trip_id: uuid.UUID,
    req: ReorderRequest,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    await trip_access(db, trip_id, user, MANAGE_ROLES)
    with service_errors():
        items = await itinerary_service.reorder(db, trip_id, req.section_id, req.item_ids)
    return {"success": True, "items": [ItineraryItemResponse.model_validate(i) for i in items]}


@router.get("/{trip_id}/itinerary/{item_id}")
async def get_item(
    trip_id: uuid.UUID,
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    with service_errors():
        item = await itinerary_service.get_item(db, trip_id, item_id)
    return {"item": ItineraryItemResponse.model_validate(item)}


@router.patch("/{trip_id}/itinerary/{item_id}", response_model=ItineraryItemResponse)
async def update_item(
    trip_id: uuid.UUID,
    item_id: uuid.UUID,
    req: ItineraryItemUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    access = await trip_access(db, trip_id, user, WRITE_ROLES)
    with service_errors():
        item = await itinerary_service.get_item(db, trip_id, item_id)
        if access.role == ROLE_CONTRIBUTOR and item.created_by != user.id:
            raise PermissionError("Contributors can only edit their own items")

    changes = update_fields(req, required=("title", "item_type", "status"))
    with service_errors():
        item = await itinerary_service.update_item(db, item, changes)
    return ItineraryItemResponse.model_validate(item)


@router.delete("/{trip_id}/itinerary/{item_id}")
async def delete_item(
    trip_id: uuid.UUID,
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    await trip_access(db, trip_id, user, MANAGE_ROLES)
    with service_errors():
        item = await itinerary_service.get_item(db, trip_id, item_id)
    await itinerary_service.delete_item(db, item)
    logger.info(f"Deleted itinerary item {item_id} from trip {trip_id}")
    return {"success": True}


@router.post("/{trip_id}/itinerary/{item_id}/vote", response_model=VoteTally)
async def vote_item(
    trip_id: uuid.UUID,
    item_id: uuid.UUID,
    req: VoteRequest,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    with service_errors():
        item = await itinerary_service.get_item(db, trip_id, item_id)
    return await itinerary_service.vote(db, item, user.id, req.vote_type)
