import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import LIKEABLE_TYPES, READ_ROLES
from app.database import get_db
from app.dependencies import get_current_user, get_optional_user, trip_access
from app.models.profile import Profile
from app.models.social import Like
from app.models.trip import Trip
from app.schemas.social import LikeCreate, LikeResponse

router = APIRouter()


def _check_type(item_type: str):
    if item_type not in LIKEABLE_TYPES:
        raise HTTPException(status_code=400, detail=f"item_type must be one of: {', '.join(LIKEABLE_TYPES)}")


async def _adjust_trip_likes(db: AsyncSession, trip_id: uuid.UUID, delta: int):
    if delta < 0:
        new_count = case((Trip.likes_count + delta > 0, Trip.likes_count + delta), else_=0)
    else:
        new_count = Trip.likes_count + delta
    await db.execute(
        update(Trip)
        .where(Trip.id == trip_id)
        .values(likes_count=new_count)
        .execution_options(synchronize_session=False)
    )


@router.post("", status_code=201, response_model=LikeResponse)
async def like(
    req: LikeCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    _check_type(req.item_type)
    existing = await db.execute(
        select(Like.id).where(
            Like.user_id == user.id, Like.item_id == req.item_id, Like.item_type == req.item_type
        )
    )
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Already liked")

    if req.item_type == "trip":
        access = await trip_access(db, req.item_id, user, READ_ROLES)
        await _adjust_trip_likes(db, access.trip.id, 1)

    record = Like(user_id=user.id, item_id=req.item_id, item_type=req.item_type)
    db.add(record)
    await db.commit()
    await db.refresh(record)
    return LikeResponse.model_validate(record)


@router.get("", response_model=list[LikeResponse])
async def list_likes(
    item_type: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    query = select(Like).where(Like.user_id == user.id)
    if item_type:
        _check_type(item_type)
        query = query.where(Like.item_type == item_type)
    result = await db.execute(query.order_by(Like.created_at.desc()))
    return [LikeResponse.model_validate(l) for l in result.scalars().all()]


@router.get("/{item_type}/{item_id}/count")
async def like_count(
    item_type: str,
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_user),
):
    _check_type(item_type)
    count = await db.execute(
        select(func.count()).select_from(Like).where(Like.item_id == item_id, Like.item_type == item_type)
    )
    liked = False
    if user is not None:
        mine = await db.execute(
            select(Like.id).where(Like.user_id == user.id, Like.item_id == item_id, Like.item_type == item_type)
        )
        liked = mine.scalar_one_or_none() is not None
    return {"count": count.scalar_one(), "liked": liked}


@router.delete("/{item_type}/{item_id}")
async def unlike(
    item_type: str,
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    _check_type(item_type)
    result = await db.execute(
        select(Like).where(Like.user_id == user.id, Like.item_id == item_id, Like.item_type == item_type)
    )
    record = result.scalar_one_or_none()
    if not record:
        raise HTTPException(status_code=404, detail="Like not found")

    await db.delete(record)
    if item_type == "trip":
        await _adjust_trip_likes(db, item_id, -1)
    await db.commit()
    return {"success": True}
