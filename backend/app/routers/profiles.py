import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.models.profile import Profile
from app.schemas.auth import ProfileResponse, ProfileUpdate, PublicProfileResponse

router = APIRouter()


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    req: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    changes = req.model_dump(exclude_unset=True)
    if changes.get("username") and changes["username"] != user.username:
        taken = await db.execute(
            select(Profile.id).where(Profile.username == changes["username"], Profile.id != user.id)
        )
        if taken.scalar_one_or_none():
            raise HTTPException(status_code=400, detail="Username already taken")

    for field, value in changes.items():
        setattr(user, field, value)
    await db.commit()
    await db.refresh(user)
    return ProfileResponse.model_validate(user)


@router.get("/{profile_id}", response_model=PublicProfileResponse)
async def get_profile(profile_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Profile).where(Profile.id == profile_id, Profile.is_active == True))
    profile = result.scalar_one_or_none()
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return PublicProfileResponse.model_validate(profile)
