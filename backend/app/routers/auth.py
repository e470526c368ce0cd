from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from jose import jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.dependencies import get_current_user, get_guest_profile
from app.models.profile import Profile
from app.schemas.auth import AuthResponse, GuestResponse, LoginRequest, ProfileResponse, RegisterRequest
from app.services.guest_service import guest_service

router = APIRouter()
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def create_access_token(user_id: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {"sub": user_id, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def set_guest_cookie(response: Response, token: str):
    response.set_cookie(
        key=settings.guest_cookie_name,
        value=token,
        max_age=settings.guest_cookie_max_age_days * 24 * 60 * 60,
        path="/",
        samesite="lax",
    )


@router.post("/register", status_code=201, response_model=AuthResponse)
async def register(req: RegisterRequest, request: Request, db: AsyncSession = Depends(get_db)):
    email = req.email.lower()
    result = await db.execute(select(Profile).where(Profile.email == email))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Email already registered")

    if req.username:
        taken = await db.execute(select(Profile.id).where(Profile.username == req.username))
        if taken.scalar_one_or_none():
            raise HTTPException(status_code=400, detail="Username already taken")

    # A guest signing up keeps everything they created: upgrade the profile in place
    user = await get_guest_profile(request, db)
    if user is None:
        user = Profile()
        db.add(user)
    user.email = email
    user.password_hash = pwd_context.hash(req.password)
    user.name = req.name or (user.name if user.name != "Guest" else None)
    user.username = req.username
    user.is_guest = False

    await db.commit()
    await db.refresh(user)

    token = create_access_token(str(user.id))
    return AuthResponse(token=token, user=ProfileResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(req: LoginRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Profile).where(Profile.email == req.email.lower()))
    user = result.scalar_one_or_none()

    if not user or not user.password_hash or not pwd_context.verify(req.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is disabled")

    token = create_access_token(str(user.id))
    return AuthResponse(token=token, user=ProfileResponse.model_validate(user))


@router.get("/me", response_model=ProfileResponse)
async def me(user: Profile = Depends(get_current_user)):
    return ProfileResponse.model_validate(user)


@router.post("/guest", response_model=GuestResponse)
async def issue_guest_token(request: Request, response: Response, db: AsyncSession = Depends(get_db)):
    """Issue (or reuse) the guest token cookie and its guest profile."""
    profile, token = await guest_service.get_or_create(db, request.cookies.get(settings.guest_cookie_name))
    await db.commit()
    await db.refresh(profile)
    set_guest_cookie(response, token)
    return GuestResponse(guest_token=token, profile=ProfileResponse.model_validate(profile))
