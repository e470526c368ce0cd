import uuid

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.errors import service_errors
from app.models.profile import Profile
from app.services.trip_access import TripAccess, require_trip_role

bearer_scheme = HTTPBearer(auto_error=False)


async def _user_from_token(db: AsyncSession, token: str) -> Profile | None:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        user_id = uuid.UUID(payload.get("sub", ""))
    except (JWTError, ValueError):
        return None

    result = await db.execute(select(Profile).where(Profile.id == user_id))
    return result.scalar_one_or_none()


async def get_guest_profile(request: Request, db: AsyncSession) -> Profile | None:
    """Resolve the guest profile bound to the guest cookie, if any."""
    token = request.cookies.get(settings.guest_cookie_name)
    if not token:
        return None
    result = await db.execute(
        select(Profile).where(Profile.guest_token == token, Profile.is_guest == True)
    )
    return result.scalar_one_or_none()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = await _user_from_token(db, credentials.credentials)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account is disabled")
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Profile | None:
    if credentials is None:
        return None
    user = await _user_from_token(db, credentials.credentials)
    if user is None or not user.is_active:
        return None
    return user


async def get_optional_actor(
    request: Request,
    user: Profile | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
) -> Profile | None:
    if user is not None:
        return user
    return await get_guest_profile(request, db)


async def get_actor(
    request: Request,
    user: Profile | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    """The signed-in user, else the guest behind the guest cookie."""
    if user is not None:
        return user
    guest = await get_guest_profile(request, db)
    if guest is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return guest


async def require_site_admin(user: Profile = Depends(get_current_user)) -> Profile:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


async def trip_access(
    db: AsyncSession,
    trip_id: uuid.UUID,
    user: Profile | None,
    roles=None,
) -> TripAccess:
    """Resolve access for a route; 404 for a missing trip, 403 when denied."""
    with service_errors():
        return await require_trip_role(db, trip_id, user.id if user else None, roles)
