"""Trip role resolution shared by every trip-scoped route."""

import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import PRIVACY_PUBLIC, ROLE_ADMIN, ROLE_VIEWER
from app.models.trip import Trip, TripMember


@dataclass
class TripAccess:
    trip: Trip
    role: str | None
    allowed: bool
    is_member: bool = False


def _granted(role: str | None, required_roles) -> bool:
    if role is None:
        return False
    return not required_roles or role in required_roles


async def check_trip_access(
    db: AsyncSession,
    trip_id: uuid.UUID,
    user_id: uuid.UUID | None,
    required_roles=None,
) -> TripAccess:
    """Resolve the caller's role on a trip.

    Order: explicit membership, then the trip creator (treated as admin), then
    public trips (viewer). Anonymous callers only ever get the public fallback.
    Raises LookupError when the trip does not exist.
    """
    result = await db.execute(select(Trip).where(Trip.id == trip_id))
    trip = result.scalar_one_or_none()
    if trip is None:
        raise LookupError("Trip not found")

    if user_id is not None:
        member = await db.execute(
            select(TripMember).where(TripMember.trip_id == trip_id, TripMember.user_id == user_id)
        )
        membership = member.scalar_one_or_none()
        if membership is not None:
            return TripAccess(
                trip=trip,
                role=membership.role,
                allowed=_granted(membership.role, required_roles),
                is_member=True,
            )

        if trip.created_by == user_id:
            return TripAccess(trip=trip, role=ROLE_ADMIN, allowed=_granted(ROLE_ADMIN, required_roles))

    if trip.privacy_setting == PRIVACY_PUBLIC:
        return TripAccess(trip=trip, role=ROLE_VIEWER, allowed=_granted(ROLE_VIEWER, required_roles))

    return TripAccess(trip=trip, role=None, allowed=False)


async def require_trip_role(
    db: AsyncSession,
    trip_id: uuid.UUID,
    user_id: uuid.UUID | None,
    required_roles=None,
) -> TripAccess:
    access = await check_trip_access(db, trip_id, user_id, required_roles)
    if not access.allowed:
        raise PermissionError("You do not have permission to perform this action on this trip")
    return access
