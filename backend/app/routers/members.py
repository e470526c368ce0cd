"""Trip members, access requests and permission status."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import (
    ADMIN_ROLES,
    READ_ROLES,
    REQUEST_APPROVED,
    REQUEST_PENDING,
    REQUEST_REJECTED,
    ROLE_ADMIN,
)
from app.database import get_db
from app.dependencies import get_current_user, get_optional_actor, trip_access
from app.errors import service_errors
from app.models.profile import Profile
from app.models.trip import AccessRequest, TripMember
from app.schemas.trip import (
    AccessRequestCreate,
    AccessRequestResponse,
    MemberResponse,
    MemberRoleUpdate,
    PermissionStatus,
)
from app.services.notification_service import notification_service
from app.services.trip_access import check_trip_access
from app.services.trip_service import trip_service
from app.utils import utcnow

router = APIRouter()


async def _admin_count(db: AsyncSession, trip_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count()).select_from(TripMember).where(
            TripMember.trip_id == trip_id, TripMember.role == ROLE_ADMIN
        )
    )
    return result.scalar_one()


async def _get_member(db: AsyncSession, trip_id: uuid.UUID, user_id: uuid.UUID) -> TripMember:
    result = await db.execute(
        select(TripMember).where(TripMember.trip_id == trip_id, TripMember.user_id == user_id)
    )
    member = result.scalar_one_or_none()
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")
    return member


def _member_out(member: TripMember, profile: Profile) -> MemberResponse:
    return MemberResponse(
        id=member.id,
        trip_id=member.trip_id,
        user_id=member.user_id,
        role=member.role,
        joined_at=member.joined_at,
        name=profile.display_name,
        username=profile.username,
        avatar_url=profile.avatar_url,
    )


# ─── Members ───

@router.get("/{trip_id}/members", response_model=list[MemberResponse])
async def list_members(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    result = await db.execute(
        select(TripMember, Profile)
        .join(Profile, Profile.id == TripMember.user_id)
        .where(TripMember.trip_id == trip_id)
        .order_by(TripMember.joined_at)
    )
    return [_member_out(m, p) for m, p in result.all()]


@router.patch("/{trip_id}/members/{member_user_id}", response_model=MemberResponse)
async def change_member_role(
    trip_id: uuid.UUID,
    member_user_id: uuid.UUID,
    req: MemberRoleUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    await trip_access(db, trip_id, user, ADMIN_ROLES)
    member = await _get_member(db, trip_id, member_user_id)

    if member.role == ROLE_ADMIN and req.role != ROLE_ADMIN and await _admin_count(db, trip_id) <= 1:
        raise HTTPException(status_code=400, detail="A trip must keep at least one admin")

    member.role = req.role
    await db.commit()
    profile = await db.get(Profile, member.user_id)
    return _member_out(member, profile)


@router.delete("/{trip_id}/members/{member_user_id}")
async def remove_member(
    trip_id: uuid.UUID,
    member_user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    """Admins can remove anyone; members can remove themselves."""
    if member_user_id != user.id:
        await trip_access(db, trip_id, user, ADMIN_ROLES)
    member = await _get_member(db, trip_id, member_user_id)

    if member.role == ROLE_ADMIN and await _admin_count(db, trip_id) <= 1:
        raise HTTPException(status_code=400, detail="The last admin cannot leave the trip")

    await db.delete(member)
    await db.commit()
    return {"success": True}


# ─── Access requests ───

@router.post("/{trip_id}/access-requests", status_code=201, response_model=AccessRequestResponse)
async def request_access(
    trip_id: uuid.UUID,
    req: AccessRequestCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    with service_errors():
        access = await check_trip_access(db, trip_id, user.id)
    if access.is_member or access.trip.created_by == user.id:
        raise HTTPException(status_code=400, detail="You are already a member of this trip")

    pending = await db.execute(
        select(AccessRequest.id).where(
            AccessRequest.trip_id == trip_id,
            AccessRequest.user_id == user.id,
            AccessRequest.status == REQUEST_PENDING,
        )
    )
    if pending.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="You already have a pending request")

    access_request = AccessRequest(
        trip_id=trip_id,
        user_id=user.id,
        requested_role=req.requested_role,
        message=req.message,
        status=REQUEST_PENDING,
    )
    db.add(access_request)

    admins = await db.execute(
        select(TripMember.user_id).where(TripMember.trip_id == trip_id, TripMember.role == ROLE_ADMIN)
    )
    for admin_id in admins.scalars().all():
        await notification_service.send_access_request(db, admin_id, access.trip.name, user.display_name, trip_id)

    await db.commit()
    await db.refresh(access_request)
    return AccessRequestResponse.model_validate(access_request)


@router.get("/{trip_id}/access-requests", response_model=list[AccessRequestResponse])
async def list_access_requests(
    trip_id: uuid.UUID,
    status: str | None = None,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    await trip_access(db, trip_id, user, ADMIN_ROLES)
    query = select(AccessRequest).where(AccessRequest.trip_id == trip_id)
    if status:
        query = query.where(AccessRequest.status == status)
    result = await db.execute(query.order_by(AccessRequest.created_at.desc()))
    return [AccessRequestResponse.model_validate(r) for r in result.scalars().all()]


async def _resolve_request(
    db: AsyncSession, trip_id: uuid.UUID, request_id: uuid.UUID, user: Profile, approve: bool
) -> AccessRequest:
    access = await trip_access(db, trip_id, user, ADMIN_ROLES)
    result = await db.execute(
        select(AccessRequest).where(AccessRequest.id == request_id, AccessRequest.trip_id == trip_id)
    )
    access_request = result.scalar_one_or_none()
    if not access_request:
        raise HTTPException(status_code=404, detail="Access request not found")
    if access_request.status != REQUEST_PENDING:
        raise HTTPException(status_code=400, detail=f"Request is already {access_request.status}")

    if approve:
        existing = await db.execute(
            select(TripMember.id).where(
                TripMember.trip_id == trip_id, TripMember.user_id == access_request.user_id
            )
        )
        if existing.scalar_one_or_none() is None:
            await trip_service.add_member(
                db, trip_id, access_request.user_id, access_request.requested_role, invited_by=user.id
            )

    access_request.status = REQUEST_APPROVED if approve else REQUEST_REJECTED
    access_request.resolved_by = user.id
    access_request.resolved_at = utcnow()
    await notification_service.send_access_decision(
        db, access_request.user_id, access.trip.name, approve, trip_id
    )
    await db.commit()
    await db.refresh(access_request)
    return access_request


@router.post("/{trip_id}/access-requests/{request_id}/approve", response_model=AccessRequestResponse)
async def approve_access_request(
    trip_id: uuid.UUID,
    request_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    access_request = await _resolve_request(db, trip_id, request_id, user, approve=True)
    return AccessRequestResponse.model_validate(access_request)


@router.post("/{trip_id}/access-requests/{request_id}/reject", response_model=AccessRequestResponse)
async def reject_access_request(
    trip_id: uuid.UUID,
    request_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    access_request = await _resolve_request(db, trip_id, request_id, user, approve=False)
    return AccessRequestResponse.model_validate(access_request)


@router.get("/{trip_id}/permission-status", response_model=PermissionStatus)
async def permission_status(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    with service_errors():
        access = await check_trip_access(db, trip_id, user.id if user else None)

    has_pending = False
    if user is not None:
        pending = await db.execute(
            select(AccessRequest.id).where(
                AccessRequest.trip_id == trip_id,
                AccessRequest.user_id == user.id,
                AccessRequest.status == REQUEST_PENDING,
            )
        )
        has_pending = pending.scalar_one_or_none() is not None

    return PermissionStatus(
        has_access=access.allowed,
        role=access.role,
        is_owner=user is not None and access.trip.created_by == user.id,
        has_pending_request=has_pending,
    )
