"""Trip and group invitations. Mounted at /api because routes span trips, groups and tokens."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import MANAGE_ROLES
from app.database import get_db
from app.dependencies import get_actor, get_current_user, trip_access
from app.errors import service_errors
from app.models.profile import Profile
from app.schemas.social import GroupInvitationCreate, InvitationCreate, InvitationResponse
from app.services.group_service import group_service
from app.services.invitation_service import invitation_service

router = APIRouter()


def _batch_out(result: dict) -> dict:
    return {
        "invitations": [InvitationResponse.model_validate(i) for i in result["invitations"]],
        "skipped": result["skipped"],
    }


@router.post("/trips/{trip_id}/invitations", status_code=201)
async def invite_to_trip(
    trip_id: uuid.UUID,
    req: InvitationCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    access = await trip_access(db, trip_id, user, MANAGE_ROLES)
    result = await invitation_service.invite_to_trip(db, access.trip, user, req.emails, req.role)
    return _batch_out(result)


@router.post("/groups/{group_id}/invitations", status_code=201)
async def invite_to_group(
    group_id: uuid.UUID,
    req: GroupInvitationCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id, admin=True)
        group = await group_service.get_group(db, group_id)
    result = await invitation_service.invite_to_group(db, group, user, req.emails)
    return _batch_out(result)


@router.get("/invitations/{token}")
async def get_invitation(token: str, db: AsyncSession = Depends(get_db)):
    with service_errors():
        invitation = await invitation_service.get_by_token(db, token)
    details = await invitation_service.details(db, invitation)
    details["invitation"] = InvitationResponse.model_validate(invitation)
    return details


@router.post("/invitations/{token}/accept", response_model=InvitationResponse)
async def accept_invitation(
    token: str,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    with service_errors():
        invitation = await invitation_service.accept(db, token, user)
    return InvitationResponse.model_validate(invitation)


@router.post("/invitations/{token}/decline", response_model=InvitationResponse)
async def decline_invitation(token: str, db: AsyncSession = Depends(get_db)):
    with service_errors():
        invitation = await invitation_service.decline(db, token)
    return InvitationResponse.model_validate(invitation)


@router.delete("/invitations/{invitation_id}", response_model=InvitationResponse)
async def revoke_invitation(
    invitation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        invitation = await invitation_service.revoke(db, invitation_id, user.id)
    return InvitationResponse.model_validate(invitation)
