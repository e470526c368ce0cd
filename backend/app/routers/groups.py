import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.dependencies import get_actor, get_current_user, get_optional_actor
from app.errors import service_errors, update_fields
from app.models.profile import Profile
from app.routers.auth import set_guest_cookie
from app.schemas.group import (
    GroupCreate,
    GroupMemberAdd,
    GroupMemberRoleUpdate,
    GroupResponse,
    GroupUpdate,
    PlanResponse,
)
from app.services.group_service import group_service
from app.services.guest_service import guest_service

router = APIRouter()


@router.post("", status_code=201, response_model=GroupResponse)
async def create_group(
    req: GroupCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    group = await group_service.create_group(db, user, req)
    return GroupResponse.model_validate(group)


@router.post("/guest", status_code=201)
async def create_guest_group(
    req: GroupCreate,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Create a group owned by the guest behind the guest cookie (issued if missing)."""
    guest, token = await guest_service.get_or_create(db, request.cookies.get(settings.guest_cookie_name))
    set_guest_cookie(response, token)
    group = await group_service.create_group(db, guest, req)
    return {"group": GroupResponse.model_validate(group), "guest_token": token}


@router.get("")
async def list_groups(
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    return {"groups": await group_service.list_user_groups(db, user.id)}


@router.get("/{group_id}")
async def get_group(
    group_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    with service_errors():
        group = await group_service.get_group(db, group_id)
    detail = await group_service.group_detail(db, group, user.id if user else None)
    if detail["user_role"] is None and group.visibility != "public":
        raise HTTPException(status_code=403, detail="You are not a member of this group")
    return {
        "group": GroupResponse.model_validate(group),
        "members": detail["members"],
        "plans": [PlanResponse.model_validate(p) for p in detail["plans"]],
        "user_role": detail["user_role"],
    }


@router.patch("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: uuid.UUID,
    req: GroupUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    changes = update_fields(req, required=("name", "visibility"))
    with service_errors():
        await group_service.require_member(db, group_id, user.id, admin=True)
        group = await group_service.get_group(db, group_id)
    group = await group_service.update_group(db, group, changes)
    return GroupResponse.model_validate(group)


@router.delete("/{group_id}")
async def delete_group(
    group_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id, admin=True)
        group = await group_service.get_group(db, group_id)
    await group_service.delete_group(db, group)
    return {"success": True}


# ─── Members ───

@router.get("/{group_id}/members")
async def list_members(
    group_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
    return {"members": await group_service.list_members(db, group_id)}


@router.post("/{group_id}/members", status_code=201)
async def add_member(
    group_id: uuid.UUID,
    req: GroupMemberAdd,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id, admin=True)
        member = await group_service.add_member(db, group_id, req.user_id, req.role)
    return {"user_id": member.user_id, "role": member.role, "status": member.status}


@router.patch("/{group_id}/members/{member_user_id}")
async def change_member_role(
    group_id: uuid.UUID,
    member_user_id: uuid.UUID,
    req: GroupMemberRoleUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id, admin=True)
        member = await group_service.change_role(db, group_id, member_user_id, req.role)
    return {"user_id": member.user_id, "role": member.role, "status": member.status}


@router.delete("/{group_id}/members/{member_user_id}")
async def remove_member(
    group_id: uuid.UUID,
    member_user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.get_group(db, group_id)
        member = await group_service.remove_member(db, group_id, member_user_id, user.id)
    return {"user_id": member.user_id, "status": member.status}
