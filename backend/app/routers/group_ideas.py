"""Group plans and the shared idea board."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_actor
from app.errors import service_errors, update_fields
from app.models.profile import Profile
from app.schemas.group import (
    IdeaCreate,
    IdeaIds,
    IdeaPositionsUpdate,
    IdeaResponse,
    IdeaUpdate,
    IdeaVoteRequest,
    PlanCreate,
    PlanResponse,
    PlanUpdate,
    ReadinessUpdate,
)
from app.schemas.trip import TripResponse
from app.services.group_service import group_service
from app.services.idea_service import idea_service

router = APIRouter()


# ─── Plans ───

@router.post("/{group_id}/plans", status_code=201, response_model=PlanResponse)
async def create_plan(
    group_id: uuid.UUID,
    req: PlanCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
    plan = await idea_service.create_plan(db, group_id, user.id, req)
    return PlanResponse.model_validate(plan)


@router.get("/{group_id}/plans", response_model=list[PlanResponse])
async def list_plans(
    group_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
    return [PlanResponse.model_validate(p) for p in await idea_service.list_plans(db, group_id)]


@router.get("/{group_id}/plans/{plan_id}")
async def get_plan(
    group_id: uuid.UUID,
    plan_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
        plan = await idea_service.get_plan(db, group_id, plan_id)
    ideas = await idea_service.list_ideas(db, group_id, plan_id=plan.id)
    return {
        "plan": PlanResponse.model_validate(plan),
        "ideas": [IdeaResponse.model_validate(i) for i in ideas],
    }


@router.patch("/{group_id}/plans/{plan_id}", response_model=PlanResponse)
async def update_plan(
    group_id: uuid.UUID,
    plan_id: uuid.UUID,
    req: PlanUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    changes = update_fields(req, required=("name", "status"))
    with service_errors():
        membership = await group_service.require_member(db, group_id, user.id)
        plan = await idea_service.get_plan(db, group_id, plan_id)
        if plan.created_by != user.id and membership.role != "admin":
            raise PermissionError("Only the plan's creator or a group admin can change it")
    plan = await idea_service.update_plan(db, plan, changes)
    return PlanResponse.model_validate(plan)


@router.delete("/{group_id}/plans/{plan_id}")
async def delete_plan(
    group_id: uuid.UUID,
    plan_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id, admin=True)
        plan = await idea_service.get_plan(db, group_id, plan_id)
    await idea_service.delete_plan(db, plan)
    return {"success": True}


@router.post("/{group_id}/plans/{plan_id}/ideas")
async def attach_ideas(
    group_id: uuid.UUID,
    plan_id: uuid.UUID,
    req: IdeaIds,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
        plan = await idea_service.get_plan(db, group_id, plan_id)
        attached = await idea_service.attach_ideas(db, plan, req.idea_ids)
    return {"success": True, "attached": attached}


@router.delete("/{group_id}/plans/{plan_id}/ideas")
async def detach_ideas(
    group_id: uuid.UUID,
    plan_id: uuid.UUID,
    req: IdeaIds,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
        plan = await idea_service.get_plan(db, group_id, plan_id)
        detached = await idea_service.detach_ideas(db, plan, req.idea_ids)
    return {"success": True, "detached": detached}


@router.post("/{group_id}/plans/{plan_id}/ready")
async def set_ready(
    group_id: uuid.UUID,
    plan_id: uuid.UUID,
    req: ReadinessUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
        plan = await idea_service.get_plan(db, group_id, plan_id)
    return await idea_service.set_ready(db, plan, user.id, req.is_ready)


@router.get("/{group_id}/plans/{plan_id}/readiness")
async def get_readiness(
    group_id: uuid.UUID,
    plan_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
        plan = await idea_service.get_plan(db, group_id, plan_id)
    return await idea_service.readiness(db, plan)


@router.get("/{group_id}/plans/{plan_id}/summary")
async def plan_summary(
    group_id: uuid.UUID,
    plan_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
        plan = await idea_service.get_plan(db, group_id, plan_id)
    summary = await idea_service.summary(db, plan)
    return {
        "plan": PlanResponse.model_validate(summary["plan"]),
        "total_ideas": summary["total_ideas"],
        "by_type": {
            idea_type: [IdeaResponse.model_validate(i) for i in ideas]
            for idea_type, ideas in summary["by_type"].items()
        },
    }


@router.post("/{group_id}/plans/{plan_id}/create-trip", status_code=201)
async def create_trip_from_plan(
    group_id: uuid.UUID,
    plan_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id, admin=True)
        group = await group_service.get_group(db, group_id)
        plan = await idea_service.get_plan(db, group_id, plan_id)
        trip = await idea_service.create_trip_from_plan(db, group, plan, user.id)
    return {"trip": TripResponse.model_validate(trip), "plan_id": plan.id}


# ─── Ideas ───

@router.get("/{group_id}/ideas", response_model=list[IdeaResponse])
async def list_ideas(
    group_id: uuid.UUID,
    plan_id: str | None = Query(None, description="Plan id, or 'null' for unassigned ideas"),
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)

    unassigned = plan_id == "null"
    plan_uuid = None
    if plan_id and not unassigned:
        try:
            plan_uuid = uuid.UUID(plan_id)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid plan_id")
    ideas = await idea_service.list_ideas(db, group_id, plan_id=plan_uuid, unassigned=unassigned)
    return [IdeaResponse.model_validate(i) for i in ideas]


@router.post("/{group_id}/ideas", status_code=201, response_model=IdeaResponse)
async def create_idea(
    group_id: uuid.UUID,
    req: IdeaCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
        idea = await idea_service.create_idea(db, group_id, user.id, req)
    return IdeaResponse.model_validate(idea)


@router.put("/{group_id}/ideas/positions")
async def update_positions(
    group_id: uuid.UUID,
    req: IdeaPositionsUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    if not req.positions:
        raise HTTPException(status_code=400, detail="No positions to update")
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
        updated = await idea_service.update_positions(db, group_id, req.positions)
    return {"success": True, "updated": updated}


@router.get("/{group_id}/ideas/{idea_id}", response_model=IdeaResponse)
async def get_idea(
    group_id: uuid.UUID,
    idea_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
        idea = await idea_service.get_idea(db, group_id, idea_id)
    return IdeaResponse.model_validate(idea)


@router.patch("/{group_id}/ideas/{idea_id}", response_model=IdeaResponse)
async def update_idea(
    group_id: uuid.UUID,
    idea_id: uuid.UUID,
    req: IdeaUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    changes = update_fields(req, required=("title", "type"))
    with service_errors():
        membership = await group_service.require_member(db, group_id, user.id)
        idea = await idea_service.get_idea(db, group_id, idea_id)
        idea_service.check_can_edit(idea, membership)
        idea = await idea_service.update_idea(db, idea, changes)
    return IdeaResponse.model_validate(idea)


@router.delete("/{group_id}/ideas/{idea_id}")
async def delete_idea(
    group_id: uuid.UUID,
    idea_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        membership = await group_service.require_member(db, group_id, user.id)
        idea = await idea_service.get_idea(db, group_id, idea_id)
        idea_service.check_can_edit(idea, membership)
    await idea_service.delete_idea(db, idea)
    return {"success": True}


@router.post("/{group_id}/ideas/{idea_id}/vote")
async def vote_idea(
    group_id: uuid.UUID,
    idea_id: uuid.UUID,
    req: IdeaVoteRequest,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
        idea = await idea_service.get_idea(db, group_id, idea_id)
    return await idea_service.vote(db, idea, user.id, req.vote_type)


@router.delete("/{group_id}/ideas/{idea_id}/vote")
async def retract_idea_vote(
    group_id: uuid.UUID,
    idea_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    with service_errors():
        await group_service.require_member(db, group_id, user.id)
        idea = await idea_service.get_idea(db, group_id, idea_id)
        return await idea_service.retract_vote(db, idea, user.id)
