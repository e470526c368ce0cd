import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import MANAGE_ROLES, READ_ROLES, WRITE_ROLES
from app.database import get_db
from app.dependencies import get_actor, get_current_user, get_optional_actor, trip_access
from app.errors import service_errors
from app.models.profile import Profile
from app.schemas.poll import PollCreate, PollResults, PollVoteRequest
from app.services.poll_service import poll_service

router = APIRouter()


@router.post("/{trip_id}/polls", status_code=201, response_model=PollResults)
async def create_poll(
    trip_id: uuid.UUID,
    req: PollCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    await trip_access(db, trip_id, user, WRITE_ROLES)
    with service_errors():
        poll = await poll_service.create_poll(db, trip_id, user.id, req)
    return await poll_service.results(db, poll, user.id)


@router.get("/{trip_id}/polls", response_model=list[PollResults])
async def list_polls(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    user_id = user.id if user else None
    polls = await poll_service.list_polls(db, trip_id)
    return [await poll_service.results(db, poll, user_id) for poll in polls]


@router.get("/{trip_id}/polls/{poll_id}", response_model=PollResults)
async def get_poll(
    trip_id: uuid.UUID,
    poll_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    with service_errors():
        poll = await poll_service.get_poll(db, trip_id, poll_id)
    return await poll_service.results(db, poll, user.id if user else None)


@router.post("/{trip_id}/polls/{poll_id}/vote", response_model=PollResults)
async def vote(
    trip_id: uuid.UUID,
    poll_id: uuid.UUID,
    req: PollVoteRequest,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    with service_errors():
        poll = await poll_service.get_poll(db, trip_id, poll_id)
        return await poll_service.vote(db, poll, user.id, req.option_id)


@router.delete("/{trip_id}/polls/{poll_id}/vote", response_model=PollResults)
async def retract_vote(
    trip_id: uuid.UUID,
    poll_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    with service_errors():
        poll = await poll_service.get_poll(db, trip_id, poll_id)
        return await poll_service.retract(db, poll, user.id)


@router.post("/{trip_id}/polls/{poll_id}/close", response_model=PollResults)
async def close_poll(
    trip_id: uuid.UUID,
    poll_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    """Managers can close any poll; other members only their own."""
    access = await trip_access(db, trip_id, user, READ_ROLES)
    with service_errors():
        poll = await poll_service.get_poll(db, trip_id, poll_id)
        if access.role not in MANAGE_ROLES and poll.created_by != user.id:
            raise PermissionError("Only trip managers or the poll creator can close a poll")
    poll = await poll_service.close(db, poll)
    return await poll_service.results(db, poll, user.id)
