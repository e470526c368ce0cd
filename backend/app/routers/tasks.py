import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import MANAGE_ROLES, READ_ROLES, ROLE_CONTRIBUTOR, WRITE_ROLES
from app.database import get_db
from app.dependencies import get_actor, get_current_user, get_optional_actor, trip_access
from app.errors import service_errors, update_fields
from app.models.planning import Task
from app.models.profile import Profile
from app.schemas.itinerary import VoteRequest, VoteTally
from app.schemas.planning import TaskAssign, TaskCreate, TaskResponse, TaskUpdate
from app.services.task_service import task_service

router = APIRouter()


def _task_out(task: Task, tags: list[str]) -> TaskResponse:
    out = TaskResponse.model_validate(task)
    out.tags = tags
    return out


@router.get("/{trip_id}/tasks", response_model=list[TaskResponse])
async def list_tasks(
    trip_id: uuid.UUID,
    status: str | None = Query(None),
    assignee_id: uuid.UUID | None = Query(None),
    tag: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    tasks = await task_service.list_tasks(db, trip_id, status, assignee_id, tag)
    tags = await task_service.tag_names(db, tasks)
    return [_task_out(t, tags.get(t.id, [])) for t in tasks]


@router.post("/{trip_id}/tasks", status_code=201, response_model=TaskResponse)
async def create_task(
    trip_id: uuid.UUID,
    req: TaskCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    access = await trip_access(db, trip_id, user, WRITE_ROLES)
    with service_errors():
        task = await task_service.create_task(db, access.trip, user.id, req)
    return _task_out(task, sorted(req.tags))


@router.get("/{trip_id}/tasks/{task_id}", response_model=TaskResponse)
async def get_task(
    trip_id: uuid.UUID,
    task_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    with service_errors():
        task = await task_service.get_task(db, trip_id, task_id)
    tags = await task_service.tag_names(db, [task])
    return _task_out(task, tags.get(task.id, []))


@router.patch("/{trip_id}/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    trip_id: uuid.UUID,
    task_id: uuid.UUID,
    req: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    """Contributors may edit tasks they own or are assigned to."""
    access = await trip_access(db, trip_id, user, WRITE_ROLES)
    with service_errors():
        task = await task_service.get_task(db, trip_id, task_id)
        if access.role == ROLE_CONTRIBUTOR and user.id not in (task.owner_id, task.assignee_id):
            raise PermissionError("Contributors can only edit their own tasks")

    changes = update_fields(req, required=("title", "status", "priority", "position", "tags"))
    task = await task_service.update_task(db, task, changes)
    tags = await task_service.tag_names(db, [task])
    return _task_out(task, tags.get(task.id, []))


@router.post("/{trip_id}/tasks/{task_id}/assign", response_model=TaskResponse)
async def assign_task(
    trip_id: uuid.UUID,
    task_id: uuid.UUID,
    req: TaskAssign,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    """Managers assign anyone on the trip; contributors can only take a task themselves."""
    access = await trip_access(db, trip_id, user, WRITE_ROLES)
    with service_errors():
        task = await task_service.get_task(db, trip_id, task_id)
        if access.role == ROLE_CONTRIBUTOR and req.assignee_id not in (user.id, None):
            raise PermissionError("Contributors can only assign tasks to themselves")
        task = await task_service.assign(db, access.trip, task, req.assignee_id)
    tags = await task_service.tag_names(db, [task])
    return _task_out(task, tags.get(task.id, []))


@router.delete("/{trip_id}/tasks/{task_id}")
async def delete_task(
    trip_id: uuid.UUID,
    task_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    access = await trip_access(db, trip_id, user, WRITE_ROLES)
    with service_errors():
        task = await task_service.get_task(db, trip_id, task_id)
        if access.role not in MANAGE_ROLES and task.owner_id != user.id:
            raise PermissionError("Only the task owner or a trip editor can delete this task")
    await task_service.delete_task(db, task)
    return {"success": True}


@router.post("/{trip_id}/tasks/{task_id}/vote", response_model=VoteTally)
async def vote_task(
    trip_id: uuid.UUID,
    task_id: uuid.UUID,
    req: VoteRequest,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    with service_errors():
        task = await task_service.get_task(db, trip_id, task_id)
    return await task_service.vote(db, task, user.id, req.vote_type)
