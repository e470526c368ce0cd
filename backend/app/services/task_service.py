"""Trip task service: to-dos with assignees, priorities, votes and tags."""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import VOTE_DOWN, VOTE_UP
from app.models.planning import Task, TaskTag, TaskVote
from app.models.trip import Trip, TripMember
from app.schemas.planning import TaskCreate
from app.services.tag_service import tag_service

logger = logging.getLogger(__name__)


class TaskService:
    async def list_tasks(
        self,
        db: AsyncSession,
        trip_id: uuid.UUID,
        status: str | None = None,
        assignee_id: uuid.UUID | None = None,
        tag: str | None = None,
    ) -> list[Task]:
        query = select(Task).where(Task.trip_id == trip_id)
        if status:
            query = query.where(Task.status == status)
        if assignee_id:
            query = query.where(Task.assignee_id == assignee_id)
        if tag:
            tagged = await tag_service.resolve_existing(db, tag)
            if tagged is None:
                return []
            query = query.join(TaskTag, TaskTag.task_id == Task.id).where(TaskTag.tag_id == tagged.id)
        result = await db.execute(query.order_by(Task.position, Task.created_at))
        return list(result.scalars().all())

    async def get_task(self, db: AsyncSession, trip_id: uuid.UUID, task_id: uuid.UUID) -> Task:
        result = await db.execute(select(Task).where(Task.id == task_id, Task.trip_id == trip_id))
        task = result.scalar_one_or_none()
        if task is None:
            raise LookupError("Task not found")
        return task

    async def tag_names(self, db: AsyncSession, tasks: list[Task]) -> dict[uuid.UUID, list[str]]:
        tags = await tag_service.tags_for(db, TaskTag, [t.id for t in tasks])
        return {task_id: [t.name for t in task_tags] for task_id, task_tags in tags.items()}

    async def _check_assignee(self, db: AsyncSession, trip: Trip, user_id: uuid.UUID):
        if user_id == trip.created_by:
            return
        result = await db.execute(
            select(TripMember.id).where(TripMember.trip_id == trip.id, TripMember.user_id == user_id)
        )
        if result.scalar_one_or_none() is None:
            raise ValueError("Tasks can only be assigned to trip members")

    async def create_task(self, db: AsyncSession, trip: Trip, owner_id: uuid.UUID, data: TaskCreate) -> Task:
        if data.assignee_id is not None:
            await self._check_assignee(db, trip, data.assignee_id)
        current = (await db.execute(
            select(func.max(Task.position)).where(Task.trip_id == trip.id)
        )).scalar()
        task = Task(
            trip_id=trip.id,
            title=data.title,
            description=data.description,
            status=data.status,
            priority=data.priority,
            due_date=data.due_date,
            assignee_id=data.assignee_id,
            owner_id=owner_id,
            position=0 if current is None else current + 1,
        )
        db.add(task)
        await db.flush()
        await tag_service.replace(db, TaskTag, task.id, data.tags)
        await db.commit()
        await db.refresh(task)
        return task

    async def update_task(self, db: AsyncSession, task: Task, changes: dict) -> Task:
        tags = changes.pop("tags", None)
        for field, value in changes.items():
            setattr(task, field, value)
        if tags is not None:
            await tag_service.replace(db, TaskTag, task.id, tags)
        await db.commit()
        await db.refresh(task)
        return task

    async def assign(self, db: AsyncSession, trip: Trip, task: Task, assignee_id: uuid.UUID | None) -> Task:
        """Assign to a trip member, or unassign with None."""
        if assignee_id is not None:
            await self._check_assignee(db, trip, assignee_id)
        task.assignee_id = assignee_id
        await db.commit()
        await db.refresh(task)
        logger.info(f"Task {task.id} assigned to {assignee_id}")
        return task

    async def delete_task(self, db: AsyncSession, task: Task):
        await db.delete(task)
        await db.commit()

    async def vote(self, db: AsyncSession, task: Task, user_id: uuid.UUID, vote_type: str) -> dict:
        """Upsert the user's vote; repeating the same vote removes it."""
        result = await db.execute(
            select(TaskVote).where(TaskVote.task_id == task.id, TaskVote.user_id == user_id)
        )
        existing = result.scalar_one_or_none()
        user_vote: str | None = vote_type
        if existing is None:
            db.add(TaskVote(task_id=task.id, user_id=user_id, vote_type=vote_type))
        elif existing.vote_type == vote_type:
            await db.delete(existing)
            user_vote = None
        else:
            existing.vote_type = vote_type
        await db.flush()

        counts = await db.execute(
            select(TaskVote.vote_type, func.count())
            .where(TaskVote.task_id == task.id)
            .group_by(TaskVote.vote_type)
        )
        tally = dict(counts.all())
        task.votes_up = tally.get(VOTE_UP, 0)
        task.votes_down = tally.get(VOTE_DOWN, 0)
        await db.commit()
        return {"up": task.votes_up, "down": task.votes_down, "user_vote": user_vote}


task_service = TaskService()
