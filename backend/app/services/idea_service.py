"""Idea board service: group plans, ideas, votes, readiness and plan-to-trip."""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import (
    DEFAULT_IDEA_POSITION,
    GROUP_ROLE_ADMIN,
    ITINERARY_IDEA_TYPES,
    MEMBER_ACTIVE,
    PLAN_BRAINSTORMING,
    PLAN_COMPLETED,
    PLAN_VOTING,
    ROLE_ADMIN,
    ROLE_EDITOR,
    VOTE_DOWN,
    VOTE_UP,
)
from app.models.group import (
    Group,
    GroupMember,
    GroupPlan,
    GroupPlanIdea,
    GroupPlanIdeaVote,
    GroupPlanReadiness,
)
from app.models.itinerary import ItineraryItem
from app.models.profile import Profile
from app.models.trip import Trip, TripMember
from app.schemas.group import IdeaCreate, PlanCreate
from app.utils import as_utc, slugify

logger = logging.getLogger(__name__)


def normalize_position(position: dict | None) -> dict:
    """Fill missing grid keys with defaults and coerce values to int."""
    merged = dict(DEFAULT_IDEA_POSITION)
    for key in merged:
        if position and position.get(key) is not None:
            try:
                merged[key] = int(position[key])
            except (TypeError, ValueError):
                raise ValueError(f"Position '{key}' must be a number")
    return merged


def rank_key(idea: GroupPlanIdea):
    """Net votes, then up votes, then oldest first."""
    return (-(idea.votes_up - idea.votes_down), -idea.votes_up, as_utc(idea.created_at))


class IdeaService:
    # ─── Plans ───

    async def create_plan(
        self, db: AsyncSession, group_id: uuid.UUID, user_id: uuid.UUID, data: PlanCreate
    ) -> GroupPlan:
        plan = GroupPlan(
            group_id=group_id,
            name=data.name.strip(),
            slug=slugify(data.name),
            description=data.description,
            status=PLAN_BRAINSTORMING,
            created_by=user_id,
        )
        db.add(plan)
        await db.commit()
        await db.refresh(plan)
        return plan

    async def list_plans(self, db: AsyncSession, group_id: uuid.UUID) -> list[GroupPlan]:
        result = await db.execute(
            select(GroupPlan).where(GroupPlan.group_id == group_id).order_by(GroupPlan.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_plan(self, db: AsyncSession, group_id: uuid.UUID, plan_id: uuid.UUID) -> GroupPlan:
        result = await db.execute(
            select(GroupPlan).where(GroupPlan.id == plan_id, GroupPlan.group_id == group_id)
        )
        plan = result.scalar_one_or_none()
        if plan is None:
            raise LookupError("Plan not found")
        return plan

    async def update_plan(self, db: AsyncSession, plan: GroupPlan, changes: dict) -> GroupPlan:
        for field, value in changes.items():
            setattr(plan, field, value)
        if "name" in changes:
            plan.slug = slugify(plan.name)
        await db.commit()
        await db.refresh(plan)
        return plan

    async def delete_plan(self, db: AsyncSession, plan: GroupPlan):
        await db.delete(plan)
        await db.commit()

    # ─── Ideas ───

    async def list_ideas(
        self, db: AsyncSession, group_id: uuid.UUID, plan_id: uuid.UUID | None = None, unassigned: bool = False
    ) -> list[GroupPlanIdea]:
        query = select(GroupPlanIdea).where(GroupPlanIdea.group_id == group_id)
        if unassigned:
            query = query.where(GroupPlanIdea.plan_id.is_(None))
        elif plan_id is not None:
            query = query.where(GroupPlanIdea.plan_id == plan_id)
        result = await db.execute(query.order_by(GroupPlanIdea.created_at.desc()))
        return list(result.scalars().all())

    async def get_idea(self, db: AsyncSession, group_id: uuid.UUID, idea_id: uuid.UUID) -> GroupPlanIdea:
        result = await db.execute(
            select(GroupPlanIdea).where(GroupPlanIdea.id == idea_id, GroupPlanIdea.group_id == group_id)
        )
        idea = result.scalar_one_or_none()
        if idea is None:
            raise LookupError("Idea not found")
        return idea

    async def create_idea(
        self, db: AsyncSession, group_id: uuid.UUID, user_id: uuid.UUID, data: IdeaCreate
    ) -> GroupPlanIdea:
        if data.plan_id is not None:
            await self.get_plan(db, group_id, data.plan_id)
        idea = GroupPlanIdea(
            group_id=group_id,
            plan_id=data.plan_id,
            title=data.title.strip(),
            description=data.description,
            type=data.type,
            created_by=user_id,
            start_date=data.start_date,
            end_date=data.end_date,
            meta=data.meta,
            position=normalize_position(data.position),
            votes_up=0,
            votes_down=0,
        )
        db.add(idea)
        await db.commit()
        await db.refresh(idea)
        return idea

    def check_can_edit(self, idea: GroupPlanIdea, membership: GroupMember):
        if idea.created_by != membership.user_id and membership.role != GROUP_ROLE_ADMIN:
            raise PermissionError("Only the idea's author or a group admin can change it")

    async def update_idea(self, db: AsyncSession, idea: GroupPlanIdea, changes: dict) -> GroupPlanIdea:
        if "position" in changes:
            changes["position"] = normalize_position(changes["position"])
        for field, value in changes.items():
            setattr(idea, field, value)
        await db.commit()
        await db.refresh(idea)
        return idea

    async def delete_idea(self, db: AsyncSession, idea: GroupPlanIdea):
        await db.delete(idea)
        await db.commit()

    async def update_positions(self, db: AsyncSession, group_id: uuid.UUID, positions: list) -> int:
        """Batch move ideas on the board. Every idea must belong to the group."""
        ids = [p.idea_id for p in positions]
        result = await db.execute(select(GroupPlanIdea).where(GroupPlanIdea.id.in_(ids)))
        by_id = {idea.id: idea for idea in result.scalars().all()}
        if len(by_id) != len(set(ids)) or any(i.group_id != group_id for i in by_id.values()):
            raise ValueError("All ideas must belong to this group")

        for entry in positions:
            by_id[entry.idea_id].position = normalize_position(entry.position)
        await db.commit()
        return len(positions)

    async def _ideas_in_group(self, db: AsyncSession, group_id: uuid.UUID, idea_ids: list[uuid.UUID]):
        result = await db.execute(select(GroupPlanIdea).where(GroupPlanIdea.id.in_(idea_ids)))
        ideas = list(result.scalars().all())
        if len(ideas) != len(set(idea_ids)) or any(i.group_id != group_id for i in ideas):
            raise ValueError("All ideas must belong to this group")
        return ideas

    async def attach_ideas(self, db: AsyncSession, plan: GroupPlan, idea_ids: list[uuid.UUID]) -> int:
        for idea in await self._ideas_in_group(db, plan.group_id, idea_ids):
            idea.plan_id = plan.id
        await db.commit()
        return len(idea_ids)

    async def detach_ideas(self, db: AsyncSession, plan: GroupPlan, idea_ids: list[uuid.UUID]) -> int:
        detached = 0
        for idea in await self._ideas_in_group(db, plan.group_id, idea_ids):
            if idea.plan_id == plan.id:
                idea.plan_id = None
                detached += 1
        await db.commit()
        return detached

    # ─── Votes ───

    async def _recount(self, db: AsyncSession, idea: GroupPlanIdea):
        counts = await db.execute(
            select(GroupPlanIdeaVote.vote_type, func.count())
            .where(GroupPlanIdeaVote.idea_id == idea.id)
            .group_by(GroupPlanIdeaVote.vote_type)
        )
        tally = dict(counts.all())
        idea.votes_up = tally.get(VOTE_UP, 0)
        idea.votes_down = tally.get(VOTE_DOWN, 0)

    async def vote(self, db: AsyncSession, idea: GroupPlanIdea, user_id: uuid.UUID, vote_type: str) -> dict:
        result = await db.execute(
            select(GroupPlanIdeaVote).where(
                GroupPlanIdeaVote.idea_id == idea.id, GroupPlanIdeaVote.user_id == user_id
            )
        )
        existing = result.scalar_one_or_none()
        if existing is None:
            db.add(GroupPlanIdeaVote(
                idea_id=idea.id, group_id=idea.group_id, user_id=user_id, vote_type=vote_type
            ))
        else:
            existing.vote_type = vote_type
        await db.flush()
        await self._recount(db, idea)
        await db.commit()
        return {"up": idea.votes_up, "down": idea.votes_down, "user_vote": vote_type}

    async def retract_vote(self, db: AsyncSession, idea: GroupPlanIdea, user_id: uuid.UUID) -> dict:
        result = await db.execute(
            select(GroupPlanIdeaVote).where(
                GroupPlanIdeaVote.idea_id == idea.id, GroupPlanIdeaVote.user_id == user_id
            )
        )
        existing = result.scalar_one_or_none()
        if existing is None:
            raise LookupError("You have not voted on this idea")
        await db.delete(existing)
        await db.flush()
        await self._recount(db, idea)
        await db.commit()
        return {"up": idea.votes_up, "down": idea.votes_down, "user_vote": None}

    # ─── Readiness ───

    async def readiness(self, db: AsyncSession, plan: GroupPlan) -> dict:
        members = await db.execute(
            select(GroupMember, Profile)
            .join(Profile, Profile.id == GroupMember.user_id)
            .where(GroupMember.group_id == plan.group_id, GroupMember.status == MEMBER_ACTIVE)
            .order_by(GroupMember.joined_at)
        )
        ready_rows = await db.execute(
            select(GroupPlanReadiness).where(GroupPlanReadiness.plan_id == plan.id)
        )
        ready = {r.user_id: r.is_ready for r in ready_rows.scalars().all()}

        entries = [
            {"user_id": m.user_id, "name": p.display_name, "is_ready": ready.get(m.user_id, False)}
            for m, p in members.all()
        ]
        total = len(entries)
        ready_count = sum(1 for e in entries if e["is_ready"])
        return {
            "plan_id": plan.id,
            "status": plan.status,
            "ready_count": ready_count,
            "total": total,
            "percentage": round(ready_count / total * 100) if total else 0,
            "members": entries,
            "all_ready": total > 0 and ready_count == total,
        }

    async def set_ready(self, db: AsyncSession, plan: GroupPlan, user_id: uuid.UUID, is_ready: bool) -> dict:
        """Record readiness; once everyone is ready a brainstorming plan moves to voting."""
        result = await db.execute(
            select(GroupPlanReadiness).where(
                GroupPlanReadiness.plan_id == plan.id, GroupPlanReadiness.user_id == user_id
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            db.add(GroupPlanReadiness(plan_id=plan.id, user_id=user_id, is_ready=is_ready))
        else:
            row.is_ready = is_ready
        await db.flush()

        summary = await self.readiness(db, plan)
        if summary["all_ready"] and plan.status == PLAN_BRAINSTORMING:
            plan.status = PLAN_VOTING
            summary["status"] = PLAN_VOTING
            logger.info(f"Plan {plan.id} moved to voting")
        await db.commit()
        return summary

    # ─── Summary & conversion ───

    async def ranked_ideas(self, db: AsyncSession, plan: GroupPlan) -> list[GroupPlanIdea]:
        result = await db.execute(select(GroupPlanIdea).where(GroupPlanIdea.plan_id == plan.id))
        return sorted(result.scalars().all(), key=rank_key)

    async def summary(self, db: AsyncSession, plan: GroupPlan) -> dict:
        grouped: dict[str, list[GroupPlanIdea]] = {}
        ranked = await self.ranked_ideas(db, plan)
        for idea in ranked:
            grouped.setdefault(idea.type, []).append(idea)
        return {"plan": plan, "total_ideas": len(ranked), "by_type": grouped}

    async def create_trip_from_plan(
        self, db: AsyncSession, group: Group, plan: GroupPlan, user_id: uuid.UUID
    ) -> Trip:
        if plan.trip_id is not None:
            raise ValueError("This plan already has a trip")

        ranked = await self.ranked_ideas(db, plan)
        # The top-voted destination and date ideas seed the trip
        destination = next((i for i in ranked if i.type == "destination"), None)
        dates = next((i for i in ranked if i.type == "date" and i.start_date), None)
        start = dates.start_date if dates else None
        end = (dates.end_date or dates.start_date) if dates else None

        trip = Trip(
            id=uuid.uuid4(),
            name=plan.name if len(plan.name) >= 3 else f"{plan.name} trip",
            description=plan.description or f"Planned with {group.name}",
            created_by=user_id,
            destination_name=destination.title[:100] if destination else None,
            start_date=start,
            end_date=end,
            duration_days=(end - start).days + 1 if start and end else None,
        )
        db.add(trip)
        await db.flush()

        members = await db.execute(
            select(GroupMember).where(GroupMember.group_id == group.id, GroupMember.status == MEMBER_ACTIVE)
        )
        member_ids = {m.user_id for m in members.scalars().all()} | {user_id}
        for member_id in member_ids:
            db.add(TripMember(
                trip_id=trip.id,
                user_id=member_id,
                role=ROLE_ADMIN if member_id == user_id else ROLE_EDITOR,
                invited_by=None if member_id == user_id else user_id,
            ))

        position = 0
        for idea in ranked:
            if idea.type not in ITINERARY_IDEA_TYPES or idea.votes_up - idea.votes_down < 0:
                continue
            meta = idea.meta or {}
            db.add(ItineraryItem(
                trip_id=trip.id,
                title=idea.title,
                description=idea.description,
                item_type=idea.type,
                address=meta.get("address"),
                position=position,
                votes_up=idea.votes_up,
                votes_down=idea.votes_down,
                created_by=idea.created_by,
            ))
            position += 1

        plan.trip_id = trip.id
        plan.status = PLAN_COMPLETED
        await db.commit()
        await db.refresh(trip)
        logger.info(f"Plan {plan.id} converted to trip {trip.id} with {position} items")
        return trip


idea_service = IdeaService()
