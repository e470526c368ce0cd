"""Group service: groups and their membership."""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import (
    GROUP_ROLE_ADMIN,
    GROUP_ROLE_MEMBER,
    MEMBER_ACTIVE,
    MEMBER_LEFT,
    MEMBER_REMOVED,
)
from app.models.group import Group, GroupMember, GroupPlan
from app.models.profile import Profile
from app.schemas.group import GroupCreate
from app.utils import unique_slug

logger = logging.getLogger(__name__)


class GroupService:
    async def create_group(self, db: AsyncSession, user: Profile, data: GroupCreate) -> Group:
        group = Group(
            id=uuid.uuid4(),
            name=data.name.strip(),
            description=data.description,
            emoji=data.emoji,
            visibility=data.visibility,
            slug=unique_slug(data.name),
            created_by=user.id,
        )
        db.add(group)
        db.add(GroupMember(group_id=group.id, user_id=user.id, role=GROUP_ROLE_ADMIN, status=MEMBER_ACTIVE))
        await db.commit()
        await db.refresh(group)
        logger.info(f"Group {group.id} created by {user.id}")
        return group

    async def get_group(self, db: AsyncSession, group_id: uuid.UUID) -> Group:
        result = await db.execute(select(Group).where(Group.id == group_id))
        group = result.scalar_one_or_none()
        if group is None:
            raise LookupError("Group not found")
        return group

    async def get_membership(
        self, db: AsyncSession, group_id: uuid.UUID, user_id: uuid.UUID | None
    ) -> GroupMember | None:
        """The caller's active membership, if any."""
        if user_id is None:
            return None
        result = await db.execute(
            select(GroupMember).where(
                GroupMember.group_id == group_id,
                GroupMember.user_id == user_id,
                GroupMember.status == MEMBER_ACTIVE,
            )
        )
        return result.scalar_one_or_none()

    async def require_member(
        self, db: AsyncSession, group_id: uuid.UUID, user_id: uuid.UUID, admin: bool = False
    ) -> GroupMember:
        await self.get_group(db, group_id)
        membership = await self.get_membership(db, group_id, user_id)
        if membership is None:
            raise PermissionError("You are not a member of this group")
        if admin and membership.role != GROUP_ROLE_ADMIN:
            raise PermissionError("Group admin access required")
        return membership

    async def list_user_groups(self, db: AsyncSession, user_id: uuid.UUID) -> list[dict]:
        result = await db.execute(
            select(Group, GroupMember.role)
            .join(GroupMember, GroupMember.group_id == Group.id)
            .where(GroupMember.user_id == user_id, GroupMember.status == MEMBER_ACTIVE)
            .order_by(Group.created_at.desc())
        )
        rows = result.all()
        if not rows:
            return []

        counts = await db.execute(
            select(GroupMember.group_id, func.count())
            .where(
                GroupMember.group_id.in_([g.id for g, _ in rows]),
                GroupMember.status == MEMBER_ACTIVE,
            )
            .group_by(GroupMember.group_id)
        )
        count_map = dict(counts.all())
        return [
            {
                "id": g.id,
                "name": g.name,
                "description": g.description,
                "emoji": g.emoji,
                "visibility": g.visibility,
                "slug": g.slug,
                "created_by": g.created_by,
                "created_at": g.created_at,
                "role": role,
                "member_count": count_map.get(g.id, 0),
            }
            for g, role in rows
        ]

    async def list_members(self, db: AsyncSession, group_id: uuid.UUID) -> list[dict]:
        result = await db.execute(
            select(GroupMember, Profile)
            .join(Profile, Profile.id == GroupMember.user_id)
            .where(GroupMember.group_id == group_id, GroupMember.status == MEMBER_ACTIVE)
            .order_by(GroupMember.joined_at)
        )
        return [
            {
                "user_id": m.user_id,
                "role": m.role,
                "status": m.status,
                "joined_at": m.joined_at,
                "name": p.display_name,
                "avatar_url": p.avatar_url,
            }
            for m, p in result.all()
        ]

    async def group_detail(self, db: AsyncSession, group: Group, user_id: uuid.UUID | None) -> dict:
        plans = await db.execute(
            select(GroupPlan).where(GroupPlan.group_id == group.id).order_by(GroupPlan.created_at.desc())
        )
        membership = await self.get_membership(db, group.id, user_id)
        return {
            "group": group,
            "members": await self.list_members(db, group.id),
            "plans": list(plans.scalars().all()),
            "user_role": membership.role if membership else None,
        }

    async def update_group(self, db: AsyncSession, group: Group, changes: dict) -> Group:
        for field, value in changes.items():
            setattr(group, field, value)
        await db.commit()
        await db.refresh(group)
        return group

    async def delete_group(self, db: AsyncSession, group: Group):
        await db.delete(group)
        await db.commit()
        logger.info(f"Group {group.id} deleted")

    async def _admin_count(self, db: AsyncSession, group_id: uuid.UUID) -> int:
        result = await db.execute(
            select(func.count()).select_from(GroupMember).where(
                GroupMember.group_id == group_id,
                GroupMember.role == GROUP_ROLE_ADMIN,
                GroupMember.status == MEMBER_ACTIVE,
            )
        )
        return result.scalar_one()

    async def _member_row(self, db: AsyncSession, group_id: uuid.UUID, user_id: uuid.UUID) -> GroupMember | None:
        result = await db.execute(
            select(GroupMember).where(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def add_member(
        self, db: AsyncSession, group_id: uuid.UUID, user_id: uuid.UUID, role: str = GROUP_ROLE_MEMBER
    ) -> GroupMember:
        """Add (or re-activate) a member. Raises ValueError if already active."""
        profile = await db.execute(select(Profile.id).where(Profile.id == user_id))
        if profile.scalar_one_or_none() is None:
            raise LookupError("User not found")

        member = await self._member_row(db, group_id, user_id)
        if member is not None and member.status == MEMBER_ACTIVE:
            raise ValueError("User is already a member of this group")
        if member is None:
            member = GroupMember(group_id=group_id, user_id=user_id, role=role, status=MEMBER_ACTIVE)
            db.add(member)
        else:
            member.role = role
            member.status = MEMBER_ACTIVE
        await db.commit()
        await db.refresh(member)
        return member

    async def change_role(self, db: AsyncSession, group_id: uuid.UUID, user_id: uuid.UUID, role: str) -> GroupMember:
        member = await self.get_membership(db, group_id, user_id)
        if member is None:
            raise LookupError("Member not found")
        if member.role == GROUP_ROLE_ADMIN and role != GROUP_ROLE_ADMIN:
            if await self._admin_count(db, group_id) <= 1:
                raise ValueError("A group must keep at least one admin")
        member.role = role
        await db.commit()
        return member

    async def remove_member(
        self, db: AsyncSession, group_id: uuid.UUID, user_id: uuid.UUID, actor_id: uuid.UUID
    ) -> GroupMember:
        """Self-removal marks the member 'left', removal by an admin marks it 'removed'."""
        member = await self.get_membership(db, group_id, user_id)
        if member is None:
            raise LookupError("Member not found")

        if actor_id != user_id:
            actor = await self.get_membership(db, group_id, actor_id)
            if actor is None or actor.role != GROUP_ROLE_ADMIN:
                raise PermissionError("Only group admins can remove members")

        if member.role == GROUP_ROLE_ADMIN and await self._admin_count(db, group_id) <= 1:
            raise ValueError("The last admin cannot leave the group")

        member.status = MEMBER_LEFT if actor_id == user_id else MEMBER_REMOVED
        await db.commit()
        return member


group_service = GroupService()
