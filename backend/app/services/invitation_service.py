"""Invitation service: email invitations to trips and groups."""

import logging
import secrets
import uuid
from datetime import timedelta

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.constants import (
    ADMIN_ROLES,
    GROUP_ROLE_ADMIN,
    GROUP_ROLE_MEMBER,
    INVITE_ACCEPTED,
    INVITE_DECLINED,
    INVITE_EXPIRED,
    INVITE_PENDING,
    INVITE_REVOKED,
    INVITE_TYPE_GROUP,
    INVITE_TYPE_TRIP,
    MEMBER_ACTIVE,
)
from app.models.group import Group, GroupMember
from app.models.profile import Profile
from app.models.social import Invitation
from app.models.trip import Trip, TripMember
from app.services.group_service import group_service
from app.services.notification_service import notification_service
from app.services.trip_access import check_trip_access
from app.utils import as_utc, utcnow

logger = logging.getLogger(__name__)


class InvitationExpired(Exception):
    pass


def is_expired(invitation: Invitation) -> bool:
    return as_utc(invitation.expires_at) <= utcnow()


class InvitationService:
    async def _profiles_by_email(self, db: AsyncSession, emails: list[str]) -> dict[str, Profile]:
        result = await db.execute(select(Profile).where(Profile.email.in_(emails)))
        return {p.email.lower(): p for p in result.scalars().all()}

    async def _pending_for(
        self, db: AsyncSession, email: str, trip_id: uuid.UUID | None, group_id: uuid.UUID | None
    ) -> Invitation | None:
        query = select(Invitation).where(
            Invitation.email == email,
            Invitation.invitation_status == INVITE_PENDING,
        )
        if trip_id is not None:
            query = query.where(Invitation.trip_id == trip_id)
        else:
            query = query.where(Invitation.group_id == group_id)
        for invitation in (await db.execute(query)).scalars().all():
            if not is_expired(invitation):
                return invitation
        return None

    def _new(self, email: str, invitation_type: str, role: str, inviter_id: uuid.UUID, **target) -> Invitation:
        return Invitation(
            token=secrets.token_urlsafe(32),
            email=email,
            invitation_type=invitation_type,
            role=role,
            invited_by=inviter_id,
            invitation_status=INVITE_PENDING,
            expires_at=utcnow() + timedelta(days=settings.invitation_expiry_days),
            **target,
        )

    async def invite_to_trip(
        self, db: AsyncSession, trip: Trip, inviter: Profile, emails: list[str], role: str
    ) -> dict:
        """Invite each email once. Existing members are skipped, live invitations reused."""
        emails = list(dict.fromkeys(e.strip().lower() for e in emails))
        profiles = await self._profiles_by_email(db, emails)
        members = await db.execute(select(TripMember.user_id).where(TripMember.trip_id == trip.id))
        member_ids = set(members.scalars().all())

        invitations, skipped = [], []
        for email in emails:
            profile = profiles.get(email)
            if profile is not None and profile.id in member_ids:
                skipped.append(email)
                continue
            invitation = await self._pending_for(db, email, trip.id, None)
            if invitation is None:
                invitation = self._new(email, INVITE_TYPE_TRIP, role, inviter.id, trip_id=trip.id)
                db.add(invitation)
                if profile is not None:
                    await notification_service.send_trip_invitation(
                        db, profile.id, trip.name, inviter.display_name, trip.id
                    )
            invitations.append(invitation)

        await db.commit()
        logger.info(f"Trip {trip.id}: {len(invitations)} invitations, {len(skipped)} skipped")
        return {"invitations": invitations, "skipped": skipped}

    async def invite_to_group(
        self, db: AsyncSession, group: Group, inviter: Profile, emails: list[str]
    ) -> dict:
        emails = list(dict.fromkeys(e.strip().lower() for e in emails))
        profiles = await self._profiles_by_email(db, emails)
        members = await db.execute(
            select(GroupMember.user_id).where(
                GroupMember.group_id == group.id, GroupMember.status == MEMBER_ACTIVE
            )
        )
        member_ids = set(members.scalars().all())

        invitations, skipped = [], []
        for email in emails:
            profile = profiles.get(email)
            if profile is not None and profile.id in member_ids:
                skipped.append(email)
                continue
            invitation = await self._pending_for(db, email, None, group.id)
            if invitation is None:
                invitation = self._new(email, INVITE_TYPE_GROUP, GROUP_ROLE_MEMBER, inviter.id, group_id=group.id)
                db.add(invitation)
                if profile is not None:
                    await notification_service.send_group_invitation(
                        db, profile.id, group.name, inviter.display_name, group.id
                    )
            invitations.append(invitation)

        await db.commit()
        return {"invitations": invitations, "skipped": skipped}

    async def get_by_token(self, db: AsyncSession, token: str) -> Invitation:
        result = await db.execute(select(Invitation).where(Invitation.token == token))
        invitation = result.scalar_one_or_none()
        if invitation is None:
            raise LookupError("Invitation not found")
        return invitation

    async def details(self, db: AsyncSession, invitation: Invitation) -> dict:
        target_name = None
        if invitation.trip_id:
            target_name = (await db.execute(select(Trip.name).where(Trip.id == invitation.trip_id))).scalar()
        elif invitation.group_id:
            target_name = (await db.execute(select(Group.name).where(Group.id == invitation.group_id))).scalar()
        inviter = None
        if invitation.invited_by:
            inviter = await db.get(Profile, invitation.invited_by)
        return {
            "invitation": invitation,
            "target_name": target_name,
            "inviter_name": inviter.display_name if inviter else None,
            "is_valid": invitation.invitation_status == INVITE_PENDING and not is_expired(invitation),
        }

    async def _check_open(self, db: AsyncSession, invitation: Invitation):
        if invitation.invitation_status == INVITE_PENDING and is_expired(invitation):
            invitation.invitation_status = INVITE_EXPIRED
            await db.commit()
            raise InvitationExpired("This invitation has expired")
        if invitation.invitation_status == INVITE_EXPIRED:
            raise InvitationExpired("This invitation has expired")
        if invitation.invitation_status != INVITE_PENDING:
            raise ValueError(f"Invitation is already {invitation.invitation_status}")

    async def accept(self, db: AsyncSession, token: str, user: Profile) -> Invitation:
        invitation = await self.get_by_token(db, token)
        await self._check_open(db, invitation)

        if invitation.invitation_type == INVITE_TYPE_TRIP:
            existing = await db.execute(
                select(TripMember).where(
                    TripMember.trip_id == invitation.trip_id, TripMember.user_id == user.id
                )
            )
            if existing.scalar_one_or_none() is None:
                db.add(TripMember(
                    trip_id=invitation.trip_id,
                    user_id=user.id,
                    role=invitation.role,
                    invited_by=invitation.invited_by,
                ))
                trip = await db.get(Trip, invitation.trip_id)
                if invitation.invited_by and trip is not None:
                    await notification_service.send_member_joined(
                        db, invitation.invited_by, trip.name, user.display_name, trip.id
                    )
        else:
            result = await db.execute(
                select(GroupMember).where(
                    GroupMember.group_id == invitation.group_id, GroupMember.user_id == user.id
                )
            )
            member = result.scalar_one_or_none()
            if member is None:
                db.add(GroupMember(
                    group_id=invitation.group_id, user_id=user.id,
                    role=GROUP_ROLE_MEMBER, status=MEMBER_ACTIVE,
                ))
            else:
                member.status = MEMBER_ACTIVE

        invitation.invitation_status = INVITE_ACCEPTED
        invitation.accepted_by = user.id
        invitation.responded_at = utcnow()
        await db.commit()
        logger.info(f"Invitation {invitation.id} accepted by {user.id}")
        return invitation

    async def decline(self, db: AsyncSession, token: str) -> Invitation:
        invitation = await self.get_by_token(db, token)
        await self._check_open(db, invitation)
        invitation.invitation_status = INVITE_DECLINED
        invitation.responded_at = utcnow()
        await db.commit()
        return invitation

    async def _can_revoke(self, db: AsyncSession, invitation: Invitation, user_id: uuid.UUID) -> bool:
        if invitation.invited_by == user_id:
            return True
        if invitation.trip_id is not None:
            access = await check_trip_access(db, invitation.trip_id, user_id, ADMIN_ROLES)
            return access.allowed
        membership = await group_service.get_membership(db, invitation.group_id, user_id)
        return membership is not None and membership.role == GROUP_ROLE_ADMIN

    async def revoke(self, db: AsyncSession, invitation_id: uuid.UUID, user_id: uuid.UUID) -> Invitation:
        """Revoke a pending invitation (inviter, or an admin of the target)."""
        invitation = await db.get(Invitation, invitation_id)
        if invitation is None:
            raise LookupError("Invitation not found")
        if not await self._can_revoke(db, invitation, user_id):
            raise PermissionError("Only the inviter or an admin can revoke this invitation")
        if invitation.invitation_status != INVITE_PENDING:
            raise ValueError(f"Invitation is already {invitation.invitation_status}")
        invitation.invitation_status = INVITE_REVOKED
        invitation.responded_at = utcnow()
        await db.commit()
        return invitation

    async def expire_stale_invitations(self, db: AsyncSession) -> int:
        result = await db.execute(
            update(Invitation)
            .where(Invitation.invitation_status == INVITE_PENDING, Invitation.expires_at <= utcnow())
            .values(invitation_status=INVITE_EXPIRED)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        if result.rowcount:
            logger.info(f"Expired {result.rowcount} stale invitations")
        return result.rowcount


invitation_service = InvitationService()
