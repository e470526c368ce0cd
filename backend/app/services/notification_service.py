"""Notification service: in-app notifications and the read/unread inbox."""

import logging
import uuid

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.social import Notification

logger = logging.getLogger(__name__)

# type -> (title, body template)
TEMPLATES = {
    "trip_invitation": ("Trip Invitation", "{actor} invited you to join '{target}'."),
    "group_invitation": ("Group Invitation", "{actor} invited you to join the group '{target}'."),
    "access_requested": ("New Access Request", "{actor} asked to join '{target}'."),
    "access_approved": ("Access Approved", "Your request to join '{target}' was approved."),
    "access_declined": ("Access Declined", "Your request to join '{target}' was declined."),
    "member_joined": ("New Trip Member", "{actor} joined '{target}'."),
}


class NotificationService:

    def build(
        self,
        user_id: uuid.UUID,
        kind: str,
        target: str,
        reference_type: str,
        reference_id: uuid.UUID,
        actor: str | None = None,
    ) -> Notification:
        title, template = TEMPLATES[kind]
        return Notification(
            user_id=user_id,
            type=kind,
            title=title,
            body=template.format(actor=actor or "Someone", target=target),
            reference_type=reference_type,
            reference_id=reference_id,
        )

    def _add(self, db: AsyncSession, notification: Notification) -> Notification:
        """Stage a notification; the caller's commit persists it with the triggering change."""
        db.add(notification)
        logger.debug(f"Queued {notification.type} notification for {notification.user_id}")
        return notification

    async def send_trip_invitation(self, db, user_id, trip_name, inviter_name, trip_id) -> Notification:
        return self._add(db, self.build(user_id, "trip_invitation", trip_name, "trip", trip_id, inviter_name))

    async def send_group_invitation(self, db, user_id, group_name, inviter_name, group_id) -> Notification:
        return self._add(db, self.build(user_id, "group_invitation", group_name, "group", group_id, inviter_name))

    async def send_access_request(self, db, admin_id, trip_name, requester_name, trip_id) -> Notification:
        return self._add(db, self.build(admin_id, "access_requested", trip_name, "trip", trip_id, requester_name))

    async def send_access_decision(self, db, requester_id, trip_name, approved: bool, trip_id) -> Notification:
        kind = "access_approved" if approved else "access_declined"
        return self._add(db, self.build(requester_id, kind, trip_name, "trip", trip_id))

    async def send_member_joined(self, db, recipient_id, trip_name, member_name, trip_id) -> Notification:
        return self._add(db, self.build(recipient_id, "member_joined", trip_name, "trip", trip_id, member_name))

    # Inbox

    async def list_for_user(
        self, db: AsyncSession, user_id: uuid.UUID, is_read: bool | None = None, limit: int = 20
    ) -> tuple[list[Notification], int]:
        query = select(Notification).where(Notification.user_id == user_id)
        if is_read is not None:
            query = query.where(Notification.is_read == is_read)
        result = await db.execute(query.order_by(Notification.created_at.desc()).limit(limit))

        unread = await db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id, Notification.is_read.is_(False)
            )
        )
        return list(result.scalars().all()), unread.scalar() or 0

    async def mark_read(self, db: AsyncSession, user_id: uuid.UUID, notification_id: uuid.UUID) -> Notification:
        notification = await db.scalar(
            select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
        )
        if notification is None:
            raise LookupError("Notification not found")
        notification.is_read = True
        await db.commit()
        return notification

    async def mark_all_read(self, db: AsyncSession, user_id: uuid.UUID) -> int:
        result = await db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount


notification_service = NotificationService()
