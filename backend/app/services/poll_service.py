"""Poll service: trip polls, one vote per member, live results."""

import logging
import uuid
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.poll import TripVote, TripVoteOption, TripVotePoll
from app.schemas.poll import PollCreate
from app.services.cache_service import cache_service
from app.utils import as_utc, utcnow

logger = logging.getLogger(__name__)


def compute_results(poll: TripVotePoll, counts: dict[str, int], user_vote: uuid.UUID | None = None) -> dict:
    """Per-option votes and rounded percentages plus the winner.

    The winner is the option with the most votes; ties go to the lowest
    position. No votes means no winner.
    """
    total = sum(counts.values())
    options = []
    for option in sorted(poll.options, key=lambda o: o.position):
        votes = counts.get(str(option.id), 0)
        options.append({
            "id": option.id,
            "title": option.title,
            "description": option.description,
            "image_url": option.image_url,
            "position": option.position,
            "votes": votes,
            "percentage": round(votes / total * 100) if total else 0,
        })

    winner = None
    if total:
        winner = max(options, key=lambda o: (o["votes"], -o["position"]))

    return {
        "id": poll.id,
        "trip_id": poll.trip_id,
        "title": poll.title,
        "description": poll.description,
        "created_by": poll.created_by,
        "is_active": poll.is_active,
        "expires_at": poll.expires_at,
        "created_at": poll.created_at,
        "options": options,
        "total_votes": total,
        "user_vote": user_vote,
        "winner": winner,
    }


def is_open(poll: TripVotePoll, now: datetime | None = None) -> bool:
    if not poll.is_active:
        return False
    expires_at = as_utc(poll.expires_at)
    return expires_at is None or expires_at > (now or utcnow())


class PollService:
    async def create_poll(
        self, db: AsyncSession, trip_id: uuid.UUID, user_id: uuid.UUID, data: PollCreate
    ) -> TripVotePoll:
        title = data.title.strip()
        if len(title) < 3:
            raise ValueError("Poll title must be at least 3 characters")
        options = [o for o in data.options if o.title.strip()]
        if len(options) != len(data.options):
            raise ValueError("Every option needs a title")
        if len(options) < 2:
            raise ValueError("A poll needs at least two options")
        if data.expires_at is not None and as_utc(data.expires_at) <= utcnow():
            raise ValueError("Expiry must be in the future")

        poll = TripVotePoll(
            trip_id=trip_id,
            title=title,
            description=data.description,
            created_by=user_id,
            expires_at=as_utc(data.expires_at),
            is_active=True,
        )
        poll.options = [
            TripVoteOption(
                title=o.title.strip(),
                description=o.description,
                image_url=o.image_url,
                position=i,
            )
            for i, o in enumerate(options)
        ]
        db.add(poll)
        await db.commit()
        await db.refresh(poll, ["options"])
        logger.info(f"Poll {poll.id} created on trip {trip_id}")
        return poll

    async def get_poll(self, db: AsyncSession, trip_id: uuid.UUID, poll_id: uuid.UUID) -> TripVotePoll:
        result = await db.execute(
            select(TripVotePoll).where(TripVotePoll.id == poll_id, TripVotePoll.trip_id == trip_id)
        )
        poll = result.scalar_one_or_none()
        if poll is None:
            raise LookupError("Poll not found")
        return poll

    async def list_polls(self, db: AsyncSession, trip_id: uuid.UUID) -> list[TripVotePoll]:
        result = await db.execute(
            select(TripVotePoll)
            .where(TripVotePoll.trip_id == trip_id)
            .order_by(TripVotePoll.created_at.desc())
        )
        return list(result.scalars().all())

    async def _counts(self, db: AsyncSession, poll_id: uuid.UUID) -> dict[str, int]:
        cached = await cache_service.get_poll_counts(poll_id)
        if cached is not None:
            return cached
        result = await db.execute(
            select(TripVote.option_id, func.count())
            .where(TripVote.poll_id == poll_id)
            .group_by(TripVote.option_id)
        )
        counts = {str(option_id): count for option_id, count in result.all()}
        await cache_service.set_poll_counts(poll_id, counts)
        return counts

    async def _user_vote(self, db: AsyncSession, poll_id: uuid.UUID, user_id: uuid.UUID | None):
        if user_id is None:
            return None
        result = await db.execute(
            select(TripVote).where(TripVote.poll_id == poll_id, TripVote.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def results(self, db: AsyncSession, poll: TripVotePoll, user_id: uuid.UUID | None) -> dict:
        counts = await self._counts(db, poll.id)
        vote = await self._user_vote(db, poll.id, user_id)
        return compute_results(poll, counts, vote.option_id if vote else None)

    async def vote(
        self, db: AsyncSession, poll: TripVotePoll, user_id: uuid.UUID, option_id: uuid.UUID
    ) -> dict:
        if option_id not in {o.id for o in poll.options}:
            raise ValueError("Option does not belong to this poll")
        if not is_open(poll):
            raise ValueError("This poll is closed")

        existing = await self._user_vote(db, poll.id, user_id)
        if existing is None:
            db.add(TripVote(poll_id=poll.id, option_id=option_id, trip_id=poll.trip_id, user_id=user_id))
        else:
            existing.option_id = option_id
        await db.commit()
        await cache_service.invalidate_poll(poll.id)
        return await self.results(db, poll, user_id)

    async def retract(self, db: AsyncSession, poll: TripVotePoll, user_id: uuid.UUID) -> dict:
        existing = await self._user_vote(db, poll.id, user_id)
        if existing is None:
            raise LookupError("You have not voted in this poll")
        if not is_open(poll):
            raise ValueError("This poll is closed")
        await db.delete(existing)
        await db.commit()
        await cache_service.invalidate_poll(poll.id)
        return await self.results(db, poll, user_id)

    async def close(self, db: AsyncSession, poll: TripVotePoll) -> TripVotePoll:
        poll.is_active = False
        await db.commit()
        return poll

    async def close_expired_polls(self, db: AsyncSession) -> int:
        """Deactivate every active poll whose expiry has passed."""
        result = await db.execute(
            update(TripVotePoll)
            .where(
                TripVotePoll.is_active == True,
                TripVotePoll.expires_at.is_not(None),
                TripVotePoll.expires_at <= utcnow(),
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        if result.rowcount:
            logger.info(f"Closed {result.rowcount} expired polls")
        return result.rowcount


poll_service = PollService()
