"""Guest identities: an opaque cookie token bound to a guest profile."""

import logging
import secrets

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.profile import Profile

logger = logging.getLogger(__name__)


def new_guest_token() -> str:
    return f"guest_{secrets.token_hex(16)}"


class GuestService:
    async def get_by_token(self, db: AsyncSession, token: str) -> Profile | None:
        result = await db.execute(select(Profile).where(Profile.guest_token == token))
        return result.scalar_one_or_none()

    async def get_or_create(self, db: AsyncSession, token: str | None) -> tuple[Profile, str]:
        """Return the guest profile for ``token``, minting a token and profile as needed.

        A token that belongs to an upgraded (non-guest) account is not reused.
        """
        if token:
            profile = await self.get_by_token(db, token)
            if profile is not None and profile.is_guest:
                return profile, token
            if profile is None and token.startswith("guest_"):
                profile = Profile(name="Guest", is_guest=True, guest_token=token)
                db.add(profile)
                await db.flush()
                logger.info(f"Created guest profile {profile.id}")
                return profile, token

        token = new_guest_token()
        profile = Profile(name="Guest", is_guest=True, guest_token=token)
        db.add(profile)
        await db.flush()
        logger.info(f"Issued guest token for profile {profile.id}")
        return profile, token


guest_service = GuestService()
