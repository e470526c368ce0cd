"""Tag vocabulary shared by trip tasks and trip notes."""

import logging
import uuid
from collections import defaultdict

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.planning import NoteTag, Tag, TaskTag

logger = logging.getLogger(__name__)

# link model -> name of the column pointing at the tagged row
_OWNER_COLUMN = {TaskTag: "task_id", NoteTag: "note_id"}


class TagService:
    async def resolve(self, db: AsyncSession, names: list[str]) -> list[Tag]:
        """Tags for the given names, creating the ones that do not exist yet."""
        if not names:
            return []
        result = await db.execute(select(Tag).where(Tag.name.in_(names)))
        by_name = {tag.name: tag for tag in result.scalars().all()}
        missing = [name for name in names if name not in by_name]
        for name in missing:
            tag = Tag(name=name)
            db.add(tag)
            by_name[name] = tag
        if missing:
            await db.flush()
            logger.info(f"Created tags: {', '.join(missing)}")
        return [by_name[name] for name in names]

    async def resolve_existing(self, db: AsyncSession, name: str) -> Tag | None:
        return await db.scalar(select(Tag).where(Tag.name == name.strip()))

    async def replace(self, db: AsyncSession, link_model, owner_id: uuid.UUID, names: list[str]) -> list[Tag]:
        """Make ``names`` the complete tag set of one task or note. Does not commit."""
        column = getattr(link_model, _OWNER_COLUMN[link_model])
        await db.execute(delete(link_model).where(column == owner_id))
        tags = await self.resolve(db, names)
        for tag in tags:
            db.add(link_model(**{_OWNER_COLUMN[link_model]: owner_id, "tag_id": tag.id}))
        await db.flush()
        return sorted(tags, key=lambda t: t.name)

    async def tags_for(self, db: AsyncSession, link_model, owner_ids: list[uuid.UUID]) -> dict[uuid.UUID, list[Tag]]:
        if not owner_ids:
            return {}
        column = getattr(link_model, _OWNER_COLUMN[link_model])
        result = await db.execute(
            select(column, Tag)
            .join(Tag, Tag.id == link_model.tag_id)
            .where(column.in_(owner_ids))
            .order_by(Tag.name)
        )
        tags = defaultdict(list)
        for owner_id, tag in result.all():
            tags[owner_id].append(tag)
        return tags


tag_service = TagService()
