"""Trip note service."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.planning import NoteTag, Tag, TripNote
from app.schemas.planning import NoteCreate
from app.services.tag_service import tag_service

logger = logging.getLogger(__name__)


class NoteService:
    async def list_notes(self, db: AsyncSession, trip_id: uuid.UUID) -> list[TripNote]:
        result = await db.execute(
            select(TripNote).where(TripNote.trip_id == trip_id).order_by(TripNote.updated_at.desc())
        )
        return list(result.scalars().all())

    async def get_note(self, db: AsyncSession, trip_id: uuid.UUID, note_id: uuid.UUID) -> TripNote:
        result = await db.execute(
            select(TripNote).where(TripNote.id == note_id, TripNote.trip_id == trip_id)
        )
        note = result.scalar_one_or_none()
        if note is None:
            raise LookupError("Note not found")
        return note

    async def create_note(
        self, db: AsyncSession, trip_id: uuid.UUID, user_id: uuid.UUID, data: NoteCreate
    ) -> TripNote:
        note = TripNote(trip_id=trip_id, title=data.title, content=data.content, created_by=user_id)
        db.add(note)
        await db.flush()
        await tag_service.replace(db, NoteTag, note.id, data.tags)
        await db.commit()
        await db.refresh(note)
        return note

    async def update_note(self, db: AsyncSession, note: TripNote, user_id: uuid.UUID, changes: dict) -> TripNote:
        for field, value in changes.items():
            setattr(note, field, value)
        note.updated_by = user_id
        await db.commit()
        await db.refresh(note)
        return note

    async def delete_note(self, db: AsyncSession, note: TripNote):
        await db.delete(note)
        await db.commit()

    async def get_tags(self, db: AsyncSession, note: TripNote) -> list[Tag]:
        tags = await tag_service.tags_for(db, NoteTag, [note.id])
        return tags.get(note.id, [])

    async def tag_names(self, db: AsyncSession, notes: list[TripNote]) -> dict[uuid.UUID, list[str]]:
        tags = await tag_service.tags_for(db, NoteTag, [n.id for n in notes])
        return {note_id: [t.name for t in note_tags] for note_id, note_tags in tags.items()}

    async def set_tags(self, db: AsyncSession, note: TripNote, names: list[str]) -> list[Tag]:
        """Replace the note's tags with exactly ``names``; unknown names become new tags."""
        tags = await tag_service.replace(db, NoteTag, note.id, names)
        await db.commit()
        logger.info(f"Note {note.id} tagged with {len(tags)} tags")
        return tags


note_service = NoteService()
