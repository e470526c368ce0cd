import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import MANAGE_ROLES, READ_ROLES, ROLE_CONTRIBUTOR, WRITE_ROLES
from app.database import get_db
from app.dependencies import get_actor, get_current_user, get_optional_actor, trip_access
from app.errors import service_errors, update_fields
from app.models.planning import TripNote
from app.models.profile import Profile
from app.schemas.planning import NoteCreate, NoteResponse, NoteUpdate, TagResponse, TagsUpdate
from app.services.note_service import note_service

router = APIRouter()


def _note_out(note: TripNote, tags: list[str]) -> NoteResponse:
    out = NoteResponse.model_validate(note)
    out.tags = tags
    return out


@router.get("/{trip_id}/notes", response_model=list[NoteResponse])
async def list_notes(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    notes = await note_service.list_notes(db, trip_id)
    tags = await note_service.tag_names(db, notes)
    return [_note_out(n, tags.get(n.id, [])) for n in notes]


@router.post("/{trip_id}/notes", status_code=201, response_model=NoteResponse)
async def create_note(
    trip_id: uuid.UUID,
    req: NoteCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    await trip_access(db, trip_id, user, WRITE_ROLES)
    note = await note_service.create_note(db, trip_id, user.id, req)
    return _note_out(note, sorted(req.tags))


@router.patch("/{trip_id}/notes/{note_id}", response_model=NoteResponse)
async def update_note(
    trip_id: uuid.UUID,
    note_id: uuid.UUID,
    req: NoteUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    access = await trip_access(db, trip_id, user, WRITE_ROLES)
    with service_errors():
        note = await note_service.get_note(db, trip_id, note_id)
        if access.role == ROLE_CONTRIBUTOR and note.created_by != user.id:
            raise PermissionError("Contributors can only edit their own notes")

    changes = update_fields(req, required=("title",))
    note = await note_service.update_note(db, note, user.id, changes)
    tags = await note_service.tag_names(db, [note])
    return _note_out(note, tags.get(note.id, []))


@router.delete("/{trip_id}/notes/{note_id}")
async def delete_note(
    trip_id: uuid.UUID,
    note_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    access = await trip_access(db, trip_id, user, WRITE_ROLES)
    with service_errors():
        note = await note_service.get_note(db, trip_id, note_id)
        if access.role not in MANAGE_ROLES and note.created_by != user.id:
            raise PermissionError("Only the author or a trip editor can delete this note")
    await note_service.delete_note(db, note)
    return {"success": True}


@router.get("/{trip_id}/notes/{note_id}/tags")
async def get_note_tags(
    trip_id: uuid.UUID,
    note_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    with service_errors():
        note = await note_service.get_note(db, trip_id, note_id)
    return {"tags": [TagResponse.model_validate(t) for t in await note_service.get_tags(db, note)]}


@router.put("/{trip_id}/notes/{note_id}/tags")
async def set_note_tags(
    trip_id: uuid.UUID,
    note_id: uuid.UUID,
    req: TagsUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    """Replace the note's tags. Admins and editors only."""
    await trip_access(db, trip_id, user, MANAGE_ROLES)
    with service_errors():
        note = await note_service.get_note(db, trip_id, note_id)
    tags = await note_service.set_tags(db, note, req.tags)
    return {"tags": [TagResponse.model_validate(t) for t in tags]}
