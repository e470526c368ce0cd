"""Trip questionnaires. Mounted at /api: trip-scoped management plus /forms/{id} for respondents."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import MANAGE_ROLES, READ_ROLES
from app.database import get_db
from app.dependencies import get_actor, get_optional_actor, trip_access
from app.errors import service_errors, update_fields
from app.models.form import Form
from app.models.profile import Profile
from app.schemas.form import (
    FormCreate,
    FormResponseModel,
    FormUpdate,
    SubmissionCreate,
    SubmissionResponse,
)
from app.services.form_service import form_service

router = APIRouter()


async def _managed_form(db: AsyncSession, form_id: uuid.UUID, user: Profile) -> Form:
    with service_errors():
        form = await form_service.get_form(db, form_id)
    if form.trip_id is None:
        if form.created_by != user.id:
            raise HTTPException(status_code=403, detail="You do not have permission to manage this form")
    else:
        await trip_access(db, form.trip_id, user, MANAGE_ROLES)
    return form


# ─── Trip forms ───

@router.get("/trips/{trip_id}/forms", response_model=list[FormResponseModel])
async def list_trip_forms(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    return [FormResponseModel.model_validate(f) for f in await form_service.list_trip_forms(db, trip_id)]


@router.post("/trips/{trip_id}/forms", status_code=201, response_model=FormResponseModel)
async def create_trip_form(
    trip_id: uuid.UUID,
    req: FormCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    await trip_access(db, trip_id, user, MANAGE_ROLES)
    with service_errors():
        form = await form_service.create_form(db, trip_id, user.id, req)
    return FormResponseModel.model_validate(form)


@router.patch("/trips/{trip_id}/forms/{form_id}", response_model=FormResponseModel)
async def update_trip_form(
    trip_id: uuid.UUID,
    form_id: uuid.UUID,
    req: FormUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    await trip_access(db, trip_id, user, MANAGE_ROLES)
    changes = update_fields(req, required=("title", "status", "visibility", "allow_anonymous"))
    with service_errors():
        form = await form_service.get_trip_form(db, trip_id, form_id)
    form = await form_service.update_form(db, form, changes)
    return FormResponseModel.model_validate(form)


@router.delete("/trips/{trip_id}/forms/{form_id}")
async def delete_trip_form(
    trip_id: uuid.UUID,
    form_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    await trip_access(db, trip_id, user, MANAGE_ROLES)
    with service_errors():
        form = await form_service.get_trip_form(db, trip_id, form_id)
    await form_service.delete_form(db, form)
    return {"success": True}


# ─── Respondents ───

@router.get("/forms/{form_id}", response_model=FormResponseModel)
async def get_form(
    form_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    with service_errors():
        form = await form_service.get_form(db, form_id)
        if not await form_service.can_view(db, form, user.id if user else None):
            raise PermissionError("You do not have access to this form")
    return FormResponseModel.model_validate(form)


@router.post("/forms/{form_id}/responses", status_code=201, response_model=SubmissionResponse)
async def submit_form(
    form_id: uuid.UUID,
    req: SubmissionCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    with service_errors():
        form = await form_service.get_form(db, form_id)
    if user is None and not form.allow_anonymous:
        raise HTTPException(status_code=401, detail="Sign in to respond to this form")

    with service_errors():
        if not await form_service.can_view(db, form, user.id if user else None):
            raise PermissionError("You do not have access to this form")
        response = await form_service.submit(db, form, user.id if user else None, req.answers)
    return SubmissionResponse.model_validate(response)


@router.get("/forms/{form_id}/summary")
async def form_summary(
    form_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    form = await _managed_form(db, form_id, user)
    return await form_service.summary(db, form)
