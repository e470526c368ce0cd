import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants import READ_ROLES, WRITE_ROLES
from app.database import get_db
from app.dependencies import get_actor, get_optional_actor, trip_access
from app.errors import service_errors, update_fields
from app.models.profile import Profile
from app.schemas.budget import ExpenseCreate, ExpenseResponse, ExpenseUpdate
from app.services.budget_service import budget_service

router = APIRouter()

@router.get("/{trip_id}/expenses", response_model=list[ExpenseResponse])
async def list_expenses(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    await trip_access(db, trip_id, user, READ_ROLES)
    return [ExpenseResponse.model_validate(e) for e in await budget_service.list_expenses(db, trip_id)]


@router.post("/{trip_id}/expenses", status_code=201, response_model=ExpenseResponse)
async def create_expense(
    trip_id: uuid.UUID,
    req: ExpenseCreate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    access = await trip_access(db, trip_id, user, WRITE_ROLES)
    with service_errors():
        expense = await budget_service.create_expense(db, access.trip, user.id, req)
    return ExpenseResponse.model_validate(expense)


@router.patch("/{trip_id}/expenses/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    trip_id: uuid.UUID,
    expense_id: uuid.UUID,
    req: ExpenseUpdate,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    access = await trip_access(db, trip_id, user, WRITE_ROLES)
    changes = update_fields(req, required=("title", "amount", "currency", "category"))
    if "currency" in changes:
        changes["currency"] = changes["currency"].upper()

    with service_errors():
        expense = await budget_service.get_expense(db, trip_id, expense_id)
        expense = await budget_service.update_expense(db, access.trip, expense, changes)
    return ExpenseResponse.model_validate(expense)


@router.delete("/{trip_id}/expenses/{expense_id}")
async def delete_expense(
    trip_id: uuid.UUID,
    expense_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_actor),
):
    await trip_access(db, trip_id, user, WRITE_ROLES)
    with service_errors():
        expense = await budget_service.get_expense(db, trip_id, expense_id)
    await budget_service.delete_expense(db, expense)
    return {"success": True}


@router.get("/{trip_id}/budget")
async def budget_summary(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile | None = Depends(get_optional_actor),
):
    access = await trip_access(db, trip_id, user, READ_ROLES)
    return await budget_service.summary(db, access.trip)
