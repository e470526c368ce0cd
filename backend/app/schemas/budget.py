import uuid
from datetime import date as date_type, datetime

from pydantic import BaseModel, Field, field_validator

from app.constants import BUDGET_CATEGORIES


def _check_category(v: str | None) -> str | None:
    if v is not None and v not in BUDGET_CATEGORIES:
        raise ValueError(f"category must be one of: {', '.join(BUDGET_CATEGORIES)}")
    return v


class ExpenseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    amount: float = Field(gt=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    category: str = "other"
    paid_by: uuid.UUID | None = None
    date: date_type | None = None
    notes: str | None = None

    @field_validator("category")
    @classmethod
    def valid_category(cls, v: str | None) -> str | None:
        return _check_category(v)


class ExpenseUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    amount: float | None = Field(default=None, gt=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    category: str | None = None
    paid_by: uuid.UUID | None = None
    date: date_type | None = None
    notes: str | None = None

    model_config = {"extra": "forbid"}

    @field_validator("category")
    @classmethod
    def valid_category(cls, v: str | None) -> str | None:
        return _check_category(v)


class ExpenseResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    title: str
    amount: float
    currency: str
    category: str
    paid_by: uuid.UUID
    date: date_type | None
    notes: str | None
    created_by: uuid.UUID
    created_at: datetime

    model_config = {"from_attributes": True}
