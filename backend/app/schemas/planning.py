import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.constants import MAX_TAG_LENGTH, TASK_PRIORITIES, TASK_STATUSES


def _check_choice(value: str | None, choices: tuple, label: str) -> str | None:
    if value is not None and value not in choices:
        raise ValueError(f"{label} must be one of: {', '.join(choices)}")
    return value


def _clean_tags(tags: list[str] | None) -> list[str] | None:
    """Trimmed, de-duplicated tag names in first-seen order; blanks dropped."""
    if tags is None:
        return None
    cleaned = []
    for name in tags:
        name = name.strip()
        if len(name) > MAX_TAG_LENGTH:
            raise ValueError(f"Tags must be at most {MAX_TAG_LENGTH} characters")
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    status: str = "suggested"
    priority: str = "medium"
    due_date: datetime | None = None
    assignee_id: uuid.UUID | None = None
    tags: list[str] = []

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str) -> str:
        return _check_choice(v, TASK_STATUSES, "status")

    @field_validator("priority")
    @classmethod
    def valid_priority(cls, v: str) -> str:
        return _check_choice(v, TASK_PRIORITIES, "priority")

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class TaskUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    due_date: datetime | None = None
    position: int | None = Field(default=None, ge=0)
    tags: list[str] | None = None

    model_config = {"extra": "forbid"}

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str | None) -> str | None:
        return _check_choice(v, TASK_STATUSES, "status")

    @field_validator("priority")
    @classmethod
    def valid_priority(cls, v: str | None) -> str | None:
        return _check_choice(v, TASK_PRIORITIES, "priority")

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str] | None) -> list[str] | None:
        return _clean_tags(v)


class TaskAssign(BaseModel):
    assignee_id: uuid.UUID | None


class TaskResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    title: str
    description: str | None
    status: str
    priority: str
    due_date: datetime | None
    position: int
    owner_id: uuid.UUID
    assignee_id: uuid.UUID | None
    votes_up: int
    votes_down: int
    tags: list[str] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class NoteCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str | None = None
    tags: list[str] = []

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class NoteUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = None

    model_config = {"extra": "forbid"}


class NoteResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    title: str
    content: str | None
    created_by: uuid.UUID
    updated_by: uuid.UUID | None
    tags: list[str] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TagsUpdate(BaseModel):
    tags: list[str]

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class TagResponse(BaseModel):
    id: uuid.UUID
    name: str

    model_config = {"from_attributes": True}
