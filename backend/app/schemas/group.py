import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from app.constants import GROUP_ROLES, GROUP_VISIBILITIES, IDEA_TYPES, PLAN_STATUSES, VOTE_TYPES


class GroupCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    emoji: str | None = Field(default=None, max_length=16)
    visibility: str = "private"

    @field_validator("visibility")
    @classmethod
    def valid_visibility(cls, v: str) -> str:
        if v not in GROUP_VISIBILITIES:
            raise ValueError(f"visibility must be one of: {', '.join(GROUP_VISIBILITIES)}")
        return v


class GroupUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    emoji: str | None = Field(default=None, max_length=16)
    visibility: str | None = None

    model_config = {"extra": "forbid"}

    @field_validator("visibility")
    @classmethod
    def valid_visibility(cls, v: str | None) -> str | None:
        if v is not None and v not in GROUP_VISIBILITIES:
            raise ValueError(f"visibility must be one of: {', '.join(GROUP_VISIBILITIES)}")
        return v


class GroupResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    emoji: str | None
    visibility: str
    slug: str
    created_by: uuid.UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class GroupMemberAdd(BaseModel):
    user_id: uuid.UUID
    role: str = "member"

    @field_validator("role")
    @classmethod
    def valid_role(cls, v: str) -> str:
        if v not in GROUP_ROLES:
            raise ValueError("role must be 'admin' or 'member'")
        return v


class GroupMemberRoleUpdate(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def valid_role(cls, v: str) -> str:
        if v not in GROUP_ROLES:
            raise ValueError("role must be 'admin' or 'member'")
        return v


class PlanCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None


class PlanUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    status: str | None = None

    model_config = {"extra": "forbid"}

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str | None) -> str | None:
        if v is not None and v not in PLAN_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(PLAN_STATUSES)}")
        return v


class PlanResponse(BaseModel):
    id: uuid.UUID
    group_id: uuid.UUID
    name: str
    slug: str
    description: str | None
    status: str
    created_by: uuid.UUID
    trip_id: uuid.UUID | None
    created_at: datetime

    model_config = {"from_attributes": True}


class IdeaCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    type: str
    plan_id: uuid.UUID | None = None
    start_date: date | None = None
    end_date: date | None = None
    meta: dict | None = None
    position: dict | None = None

    @field_validator("type")
    @classmethod
    def valid_type(cls, v: str) -> str:
        if v not in IDEA_TYPES:
            raise ValueError(f"type must be one of: {', '.join(IDEA_TYPES)}")
        return v


class IdeaUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    type: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    meta: dict | None = None
    position: dict | None = None

    model_config = {"extra": "forbid"}

    @field_validator("type")
    @classmethod
    def valid_type(cls, v: str | None) -> str | None:
        if v is not None and v not in IDEA_TYPES:
            raise ValueError(f"type must be one of: {', '.join(IDEA_TYPES)}")
        return v


class IdeaResponse(BaseModel):
    id: uuid.UUID
    group_id: uuid.UUID
    plan_id: uuid.UUID | None
    title: str
    description: str | None
    type: str
    created_by: uuid.UUID
    start_date: date | None
    end_date: date | None
    meta: dict | None
    position: dict | None
    votes_up: int
    votes_down: int
    created_at: datetime

    model_config = {"from_attributes": True}


class IdeaPosition(BaseModel):
    idea_id: uuid.UUID
    position: dict


class IdeaPositionsUpdate(BaseModel):
    positions: list[IdeaPosition]


class IdeaIds(BaseModel):
    idea_ids: list[uuid.UUID] = Field(min_length=1)


class IdeaVoteRequest(BaseModel):
    vote_type: str

    @field_validator("vote_type")
    @classmethod
    def valid_vote(cls, v: str) -> str:
        if v not in VOTE_TYPES:
            raise ValueError("vote_type must be 'up' or 'down'")
        return v


class ReadinessUpdate(BaseModel):
    is_ready: bool
