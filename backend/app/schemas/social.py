import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.constants import TRIP_ROLES


class LikeCreate(BaseModel):
    item_id: uuid.UUID
    item_type: str


class LikeResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    item_id: uuid.UUID
    item_type: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CommentCreate(BaseModel):
    body: str = Field(min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    id: uuid.UUID
    content_type: str
    content_id: uuid.UUID
    user_id: uuid.UUID
    body: str
    created_at: datetime
    updated_at: datetime
    author_name: str | None = None


class InvitationCreate(BaseModel):
    emails: list[EmailStr] = Field(min_length=1, max_length=50)
    role: str = "viewer"

    @field_validator("role")
    @classmethod
    def valid_role(cls, v: str) -> str:
        if v not in TRIP_ROLES:
            raise ValueError(f"role must be one of: {', '.join(TRIP_ROLES)}")
        return v


class GroupInvitationCreate(BaseModel):
    emails: list[EmailStr] = Field(min_length=1, max_length=50)


class InvitationResponse(BaseModel):
    id: uuid.UUID
    token: str
    email: str
    invitation_type: str
    trip_id: uuid.UUID | None
    group_id: uuid.UUID | None
    role: str
    invited_by: uuid.UUID | None
    invitation_status: str
    expires_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationResponse(BaseModel):
    id: uuid.UUID
    type: str
    title: str
    body: str
    reference_type: str | None
    reference_id: uuid.UUID | None
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}
