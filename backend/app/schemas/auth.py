import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: str | None = None
    username: str | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ProfileResponse(BaseModel):
    id: uuid.UUID
    email: str | None = None
    name: str | None = None
    username: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    location: str | None = None
    is_admin: bool = False
    is_guest: bool = False
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class PublicProfileResponse(BaseModel):
    id: uuid.UUID
    name: str | None = None
    username: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    location: str | None = None

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=100)
    username: str | None = Field(default=None, min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_.-]+$")
    avatar_url: str | None = Field(default=None, max_length=500)
    bio: str | None = Field(default=None, max_length=1000)
    location: str | None = Field(default=None, max_length=100)

    model_config = {"extra": "forbid"}


class AuthResponse(BaseModel):
    token: str
    user: ProfileResponse


class GuestResponse(BaseModel):
    guest_token: str
    profile: ProfileResponse
