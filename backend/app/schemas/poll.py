import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class PollOptionCreate(BaseModel):
    title: str
    description: str | None = None
    image_url: str | None = None


class PollCreate(BaseModel):
    title: str
    description: str | None = None
    options: list[PollOptionCreate]
    expires_at: datetime | None = None


class PollVoteRequest(BaseModel):
    option_id: uuid.UUID


class PollOptionResult(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    image_url: str | None = None
    position: int
    votes: int
    percentage: int


class PollResults(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    title: str
    description: str | None = None
    created_by: uuid.UUID
    is_active: bool
    expires_at: datetime | None = None
    created_at: datetime
    options: list[PollOptionResult] = Field(default_factory=list)
    total_votes: int
    user_vote: uuid.UUID | None = None
    winner: PollOptionResult | None = None
