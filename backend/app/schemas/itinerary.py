import uuid
from datetime import date as date_type, datetime, time

from pydantic import BaseModel, Field, field_validator

from app.constants import ITEM_STATUSES, PRIVACY_SETTINGS, VOTE_TYPES


class ItineraryCreate(BaseModel):
    """Body of POST /itinerary. ``type`` selects item, section or google_maps_import."""

    type: str = "item"
    title: str | None = None
    name: str | None = None
    description: str | None = None
    section_id: uuid.UUID | None = None
    trip_city_id: uuid.UUID | None = None
    day_number: int | None = None
    date: date_type | None = None
    item_type: str | None = None
    category: str | None = None
    status: str | None = None
    start_time: time | None = None
    end_time: time | None = None
    address: str | None = None
    place_name: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    place_id: str | None = None
    url: str | None = None
    estimated_cost: float | None = Field(default=None, ge=0)
    currency: str | None = None
    notes: str | None = None
    items: list[dict] | None = None


class ItineraryItemUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    section_id: uuid.UUID | None = None
    day_number: int | None = None
    date: date_type | None = None
    item_type: str | None = None
    category: str | None = None
    status: str | None = None
    start_time: time | None = None
    end_time: time | None = None
    address: str | None = None
    place_name: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    place_id: str | None = None
    url: str | None = None
    estimated_cost: float | None = Field(default=None, ge=0)
    currency: str | None = None
    notes: str | None = None

    model_config = {"extra": "forbid"}

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str | None) -> str | None:
        if v is not None and v not in ITEM_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(ITEM_STATUSES)}")
        return v


class ItineraryItemResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    section_id: uuid.UUID | None
    day_number: int | None
    date: date_type | None
    position: int
    title: str
    description: str | None
    item_type: str
    category: str | None
    status: str
    start_time: time | None
    end_time: time | None
    address: str | None
    place_name: str | None
    latitude: float | None
    longitude: float | None
    place_id: str | None
    url: str | None
    estimated_cost: float | None
    currency: str | None
    notes: str | None
    votes_up: int
    votes_down: int
    created_by: uuid.UUID | None
    created_at: datetime

    model_config = {"from_attributes": True}


class ItinerarySectionResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    trip_city_id: uuid.UUID | None
    day_number: int
    date: date_type | None
    title: str | None
    description: str | None
    position: int

    model_config = {"from_attributes": True}


class ReorderRequest(BaseModel):
    section_id: uuid.UUID | None = None
    item_ids: list[uuid.UUID] = Field(min_length=1)


class VoteRequest(BaseModel):
    vote_type: str

    @field_validator("vote_type")
    @classmethod
    def valid_vote(cls, v: str) -> str:
        if v not in VOTE_TYPES:
            raise ValueError("vote_type must be 'up' or 'down'")
        return v


class VoteTally(BaseModel):
    up: int
    down: int
    user_vote: str | None


class TemplateCreate(BaseModel):
    """Save an existing trip's itinerary as a reusable template."""

    trip_id: uuid.UUID
    title: str | None = Field(default=None, min_length=3, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, max_length=50)
    is_published: bool = True


class TemplateItemResponse(BaseModel):
    id: uuid.UUID
    day: int
    item_order: int
    title: str
    description: str | None
    item_type: str
    category: str | None
    start_time: time | None
    end_time: time | None
    address: str | None
    place_id: str | None
    latitude: float | None
    longitude: float | None
    estimated_cost: float | None
    currency: str | None

    model_config = {"from_attributes": True}


class TemplateResponse(BaseModel):
    id: uuid.UUID
    title: str
    slug: str
    description: str | None
    category: str | None
    city_id: uuid.UUID | None
    destination_name: str | None
    duration_days: int
    is_published: bool
    copied_count: int
    source_trip_id: uuid.UUID | None
    created_by: uuid.UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class TemplateDetailResponse(BaseModel):
    template: TemplateResponse
    items: list[TemplateItemResponse]


class TripFromTemplate(BaseModel):
    name: str | None = Field(default=None, min_length=3, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    start_date: date_type | None = None
    privacy_setting: str = "private"

    @field_validator("privacy_setting")
    @classmethod
    def valid_privacy(cls, v: str) -> str:
        if v not in PRIVACY_SETTINGS:
            raise ValueError(f"privacy_setting must be one of: {', '.join(PRIVACY_SETTINGS)}")
        return v


class ApplyTemplateResult(BaseModel):
    added_items: int
    new_total_days: int
