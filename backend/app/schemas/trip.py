import uuid
from datetime import date, datetime
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator, model_validator

from app.constants import PLAYLIST_DOMAINS, PRIVACY_SETTINGS, TRIP_ROLES, TRIP_STATUSES, TRIP_TYPES


def _check_choice(value: str | None, choices: tuple, label: str) -> str | None:
    if value is not None and value not in choices:
        raise ValueError(f"{label} must be one of: {', '.join(choices)}")
    return value


class TripCreate(BaseModel):
    name: str = Field(min_length=3, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    destination: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    budget: float | None = Field(default=None, ge=0)
    currency: str = "USD"
    trip_type: str | None = None
    privacy_setting: str = "private"

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Trip name must be at least 3 characters")
        return v

    @field_validator("privacy_setting")
    @classmethod
    def valid_privacy(cls, v: str) -> str:
        return _check_choice(v, PRIVACY_SETTINGS, "privacy_setting")

    @field_validator("trip_type")
    @classmethod
    def valid_trip_type(cls, v: str | None) -> str | None:
        return _check_choice(v, TRIP_TYPES, "trip_type")

    @model_validator(mode="after")
    def dates_in_order(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must be on or after start date")
        return self


class GuestTripCreate(BaseModel):
    destination: str | None = None
    custom_name: str | None = Field(default=None, max_length=100)


class TripUpdate(BaseModel):
    """Partial update. Unknown fields are rejected."""

    name: str | None = Field(default=None, min_length=3, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    start_date: date | None = None
    end_date: date | None = None
    budget: float | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    status: str | None = None
    trip_type: str | None = None
    privacy_setting: str | None = None
    destination_name: str | None = Field(default=None, max_length=100)
    cover_image_url: str | None = Field(default=None, max_length=500)
    cover_image_position_y: int | None = Field(default=None, ge=0, le=100)
    playlist_url: str | None = Field(default=None, max_length=500)

    model_config = {"extra": "forbid"}

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Trip name must be at least 3 characters")
        return v

    @field_validator("cover_image_url")
    @classmethod
    def https_cover(cls, v: str | None) -> str | None:
        if v and urlparse(v).scheme != "https":
            raise ValueError("Cover image URL must use https")
        return v

    @field_validator("playlist_url")
    @classmethod
    def supported_playlist(cls, v: str | None) -> str | None:
        if not v:
            return None
        host = (urlparse(v).hostname or "").lower()
        if not any(host == d or host.endswith("." + d) for d in PLAYLIST_DOMAINS):
            raise ValueError("Playlist URL must be from a supported service")
        return v

    @field_validator("privacy_setting")
    @classmethod
    def valid_privacy(cls, v: str | None) -> str | None:
        return _check_choice(v, PRIVACY_SETTINGS, "privacy_setting")

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str | None) -> str | None:
        return _check_choice(v, TRIP_STATUSES, "status")

    @field_validator("trip_type")
    @classmethod
    def valid_trip_type(cls, v: str | None) -> str | None:
        return _check_choice(v, TRIP_TYPES, "trip_type")


class TripResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    created_by: uuid.UUID
    city_id: uuid.UUID | None
    destination_name: str | None
    start_date: date | None
    end_date: date | None
    duration_days: int | None
    budget: float | None
    currency: str
    status: str
    trip_type: str | None
    privacy_setting: str
    public_slug: str | None
    cover_image_url: str | None
    cover_image_position_y: int | None
    playlist_url: str | None
    is_guest: bool
    likes_count: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TripDetailResponse(BaseModel):
    trip: TripResponse
    user_role: str | None


class GuestTripResponse(BaseModel):
    trip_id: uuid.UUID
    is_guest: bool
    guest_token: str | None = None


class MemberResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    user_id: uuid.UUID
    role: str
    joined_at: datetime
    name: str | None = None
    username: str | None = None
    avatar_url: str | None = None


class MemberRoleUpdate(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def valid_role(cls, v: str) -> str:
        return _check_choice(v, TRIP_ROLES, "role")


class AccessRequestCreate(BaseModel):
    requested_role: str = "viewer"
    message: str | None = Field(default=None, max_length=1000)

    @field_validator("requested_role")
    @classmethod
    def valid_role(cls, v: str) -> str:
        return _check_choice(v, TRIP_ROLES, "requested_role")


class AccessRequestResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    user_id: uuid.UUID
    requested_role: str
    message: str | None
    status: str
    resolved_by: uuid.UUID | None
    resolved_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class PermissionStatus(BaseModel):
    has_access: bool
    role: str | None
    is_owner: bool
    has_pending_request: bool


class CityResponse(BaseModel):
    id: uuid.UUID
    name: str
    country: str | None

    model_config = {"from_attributes": True}


def _check_stay(arrival: date | None, departure: date | None):
    if arrival and departure and departure < arrival:
        raise ValueError("Departure date must be on or after arrival date")


class TripCityCreate(BaseModel):
    """Either an existing ``city_id`` or a ``destination`` name to find or create."""

    city_id: uuid.UUID | None = None
    destination: str | None = Field(default=None, max_length=100)
    arrival_date: date | None = None
    departure_date: date | None = None

    @model_validator(mode="after")
    def city_and_dates(self):
        if self.city_id is None and not (self.destination or "").strip():
            raise ValueError("city_id or destination is required")
        _check_stay(self.arrival_date, self.departure_date)
        return self


class TripCityUpdate(BaseModel):
    arrival_date: date | None = None
    departure_date: date | None = None

    model_config = {"extra": "forbid"}


class TripCityResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    city_id: uuid.UUID
    position: int
    arrival_date: date | None
    departure_date: date | None
    city: CityResponse | None = None
