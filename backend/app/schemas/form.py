import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.constants import FEEDBACK_TYPES, FORM_STATUSES, FORM_TYPES, FORM_VISIBILITIES, QUESTION_TYPES


class QuestionCreate(BaseModel):
    label: str = Field(min_length=1, max_length=500)
    description: str | None = None
    question_type: str = "text"
    required: bool = False
    options: list | None = None

    @field_validator("question_type")
    @classmethod
    def valid_type(cls, v: str) -> str:
        if v not in QUESTION_TYPES:
            raise ValueError(f"question_type must be one of: {', '.join(QUESTION_TYPES)}")
        return v


class QuestionResponse(BaseModel):
    id: uuid.UUID
    position: int
    label: str
    description: str | None
    question_type: str
    required: bool
    options: list | None

    model_config = {"from_attributes": True}


class FormCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    status: str = "draft"
    visibility: str = "members"
    form_type: str = "general"
    allow_anonymous: bool = False
    is_template: bool = False
    template_id: uuid.UUID | None = None
    expires_at: datetime | None = None
    settings: dict | None = None
    questions: list[QuestionCreate] = Field(default_factory=list)

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str) -> str:
        if v not in FORM_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(FORM_STATUSES)}")
        return v

    @field_validator("visibility")
    @classmethod
    def valid_visibility(cls, v: str) -> str:
        if v not in FORM_VISIBILITIES:
            raise ValueError(f"visibility must be one of: {', '.join(FORM_VISIBILITIES)}")
        return v

    @field_validator("form_type")
    @classmethod
    def valid_form_type(cls, v: str) -> str:
        if v not in FORM_TYPES:
            raise ValueError(f"form_type must be one of: {', '.join(FORM_TYPES)}")
        return v


class FormUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: str | None = None
    visibility: str | None = None
    allow_anonymous: bool | None = None
    expires_at: datetime | None = None
    settings: dict | None = None

    model_config = {"extra": "forbid"}

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str | None) -> str | None:
        if v is not None and v not in FORM_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(FORM_STATUSES)}")
        return v

    @field_validator("visibility")
    @classmethod
    def valid_visibility(cls, v: str | None) -> str | None:
        if v is not None and v not in FORM_VISIBILITIES:
            raise ValueError(f"visibility must be one of: {', '.join(FORM_VISIBILITIES)}")
        return v


class FormResponseModel(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID | None
    title: str
    description: str | None
    status: str
    visibility: str
    form_type: str
    allow_anonymous: bool
    is_template: bool
    template_id: uuid.UUID | None
    expires_at: datetime | None
    settings: dict | None
    created_by: uuid.UUID
    created_at: datetime
    questions: list[QuestionResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class SubmissionCreate(BaseModel):
    answers: dict[str, object]


class SubmissionResponse(BaseModel):
    id: uuid.UUID
    form_id: uuid.UUID
    respondent_id: uuid.UUID | None
    answers: dict
    created_at: datetime

    model_config = {"from_attributes": True}


class FeedbackCreate(BaseModel):
    feedback_type: str = "general"
    rating: int | None = Field(default=None, ge=1, le=5)
    content: str = Field(min_length=1, max_length=5000)
    page_url: str | None = Field(default=None, max_length=500)

    @field_validator("feedback_type")
    @classmethod
    def valid_type(cls, v: str) -> str:
        if v not in FEEDBACK_TYPES:
            raise ValueError(f"feedback_type must be one of: {', '.join(FEEDBACK_TYPES)}")
        return v


class FeedbackResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID | None
    feedback_type: str
    rating: int | None
    content: str
    page_url: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
