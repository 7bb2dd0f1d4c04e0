"""Survey domain Pydantic V2 schemas.

Covers survey creation, the creator's survey list, the public (respondent)
view and response submission.  Everything travels camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from typing import Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.surveys.questions import Question
from shared.models.base import camel_config


# ---------------------------------------------------------------------------
# Survey body
# ---------------------------------------------------------------------------


class SurveySettings(BaseModel):
    model_config = camel_config

    allow_back: bool = True
    show_progress: bool = True
    auto_save: bool = False


class SurveyStats(BaseModel):
    model_config = camel_config

    total_responses: int = 0
    completion_rate: float = Field(default=0.0, description="Percentage of responses marked complete.")
    average_time: float = Field(default=0.0, description="Mean time spent per response, in seconds.")


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class SurveyCreateRequest(BaseModel):
    model_config = camel_config

    title: str = Field(min_length=1, max_length=300)
    description: str = ""
    questions: list[Question] = Field(min_length=1)
    estimated_time: str = Field(default="", max_length=50)
    settings: SurveySettings = Field(default_factory=SurveySettings)


AnswerValue = Union[bool, int, float, str, list[str]]


class ResponseItemIn(BaseModel):
    model_config = camel_config

    question_id: int
    answer: AnswerValue
    answered_at: datetime | None = None
    time_spent: float | None = Field(default=None, ge=0)


class ResponseSubmission(BaseModel):
    model_config = camel_config

    responses: list[ResponseItemIn] = Field(min_length=1)
    completed_at: datetime | None = None
    time_spent: float | None = Field(default=None, ge=0)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class SurveyCreatedResponse(BaseModel):
    model_config = camel_config

    message: str = "Survey created successfully"
    survey_id: UUID
    share_url: str
    qr_code_url: str


class PublicSurveyResponse(BaseModel):
    """What a respondent sees: no creator id, no stats."""

    model_config = ConfigDict(**camel_config, from_attributes=True)

    id: UUID
    title: str
    description: str = ""
    questions: list[Question]
    question_count: int
    estimated_time: str = ""
    settings: SurveySettings = Field(default_factory=SurveySettings)
    is_published: bool
    share_url: str
    qr_code_url: str = ""
    created_at: datetime

    @field_validator("settings", mode="before")
    @classmethod
    def _settings_default(cls, value: object) -> object:
        return value or {}


class SurveySummary(PublicSurveyResponse):
    """Creator's view of one of their own surveys."""

    created_by: UUID
    stats: SurveyStats
    updated_at: datetime


class SurveyListResponse(BaseModel):
    model_config = camel_config

    surveys: list[SurveySummary]


class ResponseSubmittedResponse(BaseModel):
    model_config = camel_config

    message: str = "Response submitted successfully"
    response_id: UUID
