from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from shared.models.base import camel_config


class GoogleAuthRequest(BaseModel):
    model_config = camel_config

    code: str = Field(min_length=1)
    redirect_uri: str | None = None


class UserResponse(BaseModel):
    model_config = ConfigDict(**camel_config, from_attributes=True)

    id: UUID
    email: str
    name: str | None = None
    picture: str | None = None
    social_handle: str | None = None
    gender: str | None = None
    age: int | None = None
    location: str | None = None
    interests: list[str] = Field(default_factory=list)
    onboarding_complete: bool = False
    profile_created: bool = False
    created_at: datetime
    last_login: datetime | None = None


class AuthResponse(BaseModel):
    model_config = camel_config

    token: str
    user: UserResponse
