from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from shared.models.base import camel_config


class OnboardingRequest(BaseModel):
    model_config = camel_config

    name: str = Field(min_length=1, max_length=150)
    social_handle: str = Field(min_length=1, max_length=100)
    gender: str | None = Field(default=None, max_length=50)
    age: int | None = Field(default=None, ge=1, le=130)
    location: str | None = Field(default=None, max_length=150)


class ProfileRequest(BaseModel):
    model_config = camel_config

    interests: list[str] = Field(min_length=1, max_length=50)

    @field_validator("interests")
    @classmethod
    def _clean_interests(cls, value: list[str]) -> list[str]:
        cleaned: list[str] = []
        for item in value:
            item = item.strip()
            if item and item not in cleaned:
                cleaned.append(item)
        if not cleaned:
            raise ValueError("At least one interest is required")
        return cleaned
