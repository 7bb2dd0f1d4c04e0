from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CurrentUser(BaseModel):
    """User context from JWT; used by every authenticated route."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: UUID
    email: str
    onboarding_complete: bool = False
