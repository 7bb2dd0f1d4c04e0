from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import UserResponse
from app.exceptions import UserNotFoundError
from app.profile import service
from app.profile.schemas import OnboardingRequest, ProfileRequest

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, UserNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    logger.exception("Unexpected profile error", exc_info=exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def get_me(session: AsyncSession, user_id: UUID) -> UserResponse:
    try:
        user = await service.get_user(session, user_id)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    return UserResponse.model_validate(user)


async def complete_onboarding(
    session: AsyncSession, user_id: UUID, body: OnboardingRequest
) -> UserResponse:
    try:
        user = await service.complete_onboarding(session, user_id, **body.model_dump())
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    return UserResponse.model_validate(user)


async def save_profile(session: AsyncSession, user_id: UUID, body: ProfileRequest) -> UserResponse:
    try:
        user = await service.save_interests(session, user_id, body.interests)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    return UserResponse.model_validate(user)
