"""Profile service: onboarding and interests for the signed-in creator."""
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import UserNotFoundError
from app.models.user import User

logger = logging.getLogger(__name__)


async def get_user(session: AsyncSession, user_id: UUID) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise UserNotFoundError(str(user_id))
    return user


async def complete_onboarding(
    session: AsyncSession,
    user_id: UUID,
    *,
    name: str,
    social_handle: str,
    gender: str | None = None,
    age: int | None = None,
    location: str | None = None,
) -> User:
    user = await get_user(session, user_id)
    user.name = name
    user.social_handle = social_handle
    user.gender = gender
    user.age = age
    user.location = location
    user.onboarding_complete = True
    await session.flush()
    await session.refresh(user)
    logger.info("User %s completed onboarding", user_id)
    return user


async def save_interests(session: AsyncSession, user_id: UUID, interests: list[str]) -> User:
    user = await get_user(session, user_id)
    user.interests = list(interests)
    user.profile_created = True
    await session.flush()
    await session.refresh(user)
    return user
