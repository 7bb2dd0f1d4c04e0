"""
Auth service: user upsert on Google sign-in and session token signing.

Pure business logic, no FastAPI imports.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone

from jose import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.oauth import GoogleIdentity
from app.models.user import User

logger = logging.getLogger(__name__)

ACCESS_TOKEN_EXPIRE_SECONDS = 7 * 24 * 3600


async def get_user_by_google_id(session: AsyncSession, google_id: str) -> User | None:
    result = await session.execute(select(User).where(User.google_id == google_id))
    return result.scalar_one_or_none()


async def upsert_google_user(session: AsyncSession, identity: GoogleIdentity) -> User:
    """
    Find the user by Google id or create it.

    Email, name, picture and last_login are refreshed on every sign-in;
    created_at and onboarding_complete=False are only set on insert.
    """
    now = datetime.now(timezone.utc)
    user = await get_user_by_google_id(session, identity.google_id)
    created = user is None
    if user is None:
        user = User(
            google_id=identity.google_id,
            created_at=now,
            onboarding_complete=False,
            profile_created=False,
            interests=[],
        )
        session.add(user)

    user.email = identity.email
    user.name = identity.name
    user.picture = identity.picture
    user.last_login = now

    await session.flush()
    await session.refresh(user)
    logger.info("Google sign-in for user %s (%s)", user.id, "new" if created else "returning")
    return user


def create_access_token(
    user_id: uuid.UUID,
    email: str,
    onboarding_complete: bool,
    secret: str,
    algorithm: str,
    issuer: str,
    audience: str,
    expire_seconds: int = ACCESS_TOKEN_EXPIRE_SECONDS,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "onboardingComplete": onboarding_complete,
        "iat": now,
        "exp": now + timedelta(seconds=expire_seconds),
        "iss": issuer,
        "aud": audience,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)
