"""
Auth controller: orchestrates Google sign-in and maps failures to HTTP errors.
"""
from __future__ import annotations

import logging

import httpx
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.oauth import exchange_google_code
from app.auth.schemas import AuthResponse, GoogleAuthRequest, UserResponse
from app.auth.service import create_access_token, upsert_google_user
from app.config import Settings
from app.exceptions import GoogleAuthError, UpstreamError

logger = logging.getLogger(__name__)


async def google_sign_in(
    session: AsyncSession,
    body: GoogleAuthRequest,
    settings: Settings,
    http_client: httpx.AsyncClient,
) -> AuthResponse:
    try:
        identity = await exchange_google_code(
            code=body.code,
            redirect_uri=body.redirect_uri,
            client_id=settings.google_client_id_web,
            client_secret=settings.google_client_secret_web,
            http_client=http_client,
        )
    except GoogleAuthError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid Google token.") from exc
    except UpstreamError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during authentication.",
        ) from exc

    try:
        user = await upsert_google_user(session, identity)
    except Exception as exc:
        logger.exception("User upsert failed for Google id %s", identity.google_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not retrieve user after upsert.",
        ) from exc

    token = create_access_token(
        user.id,
        user.email,
        user.onboarding_complete,
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        expire_seconds=settings.jwt_expire_seconds,
    )
    return AuthResponse(token=token, user=UserResponse.model_validate(user))
