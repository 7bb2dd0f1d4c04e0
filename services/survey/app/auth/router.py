"""
Auth router.

Only HTTP concerns live here: route declaration, rate limit, dependency
injection and forwarding to the controller.
"""

import httpx
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.controller import google_sign_in
from app.auth.oauth import get_google_http_client
from app.auth.schemas import AuthResponse, GoogleAuthRequest
from app.config import Settings, get_settings
from app.database import get_db
from app.rate_limit import limiter

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/google",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign in with a Google authorization code",
)
@limiter.limit("10/minute")
async def google(
    request: Request,
    body: GoogleAuthRequest,
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_google_http_client),
) -> AuthResponse:
    return await google_sign_in(session, body, settings, http_client)
