"""
Google sign-in: authorization code exchange and ID token verification.

Flow:
  1. The app runs Google's consent screen and receives ``?code=...``.
  2. It POSTs ``{code, redirectUri}`` to /api/auth/google.
  3. This module exchanges the code for tokens, verifies the returned
     ``id_token`` through Google's tokeninfo endpoint (audience must be our
     web client id) and returns a normalized GoogleIdentity.

The httpx client is injected so tests can route Google through
``httpx.MockTransport``.
"""
from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass

import httpx

from app.exceptions import GoogleAuthError, UpstreamError

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
_GOOGLE_ISSUERS = frozenset({"accounts.google.com", "https://accounts.google.com"})


@dataclass(frozen=True, slots=True)
class GoogleIdentity:
    google_id: str          # "sub" claim
    email: str
    name: str | None
    picture: str | None


async def get_google_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(timeout=10.0) as client:
        yield client


async def exchange_google_code(
    *,
    code: str,
    redirect_uri: str | None,
    client_id: str,
    client_secret: str,
    http_client: httpx.AsyncClient,
) -> GoogleIdentity:
    """
    Exchange a Google authorization code and verify the ID token it yields.

    Raises GoogleAuthError when Google rejects the code or the token does not
    verify, UpstreamError when Google cannot be reached.
    """
    form = {
        "code": code,
        "client_id": client_id,
        "client_secret": client_secret,
        "grant_type": "authorization_code",
    }
    if redirect_uri:
        form["redirect_uri"] = redirect_uri

    try:
        # 1. Exchange code → tokens
        token_resp = await http_client.post(GOOGLE_TOKEN_URL, data=form)
        if token_resp.status_code != 200:
            logger.warning("Google token exchange rejected: HTTP %s", token_resp.status_code)
            raise GoogleAuthError("Google rejected the authorization code")

        id_token = token_resp.json().get("id_token")
        if not id_token:
            raise GoogleAuthError("Google returned no ID token")

        # 2. Verify the ID token
        info_resp = await http_client.get(GOOGLE_TOKENINFO_URL, params={"id_token": id_token})
    except httpx.HTTPError as exc:
        logger.warning("Google unreachable during sign-in: %s", exc)
        raise UpstreamError("Could not reach Google") from exc

    if info_resp.status_code != 200:
        logger.warning("Google ID token verification failed: HTTP %s", info_resp.status_code)
        raise GoogleAuthError("Invalid Google token")

    claims = info_resp.json()
    if claims.get("aud") != client_id or claims.get("iss") not in _GOOGLE_ISSUERS:
        logger.warning("Google ID token has unexpected audience or issuer")
        raise GoogleAuthError("Invalid Google token")

    sub = claims.get("sub")
    email = claims.get("email")
    if not sub or not email:
        raise GoogleAuthError("Invalid Google token")

    return GoogleIdentity(
        google_id=sub,
        email=email,
        name=claims.get("name"),
        picture=claims.get("picture"),
    )
