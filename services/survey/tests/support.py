"""Helpers shared by the test modules (Google stand-in, token minting)."""
import os

import httpx

from app.auth.oauth import GOOGLE_TOKEN_URL, GOOGLE_TOKENINFO_URL
from app.auth.service import create_access_token
from app.config import get_settings
from app.models.user import User

GOOGLE_CLIENT_ID = os.environ["GOOGLE_CLIENT_ID_WEB"]
GOOGLE_SUB = "google-sub-123"


def google_handler(request: httpx.Request) -> httpx.Response:
    """Stand-in for Google's token and tokeninfo endpoints."""
    # compare whole paths: ".../token" is a prefix of ".../tokeninfo"
    url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
    if url == GOOGLE_TOKEN_URL:
        form = dict(httpx.QueryParams(request.content.decode()))
        if form.get("code") == "bad-code":
            return httpx.Response(400, json={"error": "invalid_grant"})
        return httpx.Response(200, json={"access_token": "ya29.token", "id_token": f"idtoken-{form['code']}"})
    if url == GOOGLE_TOKENINFO_URL:
        id_token = request.url.params.get("id_token", "")
        aud = "someone-else" if id_token == "idtoken-wrong-audience" else GOOGLE_CLIENT_ID
        return httpx.Response(
            200,
            json={
                "iss": "https://accounts.google.com",
                "aud": aud,
                "sub": GOOGLE_SUB,
                "email": "creator@example.com",
                "name": "Casey Creator",
                "picture": "https://example.com/casey.png",
            },
        )
    return httpx.Response(404)


def make_token(user: User) -> str:
    settings = get_settings()
    return create_access_token(
        user.id,
        user.email,
        user.onboarding_complete,
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
    )
