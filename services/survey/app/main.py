import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.auth.router import router as auth_router
from app.config import get_settings
from app.database import dispose_db, init_db
from app.profile.router import router as profile_router
from app.rate_limit import limiter
from app.surveys.router import router as surveys_router
from shared.middleware import error_envelope_middleware, register_error_handlers, request_id_middleware

logger = logging.getLogger(__name__)


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Just Ask API

Backend for the Just Ask survey app:

* **Authentication**: Google sign-in (authorization code flow), 7-day JWT session tokens.
* **Users**: onboarding details and profile interests for survey creators.
* **Surveys**: creators publish multi-question surveys and get a share link and QR code;
  anyone holding the link can fetch the survey and submit one response set.

### Authentication
Creator endpoints require:
```
Authorization: Bearer <token>
```
A missing token returns `401`, an invalid or expired one `403`.

### Error shape
All errors return a consistent JSON envelope:
```json
{ "error": { "code": "validation_error", "message": "..." }, "request_id": "..." }
```
"""

_TAGS_METADATA = [
    {"name": "auth", "description": "Google sign-in and session token issuance."},
    {"name": "users", "description": "The signed-in creator's user record, onboarding and profile."},
    {
        "name": "Surveys",
        "description": (
            "Create and list your surveys (bearer token). "
            "`GET /surveys/{id}/public` and `POST /surveys/{id}/responses` are public."
        ),
    },
]


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.database_url)
    logger.info("Survey service starting (env=%s)", settings.env_name)
    yield
    await dispose_db()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Just Ask API",
        version="1.0.0",
        description=_DESCRIPTION,
        openapi_tags=_TAGS_METADATA,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Attach rate limiter state before middleware
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    register_error_handlers(app)

    # Middleware is applied in reverse-registration order (last added = outermost).
    # request_id wraps the error envelope so even 500s carry X-Request-ID.
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(error_envelope_middleware)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(auth_router, prefix="/api")
    app.include_router(profile_router, prefix="/api")
    app.include_router(surveys_router, prefix="/api")

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="survey")

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
