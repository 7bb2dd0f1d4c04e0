import os

# Settings are read when app.main is imported; set them first.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("GOOGLE_CLIENT_ID_WEB", "test-client-id.apps.googleusercontent.com")
os.environ.setdefault("GOOGLE_CLIENT_SECRET_WEB", "test-client-secret")
os.environ["RATE_LIMIT_ENABLED"] = "false"

import uuid
from collections.abc import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.auth.oauth import get_google_http_client
from app.database import get_db
from app.main import app
from app.models.user import User
from shared.database.postgres import Base
from support import google_handler, make_token

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def _google_client() -> AsyncGenerator[httpx.AsyncClient, None]:
        async with httpx.AsyncClient(transport=httpx.MockTransport(google_handler)) as client:
            yield client

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_google_http_client] = _google_client
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def creator(session_factory) -> User:
    async with session_factory() as session:
        user = User(
            google_id=f"google-{uuid.uuid4().hex}",
            email="owner@example.com",
            name="Owner",
            interests=[],
            onboarding_complete=False,
            profile_created=False,
        )
        session.add(user)
        await session.commit()
        return user


@pytest.fixture
def auth_headers(creator: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(creator)}"}
