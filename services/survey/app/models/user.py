"""
Users table, one row per Google account that has signed in.

Rows are upserted by ``google_id`` on every login; onboarding and profile
fields are filled in afterwards by the creator.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base, JSONDocument


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)

    # ── Google identity ───────────────────────────────────────────────────────
    google_id: Mapped[str] = mapped_column(sa.String(64), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(sa.String(255), nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(sa.String(150), nullable=True)
    picture: Mapped[str | None] = mapped_column(sa.String(1024), nullable=True)

    # ── Onboarding ────────────────────────────────────────────────────────────
    social_handle: Mapped[str | None] = mapped_column(sa.String(100), nullable=True)
    gender: Mapped[str | None] = mapped_column(sa.String(50), nullable=True)
    age: Mapped[int | None] = mapped_column(sa.SmallInteger, nullable=True)
    location: Mapped[str | None] = mapped_column(sa.String(150), nullable=True)
    onboarding_complete: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)

    # ── Profile ───────────────────────────────────────────────────────────────
    interests: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)
    profile_created: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow
    )
    last_login: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
