import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base, JSONDocument


class SurveyResponse(Base):
    __tablename__ = "survey_responses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    survey_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
    )
    # [{questionId, answer, answeredAt, timeSpent}] in question order
    responses: Mapped[list] = mapped_column(JSONDocument, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    time_spent: Mapped[float | None] = mapped_column(Float, nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)

    survey = relationship("Survey", back_populates="responses", lazy="select")

    __table_args__ = (
        Index("ix_survey_responses_survey_id", "survey_id"),
    )
