import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base, JSONDocument


class Survey(Base):
    __tablename__ = "surveys"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_by: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    questions: Mapped[list] = mapped_column(JSONDocument, nullable=False)
    estimated_time: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    settings: Mapped[dict] = mapped_column(JSONDocument, nullable=False, default=dict)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    share_url: Mapped[str] = mapped_column(String(512), nullable=False)

    # Counters only ever move through a single UPDATE ... SET col = col + n.
    total_responses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_responses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_time_spent: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    responses = relationship("SurveyResponse", back_populates="survey", lazy="raise")

    __table_args__ = (
        Index("ix_surveys_created_by", "created_by"),
    )

    @property
    def question_count(self) -> int:
        return len(self.questions or [])

    @property
    def stats(self) -> dict:
        total = self.total_responses or 0
        return {
            "total_responses": total,
            "completion_rate": round(self.completed_responses / total * 100, 2) if total else 0.0,
            "average_time": round(self.total_time_spent / total, 2) if total else 0.0,
        }
