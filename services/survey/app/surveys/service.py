"""Survey service: creation, creator listing, public lookup and response submission.

Pure business logic, no FastAPI imports.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import InvalidAnswerError, SurveyNotFoundError, SurveyValidationError, UserNotFoundError
from app.models.survey import Survey
from app.models.survey_response import SurveyResponse
from app.models.user import User
from app.surveys.questions import (
    Question,
    coerce_answer,
    dump_question,
    index_questions,
    parse_question,
    validate_survey,
)
from app.surveys.schemas import ResponseSubmission, SurveySettings
from app.surveys.sharing import build_share_url

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Creation / listing
# ---------------------------------------------------------------------------


async def create_survey(
    db: AsyncSession,
    creator_id: UUID,
    *,
    title: str,
    description: str = "",
    questions: list[Question],
    estimated_time: str = "",
    settings: SurveySettings | None = None,
    share_base_url: str,
) -> Survey:
    """Persist and publish a survey.  The share link is fixed at creation."""
    result = validate_survey(title, questions)
    if not result.is_valid:
        raise SurveyValidationError(
            result.errors[0].message,
            [issue.as_dict() for issue in result.errors],
        )

    if await db.get(User, creator_id) is None:
        raise UserNotFoundError(str(creator_id))

    survey_id = uuid.uuid4()
    survey = Survey(
        id=survey_id,
        created_by=creator_id,
        title=title,
        description=description or "",
        questions=[dump_question(q) for q in questions],
        estimated_time=estimated_time or "",
        settings=(settings or SurveySettings()).model_dump(by_alias=True),
        is_published=True,
        share_url=build_share_url(share_base_url, survey_id),
    )
    db.add(survey)
    await db.flush()
    await db.refresh(survey)
    logger.info("Survey %s created by %s (%d questions)", survey.id, creator_id, survey.question_count)
    return survey


async def list_surveys_for_creator(db: AsyncSession, creator_id: UUID) -> list[Survey]:
    stmt = (
        select(Survey)
        .where(Survey.created_by == creator_id)
        .order_by(Survey.created_at.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_published_survey(db: AsyncSession, survey_id: UUID) -> Survey:
    survey = await db.get(Survey, survey_id)
    if survey is None or not survey.is_published:
        raise SurveyNotFoundError(str(survey_id))
    return survey


# ---------------------------------------------------------------------------
# Response submission
# ---------------------------------------------------------------------------


def _normalise_items(survey: Survey, submission: ResponseSubmission) -> list[dict]:
    """Check every item against the survey's questions; return storable items in question order."""
    questions = [parse_question(q) for q in survey.questions]
    by_id = index_questions(questions)
    position = {q.id: i for i, q in enumerate(questions)}

    items: list[dict] = []
    seen: set[int] = set()
    now = datetime.now(timezone.utc)
    for item in submission.responses:
        question = by_id.get(item.question_id)
        if question is None:
            raise SurveyValidationError(f"Unknown question id: {item.question_id}")
        if item.question_id in seen:
            raise SurveyValidationError(f"Question {item.question_id} answered more than once")
        seen.add(item.question_id)
        try:
            answer = coerce_answer(question, item.answer)
        except InvalidAnswerError as exc:
            raise SurveyValidationError(
                str(exc),
                [{"code": "InvalidAnswer", "questionId": exc.question_id, "message": exc.reason}],
            ) from exc
        stored = {
            "questionId": item.question_id,
            "answer": answer,
            "answeredAt": (item.answered_at or now).isoformat(),
        }
        if item.time_spent is not None:
            stored["timeSpent"] = item.time_spent
        items.append(stored)

    items.sort(key=lambda i: position[i["questionId"]])
    return items


async def submit_response(
    db: AsyncSession,
    survey_id: UUID,
    submission: ResponseSubmission,
    *,
    ip_address: str | None = None,
) -> SurveyResponse:
    survey = await get_published_survey(db, survey_id)
    items = _normalise_items(survey, submission)

    if submission.time_spent is not None:
        time_spent = submission.time_spent
    else:
        time_spent = sum(i.get("timeSpent", 0) for i in items)

    response = SurveyResponse(
        survey_id=survey.id,
        responses=items,
        completed_at=submission.completed_at,
        time_spent=time_spent,
        submitted_at=datetime.now(timezone.utc),
        ip_address=ip_address,
    )
    db.add(response)
    await db.flush()

    # Single statement so concurrent submissions never lose an increment.
    await db.execute(
        update(Survey)
        .where(Survey.id == survey.id)
        .values(
            total_responses=Survey.total_responses + 1,
            completed_responses=Survey.completed_responses + (1 if submission.completed_at else 0),
            total_time_spent=Survey.total_time_spent + time_spent,
        )
        .execution_options(synchronize_session=False)
    )
    await db.flush()
    logger.info("Response %s recorded for survey %s (%d answers)", response.id, survey.id, len(items))
    return response
