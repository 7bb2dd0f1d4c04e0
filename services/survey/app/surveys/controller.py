"""Surveys controller: maps service results and domain errors to HTTP responses."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.exceptions import SurveyNotFoundError, SurveyValidationError, UserNotFoundError
from app.models.survey import Survey
from app.surveys import service
from app.surveys.schemas import (
    PublicSurveyResponse,
    ResponseSubmission,
    ResponseSubmittedResponse,
    SurveyCreatedResponse,
    SurveyCreateRequest,
    SurveyListResponse,
    SurveySummary,
)
from app.surveys.sharing import build_qr_code_url

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, SurveyValidationError):
        detail = {"message": str(exc), "issues": exc.issues} if exc.issues else str(exc)
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
    if isinstance(exc, SurveyNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Survey not found.")
    if isinstance(exc, UserNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    logger.exception("Unexpected survey error", exc_info=exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


def parse_survey_id(raw: str) -> UUID:
    try:
        return UUID(raw)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid survey id.") from None


def _qr_code_url(share_url: str) -> str:
    settings = get_settings()
    return build_qr_code_url(settings.qr_code_api_url, share_url, settings.qr_code_size)


def _summary(survey: Survey) -> SurveySummary:
    summary = SurveySummary.model_validate(survey)
    return summary.model_copy(update={"qr_code_url": _qr_code_url(survey.share_url)})


async def create_survey(
    db: AsyncSession,
    creator_id: UUID,
    body: SurveyCreateRequest,
) -> SurveyCreatedResponse:
    try:
        survey = await service.create_survey(
            db,
            creator_id,
            title=body.title,
            description=body.description,
            questions=body.questions,
            estimated_time=body.estimated_time,
            settings=body.settings,
            share_base_url=get_settings().share_base_url,
        )
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    return SurveyCreatedResponse(
        survey_id=survey.id,
        share_url=survey.share_url,
        qr_code_url=_qr_code_url(survey.share_url),
    )


async def list_surveys(db: AsyncSession, creator_id: UUID) -> SurveyListResponse:
    try:
        surveys = await service.list_surveys_for_creator(db, creator_id)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    return SurveyListResponse(surveys=[_summary(s) for s in surveys])


async def get_public_survey(db: AsyncSession, survey_id: str) -> PublicSurveyResponse:
    sid = parse_survey_id(survey_id)
    try:
        survey = await service.get_published_survey(db, sid)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    public = PublicSurveyResponse.model_validate(survey)
    return public.model_copy(update={"qr_code_url": _qr_code_url(survey.share_url)})


async def submit_response(
    db: AsyncSession,
    survey_id: str,
    body: ResponseSubmission,
    ip_address: str | None,
) -> ResponseSubmittedResponse:
    sid = parse_survey_id(survey_id)
    try:
        response = await service.submit_response(db, sid, body, ip_address=ip_address)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    return ResponseSubmittedResponse(response_id=response.id)
