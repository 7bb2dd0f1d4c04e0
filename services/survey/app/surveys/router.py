"""Surveys router: HTTP layer for survey creation, listing, the public view
and response submission.

Create/list require a bearer token; the public view and submissions do not,
published surveys are answerable by anyone holding the link.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import client_ip, get_current_user
from app.rate_limit import limiter
from app.surveys import controller
from app.surveys.schemas import (
    PublicSurveyResponse,
    ResponseSubmission,
    ResponseSubmittedResponse,
    SurveyCreatedResponse,
    SurveyCreateRequest,
    SurveyListResponse,
)
from shared.models.user import CurrentUser

router = APIRouter(prefix="/surveys", tags=["Surveys"])


@router.post(
    "",
    response_model=SurveyCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create and publish a survey",
)
async def create_survey(
    body: SurveyCreateRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> SurveyCreatedResponse:
    return await controller.create_survey(db, user.id, body)


@router.get(
    "",
    response_model=SurveyListResponse,
    summary="List the caller's surveys, newest first",
)
async def list_surveys(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> SurveyListResponse:
    return await controller.list_surveys(db, user.id)


@router.get(
    "/{survey_id}/public",
    response_model=PublicSurveyResponse,
    summary="Get a published survey (no authentication)",
)
async def get_public_survey(
    survey_id: str,
    db: AsyncSession = Depends(get_db),
) -> PublicSurveyResponse:
    return await controller.get_public_survey(db, survey_id)


@router.post(
    "/{survey_id}/responses",
    response_model=ResponseSubmittedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a response set (no authentication)",
)
@limiter.limit("30/minute")
async def submit_response(
    request: Request,
    survey_id: str,
    body: ResponseSubmission,
    db: AsyncSession = Depends(get_db),
) -> ResponseSubmittedResponse:
    return await controller.submit_response(db, survey_id, body, client_ip(request))
