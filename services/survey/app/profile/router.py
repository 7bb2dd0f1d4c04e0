"""Profile router: the signed-in creator's own user record."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import UserResponse
from app.database import get_db
from app.dependencies import get_current_user
from app.profile import controller
from app.profile.schemas import OnboardingRequest, ProfileRequest
from shared.models.user import CurrentUser

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse, summary="Get the signed-in user")
async def get_me(
    session: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> UserResponse:
    return await controller.get_me(session, user.id)


@router.patch("/onboarding", response_model=UserResponse, summary="Complete onboarding")
async def complete_onboarding(
    body: OnboardingRequest,
    session: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> UserResponse:
    return await controller.complete_onboarding(session, user.id, body)


@router.patch("/profile", response_model=UserResponse, summary="Save profile interests")
async def save_profile(
    body: ProfileRequest,
    session: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> UserResponse:
    return await controller.save_profile(session, user.id, body)
