"""Onboarding router."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from agentgate.api.deps import get_auth_service, get_current_user, get_session
from agentgate.api.schemas.auth import OnboardingStatusResponse
from agentgate.models.user import User
from agentgate.services.auth_service import AuthService

router = APIRouter()


@router.get("/status", response_model=OnboardingStatusResponse)
async def onboarding_status(
    current_user: User = Depends(get_current_user),
) -> OnboardingStatusResponse:
    return OnboardingStatusResponse(onboarding_complete=current_user.onboarding_complete)


@router.post("/complete", response_model=OnboardingStatusResponse)
async def complete_onboarding(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
) -> OnboardingStatusResponse:
    user = await auth.complete_onboarding(session, current_user)
    return OnboardingStatusResponse(onboarding_complete=user.onboarding_complete)
