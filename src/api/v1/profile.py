from typing import List

from fastapi import APIRouter, Depends

from src.core.auth_middleware import get_current_user
from src.models.quiz import QuizRecord
from src.models.user import UserRecord
from src.schemas.res.user import RecentActivityResponse
from src.services.profile import ProfileService

profile_router = APIRouter()


@profile_router.get("/me", response_model=UserRecord)
async def me(
    token: dict = Depends(get_current_user),
    profile_service: ProfileService = Depends(ProfileService),
):
    return await profile_service.get_profile(token)


@profile_router.get("/me/activity", response_model=RecentActivityResponse)
async def recent_activity(
    token: dict = Depends(get_current_user),
    profile_service: ProfileService = Depends(ProfileService),
):
    """Last quizzes the user finished"""
    return await profile_service.get_recent_activity(token)


@profile_router.get("/me/quizzes", response_model=List[QuizRecord])
async def my_quizzes(
    token: dict = Depends(get_current_user),
    profile_service: ProfileService = Depends(ProfileService),
):
    return await profile_service.get_user_quizzes(token)
