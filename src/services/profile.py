from typing import List

from fastapi import Depends

from src.models.quiz import QuizRecord
from src.models.user import UserRecord
from src.repositories.database import DatabaseRepository, get_repository
from src.schemas.res.user import RecentActivityResponse
from src.services.session import resolve_user


class ProfileService:
    def __init__(self, repo: DatabaseRepository = Depends(get_repository)):
        self.repo = repo

    async def get_profile(self, token: dict) -> UserRecord:
        return await resolve_user(self.repo, token)

    async def get_recent_activity(self, token: dict) -> RecentActivityResponse:
        """Latest finished quizzes, newest first. Guests have no history."""
        user = await resolve_user(self.repo, token)
        if user.is_guest:
            return RecentActivityResponse(activities=[])
        return RecentActivityResponse(activities=await self.repo.get_recent_activities(user.id))

    async def get_user_quizzes(self, token: dict) -> List[QuizRecord]:
        user = await resolve_user(self.repo, token)
        if user.is_guest:
            return []
        return await self.repo.get_quizzes_by_user(user.id)
