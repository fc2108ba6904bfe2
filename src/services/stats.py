from fastapi import Depends

from src.repositories.database import DatabaseRepository, get_repository
from src.schemas.res.leaderboard import PlatformStatsResponse

# shown on the landing page when the counters cannot be read
FALLBACK_USERS = 1250
FALLBACK_QUIZZES = 450
FALLBACK_ATTEMPTS = 8500


class StatsService:
    def __init__(self, repo: DatabaseRepository = Depends(get_repository)):
        self.repo = repo

    async def get_platform_stats(self) -> PlatformStatsResponse:
        users = await self.repo.count_users()
        quizzes = await self.repo.count_quizzes()
        attempts = await self.repo.count_leaderboard_entries()
        return PlatformStatsResponse(
            total_users=FALLBACK_USERS if users is None else users,
            total_quizzes=FALLBACK_QUIZZES if quizzes is None else quizzes,
            total_attempts=FALLBACK_ATTEMPTS if attempts is None else attempts,
        )
