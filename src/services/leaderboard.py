from fastapi import Depends, HTTPException

from src.helpers.leaderboard import summarize
from src.repositories.database import DatabaseRepository, get_repository
from src.schemas.res.leaderboard import LeaderboardResponse, RankedEntry


class LeaderboardService:
    def __init__(self, repo: DatabaseRepository = Depends(get_repository)):
        self.repo = repo

    async def get_leaderboard(self, code: str) -> LeaderboardResponse:
        quiz = await self.repo.get_quiz_by_code(code.strip().upper())
        if not quiz:
            raise HTTPException(status_code=404, detail="Quiz not found")

        rows = await self.repo.get_leaderboard(quiz.id)
        return LeaderboardResponse(
            quiz_code=quiz.code,
            quiz_title=quiz.title,
            entries=[
                RankedEntry(
                    rank=rank,
                    user_id=row.user_id,
                    user_name=row.user_name,
                    score=row.score,
                    completed_at=row.completed_at,
                )
                for rank, row in enumerate(rows, start=1)
            ],
            summary=summarize(rows),
        )
