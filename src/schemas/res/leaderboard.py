from datetime import datetime
from typing import List

from pydantic import BaseModel

from src.helpers.leaderboard import LeaderboardSummary


class RankedEntry(BaseModel):
    rank: int
    user_id: str
    user_name: str
    score: int
    completed_at: datetime


class LeaderboardResponse(BaseModel):
    quiz_code: str
    quiz_title: str
    entries: List[RankedEntry]
    summary: LeaderboardSummary


class PlatformStatsResponse(BaseModel):
    total_users: int
    total_quizzes: int
    total_attempts: int
