from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.helpers.leaderboard import LeaderboardSummary
from src.models.enums import AttemptState
from src.models.quiz import QuizRecord
from src.models.user import UserStats


class QuestionResponse(BaseModel):
    id: str
    question: str
    options: List[str]


class QuizLinks(BaseModel):
    join_url: str
    manage_url: str
    leaderboard_url: str


class QuizPublicResponse(BaseModel):
    code: str
    title: str
    description: str
    question_count: int
    time_limit: int
    questions: List[QuestionResponse]


class QuizCreatedResponse(BaseModel):
    code: str
    links: QuizLinks


class QuizManageResponse(BaseModel):
    quiz: QuizRecord
    links: QuizLinks
    summary: LeaderboardSummary


class AttemptResult(BaseModel):
    score: int
    correct_count: int
    total_questions: int
    stats: Optional[UserStats] = None
    access_token: Optional[str] = None  # refreshed guest session


class AttemptResponse(BaseModel):
    attempt_id: str
    quiz_code: str
    state: AttemptState
    current_index: int
    total_questions: int
    answered: int
    time_left: int
    question: Optional[QuestionResponse] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    result: Optional[AttemptResult] = None
