from datetime import datetime
from typing import List, Optional

from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field

from src.models.enums import AttemptState
from src.models.user import utcnow


class UserQuizAttempt(Document):
    quiz_id: PydanticObjectId
    quiz_code: str
    user_id: str
    user_name: str
    state: AttemptState = AttemptState.NOT_STARTED
    current_index: int = 0
    answers: List[int] = Field(default_factory=list)
    question_started_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    score: Optional[int] = None
    created_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "user_quiz_attempts"


class QuizAttemptState(BaseModel):
    """Mutable state of one run through a quiz, driven by `QuizRunner`."""

    id: Optional[str] = None
    quiz_id: str
    quiz_code: str
    user_id: str
    user_name: str
    state: AttemptState = AttemptState.NOT_STARTED
    current_index: int = 0
    answers: List[int] = Field(default_factory=list)
    question_started_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    score: Optional[int] = None
