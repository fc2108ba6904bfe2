from datetime import datetime
from typing import List, Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import BaseModel, Field

from src.models.user import utcnow


class Question(BaseModel):
    id: str
    question: str
    options: List[str]  # always four
    correct_answer: int


class Quiz(Document):
    code: Indexed(str, unique=True)
    title: str
    description: str = ""
    questions: List[Question]
    created_by: PydanticObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "quizzes"


class QuizRecord(BaseModel):
    id: Optional[str] = None
    code: str
    title: str
    description: str = ""
    questions: List[Question]
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
