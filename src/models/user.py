from datetime import datetime, timezone
from typing import Optional

from beanie import Document, Indexed
from pydantic import BaseModel, Field

from src.models.enums import UserKind


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserStats(BaseModel):
    quizzes_joined: int = 0
    quizzes_created: int = 0
    average_score: int = 0
    best_score: int = 0


class User(Document):
    name: str
    email: Indexed(str, unique=True)
    password: str  # bcrypt hash
    kind: UserKind = UserKind.REGISTERED
    stats: UserStats = Field(default_factory=UserStats)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "users"


class UserRecord(BaseModel):
    """User as seen by services and clients; guests only ever exist in this form."""

    id: str
    name: str
    email: str = ""
    kind: UserKind = UserKind.REGISTERED
    stats: UserStats = Field(default_factory=UserStats)
    created_at: Optional[datetime] = None
    password_hash: Optional[str] = Field(default=None, exclude=True)

    @property
    def is_guest(self) -> bool:
        return self.kind == UserKind.GUEST
