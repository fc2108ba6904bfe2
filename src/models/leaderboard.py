from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field
from pymongo import ASCENDING, DESCENDING, IndexModel

from src.models.user import utcnow


class LeaderboardEntry(Document):
    quiz_id: PydanticObjectId
    user_id: str  # guest ids are not ObjectIds
    user_name: str
    score: int
    completed_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "leaderboard_entries"
        indexes = [
            IndexModel([("quiz_id", ASCENDING), ("user_id", ASCENDING)], unique=True),
            IndexModel([("quiz_id", ASCENDING), ("score", DESCENDING), ("completed_at", ASCENDING)]),
        ]


class LeaderboardRow(BaseModel):
    quiz_id: str
    user_id: str
    user_name: str
    score: int = Field(ge=0, le=100)
    completed_at: datetime
