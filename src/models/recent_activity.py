from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field
from pymongo import ASCENDING, DESCENDING, IndexModel

from src.models.user import utcnow


class RecentActivity(Document):
    user_id: PydanticObjectId
    quiz_id: PydanticObjectId
    quiz_title: str
    quiz_code: str
    score: int
    created_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "recent_activities"
        indexes = [IndexModel([("user_id", ASCENDING), ("created_at", DESCENDING)])]


class ActivityRecord(BaseModel):
    quiz_id: str
    quiz_title: str
    quiz_code: str
    score: int
    created_at: datetime
