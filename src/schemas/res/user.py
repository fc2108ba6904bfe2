from typing import List

from pydantic import BaseModel

from src.models.recent_activity import ActivityRecord
from src.models.user import UserRecord


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRecord


class RecentActivityResponse(BaseModel):
    activities: List[ActivityRecord]
