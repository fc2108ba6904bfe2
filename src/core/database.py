import logging

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from src.core.config import settings
from src.models.leaderboard import LeaderboardEntry
from src.models.quiz import Quiz
from src.models.quiz_session import UserQuizAttempt
from src.models.recent_activity import RecentActivity
from src.models.user import User

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [User, Quiz, LeaderboardEntry, RecentActivity, UserQuizAttempt]

client = None
db = None


async def init_db():
    global client, db
    client = AsyncIOMotorClient(settings.mongodb_url, tz_aware=True)
    db = client[settings.mongodb_db]
    await init_beanie(database=db, document_models=DOCUMENT_MODELS)
    logger.info("Connected to MongoDB database %s", settings.mongodb_db)


def close_db():
    global client
    if client is not None:
        client.close()
        client = None
