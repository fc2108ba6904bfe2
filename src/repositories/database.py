"""MongoDB access for the quiz platform.

Every method returns typed records instead of documents. Database failures
are logged and degrade to ``None``/``False``/``[]`` so a broken query never
takes a request down with it.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from beanie import PydanticObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from src.core.config import settings
from src.core.exceptions import QuizCodeConflict
from src.helpers.leaderboard import merge_best_score, rank_entries
from src.models.enums import AttemptState, UserKind
from src.models.leaderboard import LeaderboardEntry, LeaderboardRow
from src.models.quiz import Quiz, QuizRecord
from src.models.quiz_session import QuizAttemptState, UserQuizAttempt
from src.models.recent_activity import ActivityRecord, RecentActivity
from src.models.user import User, UserRecord, UserStats

logger = logging.getLogger(__name__)


def _object_id(value: str) -> Optional[PydanticObjectId]:
    try:
        return PydanticObjectId(value)
    except (InvalidId, TypeError):
        return None


def _user_record(user: User) -> UserRecord:
    return UserRecord(
        id=str(user.id),
        name=user.name,
        email=user.email,
        kind=user.kind,
        stats=user.stats,
        created_at=user.created_at,
        password_hash=user.password,
    )


def _quiz_record(quiz: Quiz) -> QuizRecord:
    return QuizRecord(
        id=str(quiz.id),
        code=quiz.code,
        title=quiz.title,
        description=quiz.description,
        questions=quiz.questions,
        created_by=str(quiz.created_by),
        created_at=quiz.created_at,
        updated_at=quiz.updated_at,
    )


def _leaderboard_row(entry: LeaderboardEntry) -> LeaderboardRow:
    return LeaderboardRow(
        quiz_id=str(entry.quiz_id),
        user_id=entry.user_id,
        user_name=entry.user_name,
        score=entry.score,
        completed_at=entry.completed_at,
    )


def _attempt_state(attempt: UserQuizAttempt) -> QuizAttemptState:
    return QuizAttemptState(
        id=str(attempt.id),
        quiz_id=str(attempt.quiz_id),
        **attempt.model_dump(include={
            "quiz_code", "user_id", "user_name", "state", "current_index", "answers",
            "question_started_at", "started_at", "completed_at", "score",
        }),
    )


class DatabaseRepository:
    def __init__(self, leaderboard_limit: int = None, recent_activity_limit: int = None):
        self.leaderboard_limit = leaderboard_limit or settings.leaderboard_limit
        self.recent_activity_limit = recent_activity_limit or settings.recent_activity_limit

    # Users

    async def create_user(self, email: str, name: str, kind: UserKind, password_hash: str) -> Optional[UserRecord]:
        if not email or not name:
            logger.error("Email and name are required to create a user")
            return None
        user = User(
            email=email.strip().lower(),
            name=name.strip(),
            kind=kind,
            password=password_hash,
        )
        try:
            await user.insert()
        except DuplicateKeyError:
            logger.warning("User with email %s already exists", user.email)
            return None
        except PyMongoError:
            logger.exception("Error creating user %s", user.email)
            return None
        return _user_record(user)

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        if not email:
            logger.error("Email is required")
            return None
        try:
            user = await User.find_one(User.email == email.strip().lower())
        except PyMongoError:
            logger.exception("Error fetching user by email")
            return None
        return _user_record(user) if user else None

    async def get_user_by_id(self, user_id: str) -> Optional[UserRecord]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        try:
            user = await User.get(oid)
        except PyMongoError:
            logger.exception("Error fetching user %s", user_id)
            return None
        return _user_record(user) if user else None

    async def update_user_stats(self, user_id: str, stats: UserStats) -> bool:
        oid = _object_id(user_id)
        if oid is None:
            logger.error("Cannot update stats of unknown user %s", user_id)
            return False
        try:
            result = await User.get_motor_collection().update_one(
                {"_id": oid},
                {"$set": {"stats": stats.model_dump(), "updated_at": datetime.now(timezone.utc)}},
            )
        except PyMongoError:
            logger.exception("Error updating user stats for %s", user_id)
            return False
        return result.matched_count == 1

    # Quizzes

    async def quiz_code_exists(self, code: str) -> bool:
        try:
            return await Quiz.find_one(Quiz.code == code) is not None
        except PyMongoError:
            # the unique index still rejects a real collision at insert time
            logger.exception("Error checking quiz code %s", code)
            return False

    async def create_quiz(self, quiz: QuizRecord) -> Optional[str]:
        oid = _object_id(quiz.created_by)
        if oid is None:
            logger.error("Quiz creator %s is not a stored user", quiz.created_by)
            return None
        document = Quiz(
            code=quiz.code,
            title=quiz.title,
            description=quiz.description,
            questions=quiz.questions,
            created_by=oid,
        )
        try:
            await document.insert()
        except DuplicateKeyError as exc:
            raise QuizCodeConflict(quiz.code) from exc
        except PyMongoError:
            logger.exception("Error creating quiz %r", quiz.title)
            return None
        return document.code

    async def get_quiz_by_code(self, code: str) -> Optional[QuizRecord]:
        try:
            quiz = await Quiz.find_one(Quiz.code == code)
        except PyMongoError:
            logger.exception("Error fetching quiz %s", code)
            return None
        return _quiz_record(quiz) if quiz else None

    async def get_quizzes_by_user(self, user_id: str) -> List[QuizRecord]:
        oid = _object_id(user_id)
        if oid is None:
            return []
        try:
            quizzes = await Quiz.find(Quiz.created_by == oid).sort("-created_at").to_list()
        except PyMongoError:
            logger.exception("Error fetching quizzes of user %s", user_id)
            return []
        return [_quiz_record(quiz) for quiz in quizzes]

    # Leaderboard

    async def submit_score(self, quiz_id: str, user_id: str, user_name: str, score: int) -> bool:
        oid = _object_id(quiz_id)
        if oid is None:
            logger.error("Cannot submit score for unknown quiz %s", quiz_id)
            return False
        logger.info("Submitting score %d for user %s on quiz %s", score, user_id, quiz_id)
        try:
            existing = await LeaderboardEntry.find_one(
                LeaderboardEntry.quiz_id == oid, LeaderboardEntry.user_id == user_id
            )
            row, changed = merge_best_score(
                _leaderboard_row(existing) if existing else None, quiz_id, user_id, user_name, score
            )
            if not changed:
                logger.info("New score not higher, keeping existing score %d", existing.score)
                return True
            if existing is None:
                try:
                    await LeaderboardEntry(
                        quiz_id=oid,
                        user_id=user_id,
                        user_name=row.user_name,
                        score=row.score,
                        completed_at=row.completed_at,
                    ).insert()
                    return True
                except DuplicateKeyError:
                    logger.info("Concurrent first submission for user %s, updating instead", user_id)
            await self._raise_score(oid, row)
        except PyMongoError:
            logger.exception("Error submitting score for user %s on quiz %s", user_id, quiz_id)
            return False
        return True

    async def _raise_score(self, quiz_oid: PydanticObjectId, row: LeaderboardRow):
        # compare-and-set so a slower, lower submission cannot overwrite a higher one
        await LeaderboardEntry.get_motor_collection().update_one(
            {"quiz_id": quiz_oid, "user_id": row.user_id, "score": {"$lt": row.score}},
            {"$set": {"score": row.score, "user_name": row.user_name, "completed_at": row.completed_at}},
        )

    async def get_leaderboard(self, quiz_id: str) -> List[LeaderboardRow]:
        oid = _object_id(quiz_id)
        if oid is None:
            return []
        try:
            entries = (
                await LeaderboardEntry.find(LeaderboardEntry.quiz_id == oid)
                .sort([("score", DESCENDING), ("completed_at", ASCENDING)])
                .limit(self.leaderboard_limit)
                .to_list()
            )
        except PyMongoError:
            logger.exception("Error fetching leaderboard for quiz %s", quiz_id)
            return []
        return rank_entries((_leaderboard_row(entry) for entry in entries), limit=self.leaderboard_limit)

    # Recent activity

    async def add_recent_activity(
        self, user_id: str, quiz_id: str, quiz_title: str, quiz_code: str, score: int
    ) -> bool:
        user_oid, quiz_oid = _object_id(user_id), _object_id(quiz_id)
        if user_oid is None or quiz_oid is None:
            logger.error("Cannot record activity for user %s on quiz %s", user_id, quiz_id)
            return False
        try:
            await RecentActivity(
                user_id=user_oid,
                quiz_id=quiz_oid,
                quiz_title=quiz_title,
                quiz_code=quiz_code,
                score=score,
            ).insert()

            stale = (
                await RecentActivity.find(RecentActivity.user_id == user_oid)
                .sort("-created_at")
                .skip(self.recent_activity_limit)
                .to_list()
            )
            if stale:
                await RecentActivity.find({"_id": {"$in": [activity.id for activity in stale]}}).delete()
        except PyMongoError:
            logger.exception("Error adding recent activity for user %s", user_id)
            return False
        return True

    async def get_recent_activities(self, user_id: str) -> List[ActivityRecord]:
        oid = _object_id(user_id)
        if oid is None:
            return []
        try:
            activities = (
                await RecentActivity.find(RecentActivity.user_id == oid)
                .sort("-created_at")
                .limit(self.recent_activity_limit)
                .to_list()
            )
        except PyMongoError:
            logger.exception("Error fetching recent activities for user %s", user_id)
            return []
        return [
            ActivityRecord(
                quiz_id=str(activity.quiz_id),
                quiz_title=activity.quiz_title,
                quiz_code=activity.quiz_code,
                score=activity.score,
                created_at=activity.created_at,
            )
            for activity in activities
        ]

    # Attempts

    async def create_attempt(self, attempt: QuizAttemptState) -> Optional[QuizAttemptState]:
        quiz_oid = _object_id(attempt.quiz_id)
        if quiz_oid is None:
            return None
        document = UserQuizAttempt(
            quiz_id=quiz_oid,
            **attempt.model_dump(exclude={"id", "quiz_id"}),
        )
        try:
            await document.insert()
        except PyMongoError:
            logger.exception("Error creating attempt for quiz %s", attempt.quiz_code)
            return None
        return _attempt_state(document)

    async def get_attempt(self, attempt_id: str) -> Optional[QuizAttemptState]:
        oid = _object_id(attempt_id)
        if oid is None:
            return None
        try:
            attempt = await UserQuizAttempt.get(oid)
        except PyMongoError:
            logger.exception("Error fetching attempt %s", attempt_id)
            return None
        return _attempt_state(attempt) if attempt else None

    async def save_attempt(self, attempt: QuizAttemptState, expected_state: AttemptState, expected_answered: int) -> bool:
        """Write attempt progress only if nobody moved it on since it was read.

        Returns ``False`` when another request won the race or the write failed.
        """
        oid = _object_id(attempt.id)
        if oid is None:
            return False
        fields = attempt.model_dump(include={
            "current_index", "answers", "question_started_at", "started_at", "completed_at", "score",
        })
        fields["state"] = attempt.state.value
        try:
            result = await UserQuizAttempt.get_motor_collection().update_one(
                {"_id": oid, "state": expected_state.value, "answers": {"$size": expected_answered}},
                {"$set": fields},
            )
        except PyMongoError:
            logger.exception("Error saving attempt %s", attempt.id)
            return False
        if result.matched_count != 1:
            logger.info("Attempt %s was changed by another request", attempt.id)
            return False
        return True

    # Platform counters

    async def count_users(self) -> Optional[int]:
        return await self._count(User, "users")

    async def count_quizzes(self) -> Optional[int]:
        return await self._count(Quiz, "quizzes")

    async def count_leaderboard_entries(self) -> Optional[int]:
        return await self._count(LeaderboardEntry, "leaderboard entries")

    async def _count(self, document, label: str) -> Optional[int]:
        try:
            return await document.count()
        except PyMongoError:
            logger.exception("Error counting %s", label)
            return None


def get_repository() -> DatabaseRepository:
    return DatabaseRepository()
