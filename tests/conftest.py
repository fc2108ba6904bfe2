import asyncio
import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from main import app
from src.core.exceptions import QuizCodeConflict
from src.helpers.leaderboard import rank_entries, submit_score
from src.models.recent_activity import ActivityRecord
from src.models.user import UserRecord
from src.repositories.database import get_repository


class InMemoryRepository:
    """Stand-in for DatabaseRepository backed by plain dicts."""

    def __init__(self):
        self.users = {}
        self.quizzes = {}
        self.leaderboards = {}
        self.activities = {}
        self.attempts = {}
        self.stats_updates = []

    async def create_user(self, email, name, kind, password_hash):
        user = UserRecord(
            id=uuid.uuid4().hex,
            name=name.strip(),
            email=email.strip().lower(),
            kind=kind,
            created_at=datetime.now(timezone.utc),
            password_hash=password_hash,
        )
        self.users[user.id] = user
        return user

    async def get_user_by_email(self, email):
        email = email.strip().lower()
        return next((user for user in self.users.values() if user.email == email), None)

    async def get_user_by_id(self, user_id):
        return self.users.get(user_id)

    async def update_user_stats(self, user_id, stats):
        self.stats_updates.append((user_id, stats))
        if user_id not in self.users:
            return False
        self.users[user_id] = self.users[user_id].model_copy(update={"stats": stats})
        return True

    async def quiz_code_exists(self, code):
        return code in self.quizzes

    async def create_quiz(self, quiz):
        if quiz.code in self.quizzes:
            raise QuizCodeConflict(quiz.code)
        now = datetime.now(timezone.utc)
        self.quizzes[quiz.code] = quiz.model_copy(
            update={"id": uuid.uuid4().hex, "created_at": now, "updated_at": now}
        )
        return quiz.code

    async def get_quiz_by_code(self, code):
        return self.quizzes.get(code)

    async def get_quizzes_by_user(self, user_id):
        quizzes = [quiz for quiz in self.quizzes.values() if quiz.created_by == user_id]
        return sorted(quizzes, key=lambda quiz: quiz.created_at, reverse=True)

    async def submit_score(self, quiz_id, user_id, user_name, score):
        entries = self.leaderboards.get(quiz_id, [])
        self.leaderboards[quiz_id] = submit_score(entries, user_id, user_name, score, quiz_id=quiz_id)
        return True

    async def get_leaderboard(self, quiz_id):
        return rank_entries(self.leaderboards.get(quiz_id, []))

    async def add_recent_activity(self, user_id, quiz_id, quiz_title, quiz_code, score):
        activity = ActivityRecord(
            quiz_id=quiz_id,
            quiz_title=quiz_title,
            quiz_code=quiz_code,
            score=score,
            created_at=datetime.now(timezone.utc),
        )
        self.activities[user_id] = ([activity] + self.activities.get(user_id, []))[:10]
        return True

    async def get_recent_activities(self, user_id):
        return list(self.activities.get(user_id, []))

    async def create_attempt(self, attempt):
        stored = attempt.model_copy(update={"id": uuid.uuid4().hex}, deep=True)
        self.attempts[stored.id] = stored
        return stored.model_copy(deep=True)

    async def get_attempt(self, attempt_id):
        attempt = self.attempts.get(attempt_id)
        return attempt.model_copy(deep=True) if attempt else None

    async def save_attempt(self, attempt, expected_state, expected_answered):
        stored = self.attempts.get(attempt.id)
        if stored is None or stored.state != expected_state or len(stored.answers) != expected_answered:
            return False
        self.attempts[attempt.id] = attempt.model_copy(deep=True)
        return True

    async def count_users(self):
        return len(self.users)

    async def count_quizzes(self):
        return len(self.quizzes)

    async def count_leaderboard_entries(self):
        return sum(len(entries) for entries in self.leaderboards.values())


class InterleavingRepository(InMemoryRepository):
    """Hands control back to the event loop after every attempt read."""

    async def get_attempt(self, attempt_id):
        attempt = await super().get_attempt(attempt_id)
        await asyncio.sleep(0)
        return attempt


class BrokenRepository(InMemoryRepository):
    """Every read fails the way DatabaseRepository reports database errors."""

    async def count_users(self):
        return None

    async def count_quizzes(self):
        return None

    async def count_leaderboard_entries(self):
        return None

    async def get_leaderboard(self, quiz_id):
        return []

    async def submit_score(self, quiz_id, user_id, user_name, score):
        return False


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def client(repo):
    app.dependency_overrides[get_repository] = lambda: repo
    # no context manager: the lifespan would try to reach MongoDB
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    def _register(name="Ada", email="ada@example.com", password="secret123"):
        response = client.post(
            "/api/v1/auth/register", json={"name": name, "email": email, "password": password}
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def guest(client):
    def _guest(name=None):
        response = client.post("/api/v1/auth/guest", json={"name": name} if name else {})
        assert response.status_code == 200, response.text
        return response.json()

    return _guest


@pytest.fixture
def sample_quiz():
    return {
        "title": "Sample",
        "description": "One question",
        "questions": [
            {"question": "Pick the third", "options": ["a", "b", "c", "d"], "correct_answer": 2},
        ],
    }
