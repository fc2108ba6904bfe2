"""Quiz-taking flow: not started -> in progress -> completed.

Each question runs on its own countdown. There is no background timer: the
caller passes the current time and expired questions are recorded as
``TIMEOUT_ANSWER`` whenever the runner is touched.
"""

from datetime import datetime, timedelta
from typing import Optional, Sequence

from src.core.exceptions import InvalidAttemptTransition
from src.helpers.scoring import TIMEOUT_ANSWER, calculate_score, count_correct
from src.models.enums import AttemptState
from src.models.quiz import Question
from src.models.quiz_session import QuizAttemptState

QUESTION_TIME_LIMIT = 30


class QuizRunner:
    def __init__(
        self,
        questions: Sequence[Question],
        attempt: QuizAttemptState,
        time_limit: int = QUESTION_TIME_LIMIT,
    ):
        if not questions:
            raise ValueError("Quiz has no questions")
        self.questions = list(questions)
        self.attempt = attempt
        self.time_limit = timedelta(seconds=time_limit)

    @property
    def state(self) -> AttemptState:
        return self.attempt.state

    @property
    def completed(self) -> bool:
        return self.attempt.state == AttemptState.COMPLETED

    @property
    def current_question(self) -> Optional[Question]:
        if self.attempt.state != AttemptState.IN_PROGRESS:
            return None
        return self.questions[self.attempt.current_index]

    @property
    def correct_count(self) -> int:
        return count_correct(self.attempt.answers, self.questions)

    def start(self, now: datetime) -> QuizAttemptState:
        if self.attempt.state != AttemptState.NOT_STARTED:
            raise InvalidAttemptTransition("Quiz attempt already started")
        self.attempt.state = AttemptState.IN_PROGRESS
        self.attempt.current_index = 0
        self.attempt.answers = []
        self.attempt.started_at = now
        self.attempt.question_started_at = now
        return self.attempt

    def time_left(self, now: datetime) -> int:
        if self.attempt.state != AttemptState.IN_PROGRESS:
            return 0
        remaining = self.attempt.question_started_at + self.time_limit - now
        return max(0, int(remaining.total_seconds()))

    def expire(self, now: datetime) -> int:
        """Record a timeout for every question whose countdown ran out."""
        expired = 0
        while self.attempt.state == AttemptState.IN_PROGRESS:
            deadline = self.attempt.question_started_at + self.time_limit
            if now < deadline:
                break
            self._record(TIMEOUT_ANSWER, deadline)
            expired += 1
        return expired

    def answer(self, question_index: int, option_index: Optional[int], now: datetime) -> QuizAttemptState:
        """Record the choice for the current question and move on.

        ``option_index=None`` means "next" was pressed without a selection.
        """
        if self.attempt.state == AttemptState.NOT_STARTED:
            raise InvalidAttemptTransition("Quiz attempt has not been started")

        self.expire(now)
        if self.completed:
            raise InvalidAttemptTransition("Quiz attempt is already completed")
        if question_index != self.attempt.current_index:
            raise InvalidAttemptTransition(
                f"Question {question_index} is not the current question ({self.attempt.current_index})"
            )

        question = self.questions[question_index]
        if option_index is not None and not 0 <= option_index < len(question.options):
            raise ValueError(f"Option index must be between 0 and {len(question.options) - 1}")

        self._record(TIMEOUT_ANSWER if option_index is None else option_index, now)
        return self.attempt

    def _record(self, choice: int, at: datetime):
        self.attempt.answers.append(choice)
        if self.attempt.current_index < len(self.questions) - 1:
            self.attempt.current_index += 1
            self.attempt.question_started_at = at
            return

        self.attempt.state = AttemptState.COMPLETED
        self.attempt.completed_at = at
        self.attempt.question_started_at = None
        self.attempt.score = calculate_score(self.attempt.answers, self.questions)
