import math
from typing import Sequence

from src.models.quiz import Question
from src.models.user import UserStats

TIMEOUT_ANSWER = -1


def round_half_up(value: float) -> int:
    """Round like the web client does: .5 always goes up."""
    return int(math.floor(value + 0.5))


def count_correct(answers: Sequence[int], questions: Sequence[Question]) -> int:
    return sum(1 for answer, question in zip(answers, questions) if answer == question.correct_answer)


def calculate_score(answers: Sequence[int], questions: Sequence[Question]) -> int:
    """Percentage of correct answers, 0-100."""
    if not questions:
        return 0
    return round_half_up(100 * count_correct(answers, questions) / len(questions))


def apply_attempt(stats: UserStats, score: int) -> UserStats:
    """Fold a finished attempt into a user's running stats."""
    joined = stats.quizzes_joined + 1
    return stats.model_copy(
        update={
            "quizzes_joined": joined,
            "average_score": round_half_up((stats.average_score * stats.quizzes_joined + score) / joined),
            "best_score": max(stats.best_score, score),
        }
    )


def apply_quiz_created(stats: UserStats) -> UserStats:
    return stats.model_copy(update={"quizzes_created": stats.quizzes_created + 1})
