from datetime import datetime, timedelta, timezone

import pytest

from src.core.exceptions import InvalidAttemptTransition
from src.helpers.quiz_runner import QuizRunner
from src.models.enums import AttemptState
from src.models.quiz import Question
from src.models.quiz_session import QuizAttemptState

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def at(seconds):
    return T0 + timedelta(seconds=seconds)


@pytest.fixture
def questions():
    return [
        Question(id="q1", question="One", options=["a", "b", "c", "d"], correct_answer=0),
        Question(id="q2", question="Two", options=["a", "b", "c", "d"], correct_answer=1),
        Question(id="q3", question="Three", options=["a", "b", "c", "d"], correct_answer=2),
    ]


@pytest.fixture
def runner(questions):
    attempt = QuizAttemptState(quiz_id="quiz-1", quiz_code="ABC123", user_id="u1", user_name="U")
    return QuizRunner(questions, attempt, time_limit=30)


def test_start_moves_to_in_progress(runner, questions):
    assert runner.state == AttemptState.NOT_STARTED
    assert runner.current_question is None

    runner.start(T0)

    assert runner.state == AttemptState.IN_PROGRESS
    assert runner.current_question == questions[0]
    assert runner.time_left(T0) == 30


def test_cannot_start_twice(runner):
    runner.start(T0)
    with pytest.raises(InvalidAttemptTransition):
        runner.start(at(1))


def test_cannot_answer_before_start(runner):
    with pytest.raises(InvalidAttemptTransition):
        runner.answer(0, 0, T0)


def test_answering_all_questions_completes_with_score(runner):
    runner.start(T0)
    runner.answer(0, 0, at(5))
    runner.answer(1, 1, at(10))
    assert runner.state == AttemptState.IN_PROGRESS

    runner.answer(2, 3, at(15))

    assert runner.completed
    assert runner.attempt.answers == [0, 1, 3]
    assert runner.attempt.score == 67
    assert runner.attempt.completed_at == at(15)
    assert runner.correct_count == 2
    assert runner.time_left(at(16)) == 0


def test_next_without_selection_records_no_answer(runner):
    runner.start(T0)
    runner.answer(0, None, at(3))
    assert runner.attempt.answers == [-1]
    assert runner.attempt.current_index == 1


def test_countdown_resets_per_question(runner):
    runner.start(T0)
    runner.answer(0, 0, at(20))
    assert runner.time_left(at(25)) == 25


def test_timeout_auto_advances_with_sentinel(runner):
    runner.start(T0)

    assert runner.expire(at(29)) == 0
    assert runner.expire(at(30)) == 1

    assert runner.attempt.answers == [-1]
    assert runner.attempt.current_index == 1
    assert runner.time_left(at(45)) == 15


def test_long_idle_times_out_every_question(runner):
    runner.start(T0)
    assert runner.expire(at(300)) == 3

    assert runner.completed
    assert runner.attempt.answers == [-1, -1, -1]
    assert runner.attempt.score == 0
    assert runner.attempt.completed_at == at(90)


def test_answer_for_timed_out_question_is_rejected(runner):
    runner.start(T0)
    with pytest.raises(InvalidAttemptTransition):
        runner.answer(0, 0, at(31))
    # the timeout itself is still recorded
    assert runner.attempt.answers == [-1]
    runner.answer(1, 1, at(35))
    assert runner.attempt.answers == [-1, 1]


def test_answer_after_completion_is_rejected(runner):
    runner.start(T0)
    for index in range(3):
        runner.answer(index, 0, at(index + 1))
    with pytest.raises(InvalidAttemptTransition):
        runner.answer(2, 0, at(10))


def test_option_out_of_range(runner):
    runner.start(T0)
    with pytest.raises(ValueError):
        runner.answer(0, 4, at(1))


def test_retake_is_an_independent_attempt(questions, runner):
    runner.start(T0)
    runner.expire(at(500))

    retake = QuizRunner(
        questions, QuizAttemptState(quiz_id="quiz-1", quiz_code="ABC123", user_id="u1", user_name="U")
    )
    retake.start(at(600))
    for index, question in enumerate(questions):
        retake.answer(index, question.correct_answer, at(601 + index))

    assert runner.attempt.score == 0
    assert retake.attempt.score == 100


def test_quiz_without_questions_is_rejected():
    with pytest.raises(ValueError):
        QuizRunner([], QuizAttemptState(quiz_id="q", quiz_code="ABC123", user_id="u", user_name="U"))
