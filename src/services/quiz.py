import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, HTTPException

from src.core.config import settings
from src.core.exceptions import InvalidAttemptTransition, QuizCodeConflict
from src.helpers.code_generator import generate_unique_code, is_valid_code
from src.helpers.leaderboard import summarize
from src.helpers.quiz_runner import QuizRunner
from src.helpers.scoring import apply_attempt, apply_quiz_created, calculate_score, count_correct
from src.models.enums import AttemptState
from src.models.quiz import Question, QuizRecord
from src.models.quiz_session import QuizAttemptState
from src.repositories.database import DatabaseRepository, get_repository
from src.schemas.req.quiz import AnswerReq, AnswerSheetReq, QuizCreateDTO
from src.schemas.res.quiz import (
    AttemptResponse,
    AttemptResult,
    QuestionResponse,
    QuizCreatedResponse,
    QuizLinks,
    QuizManageResponse,
    QuizPublicResponse,
)
from src.services.session import issue_token, resolve_user

logger = logging.getLogger(__name__)

CREATE_ATTEMPTS = 3


def quiz_links(code: str) -> QuizLinks:
    base = f"{settings.public_base_url}/quiz/{code}"
    return QuizLinks(join_url=base, manage_url=f"{base}/manage", leaderboard_url=f"{base}/leaderboard")


def public_question(question: Question) -> QuestionResponse:
    return QuestionResponse(id=question.id, question=question.question, options=question.options)


class QuizService:
    def __init__(self, repo: DatabaseRepository = Depends(get_repository)):
        self.repo = repo
        self.time_limit = settings.question_time_limit

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    async def create_quiz(self, quiz_data: QuizCreateDTO, token: dict) -> QuizCreatedResponse:
        """Store a new quiz under a fresh join code and bump the author's stats."""
        questions = [
            Question(
                id=uuid.uuid4().hex,
                question=q.question.strip(),
                options=[option.strip() for option in q.options],
                correct_answer=q.correct_answer,
            )
            for q in quiz_data.questions
            if q.is_complete
        ]
        if not questions:
            raise HTTPException(status_code=422, detail="Please add at least one complete question")

        author = await resolve_user(self.repo, token)

        code = None
        for _ in range(CREATE_ATTEMPTS):
            candidate = await generate_unique_code(self.repo.quiz_code_exists, settings.code_max_attempts)
            record = QuizRecord(
                code=candidate,
                title=quiz_data.title,
                description=quiz_data.description.strip(),
                questions=questions,
                created_by=author.id,
            )
            try:
                code = await self.repo.create_quiz(record)
            except QuizCodeConflict:
                logger.warning("Quiz code %s was taken concurrently, retrying", candidate)
                continue
            break

        if not code:
            raise HTTPException(status_code=500, detail="Failed to create quiz. Please try again.")

        logger.info("Quiz created: %s - %s", code, quiz_data.title)
        if not await self.repo.update_user_stats(author.id, apply_quiz_created(author.stats)):
            logger.error("Could not update quiz count for user %s", author.id)

        return QuizCreatedResponse(code=code, links=quiz_links(code))

    async def get_quiz(self, code: str) -> QuizRecord:
        code = code.strip().upper()
        if not is_valid_code(code):
            raise HTTPException(status_code=404, detail="Quiz not found")
        quiz = await self.repo.get_quiz_by_code(code)
        if not quiz:
            raise HTTPException(status_code=404, detail="Quiz not found")
        return quiz

    async def get_public_quiz(self, code: str) -> QuizPublicResponse:
        quiz = await self.get_quiz(code)
        return QuizPublicResponse(
            code=quiz.code,
            title=quiz.title,
            description=quiz.description,
            question_count=len(quiz.questions),
            time_limit=self.time_limit,
            questions=[public_question(q) for q in quiz.questions],
        )

    async def get_manage_view(self, code: str, token: dict) -> QuizManageResponse:
        quiz = await self.get_quiz(code)
        if quiz.created_by != token.get("sub"):
            raise HTTPException(status_code=403, detail="Only the quiz creator can manage this quiz")
        rows = await self.repo.get_leaderboard(quiz.id)
        return QuizManageResponse(quiz=quiz, links=quiz_links(quiz.code), summary=summarize(rows))

    async def start_quiz_attempt(self, code: str, token: dict) -> AttemptResponse:
        quiz = await self.get_quiz(code)
        user = await resolve_user(self.repo, token)

        attempt = QuizAttemptState(quiz_id=quiz.id, quiz_code=quiz.code, user_id=user.id, user_name=user.name)
        runner = QuizRunner(quiz.questions, attempt, self.time_limit)
        runner.start(self.now())

        created = await self.repo.create_attempt(runner.attempt)
        if not created:
            raise HTTPException(status_code=500, detail="Could not start the quiz. Please try again.")
        return self._attempt_response(QuizRunner(quiz.questions, created, self.time_limit))

    async def get_attempt(self, attempt_id: str, token: dict) -> AttemptResponse:
        """Current attempt status; questions whose time ran out are recorded as unanswered."""
        attempt, quiz = await self._load_attempt(attempt_id, token)
        runner = QuizRunner(quiz.questions, attempt, self.time_limit)

        expected = (attempt.state, len(attempt.answers))
        if not runner.expire(self.now()):
            return self._attempt_response(runner)

        result = None
        # only the request whose save lands may score a completion
        if await self.repo.save_attempt(runner.attempt, *expected) and runner.completed:
            result = await self._finish(quiz, token, runner.attempt.score, runner.correct_count)
        return self._attempt_response(runner, result)

    async def answer_question(self, attempt_id: str, answer: AnswerReq, token: dict) -> AttemptResponse:
        attempt, quiz = await self._load_attempt(attempt_id, token)
        runner = QuizRunner(quiz.questions, attempt, self.time_limit)

        expected = (attempt.state, len(attempt.answers))
        try:
            runner.answer(answer.question_index, answer.option_index, self.now())
        except InvalidAttemptTransition as exc:
            if len(runner.attempt.answers) == expected[1]:
                raise HTTPException(status_code=409, detail=str(exc))
            # timeouts advanced the attempt before the answer was rejected
            claimed = await self.repo.save_attempt(runner.attempt, *expected)
            if not (claimed and runner.completed):
                raise HTTPException(status_code=409, detail=str(exc))
            logger.info("Attempt %s ran out of time before its last answer arrived", attempt.id)
            result = await self._finish(quiz, token, runner.attempt.score, runner.correct_count)
            return self._attempt_response(runner, result)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc))

        if not await self.repo.save_attempt(runner.attempt, *expected):
            raise HTTPException(status_code=409, detail="Your answer could not be saved. Please reload the quiz.")

        result = None
        if runner.completed:
            result = await self._finish(quiz, token, runner.attempt.score, runner.correct_count)
        return self._attempt_response(runner, result)

    async def submit_answers(self, code: str, sheet: AnswerSheetReq, token: dict) -> AttemptResult:
        """Score a full answer sheet from a client that ran the countdown itself."""
        quiz = await self.get_quiz(code)
        if len(sheet.answers) != len(quiz.questions):
            raise HTTPException(
                status_code=422,
                detail=f"Expected {len(quiz.questions)} answers, got {len(sheet.answers)}",
            )
        score = calculate_score(sheet.answers, quiz.questions)
        return await self._finish(quiz, token, score, count_correct(sheet.answers, quiz.questions))

    async def _load_attempt(self, attempt_id: str, token: dict):
        attempt = await self.repo.get_attempt(attempt_id)
        if not attempt:
            raise HTTPException(status_code=404, detail="Quiz attempt not found")
        if attempt.user_id != token.get("sub"):
            raise HTTPException(status_code=403, detail="You can't access someone else's quiz attempt")

        quiz = await self.repo.get_quiz_by_code(attempt.quiz_code)
        if not quiz:
            raise HTTPException(status_code=404, detail="Quiz not found")
        return attempt, quiz

    async def _finish(self, quiz: QuizRecord, token: dict, score: int, correct: int) -> AttemptResult:
        """Record a completed attempt: leaderboard, stats and recent activity."""
        user = await resolve_user(self.repo, token)
        result = AttemptResult(score=score, correct_count=correct, total_questions=len(quiz.questions))

        if not await self.repo.submit_score(quiz.id, user.id, user.name, score):
            logger.error("Score %d of user %s on quiz %s was not saved", score, user.id, quiz.code)

        stats = apply_attempt(user.stats, score)
        result.stats = stats
        if user.is_guest:
            result.access_token = issue_token(user.model_copy(update={"stats": stats}))
            return result

        if not await self.repo.update_user_stats(user.id, stats):
            logger.error("Could not update stats of user %s", user.id)
        if not await self.repo.add_recent_activity(user.id, quiz.id, quiz.title, quiz.code, score):
            logger.error("Could not record activity of user %s", user.id)
        return result

    def _attempt_response(self, runner: QuizRunner, result: Optional[AttemptResult] = None) -> AttemptResponse:
        attempt = runner.attempt
        if result is None and attempt.state == AttemptState.COMPLETED:
            result = AttemptResult(
                score=attempt.score,
                correct_count=runner.correct_count,
                total_questions=len(runner.questions),
            )
        question = runner.current_question
        return AttemptResponse(
            attempt_id=attempt.id,
            quiz_code=attempt.quiz_code,
            state=attempt.state,
            current_index=attempt.current_index,
            total_questions=len(runner.questions),
            answered=len(attempt.answers),
            time_left=runner.time_left(self.now()),
            question=public_question(question) if question else None,
            started_at=attempt.started_at,
            completed_at=attempt.completed_at,
            result=result,
        )
