from fastapi import APIRouter, Depends

from src.core.auth_middleware import get_current_user, get_registered_user
from src.schemas.req.quiz import AnswerReq, AnswerSheetReq, QuizCreateDTO
from src.schemas.res.leaderboard import LeaderboardResponse
from src.schemas.res.quiz import (
    AttemptResponse,
    AttemptResult,
    QuizCreatedResponse,
    QuizManageResponse,
    QuizPublicResponse,
)
from src.services.leaderboard import LeaderboardService
from src.services.quiz import QuizService

quiz_router = APIRouter()


@quiz_router.post("", response_model=QuizCreatedResponse, status_code=201)
async def create_quiz(
    quiz_data: QuizCreateDTO,
    token: dict = Depends(get_registered_user),
    quiz_service: QuizService = Depends(QuizService),
):
    """Create a quiz and get its join code"""
    return await quiz_service.create_quiz(quiz_data, token)


@quiz_router.get("/attempts/{attempt_id}", response_model=AttemptResponse)
async def get_attempt(
    attempt_id: str,
    token: dict = Depends(get_current_user),
    quiz_service: QuizService = Depends(QuizService),
):
    return await quiz_service.get_attempt(attempt_id, token)


@quiz_router.post("/attempts/{attempt_id}/answer", response_model=AttemptResponse)
async def answer_question(
    attempt_id: str,
    answer: AnswerReq,
    token: dict = Depends(get_current_user),
    quiz_service: QuizService = Depends(QuizService),
):
    """Answer the current question and move to the next one"""
    return await quiz_service.answer_question(attempt_id, answer, token)


@quiz_router.get("/{code}", response_model=QuizPublicResponse)
async def get_quiz(code: str, quiz_service: QuizService = Depends(QuizService)):
    return await quiz_service.get_public_quiz(code)


@quiz_router.get("/{code}/manage", response_model=QuizManageResponse)
async def manage_quiz(
    code: str,
    token: dict = Depends(get_registered_user),
    quiz_service: QuizService = Depends(QuizService),
):
    return await quiz_service.get_manage_view(code, token)


@quiz_router.get("/{code}/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(code: str, leaderboard_service: LeaderboardService = Depends(LeaderboardService)):
    return await leaderboard_service.get_leaderboard(code)


@quiz_router.post("/{code}/attempts", response_model=AttemptResponse, status_code=201)
async def start_quiz_attempt(
    code: str,
    token: dict = Depends(get_current_user),
    quiz_service: QuizService = Depends(QuizService),
):
    """Start a timed attempt"""
    return await quiz_service.start_quiz_attempt(code, token)


@quiz_router.post("/{code}/submit", response_model=AttemptResult)
async def submit_answers(
    code: str,
    sheet: AnswerSheetReq,
    token: dict = Depends(get_current_user),
    quiz_service: QuizService = Depends(QuizService),
):
    """Submit every answer at once and record the score"""
    return await quiz_service.submit_answers(code, sheet, token)
