import logging

from fastapi import Depends, HTTPException

from src.helpers.password import PasswordHandler
from src.models.enums import UserKind
from src.repositories.database import DatabaseRepository, get_repository
from src.schemas.req.user import GuestLoginReq, UserCreateReq, UserLoginReq
from src.schemas.res.user import TokenResponse
from src.services.session import issue_token, new_guest

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, repo: DatabaseRepository = Depends(get_repository)):
        self.repo = repo

    async def register(self, req: UserCreateReq) -> TokenResponse:
        if await self.repo.get_user_by_email(req.email):
            raise HTTPException(status_code=409, detail="User with this email already exists")

        user = await self.repo.create_user(
            req.email, req.name, UserKind.REGISTERED, PasswordHandler.hash(req.password)
        )
        if not user:
            raise HTTPException(status_code=500, detail="Failed to create account")

        logger.info("Registered user %s", user.id)
        return TokenResponse(access_token=issue_token(user), user=user)

    async def login(self, req: UserLoginReq) -> TokenResponse:
        user = await self.repo.get_user_by_email(req.email)
        if not user or not user.password_hash or not PasswordHandler.verify(req.password, user.password_hash):
            raise HTTPException(status_code=401, detail="Invalid email or password")
        return TokenResponse(access_token=issue_token(user), user=user)

    async def login_as_guest(self, req: GuestLoginReq) -> TokenResponse:
        """Guests get a signed session only; nothing is written to the database."""
        guest = new_guest(req.name)
        return TokenResponse(access_token=issue_token(guest), user=guest)
