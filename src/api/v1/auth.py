from fastapi import APIRouter, Depends

from src.schemas.req.user import GuestLoginReq, UserCreateReq, UserLoginReq
from src.schemas.res.user import TokenResponse
from src.services.auth import AuthService

auth_router = APIRouter()


@auth_router.post("/register", response_model=TokenResponse, status_code=201)
async def register(req: UserCreateReq, auth_service: AuthService = Depends(AuthService)):
    return await auth_service.register(req)


@auth_router.post("/login", response_model=TokenResponse)
async def login(req: UserLoginReq, auth_service: AuthService = Depends(AuthService)):
    return await auth_service.login(req)


@auth_router.post("/guest", response_model=TokenResponse)
async def login_as_guest(req: GuestLoginReq = None, auth_service: AuthService = Depends(AuthService)):
    """Start an ephemeral guest session"""
    return await auth_service.login_as_guest(req or GuestLoginReq())
