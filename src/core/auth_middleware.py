from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.helpers.jwt_handler import JWT
from src.models.enums import UserKind

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Claims of the bearer token; guests and registered users alike."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = JWT.decode(credentials.credentials)
    if payload is None or "sub" not in payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return payload


async def get_registered_user(token: dict = Depends(get_current_user)) -> dict:
    if token.get("kind") != UserKind.REGISTERED.value:
        raise HTTPException(status_code=403, detail="Sign in with a registered account to do this")
    return token
