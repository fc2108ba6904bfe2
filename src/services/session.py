"""Turning bearer-token claims into users and back.

Registered users are looked up in the database. Guests are never stored, so
their whole identity, stats included, travels inside the token.
"""

import uuid
from datetime import datetime, timezone

from fastapi import HTTPException

from src.helpers.jwt_handler import JWT
from src.models.enums import UserKind
from src.models.user import UserRecord, UserStats

GUEST_NAME = "Guest User"


def new_guest(name: str = None) -> UserRecord:
    return UserRecord(
        id=f"guest_{uuid.uuid4().hex}",
        name=(name or "").strip() or GUEST_NAME,
        email="",
        kind=UserKind.GUEST,
        stats=UserStats(),
        created_at=datetime.now(timezone.utc),
    )


def issue_token(user: UserRecord) -> str:
    payload = {"sub": user.id, "name": user.name, "kind": user.kind.value}
    if user.is_guest:
        payload["email"] = ""
        payload["stats"] = user.stats.model_dump()
    return JWT.encode(payload)


def guest_from_token(token: dict) -> UserRecord:
    return UserRecord(
        id=token["sub"],
        name=token.get("name") or GUEST_NAME,
        email="",
        kind=UserKind.GUEST,
        stats=UserStats(**(token.get("stats") or {})),
    )


async def resolve_user(repo, token: dict) -> UserRecord:
    if token.get("kind") == UserKind.GUEST.value:
        return guest_from_token(token)

    user = await repo.get_user_by_id(token["sub"])
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
