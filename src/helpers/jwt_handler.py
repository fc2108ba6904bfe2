from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from src.core.config import settings


class JWT:
    @staticmethod
    def encode(payload: dict, expires_minutes: int = None) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            **payload,
            "iat": now,
            "exp": now + timedelta(minutes=expires_minutes or settings.jwt_expires_minutes),
        }
        return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)

    @staticmethod
    def decode(token: str) -> Optional[dict]:
        """Return the token's claims, or None when it is expired or tampered with."""
        try:
            return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None
