from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration read from the environment (and `.env`)."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    mongodb_url: str = "mongodb://mongodb:27017/quizcode"
    mongodb_db: str = "quizcode"

    jwt_secret: str = "change-me-quizcode-development-secret"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60 * 24 * 7

    public_base_url: str = "http://localhost:3000"
    # comma separated
    cors_origins: str = "*"

    question_time_limit: int = 30
    leaderboard_limit: int = 100
    recent_activity_limit: int = 10
    code_max_attempts: int = 100

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 9005

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
