# app/core/config.py

from typing import Optional
from urllib.parse import quote_plus

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: Optional[str] = "Bazaar"
    APP_VERSION: Optional[str] = None
    APP_ENV: Optional[str] = None

    # URLs
    ALLOWED_ORIGINS: Optional[str] = None
    # DATABASE
    DB_HOST: Optional[str] = "localhost"
    DB_PORT: Optional[int] = 5432
    POSTGRES_USER: Optional[str] = "postgres"
    POSTGRES_PASSWORD: Optional[str] = ""
    POSTGRES_DB: Optional[str] = "bazaar"
    # CACHING
    REDIS_URL: Optional[str] = "redis://localhost:6379/0"
    # SECURITY
    IP_HASH_SALT: Optional[str] = ""
    LOG_RETENTION_DAYS: Optional[int] = 7
    # SESSIONS
    SESSION_COOKIE_NAME: str = "session_token"
    SESSION_TTL_DAYS: int = 7
    SESSION_REMEMBER_TTL_DAYS: int = 30
    SESSION_TOKEN_BYTES: int = 32
    # MODERATION
    WARNING_BAN_THRESHOLD: int = 3
    ESCALATION_MAX_RETRIES: int = 2
    LISTING_TITLE_MIN_LENGTH: int = 3
    LISTING_TITLE_MAX_LENGTH: int = 200
    LISTING_DESCRIPTION_MIN_LENGTH: int = 20
    LISTING_DESCRIPTION_MAX_LENGTH: int = 2000
    MESSAGE_MAX_LENGTH: int = 1000
    # REPORTS
    REPORT_RATE_LIMIT_PER_HOUR: int = 5
    REPORT_RETENTION_DAYS: int = 365
    # SCHEDULE
    EXPIRED_SESSION_PURGE_INTERVAL_HOURS: Optional[int] = 6
    REPORT_CLEANUP_INTERVAL_HOURS: Optional[int] = 24

    model_config = ConfigDict(env_file=".env", extra="ignore")  # type: ignore

    @property
    def database_url(self) -> str:
        # URL-encode the password for parsing
        encoded_password = quote_plus(self.POSTGRES_PASSWORD or "")
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{encoded_password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()
