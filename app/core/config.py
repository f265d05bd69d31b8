from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import List, Optional, Union
from pydantic import field_validator
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API Settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Job Board API"

    # Database Settings
    # DATABASE_URL wins when set, otherwise the URL is built from the parts
    DATABASE_URL: Optional[str] = None
    POSTGRES_USER: str = "user"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "job_board"
    DB_CONNECT_TIMEOUT: int = 30  # seconds, applied when the engine connects
    DB_CREATE_TABLES: bool = False  # use Alembic unless explicitly enabled

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Auth Settings
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 12

    # Redis Settings (Celery broker and rate limiter)
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0

    @property
    def REDIS_URL(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    # AWS SES Settings (job alert emails)
    AWS_REGION: str = "us-east-1"
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_SES_FROM_EMAIL: str = "jobs@example.com"
    AWS_SES_FROM_NAME: str = "Job Board"

    # Job Settings
    JOB_ALERT_RECIPIENT_ROLE: str = "user"
    JOB_ALERT_TASK_TIME_LIMIT: int = 600  # seconds; soft limit is 30s earlier
    JOB_PAGE_DEFAULT_LIMIT: int = 3
    JOB_PAGE_MAX_LIMIT: int = 100
    JOBS_REQUIRE_AUTH: bool = False

    # Rate Limiting (per client IP, across all /api routes)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    # CORS Settings - can be set as JSON string in .env
    BACKEND_CORS_ORIGINS: Union[List[str], str] = ["*"]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[List[str], str]) -> List[str]:
        """Parse CORS origins from JSON string or list"""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not valid JSON, split by comma
                return [origin.strip() for origin in v.split(",")]
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    """
    Return the process-wide settings instance.

    Used as a FastAPI dependency so tests can swap in their own Settings
    through app.dependency_overrides.
    """
    return Settings()


settings = get_settings()
