from pydantic_settings import BaseSettings
from typing import List, Optional
from pathlib import Path


class Settings(BaseSettings):
    # Database - local SQLite by default, override with environment variable for production
    DATABASE_URL: str = "sqlite:///./lody.db"

    # Registration backend: "database" stores entries, "stub" only simulates the call
    REGISTRATION_BACKEND: str = "database"
    STUB_REGISTRATION_DELAY_SECONDS: float = 1.5
    # No timeout unless configured
    REGISTRATION_TIMEOUT_SECONDS: Optional[float] = None

    # Waitlist workflow
    WAITLIST_MAX_SESSIONS: int = 10000
    WAITLIST_CONFIRMATION_EMAILS: bool = False
    WAITLIST_RATE_LIMIT_PER_MINUTE: int = 0  # 0 disables the limiter
    SESSION_COOKIE_NAME: str = "lody_session"

    # Resend (Email)
    RESEND_API_KEY: str = ""
    EMAIL_FROM: str = "Lody <hello@lody.app>"

    # Redis (rate limiting + Celery broker)
    REDIS_URL: str = "redis://localhost:6379"
    CELERY_TASK_ALWAYS_EAGER: bool = False

    # App Settings
    DEBUG: bool = False
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
        "http://127.0.0.1:8000",
        "https://lody.app",
        "https://www.lody.app",
    ]

    class Config:
        env_file = Path(__file__).parent.parent.parent / ".env"
        env_file_encoding = 'utf-8'
        extra = "ignore"


settings = Settings()
