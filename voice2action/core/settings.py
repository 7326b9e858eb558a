"""
Core settings and environment variables for Voice2Action.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Voice2Action"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - Frontend URLs allowed to access this API (comma separated)
    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173"

    # Firebase/Firestore
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON
    ISSUES_COLLECTION: str = "issues"
    ORGS_COLLECTION: str = "organizations"

    # In-memory store for local development and tests (no Firebase credentials needed)
    USE_MOCK_DB: bool = False

    # Urgency scoring: "afinn" (lexicon) or "mock" (small fixed word list)
    SENTIMENT_PROVIDER: str = "afinn"
    SENTIMENT_LANGUAGE: str = "en"

    # Issue listing
    LIST_DEFAULT_LIMIT: int = 50
    LIST_MAX_LIMIT: int = 200

    # Analytics series window
    SERIES_DEFAULT_DAYS: int = 30
    SERIES_MAX_DAYS: int = 365

    # Participatory budget simulator
    BUDGET_NEEDS_WINDOW_DAYS: int = 60
    BUDGET_DEFAULT_TOTAL: int = 100
    BUDGET_MIN_TOTAL: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"


def cors_origins_list() -> list:
    raw = settings.CORS_ORIGINS or ""
    return [x.strip().rstrip("/") for x in raw.split(",") if x.strip()]


# Global settings instance
settings = Settings()
