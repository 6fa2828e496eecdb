"""Application configuration via Pydantic Settings."""

from typing import Dict, List
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CHECKIN_QUESTIONS: List[str] = [
    "What task are you working on right now?",
    "What is blocking you or slowing you down?",
    "What is your next step?",
    "Who could you ask for help?",
    "How much longer do you think the current task will take?",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # API Settings
    PROJECT_NAME: str = "Task Nudge API"
    VERSION: str = "0.3.0"
    API_PREFIX: str = "/api"

    # Database Settings
    # Workspace-scoped key/value storage (one row per workspace per table)
    DATABASE_URL: str = "sqlite:///./tasknudge.db"
    AUTO_CREATE_TABLES: bool = True  # Create missing tables on startup (local SQLite use)

    # CORS Settings (editor webviews call the API from a custom origin)
    BACKEND_CORS_ORIGINS: List[str] = []

    # Background Jobs
    ENABLE_BACKGROUND_JOBS: bool = True  # Idle-check tick + ping timers

    # Nudge defaults (per-workspace overrides via PUT /workspaces/{id}/config)
    NUDGE_ENABLED: bool = True
    NUDGE_BASE_INTERVAL_MINUTES: float = 15
    NUDGE_MAX_INTERVAL_MINUTES: float = 60
    NUDGE_IDLE_THRESHOLD_SECONDS: float = 180

    IDLE_CHECK_INTERVAL_SECONDS: int = 10  # Fixed period of the idle-check poll

    # workspace_id -> repository root used by the git change provider
    WORKSPACE_ROOTS: Dict[str, str] = {}

    GIT_COMMAND_TIMEOUT_SECONDS: float = 10.0

    CHECKIN_QUESTIONS: List[str] = DEFAULT_CHECKIN_QUESTIONS


# Global settings instance
settings = Settings()
