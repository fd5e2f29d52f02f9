"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings

from .models.session import (
    MAX_SESSIONS,
    MAX_PROMPTS_PER_WINDOW,
    RATE_LIMIT_WINDOW_MS,
)


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Photo Coach"
    app_version: str = "1.0.0"
    debug: bool = False

    # Local session storage
    storage_path: str = "./data"
    sessions_key: str = "photography_coach_sessions.json"
    current_session_key: str = "photography_coach_current_session"

    # Session limits
    max_sessions: int = MAX_SESSIONS
    max_prompts_per_window: int = MAX_PROMPTS_PER_WINDOW
    rate_limit_window_hours: float = RATE_LIMIT_WINDOW_MS / (60 * 60 * 1000)

    # Coach backend
    api_base_url: str = "http://localhost:8080/api"
    request_timeout: float = 60.0
    max_images_per_prompt: int = 3

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/photocoach.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console

    @property
    def rate_limit_window_ms(self) -> int:
        return int(self.rate_limit_window_hours * 60 * 60 * 1000)

    class Config:
        env_file = ".env"
        env_prefix = "PHOTOCOACH_"
        case_sensitive = False


settings = Settings()
