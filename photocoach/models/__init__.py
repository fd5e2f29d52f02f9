"""Models module."""

from .session import (
    Message,
    Session,
    SessionMetadata,
    RateLimitStatus,
    ApiResponse,
    MAX_SESSIONS,
    MAX_PROMPTS_PER_WINDOW,
    RATE_LIMIT_WINDOW_MS,
    DEFAULT_SESSION_TITLE,
)

__all__ = [
    'Message', 'Session', 'SessionMetadata', 'RateLimitStatus', 'ApiResponse',
    'MAX_SESSIONS', 'MAX_PROMPTS_PER_WINDOW', 'RATE_LIMIT_WINDOW_MS', 'DEFAULT_SESSION_TITLE',
]
