"""Core module - contains session lifecycle and rate limiting logic."""

from .rate_limiter import check_rate_limit, is_window_expired
from .session_manager import SessionManager, SessionNotFoundError, PromptOutcome

__all__ = ['check_rate_limit', 'is_window_expired', 'SessionManager', 'SessionNotFoundError', 'PromptOutcome']
