"""
Per-session prompt quota over a sliding time window.

The check is advisory and never mutates the session. Resetting the counters
once a window has elapsed is up to the caller (see SessionManager).
"""

from typing import Optional

from ..models.session import Session, RateLimitStatus, MAX_PROMPTS_PER_WINDOW, RATE_LIMIT_WINDOW_MS
from ..utils.identifiers import now_ms


def is_window_expired(
    session: Session,
    now: Optional[int] = None,
    window_ms: int = RATE_LIMIT_WINDOW_MS,
) -> bool:
    """True when the session has no open window, or its window has ended."""
    if session.prompt_count == 0 or session.first_prompt_in_window is None:
        return True
    if now is None:
        now = now_ms()
    return now >= session.first_prompt_in_window + window_ms


def check_rate_limit(
    session: Session,
    now: Optional[int] = None,
    max_prompts: int = MAX_PROMPTS_PER_WINDOW,
    window_ms: int = RATE_LIMIT_WINDOW_MS,
) -> RateLimitStatus:
    """
    Check whether the session may send another prompt.

    Args:
        session: Session to evaluate
        now: Current time in ms (defaults to the wall clock)
        max_prompts: Prompts allowed per window
        window_ms: Window length in ms

    Returns:
        RateLimitStatus: allowed flag, prompts remaining, and the window end
        when refused
    """
    if now is None:
        now = now_ms()

    if is_window_expired(session, now, window_ms):
        return RateLimitStatus(allowed=True, remaining=max_prompts)

    window_end = session.first_prompt_in_window + window_ms
    remaining = max_prompts - session.prompt_count
    if remaining <= 0:
        return RateLimitStatus(allowed=False, remaining=0, reset_time=window_end)

    return RateLimitStatus(allowed=True, remaining=remaining)
