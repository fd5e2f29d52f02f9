"""
Session Models - Defines structures for coaching sessions and their messages.

Records are persisted as JSON with camelCase keys; timestamps are integer
milliseconds since the Unix epoch.
"""

from typing import Optional, List, Literal
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


MAX_SESSIONS = 5
MAX_PROMPTS_PER_WINDOW = 15
RATE_LIMIT_WINDOW_MS = 5 * 60 * 60 * 1000  # 5 hours
DEFAULT_SESSION_TITLE = "New Session"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Message(_CamelModel):
    """A single user prompt or AI reply inside a session."""
    model_config = ConfigDict(frozen=True)

    id: str
    type: Literal["user", "ai"]
    timestamp: int
    text: str
    images: Optional[List[str]] = None  # Opaque image references (URIs/paths)
    is_expanded: Optional[bool] = None


class SessionMetadata(_CamelModel):
    """Lightweight projection of a session used for listings."""
    id: str
    title: str
    created_at: int
    last_activity_at: int
    message_count: int = 0
    prompt_count: int = 0


class Session(_CamelModel):
    """Full session with messages and rate-limit counters."""
    id: str
    title: str = DEFAULT_SESSION_TITLE
    created_at: int
    last_activity_at: int
    messages: List[Message] = Field(default_factory=list)
    prompt_count: int = Field(default=0, ge=0)
    first_prompt_in_window: Optional[int] = None

    def to_metadata(self) -> SessionMetadata:
        return SessionMetadata(
            id=self.id,
            title=self.title,
            created_at=self.created_at,
            last_activity_at=self.last_activity_at,
            message_count=len(self.messages),
            prompt_count=self.prompt_count,
        )


class RateLimitStatus(_CamelModel):
    """Outcome of a rate-limit check."""
    allowed: bool
    remaining: int
    reset_time: Optional[int] = None  # End of the current window, set when refused


class ApiResponse(BaseModel):
    """Reply envelope returned by the coach backend."""
    success: bool
    data: Optional[str] = None
    error: Optional[str] = None
