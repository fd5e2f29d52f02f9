"""
Session Manager - Session lifecycle and prompt submission.

Coordinates the SessionStore, the current-session pointer, the rate limiter
and the prompt sender the app uses to reach the coach backend.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Literal, Optional

from ..models.session import (
    Message,
    Session,
    SessionMetadata,
    RateLimitStatus,
    ApiResponse,
    DEFAULT_SESSION_TITLE,
    MAX_PROMPTS_PER_WINDOW,
    RATE_LIMIT_WINDOW_MS,
)
from ..storage.session_store import SessionStore
from ..utils.identifiers import generate_id, now_ms
from ..utils.titles import generate_session_title
from .rate_limiter import check_rate_limit, is_window_expired

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Analyze this environment and recommend camera settings"

PromptSender = Callable[[str, Optional[List[str]]], Awaitable[ApiResponse]]


class SessionNotFoundError(LookupError):
    """Raised when a session ID no longer resolves (evicted or deleted)."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


@dataclass
class PromptOutcome:
    """Result of submitting a prompt through the manager."""
    status: Literal["ok", "rate_limited", "failed"]
    session: Session
    rate_limit: RateLimitStatus
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class SessionManager:
    """
    Creates, loads, switches and deletes sessions, and records prompt exchanges.
    """

    def __init__(
        self,
        store: SessionStore,
        send_prompt: Optional[PromptSender] = None,
        clock: Callable[[], int] = now_ms,
        max_prompts: int = MAX_PROMPTS_PER_WINDOW,
        window_ms: int = RATE_LIMIT_WINDOW_MS,
    ):
        """
        Initialize session manager.

        Args:
            store: Session store backing all sessions
            send_prompt: Async callable ``(text, images) -> ApiResponse`` used by submit_prompt
            clock: Returns the current time in ms
            max_prompts: Prompts allowed per rate window
            window_ms: Rate window length in ms
        """
        self.store = store
        self.send_prompt = send_prompt
        self.clock = clock
        self.max_prompts = max_prompts
        self.window_ms = window_ms

    async def create_new_session(self, title: Optional[str] = None) -> Session:
        """Create an empty session, persist it and make it current."""
        now = self.clock()
        session = Session(
            id=generate_id(),
            title=title or DEFAULT_SESSION_TITLE,
            created_at=now,
            last_activity_at=now,
        )
        await self.store.save_session(session)
        await self.store.set_current_session_id(session.id)
        logger.info(f"Created session {session.id}")
        return session

    async def ensure_current_session(self) -> Session:
        """Return the current session, creating one if the pointer is unset or stale."""
        current_id = await self.store.get_current_session_id()
        if current_id:
            session = await self.store.get_session(current_id)
            if session is not None:
                return session
            logger.info(f"Current session {current_id} no longer exists, starting a new one")
        return await self.create_new_session()

    def check_rate_limit(self, session: Session) -> RateLimitStatus:
        return check_rate_limit(
            session, now=self.clock(), max_prompts=self.max_prompts, window_ms=self.window_ms
        )

    async def record_exchange(
        self,
        session: Session,
        user_text: str,
        ai_text: str,
        images: Optional[List[str]] = None,
    ) -> Session:
        """
        Append a successful prompt/reply pair and persist the session.

        The given session is left untouched; an updated copy is returned.

        Args:
            session: Session the exchange belongs to
            user_text: Prompt text as entered by the user
            ai_text: Reply text from the coach
            images: Image references attached to the prompt

        Returns:
            Session: Updated session
        """
        now = self.clock()
        images = list(images) if images else None

        user_message = Message(id=generate_id(), type="user", timestamp=now, text=user_text, images=images)
        ai_message = Message(id=generate_id(), type="ai", timestamp=now, text=ai_text)

        update = {
            "messages": [*session.messages, user_message, ai_message],
            "last_activity_at": now,
        }
        if not session.messages:
            update["title"] = generate_session_title(user_text, len(images or []))

        # A fresh or elapsed window restarts the count at this prompt
        if is_window_expired(session, now, self.window_ms):
            update["prompt_count"] = 1
            update["first_prompt_in_window"] = now
        else:
            update["prompt_count"] = session.prompt_count + 1

        updated = session.model_copy(update=update)
        await self.store.save_session(updated)
        return updated

    async def submit_prompt(
        self,
        session: Session,
        text: str,
        images: Optional[List[str]] = None,
    ) -> PromptOutcome:
        """
        Send a prompt for the session and record the exchange on success.

        The rate limit is checked before any network work. When the send
        fails the session is returned exactly as it was passed in and nothing
        is persisted.

        Raises:
            ValueError: If there is neither text nor an image
            RuntimeError: If no prompt sender was configured
        """
        if not text.strip() and not images:
            raise ValueError("Please enter a prompt or select an image.")
        if self.send_prompt is None:
            raise RuntimeError("No prompt sender configured for this SessionManager.")

        status = self.check_rate_limit(session)
        if not status.allowed:
            logger.warning(f"Session {session.id} hit the prompt limit until {status.reset_time}")
            return PromptOutcome(status="rate_limited", session=session, rate_limit=status)

        try:
            response = await self.send_prompt(text.strip() or DEFAULT_PROMPT, images or None)
        except Exception as e:
            logger.exception(f"Prompt for session {session.id} failed")
            return PromptOutcome(status="failed", session=session, rate_limit=status, error=str(e))

        if not response.success or not response.data:
            error = response.error or "Failed to get AI response"
            logger.error(f"Prompt for session {session.id} failed: {error}")
            return PromptOutcome(status="failed", session=session, rate_limit=status, error=error)

        updated = await self.record_exchange(session, text, response.data, images)
        return PromptOutcome(status="ok", session=updated, rate_limit=self.check_rate_limit(updated))

    async def switch_session(self, session_id: str) -> Session:
        """
        Make an existing session current.

        Raises:
            SessionNotFoundError: If the session was evicted or deleted
        """
        session = await self.store.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        await self.store.set_current_session_id(session.id)
        logger.info(f"Switched to session {session.id}")
        return session

    async def delete_session(self, session_id: str) -> Optional[Session]:
        """
        Delete a session.

        Returns:
            Optional[Session]: The replacement current session when the deleted
            one was current, otherwise None
        """
        was_current = await self.store.get_current_session_id() == session_id
        await self.store.delete_session(session_id)
        logger.info(f"Deleted session {session_id}")
        if was_current:
            return await self.create_new_session()
        return None

    async def list_sessions(self) -> List[SessionMetadata]:
        return await self.store.get_all_sessions_metadata()
