"""
Session Store - Persistent storage for coaching sessions using StorageInterface.

The whole collection is kept as a single JSON array under one key and the
current-session pointer as a bare ID under another. Writes are
read-modify-write with a single writer assumed.
"""

import json
import logging
from typing import Optional, List

from pydantic import TypeAdapter, ValidationError

from ..models.session import Session, SessionMetadata, MAX_SESSIONS
from .interface import StorageInterface, StorageError

logger = logging.getLogger(__name__)

SESSIONS_KEY = "photography_coach_sessions.json"
CURRENT_SESSION_KEY = "photography_coach_current_session"

_session_list = TypeAdapter(List[Session])


class SessionStore:
    """
    Manages persistent storage of sessions and the current-session pointer.

    Read-only queries never raise: backend or decoding failures are logged and
    reported as "no sessions" / "not found". Writes raise StorageError.
    """

    def __init__(
        self,
        storage: StorageInterface,
        max_sessions: int = MAX_SESSIONS,
        sessions_key: str = SESSIONS_KEY,
        current_session_key: str = CURRENT_SESSION_KEY,
    ):
        """
        Initialize session store.

        Args:
            storage: StorageInterface implementation (LocalStorage, MemoryStorage, ...)
            max_sessions: Maximum number of sessions retained before eviction
            sessions_key: Key holding the JSON array of sessions
            current_session_key: Key holding the current session ID
        """
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.storage = storage
        self.max_sessions = max_sessions
        self.sessions_key = sessions_key
        self.current_session_key = current_session_key

    async def _load_sessions(self) -> List[Session]:
        """Load and validate the full collection. Raises StorageError."""
        content = await self.storage.load(self.sessions_key)
        if not content:
            return []
        try:
            return _session_list.validate_json(content)
        except ValidationError as e:
            raise StorageError(f"Corrupt session collection under {self.sessions_key}") from e

    async def _save_sessions(self, sessions: List[Session]) -> None:
        content = json.dumps(
            [s.model_dump(by_alias=True, exclude_none=True) for s in sessions],
            ensure_ascii=False,
        )
        await self.storage.save(self.sessions_key, content)

    async def get_all_sessions_metadata(self) -> List[SessionMetadata]:
        """
        List metadata for all sessions.

        Returns:
            List[SessionMetadata]: Most recently active first; empty on any failure
        """
        try:
            sessions = await self._load_sessions()
        except StorageError:
            logger.exception("Error loading sessions metadata")
            return []

        metadata = [s.to_metadata() for s in sessions]
        metadata.sort(key=lambda m: m.last_activity_at, reverse=True)
        return metadata

    async def get_session(self, session_id: str) -> Optional[Session]:
        """
        Get a full session by ID.

        Args:
            session_id: Session ID

        Returns:
            Optional[Session]: Session or None if not found or unreadable
        """
        try:
            sessions = await self._load_sessions()
        except StorageError:
            logger.exception(f"Error loading session {session_id}")
            return None

        return next((s for s in sessions if s.id == session_id), None)

    async def save_session(self, session: Session) -> None:
        """
        Insert or update a session.

        A new session that pushes the collection over max_sessions evicts the
        least recently active sessions; the session being saved is never one
        of them.

        Args:
            session: Session to persist

        Raises:
            StorageError: If the collection could not be read or written
        """
        sessions = await self._load_sessions()

        index = next((i for i, s in enumerate(sessions) if s.id == session.id), None)
        if index is not None:
            sessions[index] = session
        else:
            others = sorted(sessions, key=lambda s: s.last_activity_at)  # Oldest first
            overflow = len(others) + 1 - self.max_sessions
            if overflow > 0:
                evicted, others = others[:overflow], others[overflow:]
                logger.info(
                    f"Evicting {len(evicted)} session(s) over cap of {self.max_sessions}",
                    extra={"extra_fields": {"evicted_session_ids": [s.id for s in evicted]}},
                )
                sessions = others
            sessions.append(session)

        await self._save_sessions(sessions)

    async def delete_session(self, session_id: str) -> bool:
        """
        Delete a session, clearing the current pointer if it referenced it.

        Args:
            session_id: Session ID

        Returns:
            bool: True if a session was removed

        Raises:
            StorageError: If the collection or pointer could not be updated
        """
        sessions = await self._load_sessions()
        remaining = [s for s in sessions if s.id != session_id]
        removed = len(remaining) != len(sessions)
        if removed:
            await self._save_sessions(remaining)

        current_id = await self.storage.load(self.current_session_key)
        if current_id == session_id:
            await self.storage.delete(self.current_session_key)

        return removed

    async def get_current_session_id(self) -> Optional[str]:
        """Get the current session ID, or None if unset or unreadable."""
        try:
            return await self.storage.load(self.current_session_key) or None
        except StorageError:
            logger.exception("Error getting current session ID")
            return None

    async def set_current_session_id(self, session_id: str) -> None:
        """
        Point the current session at the given ID.

        Raises:
            StorageError: If the pointer could not be written
        """
        await self.storage.save(self.current_session_key, session_id)

    async def clear_all_sessions(self) -> None:
        """Remove every session and the current pointer."""
        await self.storage.delete(self.sessions_key)
        await self.storage.delete(self.current_session_key)
