"""
Unit tests for the session lifecycle manager.
"""

from unittest.mock import AsyncMock

import pytest

from conftest import HOUR_MS
from photocoach.core import SessionManager, SessionNotFoundError
from photocoach.core.session_manager import DEFAULT_PROMPT
from photocoach.models import ApiResponse, DEFAULT_SESSION_TITLE, RATE_LIMIT_WINDOW_MS
from photocoach.storage import MemoryStorage, SessionStore, StorageError


def ok_sender(reply="Use ISO 100, f/8, 1/250s."):
    return AsyncMock(return_value=ApiResponse(success=True, data=reply))


@pytest.fixture
def manager(store, clock):
    return SessionManager(store, send_prompt=ok_sender(), clock=clock)


class TestSessionLifecycle:
    """Tests for create/ensure/switch/delete."""

    @pytest.mark.asyncio
    async def test_create_new_session(self, manager, store, clock):
        session = await manager.create_new_session()
        assert session.title == DEFAULT_SESSION_TITLE
        assert session.messages == []
        assert session.prompt_count == 0
        assert session.first_prompt_in_window is None
        assert session.created_at == session.last_activity_at == clock.now
        assert await store.get_session(session.id) == session
        assert await store.get_current_session_id() == session.id

    @pytest.mark.asyncio
    async def test_create_with_title(self, manager):
        session = await manager.create_new_session("Wedding prep")
        assert session.title == "Wedding prep"

    @pytest.mark.asyncio
    async def test_ensure_returns_existing_current(self, manager):
        created = await manager.create_new_session()
        assert await manager.ensure_current_session() == created

    @pytest.mark.asyncio
    async def test_ensure_creates_when_missing(self, manager, store):
        session = await manager.ensure_current_session()
        assert await store.get_current_session_id() == session.id

    @pytest.mark.asyncio
    async def test_ensure_replaces_stale_pointer(self, manager, store):
        await store.set_current_session_id("evicted")
        session = await manager.ensure_current_session()
        assert session.id != "evicted"
        assert await store.get_current_session_id() == session.id

    @pytest.mark.asyncio
    async def test_switch_session(self, manager, store):
        first = await manager.create_new_session()
        await manager.create_new_session()
        switched = await manager.switch_session(first.id)
        assert switched == first
        assert await store.get_current_session_id() == first.id

    @pytest.mark.asyncio
    async def test_switch_to_missing_session(self, manager, store):
        current = await manager.create_new_session()
        with pytest.raises(SessionNotFoundError) as exc_info:
            await manager.switch_session("gone")
        assert exc_info.value.session_id == "gone"
        assert await store.get_current_session_id() == current.id

    @pytest.mark.asyncio
    async def test_delete_current_creates_replacement(self, manager, store):
        current = await manager.create_new_session()
        replacement = await manager.delete_session(current.id)
        assert replacement is not None
        assert replacement.id != current.id
        assert await store.get_session(current.id) is None
        assert await store.get_current_session_id() == replacement.id

    @pytest.mark.asyncio
    async def test_delete_other_session(self, manager, store):
        other = await manager.create_new_session()
        current = await manager.create_new_session()
        assert await manager.delete_session(other.id) is None
        assert await store.get_current_session_id() == current.id

    @pytest.mark.asyncio
    async def test_list_sessions(self, manager, clock):
        first = await manager.create_new_session()
        clock.advance(10)
        second = await manager.create_new_session()
        assert [m.id for m in await manager.list_sessions()] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_write_failure_propagates(self, clock):
        class ReadOnlyStorage(MemoryStorage):
            async def save(self, key, content):
                raise StorageError("disk full")

        manager = SessionManager(SessionStore(ReadOnlyStorage()), clock=clock)
        with pytest.raises(StorageError):
            await manager.create_new_session()


class TestRecordExchange:
    """Tests for record_exchange."""

    @pytest.mark.asyncio
    async def test_first_exchange(self, manager, store, clock):
        session = await manager.create_new_session()
        clock.advance(1000)
        updated = await manager.record_exchange(
            session, "beach wedding", "Use f/4", images=["file:///p/1.jpg", "file:///p/2.jpg"]
        )

        user, ai = updated.messages
        assert (user.type, user.text, user.images) == ("user", "beach wedding", ["file:///p/1.jpg", "file:///p/2.jpg"])
        assert (ai.type, ai.text, ai.images) == ("ai", "Use f/4", None)
        assert user.timestamp == ai.timestamp == clock.now
        assert user.id != ai.id
        assert updated.title == "📷 2 images - beach wedding..."
        assert updated.prompt_count == 1
        assert updated.first_prompt_in_window == clock.now
        assert updated.last_activity_at == clock.now
        assert updated.created_at == session.created_at
        assert await store.get_session(session.id) == updated

    @pytest.mark.asyncio
    async def test_input_session_is_untouched(self, manager):
        session = await manager.create_new_session()
        before = session.model_dump()
        await manager.record_exchange(session, "q", "a")
        assert session.model_dump() == before

    @pytest.mark.asyncio
    async def test_title_only_set_on_first_exchange(self, manager):
        session = await manager.create_new_session()
        session = await manager.record_exchange(session, "first question", "a")
        session = await manager.record_exchange(session, "second question", "b")
        assert session.title == "first question..."
        assert [m.text for m in session.messages] == ["first question", "a", "second question", "b"]

    @pytest.mark.asyncio
    async def test_count_advances_within_window(self, manager, clock):
        session = await manager.create_new_session()
        first_prompt_at = clock.advance(1)
        for _ in range(4):
            session = await manager.record_exchange(session, "q", "a")
            clock.advance(60_000)
        assert session.prompt_count == 4
        assert session.first_prompt_in_window == first_prompt_at

    @pytest.mark.asyncio
    async def test_elapsed_window_restarts_count(self, manager, clock):
        session = await manager.create_new_session()
        for _ in range(15):
            session = await manager.record_exchange(session, "q", "a")
        assert manager.check_rate_limit(session).allowed is False

        restarted_at = clock.advance(RATE_LIMIT_WINDOW_MS)
        assert manager.check_rate_limit(session).remaining == 15
        session = await manager.record_exchange(session, "later", "a")
        assert session.prompt_count == 1
        assert session.first_prompt_in_window == restarted_at
        assert manager.check_rate_limit(session).remaining == 14


class TestSubmitPrompt:
    """Tests for submit_prompt."""

    @pytest.mark.asyncio
    async def test_success(self, store, clock):
        sender = ok_sender("Try ISO 400")
        manager = SessionManager(store, send_prompt=sender, clock=clock)
        session = await manager.create_new_session()

        outcome = await manager.submit_prompt(session, "  concert lighting  ", ["file:///c.jpg"])

        assert outcome.ok
        assert outcome.status == "ok"
        sender.assert_awaited_once_with("concert lighting", ["file:///c.jpg"])
        assert outcome.session.messages[-1].text == "Try ISO 400"
        assert outcome.rate_limit.remaining == 14
        assert await store.get_session(session.id) == outcome.session

    @pytest.mark.asyncio
    async def test_images_only_uses_default_prompt(self, store, clock):
        sender = ok_sender()
        manager = SessionManager(store, send_prompt=sender, clock=clock)
        session = await manager.create_new_session()

        outcome = await manager.submit_prompt(session, "", ["file:///a.jpg", "file:///b.jpg"])

        sender.assert_awaited_once_with(DEFAULT_PROMPT, ["file:///a.jpg", "file:///b.jpg"])
        assert outcome.session.title == "📷 2 images"
        assert outcome.session.messages[0].text == ""

    @pytest.mark.asyncio
    async def test_empty_input_rejected(self, manager):
        session = await manager.create_new_session()
        with pytest.raises(ValueError, match="prompt or select an image"):
            await manager.submit_prompt(session, "   ")
        manager.send_prompt.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_requires_sender(self, store, clock):
        manager = SessionManager(store, clock=clock)
        session = await manager.create_new_session()
        with pytest.raises(RuntimeError):
            await manager.submit_prompt(session, "hello")

    @pytest.mark.asyncio
    async def test_rate_limited_skips_network(self, manager, clock):
        session = await manager.create_new_session()
        for _ in range(15):
            session = await manager.record_exchange(session, "q", "a")

        outcome = await manager.submit_prompt(session, "one more")

        assert outcome.status == "rate_limited"
        assert outcome.session is session
        assert outcome.rate_limit.allowed is False
        assert outcome.rate_limit.reset_time == session.first_prompt_in_window + RATE_LIMIT_WINDOW_MS
        manager.send_prompt.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_backend_error_rolls_back(self, store, clock):
        sender = AsyncMock(return_value=ApiResponse(success=False, error="Failed to analyze photo"))
        manager = SessionManager(store, send_prompt=sender, clock=clock)
        session = await manager.create_new_session()
        clock.advance(500)

        outcome = await manager.submit_prompt(session, "what settings?")

        assert outcome.status == "failed"
        assert outcome.error == "Failed to analyze photo"
        assert outcome.session is session
        stored = await store.get_session(session.id)
        assert stored.messages == []
        assert stored.prompt_count == 0
        assert stored.last_activity_at == session.last_activity_at

    @pytest.mark.asyncio
    async def test_success_without_data_is_failure(self, store, clock):
        sender = AsyncMock(return_value=ApiResponse(success=True))
        manager = SessionManager(store, send_prompt=sender, clock=clock)
        session = await manager.create_new_session()

        outcome = await manager.submit_prompt(session, "hello")

        assert outcome.status == "failed"
        assert outcome.error == "Failed to get AI response"

    @pytest.mark.asyncio
    async def test_sender_exception_rolls_back(self, store, clock):
        sender = AsyncMock(side_effect=ConnectionError("network down"))
        manager = SessionManager(store, send_prompt=sender, clock=clock)
        session = await manager.create_new_session()

        outcome = await manager.submit_prompt(session, "hello")

        assert outcome.status == "failed"
        assert "network down" in outcome.error
        assert (await store.get_session(session.id)).messages == []


class TestEvictionScenario:
    """Session cap interacting with the lifecycle."""

    @pytest.mark.asyncio
    async def test_oldest_session_evicted_after_five_more(self, manager, store, clock):
        session_a = await manager.create_new_session()
        for _ in range(5):
            clock.advance(1000)
            session_a = await manager.record_exchange(session_a, "q", "a")
        assert session_a.prompt_count == 5
        assert session_a.first_prompt_in_window == session_a.created_at + 1000

        others = []
        for _ in range(5):
            clock.advance(HOUR_MS)
            others.append(await manager.create_new_session())

        metadata = await manager.list_sessions()
        assert len(metadata) == 5
        assert session_a.id not in {m.id for m in metadata}
        assert [m.id for m in metadata] == [s.id for s in reversed(others)]
        assert await store.get_current_session_id() == others[-1].id

    @pytest.mark.asyncio
    async def test_recent_activity_protects_older_session(self, manager, clock):
        session_a = await manager.create_new_session()
        clock.advance(10)
        session_b = await manager.create_new_session()
        clock.advance(10)
        session_a = await manager.record_exchange(session_a, "still shooting", "ok")
        for _ in range(4):
            clock.advance(10)
            await manager.create_new_session()

        ids = {m.id for m in await manager.list_sessions()}
        assert session_a.id in ids
        assert session_b.id not in ids
