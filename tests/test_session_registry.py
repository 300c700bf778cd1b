"""
Tests for the session registry.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from resume_interview.memory import session_registry as registry_module
from resume_interview.memory.history import ConversationState, Message, Role
from resume_interview.memory.session_registry import SessionNotFoundError, SessionRegistry


class TestSessionRegistry:
    """Tests for SessionRegistry."""

    def test_create_builds_system_turn_from_document(self, registry: SessionRegistry) -> None:
        session_id = registry.create("Ten years of Go and Kubernetes.")
        state = registry.get(session_id)

        assert session_id.startswith("session_")
        assert state is not None
        assert state.session_id == session_id
        assert state.source_document == "Ten years of Go and Kubernetes."
        assert len(state.messages) == 1
        assert state.messages[0].role == Role.SYSTEM
        assert "Ten years of Go and Kubernetes." in state.messages[0].content
        assert "candidate in a job interview" in state.messages[0].content

    def test_custom_template(self) -> None:
        registry = SessionRegistry(system_prompt_template="Answer as: {document}")
        session_id = registry.create("Ada")
        assert registry.get(session_id).messages[0].content == "Answer as: Ada"

    def test_document_with_braces_is_inserted_verbatim(self, registry: SessionRegistry) -> None:
        session_id = registry.create("Skills: {python} {rust}")
        assert "Skills: {python} {rust}" in registry.get(session_id).messages[0].content

    def test_ids_are_unique(self, registry: SessionRegistry) -> None:
        ids = {registry.create(f"doc {i}") for i in range(50)}
        assert len(ids) == 50
        assert len(registry) == 50

    def test_colliding_uuid_is_not_reissued(
        self,
        registry: SessionRegistry,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that an id is never issued twice, even after deletion."""
        repeated = UUID(int=1)
        fresh = UUID(int=2)
        values = iter([repeated, repeated, fresh])
        monkeypatch.setattr(registry_module, "uuid4", lambda: next(values))

        first = registry.create("a")
        registry.delete(first)
        second = registry.create("b")

        assert first == f"session_{repeated.hex}"
        assert second == f"session_{fresh.hex}"
        assert registry.get(first) is None

    def test_get_unknown_returns_none(self, registry: SessionRegistry) -> None:
        assert registry.get("session_missing") is None

    def test_get_returns_a_copy(self, registry: SessionRegistry) -> None:
        session_id = registry.create("doc")
        borrowed = registry.get(session_id)
        borrowed.messages.append(Message(role=Role.USER, content="sneaky"))

        assert len(registry.get(session_id).messages) == 1

    def test_update_replaces_state(self, registry: SessionRegistry) -> None:
        session_id = registry.create("doc")
        state = registry.get(session_id)
        new_state = ConversationState(
            session_id=session_id,
            messages=[*state.messages, Message(role=Role.USER, content="hi")],
            source_document=state.source_document,
        )

        registry.update(session_id, new_state)

        assert [m.content for m in registry.get(session_id).dialogue] == ["hi"]

    def test_update_unknown_raises(self, registry: SessionRegistry) -> None:
        state = ConversationState(
            session_id="session_gone",
            messages=[Message(role=Role.SYSTEM, content="x")],
            source_document="doc",
        )
        with pytest.raises(SessionNotFoundError):
            registry.update("session_gone", state)

    def test_update_rejects_foreign_state(self, registry: SessionRegistry) -> None:
        first = registry.create("doc")
        second = registry.create("doc")
        with pytest.raises(ValueError):
            registry.update(first, registry.get(second))

    def test_update_rejects_changed_document(self, registry: SessionRegistry) -> None:
        session_id = registry.create("original")
        state = registry.get(session_id)
        with pytest.raises(ValueError, match="immutable"):
            registry.update(session_id, state.model_copy(update={"source_document": "edited"}))

    def test_delete_is_idempotent(self, registry: SessionRegistry) -> None:
        session_id = registry.create("doc")

        assert registry.delete(session_id) is True
        assert registry.delete(session_id) is False
        assert registry.delete("session_never") is False
        assert session_id not in registry
        assert registry.get(session_id) is None

    def test_idle_sessions(self, registry: SessionRegistry) -> None:
        session_id = registry.create("doc")
        now = datetime.now(timezone.utc)

        assert registry.idle_sessions(timedelta(minutes=5), now=now) == []
        assert registry.idle_sessions(timedelta(minutes=5), now=now + timedelta(minutes=6)) == [
            session_id
        ]


class TestSessionLocks:
    """Tests for per-session locking."""

    @pytest.mark.asyncio
    async def test_lock_unknown_session(self, registry: SessionRegistry) -> None:
        with pytest.raises(SessionNotFoundError):
            async with registry.lock("session_missing"):
                pass

    @pytest.mark.asyncio
    async def test_lock_is_exclusive_per_session(self, registry: SessionRegistry) -> None:
        session_id = registry.create("doc")
        order: list[str] = []

        async def hold(name: str) -> None:
            async with registry.lock(session_id):
                order.append(f"{name}-in")
                await asyncio.sleep(0.01)
                order.append(f"{name}-out")

        await asyncio.gather(hold("a"), hold("b"))

        assert order == ["a-in", "a-out", "b-in", "b-out"]

    @pytest.mark.asyncio
    async def test_sessions_do_not_share_locks(self, registry: SessionRegistry) -> None:
        first = registry.create("doc")
        second = registry.create("doc")

        async with registry.lock(first):
            async with registry.lock(second):
                assert True

    @pytest.mark.asyncio
    async def test_waiter_fails_when_session_deleted(self, registry: SessionRegistry) -> None:
        session_id = registry.create("doc")
        entered = asyncio.Event()
        release = asyncio.Event()

        async def holder() -> None:
            async with registry.lock(session_id):
                entered.set()
                await release.wait()

        holder_task = asyncio.create_task(holder())
        await entered.wait()

        async def waiter() -> None:
            async with registry.lock(session_id):
                pass

        waiter_task = asyncio.create_task(waiter())
        await asyncio.sleep(0)
        registry.delete(session_id)
        release.set()

        await holder_task
        with pytest.raises(SessionNotFoundError):
            await waiter_task
