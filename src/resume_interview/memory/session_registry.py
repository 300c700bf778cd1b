"""
Session registry.

Owns every live ``ConversationState`` in the process, keyed by session id,
together with one lock per session so exchanges on the same session run one
at a time while different sessions proceed independently.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from resume_interview.memory.history import ConversationState, Message, Role
from resume_interview.memory.prompts import PERSONA_PROMPT_TEMPLATE, build_persona_prompt

logger = logging.getLogger(__name__)

SESSION_ID_PREFIX = "session_"


class SessionNotFoundError(KeyError):
    """Raised when a session id is not present in the registry."""

    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id


class SessionRegistry:
    """
    In-memory mapping from session id to conversation state.

    Ids are never reissued within the lifetime of the registry, even after
    the session they named has been deleted. States handed out by ``get``
    are copies; the registry keeps the only long-lived reference.
    """

    def __init__(self, system_prompt_template: str = PERSONA_PROMPT_TEMPLATE) -> None:
        """
        Initialize an empty registry.

        Args:
            system_prompt_template: Template used to build each session's system turn.
        """
        self._system_prompt_template = system_prompt_template
        self._sessions: dict[str, ConversationState] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._issued: set[str] = set()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def _new_session_id(self) -> str:
        while True:
            session_id = f"{SESSION_ID_PREFIX}{uuid4().hex}"
            if session_id not in self._issued:
                self._issued.add(session_id)
                return session_id

    def create(self, source_document: str) -> str:
        """
        Create a session primed from a source document.

        Args:
            source_document: Uploaded text the persona is derived from.

        Returns:
            The new session id.
        """
        session_id = self._new_session_id()
        system_turn = Message(
            role=Role.SYSTEM,
            content=build_persona_prompt(source_document, self._system_prompt_template),
        )
        self._sessions[session_id] = ConversationState(
            session_id=session_id,
            messages=[system_turn],
            source_document=source_document,
        )
        self._locks[session_id] = asyncio.Lock()
        logger.debug(f"Registered session {session_id}")
        return session_id

    def get(self, session_id: str) -> ConversationState | None:
        """
        Look up a session.

        Args:
            session_id: Exact session id.

        Returns:
            A copy of the stored state, or None if the id is unknown.
        """
        state = self._sessions.get(session_id)
        if state is None:
            return None
        return state.model_copy(deep=True)

    def update(self, session_id: str, new_state: ConversationState) -> None:
        """
        Replace the stored state of a live session.

        Args:
            session_id: Session to update.
            new_state: Replacement state.

        Raises:
            SessionNotFoundError: If the session does not exist.
            ValueError: If the new state names another session or changes the source document.
        """
        current = self._sessions.get(session_id)
        if current is None:
            raise SessionNotFoundError(session_id)
        if new_state.session_id != session_id:
            raise ValueError(f"state for {new_state.session_id} cannot replace {session_id}")
        if new_state.source_document != current.source_document:
            raise ValueError("source document is immutable for the lifetime of a session")
        self._sessions[session_id] = new_state

    def delete(self, session_id: str) -> bool:
        """
        Remove a session. Deleting an unknown id is not an error.

        Returns:
            True if a session was removed.
        """
        self._locks.pop(session_id, None)
        removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.debug(f"Removed session {session_id}")
        return removed

    @asynccontextmanager
    async def lock(self, session_id: str) -> AsyncIterator[None]:
        """
        Hold the exclusive lock of one session.

        Raises:
            SessionNotFoundError: If the session does not exist, or was
                deleted while waiting for the lock.
        """
        session_lock = self._locks.get(session_id)
        if session_lock is None:
            raise SessionNotFoundError(session_id)
        async with session_lock:
            if session_id not in self._sessions:
                raise SessionNotFoundError(session_id)
            yield

    def idle_sessions(self, max_idle: timedelta, now: datetime | None = None) -> list[str]:
        """
        List sessions whose last activity is older than ``max_idle``.

        Args:
            max_idle: Allowed inactivity.
            now: Reference time (defaults to current UTC time).

        Returns:
            Ids of idle sessions.
        """
        now = now or datetime.now(timezone.utc)
        cutoff = now - max_idle
        return [
            session_id
            for session_id, state in self._sessions.items()
            if state.last_active_at < cutoff
        ]
