"""
Interview service.

Coordinates the session registry, the document store and the completion
client behind three operations: start a session from a document, ask a
question, and end the session. All internal failures are translated into
the ``resume_interview.errors`` taxonomy before leaving this module.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from resume_interview.config import Settings, get_settings
from resume_interview.db.document_store import (
    DocumentStoreBase,
    DocumentStoreError,
    create_document_store,
    document_key,
)
from resume_interview.errors import CompletionFailed, SessionExpired, StorageFailure
from resume_interview.memory.history import ConversationState, Message, Role, truncate_history
from resume_interview.memory.session_registry import SessionNotFoundError, SessionRegistry
from resume_interview.models.llm_client import (
    ChatCompletionClient,
    CompletionClientBase,
    CompletionError,
    CompletionParams,
)

logger = logging.getLogger(__name__)

FALLBACK_ANSWER = (
    "I apologize, but I could not generate a response. "
    "Please try asking your question differently."
)


class InterviewService:
    """
    Orchestrates interview sessions.

    A session moves from NONE to ACTIVE on ``start_session``, stays ACTIVE
    across ``ask_question`` calls and ends on ``end_session``. Ended and
    never-created sessions look the same to callers.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        document_store: DocumentStoreBase,
        completion_client: CompletionClientBase,
        settings: Settings | None = None,
        completion_params: CompletionParams | None = None,
    ) -> None:
        """
        Initialize the interview service.

        Args:
            registry: Registry owning all conversation states.
            document_store: Store for uploaded documents.
            completion_client: Client used to generate answers.
            settings: Application settings (uses cached settings if None).
            completion_params: Sampling parameters (built from settings if None).
        """
        settings = settings or get_settings()
        self._registry = registry
        self._store = document_store
        self._client = completion_client
        self._params = completion_params or CompletionParams.from_settings(settings)
        self._history_cap = settings.history_cap
        self._completion_timeout = settings.completion_timeout
        self._idle_timeout = (
            timedelta(seconds=settings.session_idle_timeout)
            if settings.session_idle_timeout is not None
            else None
        )

    @property
    def active_sessions(self) -> int:
        """Get the number of live sessions."""
        return len(self._registry)

    @property
    def idle_timeout(self) -> timedelta | None:
        """Get the configured idle timeout, if eviction is enabled."""
        return self._idle_timeout

    async def start_session(self, document: str) -> str:
        """
        Start an interview session from an uploaded document.

        Args:
            document: Plain text of the uploaded document.

        Returns:
            The new session id.

        Raises:
            StorageFailure: If the document could not be stored.
        """
        session_id = self._registry.create(document)
        try:
            await self._store.save(document_key(session_id), document)
        except DocumentStoreError as e:
            self._registry.delete(session_id)
            raise StorageFailure() from e
        except BaseException:
            self._registry.delete(session_id)
            raise

        logger.info(f"Started interview session {session_id}")
        return session_id

    async def ask_question(self, session_id: str, question: str) -> str:
        """
        Ask a question within a session and record the exchange.

        The exchange is atomic: the stored history only changes once an
        answer (or the fallback answer) is available.

        Args:
            session_id: Session to ask in.
            question: The interviewer's question.

        Returns:
            The generated answer, or ``FALLBACK_ANSWER`` if the provider
            returned nothing.

        Raises:
            SessionExpired: If the session is unknown or ended mid-exchange.
            CompletionFailed: If the provider failed or timed out.
        """
        try:
            async with self._registry.lock(session_id):
                state = self._registry.get(session_id)
                if state is None:
                    raise SessionNotFoundError(session_id)

                history = [*state.messages, Message(role=Role.USER, content=question)]
                answer = await self._request_answer(session_id, history)
                history.append(Message(role=Role.ASSISTANT, content=answer))

                self._registry.update(
                    session_id,
                    ConversationState(
                        session_id=state.session_id,
                        messages=truncate_history(history, self._history_cap),
                        source_document=state.source_document,
                        created_at=state.created_at,
                        last_active_at=datetime.now(timezone.utc),
                    ),
                )
        except SessionNotFoundError as e:
            logger.info(f"Question for unknown or ended session {session_id}")
            raise SessionExpired() from e

        return answer

    async def _request_answer(self, session_id: str, history: list[Message]) -> str:
        """Call the completion client, bounded by the configured timeout."""
        try:
            response = await asyncio.wait_for(
                self._client.complete(history, self._params),
                timeout=self._completion_timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(
                f"Completion for session {session_id} timed out after {self._completion_timeout}s"
            )
            raise CompletionFailed() from e
        except CompletionError as e:
            logger.error(f"Completion for session {session_id} failed: {e}")
            raise CompletionFailed() from e
        except Exception as e:
            logger.exception(f"Unexpected completion client error for session {session_id}")
            raise CompletionFailed() from e

        if not response.content.strip():
            logger.warning(f"Empty completion for session {session_id}, using fallback answer")
            return FALLBACK_ANSWER
        return response.content

    async def end_session(self, session_id: str) -> None:
        """
        End a session and drop its stored document.

        Never raises; ending an unknown or already ended session is a no-op.
        """
        removed = self._registry.delete(session_id)
        try:
            await self._store.delete(document_key(session_id))
        except DocumentStoreError as e:
            logger.warning(f"Could not delete stored document for session {session_id}: {e}")

        if removed:
            logger.info(f"Ended interview session {session_id}")

    def get_history(self, session_id: str) -> list[Message]:
        """
        Get a snapshot of a session's transcript.

        Raises:
            SessionExpired: If the session is unknown.
        """
        state = self._registry.get(session_id)
        if state is None:
            raise SessionExpired()
        return list(state.messages)

    async def get_document(self, session_id: str) -> str:
        """
        Get the stored source document of a live session.

        Raises:
            SessionExpired: If the session is unknown.
            StorageFailure: If the store is unavailable.
        """
        state = self._registry.get(session_id)
        if state is None:
            raise SessionExpired()
        try:
            document = await self._store.get(document_key(session_id))
        except DocumentStoreError as e:
            raise StorageFailure() from e

        if document is None:
            logger.warning(f"Stored document missing for session {session_id}")
            return state.source_document
        return document

    async def evict_idle_sessions(self, now: datetime | None = None) -> list[str]:
        """
        End every session idle for longer than the configured timeout.

        Returns:
            Ids of the ended sessions (empty when eviction is disabled).
        """
        if self._idle_timeout is None:
            return []

        expired = self._registry.idle_sessions(self._idle_timeout, now=now)
        for session_id in expired:
            await self.end_session(session_id)
        if expired:
            logger.info(f"Evicted {len(expired)} idle session(s)")
        return expired

    async def run_idle_reaper(self, interval: float) -> None:
        """Evict idle sessions every ``interval`` seconds until cancelled."""
        while True:
            await asyncio.sleep(interval)
            try:
                await self.evict_idle_sessions()
            except Exception:
                logger.exception("Idle session sweep failed")

    async def close(self) -> None:
        """Close the completion client and the document store."""
        await self._client.close()
        await self._store.close()


def build_interview_service(settings: Settings | None = None) -> InterviewService:
    """
    Build an interview service wired from configuration.

    Args:
        settings: Application settings (uses cached settings if None).
    """
    settings = settings or get_settings()
    client = ChatCompletionClient(
        base_url=settings.completion_base_url,
        api_key=settings.completion_api_key,
        timeout=settings.completion_timeout,
    )
    return InterviewService(
        registry=SessionRegistry(),
        document_store=create_document_store(settings.document_store_url),
        completion_client=client,
        settings=settings,
    )
