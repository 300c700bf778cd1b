"""
Document store.

Key/value persistence for the documents sessions are created from. The
interview service only depends on ``DocumentStoreBase``; two backends are
provided, an in-process dictionary and an SQLAlchemy async table.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from resume_interview.db.models import Base, SessionDocumentModel

logger = logging.getLogger(__name__)

DOCUMENT_KEY_PREFIX = "session:"


def document_key(session_id: str) -> str:
    """Build the storage key for a session's source document."""
    return f"{DOCUMENT_KEY_PREFIX}{session_id}"


class DocumentStoreError(Exception):
    """Raised when the underlying storage is unavailable."""


class DocumentStoreBase(ABC):
    """Abstract key/value store for source documents."""

    @abstractmethod
    async def save(self, key: str, content: str) -> None:
        """
        Store content under a key, replacing any previous value.

        Raises:
            DocumentStoreError: If the store is unavailable.
        """
        ...

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """
        Fetch content by key.

        Returns:
            The stored content, or None if the key is absent.

        Raises:
            DocumentStoreError: If the store is unavailable.
        """
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is not an error.

        Raises:
            DocumentStoreError: If the store is unavailable.
        """
        ...

    async def close(self) -> None:
        """Release any held resources."""


class InMemoryDocumentStore(DocumentStoreBase):
    """Document store backed by a dictionary; contents die with the process."""

    def __init__(self) -> None:
        self._documents: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._documents)

    async def save(self, key: str, content: str) -> None:
        self._documents[key] = content

    async def get(self, key: str) -> str | None:
        return self._documents.get(key)

    async def delete(self, key: str) -> None:
        self._documents.pop(key, None)


class SQLDocumentStore(DocumentStoreBase):
    """
    Document store backed by an SQLAlchemy async engine.

    Any async driver URL works, e.g. ``postgresql+asyncpg://...`` or
    ``sqlite+aiosqlite:///documents.db``.
    """

    def __init__(self, url: str | None = None, engine: AsyncEngine | None = None) -> None:
        """
        Initialize the store.

        Args:
            url: SQLAlchemy async database URL.
            engine: Pre-built engine (takes precedence over ``url``).
        """
        if engine is None and url is None:
            raise ValueError("SQLDocumentStore needs a database url or an engine")
        self._engine = engine or create_async_engine(url)
        self._sessionmaker = async_sessionmaker(self._engine, expire_on_commit=False)
        self._schema_ready = False

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self._schema_ready = True

    async def save(self, key: str, content: str) -> None:
        try:
            await self._ensure_schema()
            async with self._sessionmaker() as session, session.begin():
                await session.merge(SessionDocumentModel(key=key, content=content))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to save document {key}: {e}")
            raise DocumentStoreError(f"Failed to save document {key}") from e

    async def get(self, key: str) -> str | None:
        try:
            await self._ensure_schema()
            async with self._sessionmaker() as session:
                record = await session.get(SessionDocumentModel, key)
                return record.content if record is not None else None
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to load document {key}: {e}")
            raise DocumentStoreError(f"Failed to load document {key}") from e

    async def delete(self, key: str) -> None:
        try:
            await self._ensure_schema()
            async with self._sessionmaker() as session, session.begin():
                await session.execute(
                    delete(SessionDocumentModel).where(SessionDocumentModel.key == key)
                )
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to delete document {key}: {e}")
            raise DocumentStoreError(f"Failed to delete document {key}") from e

    async def close(self) -> None:
        """Dispose of the engine's connection pool."""
        await self._engine.dispose()


def create_document_store(url: str | None = None) -> DocumentStoreBase:
    """
    Build the document store selected by configuration.

    Args:
        url: SQLAlchemy async URL; None selects the in-memory store.
    """
    if url:
        logger.info("Using SQL document store")
        return SQLDocumentStore(url=url)
    logger.info("Using in-memory document store")
    return InMemoryDocumentStore()
