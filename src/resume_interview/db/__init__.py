"""
Database module for persistence.

Provides the key/value document store used to keep uploaded documents for
the lifetime of a session.
"""

from resume_interview.db.document_store import (
    DocumentStoreBase,
    DocumentStoreError,
    InMemoryDocumentStore,
    SQLDocumentStore,
    create_document_store,
    document_key,
)
from resume_interview.db.models import Base, SessionDocumentModel

__all__ = [
    "Base",
    "DocumentStoreBase",
    "DocumentStoreError",
    "InMemoryDocumentStore",
    "SQLDocumentStore",
    "SessionDocumentModel",
    "create_document_store",
    "document_key",
]
