"""
Memory module for per-session conversation state.

Provides the conversation records, the truncation policy and the registry
that owns every live session.
"""

from resume_interview.memory.history import (
    DEFAULT_HISTORY_CAP,
    ConversationState,
    Message,
    Role,
    truncate_history,
)
from resume_interview.memory.session_registry import SessionNotFoundError, SessionRegistry

__all__ = [
    "ConversationState",
    "DEFAULT_HISTORY_CAP",
    "Message",
    "Role",
    "SessionNotFoundError",
    "SessionRegistry",
    "truncate_history",
]
