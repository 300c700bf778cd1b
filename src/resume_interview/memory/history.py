"""
Conversation history records and the truncation policy.

A session's transcript is an ordered list of messages whose first element is
always the priming system turn. ``truncate_history`` bounds the transcript
after each exchange without ever dropping that first turn.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_HISTORY_CAP = 10


def _now_utc() -> datetime:
    """Get current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


class Role(str, Enum):
    """Role of the speaker in a conversation turn."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single turn in a conversation."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="Role of the speaker (system, user, assistant)")
    content: str = Field(..., description="Message content")

    def to_wire(self) -> dict[str, str]:
        """Render the message the way chat completion APIs expect it."""
        return {"role": self.role.value, "content": self.content}


class ConversationState(BaseModel):
    """
    Conversation memory for one interview session.

    Instances are frozen; a new state is produced with ``model_copy`` for
    every completed exchange and handed back to the registry.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(..., description="Opaque session identifier")
    messages: list[Message] = Field(..., description="Transcript, system turn first")
    source_document: str = Field(..., description="Uploaded document the persona is built from")
    created_at: datetime = Field(default_factory=_now_utc)
    last_active_at: datetime = Field(default_factory=_now_utc)

    @field_validator("messages")
    @classmethod
    def _starts_with_system_turn(cls, value: list[Message]) -> list[Message]:
        if not value:
            raise ValueError("conversation must contain the system turn")
        if value[0].role is not Role.SYSTEM:
            raise ValueError("first message must be the system turn")
        return value

    @property
    def system_turn(self) -> Message:
        """Get the priming instruction."""
        return self.messages[0]

    @property
    def dialogue(self) -> list[Message]:
        """Get every turn after the system turn."""
        return self.messages[1:]


def truncate_history(messages: Sequence[Message], cap: int = DEFAULT_HISTORY_CAP) -> list[Message]:
    """
    Bound a transcript to ``cap`` messages, keeping the system turn.

    When the transcript is over the cap, the first message is kept and
    followed by the most recent ``cap - 1`` messages; everything in between
    is dropped. A cap below 1 is treated as 1.

    Args:
        messages: Transcript with the system turn first.
        cap: Maximum number of messages to keep.

    Returns:
        A new list; the input is never modified.
    """
    cap = max(cap, 1)
    if len(messages) <= cap:
        return list(messages)

    head = messages[0]
    if cap == 1:
        return [head]
    return [head, *messages[-(cap - 1):]]
