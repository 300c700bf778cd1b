"""
Pydantic schemas for the interview operations.

Defines the request and response payloads exchanged with callers.
"""

from typing import Literal

from pydantic import BaseModel, Field

from resume_interview.memory.history import Message


class StartSessionRequest(BaseModel):
    """Upload of the document a session is built from."""

    document: str = Field(
        ...,
        min_length=1,
        pattern=r"\S",
        description="Plain text of the uploaded document (e.g. a resume)",
    )


class StartSessionResponse(BaseModel):
    """Result of starting a session."""

    session_id: str = Field(..., description="Identifier of the new session")
    status: Literal["success"] = "success"


class AskQuestionRequest(BaseModel):
    """A question asked within a session."""

    question: str = Field(..., min_length=1, pattern=r"\S", description="Question text")


class AnswerResponse(BaseModel):
    """Answer to a question."""

    response: str = Field(..., description="Generated answer")
    status: Literal["success"] = "success"


class EndSessionResponse(BaseModel):
    """Acknowledgement of an ended session."""

    session_id: str = Field(..., description="Identifier of the ended session")
    status: Literal["success"] = "success"


class HistoryResponse(BaseModel):
    """Snapshot of a session's transcript."""

    session_id: str
    messages: list[Message] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Service health and load."""

    status: Literal["ok"] = "ok"
    active_sessions: int = Field(default=0, ge=0)


class ErrorResponse(BaseModel):
    """Error payload for every failed operation."""

    status: Literal["error"] = "error"
    error: Literal[
        "session_expired", "completion_failed", "storage_failure", "interview_error"
    ] = Field(
        ...,
        description="Machine-readable error type",
    )
    message: str = Field(..., description="User-facing message")
