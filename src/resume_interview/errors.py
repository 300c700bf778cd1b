"""
Service-boundary error taxonomy.

Every failure that reaches a caller of the interview service is one of the
exceptions below. Internal errors (registry, store, completion transport)
are translated into these before they leave the service.
"""


class InterviewError(Exception):
    """Base class for errors surfaced to interview callers."""

    code: str = "interview_error"
    default_message: str = "The interview service failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class SessionExpired(InterviewError):
    """The session id is unknown, either never created or already ended."""

    code = "session_expired"
    default_message = "Session expired. Please start a new interview."


class CompletionFailed(InterviewError):
    """The completion provider errored or timed out."""

    code = "completion_failed"
    default_message = "Failed to generate response. Please try again."


class StorageFailure(InterviewError):
    """The document store is unavailable."""

    code = "storage_failure"
    default_message = "Document storage is unavailable. Please try again later."
