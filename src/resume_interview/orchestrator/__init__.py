"""
Orchestrator module for managing interview sessions.
"""

from resume_interview.orchestrator.interview_service import (
    FALLBACK_ANSWER,
    InterviewService,
    build_interview_service,
)
from resume_interview.orchestrator.schemas import (
    AnswerResponse,
    AskQuestionRequest,
    EndSessionResponse,
    ErrorResponse,
    StartSessionRequest,
    StartSessionResponse,
)

__all__ = [
    "AnswerResponse",
    "AskQuestionRequest",
    "EndSessionResponse",
    "ErrorResponse",
    "FALLBACK_ANSWER",
    "InterviewService",
    "StartSessionRequest",
    "StartSessionResponse",
    "build_interview_service",
]
