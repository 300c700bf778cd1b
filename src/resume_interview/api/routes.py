"""
HTTP interface for interview sessions.

Exposes start / ask / end as JSON endpoints and renders every service
error as the single ``ErrorResponse`` payload.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from resume_interview.config import Settings, get_settings
from resume_interview.errors import InterviewError
from resume_interview.orchestrator.interview_service import (
    InterviewService,
    build_interview_service,
)
from resume_interview.orchestrator.schemas import (
    AnswerResponse,
    AskQuestionRequest,
    EndSessionResponse,
    ErrorResponse,
    HealthResponse,
    HistoryResponse,
    StartSessionRequest,
    StartSessionResponse,
)

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[str, int] = {
    "session_expired": status.HTTP_404_NOT_FOUND,
    "completion_failed": status.HTTP_502_BAD_GATEWAY,
    "storage_failure": status.HTTP_503_SERVICE_UNAVAILABLE,
}

_error_responses = {
    code: {"model": ErrorResponse} for code in sorted(set(ERROR_STATUS_CODES.values()))
}

router = APIRouter(prefix="/interview", tags=["interview"])


def get_interview_service(request: Request) -> InterviewService:
    """Get the service bound to the running application."""
    return request.app.state.interview_service


@router.post(
    "/sessions",
    response_model=StartSessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_error_responses,
)
async def start_session(
    payload: StartSessionRequest,
    service: InterviewService = Depends(get_interview_service),
) -> StartSessionResponse:
    """Start an interview session from an uploaded document."""
    session_id = await service.start_session(payload.document)
    return StartSessionResponse(session_id=session_id)


@router.post(
    "/sessions/{session_id}/questions",
    response_model=AnswerResponse,
    responses=_error_responses,
)
async def ask_question(
    session_id: str,
    payload: AskQuestionRequest,
    service: InterviewService = Depends(get_interview_service),
) -> AnswerResponse:
    """Ask a question and get the candidate's answer."""
    answer = await service.ask_question(session_id, payload.question)
    return AnswerResponse(response=answer)


@router.get(
    "/sessions/{session_id}/messages",
    response_model=HistoryResponse,
    responses=_error_responses,
)
async def get_history(
    session_id: str,
    service: InterviewService = Depends(get_interview_service),
) -> HistoryResponse:
    """Return the retained transcript of a session."""
    return HistoryResponse(session_id=session_id, messages=service.get_history(session_id))


@router.delete("/sessions/{session_id}", response_model=EndSessionResponse)
async def end_session(
    session_id: str,
    service: InterviewService = Depends(get_interview_service),
) -> EndSessionResponse:
    """End a session. Always succeeds."""
    await service.end_session(session_id)
    return EndSessionResponse(session_id=session_id)


async def _handle_interview_error(request: Request, exc: InterviewError) -> JSONResponse:
    payload = ErrorResponse(error=exc.code, message=exc.message)
    return JSONResponse(
        status_code=ERROR_STATUS_CODES.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content=payload.model_dump(),
    )


def create_app(
    service: InterviewService | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        service: Interview service to expose (built from settings if None).
        settings: Application settings (uses cached settings if None).
    """
    settings = settings or get_settings()
    owns_service = service is None
    service = service or build_interview_service(settings)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        reaper: asyncio.Task[None] | None = None
        if service.idle_timeout is not None:
            logger.info(
                f"Idle eviction enabled: timeout={service.idle_timeout}, "
                f"sweep every {settings.idle_sweep_interval}s"
            )
            reaper = asyncio.create_task(service.run_idle_reaper(settings.idle_sweep_interval))
        try:
            yield
        finally:
            if reaper is not None:
                reaper.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await reaper
            if owns_service:
                await service.close()

    app = FastAPI(title="Resume Interview", version="0.1.0", lifespan=lifespan, debug=settings.debug)
    app.state.interview_service = service
    app.include_router(router)
    app.add_exception_handler(InterviewError, _handle_interview_error)

    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(active_sessions=service.active_sessions)

    return app
