"""
Completion client abstraction.

Provides a unified interface for requesting chat completions from a remote
OpenAI-compatible endpoint. Clients never retry; a failed call surfaces as
``CompletionError`` and the caller decides what to do with it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import BaseModel, Field

from resume_interview.config import Settings, get_settings
from resume_interview.memory.history import Message

logger = logging.getLogger(__name__)


class CompletionParams(BaseModel):
    """Sampling parameters sent with every completion request."""

    model: str = Field(default="gpt-3.5-turbo", description="Model name")
    temperature: float = Field(default=0.9, description="Sampling temperature")
    max_tokens: int = Field(default=350, description="Maximum tokens to generate")
    presence_penalty: float = Field(default=0.7, description="Penalty for revisiting topics")
    frequency_penalty: float = Field(default=0.5, description="Penalty for repeated tokens")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> CompletionParams:
        """Build parameters from application settings."""
        settings = settings or get_settings()
        return cls(
            model=settings.completion_model,
            temperature=settings.completion_temperature,
            max_tokens=settings.completion_max_tokens,
            presence_penalty=settings.completion_presence_penalty,
            frequency_penalty=settings.completion_frequency_penalty,
        )


class LLMResponse(BaseModel):
    """Response from a completion provider."""

    content: str = Field(..., description="Generated text content")
    finish_reason: str = Field(default="stop", description="Reason for completion")
    usage: dict[str, int] = Field(
        default_factory=dict,
        description="Token usage information",
    )
    model: str = Field(default="", description="Model used for generation")


class CompletionError(Exception):
    """Exception raised when a completion request fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CompletionClientBase(ABC):
    """Abstract base class for completion clients."""

    @abstractmethod
    async def complete(
        self,
        history: Sequence[Message],
        params: CompletionParams,
    ) -> LLMResponse:
        """
        Generate the next assistant turn for a conversation.

        Args:
            history: Ordered transcript, system turn first, new user turn last.
            params: Sampling parameters.

        Returns:
            Generated response. ``content`` may be empty.

        Raises:
            CompletionError: On any transport or provider failure.
        """
        ...

    async def close(self) -> None:
        """Release any held resources."""


class ChatCompletionClient(CompletionClientBase):
    """
    Client for OpenAI-compatible ``/chat/completions`` endpoints.

    Works against the hosted OpenAI API as well as local servers exposing
    the same route (for example Ollama's ``/v1``).
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API base URL (uses config if not provided).
            api_key: Bearer token (uses config if not provided).
            timeout: Request timeout in seconds (uses config if not provided).
            transport: Optional httpx transport, mainly for tests.
        """
        settings = get_settings()
        self._base_url = (base_url or settings.completion_base_url).rstrip("/")
        self._api_key = settings.completion_api_key if api_key is None else api_key
        self._timeout = timeout or settings.completion_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        logger.info(f"Initialized chat completion client for {self._base_url}")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _build_payload(history: Sequence[Message], params: CompletionParams) -> dict[str, Any]:
        return {
            "model": params.model,
            "messages": [message.to_wire() for message in history],
            "temperature": params.temperature,
            "max_tokens": params.max_tokens,
            "presence_penalty": params.presence_penalty,
            "frequency_penalty": params.frequency_penalty,
        }

    @staticmethod
    def _parse_response(body: Any, default_model: str) -> LLMResponse:
        """
        Extract the first choice from a chat completions body.

        A body without choices or without message content yields an empty
        ``content`` rather than an error.
        """
        if not isinstance(body, dict):
            raise CompletionError("Completion response is not a JSON object")

        choices = body.get("choices") or []
        first = choices[0] if choices and isinstance(choices[0], dict) else {}
        message = first.get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None

        usage = body.get("usage") or {}
        return LLMResponse(
            content=content if isinstance(content, str) else "",
            finish_reason=first.get("finish_reason") or "stop",
            usage={k: v for k, v in usage.items() if isinstance(v, int)},
            model=body.get("model") or default_model,
        )

    async def complete(
        self,
        history: Sequence[Message],
        params: CompletionParams,
    ) -> LLMResponse:
        """
        Request a chat completion.

        Args:
            history: Ordered transcript to send.
            params: Sampling parameters.

        Returns:
            Parsed response.

        Raises:
            CompletionError: On network errors, timeouts, non-2xx statuses or
                undecodable bodies.
        """
        client = await self._get_client()
        payload = self._build_payload(history, params)

        logger.debug(f"Requesting completion: model={params.model} messages={len(history)}")
        try:
            response = await client.post("/chat/completions", json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Completion request timed out after {self._timeout}s")
            raise CompletionError(f"Completion timed out after {self._timeout} seconds") from e
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"Completion provider returned HTTP {status_code}")
            raise CompletionError(
                f"Completion provider returned HTTP {status_code}",
                status_code=status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Completion transport error: {e}")
            raise CompletionError(f"Completion transport error: {e}") from e
        except ValueError as e:
            logger.error(f"Completion response was not valid JSON: {e}")
            raise CompletionError("Completion response was not valid JSON") from e

        result = self._parse_response(body, params.model)
        logger.debug(
            f"Completion finished: reason={result.finish_reason} chars={len(result.content)}"
        )
        return result
