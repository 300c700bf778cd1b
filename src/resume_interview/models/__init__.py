"""
Models module for the completion client abstraction.

Provides a unified interface for requesting chat completions.
"""

from resume_interview.models.llm_client import (
    ChatCompletionClient,
    CompletionClientBase,
    CompletionError,
    CompletionParams,
    LLMResponse,
)

__all__ = [
    "ChatCompletionClient",
    "CompletionClientBase",
    "CompletionError",
    "CompletionParams",
    "LLMResponse",
]
