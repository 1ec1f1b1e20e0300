"""
design_service/llm/__init__.py
LLM module exports
"""
from .base import (
    BaseLLMProvider,
    GenerationError,
    LLMResponse,
    LLMMessage,
    LLMProvider
)
from .openai_provider import OpenAICompatibleProvider

__all__ = [
    "BaseLLMProvider",
    "GenerationError",
    "LLMResponse",
    "LLMMessage",
    "LLMProvider",
    "OpenAICompatibleProvider",
]
