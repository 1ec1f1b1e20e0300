"""Tests for error mapping in the OpenAI-compatible provider."""

import asyncio
from types import SimpleNamespace

import pytest

from design_service.llm.base import GenerationError, LLMMessage
from design_service.llm.openai_provider import OpenAICompatibleProvider

CONFIG = {
    "llm_api_url": "http://localhost:9999/v1/chat/completions",
    "llm_api_key": "test-key",
    "llm_model": "test-model",
}


def provider_raising(error: Exception) -> OpenAICompatibleProvider:
    async def create(**kwargs):
        raise error

    provider = OpenAICompatibleProvider(CONFIG)
    provider._client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return provider


def generate(provider, messages):
    return asyncio.run(provider.generate(system="instructions", messages=messages))


def test_api_key_required():
    with pytest.raises(ValueError):
        OpenAICompatibleProvider({"llm_api_key": None})


def test_unexpected_error_becomes_generation_error():
    provider = provider_raising(RuntimeError("conn reset"))

    with pytest.raises(GenerationError, match="conn reset"):
        generate(provider, [LLMMessage(role="user", content="hi")])

    assert provider.failed_requests == 1


def test_invalid_messages_are_a_generation_error():
    provider = provider_raising(RuntimeError("not reached"))

    with pytest.raises(GenerationError, match="Invalid messages format"):
        generate(provider, [])
