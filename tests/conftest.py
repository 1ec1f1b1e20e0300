"""
Shared pytest fixtures for all tests.

Provides a scripted text-generation provider and small component catalogs.
"""

from typing import Any, Dict, List, Optional, Union

import pytest

from design_service.llm.base import BaseLLMProvider, LLMMessage, LLMProvider, LLMResponse
from design_service.models.schemas.catalog import ComponentCatalog
from design_service.models.schemas.design import Prompt


class ScriptedProvider(BaseLLMProvider):
    """Replays queued responses; queued exceptions are raised instead."""

    def __init__(self, responses: Optional[List[Union[str, BaseException]]] = None):
        super().__init__({"llm_model": "scripted-model"})
        self.provider_name = LLMProvider.SCRIPTED
        self.responses = list(responses or [])
        self.calls: List[Dict[str, Any]] = []

    async def generate(
        self,
        system: str,
        messages: List[LLMMessage],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        self.calls.append({"system": system, "messages": messages, "model": model})

        if not self.responses:
            raise AssertionError("ScriptedProvider has no response left")

        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item

        return LLMResponse(content=item, provider=LLMProvider.SCRIPTED, model=model)


# =============================================================================
# CATALOG FIXTURES
# =============================================================================

@pytest.fixture
def sample_catalog() -> ComponentCatalog:
    """Catalog with a documented button and two bare entries."""
    return ComponentCatalog(
        {
            "cat-button": {
                "purpose": "Primary action button",
                "usage": ["Form submission", "Toolbar actions"],
                "api": {"props": {"loading": "boolean"}},
            },
            "cat-table": {
                "purpose": "Data table with pagination",
                "usage": "Lists of records",
            },
        },
        source="fixture",
    )


@pytest.fixture
def ab_catalog() -> ComponentCatalog:
    return ComponentCatalog({"a": {"purpose": "first"}, "b": {"purpose": "second"}})


@pytest.fixture
def empty_catalog() -> ComponentCatalog:
    return ComponentCatalog({})


# =============================================================================
# PROMPT FIXTURES
# =============================================================================

@pytest.fixture
def table_search_prompt() -> List[Prompt]:
    return [Prompt(type="text", text="需要一个表格和搜索表单")]


@pytest.fixture
def simple_prompt() -> List[Prompt]:
    return [Prompt(type="text", text="A primary button")]


@pytest.fixture
def scripted_provider():
    """Factory: ``scripted_provider("reply", GenerationError("boom"), ...)``"""
    def build(*responses: Union[str, BaseException]) -> ScriptedProvider:
        return ScriptedProvider(list(responses))
    return build
