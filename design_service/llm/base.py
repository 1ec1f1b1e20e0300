"""
design_service/llm/base.py
Abstract base class for text-generation providers
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
from enum import Enum


class LLMProvider(str, Enum):
    """Supported LLM providers"""
    OPENAI_COMPATIBLE = "openai_compatible"
    SCRIPTED = "scripted"


class GenerationError(Exception):
    """Raised when the text-generation capability call itself fails"""
    pass


@dataclass
class LLMResponse:
    """Standardized LLM response: the fully consumed text of one generation call"""
    content: str
    provider: LLMProvider
    model: Optional[str] = None
    tokens_used: Optional[int] = None
    finish_reason: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LLMMessage:
    """Standardized message format"""
    role: str  # "system", "user", "assistant"
    content: str


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers"""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.provider_name: Optional[LLMProvider] = None
        self.request_timeout = config.get("request_timeout", 120.0)
        self.max_tokens_default = config.get("max_tokens_default", 4096)
        self.default_model = config.get("llm_model")

    @abstractmethod
    async def generate(
        self,
        system: str,
        messages: List[LLMMessage],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Run one generation call and consume the whole response.

        Args:
            system: System instructions
            messages: Conversation messages (no system role)
            model: Model override
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            LLMResponse object

        Raises:
            GenerationError: When the call fails
        """
        pass

    def get_provider_type(self) -> Optional[LLMProvider]:
        """Return provider type"""
        return self.provider_name

    def format_messages(self, system: str, messages: List[LLMMessage]) -> List[Dict[str, str]]:
        """Convert LLMMessage to provider-specific format with the system prompt first"""
        formatted = [{"role": "system", "content": system}] if system else []
        formatted.extend({"role": msg.role, "content": msg.content} for msg in messages)
        return formatted

    def validate_messages(self, messages: List[LLMMessage]) -> bool:
        """Validate message format"""
        if not messages:
            return False

        valid_roles = {"user", "assistant"}
        for msg in messages:
            if msg.role not in valid_roles:
                return False
            if not isinstance(msg.content, str):
                return False

        return True
