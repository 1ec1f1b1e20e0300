"""
design_service/llm/openai_provider.py
Text-generation provider for OpenAI-compatible chat endpoints (streamed)
"""
from typing import List, Optional, Dict, Any
from datetime import datetime

from openai import AsyncOpenAI, APIError, APIStatusError, APITimeoutError, AuthenticationError

from .base import BaseLLMProvider, GenerationError, LLMResponse, LLMMessage, LLMProvider
from design_service.utils.logging import get_logger

logger = get_logger(__name__)


class OpenAICompatibleProvider(BaseLLMProvider):
    """
    Streams a chat completion and concatenates the chunks into one string.

    One call per ``generate``; retries belong to the callers that want them.
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.provider_name = LLMProvider.OPENAI_COMPATIBLE

        self.api_url = config.get("llm_api_url", "https://api.openai.com/v1")
        self.api_key = config.get("llm_api_key")
        self.temperature = config.get("temperature", 0.7)

        # Stats
        self.total_requests = 0
        self.successful_requests = 0
        self.failed_requests = 0

        if not self.api_key:
            raise ValueError("LLM API key (DESIGN_LLM_API_KEY) is required")

        # base_url strips trailing /chat/completions if present
        base_url = self.api_url.rstrip("/")
        if base_url.endswith("/chat/completions"):
            base_url = base_url[: -len("/chat/completions")]

        self._client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=base_url,
            timeout=self.request_timeout,
            max_retries=0,
        )

        logger.info(
            "llm.provider.initialized",
            extra={
                "model": self.default_model,
                "base_url": base_url,
                "timeout": self.request_timeout,
            }
        )

    async def generate(
        self,
        system: str,
        messages: List[LLMMessage],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs,
    ) -> LLMResponse:
        self.total_requests += 1

        if not self.validate_messages(messages):
            raise GenerationError("Invalid messages format")

        model_name = model or self.default_model
        temperature = self.temperature if temperature is None else max(0.0, min(2.0, temperature))
        start = datetime.now()

        try:
            stream = await self._client.chat.completions.create(
                model=model_name,
                messages=self.format_messages(system, messages),
                temperature=temperature,
                max_tokens=max_tokens or self.max_tokens_default,
                stream=True,
            )

            parts: List[str] = []
            finish_reason = None
            async for chunk in stream:
                if not chunk.choices:
                    continue
                choice = chunk.choices[0]
                if choice.delta and choice.delta.content:
                    parts.append(choice.delta.content)
                if choice.finish_reason:
                    finish_reason = choice.finish_reason

        except AuthenticationError as e:
            self.failed_requests += 1
            raise GenerationError("LLM authentication failed: check DESIGN_LLM_API_KEY") from e

        except APITimeoutError as e:
            self.failed_requests += 1
            logger.warning("llm.generate.timeout", extra={"model": model_name})
            raise GenerationError(f"LLM request timed out after {self.request_timeout}s") from e

        except APIStatusError as e:
            self.failed_requests += 1
            logger.warning(
                "llm.generate.status_error",
                extra={"model": model_name, "status": e.status_code}
            )
            raise GenerationError(f"LLM returned status {e.status_code}: {e.message}") from e

        except APIError as e:
            self.failed_requests += 1
            raise GenerationError(f"LLM request failed: {e}") from e

        except Exception as e:
            self.failed_requests += 1
            logger.error(
                "llm.generate.unexpected_error",
                extra={"model": model_name, "error": str(e)},
                exc_info=e,
            )
            raise GenerationError(f"LLM request failed unexpectedly: {e}") from e

        response_time = (datetime.now() - start).total_seconds()
        content = "".join(parts)
        self.successful_requests += 1

        logger.info(
            "llm.generate.completed",
            extra={
                "model": model_name,
                "chars": len(content),
                "time_s": round(response_time, 2),
                "finish_reason": finish_reason,
            }
        )

        return LLMResponse(
            content=content,
            provider=self.provider_name,
            model=model_name,
            finish_reason=finish_reason,
            metadata={"response_time": response_time},
        )

    def get_stats(self) -> Dict[str, Any]:
        return {
            "provider": self.provider_name.value,
            "model": self.default_model,
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
        }
