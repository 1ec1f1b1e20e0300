"""
Complexity Estimator - model-assisted estimate with rule fallback

Flow:
1. Attempt(1..max_retries): one generation call per attempt, no delay
2. Success: first attempt whose text holds a JSON object
3. Exhausted: ComplexityEstimationError (AI-only entry point)
4. Fallback: the estimator fixed at construction (rules by default)
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from design_service.config import settings
from design_service.llm.base import BaseLLMProvider, LLMMessage
from design_service.models.prompts import prompts
from design_service.models.schemas.analysis import ComplexityAnalysisResult
from design_service.models.schemas.core import ComplexityLevel, MAX_ESTIMATED_BLOCKS
from design_service.services.analysis.requirement_classifier import (
    PromptInput,
    combined_text,
    detect_ui_areas,
    requirement_text,
)
from design_service.utils.logging import get_logger
from design_service.utils.response_extractor import (
    coerce_float,
    coerce_int,
    extract_json_object,
)

logger = get_logger(__name__)

DEFAULT_ESTIMATED_BLOCKS = 2
DEFAULT_CONFIDENCE = 0.8
DEFAULT_AI_REASONING = "AI analysis completed"

FallbackEstimator = Callable[[Iterable[PromptInput]], ComplexityAnalysisResult]


class ComplexityEstimationError(Exception):
    """Raised when every AI attempt failed"""

    def __init__(self, message: str, attempts: Optional[List["AttemptRecord"]] = None):
        super().__init__(message)
        self.attempts = attempts or []


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    CALL_FAILED = "call_failed"
    NO_PAYLOAD = "no_payload"


@dataclass
class AttemptRecord:
    attempt: int
    outcome: AttemptOutcome
    error: Optional[str] = None


@dataclass
class RetryState:
    """Attempting(n) -> Success | Attempting(n+1) | Exhausted"""
    max_attempts: int
    attempts: List[AttemptRecord] = field(default_factory=list)
    last_error: Optional[BaseException] = None

    @property
    def next_attempt(self) -> int:
        return len(self.attempts) + 1

    @property
    def exhausted(self) -> bool:
        return len(self.attempts) >= self.max_attempts

    def record(self, outcome: AttemptOutcome, error: Optional[BaseException] = None) -> None:
        self.attempts.append(AttemptRecord(self.next_attempt, outcome, str(error) if error else None))
        if error is not None:
            self.last_error = error


def estimate_by_rules(prompt: Iterable[PromptInput]) -> ComplexityAnalysisResult:
    """UI-area count thresholds: 0/1 simple, 2 medium, 3+ complex (capped at 4 blocks)"""
    areas = detect_ui_areas(combined_text(prompt))
    count = len(areas)
    detected = "、".join(areas)

    if count == 0:
        return ComplexityAnalysisResult(
            complexity=ComplexityLevel.SIMPLE,
            estimated_blocks=1,
            reasoning="Single UI component requirement",
        )
    if count == 1:
        return ComplexityAnalysisResult(
            complexity=ComplexityLevel.SIMPLE,
            estimated_blocks=1,
            reasoning=f"Single UI area: {detected}",
        )
    if count == 2:
        return ComplexityAnalysisResult(
            complexity=ComplexityLevel.MEDIUM,
            estimated_blocks=2,
            reasoning=f"Two UI areas: {detected}",
        )

    return ComplexityAnalysisResult(
        complexity=ComplexityLevel.COMPLEX,
        estimated_blocks=min(count, MAX_ESTIMATED_BLOCKS),
        reasoning=f"Multiple UI areas ({count} blocks): {detected}",
    )


class ComplexityEstimator:
    """
    Decides the complexity tier of a requirement.

    ``estimate`` never raises: when the model cannot produce a usable answer
    the fallback estimator given at construction decides.
    """

    def __init__(
        self,
        provider: Optional[BaseLLMProvider] = None,
        fallback: Optional[FallbackEstimator] = None,
        default_model: Optional[str] = None,
        max_retries: Optional[int] = None,
    ):
        self.provider = provider
        self.fallback: FallbackEstimator = fallback or estimate_by_rules
        self.default_model = default_model or settings.model_for("analysis")
        self.max_retries = max_retries or settings.complexity_max_retries

        self.stats = {
            "ai_estimates": 0,
            "fallback_estimates": 0,
            "failed_attempts": 0,
        }

    def estimate_by_rules(self, prompt: Iterable[PromptInput]) -> ComplexityAnalysisResult:
        return estimate_by_rules(prompt)

    async def estimate(
        self,
        prompt: Iterable[PromptInput],
        use_ai: bool = True,
        ai_model: Optional[str] = None,
        max_retries: Optional[int] = None,
    ) -> ComplexityAnalysisResult:
        prompt = list(prompt)

        if not use_ai:
            return self.fallback(prompt)

        if self.provider is None:
            logger.info("complexity.ai.unavailable", "No provider configured, using fallback")
            self.stats["fallback_estimates"] += 1
            return self.fallback(prompt)

        try:
            result = await self.estimate_with_ai(prompt, ai_model, max_retries)
            self.stats["ai_estimates"] += 1
            return result

        except ComplexityEstimationError as e:
            logger.warning(
                "complexity.fallback.used",
                "AI analysis failed, falling back",
                extra={"attempts": len(e.attempts), "error": str(e)}
            )
            self.stats["fallback_estimates"] += 1
            return self.fallback(prompt)

    async def estimate_with_ai(
        self,
        prompt: Iterable[PromptInput],
        ai_model: Optional[str] = None,
        max_retries: Optional[int] = None,
    ) -> ComplexityAnalysisResult:
        """
        Model-only estimate.

        Raises:
            ComplexityEstimationError: after ``max_retries`` failed attempts
        """
        if self.provider is None:
            raise ComplexityEstimationError("No text-generation provider configured")

        system_prompt, user_prompt = prompts.COMPLEXITY_ANALYSIS.format(
            requirement=requirement_text(prompt)
        )
        messages = [LLMMessage(role="user", content=user_prompt)]
        model = ai_model or self.default_model

        state = RetryState(max_attempts=max(1, max_retries or self.max_retries))

        while not state.exhausted:
            attempt = state.next_attempt

            try:
                response = await self.provider.generate(
                    system=system_prompt,
                    messages=messages,
                    model=model,
                )
            except Exception as e:  # any failed call is a failed attempt
                state.record(AttemptOutcome.CALL_FAILED, e)
                self.stats["failed_attempts"] += 1
                logger.warning(
                    "complexity.ai.attempt_failed",
                    extra={"attempt": attempt, "reason": "call_failed", "error": str(e)}
                )
                continue

            extraction = extract_json_object(response.content)
            if not extraction.ok:
                state.record(AttemptOutcome.NO_PAYLOAD, ValueError(str(extraction.error)))
                self.stats["failed_attempts"] += 1
                logger.warning(
                    "complexity.ai.attempt_failed",
                    extra={"attempt": attempt, "reason": "no_payload", "error": str(extraction.error)}
                )
                continue

            state.record(AttemptOutcome.SUCCESS)
            logger.info("complexity.ai.completed", extra={"attempt": attempt})
            return self._to_result(extraction.value, response.content)

        raise ComplexityEstimationError(
            f"AI analysis failed after {len(state.attempts)} attempts: {state.last_error}",
            attempts=state.attempts,
        ) from state.last_error

    def _to_result(self, payload: Dict[str, Any], raw: str) -> ComplexityAnalysisResult:
        estimated = coerce_int(payload.get("estimatedBlocks"), DEFAULT_ESTIMATED_BLOCKS)
        if estimated < 1:
            estimated = DEFAULT_ESTIMATED_BLOCKS

        confidence = coerce_float(payload.get("confidence")) or DEFAULT_CONFIDENCE

        ai_analysis = payload.get("aiAnalysis") or raw
        if not isinstance(ai_analysis, str):
            ai_analysis = str(ai_analysis)

        return ComplexityAnalysisResult(
            complexity=ComplexityLevel.normalize(payload.get("complexity")),
            estimated_blocks=min(estimated, MAX_ESTIMATED_BLOCKS),
            reasoning=str(payload.get("reasoning") or DEFAULT_AI_REASONING),
            confidence=max(0.0, min(1.0, confidence)),
            ai_analysis=ai_analysis,
        )

    def get_stats(self) -> Dict[str, Any]:
        return dict(self.stats)
