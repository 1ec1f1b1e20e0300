"""
Smart strategy engine - business-domain decomposition

One generation request embedding the component catalog; any failure
(call error, no payload, malformed payload) falls back to a keyword
analysis that never recommends blocks.
"""
import re
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from design_service.config import settings
from design_service.llm.base import BaseLLMProvider, LLMMessage
from design_service.models.prompts import prompts
from design_service.models.schemas.analysis import (
    ComponentMatch,
    InteractionPattern,
    SmartAnalysis,
    SmartDesignBlock,
)
from design_service.models.schemas.catalog import ComponentCatalog
from design_service.models.schemas.core import BlockType, ComplexityLevel, Priority
from design_service.models.schemas.design import DesignBlock, DesignStrategy, ImplementationStep
from design_service.services.analysis.requirement_classifier import (
    PromptInput,
    combined_text,
    requirement_text,
)
from design_service.utils.logging import get_logger, trace_async
from design_service.utils.response_extractor import extract_json_object

logger = get_logger(__name__)

FALLBACK_MATCH_SCORE = 0.6
FALLBACK_REASONING = "Basic analysis: business domains identified from keywords"

# (domain label, keywords)
DOMAIN_KEYWORDS = [
    ("Data management", re.compile(r"表格|列表|数据|table|list|crud")),
    ("User interaction", re.compile(r"表单|输入|form|input")),
    ("Data display", re.compile(r"图表|统计|chart|statistics")),
]
MODAL_KEYWORDS = re.compile(r"弹窗|modal|drawer")


class SmartStrategyEngine:
    """
    Model-assisted decomposition into business-domain blocks.

    Features:
    - Catalog-aware prompt (existing components preferred)
    - Interaction patterns and component-match scores
    - Keyword fallback on any failure
    """

    def __init__(
        self,
        provider: Optional[BaseLLMProvider] = None,
        default_model: Optional[str] = None,
    ):
        self.provider = provider
        self.default_model = default_model or settings.model_for("analysis")

    @trace_async("strategy.smart")
    async def analyze_smartly(
        self,
        prompt: Iterable[PromptInput],
        catalog: ComponentCatalog,
        ai_model: Optional[str] = None,
    ) -> SmartAnalysis:
        prompt = list(prompt)

        if self.provider is None:
            logger.info("strategy.smart.unavailable", "No provider configured, using keyword analysis")
            return self.fallback_analysis(prompt, catalog)

        system_prompt, user_prompt = prompts.SMART_STRATEGY.format(
            catalog=catalog.describe() or "No existing component library information",
            requirement=requirement_text(prompt),
        )

        try:
            response = await self.provider.generate(
                system=system_prompt,
                messages=[LLMMessage(role="user", content=user_prompt)],
                model=ai_model or self.default_model,
            )
        except Exception as e:
            logger.warning("strategy.smart.fallback", extra={"reason": "call_failed", "error": str(e)})
            return self.fallback_analysis(prompt, catalog)

        extraction = extract_json_object(response.content)
        if not extraction.ok:
            logger.warning("strategy.smart.fallback", extra={"reason": "no_payload", "error": str(extraction.error)})
            return self.fallback_analysis(prompt, catalog)

        try:
            analysis = self._to_analysis(extraction.value)
        except ValidationError as e:
            logger.warning(
                "strategy.smart.fallback",
                extra={"reason": "malformed_payload", "errors": e.error_count()}
            )
            return self.fallback_analysis(prompt, catalog)

        logger.info(
            "strategy.smart.completed",
            extra={
                "domains": analysis.business_domains,
                "blocks": [b.block_id for b in analysis.recommended_blocks],
            }
        )
        return analysis

    async def generate_strategy(
        self,
        prompt: Iterable[PromptInput],
        catalog: ComponentCatalog,
        ai_model: Optional[str] = None,
    ) -> DesignStrategy:
        analysis = await self.analyze_smartly(prompt, catalog, ai_model)
        return self.strategy_from_analysis(analysis)

    def strategy_from_analysis(self, analysis: SmartAnalysis) -> DesignStrategy:
        recommended = _unique_block_ids(analysis.recommended_blocks)

        blocks = [
            DesignBlock(
                block_id=block.block_id,
                block_type=BlockType.LAYOUT if block.block_type == "layout" else BlockType.COMPONENT,
                title=block.title,
                description=block.description,
                components=block.components,
                dependencies=block.dependencies,
                estimated_tokens=block.estimated_tokens,
                priority=block.priority,
            )
            for block in recommended
        ]

        if analysis.business_domains:
            summary = f"Smart analysis: covers business domains {', '.join(analysis.business_domains)}"
        else:
            summary = "Smart analysis: no business domain identified"

        return DesignStrategy(
            requirement_summary=summary,
            complexity_level=analysis.complexity,
            design_strategy=analysis.reasoning,
            blocks=blocks,
            implementation_steps=implementation_steps(blocks),
        )

    def fallback_analysis(self, prompt: Iterable[PromptInput], catalog: ComponentCatalog) -> SmartAnalysis:
        """Keyword analysis: domains, modal pattern and purpose matches; no blocks"""
        text = combined_text(prompt)

        domains = [label for label, pattern in DOMAIN_KEYWORDS if pattern.search(text)]

        patterns = []
        if MODAL_KEYWORDS.search(text):
            patterns.append(InteractionPattern(
                type="modal",
                description="Modal interaction pattern",
                components=["main component", "modal component"],
            ))

        matches = []
        for name in catalog.names():
            purpose = (catalog.get(name) or {}).get("purpose")
            if isinstance(purpose, str) and purpose and purpose.lower() in text:
                matches.append(ComponentMatch(
                    component_name=name,
                    match_score=FALLBACK_MATCH_SCORE,
                    capabilities=[purpose],
                    can_handle=[purpose],
                ))

        if len(domains) <= 1:
            complexity = ComplexityLevel.SIMPLE
        elif len(domains) <= 2:
            complexity = ComplexityLevel.MEDIUM
        else:
            complexity = ComplexityLevel.COMPLEX

        return SmartAnalysis(
            business_domains=domains,
            interaction_patterns=patterns,
            existing_component_matches=matches,
            recommended_blocks=[],
            complexity=complexity,
            reasoning=FALLBACK_REASONING,
            source="fallback",
        )

    def _to_analysis(self, payload: Dict[str, Any]) -> SmartAnalysis:
        return SmartAnalysis.model_validate({
            "businessDomains": _list_of(payload.get("businessDomains"), str),
            "interactionPatterns": _list_of(payload.get("interactionPatterns"), dict),
            "existingComponentMatches": _list_of(payload.get("existingComponentMatches"), dict),
            "recommendedBlocks": _list_of(payload.get("recommendedBlocks"), dict),
            "complexity": payload.get("complexity"),
            "reasoning": payload.get("reasoning") or "Smart analysis completed",
            "source": "ai",
        })


def implementation_steps(blocks: List[DesignBlock]) -> List[ImplementationStep]:
    """High priority first, then fewer dependencies; stable otherwise"""
    ordered = sorted(
        blocks,
        key=lambda block: (block.priority != Priority.HIGH, len(block.dependencies))
    )
    return [
        ImplementationStep(
            step_number=index + 1,
            block_id=block.block_id,
            action=f"Design {block.title}",
        )
        for index, block in enumerate(ordered)
    ]


def _list_of(value: Any, item_type: type) -> List[Any]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, item_type)]


def _unique_block_ids(blocks: List[SmartDesignBlock]) -> List[SmartDesignBlock]:
    used = set()
    unique = []
    for block in blocks:
        block_id = block.block_id
        suffix = 2
        while block_id in used:
            block_id = f"{block.block_id}-{suffix}"
            suffix += 1
        if block_id != block.block_id:
            logger.warning(
                "strategy.smart.duplicate_block_id",
                extra={"block_id": block.block_id, "renamed_to": block_id}
            )
            block = block.model_copy(update={"block_id": block_id})
        used.add(block_id)
        unique.append(block)
    return unique
