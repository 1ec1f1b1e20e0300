"""
Design Pipeline

Stages of one requirement, each driven by a separate caller request:
1. analyze_and_plan: complexity estimate, then rule plan (simple) or smart strategy
2. design_block: one generation call per block
3. integrate: fold the strategy and the block designs supplied so far
4. query_component: catalog lookup

No state is kept between requests: the caller resubmits the strategy and
the completed block designs every time.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from design_service.config import settings
from design_service.llm.base import BaseLLMProvider
from design_service.models.schemas.analysis import ComplexityAnalysisResult, SmartAnalysis
from design_service.models.schemas.catalog import ComponentCatalog
from design_service.models.schemas.core import ComplexityLevel
from design_service.models.schemas.design import (
    BlockDesignEntry,
    ComponentDesign,
    DesignBlock,
    DesignStrategy,
    IntegratedDesign,
    IntegrationContext,
    Prompt,
)
from design_service.services.analysis.complexity_estimator import ComplexityEstimator
from design_service.services.analysis.smart_strategy import SmartStrategyEngine, implementation_steps
from design_service.services.generation.block_designer import BlockDesignGenerator
from design_service.services.generation.block_planner import BlockPlanner, MAIN_COMPONENT_BLOCK_ID
from design_service.services.generation.design_integrator import DesignIntegrator
from design_service.utils.logging import get_logger, log_context, trace_async

logger = get_logger(__name__)

DESIGN_BLOCK_TOOL = "design_block"
INTEGRATE_TOOL = "integrate"


@dataclass
class PlanResult:
    strategy: DesignStrategy
    complexity: ComplexityAnalysisResult
    analysis: Optional[SmartAnalysis] = None
    next_action: Optional[Dict[str, Any]] = None


@dataclass
class BlockDesignResult:
    block_id: str
    design: ComponentDesign
    integrated: Optional[IntegratedDesign] = None
    next_action: Optional[Dict[str, Any]] = None


class DesignPipeline:
    """
    Wires the stages together around one process-wide catalog.

    A request may bring its own ``rules``; they are only used when the
    process catalog is empty.
    """

    def __init__(
        self,
        provider: Optional[BaseLLMProvider],
        catalog: ComponentCatalog,
        use_ai: Optional[bool] = None,
        estimator: Optional[ComplexityEstimator] = None,
    ):
        self.provider = provider
        self.catalog = catalog
        self.use_ai = settings.complexity_use_ai if use_ai is None else use_ai

        self.estimator = estimator or ComplexityEstimator(provider)
        self.planner = BlockPlanner()
        self.strategy_engine = SmartStrategyEngine(provider)
        self.block_designer = BlockDesignGenerator(provider, catalog)
        self.integrator = DesignIntegrator(catalog)

    def catalog_for(self, rules: Optional[List[Dict[str, Any]]] = None) -> ComponentCatalog:
        if self.catalog.is_empty and rules:
            catalog = ComponentCatalog.from_rules(rules, source="request")
            logger.debug("pipeline.catalog.from_rules", extra={"components": len(catalog)})
            return catalog
        return self.catalog

    # ------------------------------------------------------------------
    # Stage 1: analyze and plan
    # ------------------------------------------------------------------

    @trace_async("pipeline.analyze")
    async def analyze_and_plan(
        self,
        prompt: List[Prompt],
        rules: Optional[List[Dict[str, Any]]] = None,
    ) -> PlanResult:
        with log_context(operation="analyze_and_plan"):
            catalog = self.catalog_for(rules)
            complexity = await self.estimator.estimate(prompt, use_ai=self.use_ai)

            logger.info(
                "pipeline.complexity.estimated",
                extra={
                    "complexity": complexity.complexity.value,
                    "estimated_blocks": complexity.estimated_blocks,
                }
            )

            analysis = None
            if complexity.complexity == ComplexityLevel.SIMPLE:
                strategy = self.planner.simple_strategy(prompt, complexity.reasoning)
            else:
                analysis = await self.strategy_engine.analyze_smartly(prompt, catalog)
                strategy = self.strategy_engine.strategy_from_analysis(analysis)

                if not strategy.blocks:
                    blocks = self.planner.generate_block_strategy(prompt, complexity.complexity)
                    logger.info(
                        "pipeline.strategy.rule_blocks",
                        "Smart analysis recommended no blocks, using rule-based plan",
                        extra={"blocks": [b.block_id for b in blocks]}
                    )
                    strategy = strategy.model_copy(update={
                        "complexity_level": complexity.complexity,
                        "blocks": blocks,
                        "implementation_steps": implementation_steps(blocks),
                    })

            dangling = strategy.dangling_dependencies()
            if dangling:
                logger.warning("pipeline.strategy.dangling_dependencies", extra={"dangling": dangling})

            return PlanResult(
                strategy=strategy,
                complexity=complexity,
                analysis=analysis,
                next_action=self.next_design_action(strategy, prompt),
            )

    def next_design_action(self, strategy: DesignStrategy, prompt: List[Prompt]) -> Optional[Dict[str, Any]]:
        # The first step always names a block of this strategy
        if strategy.implementation_steps:
            block_id = strategy.implementation_steps[0].block_id
        elif strategy.complexity_level == ComplexityLevel.SIMPLE:
            block_id = MAIN_COMPONENT_BLOCK_ID
        else:
            return None

        if strategy.complexity_level == ComplexityLevel.SIMPLE:
            reason = "Simple component generates code directly"
        else:
            reason = (
                "Start designing the first component block, create sub-components "
                "step by step according to implementation steps"
            )

        block = strategy.find_block(block_id)
        arguments: Dict[str, Any] = {
            "blockId": block_id,
            "prompt": [p.to_wire() for p in prompt],
            "integratedContext": {
                "strategy": strategy.to_wire(),
                "blockDesigns": [],
            },
        }
        if block is not None:
            arguments["blockInfo"] = block.to_wire()

        return {"tool": DESIGN_BLOCK_TOOL, "arguments": arguments, "reason": reason}

    # ------------------------------------------------------------------
    # Stage 2: design one block
    # ------------------------------------------------------------------

    async def design_block(
        self,
        block_id: str,
        prompt: List[Prompt],
        block_info: Optional[DesignBlock] = None,
        integrated_context: Optional[IntegrationContext] = None,
        rules: Optional[List[Dict[str, Any]]] = None,
    ) -> BlockDesignResult:
        """
        Raises:
            GenerationError: when the generation call fails
        """
        with log_context(operation="design_block", block_id=block_id):
            catalog = self.catalog_for(rules)
            designer = self.block_designer
            if catalog is not self.catalog:
                designer = BlockDesignGenerator(self.provider, catalog)

            design = await designer.design_block(
                prompt,
                block_id,
                block_info=block_info,
                integrated_context=integrated_context,
            )

            result = BlockDesignResult(block_id=block_id, design=design)

            if integrated_context is not None and integrated_context.strategy is not None:
                block_designs = [
                    *integrated_context.block_designs,
                    BlockDesignEntry(block_id=block_id, component=design),
                ]
                result.integrated = DesignIntegrator(catalog).integrate(
                    integrated_context.strategy, block_designs
                )
                result.next_action = {
                    "tool": INTEGRATE_TOOL,
                    "arguments": {
                        "strategy": integrated_context.strategy.to_wire(),
                        "blockDesigns": [entry.to_wire() for entry in block_designs],
                    },
                    "reason": "Block design completed, ready for integration",
                }

            return result

    # ------------------------------------------------------------------
    # Stage 3: integrate
    # ------------------------------------------------------------------

    def integrate(self, strategy: DesignStrategy, block_designs: List[BlockDesignEntry]) -> IntegratedDesign:
        with log_context(operation="integrate"):
            return self.integrator.integrate(strategy, block_designs)

    # ------------------------------------------------------------------
    # Stage 4: catalog lookup
    # ------------------------------------------------------------------

    def query_component(self, component_name: str) -> Dict[str, Any]:
        """
        Raises:
            ComponentNotFoundError: listing every available component
        """
        return self.catalog.query(component_name)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "catalog_components": len(self.catalog),
            "complexity": self.estimator.get_stats(),
            "block_design": self.block_designer.get_stats(),
        }
