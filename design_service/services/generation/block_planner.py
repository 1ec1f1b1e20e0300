"""
Rule-based block planner.

Turns detected UI areas into design blocks for a complexity tier. Never
calls the model and never fails.
"""
from typing import Iterable, List

from design_service.models.schemas.core import BlockType, ComplexityLevel, Priority
from design_service.models.schemas.design import DesignBlock, DesignStrategy, ImplementationStep
from design_service.services.analysis.requirement_classifier import (
    PromptInput,
    classify,
    is_layout_area,
)
from design_service.utils.logging import get_logger

logger = get_logger(__name__)

MAIN_COMPONENT_BLOCK_ID = "main-component"
LAYOUT_BLOCK_ID = "layout-structure"
MAIN_CONTENT_BLOCK_ID = "main-content"
SIMPLE_DESIGN_STRATEGY = "Design single component directly"


class BlockPlanner:
    """
    Rule-based decomposition.

    simple:          one ``main-component`` block
    medium/complex:  layout areas merged into ``layout-structure``,
                     one ``content-area-N`` block per remaining area
    """

    def plan_blocks(self, areas: List[str], complexity: ComplexityLevel) -> List[DesignBlock]:
        complexity = ComplexityLevel.normalize(complexity)

        if complexity == ComplexityLevel.SIMPLE:
            return [self._simple_block(areas)]

        return self._layered_blocks(areas)

    def generate_block_strategy(
        self,
        prompt: Iterable[PromptInput],
        complexity: ComplexityLevel
    ) -> List[DesignBlock]:
        areas = classify(prompt)
        blocks = self.plan_blocks(areas, complexity)

        logger.debug(
            "planner.blocks.generated",
            extra={
                "complexity": ComplexityLevel.normalize(complexity).value,
                "areas": areas,
                "blocks": [b.block_id for b in blocks],
            }
        )
        return blocks

    def simple_strategy(self, prompt: Iterable[PromptInput], requirement_summary: str) -> DesignStrategy:
        """Strategy for the simple tier: one block, one step"""
        return DesignStrategy(
            requirement_summary=requirement_summary,
            complexity_level=ComplexityLevel.SIMPLE,
            design_strategy=SIMPLE_DESIGN_STRATEGY,
            blocks=self.generate_block_strategy(prompt, ComplexityLevel.SIMPLE),
            implementation_steps=[
                ImplementationStep(
                    step_number=1,
                    block_id=MAIN_COMPONENT_BLOCK_ID,
                    action="Design main component",
                )
            ],
        )

    def _simple_block(self, areas: List[str]) -> DesignBlock:
        if not areas:
            title = "Main component"
            description = "Design main component based on requirements"
        else:
            title = areas[0]
            description = f"Design {areas[0]}"

        return DesignBlock(
            block_id=MAIN_COMPONENT_BLOCK_ID,
            block_type=BlockType.COMPONENT,
            title=title,
            description=description,
            estimated_tokens=1500,
            priority=Priority.HIGH,
        )

    def _layered_blocks(self, areas: List[str]) -> List[DesignBlock]:
        blocks: List[DesignBlock] = []

        layout_areas = [area for area in areas if is_layout_area(area)]
        content_areas = [area for area in areas if not is_layout_area(area)]
        content_dependencies = [LAYOUT_BLOCK_ID] if layout_areas else []

        if layout_areas:
            blocks.append(DesignBlock(
                block_id=LAYOUT_BLOCK_ID,
                block_type=BlockType.LAYOUT,
                title="Page layout structure",
                description=f"Design page layout: {'、'.join(layout_areas)}",
                estimated_tokens=1500,
                priority=Priority.HIGH,
            ))

        for index, area in enumerate(content_areas):
            blocks.append(DesignBlock(
                block_id=f"content-area-{index + 1}",
                block_type=BlockType.COMPONENT,
                title=area,
                description=f"Design {area}",
                dependencies=list(content_dependencies),
                estimated_tokens=1200,
                priority=Priority.HIGH if index == 0 else Priority.MEDIUM,
            ))

        if not content_areas:
            blocks.append(DesignBlock(
                block_id=MAIN_CONTENT_BLOCK_ID,
                block_type=BlockType.COMPONENT,
                title="Main content area",
                description="Design main content area",
                dependencies=list(content_dependencies),
                estimated_tokens=1500,
                priority=Priority.HIGH,
            ))

        return blocks


# Global instance
block_planner = BlockPlanner()
