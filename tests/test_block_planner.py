"""Tests for the rule-based block planner."""

import pytest

from design_service.models.schemas.core import BlockType, ComplexityLevel, Priority
from design_service.models.schemas.design import Prompt
from design_service.services.generation.block_planner import (
    LAYOUT_BLOCK_ID,
    MAIN_COMPONENT_BLOCK_ID,
    MAIN_CONTENT_BLOCK_ID,
    BlockPlanner,
)


@pytest.fixture
def planner() -> BlockPlanner:
    return BlockPlanner()


class TestSimpleTier:

    def test_generic_block_when_nothing_detected(self, planner):
        blocks = planner.plan_blocks([], ComplexityLevel.SIMPLE)

        assert len(blocks) == 1
        block = blocks[0]
        assert block.block_id == MAIN_COMPONENT_BLOCK_ID
        assert block.title == "Main component"
        assert block.estimated_tokens == 1500
        assert block.priority == Priority.HIGH

    def test_titled_after_first_area(self, planner):
        blocks = planner.plan_blocks(["Form area", "Card area"], ComplexityLevel.SIMPLE)

        assert [b.block_id for b in blocks] == [MAIN_COMPONENT_BLOCK_ID]
        assert blocks[0].title == "Form area"
        assert blocks[0].description == "Design Form area"

    def test_simple_strategy_has_one_step(self, planner, simple_prompt):
        strategy = planner.simple_strategy(simple_prompt, "Single UI component requirement")

        assert strategy.complexity_level == ComplexityLevel.SIMPLE
        assert strategy.requirement_summary == "Single UI component requirement"
        assert [s.block_id for s in strategy.implementation_steps] == [MAIN_COMPONENT_BLOCK_ID]
        assert strategy.implementation_steps[0].tool_call == "design_block"


class TestLayeredTiers:

    def test_table_and_search_without_layout(self, planner, table_search_prompt):
        blocks = planner.generate_block_strategy(table_search_prompt, ComplexityLevel.MEDIUM)

        assert [b.block_id for b in blocks] == ["content-area-1", "content-area-2"]
        assert [b.title for b in blocks] == ["Table area", "Search area"]
        assert all(b.block_type == BlockType.COMPONENT for b in blocks)
        assert all(b.dependencies == [] for b in blocks)
        assert blocks[0].priority == Priority.HIGH
        assert blocks[1].priority == Priority.MEDIUM
        assert all(b.estimated_tokens == 1200 for b in blocks)

    def test_layout_areas_merge_into_one_block(self, planner):
        areas = ["Table area", "Header area", "Sidebar area"]
        blocks = planner.plan_blocks(areas, ComplexityLevel.COMPLEX)

        assert [b.block_id for b in blocks] == [LAYOUT_BLOCK_ID, "content-area-1"]
        layout = blocks[0]
        assert layout.block_type == BlockType.LAYOUT
        assert layout.dependencies == []
        assert "Header area" in layout.description and "Sidebar area" in layout.description
        assert blocks[1].dependencies == [LAYOUT_BLOCK_ID]

    def test_main_content_when_only_layout_detected(self, planner):
        blocks = planner.plan_blocks(["Header area", "Footer area"], ComplexityLevel.MEDIUM)

        assert [b.block_id for b in blocks] == [LAYOUT_BLOCK_ID, MAIN_CONTENT_BLOCK_ID]
        assert blocks[1].dependencies == [LAYOUT_BLOCK_ID]
        assert blocks[1].priority == Priority.HIGH

    def test_main_content_when_nothing_detected(self, planner):
        blocks = planner.plan_blocks([], ComplexityLevel.MEDIUM)

        assert [b.block_id for b in blocks] == [MAIN_CONTENT_BLOCK_ID]
        assert blocks[0].dependencies == []

    def test_block_ids_unique_and_dependencies_resolve(self, planner):
        prompt = [Prompt(type="text", text="header, sidebar, data table, search, modal, tabs")]
        blocks = planner.generate_block_strategy(prompt, ComplexityLevel.COMPLEX)

        ids = [b.block_id for b in blocks]
        assert len(ids) == len(set(ids))
        for block in blocks:
            assert set(block.dependencies) <= set(ids)

    def test_unknown_tier_treated_as_medium(self, planner):
        blocks = planner.plan_blocks(["Table area"], "unexpected")
        assert [b.block_id for b in blocks] == ["content-area-1"]
