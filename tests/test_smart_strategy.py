"""Tests for the business-domain strategy engine."""

import asyncio
import json

from design_service.llm.base import GenerationError
from design_service.models.schemas.analysis import SmartAnalysis, SmartDesignBlock
from design_service.models.schemas.core import BlockType, ComplexityLevel, Priority
from design_service.models.schemas.design import DesignBlock, Prompt
from design_service.services.analysis.smart_strategy import (
    FALLBACK_MATCH_SCORE,
    FALLBACK_REASONING,
    SmartStrategyEngine,
    implementation_steps,
)


def text(value: str):
    return [Prompt(type="text", text=value)]


def analysis_payload(**overrides) -> str:
    payload = {
        "businessDomains": ["Data management", "User interaction"],
        "interactionPatterns": [
            {"type": "modal", "description": "Row opens detail", "components": ["table", "modal"]}
        ],
        "existingComponentMatches": [
            {"componentName": "cat-table", "matchScore": 0.9, "capabilities": ["paging"]}
        ],
        "recommendedBlocks": [
            {
                "blockId": "page-layout",
                "blockType": "layout",
                "title": "Page layout",
                "priority": "high",
            },
            {
                "blockId": "records",
                "blockType": "business-domain",
                "title": "Records",
                "dependencies": ["page-layout"],
                "priority": "HIGH",
                "estimatedTokens": 1800,
            },
            {
                "blockId": "editor",
                "blockType": "interaction-group",
                "title": "Editor",
                "dependencies": ["records"],
                "priority": "medium",
            },
        ],
        "complexity": "complex",
        "reasoning": "Two domains with a table-detail interaction",
    }
    payload.update(overrides)
    return "```json\n" + json.dumps(payload) + "\n```"


class TestFallbackAnalysis:

    def test_no_provider_uses_keywords(self, sample_catalog):
        engine = SmartStrategyEngine(None)
        prompt = text("A data table with pagination, an input form and a modal")

        analysis = asyncio.run(engine.analyze_smartly(prompt, sample_catalog))

        assert analysis.source == "fallback"
        assert analysis.business_domains == ["Data management", "User interaction"]
        assert analysis.complexity == ComplexityLevel.MEDIUM
        assert analysis.recommended_blocks == []
        assert analysis.reasoning == FALLBACK_REASONING

        assert [p.type for p in analysis.interaction_patterns] == ["modal"]
        assert analysis.interaction_patterns[0].components == ["main component", "modal component"]

        assert [m.component_name for m in analysis.existing_component_matches] == ["cat-table"]
        assert analysis.existing_component_matches[0].match_score == FALLBACK_MATCH_SCORE

    def test_complexity_from_domain_count(self, empty_catalog):
        engine = SmartStrategyEngine(None)

        assert engine.fallback_analysis(text("a chart"), empty_catalog).complexity == ComplexityLevel.SIMPLE
        assert (
            engine.fallback_analysis(text("table, form and chart"), empty_catalog).complexity
            == ComplexityLevel.COMPLEX
        )

    def test_call_failure_falls_back(self, scripted_provider, empty_catalog):
        engine = SmartStrategyEngine(scripted_provider(GenerationError("down")))

        analysis = asyncio.run(engine.analyze_smartly(text("a table"), empty_catalog))

        assert analysis.source == "fallback"
        assert analysis.business_domains == ["Data management"]

    def test_unexpected_call_error_falls_back(self, scripted_provider, empty_catalog):
        engine = SmartStrategyEngine(scripted_provider(RuntimeError("conn reset")))

        analysis = asyncio.run(engine.analyze_smartly(text("a table"), empty_catalog))

        assert analysis.source == "fallback"
        assert analysis.business_domains == ["Data management"]

    def test_missing_payload_falls_back(self, scripted_provider, empty_catalog):
        engine = SmartStrategyEngine(scripted_provider("I would split this into two blocks."))
        analysis = asyncio.run(engine.analyze_smartly(text("a table"), empty_catalog))
        assert analysis.source == "fallback"

    def test_malformed_payload_falls_back(self, scripted_provider, empty_catalog):
        engine = SmartStrategyEngine(scripted_provider(
            analysis_payload(recommendedBlocks=[{"title": "block without id"}])
        ))
        analysis = asyncio.run(engine.analyze_smartly(text("a table"), empty_catalog))
        assert analysis.source == "fallback"


class TestModelAnalysis:

    def test_payload_parsed(self, scripted_provider, sample_catalog):
        provider = scripted_provider(analysis_payload())
        engine = SmartStrategyEngine(provider)

        analysis = asyncio.run(engine.analyze_smartly(text("records admin"), sample_catalog))

        assert analysis.source == "ai"
        assert analysis.complexity == ComplexityLevel.COMPLEX
        assert [b.block_id for b in analysis.recommended_blocks] == ["page-layout", "records", "editor"]
        assert analysis.recommended_blocks[1].priority == Priority.HIGH
        assert analysis.existing_component_matches[0].match_score == 0.9

        # The catalog is described in the instructions
        assert "cat-button" in provider.calls[0]["system"]
        assert provider.calls[0]["messages"][0].content.endswith(
            "Consider business logic, interaction patterns and the existing component library."
        )

    def test_generate_strategy(self, scripted_provider, sample_catalog):
        engine = SmartStrategyEngine(scripted_provider(analysis_payload()))

        strategy = asyncio.run(engine.generate_strategy(text("records admin"), sample_catalog))

        assert strategy.complexity_level == ComplexityLevel.COMPLEX
        assert strategy.requirement_summary == (
            "Smart analysis: covers business domains Data management, User interaction"
        )
        assert strategy.design_strategy == "Two domains with a table-detail interaction"
        assert [b.block_type for b in strategy.blocks] == [
            BlockType.LAYOUT, BlockType.COMPONENT, BlockType.COMPONENT
        ]
        assert strategy.blocks[1].estimated_tokens == 1800
        assert [s.block_id for s in strategy.implementation_steps] == ["page-layout", "records", "editor"]
        assert strategy.implementation_steps[0].action == "Design Page layout"

    def test_duplicate_block_ids_are_suffixed(self):
        analysis = SmartAnalysis(
            recommended_blocks=[
                SmartDesignBlock(block_id="list", title="List"),
                SmartDesignBlock(block_id="list", title="Second list"),
                SmartDesignBlock(block_id="list", title="Third list"),
            ]
        )

        strategy = SmartStrategyEngine(None).strategy_from_analysis(analysis)

        assert [b.block_id for b in strategy.blocks] == ["list", "list-2", "list-3"]
        assert strategy.requirement_summary == "Smart analysis: no business domain identified"


def test_implementation_steps_order():
    blocks = [
        DesignBlock(block_id="a", title="A", priority="low"),
        DesignBlock(block_id="b", title="B", priority="high", dependencies=["a", "c"]),
        DesignBlock(block_id="c", title="C", priority="high"),
        DesignBlock(block_id="d", title="D", priority="medium"),
    ]

    steps = implementation_steps(blocks)

    assert [s.block_id for s in steps] == ["c", "b", "a", "d"]
    assert [s.step_number for s in steps] == [1, 2, 3, 4]
