"""Tests for design integration and aggregation."""

import itertools

import pytest

from design_service.models.schemas.catalog import ComponentCatalog
from design_service.models.schemas.design import BlockDesignEntry, DesignStrategy
from design_service.services.generation.design_integrator import DesignIntegrator


@pytest.fixture
def strategy() -> DesignStrategy:
    return DesignStrategy.model_validate({
        "requirementSummary": "Records admin",
        "complexityLevel": "medium",
        "designStrategy": "Table first, then filters",
        "blocks": [
            {"blockId": "b1", "blockType": "component", "title": "Records", "priority": "high"},
            {"blockId": "b2", "blockType": "component", "title": "Filters", "dependencies": ["b1"]},
        ],
    })


def entry(block_id, components, props=None, name=None):
    return BlockDesignEntry.model_validate({
        "blockId": block_id,
        "component": {
            "componentName": name or f"{block_id}-component",
            "componentDescription": "desc",
            "library": [{"name": "lib", "components": components, "description": ""}],
            "props": props if props is not None else [],
        },
    })


class TestAggregation:

    def test_private_component_without_props(self, sample_catalog):
        strategy = DesignStrategy.model_validate({"blocks": [{"blockId": "b1", "title": "Only block"}]})

        integrated = DesignIntegrator(sample_catalog).integrate(strategy, [entry("b1", ["cat-button"])])

        assert integrated.aggregated.private_components_used == ["cat-button"]
        assert "b1" not in integrated.aggregated.props_by_block

    def test_props_recorded_per_block(self, strategy, sample_catalog):
        designs = [
            entry("b1", ["cat-table"], props=[{"name": "rows", "type": "Row[]"}]),
            entry("b2", ["Input"]),
        ]

        integrated = DesignIntegrator(sample_catalog).integrate(strategy, designs)

        assert list(integrated.aggregated.props_by_block) == ["b1"]
        assert integrated.aggregated.props_by_block["b1"][0].name == "rows"
        assert integrated.aggregated.private_components_used == ["cat-table"]

    def test_no_duplicates_and_order_independent(self, strategy, sample_catalog):
        designs = [
            entry("b1", ["cat-table", "cat-button"], props=[{"name": "rows"}]),
            entry("b2", ["cat-button", "Input"], props=[{"name": "onSearch"}]),
            entry("b3", ["cat-table"]),
        ]
        integrator = DesignIntegrator(sample_catalog)
        expected = integrator.integrate(strategy, designs).aggregated

        assert expected.private_components_used == ["cat-button", "cat-table"]

        for permutation in itertools.permutations(designs):
            aggregated = integrator.integrate(strategy, list(permutation)).aggregated
            assert aggregated.private_components_used == expected.private_components_used
            assert aggregated.props_by_block == expected.props_by_block

    def test_redesigned_block_props_independent_of_order(self, strategy, sample_catalog):
        first = entry("b1", ["cat-table"], props=[{"name": "x"}, {"name": "rows"}])
        second = entry("b1", ["cat-button"], props=[{"name": "y"}, {"name": "rows"}])
        integrator = DesignIntegrator(sample_catalog)

        forward = integrator.integrate(strategy, [first, second]).aggregated
        backward = integrator.integrate(strategy, [second, first]).aggregated

        assert forward == backward
        assert [p.name for p in forward.props_by_block["b1"]] == ["rows", "x", "y"]
        assert forward.private_components_used == ["cat-button", "cat-table"]

    def test_empty_catalog_collects_nothing(self, strategy, empty_catalog):
        integrated = DesignIntegrator(empty_catalog).integrate(strategy, [entry("b1", ["cat-button"])])
        assert integrated.aggregated.private_components_used == []

    def test_resubmitted_wire_format(self, strategy):
        catalog = ComponentCatalog({"cat-button": {"purpose": "button"}})
        designs = [BlockDesignEntry.model_validate(entry("b1", ["cat-button"]).to_wire())]

        integrated = DesignIntegrator(catalog).integrate(strategy, designs)

        assert integrated.aggregated.private_components_used == ["cat-button"]
        assert integrated.to_wire()["aggregated"] == {
            "propsByBlock": {},
            "privateComponentsUsed": ["cat-button"],
        }


class TestCompositionPlan:

    def test_follows_strategy_block_order(self, strategy, sample_catalog):
        designs = [entry("b2", ["Input"], name="FilterPanel"), entry("b1", ["cat-table"], name="RecordTable")]

        plan = DesignIntegrator(sample_catalog).integrate(strategy, designs).composition_plan

        assert plan.startswith("# Component Integration Plan")
        assert "Table first, then filters" in plan
        assert plan.index("### Records") < plan.index("### Filters")
        assert plan.index("RecordTable") < plan.index("FilterPanel")
        assert "  - lib: cat-table" in plan
        assert "## Integration Suggestions" in plan

    def test_blocks_without_design_still_listed(self, strategy, sample_catalog):
        plan = DesignIntegrator(sample_catalog).integrate(strategy, []).composition_plan

        assert "### Records" in plan
        assert "### Filters" in plan
        assert "**Component**" not in plan

    def test_first_design_describes_a_redesigned_block(self, strategy, sample_catalog):
        designs = [entry("b1", [], name="FirstTry"), entry("b1", [], name="SecondTry")]

        plan = DesignIntegrator(sample_catalog).integrate(strategy, designs).composition_plan

        assert "FirstTry" in plan
        assert "SecondTry" not in plan
