"""
Design Integrator

Folds a strategy and the block designs supplied with the call into one
IntegratedDesign. Pure: nothing is cached between calls.
"""
from typing import Dict, Iterable, List

from design_service.models.schemas.catalog import ComponentCatalog
from design_service.models.schemas.design import (
    AggregatedDesign,
    BlockDesignEntry,
    ComponentDesign,
    DesignStrategy,
    IntegratedDesign,
    PropDefinition,
)
from design_service.utils.logging import get_logger

logger = get_logger(__name__)

INTEGRATION_SUGGESTIONS = [
    "Develop blocks in priority order",
    "Respect the dependencies between blocks",
    "Use the private component library consistently",
    "Keep the data flow between components explicit",
]


class DesignIntegrator:
    """
    Aggregation rules:
    - ``propsByBlock`` only holds blocks whose design has props
    - ``privateComponentsUsed`` is the sorted set of catalog components
    - the composition plan follows ``strategy.blocks`` order

    A block designed more than once keeps every entry in ``blockDesigns``.
    Its ``propsByBlock`` list is the sorted union of the entries' props, so
    the aggregate does not depend on submission order. The composition plan
    describes the first entry for the block.
    """

    def __init__(self, catalog: ComponentCatalog):
        self.catalog = catalog

    def integrate(self, strategy: DesignStrategy, block_designs: Iterable[BlockDesignEntry]) -> IntegratedDesign:
        block_designs = list(block_designs)

        props_by_block: Dict[str, List[PropDefinition]] = {}
        private_components = set()

        for entry in block_designs:
            component = entry.component

            if component.props:
                if entry.block_id in props_by_block:
                    props_by_block[entry.block_id] = merge_props(
                        props_by_block[entry.block_id], component.props
                    )
                else:
                    props_by_block[entry.block_id] = component.props

            for library in component.library:
                for name in library.component_names():
                    if self.catalog.has(name):
                        private_components.add(name)

        integrated = IntegratedDesign(
            strategy=strategy,
            block_designs=block_designs,
            aggregated=AggregatedDesign(
                props_by_block=props_by_block,
                private_components_used=sorted(private_components),
            ),
            composition_plan=self.composition_plan(strategy, block_designs),
        )

        logger.info(
            "integration.completed",
            extra={
                "blocks": len(strategy.blocks),
                "designs": len(block_designs),
                "private_components": len(private_components),
            }
        )
        return integrated

    def composition_plan(self, strategy: DesignStrategy, block_designs: List[BlockDesignEntry]) -> str:
        designs: Dict[str, ComponentDesign] = {}
        for entry in block_designs:
            designs.setdefault(entry.block_id, entry.component)

        sections = [
            "# Component Integration Plan",
            "",
            "## Overall Strategy",
            strategy.design_strategy,
            "",
            "## Blocks",
        ]

        for block in strategy.blocks:
            sections.append(f"### {block.title or block.block_id}")
            sections.append(f"- **Type**: {block.block_type.value}")
            sections.append(f"- **Description**: {block.description}")
            sections.append(f"- **Priority**: {block.priority.value}")

            component = designs.get(block.block_id)
            if component is not None:
                sections.append(f"- **Component**: {component.component_name}")
                sections.append(f"- **Component Description**: {component.component_description}")

                if component.library:
                    sections.append("- **Libraries Used**:")
                    for library in component.library:
                        sections.append(f"  - {library.name}: {', '.join(library.component_names())}")
            sections.append("")

        sections.append("## Integration Suggestions")
        sections.extend(f"{i}. {text}" for i, text in enumerate(INTEGRATION_SUGGESTIONS, start=1))

        return "\n".join(sections)


def merge_props(first: List[PropDefinition], second: List[PropDefinition]) -> List[PropDefinition]:
    """Distinct props of both lists, ordered by name then definition"""
    merged = {prop.model_dump_json(): prop for prop in [*first, *second]}
    return [merged[key] for key in sorted(merged, key=lambda key: (merged[key].name, key))]
