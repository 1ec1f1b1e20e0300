"""
Generation services - per-block planning, design and integration.
"""

from design_service.services.generation.block_planner import (
    block_planner,
    BlockPlanner,
)

from design_service.services.generation.block_designer import (
    BlockDesignGenerator,
    parse_library_section,
    parse_props_interface,
)

from design_service.services.generation.design_integrator import (
    DesignIntegrator,
)

from design_service.services.generation.response_formatter import (
    ResponseFormatter,
)

__all__ = [
    'block_planner',
    'BlockPlanner',
    'BlockDesignGenerator',
    'parse_library_section',
    'parse_props_interface',
    'DesignIntegrator',
    'ResponseFormatter',
]
