"""
Schemas for the design pipeline.

Every record is a pydantic model with snake_case attributes and a
camelCase wire format, so callers can resubmit what they received.
"""

from .core import (
    CamelModel,
    ComplexityLevel,
    BlockType,
    Priority,
    MAX_ESTIMATED_BLOCKS,
)

from .design import (
    Prompt,
    DesignBlock,
    ImplementationStep,
    DesignStrategy,
    PropDefinition,
    LibraryComponent,
    LibraryRecommendation,
    ComponentDesign,
    BlockDesignEntry,
    AggregatedDesign,
    IntegratedDesign,
    IntegrationContext,
)

from .analysis import (
    ComplexityAnalysisResult,
    InteractionPattern,
    ComponentMatch,
    SmartDesignBlock,
    SmartAnalysis,
)

from .catalog import (
    ComponentCatalog,
    CatalogLoadError,
    ComponentNotFoundError,
    load_catalog,
)

__all__ = [
    # Core types
    'CamelModel',
    'ComplexityLevel',
    'BlockType',
    'Priority',
    'MAX_ESTIMATED_BLOCKS',

    # Design records
    'Prompt',
    'DesignBlock',
    'ImplementationStep',
    'DesignStrategy',
    'PropDefinition',
    'LibraryComponent',
    'LibraryRecommendation',
    'ComponentDesign',
    'BlockDesignEntry',
    'AggregatedDesign',
    'IntegratedDesign',
    'IntegrationContext',

    # Analysis
    'ComplexityAnalysisResult',
    'InteractionPattern',
    'ComponentMatch',
    'SmartDesignBlock',
    'SmartAnalysis',

    # Catalog
    'ComponentCatalog',
    'CatalogLoadError',
    'ComponentNotFoundError',
    'load_catalog',
]
