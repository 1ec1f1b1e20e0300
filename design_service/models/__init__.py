"""
Models package.

Exports:
- schemas: design records, analysis records and the component catalog
- prompts: prompt templates
"""

from .schemas import (
    Prompt,
    DesignBlock,
    DesignStrategy,
    ComponentDesign,
    IntegratedDesign,
    ComplexityAnalysisResult,
    SmartAnalysis,
    ComponentCatalog,
)

from .prompts import (
    PromptTemplate,
    PromptLibrary,
    PromptType,
    prompts,
)

__all__ = [
    # Schemas
    'Prompt',
    'DesignBlock',
    'DesignStrategy',
    'ComponentDesign',
    'IntegratedDesign',
    'ComplexityAnalysisResult',
    'SmartAnalysis',
    'ComponentCatalog',

    # Prompts
    'PromptTemplate',
    'PromptLibrary',
    'PromptType',
    'prompts',
]
