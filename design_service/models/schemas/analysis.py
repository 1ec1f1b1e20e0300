"""
Analysis records: complexity estimates and the smart (business-domain) analysis.
"""
from typing import Any, List, Optional

from pydantic import ConfigDict, Field, field_validator

from .core import CamelModel, ComplexityLevel, Priority


class ComplexityAnalysisResult(CamelModel):
    complexity: ComplexityLevel
    estimated_blocks: int = Field(..., ge=1)
    reasoning: str
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    ai_analysis: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "complexity": "medium",
                "estimatedBlocks": 2,
                "reasoning": "Two UI areas: Table area, Search area",
            }
        }
    )


class InteractionPattern(CamelModel):
    """parent-child | sibling | modal | form-flow | data-flow"""
    type: str
    description: str = ""
    components: List[str] = Field(default_factory=list)
    data_flow: Optional[str] = None


class ComponentMatch(CamelModel):
    component_name: str
    match_score: float = Field(default=0.0, ge=0.0, le=1.0)
    capabilities: List[str] = Field(default_factory=list)
    can_handle: List[str] = Field(default_factory=list)
    limitations: List[str] = Field(default_factory=list)


class SmartDesignBlock(CamelModel):
    """A block recommended by the business-domain analysis"""
    block_id: str
    # business-domain | interaction-group | reusable-component | layout
    block_type: str = "business-domain"
    title: str = ""
    description: str = ""
    business_domain: str = ""
    components: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    interaction_patterns: List[str] = Field(default_factory=list)
    estimated_tokens: int = 2000
    priority: Priority = Priority.MEDIUM
    reuse_potential: Priority = Priority.MEDIUM
    existing_component_matches: List[ComponentMatch] = Field(default_factory=list)

    @field_validator("priority", "reuse_potential", mode="before")
    @classmethod
    def normalize_priority(cls, v: Any) -> Priority:
        return Priority.normalize(v)

    @field_validator("components", "dependencies", "interaction_patterns", mode="before")
    @classmethod
    def default_list(cls, v: Any) -> Any:
        return [] if v is None else v


class SmartAnalysis(CamelModel):
    business_domains: List[str] = Field(default_factory=list)
    interaction_patterns: List[InteractionPattern] = Field(default_factory=list)
    existing_component_matches: List[ComponentMatch] = Field(default_factory=list)
    recommended_blocks: List[SmartDesignBlock] = Field(default_factory=list)
    complexity: ComplexityLevel = ComplexityLevel.MEDIUM
    reasoning: str = ""
    source: str = "ai"

    @field_validator("complexity", mode="before")
    @classmethod
    def normalize_complexity(cls, v: Any) -> ComplexityLevel:
        return ComplexityLevel.normalize(v)
