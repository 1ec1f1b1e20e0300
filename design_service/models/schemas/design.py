"""
Design records exchanged with callers: prompts, blocks, strategies,
per-block component designs and the integrated design.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from .core import BlockType, CamelModel, ComplexityLevel, Priority


class Prompt(CamelModel):
    """One segment of a requirement"""
    type: Literal["text", "image"]
    text: Optional[str] = None
    image: Optional[str] = None


class DesignBlock(CamelModel):
    """One unit of the decomposed requirement"""
    block_id: str
    block_type: BlockType = BlockType.COMPONENT
    title: str = ""
    description: str = ""
    components: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    estimated_tokens: int = 1000
    priority: Priority = Priority.MEDIUM

    @field_validator("block_type", mode="before")
    @classmethod
    def normalize_block_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.lower().strip() or BlockType.COMPONENT.value
        return v

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v: Any) -> Priority:
        return Priority.normalize(v)

    @field_validator("components", "dependencies", mode="before")
    @classmethod
    def split_comma_list(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v


class ImplementationStep(CamelModel):
    step_number: int
    block_id: str
    action: str
    tool_call: str = "design_block"


class DesignStrategy(CamelModel):
    """Central session artifact; the caller passes it back on every call"""
    requirement_summary: str = ""
    complexity_level: ComplexityLevel = ComplexityLevel.MEDIUM
    design_strategy: str = ""
    blocks: List[DesignBlock] = Field(default_factory=list)
    implementation_steps: List[ImplementationStep] = Field(default_factory=list)

    @field_validator("complexity_level", mode="before")
    @classmethod
    def normalize_complexity(cls, v: Any) -> ComplexityLevel:
        return ComplexityLevel.normalize(v)

    def find_block(self, block_id: str) -> Optional[DesignBlock]:
        for block in self.blocks:
            if block.block_id == block_id:
                return block
        return None

    def dangling_dependencies(self) -> Dict[str, List[str]]:
        """Dependencies that reference no block of this strategy, keyed by block id"""
        known = {block.block_id for block in self.blocks}
        dangling: Dict[str, List[str]] = {}
        for block in self.blocks:
            missing = [dep for dep in block.dependencies if dep not in known]
            if missing:
                dangling[block.block_id] = missing
        return dangling


class PropDefinition(CamelModel):
    name: str
    type: str = "any"
    required: Optional[bool] = None
    default_value: Optional[str] = Field(default=None, alias="default")
    description: Optional[str] = None

    @field_validator("default_value", mode="before")
    @classmethod
    def stringify_default(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, bool):
            return "true" if v else "false"
        return str(v)


class LibraryComponent(CamelModel):
    """A component named by a library recommendation"""
    name: str
    info: Any = None
    is_private: bool = False


class LibraryRecommendation(CamelModel):
    name: str = ""
    components: List[LibraryComponent] = Field(default_factory=list)
    description: str = ""

    @field_validator("components", mode="before")
    @classmethod
    def coerce_component_names(cls, v: Any) -> Any:
        # Callers may resubmit bare component names
        if v is None:
            return []
        if isinstance(v, str):
            v = [item.strip() for item in v.split(",") if item.strip()]
        return [{"name": item} if isinstance(item, str) else item for item in v]

    def component_names(self) -> List[str]:
        return [component.name for component in self.components]


class ComponentDesign(CamelModel):
    """Design result for one block"""
    component_name: str = ""
    component_description: str = ""
    library: List[LibraryRecommendation] = Field(default_factory=list)
    props: Optional[List[PropDefinition]] = None

    @field_validator("library", mode="before")
    @classmethod
    def default_library(cls, v: Any) -> Any:
        return [] if v is None else v

    @classmethod
    def empty_for_block(cls, block_id: str) -> "ComponentDesign":
        return cls(
            component_name=f"{block_id}-component",
            component_description="Component description",
            library=[],
            props=[],
        )


class BlockDesignEntry(CamelModel):
    block_id: str
    component: ComponentDesign


class AggregatedDesign(CamelModel):
    props_by_block: Dict[str, List[PropDefinition]] = Field(default_factory=dict)
    private_components_used: List[str] = Field(default_factory=list)


class IntegratedDesign(CamelModel):
    """Derived from a strategy and the block designs supplied with the call"""
    strategy: DesignStrategy
    block_designs: List[BlockDesignEntry] = Field(default_factory=list)
    aggregated: AggregatedDesign = Field(default_factory=AggregatedDesign)
    composition_plan: str = ""


class IntegrationContext(CamelModel):
    """State the caller resubmits alongside a block design request"""
    strategy: Optional[DesignStrategy] = None
    block_designs: List[BlockDesignEntry] = Field(default_factory=list)

    @field_validator("block_designs", mode="before")
    @classmethod
    def default_block_designs(cls, v: Any) -> Any:
        return [] if v is None else v
