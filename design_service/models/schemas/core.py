"""
Core schema primitives shared by every design record.
"""
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        """Dump with camelCase keys, JSON-compatible values and no unset optionals"""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class ComplexityLevel(str, Enum):
    """Complexity tiers controlling how many blocks a requirement is split into"""
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"

    @classmethod
    def normalize(cls, value: Any, default: "ComplexityLevel" = None) -> "ComplexityLevel":
        """Map any model-provided value onto a tier, MEDIUM when unrecognised"""
        if isinstance(value, cls):
            return value
        normalized = str(value or "").lower().strip()
        for member in cls:
            if member.value == normalized:
                return member
        return default or cls.MEDIUM


class BlockType(str, Enum):
    LAYOUT = "layout"
    COMPONENT = "component"
    LOGIC = "logic"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def normalize(cls, value: Any) -> "Priority":
        normalized = str(value or "").lower().strip()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.MEDIUM


MAX_ESTIMATED_BLOCKS = 4
