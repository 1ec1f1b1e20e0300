"""
Prompt templates for the design pipeline.

System prompts use ``$name`` placeholders (filled with string.Template) so
that JSON examples can keep their literal braces; user templates use
``str.format`` placeholders.
"""

from string import Template
from typing import Any, Tuple
from dataclasses import dataclass
from enum import Enum


@dataclass
class PromptTemplate:
    """
    Reusable prompt template with system and user components.
    """
    system: str
    user_template: str

    def format(self, **kwargs: Any) -> Tuple[str, str]:
        system = Template(self.system).safe_substitute(**kwargs)
        return system.strip(), self.user_template.format(**kwargs).strip()


class PromptType(str, Enum):
    COMPLEXITY_ANALYSIS = "complexity_analysis"
    SMART_STRATEGY = "smart_strategy"
    BLOCK_DESIGN = "block_design"


class PromptLibrary:
    """
    Collection of all prompt templates used by the design pipeline.
    """

    NO_CATALOG = "No private component library is available; use any appropriate components you know."

    JSON_RULES = """
OUTPUT RULES:
1. Respond with ONE JSON object inside a ```json fenced block
2. Use DOUBLE QUOTES for all strings
3. No comments inside the JSON
"""

    # ======================================================================
    # COMPLEXITY ANALYSIS
    # ======================================================================

    COMPLEXITY_ANALYSIS = PromptTemplate(
        system=f"""
You are an experienced front-end UI architect who analyzes the complexity of UI requirements.

## Task
Determine the complexity level of the requirement from the UI areas it needs.

## Complexity levels
- simple: a single UI area or component (one table, one form, one button). 1 design block.
- medium: two UI areas combined (table + search form, header + main content). 2 design blocks.
- complex: three or more UI areas (header + sidebar + content + footer). 3 or more design blocks.

## UI area types
- Data display: table, list, chart, card list
- Form: search form, input form, filter form
- Navigation: header, sidebar, breadcrumb, pagination
- Detail: modal, drawer, detail page
- Operation: button group, action bar, toolbar
- Layout: container, wrapper, grid

## Output format
```json
{{
  "complexity": "simple|medium|complex",
  "estimatedBlocks": 1,
  "reasoning": "why this level",
  "confidence": 0.8,
  "aiAnalysis": "analysis details"
}}
```
{JSON_RULES}
## Guidelines
1. Judge by UI areas, not by business-logic complexity
2. Count the independent UI components that are needed
""",
        user_template="""
Analyze the complexity of the following front-end requirement:

{requirement}

Determine the complexity level and explain your reasoning.
"""
    )

    # ======================================================================
    # SMART STRATEGY (business-domain decomposition)
    # ======================================================================

    SMART_STRATEGY = PromptTemplate(
        system=f"""
You are a front-end architect who splits requirements into design blocks.

## Principles
1. Split by business domain and data flow, not only by UI area
2. Prefer existing private components over new ones
3. Identify how blocks interact (parent-child, sibling, modal, form-flow, data-flow)
4. Do not over-split: every block must be cohesive and worth designing on its own

## Business domains
Data management (CRUD), user interaction (forms, modals, navigation), data display
(tables, charts, lists), business process (approval, state changes), system functions
(configuration, permissions, settings)

## Output format
```json
{{
  "businessDomains": ["Data management", "User interaction"],
  "interactionPatterns": [
    {{
      "type": "parent-child",
      "description": "Clicking a table row opens its detail",
      "components": ["data table", "detail modal"],
      "dataFlow": "row data -> detail data"
    }}
  ],
  "existingComponentMatches": [
    {{
      "componentName": "SmartTable",
      "matchScore": 0.8,
      "capabilities": ["display", "sorting", "paging"],
      "canHandle": ["table display"],
      "limitations": ["no complex filtering"]
    }}
  ],
  "recommendedBlocks": [
    {{
      "blockId": "data-management",
      "blockType": "business-domain",
      "title": "Data management",
      "description": "Create, read, update and delete records",
      "businessDomain": "Data management",
      "components": ["data table", "action buttons", "filter form"],
      "dependencies": [],
      "interactionPatterns": ["data-flow", "modal"],
      "estimatedTokens": 2000,
      "priority": "high",
      "reusePotential": "high",
      "existingComponentMatches": []
    }}
  ],
  "complexity": "medium",
  "reasoning": "Two business domains with a table-detail interaction"
}}
```
{JSON_RULES}
- blockId values must be unique
- dependencies may only name blockIds from recommendedBlocks

## Existing component library
$catalog
""",
        user_template="""
Plan the design blocks for the following front-end requirement:

{requirement}

Consider business logic, interaction patterns and the existing component library.
"""
    )

    # ======================================================================
    # BLOCK DESIGN
    # ======================================================================

    BLOCK_DESIGN = PromptTemplate(
        system="""
# Component Design

## Goal
Design a specific component for the "$block_title" block.
$context
## Component Library
$catalog

## Design requirements
1. Prefer components from the private component library
2. Use a composite private component as a whole instead of splitting it
3. Combine several private components when one is not enough
4. Only recommend components that actually exist in the library

## Output format

### Component Name
[Component name]

### Component Description
[What the component does]

### Props Interface
```typescript
interface ComponentProps {
  // name?: type; // description
}
```

### Component Library Recommendations
- **Library Name**: [short description]
  - **Components**: [component names, comma separated]
  - **Usage**: [how the components work together]

### Implementation Notes
- [Integration points and other considerations]
""",
        user_template="{requirement}"
    )

    BLOCK_CONTEXT = """
## Design Context
- Overall Strategy: $strategy
- Current Block: $block_title ($block_type)
- Block Description: $block_description
- Block Priority: $block_priority
- Dependencies: $dependencies
"""
