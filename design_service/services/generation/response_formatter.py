"""
Response Formatter - tool results as content items

Every tool returns ``{"content": [{"type": "text", "text": ...}, ...]}``;
failures carry ``isError: true`` and a single tagged text item.
"""
import json
from typing import Any, Dict, List, Optional

from design_service.models.schemas.analysis import SmartAnalysis
from design_service.models.schemas.design import ComponentDesign, DesignBlock, DesignStrategy
from design_service.utils.logging import get_logger

logger = get_logger(__name__)


def _ticks(values: List[str]) -> str:
    return ", ".join(f"`{v}`" for v in values)


class ResponseFormatter:
    """
    Standardizes tool responses and renders designs as markdown.
    """

    @staticmethod
    def text_item(text: str) -> Dict[str, str]:
        return {"type": "text", "text": text}

    @staticmethod
    def format_success(*texts: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Format successful tool response.

        Args:
            texts: Human-readable sections, empty ones skipped
            payload: Machine-readable part, appended as a JSON text item
        """
        content = [ResponseFormatter.text_item(t) for t in texts if t]
        if payload is not None:
            content.append(ResponseFormatter.text_item(
                json.dumps(payload, ensure_ascii=False, default=str)
            ))
        return {"content": content}

    @staticmethod
    def format_error(error: Exception, operation: str) -> Dict[str, Any]:
        """
        Format error response.

        Args:
            error: Exception that occurred
            operation: Label of the failed operation ("Block design", ...)
        """
        logger.error(
            "response.formatted.error",
            extra={
                "operation": operation,
                "error_type": type(error).__name__,
                "error_message": str(error)
            }
        )
        return {
            "content": [ResponseFormatter.text_item(f"❌ {operation} failed: {error}")],
            "isError": True,
        }

    # ------------------------------------------------------------------
    # Markdown renderings
    # ------------------------------------------------------------------

    @staticmethod
    def strategy_summary(strategy: DesignStrategy, analysis: Optional[SmartAnalysis] = None) -> str:
        sections = [
            "## Design Strategy",
            "",
            f"**Requirement summary:** {strategy.requirement_summary}",
            "",
            f"**Complexity:** `{strategy.complexity_level.value}`",
            "",
            f"**Strategy:** {strategy.design_strategy}",
            "",
        ]

        if analysis and analysis.business_domains:
            sections.append("**Business domains:**")
            sections.extend(f"{i}. **{d}**" for i, d in enumerate(analysis.business_domains, start=1))
            sections.append("")

        if analysis and analysis.existing_component_matches:
            sections.append("**Existing component matches:**")
            matches = [m for m in analysis.existing_component_matches if m.match_score > 0.5]
            for i, match in enumerate(matches, start=1):
                sections.append(f"{i}. **{match.component_name}** ({round(match.match_score * 100)}% match)")
                if match.capabilities:
                    sections.append(f"   - Capabilities: {_ticks(match.capabilities)}")
                if match.limitations:
                    sections.append(f"   - Limitations: {_ticks(match.limitations)}")
            sections.append("")

        if strategy.blocks:
            sections.append("**Blocks:**")
            for i, block in enumerate(strategy.blocks, start=1):
                sections.append(f"{i}. **{block.title}** (`{block.block_type.value}`)")
                sections.append(f"   - Description: {block.description}")
                sections.append(f"   - Priority: `{block.priority.value}`")
                sections.append(f"   - Estimated tokens: `{block.estimated_tokens}`")
                if block.dependencies:
                    sections.append(f"   - Depends on: {_ticks(block.dependencies)}")
            sections.append("")

        if strategy.implementation_steps:
            sections.append("**Implementation steps:**")
            for step in strategy.implementation_steps:
                sections.append(f"{step.step_number}. **{step.action}** (`{step.block_id}` via `{step.tool_call}`)")

        return "\n".join(sections).rstrip()

    @staticmethod
    def interaction_overview(analysis: Optional[SmartAnalysis]) -> str:
        if not analysis or not analysis.interaction_patterns:
            return ""

        sections = ["## Interaction Patterns", "", "```mermaid", "graph TD"]
        for i, pattern in enumerate(analysis.interaction_patterns):
            pattern_id = f"pattern_{i}"
            sections.append(f"    {pattern_id}[{pattern.type}]")
            for j, component in enumerate(pattern.components):
                sections.append(f"    {pattern_id}_comp_{j}[{component}]")
                sections.append(f"    {pattern_id} --> {pattern_id}_comp_{j}")
        sections.extend(["```", ""])

        for i, pattern in enumerate(analysis.interaction_patterns, start=1):
            sections.append(f"{i}. **{pattern.type}** - {pattern.description}")
            if pattern.data_flow:
                sections.append(f"   - Data flow: {pattern.data_flow}")

        return "\n".join(sections)

    @staticmethod
    def dependency_overview(blocks: List[DesignBlock]) -> str:
        if not blocks:
            return ""

        sections = ["## Dependencies", "", "| Block | Depends on |", "|-------|------------|"]
        for block in blocks:
            sections.append(f"| {block.title or block.block_id} | {', '.join(block.dependencies) or 'none'} |")
        return "\n".join(sections)

    @staticmethod
    def block_design_summary(design: ComponentDesign, block_id: str) -> str:
        sections = [
            f"## Block Design: {block_id}",
            "",
            f"**Component:** {design.component_name}",
            "",
            f"**Description:** {design.component_description}",
            "",
        ]

        if design.library:
            sections.append("**Component libraries:**")
            for i, library in enumerate(design.library, start=1):
                sections.append(f"{i}. **{library.name}**")
                sections.append(f"   - Components: {_ticks(library.component_names())}")
                sections.append(f"   - Description: {library.description}")
            sections.append("")

        if design.props:
            sections.append("**Props:**")
            sections.append("| Name | Type | Required | Default | Description |")
            sections.append("|------|------|----------|---------|-------------|")
            for prop in design.props:
                required = "yes" if prop.required else "no"
                sections.append(
                    f"| {prop.name} | {prop.type} | {required} | {prop.default_value or '-'} | {prop.description or '-'} |"
                )

        return "\n".join(sections).rstrip()

    @staticmethod
    def component_documentation(name: str, entry: Dict[str, Any]) -> str:
        sections = [f"## Component: {name}", ""]
        for key, value in entry.items():
            sections.append(f"### {key}")
            if isinstance(value, (dict, list)):
                sections.append("```json")
                sections.append(json.dumps(value, ensure_ascii=False, indent=2))
                sections.append("```")
            else:
                sections.append(str(value))
            sections.append("")
        return "\n".join(sections).rstrip()
