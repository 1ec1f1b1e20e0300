"""
Block Design Generator

One generation call per block. The response is parsed for a JSON payload
first, then for the markdown sections the prompt asks for; when neither is
usable the block gets a default empty design.

Call failures are NOT caught here: GenerationError propagates to the caller.
"""
import re
from string import Template
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from design_service.config import settings
from design_service.llm.base import BaseLLMProvider, GenerationError, LLMMessage
from design_service.models.prompts import prompts
from design_service.models.schemas.catalog import ComponentCatalog
from design_service.models.schemas.core import BlockType, Priority
from design_service.models.schemas.design import (
    ComponentDesign,
    DesignBlock,
    IntegrationContext,
    LibraryComponent,
    LibraryRecommendation,
    PropDefinition,
)
from design_service.services.analysis.requirement_classifier import PromptInput, requirement_text
from design_service.utils.logging import get_logger, log_context, trace_async
from design_service.utils.response_extractor import (
    SectionRule,
    extract_json_object,
    extract_sections,
)

logger = get_logger(__name__)

DESIGN_PAYLOAD_KEYS = ("componentName", "componentDescription", "library", "props")

_LIBRARY_ENTRY = re.compile(
    r"\*\*([^*\n]+)\*\*:[ \t]*([^\n]*)\n"
    r"\s*(?:[-*]\s*)?\*\*Components\*\*:[ \t]*([^\n]+)"
    r"(?:\n\s*(?:[-*]\s*)?\*\*Usage\*\*:[ \t]*([^\n]+))?"
)
_PROP_LINE = re.compile(
    r"^\s*(?:readonly\s+)?['\"]?([A-Za-z_$][\w$-]*)['\"]?(\?)?\s*:\s*(.+?)\s*[;,]?\s*(?://\s*(.*))?$"
)
_DEFAULT_HINT = re.compile(r"(?:@default|default:)\s*([^\s,;)]+)", re.IGNORECASE)
_NAME_SEPARATORS = re.compile(r"[,，、]")


def split_component_names(text: str) -> List[str]:
    names = []
    for raw in _NAME_SEPARATORS.split(text or ""):
        name = raw.strip().strip("`*[]").strip()
        if name:
            names.append(name)
    return names


def parse_props_interface(code: str) -> List[Dict[str, Any]]:
    """
    Props from a TypeScript interface: ``name?: type; // description``.

    Only members directly inside an interface body are read; a ``// ...``
    line right above a member becomes its description.
    """
    props: List[Dict[str, Any]] = []
    depth = 0
    pending_comment: Optional[str] = None

    for line in code.splitlines():
        stripped = line.strip()

        if depth == 1 and stripped.startswith("//"):
            pending_comment = stripped.lstrip("/").strip() or None
        elif depth == 1 and stripped and not stripped.startswith(("/*", "*", "}")):
            match = _PROP_LINE.match(stripped)
            if match:
                name, optional, prop_type, comment = match.groups()
                description = (comment or pending_comment or "").strip() or None
                prop: Dict[str, Any] = {
                    "name": name,
                    "type": prop_type.strip(),
                    "required": optional is None,
                }
                if description:
                    prop["description"] = description
                    default = _DEFAULT_HINT.search(description)
                    if default:
                        prop["default"] = default.group(1)
                props.append(prop)
            pending_comment = None

        depth += line.count("{") - line.count("}")
        depth = max(depth, 0)

    return props


def parse_library_section(section: str) -> List[Dict[str, Any]]:
    libraries = []
    for match in _LIBRARY_ENTRY.finditer(section):
        name, description, components, usage = match.groups()
        libraries.append({
            "name": name.strip(),
            "components": split_component_names(components),
            "description": f"{description or ''} {usage or ''}".strip(),
            "fragment": match.group(0).strip(),
        })
    return libraries


DESIGN_SECTION_RULES = [
    SectionRule("component_name", r"###\s*Component Name\s*\n+\s*([^\n]+)"),
    SectionRule("component_description", r"###\s*Component Description\s*\n([\s\S]*?)(?=\n###|\Z)"),
    SectionRule(
        "props",
        r"```(?:typescript|ts|tsx)\s*\n([\s\S]*?)\n?```",
        default=list,
        transform=parse_props_interface,
    ),
    SectionRule(
        "library",
        r"###\s*Component Library Recommendations\s*\n([\s\S]*?)(?=\n###|\Z)",
        default=list,
        transform=parse_library_section,
    ),
]


class BlockDesignGenerator:
    """
    Designs one block against the component catalog.

    Every library component is checked with ``catalog.has``: catalog entries
    are attached to private components, the raw fragment to the others.
    """

    def __init__(
        self,
        provider: Optional[BaseLLMProvider],
        catalog: ComponentCatalog,
        default_model: Optional[str] = None,
    ):
        self.provider = provider
        self.catalog = catalog
        self.default_model = default_model or settings.model_for("design")

        self.stats = {
            "designs": 0,
            "json_payloads": 0,
            "markdown_payloads": 0,
            "default_designs": 0,
        }

    @trace_async("design.block")
    async def design_block(
        self,
        prompt: Iterable[PromptInput],
        block_id: str,
        block_info: Optional[DesignBlock] = None,
        integrated_context: Optional[IntegrationContext] = None,
        ai_model: Optional[str] = None,
    ) -> ComponentDesign:
        """
        Raises:
            GenerationError: when the generation call fails
        """
        if self.provider is None:
            raise GenerationError("No text-generation provider configured")

        block = block_info or self._block_from_context(block_id, integrated_context)

        with log_context(block_id=block_id):
            system_prompt = self.build_system_prompt(block, integrated_context)
            response = await self.provider.generate(
                system=system_prompt,
                messages=[LLMMessage(role="user", content=requirement_text(prompt))],
                model=ai_model or self.default_model,
            )

            design = self.parse_response(response.content, block_id)
            self.stats["designs"] += 1

            logger.info(
                "design.block.parsed",
                extra={
                    "component": design.component_name,
                    "libraries": len(design.library),
                    "props": len(design.props or []),
                }
            )
            return design

    def build_system_prompt(self, block: DesignBlock, integrated_context: Optional[IntegrationContext] = None) -> str:
        context = ""
        if integrated_context is not None:
            strategy = integrated_context.strategy
            context = Template(prompts.BLOCK_CONTEXT).safe_substitute(
                strategy=(strategy.design_strategy if strategy else "") or "N/A",
                block_title=block.title or block.block_id,
                block_type=block.block_type.value,
                block_description=block.description or "N/A",
                block_priority=block.priority.value,
                dependencies=", ".join(block.dependencies) or "None",
            )

        system_prompt, _ = prompts.BLOCK_DESIGN.format(
            block_title=block.title or block.block_id,
            context=context,
            catalog=self.catalog.describe() or prompts.NO_CATALOG,
            requirement="",
        )
        return system_prompt

    def parse_response(self, text: str, block_id: str) -> ComponentDesign:
        """JSON payload, else markdown sections, else the default design"""
        extraction = extract_json_object(text)
        if extraction.ok and any(key in extraction.value for key in DESIGN_PAYLOAD_KEYS):
            try:
                design = self._design_from_payload(extraction.value, block_id)
                self.stats["json_payloads"] += 1
                return design
            except ValidationError as e:
                logger.warning(
                    "design.block.payload_invalid",
                    extra={"block_id": block_id, "errors": e.error_count()}
                )

        sections = extract_sections(text, DESIGN_SECTION_RULES)
        if sections.ok:
            values = sections.value.values
            try:
                design = ComponentDesign(
                    component_name=values["component_name"] or f"{block_id}-component",
                    component_description=values["component_description"] or "Component description",
                    library=[self._library_entry(lib, lib.get("fragment")) for lib in values["library"]],
                    props=self._props(values["props"]),
                )
                self.stats["markdown_payloads"] += 1
                return design
            except ValidationError as e:
                logger.warning(
                    "design.block.sections_invalid",
                    extra={"block_id": block_id, "errors": e.error_count()}
                )

        logger.warning(
            "design.block.default_design",
            "No usable design payload in response",
            extra={"block_id": block_id, "reason": str(sections.error or extraction.error)}
        )
        self.stats["default_designs"] += 1
        return ComponentDesign.empty_for_block(block_id)

    def enrich_component(self, name: str, fragment: Any = None) -> LibraryComponent:
        if self.catalog.has(name):
            return LibraryComponent(name=name, info=self.catalog.get(name), is_private=True)
        return LibraryComponent(name=name, info=fragment, is_private=False)

    def _design_from_payload(self, payload: Dict[str, Any], block_id: str) -> ComponentDesign:
        library = payload.get("library") or []
        if isinstance(library, dict):
            library = [library]

        return ComponentDesign(
            component_name=str(payload.get("componentName") or f"{block_id}-component"),
            component_description=str(payload.get("componentDescription") or "Component description"),
            library=[
                self._library_entry(lib, lib)
                for lib in library
                if isinstance(lib, dict)
            ],
            props=self._props(payload.get("props")),
        )

    def _library_entry(self, lib: Dict[str, Any], fragment: Any) -> LibraryRecommendation:
        components = lib.get("components") or []
        if isinstance(components, str):
            components = split_component_names(components)

        enriched = []
        for item in components:
            if isinstance(item, str):
                enriched.append(self.enrich_component(item, fragment))
            elif isinstance(item, dict) and item.get("name"):
                enriched.append(self.enrich_component(str(item["name"]), item))

        description = lib.get("description") or ""
        if lib.get("usage") and lib.get("usage") not in description:
            description = f"{description} {lib['usage']}".strip()

        return LibraryRecommendation(
            name=str(lib.get("name") or ""),
            components=enriched,
            description=str(description),
        )

    def _props(self, raw: Any) -> List[PropDefinition]:
        props = []
        for item in raw if isinstance(raw, list) else []:
            if not isinstance(item, dict) or not item.get("name"):
                continue
            try:
                props.append(PropDefinition.model_validate(item))
            except ValidationError:
                logger.debug("design.block.prop_skipped", extra={"prop": str(item)[:100]})
        return props

    def _block_from_context(self, block_id: str, integrated_context: Optional[IntegrationContext]) -> DesignBlock:
        if integrated_context and integrated_context.strategy:
            block = integrated_context.strategy.find_block(block_id)
            if block is not None:
                return block

        return DesignBlock(
            block_id=block_id,
            block_type=BlockType.COMPONENT,
            title="Component Design",
            description="Design a component based on requirements",
            priority=Priority.MEDIUM,
            estimated_tokens=1000,
        )

    def get_stats(self) -> Dict[str, Any]:
        return dict(self.stats)
