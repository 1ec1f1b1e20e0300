"""
Tool invocation endpoints.

Four tools dispatch into the design pipeline. Every failure, including
argument validation, comes back as a tagged content item with
``isError: true``; only an unknown tool name is an HTTP error.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from fastapi import APIRouter, Body, HTTPException, Request, status
from pydantic import BaseModel, Field, ValidationError, field_validator

from design_service.models.schemas.core import CamelModel
from design_service.models.schemas.design import (
    BlockDesignEntry,
    DesignBlock,
    DesignStrategy,
    IntegrationContext,
    Prompt,
)
from design_service.services.generation.response_formatter import ResponseFormatter
from design_service.services.pipeline import DesignPipeline
from design_service.utils.logging import get_logger, log_context

router = APIRouter()
logger = get_logger(__name__)


class ToolValidationError(Exception):
    """Required tool argument missing or malformed"""
    pass


class UnknownToolError(LookupError):
    pass


# ============================================================================
# ARGUMENT MODELS
# ============================================================================

class AnalyzeAndPlanArgs(CamelModel):
    prompt: List[Prompt] = Field(..., min_length=1)
    rules: Optional[List[Dict[str, Any]]] = None


class DesignBlockArgs(CamelModel):
    block_id: str = Field(..., min_length=1)
    prompt: List[Prompt] = Field(..., min_length=1)
    block_info: Optional[DesignBlock] = None
    integrated_context: Optional[IntegrationContext] = None
    rules: Optional[List[Dict[str, Any]]] = None

    @field_validator("block_id")
    @classmethod
    def strip_block_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("blockId must not be blank")
        return v.strip()


class IntegrateArgs(CamelModel):
    strategy: DesignStrategy
    block_designs: List[BlockDesignEntry]


class QueryComponentArgs(CamelModel):
    component_name: str = Field(..., min_length=1)


def validate_arguments(model: Type[BaseModel], arguments: Any) -> BaseModel:
    """
    Raises:
        ToolValidationError: naming every offending field
    """
    if not isinstance(arguments, dict):
        raise ToolValidationError("Arguments must be an object")

    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"]) or "arguments"
            if error["type"] == "missing":
                problems.append(f"{location} is required")
            else:
                problems.append(f"{location}: {error['msg']}")
        raise ToolValidationError("Invalid arguments: " + "; ".join(problems)) from e


# ============================================================================
# DISPATCHER
# ============================================================================

@dataclass
class ToolDefinition:
    name: str
    description: str
    arguments: Type[BaseModel]
    failure_label: str
    handler: Callable[[BaseModel], Awaitable[Dict[str, Any]]]


class ToolDispatcher:
    """Maps tool names onto pipeline operations and formats their results"""

    def __init__(self, pipeline: DesignPipeline):
        self.pipeline = pipeline
        self.tools: Dict[str, ToolDefinition] = {
            tool.name: tool
            for tool in (
                ToolDefinition(
                    "analyze_and_plan",
                    "Estimate the complexity of a requirement and split it into design blocks",
                    AnalyzeAndPlanArgs,
                    "Design strategy analysis",
                    self._analyze_and_plan,
                ),
                ToolDefinition(
                    "design_block",
                    "Design one block of a strategy against the component catalog",
                    DesignBlockArgs,
                    "Block design",
                    self._design_block,
                ),
                ToolDefinition(
                    "integrate",
                    "Combine a strategy and its block designs into one integrated design",
                    IntegrateArgs,
                    "Design integration",
                    self._integrate,
                ),
                ToolDefinition(
                    "query_component",
                    "Return the documentation of one catalog component",
                    QueryComponentArgs,
                    "Component query",
                    self._query_component,
                ),
            )
        }

    def list_tools(self) -> List[Dict[str, Any]]:
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.arguments.model_json_schema(by_alias=True),
            }
            for tool in self.tools.values()
        ]

    async def call(self, name: str, arguments: Any) -> Dict[str, Any]:
        """
        Run one tool. Failures are returned, not raised.

        Raises:
            UnknownToolError: when no tool has this name
        """
        tool = self.tools.get(name)
        if tool is None:
            raise UnknownToolError(name)

        with log_context(operation=name):
            try:
                args = validate_arguments(tool.arguments, arguments)
                result = await tool.handler(args)
                logger.info("tools.call.completed", extra={"tool": name})
                return result

            except ToolValidationError as e:
                logger.warning("tools.call.rejected", extra={"tool": name, "error": str(e)})
                return ResponseFormatter.format_error(e, tool.failure_label)

            except Exception as e:
                logger.error(
                    "tools.call.failed",
                    extra={"tool": name, "error_type": type(e).__name__},
                    exc_info=e
                )
                return ResponseFormatter.format_error(e, tool.failure_label)

    async def _analyze_and_plan(self, args: AnalyzeAndPlanArgs) -> Dict[str, Any]:
        plan = await self.pipeline.analyze_and_plan(args.prompt, rules=args.rules)

        payload: Dict[str, Any] = {
            "strategy": plan.strategy.to_wire(),
            "complexityAnalysis": plan.complexity.to_wire(),
            "nextAction": plan.next_action,
        }
        if plan.analysis is not None:
            payload["smartAnalysis"] = plan.analysis.to_wire()

        return ResponseFormatter.format_success(
            ResponseFormatter.strategy_summary(plan.strategy, plan.analysis),
            ResponseFormatter.interaction_overview(plan.analysis),
            ResponseFormatter.dependency_overview(plan.strategy.blocks),
            payload=payload,
        )

    async def _design_block(self, args: DesignBlockArgs) -> Dict[str, Any]:
        result = await self.pipeline.design_block(
            args.block_id,
            args.prompt,
            block_info=args.block_info,
            integrated_context=args.integrated_context,
            rules=args.rules,
        )

        return ResponseFormatter.format_success(
            ResponseFormatter.block_design_summary(result.design, result.block_id),
            payload={
                "blockId": result.block_id,
                "design": result.design.to_wire(),
                "integrated": result.integrated.to_wire() if result.integrated else None,
                "nextAction": result.next_action,
            },
        )

    async def _integrate(self, args: IntegrateArgs) -> Dict[str, Any]:
        integrated = self.pipeline.integrate(args.strategy, args.block_designs)
        return ResponseFormatter.format_success(
            integrated.composition_plan,
            payload={"integrated": integrated.to_wire()},
        )

    async def _query_component(self, args: QueryComponentArgs) -> Dict[str, Any]:
        entry = self.pipeline.query_component(args.component_name)
        return ResponseFormatter.format_success(
            ResponseFormatter.component_documentation(args.component_name, entry),
            payload={"componentName": args.component_name, "component": entry},
        )


# ============================================================================
# ROUTES
# ============================================================================

def get_dispatcher(request: Request) -> ToolDispatcher:
    return request.app.state.dispatcher


@router.get(
    "/tools",
    tags=["Tools"],
    summary="List tools",
    description="Returns every tool with the JSON schema of its arguments."
)
async def list_tools(request: Request) -> Dict[str, Any]:
    return {"tools": get_dispatcher(request).list_tools()}


@router.post(
    "/tools/{name}",
    tags=["Tools"],
    summary="Invoke a tool",
    description="Runs one tool. Failures come back as content with isError set."
)
async def call_tool(
    name: str,
    request: Request,
    arguments: Optional[Dict[str, Any]] = Body(default=None),
) -> Dict[str, Any]:
    try:
        return await get_dispatcher(request).call(name, arguments if arguments is not None else {})
    except UnknownToolError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown tool: {name}"
        )
