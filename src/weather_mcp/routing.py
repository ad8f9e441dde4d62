"""
Tool routing for the Weather MCP Server.

This module provides:
- ToolSpec: name, description, argument model and handler of one tool
- ToolRegistry: maps tool names to specs, validates arguments, dispatches

Arguments are validated against the tool's pydantic model before the handler
runs, so handlers only ever see well-formed input.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from weather_mcp.errors import InternalError, InvalidArgumentError, NotFoundError, ToolError

if TYPE_CHECKING:
    from weather_mcp.context import ToolContext
    from weather_mcp.models import ToolResponse

ToolHandler = Callable[["ToolContext", Any], Awaitable["ToolResponse"]]


@dataclass(frozen=True)
class ToolSpec:
    """
    Static description of one tool.

    Attributes:
        name: Tool name used in ``tools/call``.
        description: Human-readable description for ``tools/list``.
        arguments: Pydantic model the arguments must satisfy.
        handler: Async callable receiving (ctx, validated arguments).
    """

    name: str
    description: str
    arguments: type[BaseModel]
    handler: ToolHandler

    def to_dict(self) -> dict[str, Any]:
        """Describe the tool in ``tools/list`` format."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.arguments.model_json_schema(),
        }


class ToolRegistry:
    """
    Registry mapping tool names to ToolSpecs.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(ToolSpec("get_alerts", "...", AlertsArgs, handler))
        >>> result = await registry.invoke("get_alerts", ctx, {"state": "CA"})
    """

    def __init__(self) -> None:
        """Initialize an empty tool registry."""
        self._tools: dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool is already registered under the same name.
        """
        if spec.name in self._tools:
            raise ValueError(f"Tool '{spec.name}' is already registered")
        self._tools[spec.name] = spec

    def get(self, name: str) -> ToolSpec | None:
        """Look up a tool by exact name."""
        return self._tools.get(name)

    def list_tools(self) -> list[dict[str, Any]]:
        """Describe all registered tools, in registration order."""
        return [spec.to_dict() for spec in self._tools.values()]

    def validate_arguments(self, spec: ToolSpec, arguments: Any) -> BaseModel:
        """
        Validate raw arguments against a tool's argument model.

        Raises:
            InvalidArgumentError: If the arguments do not satisfy the model.
        """
        if arguments is None:
            arguments = {}
        try:
            return spec.arguments.model_validate(arguments)
        except ValidationError as e:
            errors = e.errors(include_url=False, include_context=False)
            summary = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
                for err in errors
            )
            raise InvalidArgumentError(
                message=f"Invalid arguments for tool {spec.name}: {summary}",
                details={"tool": spec.name, "errors": errors},
            ) from e

    async def invoke(
        self,
        name: str,
        ctx: ToolContext,
        arguments: Any,
    ) -> ToolResponse:
        """
        Validate arguments and invoke a tool.

        Args:
            name: Tool name to invoke.
            ctx: ToolContext for the request.
            arguments: Raw ``arguments`` object from the request.

        Returns:
            The handler's ToolResponse.

        Raises:
            NotFoundError: If no tool has this name.
            InvalidArgumentError: If the arguments fail validation.
            InternalError: If the handler raises anything other than ToolError.
        """
        spec = self.get(name)
        if spec is None:
            raise NotFoundError(
                message=f"Tool {name} not found",
                details={"tool": name},
            )

        validated = self.validate_arguments(spec, arguments)

        try:
            return await spec.handler(ctx, validated)
        except ToolError:
            raise
        except Exception as e:
            raise InternalError(
                message=f"Internal error in tool '{name}': {e!s}",
                details={"tool": name, "exception_type": type(e).__name__},
            ) from e

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)
