"""
Tests for ToolSpec and ToolRegistry.
"""

from __future__ import annotations

from typing import Any

import pytest
from factories import make_ctx
from pydantic import BaseModel

from weather_mcp.errors import InternalError, InvalidArgumentError, NotFoundError
from weather_mcp.models import ToolResponse
from weather_mcp.routing import ToolRegistry, ToolSpec
from weather_mcp.tools import build_registry
from weather_mcp.tools.schemas import AlertsArgs


class EchoArgs(BaseModel):
    word: str


async def _echo(ctx: Any, args: EchoArgs) -> ToolResponse:
    return ToolResponse.text(f"{ctx.tool_name}:{args.word}")


async def _explode(ctx: Any, args: EchoArgs) -> ToolResponse:
    raise RuntimeError("boom")


async def _refuse(ctx: Any, args: EchoArgs) -> ToolResponse:
    raise InvalidArgumentError("word not allowed")


@pytest.fixture
def registry() -> ToolRegistry:
    reg = ToolRegistry()
    reg.register(ToolSpec("echo", "Echo a word", EchoArgs, _echo))
    reg.register(ToolSpec("explode", "Always fails", EchoArgs, _explode))
    reg.register(ToolSpec("refuse", "Always refuses", EchoArgs, _refuse))
    return reg


# =============================================================================
# Tests for Registration
# =============================================================================


class TestRegistration:
    """Tests for registering and listing tools."""

    def test_register_and_get(self, registry: ToolRegistry) -> None:
        """Test lookup by exact name."""
        assert registry.get("echo") is not None
        assert registry.get("Echo") is None
        assert "echo" in registry
        assert len(registry) == 3
        assert list(registry) == ["echo", "explode", "refuse"]

    def test_duplicate_rejected(self, registry: ToolRegistry) -> None:
        """Test that a name can only be registered once."""
        with pytest.raises(ValueError, match="already registered"):
            registry.register(ToolSpec("echo", "again", EchoArgs, _echo))

    def test_list_tools(self, registry: ToolRegistry) -> None:
        """Test the tools/list description of each tool."""
        tools = registry.list_tools()
        assert tools[0]["name"] == "echo"
        assert tools[0]["description"] == "Echo a word"
        assert tools[0]["inputSchema"]["type"] == "object"
        assert tools[0]["inputSchema"]["required"] == ["word"]


class TestBuildRegistry:
    """Tests for the fixed weather tool set."""

    def test_three_tools(self) -> None:
        """Test names, order and descriptions."""
        tools = build_registry().list_tools()
        assert [(t["name"], t["description"]) for t in tools] == [
            ("get_alerts", "Get weather alerts for a state"),
            ("get_forecast", "Get weather forecast for a location"),
            ("check_website", "Check if a website is up or down"),
        ]

    def test_schemas_from_argument_models(self) -> None:
        """Test that input schemas come from the argument models."""
        spec = build_registry().get("get_alerts")
        assert spec is not None
        assert spec.arguments is AlertsArgs
        assert spec.to_dict()["inputSchema"] == AlertsArgs.model_json_schema()


# =============================================================================
# Tests for Invocation
# =============================================================================


class TestInvoke:
    """Tests for ToolRegistry.invoke."""

    @pytest.mark.asyncio
    async def test_success(self, registry: ToolRegistry) -> None:
        """Test that validated arguments reach the handler."""
        response = await registry.invoke("echo", make_ctx("echo"), {"word": "hi"})
        assert response.to_dict() == {"content": [{"type": "text", "text": "echo:hi"}]}

    @pytest.mark.asyncio
    async def test_unknown_tool(self, registry: ToolRegistry) -> None:
        """Test that an unknown name raises NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            await registry.invoke("nope", make_ctx("nope"), {})
        assert exc_info.value.message == "Tool nope not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("arguments", [None, {}, {"word": 3}, ["hi"]])
    async def test_invalid_arguments(
        self, registry: ToolRegistry, arguments: Any
    ) -> None:
        """Test that invalid arguments never reach the handler."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            await registry.invoke("echo", make_ctx("echo"), arguments)
        assert exc_info.value.message.startswith("Invalid arguments for tool echo")
        assert exc_info.value.details["tool"] == "echo"
        assert exc_info.value.details["errors"]

    @pytest.mark.asyncio
    async def test_handler_exception_wrapped(self, registry: ToolRegistry) -> None:
        """Test that unexpected handler exceptions become InternalError."""
        with pytest.raises(InternalError) as exc_info:
            await registry.invoke("explode", make_ctx("explode"), {"word": "x"})
        assert exc_info.value.details["exception_type"] == "RuntimeError"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_tool_error_propagates(self, registry: ToolRegistry) -> None:
        """Test that ToolErrors raised by a handler pass through unchanged."""
        with pytest.raises(InvalidArgumentError, match="word not allowed"):
            await registry.invoke("refuse", make_ctx("refuse"), {"word": "x"})
