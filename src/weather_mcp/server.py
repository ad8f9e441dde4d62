"""
MCP message dispatch for the Weather MCP Server.

This module turns one inbound JSON-RPC body (a single message or a batch)
into the JSON-RPC reply body. It knows the MCP methods (initialize, ping,
tools/list, tools/call, notifications) and delegates tool execution to the
ToolRegistry. Nothing is retained between calls: every request gets its own
ToolContext and no session identifier exists.
"""

from __future__ import annotations

import json
import time
from typing import Any

from weather_mcp import __version__
from weather_mcp.context import CallerInfo, ToolContext
from weather_mcp.errors import InvalidArgumentError, ToolError
from weather_mcp.logging import get_logger
from weather_mcp.protocol import (
    INVALID_REQUEST,
    JSONRPCError,
    JSONRPCRequest,
    JSONRPCResponse,
    create_internal_error,
    create_method_not_found_error,
    format_error_response,
    format_success_response,
    load_payload,
    request_from_dict,
    tool_error_to_jsonrpc_error,
)
from weather_mcp.routing import ToolRegistry
from weather_mcp.security.audit_logger import AuditLogger, get_audit_logger

logger = get_logger(__name__)

SERVER_NAME = "weather"

SUPPORTED_PROTOCOL_VERSIONS = ("2025-06-18", "2025-03-26", "2024-11-05")
LATEST_PROTOCOL_VERSION = SUPPORTED_PROTOCOL_VERSIONS[0]


class MCPServer:
    """
    Stateless MCP request processor.

    The server holds only its immutable tool registry and the audit sink; it
    can be shared by any number of concurrent requests.

    Example:
        >>> server = MCPServer(build_registry())
        >>> reply = await server.handle_message(body, caller)
    """

    def __init__(
        self,
        registry: ToolRegistry,
        audit: AuditLogger | None = None,
    ) -> None:
        """
        Initialize the MCP server.

        Args:
            registry: ToolRegistry with the registered tools.
            audit: Optional AuditLogger; defaults to the process audit logger.
        """
        self.registry = registry
        self._audit = audit

    @property
    def audit(self) -> AuditLogger:
        return self._audit if self._audit is not None else get_audit_logger()

    async def handle_message(
        self,
        request_json: str,
        caller: CallerInfo | None = None,
    ) -> str | None:
        """
        Process one inbound body and return the reply body.

        Args:
            request_json: Raw JSON text (single message or batch).
            caller: The authenticated caller.

        Returns:
            JSON reply text, or None when the body held only notifications.
        """
        try:
            payload = load_payload(request_json)
        except JSONRPCError as e:
            return format_error_response(None, e).to_json()

        if isinstance(payload, list):
            if not payload:
                error = JSONRPCError(
                    code=INVALID_REQUEST,
                    message="Invalid Request: Batch must not be empty",
                )
                return format_error_response(None, error).to_json()
            responses = [await self._handle_one(item, caller) for item in payload]
            replies = [r.to_dict() for r in responses if r is not None]
            if not replies:
                return None
            return json.dumps(replies, separators=(",", ":"), ensure_ascii=False)

        response = await self._handle_one(payload, caller)
        return response.to_json() if response is not None else None

    async def _handle_one(
        self,
        data: Any,
        caller: CallerInfo | None,
    ) -> JSONRPCResponse | None:
        """Process a single decoded message; None for notifications."""
        request_id: str | int | None = None
        if isinstance(data, dict):
            raw_id = data.get("id")
            if isinstance(raw_id, (str, int)) and not isinstance(raw_id, bool):
                request_id = raw_id

        try:
            request = request_from_dict(data)

            if request.is_notification:
                logger.debug(
                    "Notification received", extra={"method": request.method}
                )
                return None

            result = await self._dispatch(request, caller)
            return format_success_response(request.id, result)

        except JSONRPCError as e:
            return format_error_response(request_id, e)

        except ToolError as e:
            return format_error_response(request_id, tool_error_to_jsonrpc_error(e))

        except Exception as e:
            logger.exception(
                "Unexpected error processing request",
                extra={"request_id": request_id, "error": str(e)},
            )
            jsonrpc_error = create_internal_error(
                message=f"Internal server error: {type(e).__name__}",
                details={"exception": str(e)},
            )
            return format_error_response(request_id, jsonrpc_error)

    async def _dispatch(
        self,
        request: JSONRPCRequest,
        caller: CallerInfo | None,
    ) -> Any:
        """Route a request to the matching MCP method."""
        method = request.method

        if method == "initialize":
            return self._initialize(request.params)
        if method == "ping":
            return {}
        if method == "tools/list":
            return {"tools": self.registry.list_tools()}
        if method == "tools/call":
            return await self._call_tool(request, caller)
        if method == "resources/list":
            return {"resources": []}

        raise create_method_not_found_error(method)

    def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        """Answer the MCP handshake."""
        requested = params.get("protocolVersion")
        version = (
            requested
            if requested in SUPPORTED_PROTOCOL_VERSIONS
            else LATEST_PROTOCOL_VERSION
        )
        return {
            "protocolVersion": version,
            "capabilities": {
                "tools": {"listChanged": False},
                "resources": {},
            },
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    async def _call_tool(
        self,
        request: JSONRPCRequest,
        caller: CallerInfo | None,
    ) -> dict[str, Any]:
        """Run ``tools/call`` and return the ToolResponse payload verbatim."""
        name = request.params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError(
                message="Invalid params: 'name' must be a non-empty string",
                details={"parameter": "name"},
            )
        arguments = request.params.get("arguments")

        ctx = ToolContext.from_request(request, tool_name=name, caller=caller)
        started = time.perf_counter()

        try:
            response = await self.registry.invoke(name, ctx, arguments)
        except ToolError as e:
            duration_ms = (time.perf_counter() - started) * 1000
            if e.error_code == "internal":
                logger.error(
                    "Tool handler failed",
                    exc_info=e.__cause__ or e,
                    extra={"tool": name, "request_id": request.id},
                )
            self.audit.log_tool_call(
                ctx,
                status="error",
                error_code=e.error_code,
                params=arguments if isinstance(arguments, dict) else None,
                duration_ms=duration_ms,
            )
            raise

        self.audit.log_tool_call(
            ctx,
            status="success",
            params=arguments if isinstance(arguments, dict) else None,
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        return response.to_dict()


async def process_request(
    request_json: str,
    registry: ToolRegistry,
    caller: CallerInfo | None = None,
) -> str | None:
    """
    Process a JSON-RPC body against a registry.

    Convenience wrapper around ``MCPServer.handle_message``.
    """
    return await MCPServer(registry).handle_message(request_json, caller)
