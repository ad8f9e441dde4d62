"""
Request context for the Weather MCP Server.

A ToolContext is built for every tool call and discarded with the response;
nothing in it outlives the request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from weather_mcp.protocol import JSONRPCRequest


@dataclass(frozen=True)
class CallerInfo:
    """
    Identity of the client that passed the auth gate.

    Attributes:
        ip_address: Client IP address for audit logging.
        auth_method: How the caller was authenticated ("bearer" or "none").
    """

    ip_address: str | None = None
    auth_method: str = "none"

    @property
    def is_authenticated(self) -> bool:
        """Check if the caller presented a valid credential."""
        return self.auth_method != "none"

    def to_dict(self) -> dict[str, Any]:
        """Convert CallerInfo to a dictionary for serialization."""
        return {
            "ip_address": self.ip_address,
            "auth_method": self.auth_method,
        }


@dataclass
class ToolContext:
    """
    Encapsulates the context of a single MCP tool call.

    Attributes:
        tool_name: Tool being invoked (e.g., "get_forecast").
        caller: CallerInfo for the authenticated client.
        request_id: JSON-RPC request identifier.
        timestamp: When the request was received (UTC).
        metadata: Additional context (e.g., request headers of interest).
    """

    tool_name: str
    caller: CallerInfo
    request_id: str | int | None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert ToolContext to a dictionary for logging/serialization."""
        return {
            "tool_name": self.tool_name,
            "caller": self.caller.to_dict(),
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }

    @classmethod
    def from_request(
        cls,
        request: JSONRPCRequest,
        tool_name: str,
        caller: CallerInfo | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ToolContext:
        """
        Create a ToolContext for a ``tools/call`` request.

        Example:
            >>> from weather_mcp.protocol import parse_request
            >>> req = parse_request('{"jsonrpc":"2.0","id":1,"method":"tools/call"}')
            >>> ToolContext.from_request(req, "get_alerts").tool_name
            'get_alerts'
        """
        return cls(
            tool_name=tool_name,
            caller=caller or CallerInfo(),
            request_id=request.id,
            timestamp=datetime.now(UTC),
            metadata=metadata or {},
        )
