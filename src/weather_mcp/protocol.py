"""
JSON-RPC 2.0 protocol handling for the Weather MCP Server.

Features:
- JSON-RPC 2.0 request parsing with validation (single messages and batches)
- JSON-RPC 2.0 response formatting (success and error)
- ToolError to JSON-RPC error code mapping

Error codes:
- -32700: Parse error (malformed JSON)
- -32600: Invalid Request (missing/invalid jsonrpc, method, etc.)
- -32601: Method not found (unknown MCP method)
- -32602: Invalid params (unknown tool, argument validation failed)
- -32603: Internal error (unexpected handler failure)
- -32000: Server error (authentication failures and unmapped errors)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from weather_mcp.errors import ToolError

# =============================================================================
# JSON-RPC Error Codes
# =============================================================================

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Server error code used for auth failures and anything unmapped
DEFAULT_SERVER_ERROR = -32000

ERROR_CODE_MAP: dict[str, int] = {
    "invalid_argument": INVALID_PARAMS,
    "not_found": INVALID_PARAMS,
    "unauthenticated": DEFAULT_SERVER_ERROR,
    "internal": INTERNAL_ERROR,
}


# =============================================================================
# Data Classes
# =============================================================================


class JSONRPCError(Exception):
    """
    Represents a JSON-RPC 2.0 error object.

    This class is both an Exception (so it can be raised) and a data container
    for JSON-RPC error information.

    Attributes:
        code: Integer error code (per JSON-RPC 2.0 spec).
        message: Human-readable error message.
        data: Optional structured error data.
    """

    def __init__(
        self,
        code: int,
        message: str,
        data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to a dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            result["data"] = self.data
        return result

    def __repr__(self) -> str:
        """Return a detailed string representation."""
        return (
            f"JSONRPCError(code={self.code}, "
            f"message={self.message!r}, "
            f"data={self.data!r})"
        )


@dataclass
class JSONRPCRequest:
    """
    Represents a parsed JSON-RPC 2.0 request.

    Attributes:
        jsonrpc: Protocol version (must be "2.0").
        id: Request identifier (string or number, None for notifications).
        method: The MCP method to invoke (e.g., "tools/call").
        params: Parameters for the method (dict or empty dict).
    """

    jsonrpc: str
    id: str | int | None
    method: str
    params: dict[str, Any] = field(default_factory=dict)

    @property
    def is_notification(self) -> bool:
        """Check if this is a notification (no id field)."""
        return self.id is None


@dataclass
class JSONRPCResponse:
    """
    Represents a JSON-RPC 2.0 response.

    Either result or error is present, never both.
    """

    jsonrpc: str
    id: str | int | None
    result: Any | None = None
    error: JSONRPCError | None = None

    @property
    def is_error(self) -> bool:
        """Check if this is an error response."""
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert the response to a dictionary for JSON serialization."""
        response: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
        }
        if self.error is not None:
            response["error"] = self.error.to_dict()
        else:
            response["result"] = self.result
        return response

    def to_json(self) -> str:
        """Serialize the response to a compact JSON string."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)


# =============================================================================
# Request Parsing
# =============================================================================


def load_payload(request_json: str) -> Any:
    """
    Decode the raw JSON body of an inbound message.

    Raises:
        JSONRPCError: PARSE_ERROR if the body is not valid JSON.
    """
    try:
        return json.loads(request_json)
    except json.JSONDecodeError as e:
        raise JSONRPCError(
            code=PARSE_ERROR,
            message=f"Parse error: Invalid JSON - {e.msg}",
        ) from e


def request_from_dict(data: Any) -> JSONRPCRequest:
    """
    Validate a decoded JSON value as a JSON-RPC 2.0 request.

    Args:
        data: A decoded JSON value (one element of a batch, or a whole body).

    Returns:
        Parsed JSONRPCRequest object.

    Raises:
        JSONRPCError: If the request is malformed or invalid.
    """
    if not isinstance(data, dict):
        raise JSONRPCError(
            code=INVALID_REQUEST,
            message="Invalid Request: Request must be a JSON object",
        )

    jsonrpc = data.get("jsonrpc")
    if jsonrpc is None:
        raise JSONRPCError(
            code=INVALID_REQUEST,
            message="Invalid Request: Missing 'jsonrpc' field",
        )
    if jsonrpc != "2.0":
        raise JSONRPCError(
            code=INVALID_REQUEST,
            message=f"Invalid Request: jsonrpc must be '2.0', got '{jsonrpc}'",
        )

    method = data.get("method")
    if method is None:
        raise JSONRPCError(
            code=INVALID_REQUEST,
            message="Invalid Request: Missing 'method' field",
        )
    if not isinstance(method, str) or not method:
        raise JSONRPCError(
            code=INVALID_REQUEST,
            message="Invalid Request: 'method' must be a non-empty string",
        )

    request_id = data.get("id")
    if request_id is not None and (
        isinstance(request_id, bool) or not isinstance(request_id, (str, int))
    ):
        raise JSONRPCError(
            code=INVALID_REQUEST,
            message="Invalid Request: 'id' must be a string or an integer",
        )

    params = data.get("params", {})
    if params is None:
        params = {}
    if not isinstance(params, (dict, list)):
        raise JSONRPCError(
            code=INVALID_PARAMS,
            message="Invalid params: 'params' must be an object or array",
        )
    # MCP methods take named params only; keep positional ones reachable
    if isinstance(params, list):
        params = {"_args": params}

    return JSONRPCRequest(
        jsonrpc="2.0",
        id=request_id,
        method=method,
        params=params,
    )


def parse_request(request_json: str) -> JSONRPCRequest:
    """
    Parse a single JSON-RPC 2.0 request from a JSON string.

    Example:
        >>> request = parse_request('{"jsonrpc":"2.0","id":1,"method":"ping"}')
        >>> request.method
        'ping'
    """
    return request_from_dict(load_payload(request_json))


# =============================================================================
# Response Formatting
# =============================================================================


def format_success_response(
    request_id: str | int | None,
    result: Any,
) -> JSONRPCResponse:
    """
    Format a successful JSON-RPC 2.0 response.

    Example:
        >>> format_success_response(1, {}).to_json()
        '{"jsonrpc":"2.0","id":1,"result":{}}'
    """
    return JSONRPCResponse(jsonrpc="2.0", id=request_id, result=result, error=None)


def format_error_response(
    request_id: str | int | None,
    error: JSONRPCError,
) -> JSONRPCResponse:
    """
    Format a JSON-RPC 2.0 error response.

    Args:
        request_id: The request ID (None for parse errors and auth failures).
        error: The JSONRPCError object describing the error.
    """
    return JSONRPCResponse(jsonrpc="2.0", id=request_id, result=None, error=error)


# =============================================================================
# Error Constructors
# =============================================================================


def tool_error_to_jsonrpc_error(tool_error: ToolError) -> JSONRPCError:
    """
    Convert a ToolError to a JSONRPCError.

    Example:
        >>> from weather_mcp.errors import InvalidArgumentError
        >>> tool_error_to_jsonrpc_error(InvalidArgumentError("bad")).code
        -32602
    """
    jsonrpc_code = ERROR_CODE_MAP.get(tool_error.error_code, DEFAULT_SERVER_ERROR)

    return JSONRPCError(
        code=jsonrpc_code,
        message=tool_error.message,
        data=tool_error.to_dict(),
    )


def create_method_not_found_error(method: str) -> JSONRPCError:
    """Create a "Method not found" error for an unknown MCP method."""
    return JSONRPCError(
        code=METHOD_NOT_FOUND,
        message=f"Method not found: {method}",
        data={
            "error_code": "not_found",
            "message": f"Method '{method}' is not supported",
            "details": {"method": method},
        },
    )


def create_internal_error(
    message: str, details: dict[str, Any] | None = None
) -> JSONRPCError:
    """Create an internal error for unexpected exceptions."""
    return JSONRPCError(
        code=INTERNAL_ERROR,
        message=message,
        data={
            "error_code": "internal",
            "message": message,
            "details": details or {},
        },
    )


def create_unauthenticated_error(message: str) -> JSONRPCError:
    """
    Create the error returned when the auth gate rejects a request.

    The body carries only code and message; the id is always null because
    the request is never parsed.
    """
    return JSONRPCError(code=DEFAULT_SERVER_ERROR, message=message)
