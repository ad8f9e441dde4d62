"""
Error types for the Weather MCP Server.

Protocol-level failures are expressed as ToolError subclasses and mapped to
JSON-RPC errors at the protocol layer. Upstream outages are NOT errors: tool
handlers report them as ordinary text content.
"""

from __future__ import annotations

from typing import Any


class ToolError(Exception):
    """
    Base exception class for MCP tool errors.

    ToolError instances are caught at the entry layer and mapped to JSON-RPC
    errors using the mapping in ``weather_mcp.protocol``.

    Attributes:
        error_code: Internal error code string (e.g., "invalid_argument",
            "not_found", "unauthenticated", "internal").
        message: Human-readable error message.
        details: Optional structured details (e.g., validation errors).

    Example:
        >>> raise ToolError(
        ...     error_code="invalid_argument",
        ...     message="State code must be exactly two characters",
        ...     details={"state": "CAL"},
        ... )
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize a ToolError.

        Args:
            error_code: Internal error code string identifying the error category.
            message: Human-readable error message.
            details: Optional dictionary with structured error details.
        """
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        """Return a detailed string representation."""
        return (
            f"{self.__class__.__name__}("
            f"error_code={self.error_code!r}, "
            f"message={self.message!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the error to a dictionary for serialization.

        Returns:
            Dictionary with error_code, message, and details.
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidArgumentError(ToolError):
    """
    Error raised when a tool call carries arguments that fail schema validation.

    Maps to the "invalid_argument" error code (JSON-RPC -32602).
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize an InvalidArgumentError."""
        super().__init__(
            error_code="invalid_argument", message=message, details=details
        )


class NotFoundError(ToolError):
    """Error raised when a tool call names a tool that is not registered."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize a NotFoundError."""
        super().__init__(error_code="not_found", message=message, details=details)


class AuthenticationError(ToolError):
    """
    Error raised by the auth gate when a request's credential is rejected.

    Maps to JSON-RPC code -32000 and is answered with HTTP 401 before any
    message is dispatched.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize an AuthenticationError."""
        super().__init__(
            error_code="unauthenticated", message=message, details=details
        )


class InternalError(ToolError):
    """
    Error raised for unexpected internal errors.

    Used to wrap exceptions escaping a tool handler; these should be logged
    with full stack traces.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize an InternalError."""
        super().__init__(error_code="internal", message=message, details=details)
