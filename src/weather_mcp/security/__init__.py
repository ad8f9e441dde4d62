"""
Security module for the Weather MCP Server.

Components:
- BearerAuthenticator: checks the Authorization header against the configured token
- AuditLogger: structured audit trail of tool calls and auth rejections
"""

from weather_mcp.security.audit_logger import AuditLogger, get_audit_logger
from weather_mcp.security.bearer import BearerAuthenticator

__all__ = [
    "AuditLogger",
    "BearerAuthenticator",
    "get_audit_logger",
]
