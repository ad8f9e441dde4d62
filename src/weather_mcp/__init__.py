"""
Weather MCP Server - stateless, bearer-authenticated MCP gateway.

This package implements the MCP protocol (HTTP/JSON-RPC), authenticates each
request, validates tool arguments, and routes calls to the weather alert,
forecast, and website liveness tools.
"""

__version__ = "1.0.0"
