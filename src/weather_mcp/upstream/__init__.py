"""
Outbound HTTP for the Weather MCP Server.

Components:
- UpstreamClient: single-attempt JSON fetches against the weather provider
- WebsiteProbe: HEAD-based liveness checks against arbitrary URLs
"""

from weather_mcp.upstream.client import UpstreamClient
from weather_mcp.upstream.probe import WebsiteProbe

__all__ = [
    "UpstreamClient",
    "WebsiteProbe",
]
