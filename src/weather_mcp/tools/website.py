"""
Website liveness tool.

check_website always answers with a status report; an unreachable site is a
DOWN report, not an error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from weather_mcp.formatting import format_liveness
from weather_mcp.models import ToolResponse

if TYPE_CHECKING:
    from weather_mcp.context import ToolContext
    from weather_mcp.tools.schemas import WebsiteArgs
    from weather_mcp.upstream.probe import WebsiteProbe


async def handle_check_website(
    ctx: ToolContext,
    args: WebsiteArgs,
    *,
    probe: WebsiteProbe,
) -> ToolResponse:
    """Probe ``args.url`` and report UP, DEGRADED or DOWN with timing."""
    result = await probe.check(args.url)
    return ToolResponse.text(format_liveness(result))
