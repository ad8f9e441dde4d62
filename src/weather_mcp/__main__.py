"""Run the Weather MCP Server with ``python -m weather_mcp``."""

from weather_mcp.app import main

raise SystemExit(main())
