"""
HTTP transport for the Weather MCP Server.

A single endpoint (``/mcp`` by default) serves the streamable HTTP flavour of
MCP in stateless mode:
- POST delivers JSON-RPC messages and returns the replies as JSON
- GET opens a server-to-client event stream (keep-alives only; a stateless
  server has nothing to push)
- DELETE is refused since there are no sessions to terminate

Every request passes the bearer-token gate first; rejected requests never
reach the dispatcher.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import AsyncIterator

import uvicorn
import yaml
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from pydantic import ValidationError

from weather_mcp import __version__
from weather_mcp.config import AppConfig, load_config
from weather_mcp.errors import AuthenticationError
from weather_mcp.logging import get_logger, setup_logging
from weather_mcp.protocol import (
    DEFAULT_SERVER_ERROR,
    PARSE_ERROR,
    JSONRPCError,
    create_unauthenticated_error,
    format_error_response,
)
from weather_mcp.routing import ToolRegistry
from weather_mcp.security.audit_logger import (
    AuditLogger,
    get_audit_logger,
    set_audit_logger,
)
from weather_mcp.security.bearer import BearerAuthenticator
from weather_mcp.server import MCPServer
from weather_mcp.tools import build_registry
from weather_mcp.upstream.client import UpstreamClient
from weather_mcp.upstream.probe import WebsiteProbe

logger = get_logger(__name__)

EVENT_STREAM = "text/event-stream"
KEEPALIVE_INTERVAL_SECONDS = 15.0


def _error_response(status_code: int, error: JSONRPCError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=format_error_response(None, error).to_dict(),
    )


async def _keepalive_stream(
    request: Request, interval: float
) -> AsyncIterator[str]:
    yield ": stream opened\n\n"
    while not await request.is_disconnected():
        await asyncio.sleep(interval)
        yield ": keep-alive\n\n"


def create_app(
    config: AppConfig | None = None,
    *,
    registry: ToolRegistry | None = None,
    authenticator: BearerAuthenticator | None = None,
    audit: AuditLogger | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Application configuration (defaults to built-in defaults).
        registry: Tool registry override (defaults to the three weather tools).
        authenticator: Auth gate override (defaults to the configured token).
        audit: Audit logger override (defaults to the process audit logger).

    Returns:
        The configured FastAPI application.
    """
    config = config if config is not None else AppConfig()
    if registry is None:
        registry = build_registry(
            client=UpstreamClient.from_config(config.upstream),
            probe=WebsiteProbe.from_config(config.liveness),
        )
    if authenticator is None:
        authenticator = BearerAuthenticator.from_config(config.security)
    audit = audit if audit is not None else get_audit_logger()

    server = MCPServer(registry, audit=audit)

    app = FastAPI(
        title="Weather MCP Server",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.api_route(config.server.path, methods=["GET", "POST", "DELETE"])
    async def mcp_endpoint(request: Request) -> Response:
        client_ip = request.client.host if request.client else None

        try:
            caller = authenticator.authenticate(
                request.headers.get("authorization"), ip_address=client_ip
            )
        except AuthenticationError as e:
            reason = e.details.get("reason", "unknown")
            logger.warning(
                "Authentication failed",
                extra={"reason": reason, "source_ip": client_ip},
            )
            audit.log_auth_failure(
                reason=reason, source_ip=client_ip, path=request.url.path
            )
            return _error_response(401, create_unauthenticated_error(e.message))

        if request.method == "GET":
            if EVENT_STREAM not in request.headers.get("accept", ""):
                return _error_response(
                    406,
                    JSONRPCError(
                        code=DEFAULT_SERVER_ERROR,
                        message="Not Acceptable: Client must accept text/event-stream",
                    ),
                )
            return StreamingResponse(
                _keepalive_stream(request, KEEPALIVE_INTERVAL_SECONDS),
                media_type=EVENT_STREAM,
                headers={"Cache-Control": "no-cache"},
            )

        if request.method == "DELETE":
            response = _error_response(
                405,
                JSONRPCError(
                    code=DEFAULT_SERVER_ERROR,
                    message="Method not allowed: this server does not use sessions",
                ),
            )
            response.headers["Allow"] = "GET, POST"
            return response

        body = await request.body()
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError:
            return _error_response(
                400,
                JSONRPCError(
                    code=PARSE_ERROR,
                    message="Parse error: Request body must be UTF-8",
                ),
            )

        reply = await server.handle_message(text, caller)
        if reply is None:
            return Response(status_code=202)
        return Response(content=reply, media_type="application/json")

    return app


def main(argv: list[str] | None = None) -> int:
    """
    Console entry point: load configuration and serve until interrupted.

    Returns:
        Process exit code.
    """
    try:
        config = load_config(cli_args=argv)
    except (FileNotFoundError, ValidationError, yaml.YAMLError) as e:
        print(f"Failed to load configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging)
    set_audit_logger(AuditLogger.from_config(config.logging))

    app = create_app(config)

    logger.info(
        f"Weather MCP Server running on "
        f"http://localhost:{config.server.port}{config.server.path}",
        extra={"host": config.server.host, "port": config.server.port},
    )
    logger.info("Bearer token authentication enabled")

    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level,
    )
    return 0
