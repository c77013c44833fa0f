"""
Configure the FastMCP server instance.

This module creates a shared `FastMCP` server named
``youtube-subtitle-mcp``, adds a ``/health`` route for the HTTP
transport and imports tool modules so that their decorated functions
are registered.  ``http_app()`` wraps the streamable HTTP app in CORS
middleware so browser-based MCP clients can connect.

You typically do not run this module directly. Instead, use
``python main.py`` which imports the server and runs it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from config import settings

SERVER_NAME = "youtube-subtitle-mcp"
__version__ = "1.0.0"

LOCAL_HOSTS = ("127.0.0.1", "localhost", "::1")


def transport_security_for(host: str) -> TransportSecuritySettings:
    """DNS-rebinding protection for loopback binds, none for public ones.

    A public bind is reached under whatever host name the deployment
    uses, so the Host header cannot be checked against a fixed list.
    """
    if host in LOCAL_HOSTS:
        return TransportSecuritySettings(
            enable_dns_rebinding_protection=True,
            allowed_hosts=["127.0.0.1:*", "localhost:*", "[::1]:*"],
            allowed_origins=["http://127.0.0.1:*", "http://localhost:*", "http://[::1]:*"],
        )
    return TransportSecuritySettings(enable_dns_rebinding_protection=False)


# Create the shared MCP server instance.  Session bookkeeping for the
# streamable HTTP transport is handled by the SDK's session manager.
mcp = FastMCP(
    SERVER_NAME,
    host=settings.HOST,
    port=settings.PORT,
    json_response=True,
    transport_security=transport_security_for(settings.HOST),
)


def configure_http(host: str, port: int) -> None:
    """Point the HTTP transport at ``host:port``.

    Must run before the first ``http_app()`` call; the SDK builds its
    session manager from these settings once.
    """
    mcp.settings.host = host
    mcp.settings.port = port
    mcp.settings.transport_security = transport_security_for(host)


def http_app(cors_origins: Optional[List[str]] = None) -> Starlette:
    """Return the streamable HTTP app (``/mcp`` and ``/health``) with CORS."""
    app = mcp.streamable_http_app()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins if cors_origins is not None else settings.cors_origin_list,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Authorization", "Mcp-Session-Id", "X-Api-Key"],
        expose_headers=["Content-Type", "Mcp-Session-Id"],
    )
    return app


@mcp.custom_route("/health", methods=["GET"])
async def health_check(request: Request) -> JSONResponse:
    """Report liveness for load balancers and deployment probes."""
    return JSONResponse({
        "status": "healthy",
        "transport": "streamable-http",
        "name": SERVER_NAME,
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


# Import tools so that their decorators and prompts register functions
# with the server.  Use absolute imports rather than package-relative
# ones so that the code works when run from the project root.
from tools import subtitle_tools  # noqa: E402,F401
from tools import prompts  # noqa: E402,F401
