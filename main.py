"""
Entry point for running the YouTube subtitle MCP server.

Run this module directly.  By default the server speaks MCP over
stdio, which is what desktop agent hosts expect; your configuration
should specify something akin to::

    "command": "python",
    "args": ["main.py"]

For a network deployment use the streamable HTTP transport::

    python main.py --transport streamable-http --port 3000

The MCP endpoint is then served at ``/mcp`` and a health check at
``/health``.  Defaults come from environment variables (see
``config.py``).  The server blocks until it is terminated.
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import uvicorn

from config import settings
from utils.log import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="youtube-subtitle-mcp",
        description="Serve YouTube subtitles to MCP clients.",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "streamable-http"],
        default=settings.TRANSPORT,
        help="MCP transport (default: %(default)s)",
    )
    parser.add_argument("--host", default=settings.HOST, help="HTTP bind address")
    parser.add_argument("--port", type=int, default=settings.PORT, help="HTTP port")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    # Import the shared MCP server instance after logging is configured.
    import server

    if args.transport == "streamable-http":
        server.configure_http(args.host, args.port)
        logger.info(
            "%s listening on http://%s:%d/mcp (health: /health)",
            server.SERVER_NAME, args.host, args.port,
        )
        uvicorn.run(
            server.http_app(),
            host=args.host,
            port=args.port,
            log_level=args.log_level.lower(),
        )
    else:
        logger.info("%s started on stdio", server.SERVER_NAME)
        server.mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
