#!/usr/bin/env python3
"""
toolserver launcher
Serves the tool catalog over MCP stdio (default) or the HTTP admin API
"""
import os
import sys

# Fix encoding issues on servers with ASCII locale
os.environ.setdefault('PYTHONIOENCODING', 'utf-8')

import asyncio
import logging
import uvicorn
from toolserver.api import create_app
from toolserver.config import log_settings, settings
from toolserver.mcp_server import serve_stdio
from toolserver.server import create_server

# stderr only: stdout carries the MCP stdio stream
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


async def run_http_server(tool_server):
    """Run FastAPI HTTP admin server"""
    config = uvicorn.Config(
        create_app(tool_server),
        host=settings.http_host,
        port=settings.http_port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)
    await server.serve()


async def main():
    logger.info(f"Python {sys.version}, encoding={sys.getdefaultencoding()}")
    log_settings(settings)
    tool_server = create_server(settings)

    if settings.transport == "http":
        logger.info(f"HTTP admin server will run on http://{settings.http_host}:{settings.http_port}")
        await run_http_server(tool_server)
    elif settings.transport == "stdio":
        await serve_stdio(tool_server)
    else:
        raise SystemExit(f"FATAL: unknown TOOLSERVER_TRANSPORT {settings.transport!r} (expected stdio or http)")


if __name__ == "__main__":
    asyncio.run(main())
