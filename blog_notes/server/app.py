"""blog_notes - MCP Server with Decorators

This module implements the MCP server using FastMCP with multi-transport support
(STDIO, SSE, and Streamable HTTP) and automatic application of decorators
(exception handling, logging, type conversion).
"""

import asyncio
import os
import sys
from typing import Optional

import click
from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from blog_notes.config import ServerConfig, get_config
from blog_notes.decorators.exception_handler import exception_handler
from blog_notes.decorators.tool_logger import tool_logger
from blog_notes.decorators.type_converter import type_converter
from blog_notes.log_system.correlation import (
    clear_initialization_correlation_id,
    generate_correlation_id,
    set_initialization_correlation_id,
)
from blog_notes.log_system.unified_logger import UnifiedLogger
from blog_notes.storage.database import close_database
from blog_notes.tools import all_tools


def create_mcp_server(config: Optional[ServerConfig] = None) -> FastMCP:
    """Create and configure the MCP server with decorators.

    Args:
        config: Optional server configuration

    Returns:
        Configured FastMCP server instance
    """
    if config is None:
        config = get_config()

    # Set startup correlation ID BEFORE initializing logging
    startup_correlation_id = "startup_" + generate_correlation_id().split("_")[1]
    set_initialization_correlation_id(startup_correlation_id)

    destinations = config.logging_destinations.get("destinations", [])
    if destinations:
        UnifiedLogger.initialize_from_config(destinations, config)
    else:
        UnifiedLogger.initialize_default(config)

    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"Server config: {config.name} at log level {config.log_level}")
    logger.info(f"Notes owner: {config.user_id or '<none configured>'}")

    # Configure DNS rebinding protection (disabled by default for development)
    dns_protection = os.getenv("MCP_DNS_REBINDING_PROTECTION", "false").lower() == "true"
    allowed_hosts_env = os.getenv("MCP_ALLOWED_HOSTS", "")
    allowed_hosts = [h.strip() for h in allowed_hosts_env.split(",") if h.strip()]

    logger.info(f"DNS rebinding protection: {'enabled' if dns_protection else 'disabled'}")
    if dns_protection and allowed_hosts:
        logger.info(f"Allowed hosts: {allowed_hosts}")

    mcp_server = FastMCP(
        config.name or "blog_notes",
        transport_security=TransportSecuritySettings(
            enable_dns_rebinding_protection=dns_protection,
            allowed_hosts=allowed_hosts,
        ),
    )

    register_tools(mcp_server, config)

    logger.info("Server initialization complete")
    clear_initialization_correlation_id()

    return mcp_server


def register_tools(mcp_server: FastMCP, config: ServerConfig) -> None:
    """Register all MCP tools with the server using decorators.

    Registers decorated functions directly with MCP to preserve function signatures
    for proper parameter introspection.
    """
    logger = UnifiedLogger.get_logger(__name__)

    for tool_func in all_tools:
        # Apply decorator chain: exception_handler → tool_logger → type_converter
        decorated_func = exception_handler(tool_logger(type_converter(tool_func), config.__dict__))

        mcp_server.tool(name=tool_func.__name__)(decorated_func)

        logger.info(f"Registered tool: {tool_func.__name__}")

    logger.info(f"Server '{mcp_server.name}' initialized with {len(all_tools)} tools")


# Create a server instance that can be imported by the MCP CLI
server = create_mcp_server()


@click.command()
@click.option(
    "--port",
    default=3001,
    help="Port to listen on for SSE or Streamable HTTP transport"
)
@click.option(
    "--host",
    default="127.0.0.1",
    help="Host to bind to (use 0.0.0.0 for Docker)"
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    default="stdio",
    help="Transport type (stdio, sse, or streamable-http)"
)
def main(port: int, host: str, transport: str) -> int:
    """Run the blog_notes server with specified transport."""
    logger = UnifiedLogger.get_logger(__name__)

    async def run_server():
        """Inner async function to run the server and manage the event loop."""
        try:
            if transport == "stdio":
                logger.info("Starting server with STDIO transport")
                await server.run_stdio_async()
            elif transport == "sse":
                logger.info(f"Starting server with SSE transport on {host}:{port}")
                server.settings.host = host
                server.settings.port = port
                await server.run_sse_async()
            elif transport == "streamable-http":
                logger.info(f"Starting server with Streamable HTTP transport on {host}:{port}")
                server.settings.host = host
                server.settings.port = port
                server.settings.streamable_http_path = "/mcp"
                await server.run_streamable_http_async()
            else:
                raise ValueError(f"Unknown transport: {transport}")
        finally:
            await close_database()
            await UnifiedLogger.close()

    try:
        asyncio.run(run_server())
        return 0
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        return 0
    except Exception as e:
        logger.error(f"Failed to start server: {e}", exc_info=True)
        return 1


def main_stdio() -> int:
    """Entry point for STDIO transport (convenience wrapper)."""
    return main.callback(port=3001, host="127.0.0.1", transport="stdio")


def main_http() -> int:
    """Entry point for Streamable HTTP transport (convenience wrapper)."""
    return main.callback(port=3001, host="127.0.0.1", transport="streamable-http")


def main_sse() -> int:
    """Entry point for SSE transport (convenience wrapper)."""
    return main.callback(port=3001, host="127.0.0.1", transport="sse")


if __name__ == "__main__":
    sys.exit(main())
