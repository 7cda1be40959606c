# services/chat/src/chat/mcp_server.py
"""MCP server exposing the chat tools to external agents over stdio.

Each tool returns its collaborator payload as a single JSON text block.
"""

import json

from libs.relay_shared.logging import get_logger
from mcp.server.fastmcp import FastMCP

from .tools import DELETE_USER_TOOL, USERS_BY_CITY_TOOL, WEATHER_TOOL, ToolRegistry

# Logs must stay off stdout while the stdio transport is active
logger = get_logger(__name__)

SERVER_NAME = "TheMCPCustomAPIServer"


def create_mcp_server(registry: ToolRegistry) -> FastMCP:
    """
    Create the MCP server.

    Args:
        registry: Registry whose executors back the MCP tools.

    Returns:
        Configured FastMCP server instance.
    """
    mcp = FastMCP(SERVER_NAME)

    async def _call(name: str, **args: str) -> str:
        logger.info(f"MCP tool call: {name}")
        return json.dumps(await registry.execute(name, args))

    @mcp.tool(
        name=WEATHER_TOOL,
        description=registry.get(WEATHER_TOOL).descriptor.description,
    )
    async def get_weather_data(city: str) -> str:
        return await _call(WEATHER_TOOL, city=city)

    @mcp.tool(
        name=USERS_BY_CITY_TOOL,
        description=registry.get(USERS_BY_CITY_TOOL).descriptor.description,
    )
    async def get_location_wise_user_data(city: str) -> str:
        return await _call(USERS_BY_CITY_TOOL, city=city)

    @mcp.tool(
        name=DELETE_USER_TOOL,
        description=registry.get(DELETE_USER_TOOL).descriptor.description,
    )
    async def delete_user_data(email: str, token: str) -> str:
        return await _call(DELETE_USER_TOOL, email=email, token=token)

    return mcp
