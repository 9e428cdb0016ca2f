"""HTTP runner for the keyword timestamp MCP server (remote deployment)."""
import os

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.server import TransportSecuritySettings
from yt_keyword_mcp.server import (
    app_lifespan,
    find_keyword_timestamp,
    help_resource,
    TOOL_ANNOTATIONS,
)

server = FastMCP(
    "YouTube Keyword Timestamp",
    instructions="Find when a keyword is first spoken in a YouTube video",
    lifespan=app_lifespan,
    host="0.0.0.0",
    port=int(os.environ.get("PORT", "8800")),
    transport_security=TransportSecuritySettings(enable_dns_rebinding_protection=False),
)

server.tool(annotations=TOOL_ANNOTATIONS)(find_keyword_timestamp)
server.resource("youtube://keyword-help")(help_resource)

server.run(transport="streamable-http")
