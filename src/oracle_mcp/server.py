"""FastMCP server implementation for oracle-mcp."""

from __future__ import annotations

import dotenv
from fastmcp import FastMCP
from fastmcp.utilities.logging import get_logger
from starlette.requests import Request
from starlette.responses import JSONResponse

from oracle_mcp.execute.mcp_tools import register_query_tools
from oracle_mcp.schema_search.mcp_tools import register_schema_search_tool
from oracle_mcp.services.oracle_service import OracleDbService

# Load environment variables
dotenv.load_dotenv()

# Configure a module-level logger for local server logs.
_logger = get_logger(__name__)


def create_server(service: OracleDbService | None = None) -> FastMCP:
    """Build a FastMCP server with the Oracle tools and health route attached."""
    svc = service or OracleDbService()
    server = FastMCP(
        name="oracle-mcp",
        instructions=(
            "Read-only Oracle database access. Use oracle_search_schema to find "
            "tables and columns, then oracle_query with SELECT / WITH statements "
            "and named bind parameters. Mutating or multi-statement SQL is rejected."
        ),
    )

    # -- Tool Registration ---------------------------------------------------
    register_query_tools(server, svc)
    register_schema_search_tool(server, svc)

    # -- Health Check --------------------------------------------------------
    @server.custom_route("/healthz", methods=["GET"])
    async def health_check(_request: Request) -> JSONResponse:  # pyright: ignore[reportUnusedFunction]
        return JSONResponse({"ok": True})

    _ = health_check
    return server


# Create the main MCP server instance
mcp = create_server()

# -- Main Entrypoint -------------------------------------------------------

# Use fastmcp command to start the server
# fastmcp run
