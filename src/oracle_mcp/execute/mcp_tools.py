"""MCP tool registration for connectivity checks and read-only queries.

Provides `oracle_ping` and `oracle_query`. Both delegate to `OracleDbService`
and return a `ToolResponse` envelope; failures are reported in the envelope
rather than raised to the client.
"""

from __future__ import annotations

from typing import Annotated

from fastmcp import Context, FastMCP
from fastmcp.utilities.logging import get_logger
from pydantic import Field

from oracle_mcp.execute.runner import sql_preview
from oracle_mcp.models import PingResult, QueryResult, ScalarValue, ToolResponse
from oracle_mcp.services.oracle_service import OracleDbService

_logger = get_logger(__name__)


def register_query_tools(mcp: FastMCP, service: OracleDbService | None = None) -> None:
    """Register `oracle_ping` and `oracle_query` on the given FastMCP instance."""

    svc = service or OracleDbService()

    @mcp.tool
    async def oracle_ping(ctx: Context) -> ToolResponse[PingResult]:  # pyright: ignore[reportUnusedFunction]
        """Check Oracle connectivity using ORACLE_CONNECTION_STRING.

        Reports the database name when it can be read; a connection that opens
        but cannot report its name still counts as reachable.
        """
        _logger.info("oracle_ping invoked")
        response = await svc.ping()
        if response.error is not None:
            await ctx.warning(f"oracle_ping failed: {response.error.message}")
        return response

    @mcp.tool
    async def oracle_query(
        ctx: Context,
        sql: Annotated[
            str,
            Field(description="Read-only SQL (SELECT / WITH ... SELECT). Do not include ';'."),
        ],
        parameters: Annotated[
            dict[str, ScalarValue] | None,
            Field(description='Bind parameters map (e.g. {"id": 123} for :id).'),
        ] = None,
        max_rows: Annotated[
            int | None,
            Field(description="Maximum rows to return (defaults to ORACLE_DEFAULT_MAX_ROWS)."),
        ] = None,
    ) -> ToolResponse[QueryResult]:  # pyright: ignore[reportUnusedFunction]
        """Execute a read-only Oracle query with optional named bind parameters.

        Rows are capped server-side; `truncated` is true when the returned row
        count reached the cap, in which case add filters or aggregate.
        """
        _logger.info("oracle_query: %s", sql_preview(sql))
        response = await svc.query(sql, parameters, max_rows)
        if response.error is not None:
            await ctx.warning(f"oracle_query failed: {response.error.message}")
        return response

    _ = (oracle_ping, oracle_query)
