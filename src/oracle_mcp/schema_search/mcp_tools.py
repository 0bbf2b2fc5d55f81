"""MCP tool registration for schema keyword search (oracle_search_schema)."""

from __future__ import annotations

from typing import Annotated

from fastmcp import Context, FastMCP
from fastmcp.utilities.logging import get_logger
from pydantic import Field

from oracle_mcp.models import SchemaSearchResult, ToolResponse
from oracle_mcp.services.oracle_service import OracleDbService

_logger = get_logger(__name__)


def register_schema_search_tool(mcp: FastMCP, service: OracleDbService | None = None) -> None:
    """Register `oracle_search_schema` on the given FastMCP instance."""

    svc = service or OracleDbService()

    @mcp.tool
    async def oracle_search_schema(
        ctx: Context,
        keyword: Annotated[str, Field(description="Keyword to search in table/column names.")],
        owner: Annotated[
            str | None,
            Field(description="Optional schema/owner to constrain results (e.g. HR)."),
        ] = None,
        max_hits: Annotated[
            int | None,
            Field(description="Maximum hits to return (default 50, max 200)."),
        ] = None,
    ) -> ToolResponse[SchemaSearchResult]:  # pyright: ignore[reportUnusedFunction]
        """Search ALL_TABLES and ALL_TAB_COLUMNS by keyword.

        Table-name hits come first; column hits fill the remaining budget.
        """
        _logger.info("oracle_search_schema: keyword=%r owner=%r", keyword, owner)
        response = await svc.search_schema(keyword, owner, max_hits)
        if response.error is not None:
            await ctx.warning(f"oracle_search_schema failed: {response.error.message}")
        return response

    _ = oracle_search_schema
