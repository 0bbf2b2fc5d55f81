"""oracle-mcp package for read-only Oracle access over MCP.

Provides a Model Context Protocol (FastMCP) server exposing connectivity
checks, guarded read-only queries and schema keyword search against an
Oracle database.
"""

from oracle_mcp.models import (
    ColumnInfo,
    PingResult,
    QueryRequest,
    QueryResult,
    SchemaHit,
    SchemaSearchRequest,
    SchemaSearchResult,
    ToolError,
    ToolResponse,
)
from oracle_mcp.services import ConfigService, ConnectionOptions
from oracle_mcp.services.oracle_service import OracleDbService

__all__ = [  # noqa: RUF022
    # Core models
    "ColumnInfo",
    "PingResult",
    "QueryRequest",
    "QueryResult",
    "SchemaHit",
    "SchemaSearchRequest",
    "SchemaSearchResult",
    "ToolError",
    "ToolResponse",
    # Services
    "ConfigService",
    "ConnectionOptions",
    "OracleDbService",
]
