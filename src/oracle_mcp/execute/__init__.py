"""Execute package for guarded read-only SQL execution.

Exports the read-only guard and the dependency-injected runners. Tool
registration lives in `oracle_mcp.execute.mcp_tools`.
"""

from __future__ import annotations

from .guard import clamp_row_count, is_read_only, wrap_with_row_limit
from .mapper import ResultMapper
from .runner import run_ping_flow, run_query_flow

__all__ = [
    "ResultMapper",
    "clamp_row_count",
    "is_read_only",
    "run_ping_flow",
    "run_query_flow",
    "wrap_with_row_limit",
]
