"""Named bind-parameter handling for caller SQL."""

from __future__ import annotations

from collections.abc import Mapping

from oracle_mcp.execute.guard import ROW_LIMIT_PARAMETER
from oracle_mcp.models import ScalarValue

BIND_MARKER = ":"


def normalize_parameter_name(name: str) -> str:
    """Drop one leading ``:`` so ``":id"`` and ``"id"`` bind the same placeholder."""
    return name[1:] if name.startswith(BIND_MARKER) else name


def bind_parameters(
    parameters: Mapping[str, ScalarValue] | None,
    row_limit: int,
) -> dict[str, ScalarValue]:
    """Build the driver parameter mapping for a row-limited query.

    Missing values bind as SQL NULL. The row cap is bound last under
    ``mcp_max_rows`` and takes precedence over a caller value of that name.
    """
    bound: dict[str, ScalarValue] = {}
    for name, value in (parameters or {}).items():
        bound[normalize_parameter_name(name)] = value
    bound[ROW_LIMIT_PARAMETER] = row_limit
    return bound
