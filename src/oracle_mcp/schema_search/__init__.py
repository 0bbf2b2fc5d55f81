"""Schema keyword search over the Oracle data dictionary."""

from __future__ import annotations

from .repository import SchemaSearchRepository
from .runner import run_schema_search_flow

__all__ = [
    "SchemaSearchRepository",
    "run_schema_search_flow",
]
