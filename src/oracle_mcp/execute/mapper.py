"""Result mapping from driver rows to transport-safe values.

Column metadata comes from the DBAPI cursor description; values are coerced so
the tool payload serializes to JSON without losing date precision or binary
content.
"""

from __future__ import annotations

import base64
from collections.abc import Sequence
from datetime import date, datetime, time, timedelta
from decimal import Decimal
import numbers
from typing import Any
from uuid import UUID

from fastmcp.utilities.logging import get_logger
from sqlalchemy.engine import CursorResult

from oracle_mcp.models import CaseInsensitiveRow, ColumnInfo

_logger = get_logger(__name__)

_ORACLEDB_TYPE_PREFIX = "DB_TYPE_"


class ResultMapper:
    """Converts cursor metadata and rows into `ColumnInfo` and row mappings."""

    def read_columns(self, result: CursorResult[Any]) -> list[ColumnInfo]:
        cursor = getattr(result, "cursor", None)
        description = getattr(cursor, "description", None)
        return [
            ColumnInfo(name=name, type=self.safe_get_data_type_name(description, i))
            for i, name in enumerate(result.keys())
        ]

    def safe_get_data_type_name(self, description: Any, ordinal: int) -> str | None:
        """Driver type name for one column, or None when it cannot be determined."""
        try:
            type_code = description[ordinal][1]
            if type_code is None:
                return None
            name = getattr(type_code, "name", None)
            if isinstance(name, str):
                return name.removeprefix(_ORACLEDB_TYPE_PREFIX)
            if isinstance(type_code, type):
                return type_code.__name__
            return str(type_code)
        except Exception:  # noqa: BLE001 - a missing type name must not fail the query
            _logger.debug("Could not read type name for column %d", ordinal, exc_info=True)
            return None

    def read_row(self, row: Sequence[Any], columns: Sequence[ColumnInfo]) -> CaseInsensitiveRow:
        return CaseInsensitiveRow(
            (column.name, self.coerce_to_transport_safe(row[i]))
            for i, column in enumerate(columns)
        )

    def coerce_to_transport_safe(self, value: Any) -> Any:
        """Coerce one driver value into a JSON-friendly scalar.

        Order matters: dates are handled before the generic numeric/format
        fallback so they keep full precision.
        """
        if value is None:
            return None
        if isinstance(value, str | bool | int | float | Decimal):
            return value
        if isinstance(value, datetime | date | time):
            return value.isoformat()
        if isinstance(value, bytes | bytearray | memoryview):
            return base64.b64encode(bytes(value)).decode("ascii")
        if isinstance(value, UUID):
            return str(value)
        if _is_lob(value):
            return self.coerce_to_transport_safe(value.read())
        if isinstance(value, numbers.Number | timedelta):
            return format(value)
        return str(value)


def _is_lob(value: Any) -> bool:
    """python-oracledb returns CLOB/BLOB columns as locators with a read() method."""
    return callable(getattr(value, "read", None))
