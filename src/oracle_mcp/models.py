"""Typed Pydantic models for the oracle-mcp tools.

Every tool returns a `ToolResponse` envelope: exactly one of `result` (on
success) or `error` (on failure) is populated, so callers never have to handle
exceptions raised across the MCP boundary.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field, SkipValidation, field_serializer, model_validator

T = TypeVar("T")

ScalarValue = str | int | float | bool | Decimal | None


def _json_number(value: Any) -> Any:
    """Render finite decimals as JSON numbers instead of strings."""
    if isinstance(value, Decimal) and value.is_finite():
        return int(value) if value == value.to_integral_value() else float(value)
    return value


class ErrorCode(str, Enum):
    """Machine-readable failure categories carried by `ToolError.code`."""

    MISSING_CONNECTION_STRING = "missing_connection_string"
    INVALID_CONFIGURATION = "invalid_configuration"
    MISSING_ORACLE_DRIVER = "missing_oracle_driver"
    INVALID_REQUEST = "invalid_request"
    NON_READONLY_SQL = "non_readonly_sql"
    CONNECTION_FAILED = "connection_failed"
    QUERY_FAILED = "query_failed"
    SCHEMA_SEARCH_FAILED = "schema_search_failed"


class CaseInsensitiveRow(dict[str, Any]):
    """Row mapping with case-insensitive key lookup.

    Keys keep the spelling reported by the driver; `row["ename"]` and
    `row["ENAME"]` resolve to the same entry. Assigning a key that differs only
    in case replaces the earlier entry.
    """

    def __init__(self, items: Iterable[tuple[str, Any]] = ()) -> None:
        super().__init__()
        self._index: dict[str, str] = {}
        for key, value in items:
            self[key] = value

    def _resolve(self, key: object) -> object:
        if isinstance(key, str):
            return self._index.get(key.lower(), key)
        return key

    def __setitem__(self, key: str, value: Any) -> None:
        folded = key.lower()
        existing = self._index.get(folded)
        if existing is not None and existing != key:
            super().__delitem__(existing)
        self._index[folded] = key
        super().__setitem__(key, value)

    def __getitem__(self, key: str) -> Any:
        return super().__getitem__(self._resolve(key))

    def __delitem__(self, key: str) -> None:
        resolved = self._resolve(key)
        super().__delitem__(resolved)
        if isinstance(resolved, str):
            self._index.pop(resolved.lower(), None)

    def __contains__(self, key: object) -> bool:
        return super().__contains__(self._resolve(key))

    def get(self, key: str, default: Any = None) -> Any:  # type: ignore[override]
        return super().get(self._resolve(key), default)


class ToolError(BaseModel):
    """Human-readable failure with an optional sanitized detail."""

    message: str = Field(description="Summary of what went wrong")
    detail: str | None = Field(
        default=None, description="Root-cause message from the database or guard, if any"
    )
    code: ErrorCode | None = Field(default=None, description="Failure category")


class ToolResponse(BaseModel, Generic[T]):
    """Success/failure envelope returned by every tool."""

    ok: bool = Field(description="True when `result` is present, False when `error` is")
    result: T | None = Field(default=None, description="Payload on success")
    error: ToolError | None = Field(default=None, description="Failure details")

    @model_validator(mode="after")
    def _exactly_one_branch(self) -> ToolResponse[T]:
        if self.ok and (self.result is None or self.error is not None):
            msg = "successful response must carry a result and no error"
            raise ValueError(msg)
        if not self.ok and (self.error is None or self.result is not None):
            msg = "failed response must carry an error and no result"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, result: T) -> ToolResponse[T]:
        return cls(ok=True, result=result)

    @classmethod
    def fail(cls, error: ToolError) -> ToolResponse[T]:
        return cls(ok=False, error=error)


class ColumnInfo(BaseModel):
    """Result-set column name and driver type name."""

    name: str = Field(description="Column name as reported by the driver")
    type: str | None = Field(
        default=None, description="Driver type name (e.g. NUMBER, VARCHAR); null if unknown"
    )


class QueryRequest(BaseModel):
    """Caller-supplied read-only query."""

    sql: str = Field(description="Read-only SQL (SELECT / WITH ... SELECT) without ';'")
    parameters: dict[str, ScalarValue] | None = Field(
        default=None, description="Named bind parameters, e.g. {'id': 7} for :id"
    )
    max_rows: int | None = Field(default=None, description="Requested row cap")


class QueryResult(BaseModel):
    """Columns, rows and a truncation flag for an executed query."""

    columns: list[ColumnInfo] = Field(default_factory=list)
    # Rows are built by the result mapper; skipping validation keeps the
    # case-insensitive row objects intact.
    rows: list[SkipValidation[dict[str, Any]]] = Field(default_factory=list)
    truncated: bool = Field(
        default=False,
        description="True when the number of returned rows equals the effective row cap",
    )

    @field_serializer("rows", when_used="json")
    def _rows_as_json(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [{key: _json_number(value) for key, value in row.items()} for row in rows]


class SchemaSearchRequest(BaseModel):
    """Keyword search over table and column names."""

    keyword: str = Field(description="Substring to look for in table/column names")
    owner: str | None = Field(default=None, description="Optional schema/owner filter")
    max_hits: int | None = Field(default=None, description="Requested hit budget")


class SchemaHit(BaseModel):
    """A table or column whose name matched the keyword."""

    owner: str
    table_name: str
    match_type: Literal["table", "column"]
    column_name: str | None = None
    data_type: str | None = None


class SchemaSearchResult(BaseModel):
    """Table hits followed by column hits, in catalog order."""

    hits: list[SchemaHit] = Field(default_factory=list)


class PingResult(BaseModel):
    """Connectivity check outcome."""

    ok: bool = Field(default=True, description="True when a connection was opened")
    database_info: str | None = Field(
        default=None, description="Database name, or null when it could not be read"
    )
