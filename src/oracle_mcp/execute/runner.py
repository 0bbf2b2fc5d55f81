"""Execution flow for the oracle_query and oracle_ping tools.

This module provides small, dependency-injected runners that:
- Enforce the read-only guard before anything touches the database
- Clamp the row cap and wrap the SQL in a ROWNUM limit bound as a parameter
- Execute through the driver's native named binds on a scoped connection
- Stream rows through the result mapper and report a truncation flag
- Always resolve to a `ToolResponse` envelope, never an exception
"""

from __future__ import annotations

from collections.abc import Callable
import time
from typing import Final

from fastmcp.utilities.logging import get_logger
from sqlalchemy.engine import Connection

from oracle_mcp.exceptions import ConfigurationError, ConnectionOpenError, DriverUnavailableError
from oracle_mcp.execute.binder import bind_parameters
from oracle_mcp.execute.errors import configuration_failure, sanitize_exception_message
from oracle_mcp.execute.guard import clamp_row_count, is_read_only, wrap_with_row_limit
from oracle_mcp.execute.mapper import ResultMapper
from oracle_mcp.models import (
    CaseInsensitiveRow,
    ErrorCode,
    PingResult,
    QueryRequest,
    QueryResult,
    ToolError,
    ToolResponse,
)
from oracle_mcp.services.cancellation import CancellationHandle
from oracle_mcp.services.config_service import ConnectionOptions
from oracle_mcp.services.connection_factory import ConnectionFactory

_logger = get_logger(__name__)

FactoryProvider = Callable[[ConnectionOptions], ConnectionFactory]

READONLY_REQUIRED_MESSAGE: Final[str] = (
    "Only read-only SQL is allowed (SELECT / WITH ... SELECT)."
)
CONNECT_FAILED_MESSAGE: Final[str] = "Failed to connect to Oracle."
DATABASE_INFO_SQL: Final[str] = "select sys_context('userenv','db_name') as db_name from dual"
MAX_SQL_PREVIEW = 100


def sql_preview(sql: str) -> str:
    return sql[:MAX_SQL_PREVIEW] + ("..." if len(sql) > MAX_SQL_PREVIEW else "")


def run_query_flow(
    request: QueryRequest,
    *,
    options: ConnectionOptions,
    factory_provider: FactoryProvider,
    mapper: ResultMapper | None = None,
    handle: CancellationHandle | None = None,
) -> ToolResponse[QueryResult]:
    """Validate, row-limit and execute a caller-provided read-only query.

    ``truncated`` is set when the number of returned rows equals the effective
    cap, so a result set of exactly that size also reads as truncated.
    """
    mapper = mapper or ResultMapper()

    accepted, why_not = is_read_only(request.sql)
    if not accepted:
        _logger.warning("Rejected SQL (%s): %s", why_not, sql_preview(request.sql or ""))
        return ToolResponse[QueryResult].fail(
            ToolError(
                message=READONLY_REQUIRED_MESSAGE,
                detail=why_not,
                code=ErrorCode.NON_READONLY_SQL,
            )
        )

    requested = request.max_rows if request.max_rows is not None else options.default_max_rows
    row_limit = clamp_row_count(requested, options.max_max_rows)
    wrapped_sql = wrap_with_row_limit(request.sql)

    try:
        factory = factory_provider(options)
    except (ConfigurationError, DriverUnavailableError) as exc:
        _logger.warning("Connection factory unavailable: %s", exc)
        return ToolResponse[QueryResult].fail(configuration_failure(exc))

    params = bind_parameters(request.parameters, row_limit)
    _logger.info("run_query_flow: start (row_limit=%d, params=%d)", row_limit, len(params) - 1)

    start = time.perf_counter()
    rows: list[CaseInsensitiveRow] = []
    try:
        with factory.connect(handle) as conn:
            result = conn.execution_options(stream_results=True).exec_driver_sql(
                wrapped_sql, params
            )
            columns = mapper.read_columns(result)
            for raw in result:
                if handle is not None:
                    handle.raise_if_cancelled()
                rows.append(mapper.read_row(raw, columns))
                if len(rows) >= row_limit:
                    break
            result.close()
    except ConnectionOpenError as exc:
        _logger.warning("Connection failed: %s", exc)
        return ToolResponse[QueryResult].fail(
            ToolError(
                message=CONNECT_FAILED_MESSAGE,
                detail=sanitize_exception_message(exc),
                code=ErrorCode.CONNECTION_FAILED,
            )
        )
    except Exception as exc:  # noqa: BLE001 - every failure becomes an envelope
        _logger.warning("Execution error: %s", sanitize_exception_message(exc))
        return ToolResponse[QueryResult].fail(
            ToolError(message=sanitize_exception_message(exc), code=ErrorCode.QUERY_FAILED)
        )

    truncated = len(rows) == row_limit
    _logger.info(
        "Execution finished (elapsed_ms=%.1f, rows_returned=%d, truncated=%s)",
        (time.perf_counter() - start) * 1000.0,
        len(rows),
        truncated,
    )
    return ToolResponse[QueryResult].success(
        QueryResult(columns=columns, rows=rows, truncated=truncated)
    )


def try_get_database_info(conn: Connection) -> str | None:
    """Best-effort database name probe; None when the probe fails."""
    try:
        value = conn.exec_driver_sql(DATABASE_INFO_SQL).scalar()
    except Exception as e:  # noqa: BLE001 - probe is optional
        _logger.debug("Database info probe failed: %s", e)
        return None
    return None if value is None else str(value)


def run_ping_flow(
    *,
    options: ConnectionOptions,
    factory_provider: FactoryProvider,
    handle: CancellationHandle | None = None,
) -> ToolResponse[PingResult]:
    """Open a connection and report the database name when readable."""
    try:
        factory = factory_provider(options)
    except (ConfigurationError, DriverUnavailableError) as exc:
        _logger.warning("Connection factory unavailable: %s", exc)
        return ToolResponse[PingResult].fail(configuration_failure(exc))

    try:
        with factory.connect(handle) as conn:
            database_info = try_get_database_info(conn)
    except Exception as exc:  # noqa: BLE001 - every failure becomes an envelope
        _logger.warning("Ping failed: %s", sanitize_exception_message(exc))
        return ToolResponse[PingResult].fail(
            ToolError(
                message=CONNECT_FAILED_MESSAGE,
                detail=sanitize_exception_message(exc),
                code=ErrorCode.CONNECTION_FAILED,
            )
        )

    return ToolResponse[PingResult].success(PingResult(ok=True, database_info=database_info))
