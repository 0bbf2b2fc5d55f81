"""Two-phase schema keyword search sharing one hit budget."""

from __future__ import annotations

from typing import Final

from fastmcp.utilities.logging import get_logger

from oracle_mcp.exceptions import ConfigurationError, ConnectionOpenError, DriverUnavailableError
from oracle_mcp.execute.errors import configuration_failure, sanitize_exception_message
from oracle_mcp.execute.guard import clamp_row_count
from oracle_mcp.execute.runner import CONNECT_FAILED_MESSAGE, FactoryProvider
from oracle_mcp.models import (
    ErrorCode,
    SchemaHit,
    SchemaSearchRequest,
    SchemaSearchResult,
    ToolError,
    ToolResponse,
)
from oracle_mcp.schema_search.repository import SchemaSearchRepository
from oracle_mcp.services.cancellation import CancellationHandle
from oracle_mcp.services.config_service import ConnectionOptions

_logger = get_logger(__name__)

SEARCH_FAILED_MESSAGE: Final[str] = "Oracle schema search failed."


def normalize_owner(owner: str | None) -> str | None:
    if owner is None or not owner.strip():
        return None
    return owner.strip().upper()


def run_schema_search_flow(
    request: SchemaSearchRequest,
    *,
    options: ConnectionOptions,
    factory_provider: FactoryProvider,
    repository: SchemaSearchRepository | None = None,
    handle: CancellationHandle | None = None,
) -> ToolResponse[SchemaSearchResult]:
    """Search table names, then column names, within one hit budget.

    A blank keyword returns an empty result without touching the database.
    Column hits only fill whatever budget the table hits left.
    """
    keyword = (request.keyword or "").strip().upper()
    if not keyword:
        return ToolResponse[SchemaSearchResult].success(SchemaSearchResult(hits=[]))

    requested = request.max_hits if request.max_hits is not None else options.default_max_hits
    max_hits = clamp_row_count(requested, options.max_max_hits)
    owner = normalize_owner(request.owner)
    repository = repository or SchemaSearchRepository()

    try:
        factory = factory_provider(options)
    except (ConfigurationError, DriverUnavailableError) as exc:
        _logger.warning("Connection factory unavailable: %s", exc)
        return ToolResponse[SchemaSearchResult].fail(configuration_failure(exc))

    _logger.info(
        "run_schema_search_flow: keyword=%s owner=%s max_hits=%d", keyword, owner, max_hits
    )
    hits: list[SchemaHit] = []
    try:
        with factory.connect(handle) as conn:
            repository.read_table_hits(conn, keyword, owner, max_hits, hits, handle)
            if len(hits) < max_hits:
                repository.read_column_hits(
                    conn, keyword, owner, max_hits - len(hits), hits, handle
                )
    except ConnectionOpenError as exc:
        _logger.warning("Connection failed: %s", exc)
        return ToolResponse[SchemaSearchResult].fail(
            ToolError(
                message=CONNECT_FAILED_MESSAGE,
                detail=sanitize_exception_message(exc),
                code=ErrorCode.CONNECTION_FAILED,
            )
        )
    except Exception as exc:  # noqa: BLE001 - every failure becomes an envelope
        _logger.warning("Schema search error: %s", sanitize_exception_message(exc))
        return ToolResponse[SchemaSearchResult].fail(
            ToolError(
                message=SEARCH_FAILED_MESSAGE,
                detail=sanitize_exception_message(exc),
                code=ErrorCode.SCHEMA_SEARCH_FAILED,
            )
        )

    return ToolResponse[SchemaSearchResult].success(SchemaSearchResult(hits=hits))
