"""Async facade over the oracle-mcp runners.

Each call loads fresh `ConnectionOptions`, then runs the blocking runner in a
worker thread with a cancellation handle. Configuration failures are returned
as envelopes, and so are arguments that fail model validation. Task
cancellation propagates to the caller after the driver has been asked to abort.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from fastmcp.utilities.logging import get_logger
from pydantic import ValidationError

from oracle_mcp.exceptions import ConfigurationError
from oracle_mcp.execute.errors import configuration_failure
from oracle_mcp.execute.mapper import ResultMapper
from oracle_mcp.execute.runner import FactoryProvider, run_ping_flow, run_query_flow
from oracle_mcp.models import (
    ErrorCode,
    PingResult,
    QueryRequest,
    QueryResult,
    ScalarValue,
    SchemaSearchRequest,
    SchemaSearchResult,
    ToolError,
    ToolResponse,
)
from oracle_mcp.schema_search.repository import SchemaSearchRepository
from oracle_mcp.schema_search.runner import run_schema_search_flow
from oracle_mcp.services.cancellation import run_cancellable
from oracle_mcp.services.config_service import ConfigService, ConnectionOptions
from oracle_mcp.services.connection_factory import SqlAlchemyConnectionFactory

_logger = get_logger(__name__)

OptionsProvider = Callable[[], ConnectionOptions]

INVALID_REQUEST_MESSAGE = "Invalid tool arguments."


def invalid_request(exc: ValidationError) -> ToolError:
    """Summarize argument validation errors without echoing the input values."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return ToolError(
        message=INVALID_REQUEST_MESSAGE, detail=problems, code=ErrorCode.INVALID_REQUEST
    )


class OracleDbService:
    """Ping, query and schema search returning `ToolResponse` envelopes."""

    def __init__(
        self,
        *,
        options_provider: OptionsProvider | None = None,
        factory_provider: FactoryProvider | None = None,
        mapper: ResultMapper | None = None,
        repository: SchemaSearchRepository | None = None,
    ) -> None:
        self._options_provider = options_provider or ConfigService.get_connection_options
        self._factory_provider = factory_provider or SqlAlchemyConnectionFactory.from_options
        self._mapper = mapper or ResultMapper()
        self._repository = repository or SchemaSearchRepository()

    async def ping(self) -> ToolResponse[PingResult]:
        try:
            options = self._options_provider()
        except ConfigurationError as exc:
            _logger.warning("Configuration error: %s", exc)
            return ToolResponse[PingResult].fail(configuration_failure(exc))

        return await run_cancellable(
            lambda handle: run_ping_flow(
                options=options,
                factory_provider=self._factory_provider,
                handle=handle,
            )
        )

    async def query(
        self,
        sql: str,
        parameters: Mapping[str, ScalarValue] | None = None,
        max_rows: int | None = None,
    ) -> ToolResponse[QueryResult]:
        try:
            options = self._options_provider()
        except ConfigurationError as exc:
            _logger.warning("Configuration error: %s", exc)
            return ToolResponse[QueryResult].fail(configuration_failure(exc))

        try:
            request = QueryRequest(
                sql=sql,
                parameters=parameters,
                max_rows=max_rows,
            )
        except ValidationError as exc:
            _logger.warning("oracle_query rejected arguments: %d error(s)", exc.error_count())
            return ToolResponse[QueryResult].fail(invalid_request(exc))

        return await run_cancellable(
            lambda handle: run_query_flow(
                request,
                options=options,
                factory_provider=self._factory_provider,
                mapper=self._mapper,
                handle=handle,
            )
        )

    async def search_schema(
        self,
        keyword: str,
        owner: str | None = None,
        max_hits: int | None = None,
    ) -> ToolResponse[SchemaSearchResult]:
        try:
            options = self._options_provider()
        except ConfigurationError as exc:
            _logger.warning("Configuration error: %s", exc)
            return ToolResponse[SchemaSearchResult].fail(configuration_failure(exc))

        try:
            request = SchemaSearchRequest(keyword=keyword, owner=owner, max_hits=max_hits)
        except ValidationError as exc:
            _logger.warning(
                "oracle_search_schema rejected arguments: %d error(s)", exc.error_count()
            )
            return ToolResponse[SchemaSearchResult].fail(invalid_request(exc))

        return await run_cancellable(
            lambda handle: run_schema_search_flow(
                request,
                options=options,
                factory_provider=self._factory_provider,
                repository=self._repository,
                handle=handle,
            )
        )
