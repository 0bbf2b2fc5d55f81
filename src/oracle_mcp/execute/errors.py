"""Reduce exceptions to a caller-safe root-cause message."""

from __future__ import annotations

from sqlalchemy.exc import DBAPIError

from oracle_mcp.exceptions import ConfigurationError, DriverUnavailableError, OracleMcpError
from oracle_mcp.models import ErrorCode, ToolError


def root_cause(exc: BaseException) -> BaseException:
    """Return the innermost exception behind ``exc``.

    Follows explicit ``__cause__`` links and SQLAlchemy's wrapped DBAPI
    exception (``DBAPIError.orig``). Cycles terminate the walk.
    """
    seen: set[int] = set()
    current = exc
    while id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, DBAPIError) and isinstance(current.orig, BaseException):
            current = current.orig
            continue
        if current.__cause__ is not None:
            current = current.__cause__
            continue
        break
    return current


def sanitize_exception_message(exc: BaseException) -> str:
    """Message of the root cause only, without the SQL, chain or traceback."""
    base = root_cause(exc)
    message = str(base).strip()
    return message or type(base).__name__


def configuration_failure(exc: OracleMcpError) -> ToolError:
    """Map a factory construction failure to its `ToolError`."""
    if isinstance(exc, DriverUnavailableError):
        return ToolError(
            message="Oracle database driver not found. Install the 'oracledb' package.",
            detail=sanitize_exception_message(exc),
            code=ErrorCode.MISSING_ORACLE_DRIVER,
        )
    if isinstance(exc, ConfigurationError) and exc.missing:
        return ToolError(message=str(exc), code=ErrorCode.MISSING_CONNECTION_STRING)
    setting = exc.setting if isinstance(exc, ConfigurationError) else "ORACLE_CONNECTION_STRING"
    return ToolError(
        message=f"Invalid {setting}.",
        detail=sanitize_exception_message(exc),
        code=ErrorCode.INVALID_CONFIGURATION,
    )
