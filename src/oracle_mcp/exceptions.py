"""Exception hierarchy for oracle-mcp.

These exceptions never cross the tool boundary: runners and the service facade
translate them into `ToolError` envelopes.
"""

from __future__ import annotations


class OracleMcpError(Exception):
    """Base exception for oracle-mcp operations."""


class ConfigurationError(OracleMcpError):
    """Raised when connection settings are missing or malformed.

    Attributes:
        missing: True when the connection string is absent rather than invalid.
        setting: Environment variable the bad value came from.
    """

    def __init__(
        self,
        message: str,
        *,
        missing: bool = False,
        setting: str = "ORACLE_CONNECTION_STRING",
    ) -> None:
        super().__init__(message)
        self.missing = missing
        self.setting = setting


class DriverUnavailableError(OracleMcpError):
    """Raised when the database driver cannot be imported or constructed."""


class QueryCancelledError(OracleMcpError):
    """Raised inside a worker when its cancellation handle has fired."""


class ConnectionOpenError(OracleMcpError):
    """Raised when a database connection cannot be opened.

    The driver exception is chained as ``__cause__``.
    """
