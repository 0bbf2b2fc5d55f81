"""Configuration service for oracle-mcp.

Reads connection settings from the environment on every call, so a tool
invocation always sees the current process configuration. Integer settings
fall back to their default when unset, unparsable or non-positive.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from oracle_mcp.exceptions import ConfigurationError

CONNECTION_STRING_ENV = "ORACLE_CONNECTION_STRING"

DEFAULT_COMMAND_TIMEOUT_SECONDS = 30
DEFAULT_MAX_ROWS = 200
DEFAULT_MAX_MAX_ROWS = 2000
DEFAULT_MAX_HITS = 50
DEFAULT_MAX_MAX_HITS = 200


@dataclass(frozen=True, slots=True)
class ConnectionOptions:
    """Immutable per-request connection settings."""

    connection_string: str
    command_timeout_seconds: int = DEFAULT_COMMAND_TIMEOUT_SECONDS
    default_max_rows: int = DEFAULT_MAX_ROWS
    max_max_rows: int = DEFAULT_MAX_MAX_ROWS
    default_max_hits: int = DEFAULT_MAX_HITS
    max_max_hits: int = DEFAULT_MAX_MAX_HITS

    def __post_init__(self) -> None:
        if self.max_max_rows < 1:
            msg = "row ceiling must be at least 1"
            raise ConfigurationError(msg, setting="ORACLE_MAX_MAX_ROWS")
        if self.max_max_hits < 1:
            msg = "hit ceiling must be at least 1"
            raise ConfigurationError(msg, setting="ORACLE_SCHEMA_MAX_MAX_HITS")


class ConfigService:
    """Service for reading oracle-mcp settings from the environment."""

    @staticmethod
    def get_connection_string() -> str:
        """Get the connection string from the environment.

        Raises:
            ConfigurationError: If ORACLE_CONNECTION_STRING is unset or blank
        """
        value = os.getenv(CONNECTION_STRING_ENV, "").strip()
        if not value:
            error_msg = f"Missing {CONNECTION_STRING_ENV} environment variable."
            raise ConfigurationError(error_msg, missing=True)
        return value

    @staticmethod
    def read_positive_int(name: str, default: int) -> int:
        """Parse a positive integer setting, ignoring invalid overrides."""
        val = os.getenv(name)
        if val is None:
            return default
        try:
            parsed = int(val.strip())
        except ValueError:
            return default
        return parsed if parsed > 0 else default

    @staticmethod
    def get_connection_options() -> ConnectionOptions:
        """Build `ConnectionOptions` from the current environment.

        Raises:
            ConfigurationError: If the connection string is missing
        """
        read = ConfigService.read_positive_int
        return ConnectionOptions(
            connection_string=ConfigService.get_connection_string(),
            command_timeout_seconds=read(
                "ORACLE_COMMAND_TIMEOUT_SECONDS", DEFAULT_COMMAND_TIMEOUT_SECONDS
            ),
            default_max_rows=read("ORACLE_DEFAULT_MAX_ROWS", DEFAULT_MAX_ROWS),
            max_max_rows=read("ORACLE_MAX_MAX_ROWS", DEFAULT_MAX_MAX_ROWS),
            default_max_hits=read("ORACLE_SCHEMA_DEFAULT_MAX_HITS", DEFAULT_MAX_HITS),
            max_max_hits=read("ORACLE_SCHEMA_MAX_MAX_HITS", DEFAULT_MAX_MAX_HITS),
        )

    @staticmethod
    def get_http_url() -> str | None:
        """URL to serve streamable HTTP on, or None for stdio transport."""
        value = os.getenv("MCP_HTTP_URL", "").strip()
        return value or None
