"""Connection factory for oracle-mcp.

The driver is selected once, when the factory is built from
`ConnectionOptions`: SQLAlchemy resolves the dialect and imports the DBAPI
module eagerly in `create_engine`, so a missing driver surfaces here as a
`DriverUnavailableError` instead of at first use.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol

from fastmcp.utilities.logging import get_logger
import sqlalchemy as sa
from sqlalchemy.engine import Connection
from sqlalchemy.exc import ArgumentError, NoSuchModuleError, SQLAlchemyError
from sqlalchemy.pool import NullPool

from oracle_mcp.exceptions import (
    ConfigurationError,
    ConnectionOpenError,
    DriverUnavailableError,
)
from oracle_mcp.services.cancellation import CancellationHandle
from oracle_mcp.services.config_service import ConnectionOptions

_logger = get_logger(__name__)

ORACLE_DRIVER_URL = "oracle+oracledb://"

# ODP.NET style keys mapped to python-oracledb connect() arguments
_KEYVALUE_ALIASES: dict[str, str] = {
    "user id": "user",
    "userid": "user",
    "uid": "user",
    "user": "user",
    "password": "password",
    "pwd": "password",
    "data source": "dsn",
    "datasource": "dsn",
    "dsn": "dsn",
}


def parse_connection_string(connection_string: str) -> tuple[str, dict[str, Any]]:
    """Translate a configured connection string into an engine URL and connect args.

    Accepts a SQLAlchemy URL (``oracle+oracledb://user:pw@host:1521/?service_name=X``)
    as-is, or an ODP.NET style ``User Id=..;Password=..;Data Source=..`` string,
    which becomes python-oracledb ``user``/``password``/``dsn`` arguments.

    Raises:
        ConfigurationError: If a key/value string is malformed or lacks a data source
    """
    value = connection_string.strip()
    if "://" in value:
        return value, {}

    connect_args: dict[str, Any] = {}
    for part in value.split(";"):
        if not part.strip():
            continue
        key, sep, item = part.partition("=")
        if not sep:
            msg = f"Malformed connection string segment: {key.strip()!r}"
            raise ConfigurationError(msg)
        alias = _KEYVALUE_ALIASES.get(key.strip().lower())
        if alias is None:
            _logger.debug("Ignoring unsupported connection string key %r", key.strip())
            continue
        connect_args[alias] = item.strip()

    if not connect_args.get("dsn"):
        msg = "Connection string has no Data Source"
        raise ConfigurationError(msg)
    return ORACLE_DRIVER_URL, connect_args


class ConnectionFactory(Protocol):
    """Opens scoped database connections."""

    @property
    def dialect_name(self) -> str: ...

    def connect(self, handle: CancellationHandle | None = None) -> Any:
        """Return a context manager yielding an open `Connection`."""
        ...


class SqlAlchemyConnectionFactory:
    """Connection factory backed by a SQLAlchemy engine."""

    def __init__(self, engine: sa.Engine, *, command_timeout_seconds: int | None = None) -> None:
        self.engine = engine
        self.command_timeout_seconds = command_timeout_seconds

    @classmethod
    def from_options(cls, options: ConnectionOptions) -> SqlAlchemyConnectionFactory:
        """Create a factory for the configured database.

        Connections are not pooled: each `connect` opens a physical connection
        and closes it on exit.

        Raises:
            ConfigurationError: If the connection string cannot be parsed
            DriverUnavailableError: If the dialect or its DBAPI module is missing
        """
        url, connect_args = parse_connection_string(options.connection_string)
        create_kwargs: dict[str, object] = {"poolclass": NullPool}
        if connect_args:
            create_kwargs["connect_args"] = connect_args
        try:
            engine = sa.create_engine(url, **create_kwargs)
        except NoSuchModuleError as exc:
            raise DriverUnavailableError(str(exc)) from exc
        except ImportError as exc:
            raise DriverUnavailableError(str(exc)) from exc
        except ArgumentError as exc:
            raise ConfigurationError(str(exc)) from exc
        return cls(engine, command_timeout_seconds=options.command_timeout_seconds)

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @contextmanager
    def connect(self, handle: CancellationHandle | None = None) -> Iterator[Connection]:
        """Open a connection, apply the command timeout and release it on exit.

        Raises:
            ConnectionOpenError: If the connection cannot be opened
        """
        if handle is not None:
            handle.raise_if_cancelled()
        try:
            conn = self.engine.connect()
        except (SQLAlchemyError, OSError) as exc:
            raise ConnectionOpenError(str(exc)) from exc

        with conn:
            if handle is not None:
                handle.attach(conn.connection.driver_connection)
            try:
                if handle is not None:
                    handle.raise_if_cancelled()
                self._apply_command_timeout(conn)
                yield conn
            finally:
                if handle is not None:
                    handle.detach()

    # ---- internals ---------------------------------------------------------
    def _apply_command_timeout(self, conn: Connection) -> None:
        """Apply the per-call timeout for supported dialects; no-op elsewhere."""
        if not self.command_timeout_seconds:
            return
        ms = max(1, int(self.command_timeout_seconds * 1000))
        try:
            if self.dialect_name == "oracle":
                # python-oracledb round-trip timeout, in milliseconds
                conn.connection.driver_connection.call_timeout = ms
            elif self.dialect_name == "postgresql":
                conn.exec_driver_sql(f"SET statement_timeout = {ms}")
            else:
                _logger.debug("No command timeout support for dialect %s", self.dialect_name)
        except Exception as e:  # noqa: BLE001 - best-effort guard
            _logger.debug("Could not apply command timeout: %s", e)
