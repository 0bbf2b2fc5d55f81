"""Services package for oracle-mcp.

This package contains the configuration, connection and orchestration layer
shared by the tool packages.

Main Components:
- ConfigService: Environment-backed connection settings
- SqlAlchemyConnectionFactory: Scoped connections with command timeouts
- CancellationHandle: Bridges task cancellation to the database driver
- OracleDbService (in `oracle_service`): Async facade returning tool envelopes
"""

from .cancellation import CancellationHandle
from .config_service import ConfigService, ConnectionOptions
from .connection_factory import SqlAlchemyConnectionFactory

__all__ = [
    "CancellationHandle",
    "ConfigService",
    "ConnectionOptions",
    "SqlAlchemyConnectionFactory",
]
