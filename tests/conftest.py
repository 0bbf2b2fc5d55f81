"""Shared fixtures: an in-memory SQLite database shaped like the Oracle objects
the tools touch.

SQLite has no ROWNUM pseudo-column, so fixture tables carry an explicit
``rownum`` column holding each row's position; the row-limit wrapper then
filters on it exactly as Oracle would. ``all_tables`` and ``all_tab_columns``
emulate the data dictionary views used by schema search.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import sqlalchemy as sa
from sqlalchemy import text
from sqlalchemy.pool import StaticPool

from oracle_mcp.services.config_service import ConnectionOptions
from oracle_mcp.services.connection_factory import SqlAlchemyConnectionFactory


def _mk_engine() -> sa.Engine:
    return sa.create_engine(
        "sqlite+pysqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


def _setup_sqlite(engine: sa.Engine) -> None:
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE dual(rownum INTEGER, dummy TEXT)"))
        conn.execute(text("INSERT INTO dual VALUES (1, 'X')"))

        conn.execute(
            text(
                "CREATE TABLE emp(rownum INTEGER, empno INTEGER, ename TEXT, "
                "sal NUMERIC, photo BLOB)"
            )
        )
        conn.execute(
            text(
                "INSERT INTO emp VALUES "
                "(1, 7839, 'KING', 5000, x'cafe'),"
                "(2, 7698, 'BLAKE', 2850, NULL),"
                "(3, 7782, 'CLARK', 2450, NULL),"
                "(4, 7566, 'JONES', 2975, NULL),"
                "(5, 7788, 'SCOTT', 3000, NULL)"
            )
        )

        conn.execute(text("CREATE TABLE all_tables(owner TEXT, table_name TEXT)"))
        conn.execute(
            text(
                "INSERT INTO all_tables VALUES "
                "('HR', 'EMPLOYEES'),"
                "('HR', 'DEPARTMENTS'),"
                "('SCOTT', 'EMP'),"
                "('HR', 'JOB_HISTORY')"
            )
        )
        conn.execute(
            text(
                "CREATE TABLE all_tab_columns("
                "owner TEXT, table_name TEXT, column_name TEXT, data_type TEXT)"
            )
        )
        conn.execute(
            text(
                "INSERT INTO all_tab_columns VALUES "
                "('HR', 'DEPARTMENTS', 'MANAGER_EMPNO', 'NUMBER'),"
                "('HR', 'JOBS', 'JOB_ID', 'VARCHAR2'),"
                "('SCOTT', 'DEPT', 'EMPCOUNT', 'NUMBER'),"
                "('HR', 'EMPLOYEES', 'EMPLOYEE_ID', 'NUMBER'),"
                "('HR', 'TEMP_NOTES', 'NOTE', NULL)"
            )
        )


@pytest.fixture
def engine() -> Iterator[sa.Engine]:
    eng = _mk_engine()
    _setup_sqlite(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def factory(engine: sa.Engine) -> SqlAlchemyConnectionFactory:
    return SqlAlchemyConnectionFactory(engine)


@pytest.fixture
def options() -> ConnectionOptions:
    return ConnectionOptions(
        connection_string="sqlite+pysqlite://",
        default_max_rows=200,
        max_max_rows=2000,
    )
