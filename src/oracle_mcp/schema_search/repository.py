"""Catalog scans for schema keyword search.

Queries ``ALL_TABLES`` and ``ALL_TAB_COLUMNS`` with SQLAlchemy Core so the
dialect renders the row limit (FETCH FIRST / ROWNUM) itself. Keyword and owner
are always bound parameters.
"""

from __future__ import annotations

from fastmcp.utilities.logging import get_logger
import sqlalchemy as sa
from sqlalchemy.engine import Connection

from oracle_mcp.models import SchemaHit
from oracle_mcp.services.cancellation import CancellationHandle

_logger = get_logger(__name__)

ALL_TABLES = sa.table(
    "all_tables",
    sa.column("owner", sa.String),
    sa.column("table_name", sa.String),
)

ALL_TAB_COLUMNS = sa.table(
    "all_tab_columns",
    sa.column("owner", sa.String),
    sa.column("table_name", sa.String),
    sa.column("column_name", sa.String),
    sa.column("data_type", sa.String),
)


def _upper(column: sa.ColumnElement[str]) -> sa.ColumnElement[str]:
    return sa.func.upper(column, type_=sa.String)


class SchemaSearchRepository:
    """Reads table and column hits into a caller-owned list.

    Both scans preserve catalog order and append at most ``max_hits`` entries.
    """

    def read_table_hits(
        self,
        conn: Connection,
        keyword: str,
        owner: str | None,
        max_hits: int,
        hits: list[SchemaHit],
        handle: CancellationHandle | None = None,
    ) -> None:
        tables = ALL_TABLES.c
        stmt = sa.select(tables.owner, tables.table_name).where(
            _upper(tables.table_name).contains(keyword.upper())
        )
        if owner is not None:
            stmt = stmt.where(tables.owner == owner)
        stmt = stmt.limit(max_hits)

        _logger.debug("Table scan: %s", stmt)
        for row in conn.execute(stmt):
            if handle is not None:
                handle.raise_if_cancelled()
            hits.append(SchemaHit(owner=row[0], table_name=row[1], match_type="table"))

    def read_column_hits(
        self,
        conn: Connection,
        keyword: str,
        owner: str | None,
        max_hits: int,
        hits: list[SchemaHit],
        handle: CancellationHandle | None = None,
    ) -> None:
        cols = ALL_TAB_COLUMNS.c
        needle = keyword.upper()
        stmt = sa.select(cols.owner, cols.table_name, cols.column_name, cols.data_type).where(
            sa.or_(
                _upper(cols.column_name).contains(needle),
                _upper(cols.table_name).contains(needle),
            )
        )
        if owner is not None:
            stmt = stmt.where(cols.owner == owner)
        stmt = stmt.limit(max_hits)

        _logger.debug("Column scan: %s", stmt)
        for row in conn.execute(stmt):
            if handle is not None:
                handle.raise_if_cancelled()
            hits.append(
                SchemaHit(
                    owner=row[0],
                    table_name=row[1],
                    match_type="column",
                    column_name=row[2],
                    data_type=row[3],
                )
            )
