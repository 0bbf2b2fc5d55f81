from __future__ import annotations

import sqlalchemy as sa

from oracle_mcp.models import ErrorCode, SchemaSearchRequest
from oracle_mcp.schema_search.runner import normalize_owner, run_schema_search_flow
from oracle_mcp.services.config_service import ConnectionOptions
from oracle_mcp.services.connection_factory import SqlAlchemyConnectionFactory


def _provider(factory: SqlAlchemyConnectionFactory):
    return lambda _options: factory


def _summary(hits) -> list[tuple[str, str, str, str | None]]:
    return [(h.match_type, h.owner, h.table_name, h.column_name) for h in hits]


def test_table_hits_precede_column_hits(
    factory: SqlAlchemyConnectionFactory, options: ConnectionOptions
) -> None:
    res = run_schema_search_flow(
        SchemaSearchRequest(keyword="EMP", owner="HR", max_hits=10),
        options=options,
        factory_provider=_provider(factory),
    )

    assert res.ok is True
    assert res.result is not None
    assert _summary(res.result.hits) == [
        ("table", "HR", "EMPLOYEES", None),
        ("column", "HR", "DEPARTMENTS", "MANAGER_EMPNO"),
        ("column", "HR", "EMPLOYEES", "EMPLOYEE_ID"),
        ("column", "HR", "TEMP_NOTES", "NOTE"),
    ]
    assert res.result.hits[1].data_type == "NUMBER"
    assert res.result.hits[3].data_type is None


def test_keyword_and_owner_are_normalized(
    factory: SqlAlchemyConnectionFactory, options: ConnectionOptions
) -> None:
    res = run_schema_search_flow(
        SchemaSearchRequest(keyword="  emp ", owner=" hr ", max_hits=10),
        options=options,
        factory_provider=_provider(factory),
    )

    assert res.result is not None
    assert len(res.result.hits) == 4
    assert {h.owner for h in res.result.hits} == {"HR"}


def test_column_scan_only_fills_remaining_budget(
    factory: SqlAlchemyConnectionFactory, options: ConnectionOptions
) -> None:
    res = run_schema_search_flow(
        SchemaSearchRequest(keyword="EMP", owner="HR", max_hits=2),
        options=options,
        factory_provider=_provider(factory),
    )

    assert res.result is not None
    assert _summary(res.result.hits) == [
        ("table", "HR", "EMPLOYEES", None),
        ("column", "HR", "DEPARTMENTS", "MANAGER_EMPNO"),
    ]


def test_exhausted_budget_skips_column_scan(
    factory: SqlAlchemyConnectionFactory, options: ConnectionOptions
) -> None:
    res = run_schema_search_flow(
        SchemaSearchRequest(keyword="EMP", max_hits=2),
        options=options,
        factory_provider=_provider(factory),
    )

    assert res.result is not None
    assert _summary(res.result.hits) == [
        ("table", "HR", "EMPLOYEES", None),
        ("table", "SCOTT", "EMP", None),
    ]


def test_without_owner_all_schemas_are_searched(
    factory: SqlAlchemyConnectionFactory, options: ConnectionOptions
) -> None:
    res = run_schema_search_flow(
        SchemaSearchRequest(keyword="emp"),
        options=options,
        factory_provider=_provider(factory),
    )

    assert res.result is not None
    assert [h.match_type for h in res.result.hits] == ["table"] * 2 + ["column"] * 4
    assert ("column", "SCOTT", "DEPT", "EMPCOUNT") in _summary(res.result.hits)


def test_max_hits_is_clamped(factory: SqlAlchemyConnectionFactory) -> None:
    opts = ConnectionOptions(connection_string="sqlite://", default_max_hits=50, max_max_hits=3)

    over = run_schema_search_flow(
        SchemaSearchRequest(keyword="EMP", max_hits=1000),
        options=opts,
        factory_provider=_provider(factory),
    )
    assert over.result is not None
    assert len(over.result.hits) == 3

    under = run_schema_search_flow(
        SchemaSearchRequest(keyword="EMP", max_hits=0),
        options=opts,
        factory_provider=_provider(factory),
    )
    assert under.result is not None
    assert len(under.result.hits) == 1


def test_blank_keyword_is_an_empty_success(options: ConnectionOptions) -> None:
    def _boom(_options: ConnectionOptions) -> SqlAlchemyConnectionFactory:
        raise AssertionError("no connection is needed for a blank keyword")

    for keyword in ("", "   "):
        res = run_schema_search_flow(
            SchemaSearchRequest(keyword=keyword),
            options=options,
            factory_provider=_boom,
        )
        assert res.ok is True
        assert res.result is not None
        assert res.result.hits == []


def test_no_matches_returns_empty_hits(
    factory: SqlAlchemyConnectionFactory, options: ConnectionOptions
) -> None:
    res = run_schema_search_flow(
        SchemaSearchRequest(keyword="INVOICE"),
        options=options,
        factory_provider=_provider(factory),
    )
    assert res.result is not None
    assert res.result.hits == []


def test_catalog_failure_is_reported(options: ConnectionOptions) -> None:
    empty = SqlAlchemyConnectionFactory(sa.create_engine("sqlite+pysqlite://"))

    res = run_schema_search_flow(
        SchemaSearchRequest(keyword="EMP"),
        options=options,
        factory_provider=_provider(empty),
    )

    assert res.ok is False
    assert res.error is not None
    assert res.error.code is ErrorCode.SCHEMA_SEARCH_FAILED
    assert res.error.message == "Oracle schema search failed."
    assert res.error.detail == "no such table: all_tables"


def test_normalize_owner() -> None:
    assert normalize_owner(None) is None
    assert normalize_owner("  ") is None
    assert normalize_owner(" hr ") == "HR"
