from __future__ import annotations

import pytest

from oracle_mcp.execute.guard import (
    ROW_LIMIT_PARAMETER,
    clamp_row_count,
    is_read_only,
    remove_single_quoted_literals,
    strip_leading_comments,
    wrap_with_row_limit,
)


@pytest.mark.parametrize(
    "sql",
    [
        "select * from dual",
        "SELECT empno, ename FROM emp WHERE deptno = :deptno",
        "  \n\tselect 1 from dual",
        "with t as (select 1 as x from dual) select x from t",
        "-- list employees\nselect * from emp",
        "/* header */ /* second */ -- line\n  select * from emp",
        "select 'update' from dual",
        "select 'it''s a drop' as msg from dual",
        "select created_at, updated_by from audit_log",
        "select * from emp for read only",
        "select(1) from dual",
        "select * from emp where delete_flag = 0",
    ],
)
def test_accepts_read_only_sql(sql: str) -> None:
    ok, reason = is_read_only(sql)
    assert ok is True
    assert reason is None


@pytest.mark.parametrize(
    "sql",
    [
        "INSERT INTO emp VALUES (1)",
        "update emp set sal = 0",
        "Delete from emp",
        "DROP TABLE emp",
        "alter table emp add (x number)",
        "truncate table emp",
        "create table x (a number)",
        "grant select on emp to public",
        "merge into emp e using dual on (1=1) when matched then update set sal = 1",
        "begin null; end",
        "declare x number",
        "exec dbms_stats.gather_schema_stats('HR')",
        "call my_proc()",
        "  -- sneaky\n  /* comment */ DELETE FROM emp",
    ],
)
def test_rejects_mutating_statements_regardless_of_prefix_noise(sql: str) -> None:
    ok, reason = is_read_only(sql)
    assert ok is False
    assert reason is not None


def test_rejects_non_select_prefix_with_prefix_reason() -> None:
    ok, reason = is_read_only("update foo set x=1")
    assert ok is False
    assert reason == "SQL must start with SELECT or WITH."


def test_prefix_must_be_a_whole_token() -> None:
    ok, reason = is_read_only("selection from dual")
    assert ok is False
    assert reason == "SQL must start with SELECT or WITH."


@pytest.mark.parametrize(
    "sql",
    [
        "with x as (delete from emp returning *) select * from x",
        "select * from emp where id in (select id from t) union select commit from dual",
        "select * from emp -- drop table emp",
    ],
)
def test_rejects_dangerous_keywords_after_the_prefix(sql: str) -> None:
    ok, reason = is_read_only(sql)
    assert ok is False
    assert reason == "Detected potentially non-read-only keyword."


def test_rejects_semicolon_anywhere() -> None:
    for sql in ("select * from dual;", "select ';' from dual", "select 1 from dual; drop table x"):
        ok, reason = is_read_only(sql)
        assert ok is False
        assert reason == "Multiple statements are not allowed."


@pytest.mark.parametrize("sql", ["", "   ", "\n\t"])
def test_rejects_empty_sql(sql: str) -> None:
    assert is_read_only(sql) == (False, "SQL is empty.")


@pytest.mark.parametrize("sql", ["-- only a comment", "/* never closed select 1", "/* a */ -- b"])
def test_rejects_comment_only_sql(sql: str) -> None:
    assert is_read_only(sql) == (False, "SQL is empty after trimming comments.")


def test_rejects_for_update() -> None:
    ok, reason = is_read_only("select * from emp where empno = 1 FOR\n   UPDATE")
    assert ok is False
    # "update" is itself a dangerous keyword, so the keyword scan fires first
    assert reason == "Detected potentially non-read-only keyword."


def test_unterminated_literal_is_never_safe() -> None:
    ok, reason = is_read_only("select 'oops from dual")
    assert ok is False
    assert reason == "Unterminated string literal."


def test_strip_leading_comments_keeps_later_comments() -> None:
    sql = "-- a\n/* b */ select 1 /* c */ from dual -- d"
    assert strip_leading_comments(sql) == "select 1 /* c */ from dual -- d"


def test_remove_single_quoted_literals_preserves_layout() -> None:
    sql = "select 'a''b', x from t where y = 'drop'"
    sanitized = remove_single_quoted_literals(sql)
    assert len(sanitized) == len(sql)
    assert "'" not in sanitized
    assert "drop" not in sanitized
    assert sanitized.startswith("select ")
    assert ", x from t where y = " in sanitized


def test_remove_single_quoted_literals_unbalanced_returns_empty() -> None:
    assert remove_single_quoted_literals("select 'abc") == ""
    assert remove_single_quoted_literals("select 'a''") == ""


def test_wrap_with_row_limit_uses_bind_parameter() -> None:
    wrapped = wrap_with_row_limit("select * from emp")
    assert wrapped == f"select * from (select * from emp) where rownum <= :{ROW_LIMIT_PARAMETER}"


def test_clamp_row_count() -> None:
    assert clamp_row_count(0, 100) == 1
    assert clamp_row_count(-5, 100) == 1
    assert clamp_row_count(5000, 100) == 100
    assert clamp_row_count(50, 100) == 50
    assert clamp_row_count(100, 100) == 100
