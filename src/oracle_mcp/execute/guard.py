"""Lexical read-only guard for caller-supplied Oracle SQL.

The guard does not parse SQL. It classifies a statement with a fixed sequence
of text checks, and the order of those checks is part of its guarantee:
separators first, then leading comments, then the statement prefix, then
keyword scans over a copy with string-literal contents blanked out. It may
reject safe statements (for example a column named ``update``) but must never
accept a mutating or multi-statement one.
"""

from __future__ import annotations

import re
from typing import Final

ROW_LIMIT_PARAMETER: Final[str] = "mcp_max_rows"

_READONLY_PREFIX_RE: Final = re.compile(r"(select|with)\b", re.IGNORECASE)

_DANGEROUS_SQL_RE: Final = re.compile(
    r"\b(insert|update|delete|merge|drop|alter|truncate|create|grant|revoke"
    r"|begin|declare|commit|rollback|execute|exec|call)\b",
    re.IGNORECASE,
)

_FOR_UPDATE_RE: Final = re.compile(r"\bfor\s+update\b", re.IGNORECASE)


def is_read_only(sql: str | None) -> tuple[bool, str | None]:
    """Classify SQL as read-only.

    Returns:
        ``(True, None)`` when the statement is accepted, otherwise
        ``(False, reason)`` with a short rejection reason.
    """
    if sql is None or not sql.strip():
        return False, "SQL is empty."

    if ";" in sql:
        return False, "Multiple statements are not allowed."

    leading = strip_leading_comments(sql)
    if not leading:
        return False, "SQL is empty after trimming comments."

    if not _READONLY_PREFIX_RE.match(leading):
        return False, "SQL must start with SELECT or WITH."

    sanitized = remove_single_quoted_literals(leading)
    if not sanitized:
        return False, "Unterminated string literal."

    if _DANGEROUS_SQL_RE.search(sanitized):
        return False, "Detected potentially non-read-only keyword."

    if _FOR_UPDATE_RE.search(sanitized):
        return False, "SELECT ... FOR UPDATE is not allowed."

    return True, None


def strip_leading_comments(sql: str) -> str:
    """Remove leading ``--`` and ``/* */`` comments and surrounding whitespace.

    Only comments before the first token are removed. An unterminated block
    comment, or a line comment without a newline, consumes the rest of the text.
    """
    text = sql.lstrip()
    while True:
        if text.startswith("--"):
            newline = text.find("\n")
            text = text[newline + 1 :].lstrip() if newline >= 0 else ""
            continue
        if text.startswith("/*"):
            end = text.find("*/", 2)
            text = text[end + 2 :].lstrip() if end >= 0 else ""
            continue
        return text


def remove_single_quoted_literals(sql: str) -> str:
    """Blank out single-quoted literals, quotes included.

    ``''`` inside a literal is an escaped quote. Length and positions of the
    remaining text are preserved. Returns an empty string when a literal is
    never closed.
    """
    chars = list(sql)
    in_string = False
    i = 0
    n = len(chars)
    while i < n:
        if chars[i] != "'":
            if in_string:
                chars[i] = " "
            i += 1
            continue

        if not in_string:
            in_string = True
            chars[i] = " "
            i += 1
            continue

        if i + 1 < n and chars[i + 1] == "'":
            chars[i] = " "
            chars[i + 1] = " "
            i += 2
            continue

        in_string = False
        chars[i] = " "
        i += 1

    if in_string:
        return ""
    return "".join(chars)


def wrap_with_row_limit(sql: str) -> str:
    """Wrap the original SQL so Oracle returns at most ``:mcp_max_rows`` rows."""
    return f"select * from ({sql}) where rownum <= :{ROW_LIMIT_PARAMETER}"


def clamp_row_count(requested: int, maximum: int) -> int:
    """Clamp a requested row or hit count into ``[1, maximum]``."""
    if requested <= 0:
        return 1
    return maximum if requested > maximum else requested
