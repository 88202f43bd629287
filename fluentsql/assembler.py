"""
==================
SQL assembly.
==================

statement_builder() renders a QuerySession into one statement. The shape is
picked by StatementMode (raw > insert > update > delete > select) and the
clauses are concatenated in a fixed order:

    INSERT INTO <table> SET <assignments>
    UPDATE <table> <join> SET <assignments> <where>
    DELETE FROM <table> <join> <where>
    SELECT <list|*> FROM <table> <join> <where> <order> <group>
           <limit> <offset> <having> <union>

Empty fragments collapse away during whitespace normalization, which leaves
quoted literals and identifiers untouched. Assembly never mutates the
session.
"""

import re

from fluentsql.escaper import escape_id
from fluentsql.session import QuerySession, StatementMode

_WHITESPACE_OR_QUOTED = re.compile(
    r"""('(?:[^'\\]|\\.|'')*'|"(?:[^"\\]|\\.|"")*"|`(?:[^`]|``)*`)|\s+""",
    re.DOTALL
)


def normalize_whitespace(sql: str) -> str:
    """Collapse whitespace runs outside quotes to one space and trim."""
    return _WHITESPACE_OR_QUOTED.sub(lambda m: m.group(1) or ' ', sql).strip()


def keyword_clause(keyword: str, text: str) -> str:
    """Prefix ``text`` with ``keyword`` exactly once.

    Leading copies of the keyword already in the text are stripped first,
    so raw fragments written as "WHERE ..." render the same as bare ones.
    """
    body = re.sub(rf'^(\s*{keyword}\b)+', '', text, flags=re.IGNORECASE).strip()
    return f"{keyword} {body}" if body else ''


def statement_builder(session: QuerySession) -> str:
    """Render the session as a single SQL statement.

    Args:
        session: Populated session

    Returns:
        Whitespace-normalized SQL text
    """
    mode = session.mode
    table = escape_id(session.table) if session.table else ''
    where = keyword_clause('WHERE', session.where)

    if mode is StatementMode.RAW:
        return session.raw.strip()

    if mode is StatementMode.INSERT:
        sql = f"INSERT INTO {table} SET {session.insert}"
    elif mode is StatementMode.UPDATE:
        sql = f"UPDATE {table} {session.join} SET {session.update} {where}"
    elif mode is StatementMode.DELETE:
        sql = f"{session.delete} FROM {table} {session.join} {where}"
    else:
        select = keyword_clause('SELECT', session.select) or 'SELECT *'
        from_clause = f"FROM {table}" if table else ''
        having = keyword_clause('HAVING', session.having)
        sql = (
            f"{select} {from_clause} {session.join} {where} {session.order} "
            f"{session.group} {session.limit} {session.offset} {having} {session.union}"
        )

    return normalize_whitespace(sql)
