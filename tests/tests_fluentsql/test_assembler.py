"""
=========================================================
pytest suite for fluentsql/assembler.py and session.py
=========================================================

Test Coverage:
--------------
- QuerySession: reset, mode precedence, append
- normalize_whitespace: collapsing outside quotes only
- keyword_clause: single canonical WHERE/HAVING prefix
- statement_builder: shape dispatch and fixed clause order

How to Execute:
---------------
All tests:          pytest tests/tests_fluentsql/test_assembler.py -v
"""

import pytest

from fluentsql.assembler import keyword_clause, normalize_whitespace, statement_builder
from fluentsql.session import QuerySession, StatementMode


# ===============
# 1. UNIT TESTS
# ===============

@pytest.mark.unit
def test_session_reset_empties_every_slot():
    session = QuerySession(table='t', where='`a` = 1', limit='LIMIT 1', raw='SELECT 1')

    session.reset()

    assert session == QuerySession()


@pytest.mark.unit
@pytest.mark.parametrize("slots, mode", [
    ({}, StatementMode.SELECT),
    ({'delete': 'DELETE'}, StatementMode.DELETE),
    ({'delete': 'DELETE', 'update': '`a` = 1'}, StatementMode.UPDATE),
    ({'update': '`a` = 1', 'insert': '`a` = 1'}, StatementMode.INSERT),
    ({'insert': '`a` = 1', 'raw': 'SELECT 1'}, StatementMode.RAW),
])
def test_session_mode_precedence(slots, mode):
    assert QuerySession(**slots).mode is mode


@pytest.mark.unit
def test_normalize_whitespace_preserves_quoted_text():
    sql = "  SELECT   *  FROM  `my  table`   WHERE a = 'x   y'  "

    assert normalize_whitespace(sql) == "SELECT * FROM `my  table` WHERE a = 'x   y'"


@pytest.mark.unit
def test_normalize_whitespace_handles_escaped_quotes():
    sql = "WHERE a = 'it\\'s   fine'   AND b = 1"

    assert normalize_whitespace(sql) == "WHERE a = 'it\\'s   fine' AND b = 1"


@pytest.mark.unit
@pytest.mark.parametrize("text, expected", [
    ("`a` = 1", "WHERE `a` = 1"),
    ("WHERE `a` = 1", "WHERE `a` = 1"),
    ("where WHERE `a` = 1", "WHERE `a` = 1"),
    ("", ""),
    ("   ", ""),
])
def test_keyword_clause_is_idempotent(text, expected):
    assert keyword_clause('WHERE', text) == expected


# ====================
# 2. STATEMENT SHAPES
# ====================

@pytest.mark.integration
def test_select_defaults_to_star():
    assert statement_builder(QuerySession(table='users')) == "SELECT * FROM `users`"


@pytest.mark.integration
def test_select_clause_order_is_fixed():
    session = QuerySession(
        table='users',
        select='role, count(*) as total',
        join='INNER JOIN `teams` ON `users`.`team_id` = `teams`.`id`',
        where='`active` = 1',
        order='ORDER BY role ASC',
        group='GROUP BY role',
        limit='LIMIT 5',
        offset='OFFSET 10',
        having='`total` > 1',
        union='UNION SELECT role, 0 FROM `guests`'
    )

    assert statement_builder(session) == (
        "SELECT role, count(*) as total FROM `users` "
        "INNER JOIN `teams` ON `users`.`team_id` = `teams`.`id` "
        "WHERE `active` = 1 ORDER BY role ASC GROUP BY role LIMIT 5 OFFSET 10 "
        "HAVING `total` > 1 UNION SELECT role, 0 FROM `guests`"
    )


@pytest.mark.integration
def test_insert_shape():
    session = QuerySession(table='users', insert="`name` = 'Ada'", where='`ignored` = 1')

    assert statement_builder(session) == "INSERT INTO `users` SET `name` = 'Ada'"


@pytest.mark.integration
def test_update_shape():
    session = QuerySession(
        table='users',
        update="`name` = 'Bob'",
        where='`id` = 1',
        join='INNER JOIN `teams` ON `users`.`team_id` = `teams`.`id`',
        order='ORDER BY id ASC'
    )

    assert statement_builder(session) == (
        "UPDATE `users` INNER JOIN `teams` ON `users`.`team_id` = `teams`.`id` "
        "SET `name` = 'Bob' WHERE `id` = 1"
    )


@pytest.mark.integration
def test_delete_shape():
    session = QuerySession(table='users', delete='DELETE', where='`id` = 1', limit='LIMIT 1')

    assert statement_builder(session) == "DELETE FROM `users` WHERE `id` = 1"


@pytest.mark.integration
def test_raw_override_wins_verbatim():
    session = QuerySession(table='users', where='`id` = 1', raw='SHOW TABLES')

    assert statement_builder(session) == "SHOW TABLES"


# ===================
# 3. EDGE CASE TESTS
# ===================

@pytest.mark.edge_case
def test_statement_builder_does_not_mutate_session():
    session = QuerySession(table='users', where='`id` = 1', having='`n` > 1')
    before = QuerySession(**vars(session))

    statement_builder(session)
    statement_builder(session)

    assert session == before


@pytest.mark.edge_case
def test_select_keyword_not_duplicated():
    session = QuerySession(table='users', select='SELECT id')

    assert statement_builder(session) == "SELECT id FROM `users`"


@pytest.mark.edge_case
def test_session_reset_clears_join_on_flag():
    session = QuerySession(table='t', join='INNER JOIN `u` ON `t`.`id` = `u`.`id`', join_on=True)

    session.reset()

    assert session.join_on is False
    assert session.join == ''
