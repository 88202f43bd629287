"""
===========================================
pytest suite for fluentsql/conditions.py
===========================================

Test Coverage:
--------------
- normalize_operator: recognized operator tokens
- Comparison / ColumnComparison: triple and pair call shapes
- ColumnMap: mapping shape, operators carried in keys, SET separator
- InList / NullCheck / DatePart: special forms
- SubqueryExpression: callback isolation and empty groups
- condition_builder: the AND/OR joiner rule

How to Execute:
---------------
All tests:          pytest tests/tests_fluentsql/test_conditions.py -v
By category:        pytest tests/tests_fluentsql/test_conditions.py -m unit
"""

import pytest

from fluentsql.conditions import (
    ColumnComparison,
    ColumnMap,
    Comparison,
    DatePart,
    InList,
    NullCheck,
    RawPredicate,
    SubqueryExpression,
    condition_builder,
    normalize_operator,
)
from fluentsql.session import QuerySession


class StubBuilder:
    """Just enough of a builder for SubqueryExpression."""

    def __init__(self):
        self.session = QuerySession()

    def where(self, text):
        condition_builder(self.session, 'where', RawPredicate(text), 'AND')
        return self


# ===============
# 1. UNIT TESTS
# ===============

@pytest.mark.unit
@pytest.mark.parametrize("token, expected", [
    ('>', '>'),
    (' <= ', '<='),
    ('like', 'LIKE'),
    ('LIKE', 'LIKE'),
    ('between', None),
    (5, None),
])
def test_normalize_operator(token, expected):
    assert normalize_operator(token) == expected


@pytest.mark.unit
def test_comparison_with_operator():
    condition = Comparison.from_arguments('age', '>=', 18)

    assert condition.render() == "`age` >= 18"


@pytest.mark.unit
def test_comparison_pair_is_equality():
    assert Comparison.from_arguments('name', 'bob').render() == "`name` = 'bob'"


@pytest.mark.unit
def test_comparison_non_operator_middle_ignores_third_argument():
    condition = Comparison.from_arguments('status', 'active', 'ignored')

    assert condition.render() == "`status` = 'active'"


@pytest.mark.unit
def test_column_comparison_renders_identifiers():
    condition = ColumnComparison.from_arguments('posts.user_id', 'users.id')

    assert condition.render() == "`posts`.`user_id` = `users`.`id`"


@pytest.mark.unit
def test_column_map_uses_operators_in_keys():
    condition = ColumnMap({'age >': 18, 'name like': 'A%', 'role': 'admin'})

    assert condition.render() == "`age` > 18 AND `name` LIKE 'A%' AND `role` = 'admin'"


@pytest.mark.unit
def test_column_map_key_containing_like_is_not_an_operator():
    assert ColumnMap({'likes': 3}).render() == "`likes` = 3"


@pytest.mark.unit
def test_column_map_as_set_payload():
    condition = ColumnMap({'name': 'Ada', 'age': 36, 'note': None}, separator=',')

    assert condition.render() == "`name` = 'Ada', `age` = 36, `note` = NULL"


@pytest.mark.unit
def test_in_list_and_not_in():
    assert InList('id', [1, 2, 3]).render() == "`id` IN (1, 2, 3)"
    assert InList('code', ['a', 'b'], negate=True).render() == "`code` NOT IN ('a', 'b')"


@pytest.mark.unit
def test_null_checks():
    assert NullCheck('deleted_at').render() == "`deleted_at` IS NULL"
    assert NullCheck('email', negate=True).render() == "`email` IS NOT NULL"


@pytest.mark.unit
def test_date_part_wraps_column():
    assert DatePart('YEAR', 'created_at', 2024).render() == "YEAR(`created_at`) = 2024"


# =====================================
# 2. JOINER RULE / INTEGRATION TESTS
# =====================================

@pytest.mark.integration
def test_condition_builder_prefixes_only_non_empty_slot():
    session = QuerySession()

    condition_builder(session, 'where', Comparison('a', '=', 1), 'OR')
    condition_builder(session, 'where', Comparison('b', '=', 2), 'OR')
    condition_builder(session, 'where', Comparison('c', '=', 3), 'AND')

    assert session.where == "`a` = 1 OR `b` = 2 AND `c` = 3"


@pytest.mark.integration
def test_condition_builder_targets_requested_slot():
    session = QuerySession()

    condition_builder(session, 'having', Comparison('total', '>', 3))

    assert session.having == "`total` > 3"
    assert session.where == ''


@pytest.mark.integration
def test_subquery_expression_wraps_sub_builder_text():
    session = QuerySession()
    group = SubqueryExpression(
        lambda sub: sub.where("`a` = 1").where("`b` = 2"),
        extract=lambda sub: sub.session.where
    )

    condition_builder(session, 'where', Comparison('c', '=', 3))
    condition_builder(session, 'where', group, 'OR', spawn=StubBuilder)

    assert session.where == "`c` = 3 OR ( `a` = 1 AND `b` = 2 )"


@pytest.mark.integration
def test_subquery_sub_builders_are_isolated():
    spawned = []

    def spawn():
        spawned.append(StubBuilder())
        return spawned[-1]

    session = QuerySession()
    for column in ('a', 'b'):
        condition_builder(
            session, 'where',
            SubqueryExpression(lambda sub, c=column: sub.where(f"`{c}` = 1"),
                               extract=lambda sub: sub.session.where),
            spawn=spawn
        )

    assert len(spawned) == 2
    assert spawned[0].session.where == "`a` = 1"
    assert spawned[1].session.where == "`b` = 1"
    assert session.where == "( `a` = 1 ) AND ( `b` = 1 )"


# ===================
# 3. EDGE CASE TESTS
# ===================

@pytest.mark.edge_case
def test_empty_in_list_never_matches():
    assert InList('id', []).render() == "0 = 1"
    assert InList('id', [], negate=True).render() == "1 = 1"


@pytest.mark.edge_case
def test_in_list_accepts_single_string():
    assert InList('code', 'a').render() == "`code` IN ('a')"


@pytest.mark.edge_case
def test_empty_subquery_adds_nothing():
    session = QuerySession(where="`a` = 1")
    group = SubqueryExpression(lambda sub: None, extract=lambda sub: sub.session.where)

    condition_builder(session, 'where', group, 'OR', spawn=StubBuilder)

    assert session.where == "`a` = 1"


@pytest.mark.edge_case
def test_subquery_without_factory_raises():
    group = SubqueryExpression(lambda sub: None, extract=lambda sub: '')

    with pytest.raises(ValueError, match="factory"):
        group.render()


@pytest.mark.edge_case
def test_quotes_cannot_add_predicates():
    """An injected quote stays inside the literal, so one predicate remains."""
    session = QuerySession()

    condition_builder(session, 'where', Comparison('name', '=', "x' OR '1'='1"))

    assert session.where == "`name` = 'x\\' OR \\'1\\'=\\'1'"


@pytest.mark.edge_case
def test_comparison_needs_a_value():
    with pytest.raises(ValueError, match=r"\(column, value\) or \(column, operator, value\)"):
        Comparison.from_arguments('active')


@pytest.mark.edge_case
def test_column_comparison_needs_a_second_column():
    with pytest.raises(ValueError, match=r"\(first, second\)"):
        ColumnComparison.from_arguments('posts.user_id')
