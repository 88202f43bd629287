"""
=====================
JOIN construction.
=====================

Joins accumulate in the session's join slot, one ``<MODE> <table> ON ...``
segment per call. ON predicates added with on/and/or follow the same joiner
rule as WHERE: the first predicate after a bare table gets ``ON``, later ones
get ``AND``/``OR``. Whether the current segment already has its ``ON`` is
kept in ``session.join_on``.

A join condition is any Condition: ColumnComparison for ``a.id = b.a_id``,
Comparison for ``b.status = 'active'``.

Usage:
    join_builder(session, 'posts', ColumnComparison('users.id', '=', 'posts.user_id'), 'LEFT')
    session.join   # "LEFT JOIN `posts` ON `users`.`id` = `posts`.`user_id`"
"""

from typing import Callable, Optional

from fluentsql.conditions import Condition
from fluentsql.escaper import escape_id
from fluentsql.session import QuerySession

JOIN_MODES = {
    'INNER': 'INNER JOIN',
    'LEFT': 'LEFT JOIN',
    'RIGHT': 'RIGHT JOIN',
}


def _join_keyword(mode: str) -> str:
    key = mode.upper().replace('JOIN', '').strip()
    if key not in JOIN_MODES:
        raise ValueError(f"Unsupported join mode: {mode}")
    return JOIN_MODES[key]


def join_builder(
    session: QuerySession,
    table: str,
    condition: Condition,
    mode: str = 'INNER'
) -> QuerySession:
    """Append ``<MODE> JOIN table ON <condition>``."""
    segment = f"{_join_keyword(mode)} {escape_id(table)}"
    on = condition.render()
    if on:
        segment = f"{segment} ON {on}"
    session.append('join', segment)
    session.join_on = bool(on)
    return session


def join_group_builder(
    session: QuerySession,
    table: str,
    on_text: str,
    mode: str = 'INNER'
) -> QuerySession:
    """Append a join whose ON text was produced by a sub-builder.

    ``on_text`` is the sub-builder's join slot (``ON ... AND ...``). An
    empty text appends the join without a condition.
    """
    segment = f"{_join_keyword(mode)} {escape_id(table)}"
    if on_text.strip():
        segment = f"{segment} {on_text.strip()}"
    session.append('join', segment)
    session.join_on = bool(on_text.strip())
    return session


def on_builder(
    session: QuerySession,
    condition: Condition,
    connector: Optional[str] = None,
    spawn: Optional[Callable] = None
) -> QuerySession:
    """Append an ON predicate to the current join segment.

    Args:
        session: Session to mutate
        condition: Predicate to add
        connector: 'AND' or 'OR'; None means "ON for a fresh segment,
            AND otherwise"
        spawn: Sub-builder factory for sub-query conditions

    Returns:
        The same session
    """
    text = condition.render(spawn)
    if not text:
        return session
    if not session.join_on:
        session.append('join', f"ON {text}")
        session.join_on = True
    else:
        session.append('join', f"{connector or 'AND'} {text}")
    return session
