"""
=====================================================
Selection, ordering, grouping and payload builders.
=====================================================

Small builders that normalize a column list or a bound into fixed-shape
fragment text. Unlike predicates these overwrite their slot: the last call
wins.

Builders:
- column_list_builder: flatten and join a column list
- order_builder: ORDER BY ... ASC|DESC with default-column fallback
- group_builder: GROUP BY ...
- limit_builder / offset_builder: LIMIT n / OFFSET n
- assignment_builder: ``col = literal`` list for INSERT/UPDATE SET
"""

from typing import Any, Iterable, List, Mapping, Optional

from fluentsql.conditions import ColumnMap
from fluentsql.escaper import escape
from fluentsql.session import QuerySession

SORT_DIRECTIONS = ('ASC', 'DESC')


def flatten_columns(columns: Iterable[Any]) -> List[str]:
    """Flatten one level of nested lists/tuples and drop empty entries."""
    flat = []
    for column in columns:
        if isinstance(column, (list, tuple)):
            flat.extend(str(item) for item in column if item)
        elif column:
            flat.append(str(column))
    return flat


def column_list_builder(columns: Iterable[Any]) -> str:
    return ', '.join(flatten_columns(columns))


def order_builder(
    session: QuerySession,
    columns: Iterable[Any],
    direction: str = 'ASC',
    default_column: Optional[str] = None
) -> QuerySession:
    """Write ``ORDER BY <columns> <direction>`` into the order slot.

    With no columns the default column is used. With neither, the order
    slot is cleared.
    """
    direction = direction.upper()
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"Unsupported sort direction: {direction}")
    column_text = column_list_builder(columns) or (default_column or '')
    session.order = f"ORDER BY {column_text} {direction}" if column_text else ''
    return session


def group_builder(session: QuerySession, columns: Iterable[Any]) -> QuerySession:
    column_text = column_list_builder(columns)
    if column_text:
        session.group = f"GROUP BY {column_text}"
    return session


def limit_builder(session: QuerySession, count: int) -> QuerySession:
    session.limit = f"LIMIT {escape(int(count))}"
    return session


def offset_builder(session: QuerySession, count: int) -> QuerySession:
    session.offset = f"OFFSET {escape(int(count))}"
    return session


def assignment_builder(payload: Mapping[str, Any]) -> str:
    """Render ``{'name': 'a', 'age': 3}`` as ```name` = 'a', `age` = 3``."""
    return ColumnMap(payload, separator=',').render()
