"""
=====================================
Condition (predicate) construction.
=====================================

Each predicate shape the builder accepts has its own small class. The facade
picks the class from the method that was called (``where`` builds a
Comparison, ``where_map`` a ColumnMap, ``where_group`` a
SubqueryExpression ...), so nothing here has to guess what a call meant.

condition_builder() is the single place that appends a rendered predicate to
a session slot. It owns the joiner rule: an empty slot receives the
predicate as-is, a non-empty slot receives ``<connector> <predicate>``. The
same routine serves WHERE, HAVING and join ON predicates.

Usage:
    from fluentsql.conditions import Comparison, condition_builder

    condition_builder(session, 'where', Comparison('age', '>', 18), 'AND')
    condition_builder(session, 'where', Comparison('name', '=', 'bob'), 'OR')
    session.where   # "`age` > 18 OR `name` = 'bob'"
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence

from fluentsql.escaper import escape, escape_all, escape_id
from fluentsql.session import QuerySession

OPERATORS = ('>', '<', '>=', '<=', '!=', '=', 'like')

# Mapping keys may carry their own operator: {"age >": 18, "name like": "a%"}
_KEYED_OPERATOR = re.compile(r'^\s*(.+?)\s*(>=|<=|!=|=|>|<|\blike)\s*$', re.IGNORECASE)

_MISSING = object()


def normalize_operator(token: Any) -> Optional[str]:
    """Return the canonical operator for ``token`` or None if it is not one."""
    if not isinstance(token, str):
        return None
    candidate = token.strip().lower()
    if candidate not in OPERATORS:
        return None
    return 'LIKE' if candidate == 'like' else candidate


class Condition:
    """A predicate that can render itself to SQL text.

    ``spawn`` creates an isolated sub-builder; only sub-query shapes use it.
    An empty string means "no predicate".
    """

    def render(self, spawn: Optional[Callable[[], Any]] = None) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class RawPredicate(Condition):
    text: str

    def render(self, spawn=None) -> str:
        return self.text.strip()


@dataclass(frozen=True)
class Comparison(Condition):
    """``column operator literal``."""

    column: str
    operator: str
    value: Any

    @classmethod
    def from_arguments(cls, column: str, operator_or_value: Any = _MISSING, value: Any = _MISSING) -> 'Comparison':
        """Build from the (column, operator-or-value, value) call shape.

        When the middle argument is a recognized operator and a value
        follows, it is used as the operator. Otherwise the middle argument
        is the value of an equality test and any third argument is ignored.

        Raises:
            ValueError: If only the column was given
        """
        if operator_or_value is _MISSING:
            raise ValueError(
                f"Comparison on {column!r} needs (column, value) or (column, operator, value)"
            )
        operator = normalize_operator(operator_or_value)
        if operator is not None and value is not _MISSING:
            return cls(column, operator, value)
        return cls(column, '=', operator_or_value)

    def render(self, spawn=None) -> str:
        return f"{escape_id(self.column)} {self.operator} {escape(self.value)}"


@dataclass(frozen=True)
class ColumnComparison(Condition):
    """``column operator column``; both sides are identifiers."""

    first: str
    operator: str
    second: str

    @classmethod
    def from_arguments(cls, first: str, operator_or_second: Any = _MISSING, second: Any = _MISSING) -> 'ColumnComparison':
        if operator_or_second is _MISSING:
            raise ValueError(
                f"Column comparison on {first!r} needs (first, second) or (first, operator, second)"
            )
        operator = normalize_operator(operator_or_second)
        if operator is not None and second is not _MISSING:
            return cls(first, operator, second)
        return cls(first, '=', operator_or_second)

    def render(self, spawn=None) -> str:
        return f"{escape_id(self.first)} {self.operator} {escape_id(self.second)}"


@dataclass(frozen=True)
class ColumnMap(Condition):
    """Successive comparisons from a column -> value mapping.

    Keys may end with an operator token (``"age >="``); otherwise the
    comparison is an equality. With separator ``,`` this doubles as a SET
    assignment list.
    """

    mapping: Mapping[str, Any]
    separator: str = 'AND'

    def render(self, spawn=None) -> str:
        parts = []
        for key, value in self.mapping.items():
            match = _KEYED_OPERATOR.match(str(key))
            if match:
                column, operator = match.group(1), normalize_operator(match.group(2))
            else:
                column, operator = key, '='
            parts.append(f"{escape_id(column)} {operator} {escape(value)}")
        joiner = ', ' if self.separator == ',' else f' {self.separator} '
        return joiner.join(parts)


@dataclass(frozen=True)
class InList(Condition):
    """``column [NOT] IN (...)``.

    An empty list can never match, so IN renders ``0 = 1`` and NOT IN
    renders ``1 = 1`` instead of the invalid ``IN ()``.
    """

    column: str
    values: Sequence[Any]
    negate: bool = False

    def render(self, spawn=None) -> str:
        values = [self.values] if isinstance(self.values, (str, bytes)) else list(self.values)
        if not values:
            return '1 = 1' if self.negate else '0 = 1'
        keyword = 'NOT IN' if self.negate else 'IN'
        return f"{escape_id(self.column)} {keyword} ({', '.join(escape_all(values))})"


@dataclass(frozen=True)
class NullCheck(Condition):
    column: str
    negate: bool = False

    def render(self, spawn=None) -> str:
        return f"{escape_id(self.column)} IS {'NOT NULL' if self.negate else 'NULL'}"


@dataclass(frozen=True)
class DatePart(Condition):
    """``FUNCTION(column) = literal`` for DATE/DAY/MONTH/YEAR/TIME."""

    function: str
    column: str
    value: Any

    def render(self, spawn=None) -> str:
        return f"{self.function}({escape_id(self.column)}) = {escape(self.value)}"


@dataclass(frozen=True)
class SubqueryExpression(Condition):
    """Predicate produced by a callback run against a fresh sub-builder.

    Attributes:
        callback: Receives the sub-builder; its return value is ignored
        extract: Reads the text to splice from the sub-builder
        template: Wrapper for the extracted text
    """

    callback: Callable[[Any], Any]
    extract: Callable[[Any], str]
    template: str = field(default='( {} )')

    def render(self, spawn=None) -> str:
        if spawn is None:
            raise ValueError("SubqueryExpression needs a builder factory to render")
        sub_builder = spawn()
        self.callback(sub_builder)
        text = self.extract(sub_builder).strip()
        return self.template.format(text) if text else ''


def condition_builder(
    session: QuerySession,
    slot: str,
    condition: Condition,
    connector: str = 'AND',
    spawn: Optional[Callable[[], Any]] = None
) -> QuerySession:
    """Append a predicate to a session slot with the joiner rule.

    Args:
        session: Session to mutate
        slot: Slot name ('where', 'having' or 'join')
        condition: Predicate to render
        connector: 'AND' or 'OR', used only if the slot already has text
        spawn: Factory for sub-builders (sub-query shapes only)

    Returns:
        The same session
    """
    text = condition.render(spawn)
    if not text:
        return session
    if session.is_empty(slot):
        setattr(session, slot, text)
    else:
        session.append(slot, f"{connector} {text}")
    return session
