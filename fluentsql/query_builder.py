"""
============================
Fluent MySQL query builder.
============================

QueryBuilder is the chainable facade over the clause builders. Every
clause method mutates the builder's QuerySession and returns the builder;
terminal methods assemble the statement and hand it to the execution
adapter with a return mode.

Predicate shapes have their own entry points instead of one method that
guesses from its arguments:

- where(column, value) / where(column, operator, value): one comparison
- where_map({...}): several comparisons from a mapping
- where_group(callback): a parenthesized group built on a sub-builder
- where_column, where_in, where_null, where_date ...: special forms

Sub-builders handed to callbacks are created with ``prevent=True``. They
never open a connection of their own and are discarded once their text is
spliced into the parent.

Usage:
    from fluentsql import QueryBuilder

    qb = QueryBuilder(config={'host': 'localhost', 'database': 'shop'})

    users = (
        qb.table('users')
        .select('id', 'name')
        .where('age', '>', 18)
        .where_group(lambda q: q.where('role', 'admin').or_where('role', 'owner'))
        .order_by_desc('created_at')
        .limit(10)
        .get()
    )

    new_id = qb.table('users').insert_get_id({'name': 'Ada'})
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from core.config import DatabaseConfig, config as settings
from core.exceptions import ConfigurationError
from core.logger import get_logger
from fluentsql import escaper
from fluentsql.assembler import statement_builder
from fluentsql.clauses import (
    assignment_builder,
    column_list_builder,
    flatten_columns,
    group_builder,
    limit_builder,
    offset_builder,
    order_builder,
)
from fluentsql.conditions import (
    ColumnComparison,
    ColumnMap,
    Comparison,
    Condition,
    DatePart,
    InList,
    NullCheck,
    RawPredicate,
    SubqueryExpression,
    condition_builder,
)
from fluentsql.joins import join_builder, join_group_builder, on_builder
from fluentsql.session import QuerySession
from utils.database_utils import CONNECTION_METHODS, ExecutionAdapter, ReturnMode

logger = get_logger(__name__)

SUPPORTED_DATABASES = ('mysql',)

Callback = Callable[['QueryBuilder'], Any]


def _column_condition(first: str, operator: str, second: Optional[str]) -> ColumnComparison:
    if second is None:
        return ColumnComparison(first, '=', operator)
    return ColumnComparison.from_arguments(first, operator, second)


class QueryBuilder:
    """Chainable query builder bound to one MySQL connection source.

    Args:
        db_type: Database kind; only 'mysql' is supported
        config: Connection parameters (host, port, user, password,
            database); missing keys come from the environment
        method: 'pool' or 'single' (defaults to QB_CONNECTION_METHOD)
        defaults: Builder defaults, e.g. {'order_column': 'id'}
        prevent: Do not create an execution adapter (sub-builders)
        adapter: Explicit execution adapter, mainly for tests

    Raises:
        ConfigurationError: For an unknown db_type or method

    Example:
        >>> qb = QueryBuilder(config={'database': 'shop'}, defaults={'order_column': 'id'})
        >>> qb.table('orders').where('total', '>=', 100).latest().to_sql()
        'SELECT * FROM `orders` WHERE `total` >= 100 ORDER BY id DESC LIMIT 1'
    """

    def __init__(
        self,
        db_type: str = 'mysql',
        config: Optional[Mapping[str, Any]] = None,
        method: Optional[str] = None,
        defaults: Optional[Mapping[str, Any]] = None,
        prevent: bool = False,
        adapter: Optional[ExecutionAdapter] = None
    ):
        if db_type not in SUPPORTED_DATABASES:
            raise ConfigurationError(f"Invalid type connection name {db_type}")

        method = method or settings.builder.method
        if method not in CONNECTION_METHODS:
            raise ConfigurationError(
                f"Invalid connection method {method}; expected one of {CONNECTION_METHODS}"
            )

        self.db_type = db_type
        self.method = method
        self.defaults = dict(defaults or {})
        self.session = QuerySession()
        self._config = config
        self._prevent = prevent

        if adapter is None and not prevent:
            adapter = ExecutionAdapter.from_config(
                DatabaseConfig.from_mapping(config, fallback=settings.db),
                method=method,
                pool_size=settings.builder.pool_size,
                max_overflow=settings.builder.max_overflow
            )
        self._adapter = adapter

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def table(self, name: str) -> 'QueryBuilder':
        """Start a new statement on ``name``; every fragment is reset."""
        self.session.reset()
        self.session.table = name
        return self

    def create(self) -> 'QueryBuilder':
        """Return a fresh linked builder sharing this builder's adapter."""
        return QueryBuilder(
            db_type=self.db_type,
            config=self._config,
            method=self.method,
            defaults=self.defaults,
            prevent=True,
            adapter=self._adapter
        )

    def to_sql(self) -> str:
        """Assembled SQL for the current session, without executing it."""
        return statement_builder(self.session)

    def format(self, template: str, values: Iterable[Any] = ()) -> str:
        return escaper.format(template, list(values))

    def escape_all(self, value: Any) -> Any:
        return escaper.escape_all(value)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, *columns: Union[str, Iterable[str]]) -> 'QueryBuilder':
        """Set the select list; no columns means ``*``."""
        self.session.select = column_list_builder(columns)
        return self

    def select_raw(self, template: str, values: Iterable[Any] = ()) -> 'QueryBuilder':
        self.session.select = self.format(template, values)
        return self

    def add_select(self, *columns: Union[str, Iterable[str]]) -> 'QueryBuilder':
        """Append columns to the select list."""
        extra = column_list_builder(columns)
        if extra:
            self.session.select = f"{self.session.select}, {extra}" if self.session.select else extra
        return self

    def distinct(self, *columns: Union[str, Iterable[str]]) -> 'QueryBuilder':
        self.session.select = f"DISTINCT {column_list_builder(columns) or '*'}"
        return self

    # ------------------------------------------------------------------
    # WHERE
    # ------------------------------------------------------------------

    def _add_condition(self, slot: str, condition: Condition, connector: str) -> 'QueryBuilder':
        condition_builder(self.session, slot, condition, connector, spawn=self.create)
        return self

    def where(self, *args: Any) -> 'QueryBuilder':
        """AND a comparison: ``where(column, value)`` or ``where(column, op, value)``.

        Called without arguments it is a no-op.
        """
        if not args:
            return self
        return self._add_condition('where', Comparison.from_arguments(*args), 'AND')

    def or_where(self, *args: Any) -> 'QueryBuilder':
        if not args:
            return self
        return self._add_condition('where', Comparison.from_arguments(*args), 'OR')

    def where_map(self, mapping: Optional[Mapping[str, Any]] = None, separator: str = 'AND') -> 'QueryBuilder':
        """AND a group of comparisons from a mapping.

        Keys may carry an operator (``{'age >': 18}``). Comparisons inside
        the mapping are joined by ``separator``.
        """
        if not mapping:
            return self
        return self._add_condition('where', ColumnMap(mapping, separator), 'AND')

    def or_where_map(self, mapping: Optional[Mapping[str, Any]] = None, separator: str = 'AND') -> 'QueryBuilder':
        if not mapping:
            return self
        return self._add_condition('where', ColumnMap(mapping, separator), 'OR')

    def where_group(self, callback: Optional[Callback] = None) -> 'QueryBuilder':
        """AND a parenthesized group built by ``callback`` on a sub-builder."""
        if callback is None:
            return self
        group = SubqueryExpression(callback, extract=lambda sub: sub.session.where)
        return self._add_condition('where', group, 'AND')

    def or_where_group(self, callback: Optional[Callback] = None) -> 'QueryBuilder':
        if callback is None:
            return self
        group = SubqueryExpression(callback, extract=lambda sub: sub.session.where)
        return self._add_condition('where', group, 'OR')

    def where_column(self, *args: str) -> 'QueryBuilder':
        """Compare two columns: ``where_column(first, [op,] second)``."""
        if not args:
            return self
        return self._add_condition('where', ColumnComparison.from_arguments(*args), 'AND')

    def or_where_column(self, *args: str) -> 'QueryBuilder':
        if not args:
            return self
        return self._add_condition('where', ColumnComparison.from_arguments(*args), 'OR')

    def where_raw(self, template: str, values: Iterable[Any] = ()) -> 'QueryBuilder':
        return self._add_condition('where', RawPredicate(self.format(template, values)), 'AND')

    def or_where_raw(self, template: str, values: Iterable[Any] = ()) -> 'QueryBuilder':
        return self._add_condition('where', RawPredicate(self.format(template, values)), 'OR')

    def where_in(self, column: str, values: Iterable[Any] = ()) -> 'QueryBuilder':
        return self._add_condition('where', InList(column, values), 'AND')

    def or_where_in(self, column: str, values: Iterable[Any] = ()) -> 'QueryBuilder':
        return self._add_condition('where', InList(column, values), 'OR')

    def where_not_in(self, column: str, values: Iterable[Any] = ()) -> 'QueryBuilder':
        return self._add_condition('where', InList(column, values, negate=True), 'AND')

    def or_where_not_in(self, column: str, values: Iterable[Any] = ()) -> 'QueryBuilder':
        return self._add_condition('where', InList(column, values, negate=True), 'OR')

    def where_null(self, column: str) -> 'QueryBuilder':
        return self._add_condition('where', NullCheck(column), 'AND')

    def or_where_null(self, column: str) -> 'QueryBuilder':
        return self._add_condition('where', NullCheck(column), 'OR')

    def where_not_null(self, column: str) -> 'QueryBuilder':
        return self._add_condition('where', NullCheck(column, negate=True), 'AND')

    def or_where_not_null(self, column: str) -> 'QueryBuilder':
        return self._add_condition('where', NullCheck(column, negate=True), 'OR')

    def where_date(self, column: str, value: Any) -> 'QueryBuilder':
        return self._add_condition('where', DatePart('DATE', column, value), 'AND')

    def where_day(self, column: str, value: Any) -> 'QueryBuilder':
        return self._add_condition('where', DatePart('DAY', column, value), 'AND')

    def where_month(self, column: str, value: Any) -> 'QueryBuilder':
        return self._add_condition('where', DatePart('MONTH', column, value), 'AND')

    def where_year(self, column: str, value: Any) -> 'QueryBuilder':
        return self._add_condition('where', DatePart('YEAR', column, value), 'AND')

    def where_time(self, column: str, value: Any) -> 'QueryBuilder':
        return self._add_condition('where', DatePart('TIME', column, value), 'AND')

    def where_exists(self, callback: Optional[Callback] = None) -> 'QueryBuilder':
        """AND ``EXISTS ( <statement built by callback> )``."""
        if callback is None:
            return self
        exists = SubqueryExpression(callback, extract=lambda sub: sub.to_sql(), template='EXISTS ( {} )')
        return self._add_condition('where', exists, 'AND')

    def or_where_exists(self, callback: Optional[Callback] = None) -> 'QueryBuilder':
        if callback is None:
            return self
        exists = SubqueryExpression(callback, extract=lambda sub: sub.to_sql(), template='EXISTS ( {} )')
        return self._add_condition('where', exists, 'OR')

    def where_not_exists(self, callback: Optional[Callback] = None) -> 'QueryBuilder':
        if callback is None:
            return self
        exists = SubqueryExpression(callback, extract=lambda sub: sub.to_sql(), template='NOT EXISTS ( {} )')
        return self._add_condition('where', exists, 'AND')

    # ------------------------------------------------------------------
    # HAVING
    # ------------------------------------------------------------------

    def having(self, *args: Any) -> 'QueryBuilder':
        if not args:
            return self
        return self._add_condition('having', Comparison.from_arguments(*args), 'AND')

    def or_having(self, *args: Any) -> 'QueryBuilder':
        if not args:
            return self
        return self._add_condition('having', Comparison.from_arguments(*args), 'OR')

    def having_map(self, mapping: Optional[Mapping[str, Any]] = None) -> 'QueryBuilder':
        if not mapping:
            return self
        return self._add_condition('having', ColumnMap(mapping), 'AND')

    def or_having_map(self, mapping: Optional[Mapping[str, Any]] = None) -> 'QueryBuilder':
        if not mapping:
            return self
        return self._add_condition('having', ColumnMap(mapping), 'OR')

    def having_group(self, callback: Optional[Callback] = None) -> 'QueryBuilder':
        if callback is None:
            return self
        group = SubqueryExpression(callback, extract=lambda sub: sub.session.having)
        return self._add_condition('having', group, 'AND')

    def having_raw(self, template: str, values: Iterable[Any] = ()) -> 'QueryBuilder':
        return self._add_condition('having', RawPredicate(self.format(template, values)), 'AND')

    # ------------------------------------------------------------------
    # JOIN
    # ------------------------------------------------------------------

    def _join(self, table: str, condition: Condition, mode: str) -> 'QueryBuilder':
        join_builder(self.session, table, condition, mode=mode)
        return self

    def join(self, table: str, first: str, operator: str, second: Optional[str] = None) -> 'QueryBuilder':
        """INNER JOIN ``table`` ON ``first operator second``; both sides are columns.

        With three arguments the operator is ``=``:
        ``join('posts', 'users.id', 'posts.user_id')``.
        """
        return self._join(table, _column_condition(first, operator, second), 'INNER')

    def left_join(self, table: str, first: str, operator: str, second: Optional[str] = None) -> 'QueryBuilder':
        return self._join(table, _column_condition(first, operator, second), 'LEFT')

    def right_join(self, table: str, first: str, operator: str, second: Optional[str] = None) -> 'QueryBuilder':
        return self._join(table, _column_condition(first, operator, second), 'RIGHT')

    def join_value(self, table: str, column: str, *args: Any) -> 'QueryBuilder':
        """INNER JOIN ``table`` ON ``column operator literal``.

        Example:
            >>> qb.table('users').join_value('settings', 'settings.active', 1).to_sql()
            'SELECT * FROM `users` INNER JOIN `settings` ON `settings`.`active` = 1'
        """
        return self._join(table, Comparison.from_arguments(column, *args), 'INNER')

    def left_join_value(self, table: str, column: str, *args: Any) -> 'QueryBuilder':
        return self._join(table, Comparison.from_arguments(column, *args), 'LEFT')

    def right_join_value(self, table: str, column: str, *args: Any) -> 'QueryBuilder':
        return self._join(table, Comparison.from_arguments(column, *args), 'RIGHT')

    def _join_group(self, table: str, callback: Callback, mode: str) -> 'QueryBuilder':
        on_text = SubqueryExpression(callback, extract=lambda sub: sub.session.join, template='{}')
        join_group_builder(self.session, table, on_text.render(self.create), mode=mode)
        return self

    def join_group(self, table: str, callback: Callback) -> 'QueryBuilder':
        """INNER JOIN whose ON clause is built by ``callback``.

        Example:
            >>> qb.table('users').join_group(
            ...     'posts',
            ...     lambda j: j.on_join('users.id', 'posts.user_id').and_join_value('posts.live', 1)
            ... )
        """
        return self._join_group(table, callback, 'INNER')

    def left_join_group(self, table: str, callback: Callback) -> 'QueryBuilder':
        return self._join_group(table, callback, 'LEFT')

    def right_join_group(self, table: str, callback: Callback) -> 'QueryBuilder':
        return self._join_group(table, callback, 'RIGHT')

    def on_join(self, *args: str) -> 'QueryBuilder':
        """Add a column-to-column ON predicate: ``ON`` for a bare join, ``AND`` afterwards."""
        if not args:
            return self
        on_builder(self.session, ColumnComparison.from_arguments(*args))
        return self

    def and_join(self, *args: str) -> 'QueryBuilder':
        if not args:
            return self
        on_builder(self.session, ColumnComparison.from_arguments(*args), 'AND')
        return self

    def or_join(self, *args: str) -> 'QueryBuilder':
        if not args:
            return self
        on_builder(self.session, ColumnComparison.from_arguments(*args), 'OR')
        return self

    def on_join_value(self, *args: Any) -> 'QueryBuilder':
        """Add a column-to-literal ON predicate: ``on_join_value('posts.live', 1)``."""
        if not args:
            return self
        on_builder(self.session, Comparison.from_arguments(*args))
        return self

    def and_join_value(self, *args: Any) -> 'QueryBuilder':
        if not args:
            return self
        on_builder(self.session, Comparison.from_arguments(*args), 'AND')
        return self

    def or_join_value(self, *args: Any) -> 'QueryBuilder':
        if not args:
            return self
        on_builder(self.session, Comparison.from_arguments(*args), 'OR')
        return self

    # ------------------------------------------------------------------
    # Ordering, grouping, pagination
    # ------------------------------------------------------------------

    @property
    def default_order_column(self) -> Optional[str]:
        return self.defaults.get('order_column') or settings.builder.order_column

    def order_by_asc(self, *columns: Union[str, Iterable[str]]) -> 'QueryBuilder':
        """ORDER BY ... ASC; without columns the default order column is used."""
        order_builder(self.session, columns, 'ASC', self.default_order_column)
        return self

    def order_by_desc(self, *columns: Union[str, Iterable[str]]) -> 'QueryBuilder':
        order_builder(self.session, columns, 'DESC', self.default_order_column)
        return self

    def order_by_raw(self, template: str, values: Iterable[Any] = ()) -> 'QueryBuilder':
        self.session.order = f"ORDER BY {self.format(template, values)}"
        return self

    def group_by(self, *columns: Union[str, Iterable[str]]) -> 'QueryBuilder':
        group_builder(self.session, columns)
        return self

    def group_by_raw(self, template: str, values: Iterable[Any] = ()) -> 'QueryBuilder':
        self.session.group = f"GROUP BY {self.format(template, values)}"
        return self

    def oldest(self, *columns: Union[str, Iterable[str]]) -> 'QueryBuilder':
        """Ascending order with LIMIT 1."""
        self.order_by_asc(*columns)
        return self.limit(1)

    def latest(self, *columns: Union[str, Iterable[str]]) -> 'QueryBuilder':
        """Descending order with LIMIT 1."""
        self.order_by_desc(*columns)
        return self.limit(1)

    def limit(self, count: int) -> 'QueryBuilder':
        limit_builder(self.session, count)
        return self

    def offset(self, count: int) -> 'QueryBuilder':
        offset_builder(self.session, count)
        return self

    def take(self, count: int) -> 'QueryBuilder':
        return self.limit(count)

    def skip(self, count: int) -> 'QueryBuilder':
        return self.offset(count)

    def union(self, query: Union['QueryBuilder', str]) -> 'QueryBuilder':
        """UNION with a SQL string or another builder's statement."""
        return self._union(query, 'UNION')

    def union_all(self, query: Union['QueryBuilder', str]) -> 'QueryBuilder':
        return self._union(query, 'UNION ALL')

    def _union(self, query: Union['QueryBuilder', str], keyword: str) -> 'QueryBuilder':
        text = query.to_sql() if isinstance(query, QueryBuilder) else str(query)
        self.session.union = f"{keyword} {text}"
        return self

    def raw(self, template: str, values: Iterable[Any] = ()) -> 'QueryBuilder':
        """Replace the whole statement with a formatted raw template."""
        self.session.raw = self.format(template, values)
        return self

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _exec(
        self,
        return_mode: ReturnMode = ReturnMode.DEFAULT,
        projection_key: Optional[str] = None
    ) -> Any:
        if self._adapter is None:
            raise ConfigurationError(
                "This builder was created with prevent=True and has no connection"
            )
        sql = self.to_sql()
        logger.debug(f"Executing ({return_mode.value}): {sql}")
        return self._adapter.execute(sql, return_mode, projection_key)

    def get(self) -> Any:
        """Run the statement and return every row as a dict."""
        return self._exec()

    def get_all(self) -> Any:
        return self._exec()

    def first(self) -> Optional[Dict[str, Any]]:
        """First row or None; forces LIMIT 1."""
        self.limit(1)
        return self._exec(ReturnMode.SINGLE)

    def value(self, column: str) -> Any:
        """Value of ``column`` in the first row; forces LIMIT 1."""
        self.limit(1)
        return self._exec(ReturnMode.SINGLE, column)

    def count(self) -> int:
        self.session.select = 'count(*) as c'
        return self._exec(ReturnMode.SINGLE, 'c')

    def exists(self) -> bool:
        self.limit(1)
        return (self.count() or 0) > 0

    def doesnt_exist(self) -> bool:
        self.limit(1)
        return (self.count() or 0) == 0

    def max(self, column: str) -> Any:
        return self.select(f"max({column}) as m").value('m')

    def min(self, column: str) -> Any:
        return self.select(f"min({column}) as m").value('m')

    def sum(self, column: str) -> Any:
        return self.select(f"sum({column}) as s").value('s')

    def avg(self, *columns: Union[str, Iterable[str]]) -> Any:
        """Average of the given columns added together."""
        self.session.select = f"avg({'+'.join(flatten_columns(columns))}) as av"
        return self._exec(ReturnMode.SINGLE, 'av')

    def pluck(self, key: Optional[str] = None, value: Optional[str] = None) -> Optional[Dict[Any, Any]]:
        """Map ``key`` column values to ``value`` column values.

        ``value`` defaults to ``key``. Without a key nothing is executed
        and None is returned.
        """
        if not key:
            return None
        self.session.select = f"{key} as keyColumn, {value or key} as valueColumn"
        rows = self._exec()
        return {row['keyColumn']: row['valueColumn'] for row in rows}

    def insert(self, payload: Mapping[str, Any]) -> Any:
        """INSERT the payload; returns the driver's insert metadata.

        An empty payload is a no-op returning None.
        """
        if not payload:
            logger.warning(f"⚠️ Empty insert payload for {self.session.table}, nothing executed")
            return None
        self.session.insert = assignment_builder(payload)
        return self._exec()

    def insert_get_id(self, payload: Mapping[str, Any]) -> Any:
        if not payload:
            logger.warning(f"⚠️ Empty insert payload for {self.session.table}, nothing executed")
            return None
        self.session.insert = assignment_builder(payload)
        return self._exec(ReturnMode.INSERT, 'insert_id')

    def update(self, payload: Mapping[str, Any]) -> Any:
        """UPDATE the matched rows; an empty payload is a no-op returning None."""
        if not payload:
            logger.warning(f"⚠️ Empty update payload for {self.session.table}, nothing executed")
            return None
        self.session.update = assignment_builder(payload)
        return self._exec()

    def delete(self) -> Any:
        self.session.delete = 'DELETE'
        return self._exec()

    def truncate(self) -> Any:
        self.session.raw = f"TRUNCATE TABLE {escaper.escape_id(self.session.table)}"
        return self._exec(ReturnMode.INSERT)

    def drop(self) -> Any:
        self.session.raw = f"DROP TABLE {escaper.escape_id(self.session.table)}"
        return self._exec(ReturnMode.INSERT)

    # ------------------------------------------------------------------
    # Schema introspection and lenient writes
    # ------------------------------------------------------------------

    def get_columns(self) -> List[Dict[str, Any]]:
        """SHOW COLUMNS rows for the current table."""
        self.session.raw = f"SHOW COLUMNS FROM {escaper.escape_id(self.session.table)}"
        return self._exec()

    def primary(self) -> Optional[str]:
        """Name of the table's primary key column."""
        self.session.raw = (
            f"SHOW KEYS FROM {escaper.escape_id(self.session.table)} "
            f"WHERE Key_name = 'PRIMARY'"
        )
        return self._exec(ReturnMode.SINGLE, 'Column_name')

    def _real_columns(self) -> List[str]:
        if self._adapter is None:
            raise ConfigurationError(
                "This builder was created with prevent=True and has no connection"
            )
        return self._adapter.list_columns(escaper.escape_id(self.session.table))

    def _drop_unknown_selection(self) -> None:
        columns = set(self._real_columns())
        selected = [column.strip() for column in self.session.select.split(',') if column.strip()]
        kept = [column for column in selected if column in columns]
        dropped = [column for column in selected if column not in columns]
        if dropped:
            logger.debug(f"Dropping unknown columns from {self.session.table} selection: {dropped}")
        self.select(*kept)

    def _drop_unknown_fields(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        columns = set(self._real_columns())
        kept = {field: value for field, value in payload.items() if field in columns}
        dropped = [field for field in payload if field not in columns]
        if dropped:
            logger.debug(f"Dropping unknown fields for {self.session.table}: {dropped}")
        return kept

    def get_force(self) -> Any:
        """get() after silently dropping selected columns the table lacks."""
        self._drop_unknown_selection()
        return self._exec()

    def get_force_single(self) -> Optional[Dict[str, Any]]:
        self._drop_unknown_selection()
        return self._exec(ReturnMode.SINGLE)

    def force_insert(self, payload: Mapping[str, Any]) -> Any:
        """insert() after silently dropping fields the table lacks."""
        return self.insert(self._drop_unknown_fields(payload))

    def force_update(self, payload: Mapping[str, Any]) -> Any:
        return self.update(self._drop_unknown_fields(payload))
