"""
=====================================================
fluentsql - fluent MySQL query construction.
=====================================================

Builds MySQL statements from chained method calls and runs them through a
pooled or single-use SQLAlchemy connection.

The package is organized by responsibility:
    - escaper.py: literal/identifier escaping and raw template formatting
    - session.py: QuerySession, the per-statement fragment store
    - conditions.py: predicate shapes and the AND/OR joiner rule
    - joins.py: JOIN segments and ON predicates
    - clauses.py: select lists, ordering, grouping, limits, SET payloads
    - assembler.py: statement_builder, clause ordering and normalization
    - query_builder.py: QueryBuilder, the chainable facade

Architecture:
    - Clause builders end with '_builder' and mutate only the session
      they are given
    - The assembler is a pure function of the session
    - Execution lives in utils.database_utils

Example:
    >>> from fluentsql import QueryBuilder
    >>>
    >>> qb = QueryBuilder(config={'database': 'shop'})
    >>> qb.table('users').where('active', 1).count()
    12
"""

__version__ = "0.1.0"
__all__ = [
    'QueryBuilder', 'QuerySession', 'StatementMode', 'ReturnMode',
    'statement_builder', 'escape', 'escape_all', 'escape_id'
]

from .assembler import statement_builder
from .escaper import escape, escape_all, escape_id
from .query_builder import QueryBuilder
from .session import QuerySession, StatementMode
from utils.database_utils import ReturnMode
