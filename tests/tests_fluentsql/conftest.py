"""
Shared fixtures and fakes for query builder tests.

Key fixtures:
- fake_adapter: records every statement and answers from canned rows.
- qb: QueryBuilder wired to fake_adapter with no default order column.
- memory_adapter: tiny in-memory table answering count/insert statements.
"""

import pytest

from core.config import config
from fluentsql import QueryBuilder
from utils.database_utils import ReturnMode, shape_result


class FakeAdapter:
    """Stand-in for ExecutionAdapter that never touches a database.

    Attributes:
        rows: Rows returned for every row-producing statement
        metadata: Insert metadata returned for every statement
        columns: Column names reported by list_columns()
        executed: (sql, return_mode, projection_key) per call
    """

    def __init__(self, rows=None, metadata=None, columns=None, handler=None):
        self.rows = rows if rows is not None else []
        self.metadata = metadata or {'insert_id': 0, 'affected_rows': 0}
        self.columns = columns or []
        self.handler = handler
        self.executed = []

    def execute(self, sql, return_mode=ReturnMode.DEFAULT, projection_key=None):
        self.executed.append((sql, ReturnMode(return_mode), projection_key))
        if self.handler is not None:
            rows, metadata = self.handler(sql)
        else:
            rows, metadata = self.rows, self.metadata
        return shape_result(rows, metadata, return_mode, projection_key)

    def list_columns(self, table):
        self.executed.append((f"SHOW COLUMNS FROM {table}", ReturnMode.DEFAULT, None))
        return list(self.columns)

    @property
    def last_sql(self):
        return self.executed[-1][0]


class MemoryTable:
    """Minimal table that understands the statements count/exists/insert emit."""

    def __init__(self):
        self.records = []

    def __call__(self, sql):
        if sql.startswith('SELECT count(*) as c'):
            return [{'c': len(self.records)}], {'insert_id': 0, 'affected_rows': 0}
        if sql.startswith('INSERT INTO'):
            self.records.append(sql)
            return None, {'insert_id': len(self.records), 'affected_rows': 1}
        return [], {'insert_id': 0, 'affected_rows': 0}


@pytest.fixture(autouse=True)
def no_env_order_column(monkeypatch):
    """Keep QB_ORDER_COLUMN from the environment out of the tests."""
    monkeypatch.setattr(config.builder, 'order_column', None)


@pytest.fixture
def fake_adapter():
    return FakeAdapter()


@pytest.fixture
def qb(fake_adapter):
    return QueryBuilder(adapter=fake_adapter, method='pool')


@pytest.fixture
def memory_adapter():
    return FakeAdapter(handler=MemoryTable())


@pytest.fixture
def make_adapter():
    """FakeAdapter factory for tests that need canned columns or metadata."""
    return FakeAdapter
