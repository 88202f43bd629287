"""
==================================================
Database connectivity and statement execution.
==================================================

Provides the execution side of the query builder: engine creation for the
'pool' and 'single' connection methods, one-statement execution with
return-mode shaping, schema introspection and availability checks.

Connection methods:
    - pool: SQLAlchemy QueuePool; a connection is checked out per statement
      and returned to the pool as soon as the statement finishes
    - single: SQLAlchemy NullPool; every statement opens a fresh DBAPI
      connection which is closed afterwards

Return modes:
    - default: list of row dicts (metadata dict for statements without rows)
    - single: first row or None, optionally projected to one column
    - insert: {'insert_id', 'affected_rows'}, optionally projected

Example:
    >>> from utils.database_utils import ExecutionAdapter, ReturnMode
    >>>
    >>> adapter = ExecutionAdapter.from_config(config.db, method='pool')
    >>> adapter.execute("SELECT count(*) as c FROM `users`", ReturnMode.SINGLE, 'c')
    42
"""

import time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import pymysql
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from core.config import DatabaseConfig, config
from core.exceptions import DatabaseConnectionError, QueryExecutionError
from core.logger import get_logger

logger = get_logger(__name__)

CONNECTION_METHODS = ('pool', 'single')


class ReturnMode(str, Enum):
    """How a raw driver result is reshaped before it is returned."""
    DEFAULT = 'default'
    SINGLE = 'single'
    INSERT = 'insert'


def get_connection_string(
    host: str = None,
    port: int = None,
    user: str = None,
    password: str = None,
    database: str = None
) -> str:
    """
    Build a mysql+pymysql connection string.

    Arguments left as None are taken from the global config.

    Example:
        >>> get_connection_string(database='shop')
        'mysql+pymysql://root:@localhost:3306/shop'
    """
    db_config = DatabaseConfig(
        host=host if host is not None else config.db_host,
        port=port if port is not None else config.db_port,
        user=user if user is not None else config.db_user,
        password=password if password is not None else config.db_password,
        database=database if database is not None else config.db_name
    )
    return db_config.get_connection_string()


def create_sqlalchemy_engine(
    db_config: Optional[DatabaseConfig] = None,
    method: str = 'pool',
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10
) -> Engine:
    """
    Create a SQLAlchemy engine for the given connection method.

    No connection is opened here; the first statement does that.

    Args:
        db_config: Connection settings (defaults to config.db)
        method: 'pool' for a QueuePool, 'single' for a NullPool
        echo: Enable SQLAlchemy statement logging
        pool_size: Connection pool size ('pool' only)
        max_overflow: Maximum overflow connections ('pool' only)

    Returns:
        Configured SQLAlchemy Engine
    """
    db_config = db_config or config.db
    connection_url = URL.create(
        drivername='mysql+pymysql',
        username=db_config.user,
        password=db_config.password,
        host=db_config.host,
        port=db_config.port,
        database=db_config.database or None
    )

    if method == 'single':
        return create_engine(connection_url, echo=echo, poolclass=NullPool)

    return create_engine(
        connection_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True
    )


def shape_result(
    rows: Optional[List[Dict[str, Any]]],
    metadata: Dict[str, Any],
    return_mode: Union[ReturnMode, str] = ReturnMode.DEFAULT,
    projection_key: Optional[str] = None
) -> Any:
    """
    Reshape a raw result according to the return mode.

    Args:
        rows: Row dicts, or None for statements that return no rows
        metadata: {'insert_id': ..., 'affected_rows': ...}
        return_mode: default, single or insert
        projection_key: Optional column/metadata key to project to

    Returns:
        default: rows (or a list of one column's values when projected);
            metadata when the statement returned no rows
        single: first row, its projected value, or None
        insert: metadata or its projected value
    """
    mode = ReturnMode(return_mode)

    if mode is ReturnMode.INSERT:
        return metadata.get(projection_key) if projection_key else metadata

    if rows is None:
        return metadata

    if mode is ReturnMode.SINGLE:
        row = rows[0] if rows else None
        if row is None or projection_key is None:
            return row
        return row.get(projection_key)

    if projection_key:
        return [row.get(projection_key) for row in rows]
    return rows


class ExecutionAdapter:
    """Run assembled SQL on a SQLAlchemy engine.

    Each execute() call checks out exactly one connection, runs exactly one
    statement inside a transaction and gives the connection back (pool) or
    closes it (single) before returning or raising.

    Attributes:
        engine: SQLAlchemy Engine
        method: 'pool' or 'single'
    """

    def __init__(self, engine: Engine, method: str = 'pool'):
        self.engine = engine
        self.method = method

    @classmethod
    def from_config(
        cls,
        db_config: DatabaseConfig,
        method: str = 'pool',
        pool_size: int = 5,
        max_overflow: int = 10
    ) -> 'ExecutionAdapter':
        engine = create_sqlalchemy_engine(
            db_config,
            method=method,
            pool_size=pool_size,
            max_overflow=max_overflow
        )
        return cls(engine, method=method)

    def execute(
        self,
        sql: str,
        return_mode: Union[ReturnMode, str] = ReturnMode.DEFAULT,
        projection_key: Optional[str] = None
    ) -> Any:
        """
        Execute one statement and shape its result.

        Args:
            sql: Fully assembled SQL (literals already escaped)
            return_mode: default, single or insert
            projection_key: Optional key to project the result to

        Returns:
            Shaped result, see shape_result()

        Raises:
            DatabaseConnectionError: If no connection could be obtained
            QueryExecutionError: If the database rejected the statement
        """
        try:
            connection = self.engine.connect()
        except SQLAlchemyError as e:
            logger.error(f"❌ Could not obtain a {self.method} connection: {e}")
            raise DatabaseConnectionError(
                f"Could not obtain a {self.method} connection: {e}",
                orig=getattr(e, 'orig', None) or e
            ) from e

        try:
            # no_parameters keeps '%' inside literals away from pyformat substitution
            connection = connection.execution_options(no_parameters=True)
            with connection.begin():
                result = connection.exec_driver_sql(sql)
                rows = [dict(row._mapping) for row in result] if result.returns_rows else None
                metadata = {
                    'insert_id': result.lastrowid,
                    'affected_rows': result.rowcount
                }
        except SQLAlchemyError as e:
            logger.error(f"❌ Statement failed: {e}")
            raise QueryExecutionError(
                f"Statement failed: {e}",
                sql=sql,
                orig=getattr(e, 'orig', None) or e
            ) from e
        finally:
            connection.close()

        return shape_result(rows, metadata, return_mode, projection_key)

    def list_columns(self, table: str) -> List[str]:
        """Return the real column names of ``table`` (SHOW COLUMNS).

        ``table`` is used as written, so pass it already quoted.
        """
        rows = self.execute(f"SHOW COLUMNS FROM {table}")
        return [row['Field'] for row in rows]

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()


def check_database_available(
    host: str = None,
    port: int = None,
    user: str = None,
    password: str = None,
    database: str = None,
    timeout: int = 5
) -> bool:
    """
    Check if the MySQL server accepts connections.

    Returns:
        True if a connection could be opened, False otherwise
    """
    try:
        conn = pymysql.connect(
            host=host or config.db_host,
            port=port or config.db_port,
            user=user or config.db_user,
            password=password if password is not None else config.db_password,
            database=database or config.db_name or None,
            connect_timeout=timeout
        )
        conn.close()
        return True
    except pymysql.err.OperationalError as e:
        logger.debug(f"Database not available: {e}")
        return False


def wait_for_database(
    host: str = None,
    port: int = None,
    user: str = None,
    password: str = None,
    database: str = None,
    max_retries: int = 10,
    retry_delay: int = 2,
    timeout: int = 5
) -> bool:
    """
    Wait for the MySQL server to become available with retries.

    Args:
        max_retries: Maximum number of attempts
        retry_delay: Delay between attempts in seconds
        timeout: Connection timeout per attempt in seconds

    Returns:
        True once the server is available

    Raises:
        DatabaseConnectionError: If the server never becomes available
    """
    host = host or config.db_host
    port = port or config.db_port

    logger.info(f"Waiting for MySQL at {host}:{port}...")

    for attempt in range(1, max_retries + 1):
        if check_database_available(host, port, user, password, database, timeout):
            logger.info(f"✅ MySQL is available (attempt {attempt}/{max_retries})")
            return True

        if attempt < max_retries:
            logger.warning(
                f"⏳ MySQL not available yet (attempt {attempt}/{max_retries}), "
                f"retrying in {retry_delay}s..."
            )
            time.sleep(retry_delay)

    error_msg = f"MySQL at {host}:{port} did not become available after {max_retries} attempts"
    logger.error(f"❌ {error_msg}")
    raise DatabaseConnectionError(error_msg)
