"""
==========================================
Exception hierarchy for the query builder.
==========================================

Every failure raised by the library derives from QueryBuilderError:

- ConfigurationError: unknown database kind or connection method
- DatabaseConnectionError: connection could not be opened or checked out
- UnsupportedValueError: a value has no SQL literal form
- QueryExecutionError: the driver rejected the statement

Driver errors are attached as ``orig`` and chained with ``raise ... from``.
"""

from typing import Optional


class QueryBuilderError(Exception):
    """Base exception for query builder failures."""
    pass


class ConfigurationError(QueryBuilderError):
    """Exception raised for invalid construction options.

    Raised synchronously from QueryBuilder() before any connection
    is attempted.
    """
    pass


class DatabaseConnectionError(QueryBuilderError):
    """Exception raised when a connection cannot be obtained."""

    def __init__(self, message: str, orig: Optional[BaseException] = None):
        super().__init__(message)
        self.orig = orig


class UnsupportedValueError(QueryBuilderError, TypeError):
    """Exception raised for a value that has no SQL literal form, e.g. a mapping."""
    pass


class QueryExecutionError(QueryBuilderError):
    """Exception raised when the database reports a statement failure.

    Attributes:
        sql: Statement that failed
        orig: Native driver exception
    """

    def __init__(
        self,
        message: str,
        sql: Optional[str] = None,
        orig: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.sql = sql
        self.orig = orig
