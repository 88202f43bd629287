"""
=======================================================
Core infrastructure package for the query builder.
=======================================================

Centralized configuration, logging and the exception hierarchy used
throughout the library.

Modules:
    config: Configuration management from environment variables
    logger: Centralized logging configuration and utilities
    exceptions: QueryBuilderError and its subclasses

Example:
    >>> from core.config import config
    >>> from core.logger import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info(f"Connecting to {config.db_host}")
"""

__version__ = "0.1.0"
__all__ = [
    'get_logger', 'setup_logging', 'config', 'Config',
    'QueryBuilderError', 'ConfigurationError',
    'DatabaseConnectionError', 'QueryExecutionError', 'UnsupportedValueError'
]

from core.config import Config, config
from core.exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    QueryBuilderError,
    QueryExecutionError,
    UnsupportedValueError,
)
from core.logger import get_logger, setup_logging
