"""
==========================
Utility Functions Package.
==========================

Database connectivity and statement execution for the query builder.

Modules:
    database_utils: engine creation, ExecutionAdapter, availability checks
"""

__version__ = "0.1.0"
__all__ = [
    'ExecutionAdapter',
    'ReturnMode',
    'shape_result',
    'wait_for_database',
    'check_database_available',
    'get_connection_string',
    'create_sqlalchemy_engine'
]

from .database_utils import (
    ExecutionAdapter,
    ReturnMode,
    check_database_available,
    create_sqlalchemy_engine,
    get_connection_string,
    shape_result,
    wait_for_database,
)
