"""
=============================================
Configuration management for the query builder.
=============================================

Loads connection and builder settings from environment variables (.env file)
and provides a centralized Config singleton for library-wide access.

The configuration system ensures:
- Single source of truth for connection defaults
- Type conversion of numeric settings
- Construction-time overrides merged over environment values

Example:
    >>> from core.config import config
    >>>
    >>> # Database connection
    >>> engine_url = config.get_connection_string()
    >>>
    >>> # Access individual settings
    >>> print(f"Host: {config.db_host}, Port: {config.db_port}")
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


@dataclass
class DatabaseConfig:
    """Database configuration settings.

    Attributes:
        host: MySQL server hostname or IP address
        port: MySQL server port number
        user: Database username
        password: Database password
        database: Default database (schema) name
    """

    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_environment(cls) -> 'DatabaseConfig':
        """Build settings from MYSQL_* environment variables."""
        return cls(
            host=os.getenv('MYSQL_HOST', 'localhost'),
            port=int(os.getenv('MYSQL_PORT', '3306')),
            user=os.getenv('MYSQL_USER', 'root'),
            password=os.getenv('MYSQL_PASSWORD', ''),
            database=os.getenv('MYSQL_DATABASE', '')
        )

    @classmethod
    def from_mapping(
        cls,
        params: Optional[Mapping[str, Any]],
        fallback: Optional['DatabaseConfig'] = None
    ) -> 'DatabaseConfig':
        """Build settings from a construction-time mapping.

        Keys missing from ``params`` are taken from ``fallback`` (or the
        environment when no fallback is given). ``db`` is accepted as an
        alias for ``database``.

        Args:
            params: Mapping with any of host, port, user, password, database
            fallback: Settings used for missing keys

        Returns:
            New DatabaseConfig instance
        """
        base = fallback or cls.from_environment()
        params = dict(params or {})
        if 'db' in params and 'database' not in params:
            params['database'] = params.pop('db')
        return cls(
            host=params.get('host', base.host),
            port=int(params.get('port', base.port)),
            user=params.get('user', base.user),
            password=params.get('password', base.password),
            database=params.get('database', base.database)
        )

    def get_connection_string(self) -> str:
        """Get MySQL connection string.

        Returns:
            SQLAlchemy-compatible mysql+pymysql connection string
        """
        return (
            f"mysql+pymysql://{self.user}:{quote_plus(self.password)}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    def get_connection_params(self) -> dict:
        """Get connection parameters as dictionary.

        Returns:
            Dictionary with keys: host, port, user, password, database
        """
        return {
            'host': self.host,
            'port': self.port,
            'user': self.user,
            'password': self.password,
            'database': self.database
        }


@dataclass
class BuilderConfig:
    """Query builder behaviour settings.

    Attributes:
        method: Connection method, 'pool' or 'single'
        pool_size: Connections kept in the pool
        max_overflow: Extra connections allowed above pool_size
        order_column: Default column for order_by_asc/desc without columns
        log_level: Default logging level
    """

    method: str
    pool_size: int
    max_overflow: int
    order_column: Optional[str]
    log_level: str


class Config:
    """Centralized configuration manager.

    Attributes:
        db: DatabaseConfig instance with connection settings
        builder: BuilderConfig instance with builder defaults

    Example:
        >>> config = Config()
        >>> conn_str = config.get_connection_string()
        >>> print(f"Connecting to {config.db_host}:{config.db_port}")
    """

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.db = DatabaseConfig.from_environment()

        self.builder = BuilderConfig(
            method=os.getenv('QB_CONNECTION_METHOD', 'pool'),
            pool_size=int(os.getenv('QB_POOL_SIZE', '5')),
            max_overflow=int(os.getenv('QB_MAX_OVERFLOW', '10')),
            order_column=os.getenv('QB_ORDER_COLUMN') or None,
            log_level=os.getenv('QB_LOG_LEVEL', 'INFO')
        )

    @property
    def db_host(self) -> str:
        """Get database server hostname."""
        return self.db.host

    @property
    def db_port(self) -> int:
        """Get database server port number."""
        return self.db.port

    @property
    def db_user(self) -> str:
        """Get database username."""
        return self.db.user

    @property
    def db_password(self) -> str:
        """Get database password."""
        return self.db.password

    @property
    def db_name(self) -> str:
        """Get default database name."""
        return self.db.database

    def get_connection_string(self) -> str:
        """Get database connection string.

        Returns:
            SQLAlchemy-compatible MySQL connection string
        """
        return self.db.get_connection_string()

    def get_connection_params(self) -> dict:
        """Get database connection parameters."""
        return self.db.get_connection_params()


# Global configuration instance
config = Config()
