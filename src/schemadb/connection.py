"""
Database connection handling with SQLAlchemy.

This module provides:
1. The `connect()` function for opening a connection from DatabaseOptions
2. The `ConnectionWrapper` class that tracks statement statistics and
   exposes the schema operations as methods
3. `connect_server()` for connecting without selecting a database, which is
   what `create_database()` needs

Connections are never pooled: each `connect()` builds an engine with
`NullPool` and closing the wrapper closes the DBAPI connection. The raw
connection runs in auto-commit mode; transactions belong to the caller.
"""
import logging
from dataclasses import replace
from typing import Any, Self

import sqlalchemy as sa
from schemadb.bean import insert_bean, select_bean, update_bean
from schemadb.cursor import execute_sql
from schemadb.ddl import create_database, create_table, drop_table, verify_table
from schemadb.options import DatabaseOptions
from schemadb.schema import Schema
from schemadb.strategy import get_strategy
from schemadb.utils import get_dialect_name
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool

__all__ = [
    'ConnectionWrapper',
    'connect',
    'connect_server',
    'create_url_from_options',
    'create_engine_for_options',
]

logger = logging.getLogger(__name__)


def create_url_from_options(options: DatabaseOptions) -> sa.URL:
    """Convert DatabaseOptions to SQLAlchemy URL.
    """
    return get_strategy(options.drivername).build_connection_url(options)


def create_engine_for_options(options: DatabaseOptions, **kwargs: Any) -> Engine:
    """Create an unpooled SQLAlchemy engine for the given options.
    """
    strategy = get_strategy(options.drivername)
    engine_kwargs: dict[str, Any] = {'echo': False, 'poolclass': NullPool}
    engine_kwargs.update(strategy.get_engine_kwargs(options))
    engine_kwargs.update(kwargs)
    return sa.create_engine(create_url_from_options(options), **engine_kwargs)


class ConnectionWrapper:
    """Wraps a SQLAlchemy connection object to track calls and execution time

    This class provides a thin wrapper around SQLAlchemy connection objects that:
    1. Tracks statement counts and timing
    2. Supports context manager protocol for explicit resource management
    3. Provides access to the underlying DBAPI connection
    4. Offers the schema operations (create_table, insert_bean, ...) as methods
    """

    def __init__(self, sa_connection: sa.engine.Connection,
                 options: DatabaseOptions | None = None) -> None:
        """Initialize a connection wrapper
        """
        self.sa_connection = sa_connection
        self.engine = sa_connection.engine
        self.options = options
        self.dbapi_connection = sa_connection.connection.dbapi_connection
        self._dialect = get_dialect_name(sa_connection)
        self.calls = 0
        self.time = 0

    def __enter__(self) -> Self:
        """Support for context manager protocol
        """
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None,
                 exc_tb: Any | None) -> None:
        """Close the connection when exiting the context manager
        """
        try:
            self.close()
            logger.debug('Closed connection via context manager')
        except Exception as e:
            logger.debug(f'Error closing connection in __exit__: {e}')

    @property
    def dialect(self) -> str:
        """Return the dialect name ('mysql' or 'sqlite')."""
        return self._dialect

    @property
    def closed(self) -> bool:
        return self.sa_connection.closed

    def cursor(self) -> Any:
        """Get a raw DBAPI cursor for this connection
        """
        return self.dbapi_connection.cursor()

    def addcall(self, elapsed: float) -> None:
        """Track execution statistics
        """
        self.time += elapsed
        self.calls += 1

    def commit(self) -> None:
        self.dbapi_connection.commit()

    def rollback(self) -> None:
        self.dbapi_connection.rollback()

    def close(self) -> None:
        """Close the SQLAlchemy connection and dispose of its engine
        """
        if not self.sa_connection.closed:
            self.sa_connection.close()
            self.engine.dispose()
            logger.debug(f'Connection closed: {self.calls} statements in {self.time:.2f}s')

    def execute_sql(self, sql: str) -> None:
        """Execute a literal SQL statement.
        """
        execute_sql(self, sql)

    def create_table(self, table: str, schema: Schema) -> None:
        """Create a database table for the schema.
        """
        create_table(self, table, schema)

    def drop_table(self, table: str) -> None:
        drop_table(self, table)

    def create_database(self, name: str) -> None:
        create_database(self, name)

    def verify_table(self, table: str, schema: Schema) -> None:
        verify_table(self, table, schema)

    def insert_bean(self, record: Any, schema: Schema, table: str) -> None:
        """Store a record, writing any generated key back into it.
        """
        insert_bean(self, record, schema, table)

    def update_bean(self, record: Any, schema: Schema, table: str) -> int:
        return update_bean(self, record, schema, table)

    def select_bean(self, schema: Schema, table: str, key: int, factory: Any = None) -> Any:
        return select_bean(self, schema, table, key, factory)


def configure_connection(sa_connection: sa.engine.Connection) -> None:
    """Configure a SQLAlchemy connection with dialect-specific settings.
    """
    strategy = get_strategy(get_dialect_name(sa_connection))
    strategy.configure_connection(sa_connection.connection.dbapi_connection)


def connect(options: DatabaseOptions | dict[str, Any] | None = None,
            **kw: Any) -> ConnectionWrapper:
    """Connect to a database using SQLAlchemy for connection management

    Args:
        options: Can be:
                - DatabaseOptions object
                - Dictionary of options
                - None, with options specified as keyword arguments
        **kw: Additional keyword arguments to override options

    Returns
        ConnectionWrapper object for connecting to the database
    """
    if options is None:
        options = DatabaseOptions(**kw)
    elif isinstance(options, DatabaseOptions):
        if kw:
            options = replace(options, **kw)
    else:
        options = DatabaseOptions(**{**options, **kw})

    engine = create_engine_for_options(options)
    sa_connection = engine.connect()
    configure_connection(sa_connection)
    logger.debug(f'Connected to {options.drivername} database {options.database}')

    return ConnectionWrapper(sa_connection, options)


def connect_server(options: DatabaseOptions) -> ConnectionWrapper:
    """Connect to the database server without selecting a database.
    """
    return connect(options, database=None)
