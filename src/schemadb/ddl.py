"""
Schema definition operations.

This module turns schema descriptors into DDL and runs it:
- CREATE TABLE generation (pure, deterministic string synthesis)
- table and database creation on a live connection
- comparing an existing table's column order against a schema

Column order is the schema's field order throughout; `verify_table` exists
because INSERT statements bind by that order.
"""
import logging
from typing import Any

from schemadb.cursor import execute_sql
from schemadb.exceptions import SchemaError
from schemadb.schema import Schema
from schemadb.strategy import get_db_strategy, get_strategy
from sqlalchemy import inspect
from sqlalchemy.exc import NoSuchTableError

logger = logging.getLogger(__name__)

__all__ = [
    'create_table_sql',
    'create_table',
    'create_database_sql',
    'create_database',
    'drop_table',
    'get_table_columns',
    'verify_table',
]


def create_table_sql(schema: Schema, table: str, dialect: str = 'mysql') -> str:
    """Get a CREATE TABLE statement for a table with the given schema and name.

    Column clauses come first, in field order, followed by key clauses for
    indexed fields in the same order and then the dialect's table options.
    """
    return get_strategy(dialect).build_create_table_sql(schema, table)


def create_table(cn: Any, table: str, schema: Schema) -> None:
    """Create a database table for the schema.

    Indexes the dialect cannot declare inline are created right after.
    """
    strategy = get_db_strategy(cn)
    execute_sql(cn, strategy.build_create_table_sql(schema, table))
    for sql in strategy.build_index_sql(schema, table):
        execute_sql(cn, sql)
    logger.info(f'Created table {table} ({len(schema)} columns)')


def create_database_sql(name: str, dialect: str = 'mysql') -> str:
    """Get a CREATE DATABASE statement using the dialect's default charset."""
    return get_strategy(dialect).build_create_database_sql(name)


def create_database(cn: Any, name: str) -> None:
    """Create a database on the server the connection is attached to.
    """
    execute_sql(cn, get_db_strategy(cn).build_create_database_sql(name))
    logger.info(f'Created database {name}')


def drop_table(cn: Any, table: str) -> None:
    """Drop a table if it exists.
    """
    execute_sql(cn, get_db_strategy(cn).build_drop_table_sql(table))


def get_table_columns(cn: Any, table: str) -> list[str]:
    """Get all column names for a table, ordered by position.

    Uses the SQLAlchemy Inspector when the connection carries a SQLAlchemy
    connection, otherwise the dialect's catalog query.
    """
    sa_connection = getattr(cn, 'sa_connection', None)
    if sa_connection is not None:
        inspector = inspect(sa_connection)
        try:
            return [col['name'] for col in inspector.get_columns(table)]
        except NoSuchTableError:
            return []
    return get_db_strategy(cn).get_columns(cn, table)


def verify_table(cn: Any, table: str, schema: Schema) -> None:
    """Check that a table's columns match the schema's fields in order.

    Raises
        SchemaError: If the table is missing or its column order differs
    """
    columns = get_table_columns(cn, table)
    if not columns:
        raise SchemaError(f'Table {table} does not exist or has no columns')

    expected = list(schema.field_names)
    if [c.lower() for c in columns] != [f.lower() for f in expected]:
        raise SchemaError(
            f'Table {table} columns {columns} do not match schema fields {expected}')
    logger.debug(f'Table {table} matches schema')
