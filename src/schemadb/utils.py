"""Low-level connection utilities with no internal dependencies.

These utilities work with any connection type (ConnectionWrapper, SQLAlchemy
connections, raw DBAPI connections) and import nothing else from schemadb,
so every other module can use them without circular imports.
"""
import logging
from typing import Any

logger = logging.getLogger(__name__)


def get_dialect_name(obj: Any) -> str:
    """Get dialect name for a database connection or engine.
    """
    if hasattr(obj, 'dialect'):
        dialect = obj.dialect
        if isinstance(dialect, str):
            return dialect.lower()
        return str(dialect.name).lower()

    if hasattr(obj, 'engine') and hasattr(obj.engine, 'dialect'):
        return str(obj.engine.dialect.name).lower()

    if hasattr(obj, 'dbapi_connection'):
        return get_dialect_name(obj.dbapi_connection)

    type_name = f'{type(obj).__module__}.{type(obj).__name__}'
    if 'pymysql' in type_name or 'mysql' in type_name.lower():
        return 'mysql'
    if 'sqlite3' in type_name:
        return 'sqlite'

    raise AttributeError(f'Cannot determine dialect for {type(obj)}')


def get_raw_connection(connection: Any) -> Any:
    """Extract the raw DBAPI connection from a wrapper.

    Accepts a ConnectionWrapper, a SQLAlchemy Connection, a pooled
    connection proxy or a raw DBAPI connection.
    """
    if hasattr(connection, 'exec_driver_sql'):
        connection = connection.connection
    if hasattr(connection, 'dbapi_connection'):
        connection = connection.dbapi_connection
    return connection


def close_quietly(handle: Any) -> None:
    """Release a cursor or result handle, logging instead of raising.
    """
    if handle is None:
        return
    try:
        handle.close()
    except Exception as e:
        logger.error(f'Unable to close {type(handle).__name__}: {e}')
