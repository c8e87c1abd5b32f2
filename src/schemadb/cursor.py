"""
Cursor lifecycle and statement execution.

Every cursor is scoped to a single operation: acquired immediately before
the statement runs and released on every exit path via `close_quietly`.
"""
import logging
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from functools import wraps
from typing import Any

from schemadb.strategy import get_db_strategy
from schemadb.utils import close_quietly, get_raw_connection

logger = logging.getLogger(__name__)

__all__ = [
    'managed_cursor',
    'execute_sql',
    'execute_params',
    'dumpsql',
]


def dumpsql(func):
    """Decorator for logging SQL statements, parameter counts and timing."""
    @wraps(func)
    def wrapper(cn: Any, cursor: Any, sql: str, *args: Any, **kwargs: Any):
        start = time.time()
        params = args[0] if args else None
        logger.debug(f'SQL:\n{sql}\nparams: {len(params) if params else 0}')
        try:
            return func(cn, cursor, sql, *args, **kwargs)
        except Exception:
            logger.error(f'Error with query:\nSQL:\n{sql}')
            raise
        finally:
            elapsed = time.time() - start
            if hasattr(cn, 'addcall'):
                cn.addcall(elapsed)
            logger.debug(f'Query time: {elapsed:.4f}s')
    return wrapper


@contextmanager
def managed_cursor(cn: Any) -> Iterator[Any]:
    """Acquire a DBAPI cursor and release it however the block exits."""
    cursor = get_raw_connection(cn).cursor()
    try:
        yield cursor
    finally:
        close_quietly(cursor)


@dumpsql
def _execute(cn: Any, cursor: Any, sql: str, params: Sequence | None = None) -> int:
    """Run one statement on an open cursor and return its rowcount."""
    if params is None:
        cursor.execute(sql)
    else:
        sql = get_db_strategy(cn).standardize_sql(sql)
        cursor.execute(sql, tuple(params))
    return cursor.rowcount


def execute_sql(cn: Any, sql: str) -> None:
    """Execute a literal SQL statement.

    There is no provision for binding parameters or getting results; used
    for DDL and other fire-and-forget statements.
    """
    with managed_cursor(cn) as cursor:
        _execute(cn, cursor, sql)


def execute_params(cn: Any, cursor: Any, sql: str, params: Sequence) -> int:
    """Execute a statement with `?` placeholders on an open cursor.

    Placeholders are converted to the connection's driver style first.
    """
    return _execute(cn, cursor, sql, params)
