"""
Schema-driven relational persistence for MySQL and SQLite.

A `Schema` describes a record type's persisted fields; from it this package
derives CREATE TABLE statements and INSERT/UPDATE placeholder fragments,
binds record values to statement parameters and converts driver values back
to field values.

All operations can be called either as:
- Module functions: db.insert_bean(cn, record, schema, table)
- ConnectionWrapper methods: cn.insert_bean(record, schema, table)

Operations accept a ConnectionWrapper, a SQLAlchemy connection or a raw
DBAPI connection (pymysql, sqlite3).
"""
__version__ = '0.1.0'

from schemadb.bean import insert_bean, load_bean, select_bean, update_bean
from schemadb.connection import ConnectionWrapper, connect, connect_server
from schemadb.cursor import execute_sql
from schemadb.ddl import create_database, create_database_sql, create_table
from schemadb.ddl import create_table_sql, drop_table, get_table_columns
from schemadb.ddl import verify_table
from schemadb.exceptions import BindingError, ConversionError, DatabaseError
from schemadb.exceptions import DbConnectionError, IntegrityError
from schemadb.exceptions import MissingGeneratedKeyError, OperationalError
from schemadb.exceptions import ProgrammingError, SchemaError
from schemadb.exceptions import UnsupportedTypeError, ValidationError
from schemadb.options import DatabaseOptions
from schemadb.schema import UNBOUNDED, AttributeAccessor, Field, FieldType
from schemadb.schema import IndexType, ItemAccessor, Schema
from schemadb.sql import insert_placeholders, update_placeholders
from schemadb.types import from_column_value, sql_type, to_column_value

__all__ = [
    'connect',
    'connect_server',
    'ConnectionWrapper',
    'DatabaseOptions',
    'Schema',
    'Field',
    'FieldType',
    'IndexType',
    'AttributeAccessor',
    'ItemAccessor',
    'UNBOUNDED',
    'create_table_sql',
    'create_table',
    'create_database_sql',
    'create_database',
    'drop_table',
    'get_table_columns',
    'verify_table',
    'insert_placeholders',
    'update_placeholders',
    'sql_type',
    'to_column_value',
    'from_column_value',
    'execute_sql',
    'insert_bean',
    'update_bean',
    'load_bean',
    'select_bean',
    'DatabaseError',
    'ValidationError',
    'SchemaError',
    'UnsupportedTypeError',
    'ConversionError',
    'BindingError',
    'MissingGeneratedKeyError',
    'DbConnectionError',
    'IntegrityError',
    'ProgrammingError',
    'OperationalError',
]
