"""
Binding record instances ("beans") to parameterized statements and back.

A record is any object whose persisted properties are described by a
`Schema`; values are read and written only through each field's accessor.

Parameter values are always collected in schema field order, the same order
`insert_placeholders` / `update_placeholders` emit their markers in.
"""
import logging
from collections.abc import Callable
from typing import Any

from schemadb.cursor import execute_params, managed_cursor
from schemadb.exceptions import BindingError, MissingGeneratedKeyError
from schemadb.exceptions import SchemaError
from schemadb.schema import Field, Schema
from schemadb.sql import build_insert_sql, build_select_sql, build_update_sql
from schemadb.sql import quote_identifier
from schemadb.strategy import get_db_strategy
from schemadb.types import convert_row, to_column_value

logger = logging.getLogger(__name__)

__all__ = [
    'insert_bean',
    'update_bean',
    'load_bean',
    'select_bean',
    'bind_values',
]


def _read_property(field: Field, record: Any) -> Any:
    try:
        return field.get(record)
    except Exception as e:
        raise BindingError(
            f"Couldn't get property {field.property_name} of {type(record).__name__} object",
            field_name=field.name, record_type=type(record)) from e


def _write_property(field: Field, record: Any, value: Any) -> None:
    try:
        field.set(record, value)
    except Exception as e:
        raise BindingError(
            f"Couldn't set property {field.property_name} of {type(record).__name__} object",
            field_name=field.name, record_type=type(record)) from e


def bind_values(record: Any, schema: Schema, include_identity: bool = False) -> list[Any]:
    """Collect driver-ready parameter values from a record in field order.

    Raises
        BindingError: If a property cannot be read
    """
    return [
        to_column_value(_read_property(field, record))
        for field in schema
        if include_identity or not field.is_identity
    ]


def insert_bean(cn: Any, record: Any, schema: Schema, table: str) -> None:
    """Store a record as a new row.

    The identity column (if any) is inserted as NULL so the database assigns
    it; the generated key is then written back into the record. The record
    is left untouched if anything fails before the key is known.

    Args:
        cn: Database connection
        record: The record to store
        schema: The record type's schema
        table: The table to store the record in

    Raises
        BindingError: If a property cannot be read or the key cannot be set
        MissingGeneratedKeyError: If the driver returned no generated key
    """
    strategy = get_db_strategy(cn)
    sql = build_insert_sql(schema, table, strategy.dialect_name)
    params = bind_values(record, schema)

    with managed_cursor(cn) as cursor:
        execute_params(cn, cursor, sql, params)

        identity = schema.identity_field
        if identity is None:
            return

        key = strategy.fetch_generated_key(cursor)
        if key is None:
            raise MissingGeneratedKeyError(
                f"Couldn't get generated id for {type(record).__name__}")

    _write_property(identity, record, key)
    logger.debug(f'Inserted {type(record).__name__} into {table} with {identity.name}={key}')


def update_bean(cn: Any, record: Any, schema: Schema, table: str) -> int:
    """Update every non-identity column of the row identified by the record's identity.

    Returns
        Number of rows affected

    Raises
        SchemaError: If the schema has no identity field
        BindingError: If a property cannot be read
    """
    identity = schema.identity_field
    if identity is None:
        raise SchemaError(f'Cannot update {table}: schema has no identity field')

    strategy = get_db_strategy(cn)
    sql = build_update_sql(schema, table, strategy.dialect_name)
    params = bind_values(record, schema)
    params.append(to_column_value(_read_property(identity, record)))

    with managed_cursor(cn) as cursor:
        rowcount = execute_params(cn, cursor, sql, params)

    logger.debug(f'Updated {rowcount} row(s) in {table}')
    return rowcount


def load_bean(record: Any, schema: Schema, row: Any) -> Any:
    """Populate a record from a fetched row.

    Sequence rows are read positionally in field order, mapping rows by
    field name. The whole row is converted before any property is written,
    so a value that does not convert leaves the record untouched.

    Raises
        ConversionError: If a value does not fit its field type
        BindingError: If a property cannot be written
    """
    values = convert_row(schema, row)
    for field in schema:
        _write_property(field, record, values[field.name])
    return record


def select_bean(cn: Any, schema: Schema, table: str, key: int,
                factory: Callable[[], Any] | None = None) -> Any | None:
    """Fetch the row with the given identity value into a new record.

    Args:
        factory: Zero-argument callable creating an empty record, defaults
            to the schema's record_type

    Returns
        The loaded record, or None if no row has that key
    """
    identity = schema.identity_field
    if identity is None:
        raise SchemaError(f'Cannot select from {table} by key: schema has no identity field')

    factory = factory or schema.record_type
    if factory is None:
        raise SchemaError(f'Cannot create records for {table}: no factory or record_type')

    dialect = get_db_strategy(cn).dialect_name
    where = f'{quote_identifier(identity.name, dialect)} = ?'
    sql = build_select_sql(schema, table, dialect, where=where)

    with managed_cursor(cn) as cursor:
        execute_params(cn, cursor, sql, (key,))
        row = cursor.fetchone()

    if row is None:
        return None
    return load_bean(factory(), schema, row)
