"""
Schema, binding and conversion exception classes.
"""
import sqlite3

import pymysql


class DatabaseError(Exception):
    """Base class for all schemadb errors.
    """


class ValidationError(DatabaseError):
    """Error in input validation.
    """


class SchemaError(DatabaseError):
    """Schema descriptor violates its invariants or disagrees with a table.
    """


class UnsupportedTypeError(DatabaseError):
    """Field declares a semantic type with no SQL mapping.

    Indicates a misconfigured schema, not bad data.
    """


class ConversionError(DatabaseError):
    """Value returned by the database cannot be coerced to the field type.
    """


class BindingError(DatabaseError):
    """Record property could not be read or written during a statement.
    """

    def __init__(self, message: str, field_name: str | None = None,
                 record_type: type | None = None) -> None:
        super().__init__(message)
        self.field_name = field_name
        self.record_type = record_type


class MissingGeneratedKeyError(DatabaseError):
    """Insert expected a generated identity value but the driver returned none.
    """


DbConnectionError = (
    pymysql.err.OperationalError,
    pymysql.err.InterfaceError,
    sqlite3.OperationalError,
    sqlite3.InterfaceError,
    )

IntegrityError = (
    pymysql.err.IntegrityError,
    sqlite3.IntegrityError,
    )

ProgrammingError = (
    pymysql.err.ProgrammingError,
    sqlite3.ProgrammingError,
    )

OperationalError = (
    pymysql.err.OperationalError,
    sqlite3.OperationalError,
    )
