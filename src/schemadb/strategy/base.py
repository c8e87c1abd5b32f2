"""
Base strategy interface for dialect-specific SQL.

Defines the abstract base class that every dialect strategy inherits from.
The strategy owns everything that differs between database engines (type
keywords, identifier quoting, key clauses, table options, placeholder style,
connection URLs) while the CREATE TABLE algorithm itself lives here, so all
dialects share the same column-order and key-clause contract:

1. one column clause per field, in field order
2. one key clause per indexed field, in field order
3. fixed table options
"""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from schemadb.exceptions import UnsupportedTypeError
from schemadb.schema import UNBOUNDED, Field, FieldType, IndexType, Schema
from schemadb.sql import quote_identifier as sql_quote_identifier
from schemadb.sql import standardize_placeholders
from schemadb.utils import close_quietly, get_raw_connection

if TYPE_CHECKING:
    import sqlalchemy as sa
    from schemadb.options import DatabaseOptions

logger = logging.getLogger(__name__)

# Registry of dialect name -> strategy class
# Defined here to avoid circular imports (concrete strategies import from base)
_STRATEGY_REGISTRY: dict[str, type['DatabaseStrategy']] = {}


def register_strategy(dialect: str):
    """Decorator to register a strategy class for a dialect.

    Usage:
        @register_strategy('mysql')
        class MySQLStrategy(DatabaseStrategy):
            ...
    """
    def decorator(cls: type['DatabaseStrategy']) -> type['DatabaseStrategy']:
        _STRATEGY_REGISTRY[dialect] = cls
        return cls
    return decorator


class DatabaseStrategy(ABC):
    """Base class for dialect-specific operations.
    """

    @contextmanager
    def _cursor(self, cn: Any, sql: str, params: tuple | None = None):
        """Context manager for cursor lifecycle with SQL standardization.

        Handles cursor creation, SQL execution, and cleanup.
        """
        cursor = get_raw_connection(cn).cursor()
        try:
            cursor.execute(self.standardize_sql(sql), params or ())
            yield cursor
        finally:
            close_quietly(cursor)

    def _select_column_raw(self, cn: Any, sql: str,
                           params: tuple | None = None) -> list:
        """Execute SQL and return first column as list.
        """
        with self._cursor(cn, sql, params) as cursor:
            return [row[0] for row in cursor.fetchall()]

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the dialect identifier (e.g., 'mysql', 'sqlite')."""

    @abstractmethod
    def build_connection_url(self, options: 'DatabaseOptions') -> 'sa.URL':
        """Build the SQLAlchemy connection URL for this dialect.

        Args:
            options: DatabaseOptions containing connection parameters
        """

    def get_engine_kwargs(self, options: 'DatabaseOptions') -> dict[str, Any]:
        """Return SQLAlchemy create_engine kwargs for this dialect."""
        return {}

    @classmethod
    @abstractmethod
    def get_required_options(cls) -> list[str]:
        """Return list of required option field names for this dialect.
        """

    @classmethod
    def validate_options(cls, options: 'DatabaseOptions') -> None:
        """Validate options for this dialect.

        Raises
            ValueError: If any required field is None or 0
        """
        for field in cls.get_required_options():
            if not getattr(options, field):
                raise ValueError(f'field {field} cannot be None or 0')

    def configure_connection(self, raw_conn: Any) -> None:
        """Configure a freshly opened raw DBAPI connection.

        The core never commits, so connections run in auto-commit mode.
        """
        self.enable_autocommit(raw_conn)

    @abstractmethod
    def enable_autocommit(self, raw_conn: Any) -> None:
        """Enable auto-commit mode on a raw database connection.
        """

    @abstractmethod
    def get_type_map(self) -> dict[FieldType, str]:
        """Return mapping of semantic field types to column type keywords.

        TEXT maps to a bounded string template containing `{size}`; the
        large-text keyword for UNBOUNDED text comes from `get_text_type()`.
        """

    @abstractmethod
    def get_text_type(self) -> str:
        """Return the large-text column keyword."""

    def sql_type(self, field: Field) -> str:
        """Map a field's semantic type and size to a column type keyword.

        Raises
            UnsupportedTypeError: If the field type has no mapping
        """
        field_type = field.field_type
        if field_type is FieldType.TEXT and field.size == UNBOUNDED:
            return self.get_text_type()

        template = self.get_type_map().get(field_type) if isinstance(field_type, FieldType) else None
        if template is None:
            name = getattr(field_type, 'name', field_type)
            raise UnsupportedTypeError(
                f'Unknown field type for {self.dialect_name}: {name} ({field.name})')
        return template.format(size=field.size)

    def quote_identifier(self, identifier: str) -> str:
        """Quote a database identifier for this dialect."""
        return sql_quote_identifier(identifier, self.dialect_name)

    def standardize_sql(self, sql: str) -> str:
        """Convert `?` placeholders to this dialect's driver style."""
        return standardize_placeholders(sql, self.dialect_name)

    def column_definition(self, field: Field) -> str:
        """Render one column clause: `<name> <type> NULL|NOT NULL`."""
        nullability = 'NULL' if field.allow_null else 'NOT NULL'
        clause = f'{self.quote_identifier(field.name)} {self.sql_type(field)} {nullability}'
        if field.is_identity:
            clause += self.identity_suffix()
        return clause

    def identity_suffix(self) -> str:
        """Text appended to the identity column clause."""
        return ''

    @abstractmethod
    def key_definition(self, field: Field) -> str | None:
        """Render the key clause for an indexed field, or None if the field
        needs no clause inside CREATE TABLE.
        """

    def table_options(self) -> str:
        """Fixed storage options appended after the closing parenthesis."""
        return ''

    def build_create_table_sql(self, schema: Schema, table: str) -> str:
        """Generate the CREATE TABLE statement for a schema.

        Deterministic: the same schema and table always produce the same text.
        """
        clauses = [self.column_definition(field) for field in schema]

        for field in schema:
            if field.index_type is IndexType.NONE:
                continue
            key = self.key_definition(field)
            if key is not None:
                clauses.append(key)

        body = ',\n  '.join(clauses)
        return f'CREATE TABLE {self.quote_identifier(table)} (\n  {body}\n){self.table_options()}'

    def build_index_sql(self, schema: Schema, table: str) -> list[str]:
        """Statements creating indexes that cannot be declared inline."""
        return []

    @abstractmethod
    def build_create_database_sql(self, name: str) -> str:
        """Generate the CREATE DATABASE statement for this dialect."""

    def build_drop_table_sql(self, table: str) -> str:
        return f'DROP TABLE IF EXISTS {self.quote_identifier(table)}'

    def fetch_generated_key(self, cursor: Any) -> int | None:
        """Return the identity value generated by the last INSERT on cursor.

        DBAPI drivers report it as `lastrowid`; a missing value (None or 0)
        means no key was generated.
        """
        key = getattr(cursor, 'lastrowid', None)
        return int(key) if key else None

    @abstractmethod
    def get_columns(self, cn: Any, table: str) -> list[str]:
        """Get all column names for a table, ordered by position.
        """
