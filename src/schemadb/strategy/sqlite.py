"""
SQLite-specific strategy implementation.

Keeps the MySQL column-order and key-clause contract within SQLite's
limitations:
- the identity column is declared `INTEGER` so a table-level
  `PRIMARY KEY` makes it the rowid alias, which assigns a key when NULL is
  inserted (the equivalent of AUTO_INCREMENT)
- unique keys become `UNIQUE (...)` table constraints
- non-unique keys cannot be declared inside CREATE TABLE and are created by
  separate `CREATE INDEX` statements
- there are no table storage options and no CREATE DATABASE
"""
import logging
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from schemadb.exceptions import ValidationError
from schemadb.schema import Field, FieldType, IndexType, Schema
from schemadb.strategy.base import DatabaseStrategy, register_strategy

if TYPE_CHECKING:
    from schemadb.options import DatabaseOptions

logger = logging.getLogger(__name__)

sqlite_types = {
    FieldType.TEXT: 'VARCHAR({size})',
    FieldType.SHORT: 'MEDIUMINT',
    FieldType.INTEGER: 'INTEGER',
    FieldType.LONG: 'BIGINT',
    FieldType.BOOLEAN: 'BOOLEAN',
    FieldType.ENUM: 'INTEGER',
    }


@register_strategy('sqlite')
class SQLiteStrategy(DatabaseStrategy):
    """SQLite-specific operations.
    """

    @property
    def dialect_name(self) -> str:
        """Return the dialect identifier for SQLite."""
        return 'sqlite'

    def build_connection_url(self, options: 'DatabaseOptions') -> sa.URL:
        """Build the SQLAlchemy connection URL for SQLite."""
        return sa.URL.create(drivername='sqlite', database=options.database)

    @classmethod
    def get_required_options(cls) -> list[str]:
        """Return required options for SQLite connections."""
        return ['database']

    def enable_autocommit(self, raw_conn: Any) -> None:
        """Enable auto-commit mode for SQLite.
        """
        raw_conn.isolation_level = None

    def get_type_map(self) -> dict[FieldType, str]:
        """Return mapping of semantic field types to SQLite column types."""
        return sqlite_types

    def get_text_type(self) -> str:
        return 'TEXT'

    def sql_type(self, field: Field) -> str:
        """Identity columns must be exactly INTEGER to alias the rowid."""
        if field.is_identity:
            return 'INTEGER'
        return super().sql_type(field)

    def key_definition(self, field: Field) -> str | None:
        """Render PRIMARY KEY or UNIQUE; non-unique keys become indexes.
        """
        quoted = self.quote_identifier(field.name)
        if field.index_type is IndexType.IDENTITY:
            return f'PRIMARY KEY ({quoted})'
        if field.index_type is IndexType.UNIQUE:
            return f'UNIQUE ({quoted})'
        return None

    def build_index_sql(self, schema: Schema, table: str) -> list[str]:
        """Generate CREATE INDEX for every non-unique key, in field order.
        """
        quoted_table = self.quote_identifier(table)
        return [
            f'CREATE INDEX {self.quote_identifier(f"{table}_{field.name}")} '
            f'ON {quoted_table} ({self.quote_identifier(field.name)})'
            for field in schema
            if field.index_type is IndexType.NON_UNIQUE
        ]

    def build_create_database_sql(self, name: str) -> str:
        """SQLite databases are files; there is no CREATE DATABASE.
        """
        raise ValidationError('CREATE DATABASE is not supported in SQLite')

    def get_columns(self, cn: Any, table: str) -> list[str]:
        """Get all columns for a table.
        """
        sql = 'select name from pragma_table_info(?) order by cid'
        return self._select_column_raw(cn, sql, (table,))
