"""
MySQL-specific strategy implementation.

This is the primary dialect. It renders:
- backtick-quoted identifiers
- `AUTO_INCREMENT` identity columns with a `PRIMARY KEY` clause
- `UNIQUE KEY` / `KEY` clauses named after their column
- fixed `ENGINE=InnoDB DEFAULT CHARSET=utf8` table options
- utf8 / utf8_general_ci database defaults

Parameters are bound by pymysql, which uses the `format` paramstyle (%s).
"""
import logging
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from schemadb.schema import Field, FieldType, IndexType
from schemadb.strategy.base import DatabaseStrategy, register_strategy

if TYPE_CHECKING:
    from schemadb.options import DatabaseOptions

logger = logging.getLogger(__name__)

mysql_types = {
    FieldType.TEXT: 'varchar({size})',
    FieldType.SHORT: 'mediumint(9)',
    FieldType.INTEGER: 'int(11)',
    FieldType.LONG: 'bigint(20)',
    FieldType.BOOLEAN: 'tinyint(1)',
    # Enumeration values are stored as their ordinal
    FieldType.ENUM: 'int(11)',
    }

TABLE_OPTIONS = ' ENGINE=InnoDB DEFAULT CHARSET=utf8'
DATABASE_CHARSET = 'utf8'
DATABASE_COLLATION = 'utf8_general_ci'


@register_strategy('mysql')
class MySQLStrategy(DatabaseStrategy):
    """MySQL-specific operations.
    """

    @property
    def dialect_name(self) -> str:
        """Return the dialect identifier for MySQL."""
        return 'mysql'

    def build_connection_url(self, options: 'DatabaseOptions') -> sa.URL:
        """Build the SQLAlchemy connection URL for MySQL via pymysql."""
        return sa.URL.create(
            drivername='mysql+pymysql',
            username=options.username,
            password=options.password,
            host=options.hostname,
            port=options.port or None,
            database=options.database or None,
            query={'charset': options.charset},
        )

    def get_engine_kwargs(self, options: 'DatabaseOptions') -> dict[str, Any]:
        """Return SQLAlchemy create_engine kwargs for MySQL."""
        if options.timeout:
            return {'connect_args': {'connect_timeout': options.timeout}}
        return {}

    @classmethod
    def get_required_options(cls) -> list[str]:
        """Return required options for MySQL connections."""
        return ['hostname', 'username']

    def enable_autocommit(self, raw_conn: Any) -> None:
        """Enable auto-commit mode for pymysql.
        """
        raw_conn.autocommit(True)

    def get_type_map(self) -> dict[FieldType, str]:
        """Return mapping of semantic field types to MySQL column types."""
        return mysql_types

    def get_text_type(self) -> str:
        return 'text'

    def identity_suffix(self) -> str:
        return ' AUTO_INCREMENT'

    def key_definition(self, field: Field) -> str | None:
        """Render PRIMARY KEY, UNIQUE KEY or KEY for an indexed field.
        """
        quoted = self.quote_identifier(field.name)
        if field.index_type is IndexType.IDENTITY:
            return f'PRIMARY KEY ({quoted})'
        if field.index_type is IndexType.UNIQUE:
            return f'UNIQUE KEY {quoted} ({quoted})'
        if field.index_type is IndexType.NON_UNIQUE:
            return f'KEY {quoted} ({quoted})'
        return None

    def table_options(self) -> str:
        return TABLE_OPTIONS

    def build_create_database_sql(self, name: str) -> str:
        """Generate CREATE DATABASE with the utf8 defaults.
        """
        quoted = self.quote_identifier(name)
        return f"CREATE DATABASE {quoted} CHARACTER SET '{DATABASE_CHARSET}' COLLATE '{DATABASE_COLLATION}'"

    def get_columns(self, cn: Any, table: str) -> list[str]:
        """Get all columns for a table in the current database.
        """
        sql = """
select column_name from information_schema.columns
where table_schema = database() and table_name = ?
order by ordinal_position
"""
        return self._select_column_raw(cn, sql, (table,))
