"""
SQL text generation from schema descriptors.

Placeholder fragments are always written with the `?` marker. Drivers that
use the `format` paramstyle (pymysql) get their `%s` markers from
`standardize_placeholders()` immediately before execution.

Main entry points:
- `insert_placeholders(schema, include_identity)` - VALUES (...) fragment
- `update_placeholders(schema, include_identity)` - SET ... fragment
- `build_insert_sql()` / `build_update_sql()` / `build_select_sql()`
- `quote_identifier()` - Quote table/column names for a dialect
- `standardize_placeholders()` - Convert ? <-> %s for a dialect

Column order in every statement built here is the schema's field order, and
it is the same order the bean binder uses when collecting parameter values.
"""
import re
from typing import TYPE_CHECKING

from schemadb.exceptions import SchemaError

if TYPE_CHECKING:
    from schemadb.schema import Schema

__all__ = [
    'quote_identifier',
    'make_placeholders',
    'insert_placeholders',
    'update_placeholders',
    'standardize_placeholders',
    'build_insert_sql',
    'build_update_sql',
    'build_select_sql',
]

PLACEHOLDER = '?'

# String literals and quoted identifiers are copied through untouched
_TOKENIZE = re.compile(r"""
    (?P<string>'(?:[^'\\]|\\.|'')*')
    |(?P<ident>`(?:[^`]|``)*`|"(?:[^"]|"")*")
    |(?P<percent_s>%s)
    |(?P<qmark>\?)
""", re.VERBOSE)


def quote_identifier(identifier: str, dialect: str = 'mysql') -> str:
    """Safely quote database identifiers.

    Parameters
        identifier: Table or column name
        dialect: Database dialect

    Returns
        Quoted identifier

    Raises
        ValueError: If dialect is unsupported
    """
    if dialect == 'mysql':
        return '`' + identifier.replace('`', '``') + '`'

    if dialect == 'sqlite':
        return '"' + identifier.replace('"', '""') + '"'

    raise ValueError(f'Unknown dialect: {dialect}')


def make_placeholders(count: int) -> str:
    """Return `count` comma-separated placeholders."""
    return ', '.join([PLACEHOLDER] * count)


def insert_placeholders(schema: 'Schema', include_identity: bool = True) -> str:
    """Get placeholders for an insert statement, one per field in field order.

    When `include_identity` is False the identity field's slot holds a literal
    NULL, so an auto-increment column assigns the value itself while the
    column list still lines up with every field.
    """
    return ', '.join(
        'NULL' if field.is_identity and not include_identity else PLACEHOLDER
        for field in schema
    )


def update_placeholders(schema: 'Schema', include_identity: bool = True,
                        dialect: str | None = None) -> str:
    """Get `name = ?` assignments for an update statement, in field order.

    When `include_identity` is False the identity field is left out entirely.
    Names are left bare unless a `dialect` is given to quote them for.
    """
    def column(name: str) -> str:
        return quote_identifier(name, dialect) if dialect else name

    return ', '.join(
        f'{column(field.name)} = {PLACEHOLDER}'
        for field in schema
        if include_identity or not field.is_identity
    )


def standardize_placeholders(sql: str, dialect: str = 'mysql') -> str:
    """Convert positional placeholders to the dialect's driver style.

    MySQL (pymysql) binds with `%s`, so `?` markers become `%s` and any `%`
    inside a string literal or quoted identifier is doubled. SQLite binds with `?`, so `%s` markers
    become `?`. Text inside string literals and quoted identifiers is never
    treated as a placeholder.

    Parameters
        sql: SQL query string
        dialect: Database dialect

    Returns
        SQL with standardized placeholders
    """
    if not sql:
        return sql

    if dialect == 'mysql':
        target = '%s'
    elif dialect == 'sqlite':
        target = PLACEHOLDER
    else:
        raise ValueError(f'Unknown dialect: {dialect}')

    parts = []
    last_end = 0
    for match in _TOKENIZE.finditer(sql):
        parts.append(sql[last_end:match.start()])
        text = match.group()
        if match.lastgroup in {'percent_s', 'qmark'}:
            text = target
        elif match.lastgroup in {'string', 'ident'} and target == '%s':
            text = text.replace('%', '%%')
        parts.append(text)
        last_end = match.end()
    parts.append(sql[last_end:])
    return ''.join(parts)


def build_insert_sql(schema: 'Schema', table: str, dialect: str = 'mysql',
                     include_identity: bool = False) -> str:
    """Generate an INSERT statement with an explicit column list.

    Returns
        SQL query string with `?` placeholders
    """
    quoted_table = quote_identifier(table, dialect)
    quoted_columns = ', '.join(quote_identifier(f.name, dialect) for f in schema)
    placeholders = insert_placeholders(schema, include_identity)
    return f'INSERT INTO {quoted_table} ({quoted_columns}) VALUES ({placeholders})'


def build_update_sql(schema: 'Schema', table: str, dialect: str = 'mysql') -> str:
    """Generate an UPDATE of every non-identity field, keyed by the identity.

    Parameters bind in field order followed by the identity value.
    """
    identity = schema.identity_field
    if identity is None:
        raise SchemaError(f'Cannot build UPDATE for {table}: schema has no identity field')

    quoted_table = quote_identifier(table, dialect)
    assignments = update_placeholders(schema, include_identity=False, dialect=dialect)
    quoted_identity = quote_identifier(identity.name, dialect)
    return f'UPDATE {quoted_table} SET {assignments} WHERE {quoted_identity} = {PLACEHOLDER}'


def build_select_sql(schema: 'Schema', table: str, dialect: str = 'mysql',
                     where: str | None = None) -> str:
    """Generate a SELECT of every field, in field order.

    Args:
        where: WHERE clause (without 'WHERE' keyword)
    """
    quoted_table = quote_identifier(table, dialect)
    quoted_columns = ', '.join(quote_identifier(f.name, dialect) for f in schema)
    sql = f'SELECT {quoted_columns} FROM {quoted_table}'
    if where:
        sql += f' WHERE {where}'
    return sql
