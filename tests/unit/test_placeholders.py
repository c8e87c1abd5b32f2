import pytest
from schemadb import Field, IndexType, Schema, SchemaError
from schemadb import insert_placeholders, update_placeholders
from schemadb.sql import build_insert_sql, build_select_sql, build_update_sql
from schemadb.sql import make_placeholders


def test_insert_placeholders_with_identity(user_schema):
    assert insert_placeholders(user_schema, include_identity=True) == '?, ?, ?'


def test_insert_placeholders_without_identity(user_schema):
    assert insert_placeholders(user_schema, include_identity=False) == 'NULL, ?, ?'


def test_insert_placeholders_identity_not_first():
    schema = Schema([
        Field('name', str, size=10),
        Field('id', int, index_type=IndexType.IDENTITY),
        Field('active', bool),
        ])
    assert insert_placeholders(schema, include_identity=False) == '?, NULL, ?'


def test_insert_placeholders_no_identity(setting_schema):
    assert insert_placeholders(setting_schema, include_identity=False) == '?, ?'
    assert insert_placeholders(setting_schema, include_identity=True) == '?, ?'


def test_update_placeholders(user_schema):
    assert update_placeholders(user_schema, include_identity=True) == 'id = ?, name = ?, active = ?'
    assert update_placeholders(user_schema, include_identity=False) == 'name = ?, active = ?'


def test_placeholder_count_matches_fields(task_schema):
    assert insert_placeholders(task_schema).count('?') == len(task_schema)
    assert update_placeholders(task_schema).count('?') == len(task_schema)
    assert update_placeholders(task_schema, include_identity=False).count('?') == len(task_schema) - 1


def test_make_placeholders():
    assert make_placeholders(3) == '?, ?, ?'
    assert make_placeholders(0) == ''


def test_build_insert_sql(user_schema):
    sql = build_insert_sql(user_schema, 'users')
    assert sql == 'INSERT INTO `users` (`id`, `name`, `active`) VALUES (NULL, ?, ?)'


def test_build_insert_sql_sqlite(user_schema):
    sql = build_insert_sql(user_schema, 'users', 'sqlite')
    assert sql == 'INSERT INTO "users" ("id", "name", "active") VALUES (NULL, ?, ?)'


def test_build_update_sql(user_schema):
    sql = build_update_sql(user_schema, 'users')
    assert sql == 'UPDATE `users` SET `name` = ?, `active` = ? WHERE `id` = ?'


def test_build_update_sql_requires_identity(setting_schema):
    with pytest.raises(SchemaError):
        build_update_sql(setting_schema, 'settings')


def test_build_select_sql(user_schema):
    assert build_select_sql(user_schema, 'users') == 'SELECT `id`, `name`, `active` FROM `users`'
    sql = build_select_sql(user_schema, 'users', where='`id` = ?')
    assert sql == 'SELECT `id`, `name`, `active` FROM `users` WHERE `id` = ?'


def test_update_placeholders_quoted_for_dialect(user_schema):
    assert update_placeholders(user_schema, include_identity=False, dialect='mysql') == '`name` = ?, `active` = ?'
    assert update_placeholders(user_schema, include_identity=False, dialect='sqlite') == '"name" = ?, "active" = ?'


def test_build_update_sql_sqlite(user_schema):
    sql = build_update_sql(user_schema, 'users', 'sqlite')
    assert sql == 'UPDATE "users" SET "name" = ?, "active" = ? WHERE "id" = ?'
