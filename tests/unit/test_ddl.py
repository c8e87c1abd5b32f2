import pytest
import schemadb as db
from schemadb import Field, FieldType, IndexType, Schema, ValidationError
from schemadb.strategy import get_strategy

USERS_DDL = (
    'CREATE TABLE `users` (\n'
    '  `id` int(11) NOT NULL AUTO_INCREMENT,\n'
    '  `name` varchar(50) NOT NULL,\n'
    '  `active` tinyint(1) NOT NULL,\n'
    '  PRIMARY KEY (`id`)\n'
    ') ENGINE=InnoDB DEFAULT CHARSET=utf8'
)

TASKS_DDL = (
    'CREATE TABLE `tasks` (\n'
    '  `id` bigint(20) NOT NULL AUTO_INCREMENT,\n'
    '  `title` varchar(100) NOT NULL,\n'
    '  `status` int(11) NOT NULL,\n'
    '  `owner` varchar(50) NULL,\n'
    '  `notes` text NULL,\n'
    '  `points` mediumint(9) NOT NULL,\n'
    '  PRIMARY KEY (`id`),\n'
    '  UNIQUE KEY `title` (`title`),\n'
    '  KEY `owner` (`owner`)\n'
    ') ENGINE=InnoDB DEFAULT CHARSET=utf8'
)


class TestMySQLCreateTable:

    def test_users_table(self, user_schema):
        assert db.create_table_sql(user_schema, 'users') == USERS_DDL

    def test_users_table_keys(self, user_schema):
        sql = db.create_table_sql(user_schema, 'users')
        assert sql.count('PRIMARY KEY') == 1
        assert 'KEY `active`' not in sql
        assert 'varchar(50)' in sql
        assert 'tinyint(1)' in sql

    def test_key_clauses_follow_field_order(self, task_schema):
        assert db.create_table_sql(task_schema, 'tasks') == TASKS_DDL

    def test_deterministic(self, task_schema):
        first = db.create_table_sql(task_schema, 'tasks')
        assert all(db.create_table_sql(task_schema, 'tasks') == first for _ in range(5))

    def test_no_identity(self, setting_schema):
        sql = db.create_table_sql(setting_schema, 'settings')
        assert 'AUTO_INCREMENT' not in sql
        assert 'PRIMARY KEY' not in sql
        assert 'UNIQUE KEY `key` (`key`)' in sql

    def test_unbounded_text(self):
        schema = Schema([Field('body', str)])
        assert '`body` text NOT NULL' in db.create_table_sql(schema, 'posts')

    def test_no_key_clauses(self):
        schema = Schema([Field('a', int), Field('b', str, size=5)])
        assert db.create_table_sql(schema, 't') == (
            'CREATE TABLE `t` (\n'
            '  `a` int(11) NOT NULL,\n'
            '  `b` varchar(5) NOT NULL\n'
            ') ENGINE=InnoDB DEFAULT CHARSET=utf8'
        )


class TestSQLiteCreateTable:

    def test_users_table(self, user_schema):
        assert db.create_table_sql(user_schema, 'users', 'sqlite') == (
            'CREATE TABLE "users" (\n'
            '  "id" INTEGER NOT NULL,\n'
            '  "name" VARCHAR(50) NOT NULL,\n'
            '  "active" BOOLEAN NOT NULL,\n'
            '  PRIMARY KEY ("id")\n'
            ')'
        )

    def test_identity_is_rowid_alias(self, task_schema):
        sql = db.create_table_sql(task_schema, 'tasks', 'sqlite')
        assert '"id" INTEGER NOT NULL' in sql
        assert 'BIGINT' not in sql

    def test_unique_and_index(self, task_schema):
        strategy = get_strategy('sqlite')
        sql = strategy.build_create_table_sql(task_schema, 'tasks')
        assert 'UNIQUE ("title")' in sql
        assert '"owner" VARCHAR(50) NULL' in sql
        assert 'KEY ("owner")' not in sql
        assert strategy.build_index_sql(task_schema, 'tasks') == [
            'CREATE INDEX "tasks_owner" ON "tasks" ("owner")'
        ]

    def test_mysql_needs_no_extra_indexes(self, task_schema):
        assert get_strategy('mysql').build_index_sql(task_schema, 'tasks') == []


class TestCreateDatabase:

    def test_mysql(self):
        assert db.create_database_sql('cloudcoder') == (
            "CREATE DATABASE `cloudcoder` CHARACTER SET 'utf8' COLLATE 'utf8_general_ci'"
        )

    def test_sqlite_unsupported(self):
        with pytest.raises(ValidationError):
            db.create_database_sql('cloudcoder', 'sqlite')

    def test_create_database_executes(self, mysql_conn):
        db.create_database(mysql_conn, 'cloudcoder')
        sql, params = mysql_conn.executed[-1]
        assert sql.startswith('CREATE DATABASE `cloudcoder`')
        assert params is None


def test_create_table_executes_ddl(mysql_conn, user_schema):
    db.create_table(mysql_conn, 'users', user_schema)
    assert mysql_conn.executed == [(USERS_DDL, None)]
    assert all(c.closed for c in mysql_conn.cursors)


def test_drop_table(mysql_conn):
    db.drop_table(mysql_conn, 'users')
    assert mysql_conn.executed == [('DROP TABLE IF EXISTS `users`', None)]


def test_unsupported_type_from_strategy():
    schema = Schema([Field('n', FieldType.INTEGER)])
    strategy = get_strategy('mysql')
    broken = {k: v for k, v in strategy.get_type_map().items() if k is not FieldType.INTEGER}

    class NoIntegers(type(strategy)):
        def get_type_map(self):
            return broken

    with pytest.raises(db.UnsupportedTypeError):
        NoIntegers().build_create_table_sql(schema, 't')
