import pytest
from schemadb import DatabaseOptions, ValidationError


def test_init_defaults():
    """Test default initialization"""
    options = DatabaseOptions(hostname='testhost', username='testuser')

    assert options.drivername == 'mysql'
    assert options.password is None
    assert options.database is None
    assert options.port == 0
    assert options.timeout == 0
    assert options.charset == 'utf8'


def test_validation():
    """Test validation rules"""
    with pytest.raises(ValueError, match='drivername'):
        DatabaseOptions(drivername='postgresql', hostname='testhost', username='u')

    with pytest.raises(ValueError, match='username'):
        DatabaseOptions(drivername='mysql', hostname='testhost')

    with pytest.raises(ValueError, match='hostname'):
        DatabaseOptions(drivername='mysql', username='u')


def test_sqlite_options():
    """Test SQLite options validation"""
    options = DatabaseOptions(drivername='sqlite', database=':memory:')
    assert options.database == ':memory:'

    with pytest.raises(ValueError, match='database'):
        DatabaseOptions(drivername='sqlite')


class TestFromProperties:

    @pytest.fixture
    def config(self):
        return {
            'database.user': 'cloudcoder',
            'database.passwd': 'secret',
            'database.host': 'db.example.com',
            'database.portStr': ':3307',
            'database.databaseName': 'cloudcoderdb',
            }

    def test_full(self, config):
        options = DatabaseOptions.from_properties(config, 'database')
        assert options == DatabaseOptions(
            drivername='mysql',
            hostname='db.example.com',
            username='cloudcoder',
            password='secret',
            database='cloudcoderdb',
            port=3307,
        )

    def test_without_database(self, config):
        del config['database.databaseName']
        options = DatabaseOptions.from_properties(config, 'database', with_database=False)
        assert options.database is None

    def test_port_optional(self, config):
        del config['database.portStr']
        assert DatabaseOptions.from_properties(config, 'database').port == 0

    def test_empty_port(self, config):
        config['database.portStr'] = ''
        assert DatabaseOptions.from_properties(config, 'database').port == 0

    def test_port_without_colon(self, config):
        config['database.portStr'] = '3308'
        assert DatabaseOptions.from_properties(config, 'database').port == 3308

    @pytest.mark.parametrize('name', ['database.user', 'database.passwd', 'database.host',
                                      'database.databaseName'])
    def test_missing_property(self, config, name):
        del config[name]
        with pytest.raises(ValidationError, match=name):
            DatabaseOptions.from_properties(config, 'database')

    def test_bad_port(self, config):
        config['database.portStr'] = ':mysql'
        with pytest.raises(ValidationError, match='portStr'):
            DatabaseOptions.from_properties(config, 'database')
