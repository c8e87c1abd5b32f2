import dataclasses

import pytest
from schemadb import AttributeAccessor, Field, FieldType, IndexType
from schemadb import ItemAccessor, Schema, SchemaError, UNBOUNDED
from schemadb import UnsupportedTypeError

from tests.fixtures.schemas import Status, User


class TestField:

    @pytest.mark.parametrize(('declared', 'expected'), [
        (str, FieldType.TEXT),
        (int, FieldType.INTEGER),
        (bool, FieldType.BOOLEAN),
        (Status, FieldType.ENUM),
        (FieldType.SHORT, FieldType.SHORT),
        (FieldType.LONG, FieldType.LONG),
    ])
    def test_type_resolved_once(self, declared, expected):
        assert Field('x', declared).field_type is expected

    def test_defaults(self):
        field = Field('name', str)
        assert field.size == UNBOUNDED
        assert field.allow_null is False
        assert field.index_type is IndexType.NONE
        assert field.property_name == 'name'
        assert field.accessor == AttributeAccessor('name')

    def test_enum_type_inferred(self):
        field = Field('status', Status)
        assert field.enum_type is Status
        assert field.python_type is Status

    def test_enum_without_enum_type(self):
        with pytest.raises(SchemaError):
            Field('status', FieldType.ENUM)

    def test_explicit_enum_type(self):
        field = Field('status', FieldType.ENUM, enum_type=Status)
        assert field.python_type is Status

    @pytest.mark.parametrize('declared', [float, bytes, 'text', None])
    def test_unknown_type(self, declared):
        with pytest.raises(UnsupportedTypeError):
            Field('x', declared)

    @pytest.mark.parametrize(('declared', 'python_type'), [
        (str, str),
        (bool, bool),
        (FieldType.SHORT, int),
        (FieldType.INTEGER, int),
        (FieldType.LONG, int),
    ])
    def test_python_type(self, declared, python_type):
        assert Field('x', declared).python_type is python_type

    def test_immutable(self):
        field = Field('name', str)
        with pytest.raises(dataclasses.FrozenInstanceError):
            field.size = 10

    def test_property_name_backs_accessor(self):
        field = Field('user_name', str, property_name='name')
        user = User(name='alice')
        assert field.get(user) == 'alice'
        field.set(user, 'bob')
        assert user.name == 'bob'

    def test_item_accessor(self):
        field = Field('key', str, accessor=ItemAccessor('key'))
        record = {'key': 'a'}
        assert field.get(record) == 'a'
        field.set(record, 'b')
        assert record == {'key': 'b'}


class TestSchema:

    def test_field_order_preserved(self, user_schema):
        assert user_schema.field_names == ('id', 'name', 'active')
        assert [f.name for f in user_schema] == ['id', 'name', 'active']
        assert len(user_schema) == 3

    def test_identity_field(self, user_schema, setting_schema):
        assert user_schema.identity_field.name == 'id'
        assert user_schema.has_identity
        assert setting_schema.identity_field is None
        assert not setting_schema.has_identity

    def test_get_field(self, task_schema):
        assert task_schema.get_field('status').enum_type is Status
        with pytest.raises(KeyError):
            task_schema.get_field('missing')

    def test_duplicate_names(self):
        with pytest.raises(SchemaError, match='Duplicate'):
            Schema([Field('a', str), Field('a', int)])

    def test_multiple_identities(self):
        with pytest.raises(SchemaError, match='Multiple identity'):
            Schema([
                Field('a', int, index_type=IndexType.IDENTITY),
                Field('b', int, index_type=IndexType.IDENTITY),
                ])

    @pytest.mark.parametrize('declared', [str, bool, Status])
    def test_identity_must_be_integer(self, declared):
        with pytest.raises(SchemaError, match='integer'):
            Schema([Field('id', declared, index_type=IndexType.IDENTITY)])

    def test_fields_is_tuple(self, user_schema):
        assert isinstance(user_schema.fields, tuple)

    def test_repr(self, user_schema):
        assert repr(user_schema) == "Schema(User, fields=['id', 'name', 'active'])"
