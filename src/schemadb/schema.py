"""
Schema descriptors for persisted record types.

A `Schema` is an ordered, immutable list of `Field` descriptors. Field order
is the column order of generated DDL, INSERT column lists and placeholder
lists, so it must never be rearranged once a schema is built.

Each field resolves its semantic type once, at construction, into a closed
`FieldType` member. Later stages (DDL generation, binding, conversion) only
ever look that member up in a table; they never inspect record values to
decide a column type.

Usage:
    class Status(Enum):
        PENDING = auto()
        DONE = auto()

    schema = Schema([
        Field('id', int, index_type=IndexType.IDENTITY),
        Field('name', str, size=50),
        Field('status', Status),
        Field('active', bool),
        ], record_type=Task)
"""
import enum
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from schemadb.exceptions import SchemaError, UnsupportedTypeError

__all__ = [
    'UNBOUNDED',
    'FieldType',
    'IndexType',
    'PropertyAccessor',
    'AttributeAccessor',
    'ItemAccessor',
    'Field',
    'Schema',
]

# Size of a text field that maps to a large-text column instead of varchar
UNBOUNDED = 2**31 - 1


class FieldType(enum.Enum):
    """Semantic value type of a field."""
    TEXT = enum.auto()
    SHORT = enum.auto()
    INTEGER = enum.auto()
    LONG = enum.auto()
    BOOLEAN = enum.auto()
    ENUM = enum.auto()

    @property
    def is_integer(self) -> bool:
        return self in {FieldType.SHORT, FieldType.INTEGER, FieldType.LONG}

    @classmethod
    def resolve(cls, value: Any) -> 'FieldType':
        """Resolve a FieldType member or a Python type to a FieldType.

        Raises UnsupportedTypeError for anything without a mapping.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, type):
            if issubclass(value, enum.Enum):
                return cls.ENUM
            if value in _PYTHON_TYPES:
                return _PYTHON_TYPES[value]
        name = getattr(value, '__name__', repr(value))
        raise UnsupportedTypeError(f'Unknown field type: {name}')


_PYTHON_TYPES: dict[type, FieldType] = {
    str: FieldType.TEXT,
    int: FieldType.INTEGER,
    bool: FieldType.BOOLEAN,
    }


class IndexType(enum.Enum):
    """Index role of a field."""
    NONE = enum.auto()
    NON_UNIQUE = enum.auto()
    UNIQUE = enum.auto()
    IDENTITY = enum.auto()


class PropertyAccessor(Protocol):
    """Get/set capability for one property of a record type."""

    def get(self, record: Any) -> Any:
        ...

    def set(self, record: Any, value: Any) -> None:
        ...


@dataclass(frozen=True, slots=True)
class AttributeAccessor:
    """Reads and writes a record attribute."""
    name: str

    def get(self, record: Any) -> Any:
        return getattr(record, self.name)

    def set(self, record: Any, value: Any) -> None:
        setattr(record, self.name, value)


@dataclass(frozen=True, slots=True)
class ItemAccessor:
    """Reads and writes a key of a mapping record."""
    key: str

    def get(self, record: Mapping) -> Any:
        return record[self.key]

    def set(self, record: Any, value: Any) -> None:
        record[self.key] = value


@dataclass(frozen=True)
class Field:
    """Immutable descriptor of one persisted property.

    Args:
        name: Column name, unique within a schema
        field_type: FieldType member or Python type (str, int, bool, Enum subclass)
        size: Maximum text length; UNBOUNDED selects a large-text column
        allow_null: Whether the column accepts NULL
        index_type: Index role of the column
        enum_type: Enum class for ENUM fields (inferred when field_type is one)
        property_name: Record property backing the column, defaults to name
        accessor: Explicit PropertyAccessor, defaults to AttributeAccessor(property_name)
    """
    name: str
    field_type: FieldType | type
    size: int = UNBOUNDED
    allow_null: bool = False
    index_type: IndexType = IndexType.NONE
    enum_type: type[enum.Enum] | None = None
    property_name: str | None = None
    accessor: PropertyAccessor | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        declared = self.field_type
        resolved = FieldType.resolve(declared)
        object.__setattr__(self, 'field_type', resolved)

        if resolved is FieldType.ENUM and self.enum_type is None:
            if isinstance(declared, type) and issubclass(declared, enum.Enum):
                object.__setattr__(self, 'enum_type', declared)
            else:
                raise SchemaError(f'Field {self.name} is an ENUM but has no enum_type')

        if self.property_name is None:
            object.__setattr__(self, 'property_name', self.name)
        if self.accessor is None:
            object.__setattr__(self, 'accessor', AttributeAccessor(self.property_name))

    @property
    def python_type(self) -> type:
        """In-memory type of the field's values."""
        if self.field_type is FieldType.ENUM:
            return self.enum_type
        if self.field_type is FieldType.TEXT:
            return str
        if self.field_type is FieldType.BOOLEAN:
            return bool
        return int

    @property
    def is_identity(self) -> bool:
        return self.index_type is IndexType.IDENTITY

    def get(self, record: Any) -> Any:
        return self.accessor.get(record)

    def set(self, record: Any, value: Any) -> None:
        self.accessor.set(record, value)


class Schema:
    """Ordered, immutable collection of fields for one record type.

    Raises SchemaError when field names repeat, when more than one field is
    an identity, or when the identity field is not an integer kind.
    """

    __slots__ = ('_fields', '_by_name', '_identity', 'record_type')

    def __init__(self, fields: Iterable[Field], record_type: type | None = None) -> None:
        fields = tuple(fields)
        by_name: dict[str, Field] = {}
        identity = None

        for f in fields:
            if f.name in by_name:
                raise SchemaError(f'Duplicate field name: {f.name}')
            by_name[f.name] = f
            if f.is_identity:
                if identity is not None:
                    raise SchemaError(
                        f'Multiple identity fields: {identity.name}, {f.name}')
                if not f.field_type.is_integer:
                    raise SchemaError(
                        f'Identity field {f.name} must be an integer type, '
                        f'not {f.field_type.name}')
                identity = f

        self._fields = fields
        self._by_name = by_name
        self._identity = identity
        self.record_type = record_type

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        name = self.record_type.__name__ if self.record_type else None
        return f'Schema({name}, fields={list(self.field_names)})'

    @property
    def fields(self) -> tuple[Field, ...]:
        return self._fields

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self._fields)

    @property
    def identity_field(self) -> Field | None:
        return self._identity

    @property
    def has_identity(self) -> bool:
        return self._identity is not None

    def get_field(self, name: str) -> Field:
        """Return the field with the given name (KeyError if absent)."""
        return self._by_name[name]
