"""
Type mapping between schema fields, column types and driver values.

This module handles three directions:
1. Field -> column type keyword (`sql_type`), a table lookup on the dialect
2. Python value -> driver parameter (`to_column_value`)
3. Driver value -> field value (`from_column_value`)

Wire format:
- enumerations travel as their ordinal (definition order, starting at 0)
- booleans travel as 1 / 0
- NumPy scalars are unwrapped and pandas / NaN missing values become NULL,
  so records filled from DataFrames bind cleanly

Usage:
    sql_type(Field('name', str, size=50))          # 'varchar(50)'
    to_column_value(Status.DONE)                   # 1
    from_column_value(1, Status)                   # Status.DONE
    from_column_value(0, bool)                     # False
"""
import enum
import logging
import math
from numbers import Number
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd
from schemadb.exceptions import ConversionError
from schemadb.schema import Field
from schemadb.strategy import get_strategy

if TYPE_CHECKING:
    from schemadb.schema import Schema

logger = logging.getLogger(__name__)

__all__ = [
    'sql_type',
    'to_column_value',
    'from_column_value',
    'convert_row',
    'enum_ordinal',
]


def sql_type(field: Field, dialect: str = 'mysql') -> str:
    """Map a field's semantic type and size to the dialect's column keyword.

    Raises
        UnsupportedTypeError: If the field's type has no mapping
    """
    return get_strategy(dialect).sql_type(field)


def enum_ordinal(value: enum.Enum) -> int:
    """Return the position of an enum member in its class's definition order."""
    return list(type(value)).index(value)


def _convert_numpy_value(value: Any) -> Any:
    """Unwrap a NumPy scalar to the equivalent Python value.
    """
    if isinstance(value, np.floating) and np.isnan(value):
        return None
    if isinstance(value, np.generic):
        return value.item()
    return value


def _is_missing(value: Any) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return True
    return value is pd.NA or value is pd.NaT


def to_column_value(value: Any) -> Any:
    """Convert a field value to a driver-compatible parameter.

    Args:
        value: In-memory field value

    Returns
        Value suitable for binding to a query parameter
    """
    if value is None or _is_missing(value):
        return None

    if isinstance(value, enum.Enum):
        return enum_ordinal(value)

    if isinstance(value, np.generic):
        value = _convert_numpy_value(value)

    if isinstance(value, bool):
        return int(value)

    return value


def from_column_value(value: Any, target: type | Field) -> Any:
    """Convert a driver-returned value to the field's in-memory type.

    A value whose runtime type already equals the target is returned as is,
    without range or sign checks. Integers become enum members by ordinal and
    any number becomes a bool (zero is False). Every other mismatch is an
    error rather than a guess.

    Args:
        value: Value returned by the driver
        target: Python type, or a Field whose `python_type` is the target

    Raises
        ConversionError: If the value cannot be coerced to the target type
    """
    if isinstance(target, Field):
        target = target.python_type

    if value is None:
        return None

    if isinstance(value, np.generic):
        value = _convert_numpy_value(value)

    if type(value) is target:
        return value

    if isinstance(target, type) and issubclass(target, enum.Enum):
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConversionError(
                f'Unsupported conversion from {type(value).__name__} to {target.__name__}')
        members = list(target)
        if not 0 <= value < len(members):
            raise ConversionError(
                f'Ordinal {value} out of range for {target.__name__} ({len(members)} members)')
        return members[value]

    if target is bool and isinstance(value, Number):
        return value != 0

    target_name = getattr(target, '__name__', repr(target))
    raise ConversionError(
        f'Unsupported conversion from {type(value).__name__} to {target_name}')


def convert_row(schema: 'Schema', row: Any) -> dict[str, Any]:
    """Convert a fetched row (sequence or mapping) to field values by name.

    Sequence rows are read positionally in field order.
    """
    if hasattr(row, 'keys'):
        values = [row[field.name] for field in schema]
    else:
        values = list(row)
        if len(values) != len(schema):
            raise ConversionError(
                f'Row has {len(values)} values but schema has {len(schema)} fields')
    return {
        field.name: from_column_value(value, field)
        for field, value in zip(schema, values)
    }
