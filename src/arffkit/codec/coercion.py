"""
Value Coercion Module.

Converts between Python values, column values and raw tokens for one leaf:

    Python value --to_column--> ColumnValue --to_text--> token   (writing)
    token --parse_column--> ColumnValue --from_column--> value   (reading)

The leaf decides the coercion; the declared attribute kind of the column is
never consulted here.
"""

import math
import re
from typing import Any, Optional

import numpy as np

from arffkit.enum import LeafKind
from arffkit.errors import (
    InconsistentTypeError,
    MissingValueError,
    NumberFormatError,
    NumericRangeError,
    UnknownVariantError,
)
from arffkit.models.column_value import MISSING, ColumnValue, Nominal, Number, Text
from arffkit.models.shape import Leaf
from arffkit.parser.lexer import Field

_INTEGER_TOKEN = re.compile(r"^[+-]?\d+$")


def _is_integer(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


def _is_number(value: Any) -> bool:
    return _is_integer(value) or isinstance(value, (float, np.floating))


# --- Python value -> column value ---


def to_column(value: Any, leaf: Leaf, column: Optional[int] = None) -> ColumnValue:
    """
    Converts one Python value to its column value.

    Raises:
        MissingValueError: If `value` is None and the leaf is not optional.
        InconsistentTypeError: If `value` has the wrong type for the leaf.
        UnknownVariantError: If a string is not one of a literal leaf's labels.
        NumericRangeError: If an integer does not fit a fixed-width leaf.
    """
    if value is None:
        if leaf.optional:
            return MISSING
        raise MissingValueError("missing value for a non-optional column", column=column)

    if leaf.kind == LeafKind.Integer:
        if not _is_integer(value):
            raise _inconsistent(value, leaf, column)
        if leaf.python_type is not None:
            _check_integer_range(int(value), leaf.python_type, str(value), column)
        return Number(int(value))

    if leaf.kind == LeafKind.Float:
        if not _is_number(value):
            raise _inconsistent(value, leaf, column)
        if leaf.python_type is None and _is_integer(value):
            # integers stay exact
            return Number(int(value))
        return Number(float(value))

    if leaf.kind == LeafKind.String:
        if not isinstance(value, str):
            raise _inconsistent(value, leaf, column)
        return Text(str(value))

    if leaf.kind == LeafKind.Boolean:
        if not isinstance(value, (bool, np.bool_)):
            raise _inconsistent(value, leaf, column)
        return Nominal(leaf.table.label_of(bool(value)))

    # Nominal
    if leaf.python_type is not None:
        if not isinstance(value, leaf.python_type):
            raise _inconsistent(value, leaf, column)
        return Nominal(leaf.table.label_of(value))
    if not isinstance(value, str):
        raise _inconsistent(value, leaf, column)
    if value not in leaf.labels:
        raise UnknownVariantError(
            f"'{value}' is not one of {list(leaf.labels)}", column=column, raw=value
        )
    return Nominal(value)


def _inconsistent(value: Any, leaf: Leaf, column: Optional[int]) -> InconsistentTypeError:
    target = leaf.python_type.__name__ if leaf.python_type else str(leaf.kind)
    return InconsistentTypeError(
        f"{type(value).__name__} value {value!r} in a {target} column", column=column
    )


# --- Raw token -> column value ---


def parse_column(field: Field, leaf: Leaf, column: Optional[int] = None) -> ColumnValue:
    """
    Converts one raw token to a column value, as directed by `leaf`.

    A bare `?` is always `MISSING`; whether that is acceptable is decided by
    `from_column`.

    Raises:
        NumberFormatError: If a numeric leaf's token is not a number.
    """
    if field.is_missing():
        return MISSING
    if leaf.kind in (LeafKind.Integer, LeafKind.Float):
        return Number(_parse_number(field.text, column), raw=field.text)
    if leaf.kind == LeafKind.String:
        return Text(field.text)
    return Nominal(field.text)


def _parse_number(text: str, column: Optional[int]):
    text = text.strip()
    if _INTEGER_TOKEN.match(text):
        return int(text)
    # float() accepts digit separators, ARFF does not
    if "_" not in text:
        try:
            return float(text)
        except ValueError:
            pass
    raise NumberFormatError(f"'{text}' is not a number", column=column, raw=text)


# --- Column value -> Python value ---


def from_column(cv: ColumnValue, leaf: Leaf, column: Optional[int] = None) -> Any:
    """
    Converts a column value to the leaf's Python type.

    Raises:
        MissingValueError: If `cv` is MISSING and the leaf is not optional.
        NumberFormatError: If an integer leaf receives a fractional number or
            exponent (`NumericRangeError` if it does not fit a fixed-width
            numpy type).
        UnknownVariantError: If a label is not part of the leaf's label table.
        InconsistentTypeError: If `cv` is not the kind of value the leaf holds.
    """
    if cv is MISSING:
        if leaf.optional:
            return None
        raise MissingValueError("missing value (?) for a non-optional column", column=column)

    if leaf.kind == LeafKind.Integer:
        return _to_integer(_expect(cv, Number, leaf, column), leaf, column)

    if leaf.kind == LeafKind.Float:
        number = _expect(cv, Number, leaf, column)
        value = float(number.value)
        if leaf.python_type is None:
            return value
        finfo = np.finfo(leaf.python_type)
        if math.isfinite(value) and abs(value) > float(finfo.max):
            raise NumericRangeError(
                f"{value} does not fit in {leaf.python_type.__name__}",
                column=column,
                raw=number.raw,
            )
        return leaf.python_type(value)

    if leaf.kind == LeafKind.String:
        return _expect(cv, Text, leaf, column).value

    label = _expect(cv, Nominal, leaf, column).label
    table = leaf.table
    try:
        return table.variant_of(label)
    except KeyError:
        raise UnknownVariantError(
            f"'{label}' is not one of {list(table.labels)}", column=column, raw=label
        ) from None


def _expect(cv: ColumnValue, cls: type, leaf: Leaf, column: Optional[int]):
    if not isinstance(cv, cls):
        raise InconsistentTypeError(
            f"{cv!r} cannot be read as a {leaf.kind} value", column=column
        )
    return cv


def _to_integer(number: Number, leaf: Leaf, column: Optional[int]):
    value = number.value
    if number.raw is not None and not _INTEGER_TOKEN.match(number.raw.strip()):
        raise NumberFormatError(
            f"'{number.raw}' is not an integer", column=column, raw=number.raw
        )
    if isinstance(value, float):
        if not value.is_integer():
            raise NumberFormatError(f"{value} is not an integer", column=column)
        value = int(value)
    if leaf.python_type is None:
        return value
    _check_integer_range(value, leaf.python_type, number.raw, column)
    return leaf.python_type(value)


def _check_integer_range(
    value: int, python_type: type, raw: Optional[str], column: Optional[int]
) -> None:
    info = np.iinfo(python_type)
    if not info.min <= value <= info.max:
        raise NumericRangeError(
            f"{value} does not fit in {python_type.__name__} [{info.min}, {info.max}]",
            column=column,
            raw=raw,
        )

