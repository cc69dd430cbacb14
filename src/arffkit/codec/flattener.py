"""
Column Flattener Module.

Walks a row shape to map one structured row value to and from its flat,
ordered list of columns. Nested tuples and arrays are flattened depth-first,
left to right:

    Tuple[int, Tuple[int, int], int]  <->  4 columns
"""

from collections.abc import Mapping
from typing import Any, List, Sequence

from arffkit.errors import (
    ArffError,
    ExtraColumnsError,
    RecordValidationError,
    RowArityError,
    TruncatedRowError,
    UnsupportedShapeError,
)
from arffkit.models.column_value import ColumnValue
from arffkit.models.shape import DynamicSequence, FixedSequence, Leaf, RowShape, Struct
from arffkit.parser.lexer import Field

from .coercion import from_column, parse_column, to_column


def column_names(shape: RowShape) -> List[str]:
    """
    Returns the attribute names for the columns of `shape`.

    Examples:
        - struct {a: int, b: Tuple[int, int]} -> ["a", "b0", "b1"]
        - Tuple[int, Tuple[int, int]] -> ["col0", "col1", "col2"]

    Raises:
        UnsupportedShapeError: If `shape` is a data set, not a row.
    """
    if isinstance(shape, DynamicSequence):
        raise UnsupportedShapeError("A data set has no row column names.")
    return shape.column_names()


# --- Writing ---


def flatten(value: Any, shape: RowShape) -> List[ColumnValue]:
    """
    Flattens one row into column values, in column order.

    Raises:
        RowArityError: If a sequence value has a different length than the
            shape, or a record lacks one of the shape's fields.
        ArffValueError: If a primitive value does not fit its leaf; `column`
            is set to the flat column index.
    """
    if isinstance(shape, DynamicSequence):
        raise UnsupportedShapeError(
            "Variable-length rows are not supported: rows must have a fixed number of columns."
        )
    out: List[ColumnValue] = []
    _flatten_into(value, shape, out)
    return out


def _flatten_into(value: Any, shape: RowShape, out: List[ColumnValue]) -> None:
    if isinstance(shape, Leaf):
        column = len(out)
        try:
            out.append(to_column(value, shape, column))
        except ArffError as e:
            raise e.at(column=column)
        return

    if isinstance(shape, Struct):
        for name, field_shape in shape.fields:
            _flatten_into(_field_value(value, name, shape), field_shape, out)
        return

    # FixedSequence
    assert isinstance(shape, FixedSequence)
    items = _as_sequence(value)
    if len(items) != len(shape.elements):
        raise RowArityError(
            f"expected a sequence of {len(shape.elements)} element(s), got {len(items)}",
            column=len(out),
        )
    for item, element in zip(items, shape.elements):
        _flatten_into(item, element, out)


def _field_value(value: Any, name: str, shape: Struct) -> Any:
    if isinstance(value, Mapping):
        if name not in value:
            raise RowArityError(
                f"record is missing field '{name}' of {shape.name or 'struct'}"
            )
        return value[name]
    try:
        return getattr(value, name)
    except AttributeError:
        raise RowArityError(
            f"{type(value).__name__} has no field '{name}' of {shape.name or 'struct'}"
        ) from None


def _as_sequence(value: Any) -> Sequence[Any]:
    if isinstance(value, (str, bytes, Mapping)) or not hasattr(value, "__len__"):
        raise RowArityError(f"expected a sequence, got {type(value).__name__}")
    if hasattr(value, "tolist"):
        # numpy arrays
        return value.tolist()
    return value


# --- Reading ---


def unflatten(fields: Sequence[Field], shape: RowShape) -> Any:
    """
    Rebuilds one row from its raw tokens.

    Every sub-shape consumes exactly its `leaf_count` tokens; records and
    sequences are built bottom-up through their factory and container.

    Raises:
        TruncatedRowError: If there are fewer tokens than columns.
        ExtraColumnsError: If there are more tokens than columns.
        RecordValidationError: If a record factory rejects the values.
        ArffValueError: If a token does not coerce to its leaf; `column` is
            set to the flat column index.
    """
    if isinstance(shape, DynamicSequence):
        raise UnsupportedShapeError(
            "Variable-length rows are not supported: rows must have a fixed number of columns."
        )
    expected = shape.leaf_count
    if len(fields) < expected:
        raise TruncatedRowError(expected, len(fields))
    if len(fields) > expected:
        raise ExtraColumnsError(expected, len(fields))
    value, _ = _build(fields, 0, shape)
    return value


def _build(fields: Sequence[Field], pos: int, shape: RowShape):
    """Builds the value of `shape` from `fields[pos:]`; returns it with the next position."""
    if isinstance(shape, Leaf):
        try:
            return from_column(parse_column(fields[pos], shape, pos), shape, pos), pos + 1
        except ArffError as e:
            raise e.at(column=pos)

    if isinstance(shape, Struct):
        kwargs = {}
        for name, field_shape in shape.fields:
            kwargs[name], pos = _build(fields, pos, field_shape)
        return _make_record(shape, kwargs), pos

    assert isinstance(shape, FixedSequence)
    items = []
    for element in shape.elements:
        item, pos = _build(fields, pos, element)
        items.append(item)
    return shape.container(items), pos


def _make_record(shape: Struct, kwargs: dict) -> Any:
    # pydantic.ValidationError is a ValueError
    try:
        return shape.factory(**kwargs)
    except (TypeError, ValueError) as e:
        raise RecordValidationError(
            f"{shape.name or 'record'} rejected the row values: {e}"
        ) from e
