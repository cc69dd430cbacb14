from typing import Optional, Tuple

import numpy as np
import pytest

from arffkit.codec import column_names, flatten, unflatten
from arffkit.errors import (
    ExtraColumnsError,
    MissingValueError,
    NumberFormatError,
    RecordValidationError,
    RowArityError,
    TruncatedRowError,
    UnsupportedShapeError,
)
from arffkit.models import MISSING, DynamicSequence, Nominal, Number, Text, shape_of, struct_of
from arffkit.parser import tokenize_row
from testing.unit.records import Measurement, Nested, Pair, Point, Positive, Window, Color


def test_flatten_nested_tuple():
    shape = shape_of(Nested)
    assert flatten((1, [2, 3], 4), shape) == [Number(1), Number(2), Number(3), Number(4)]
    assert column_names(shape) == ["col0", "col1", "col2", "col3"]


def test_flatten_record():
    row = Measurement(sensor="s1", value=None, ok=True, color=Color.Red, grade="low")
    assert flatten(row, Measurement.row_shape()) == [
        Text("s1"),
        MISSING,
        Nominal("t"),
        Nominal("Red"),
        Nominal("low"),
    ]


def test_flatten_record_with_array_field():
    row = Window(start=0, samples=[1, 2, 3], end=9)
    assert [cv.value for cv in flatten(row, Window.row_shape())] == [0, 1, 2, 3, 9]
    assert column_names(Window.row_shape()) == [
        "start",
        "samples0",
        "samples1",
        "samples2",
        "end",
    ]


def test_flatten_mapping_and_numpy_rows():
    shape = struct_of({"a": int, "b": int})
    assert flatten({"b": 2, "a": 1}, shape) == [Number(1), Number(2)]
    assert flatten(np.array([1, 2]), shape_of(Tuple[int, int])) == [Number(1), Number(2)]


@pytest.mark.parametrize(
    "row",
    [
        (1, [2, 3]),
        (1, [2, 3, 4], 5),
        (1, [2], 3, 4),
        (1, 2, 3),
    ],
)
def test_flatten_arity_mismatch(row):
    with pytest.raises(RowArityError):
        flatten(row, shape_of(Nested))


def test_flatten_missing_field():
    with pytest.raises(RowArityError, match="'b'"):
        flatten({"a": 1}, Pair.row_shape())


def test_flatten_error_has_column():
    with pytest.raises(MissingValueError) as e:
        flatten((1, [2, None], 4), shape_of(Nested))
    assert e.value.column == 2


def test_unflatten_nested_tuple():
    fields = tokenize_row("1, 2, 3, 4")
    assert unflatten(fields, shape_of(Nested)) == (1, [2, 3], 4)


def test_unflatten_records():
    assert unflatten(tokenize_row("42, 9"), Pair.row_shape()) == Pair(a=42, b=9)
    assert unflatten(tokenize_row("1, 2, ?"), shape_of(Point)) == Point(1, 2, None)
    row = unflatten(tokenize_row("'s1', 2.5, f, Blue, high"), Measurement.row_shape())
    assert row == Measurement(
        sensor="s1", value=2.5, ok=False, color=Color.Blue, grade="high"
    )


def test_unflatten_row_count_errors():
    with pytest.raises(TruncatedRowError) as e:
        unflatten(tokenize_row("1, 2, 3"), shape_of(Nested))
    assert (e.value.expected, e.value.actual) == (4, 3)
    with pytest.raises(ExtraColumnsError):
        unflatten(tokenize_row("1, 2, 3, 4, 5"), shape_of(Nested))


def test_unflatten_error_has_column():
    with pytest.raises(NumberFormatError) as e:
        unflatten(tokenize_row("1, 2, x, 4"), shape_of(Nested))
    assert e.value.column == 2


def test_unflatten_optional_and_required():
    shape = shape_of(Tuple[Optional[int], int])
    assert unflatten(tokenize_row("?, 1"), shape) == (None, 1)
    with pytest.raises(MissingValueError):
        unflatten(tokenize_row("1, ?"), shape)


def test_record_validation_error_is_chained():
    with pytest.raises(RecordValidationError) as e:
        unflatten(tokenize_row("-5"), Positive.row_shape())
    assert e.value.__cause__ is not None


def test_dynamic_sequence_is_not_a_row():
    shape = DynamicSequence(shape_of(int))
    with pytest.raises(UnsupportedShapeError):
        flatten([1, 2], shape)
    with pytest.raises(UnsupportedShapeError):
        unflatten(tokenize_row("1"), shape)
    with pytest.raises(UnsupportedShapeError):
        column_names(shape)


def test_flatten_unflatten_round_trip():
    shape = shape_of(Tuple[int, Tuple[str, Optional[float]], bool])
    row = (3, ("a, b", None), True)
    tokens = tokenize_row(", ".join(cv.to_text() for cv in flatten(row, shape)))
    assert unflatten(tokens, shape) == row
