import numpy as np
import pytest

from arffkit import ArffArray
from arffkit.errors import (
    ColumnNameError,
    InconsistentTypeError,
    MissingValueError,
    NumberFormatError,
    NumericRangeError,
    TruncatedRowError,
    UnknownVariantError,
)


def test_from_text_float(iris_text):
    arr = ArffArray.from_text(iris_text)
    assert arr.relation == "iris"
    assert arr.data.shape == (3, 5)
    assert (arr.n_rows, arr.n_cols) == (3, 5)
    assert arr.dtype == np.float64
    assert arr.at(0, 0) == 5.1
    # nominal cells hold the label index
    assert list(arr.data[:, 4]) == [0.0, 1.0, 2.0]
    # missing cells are NaN
    assert np.isnan(arr.at(2, 3))


def test_str_at(iris_text):
    arr = ArffArray.from_text(iris_text)
    assert arr.str_at(1, 4) == "Iris-versicolor"
    assert arr.str_at(1, 0) is None


def test_integer_dtype():
    text = "@ATTRIBUTE a NUMERIC\n@ATTRIBUTE c {x, y}\n@DATA\n1, y\n-2, x\n"
    arr = ArffArray.from_text(text, dtype=np.int32)
    assert arr.dtype == np.int32
    np.testing.assert_array_equal(arr.data, [[1, 1], [-2, 0]])
    assert arr.str_at(0, 1) == "y"


@pytest.mark.parametrize(
    "row, dtype, error",
    [
        ("?, x", np.int64, MissingValueError),
        ("1.5, x", np.int64, NumberFormatError),
        ("300, x", np.int8, NumericRangeError),
        ("1, z", np.float64, UnknownVariantError),
        ("1", np.float64, TruncatedRowError),
    ],
)
def test_cell_errors(row, dtype, error):
    text = f"@ATTRIBUTE a NUMERIC\n@ATTRIBUTE c {{x, y}}\n@DATA\n0, x\n{row}\n"
    with pytest.raises(error) as e:
        ArffArray.from_text(text, dtype=dtype)
    assert e.value.row == 1
    assert e.value.line == 5


def test_string_columns_are_rejected(mixed_text):
    with pytest.raises(InconsistentTypeError, match="note"):
        ArffArray.from_text(mixed_text)


def test_unsupported_dtype(iris_text):
    with pytest.raises(ValueError):
        ArffArray.from_text(iris_text, dtype=np.bool_)


def test_clone(iris_text):
    arr = ArffArray.from_text(iris_text)
    rows = arr.clone_rows([2, 0])
    assert rows.n_rows == 2
    assert rows.at(1, 0) == 5.1

    cols = arr.clone_cols([4, 0])
    assert cols.column_names == ["class", "sepallength"]
    assert cols.str_at(0, 0) == "Iris-setosa"

    named = arr.clone_cols_by_name(["petalwidth"])
    assert named.n_cols == 1
    assert np.isnan(named.at(2, 0))
    with pytest.raises(ColumnNameError):
        arr.clone_cols_by_name(["missing"])


def test_astype(iris_text):
    arr = ArffArray.from_text(iris_text)
    assert arr.clone_rows([0, 1]).astype(np.int64).dtype == np.int64
    with pytest.raises(InconsistentTypeError):
        arr.astype(np.int64)
