import pyarrow as pa
import pytest

from arffkit import DataSet, EncoderConfig, NominalOrder
from arffkit.dynamic import narrowest_numeric_type
from arffkit.enum import AttributeKind
from arffkit.errors import (
    ColumnNameError,
    ExtraColumnsError,
    InconsistentTypeError,
    NumberFormatError,
    TruncatedRowError,
    UnknownVariantError,
)


@pytest.mark.parametrize(
    "values, expected",
    [
        ([0, 255], pa.uint8()),
        ([-1, 127], pa.int8()),
        ([0, 256], pa.uint16()),
        ([-1, 200], pa.int16()),
        ([0, 70000], pa.uint32()),
        ([-70000, 1], pa.int32()),
        ([0, 2**63], pa.uint64()),
        ([-(2**40), 1], pa.int64()),
        ([-1, 2**63], pa.float64()),
        ([1, 2.5], pa.float64()),
        ([None, 3], pa.uint8()),
        ([None], pa.uint8()),
    ],
)
def test_narrowest_numeric_type(values, expected):
    assert narrowest_numeric_type(values) == expected


def test_from_text(mixed_text):
    ds = DataSet.from_text(mixed_text)
    assert ds.relation == "weather data"
    assert (ds.n_rows, ds.n_cols) == (3, 4)
    assert len(ds) == 3
    assert ds.column_names == ["id", "note", "outlook", "temp"]
    assert ds.column("id").type == pa.uint16()
    assert ds.column("note").type == pa.string()
    assert pa.types.is_dictionary(ds.column("outlook").type)
    assert ds.column(3).type == pa.float64()


def test_access(mixed_text):
    ds = DataSet.from_text(mixed_text)
    assert ds.row(0) == [1, "hot, dry", "sunny", 85.0]
    assert ds.row(2) == [300, "it's", None, None]
    assert ds.item(1, "outlook") == "light rain"
    assert ds.item(1, 1) is None
    assert list(ds.flat_iter())[:4] == ds.row(0)
    with pytest.raises(ColumnNameError):
        ds.column("wind")


def test_iris(iris_text):
    ds = DataSet.from_text(iris_text)
    assert ds.column("class").dictionary.to_pylist() == [
        "Iris-setosa",
        "Iris-versicolor",
        "Iris-virginica",
    ]
    assert ds.column("petalwidth").null_count == 1


def test_to_table_keeps_relation(iris_text):
    table = DataSet.from_text(iris_text).to_table()
    assert table.num_rows == 3
    assert table.schema.metadata[b"arff.relation"] == b"iris"
    ds = DataSet.from_table(table)
    assert ds.relation == "iris"
    assert ds.attributes[-1].kind == AttributeKind.Nominal
    assert DataSet.from_table(table, relation="other").relation == "other"


def test_from_table_rejects_unsupported_types():
    table = pa.table({"flag": pa.array([True, False])})
    with pytest.raises(InconsistentTypeError, match="flag"):
        DataSet.from_table(table)


def test_to_text_round_trip(mixed_text):
    ds = DataSet.from_text(mixed_text)
    text = ds.to_text()
    assert "@RELATION 'weather data'\n" in text
    assert "1, 'hot, dry', sunny, 85\n" in text
    assert "300, 'it\\'s', ?, ?\n" in text
    again = DataSet.from_text(text)
    assert again.to_table().equals(ds.to_table())


def test_to_text_sorted_labels(iris_text):
    text = DataSet.from_text(iris_text).to_text(
        EncoderConfig(nominal_order=NominalOrder.Sorted)
    )
    assert "{Iris-setosa, Iris-versicolor, Iris-virginica}" in text


@pytest.mark.parametrize(
    "row, error",
    [
        ("1, 'a', sunny", TruncatedRowError),
        ("1, 'a', sunny, 2, 3", ExtraColumnsError),
        ("x, 'a', sunny, 2", NumberFormatError),
        ("1, 'a', rainy, 2", UnknownVariantError),
    ],
)
def test_row_errors(row, error):
    text = (
        "@attribute id NUMERIC\n@attribute s STRING\n"
        "@attribute o {sunny, overcast}\n@attribute t NUMERIC\n"
        f"@data\n1, 'ok', overcast, 0\n{row}\n"
    )
    with pytest.raises(error) as e:
        DataSet.from_text(text)
    assert e.value.row == 1
    assert e.value.line == 7


def test_empty_data_set():
    ds = DataSet.from_text("@RELATION r\n@ATTRIBUTE a NUMERIC\n@DATA\n")
    assert ds.n_rows == 0
    assert ds.column("a").type == pa.uint8()
