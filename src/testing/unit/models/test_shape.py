import dataclasses
from typing import Annotated, Dict, List, Literal, Optional, Sequence, Tuple, Union

import numpy as np
import pytest
from annotated_types import Len
from pydantic import BaseModel

from arffkit import Record
from arffkit.enum import AttributeKind, LeafKind
from arffkit.errors import DuplicateColumnError, UnsupportedShapeError
from arffkit.models import (
    DynamicSequence,
    FixedSequence,
    Leaf,
    Struct,
    array_of,
    dataset_shape_of,
    infer_shape,
    leaf,
    shape_of,
    struct_of,
    tuple_of,
)
from testing.unit.records import (
    Color,
    Measurement,
    NamedPairs,
    Nested,
    Pair,
    Pairs,
    Point,
    Sample,
    Species,
    Window,
)


@pytest.mark.parametrize(
    "hint, kind",
    [
        (int, LeafKind.Integer),
        (float, LeafKind.Float),
        (str, LeafKind.String),
        (bool, LeafKind.Boolean),
        (np.int16, LeafKind.Integer),
        (np.float32, LeafKind.Float),
        (Color, LeafKind.Nominal),
        (Literal["a", "b"], LeafKind.Nominal),
    ],
)
def test_scalar_shapes(hint, kind):
    shape = shape_of(hint)
    assert isinstance(shape, Leaf)
    assert shape.kind == kind
    assert not shape.optional


def test_optional_leaf():
    shape = shape_of(Optional[float])
    assert shape == Leaf(LeafKind.Float, optional=True)
    assert shape_of(int | None).optional


def test_numpy_leaf_keeps_type():
    assert shape_of(np.uint8).python_type is np.uint8
    assert shape_of(int).python_type is None


def test_leaf_attribute_kinds():
    assert shape_of(int).attribute_kind == AttributeKind.Numeric
    assert shape_of(str).attribute_kind == AttributeKind.String
    assert shape_of(bool).attribute_kind == AttributeKind.Nominal
    assert shape_of(Species).table.labels == (
        "Iris-setosa",
        "Iris-versicolor",
        "Iris-virginica",
    )
    assert shape_of(Color).table.labels == ("Red", "Green", "Blue")


def test_nested_tuple_flattens_depth_first():
    shape = shape_of(Nested)
    assert isinstance(shape, FixedSequence)
    assert shape.leaf_count == 4
    assert shape.column_names() == ["col0", "col1", "col2", "col3"]
    assert shape == tuple_of(int, array_of(int, 2), int)


def test_record_shapes():
    shape = Measurement.row_shape()
    assert isinstance(shape, Struct)
    assert shape.factory is Measurement
    assert shape.column_names() == ["sensor", "value", "ok", "color", "grade"]
    assert [lf.kind for lf in shape.leaves()] == [
        LeafKind.String,
        LeafKind.Float,
        LeafKind.Boolean,
        LeafKind.Nominal,
        LeafKind.Nominal,
    ]
    assert list(shape.leaves())[1].optional


def test_fixed_length_list_field():
    assert Window.column_names() == ["start", "samples0", "samples1", "samples2", "end"]


def test_dataclass_and_namedtuple_shapes():
    point = shape_of(Point)
    assert point.column_names() == ["x", "y", "label"]
    assert point.factory is Point
    sample = shape_of(Sample)
    assert [lf.python_type for lf in sample.leaves()] == [np.uint8, np.float32]


def test_shape_of_is_reused_for_records():
    assert shape_of(Pair) is Pair.row_shape()


@pytest.mark.parametrize(
    "hint",
    [
        List[int],
        Tuple[int, ...],
        list,
        Dict[str, int],
        Union[int, str],
        Optional[Tuple[int, int]],
        Literal[1, 2],
        object,
    ],
)
def test_unsupported_row_hints(hint):
    with pytest.raises(UnsupportedShapeError):
        shape_of(hint)


def test_nested_record_is_rejected():
    with pytest.raises(UnsupportedShapeError, match="nests a record"):

        class Outer(Record):
            inner: Pair

    with pytest.raises(UnsupportedShapeError, match="nests a record"):
        struct_of({"pairs": tuple_of(int, Pair)})


def test_recursive_type_is_rejected():
    class Node(BaseModel):
        value: int
        next: Optional["Node"] = None

    Node.model_rebuild()
    with pytest.raises(UnsupportedShapeError):
        shape_of(Node)


def test_duplicate_column_names_are_rejected():
    with pytest.raises(DuplicateColumnError, match="a0"):
        struct_of([("a", array_of(int, 2)), ("a0", int)])


def test_variable_length_row_is_rejected():
    with pytest.raises(UnsupportedShapeError, match="Variable-length rows"):
        DynamicSequence(DynamicSequence(leaf(int)))
    with pytest.raises(UnsupportedShapeError, match="Variable-length rows"):
        FixedSequence((DynamicSequence(leaf(int)),))


def test_empty_shapes_are_rejected():
    with pytest.raises(UnsupportedShapeError):
        Struct(())
    with pytest.raises(UnsupportedShapeError):
        array_of(int, 0)
    with pytest.raises(UnsupportedShapeError):
        Leaf(LeafKind.Nominal)


def test_leaf_constructor():
    assert leaf(int, optional=True) == Leaf(LeafKind.Integer, optional=True)
    with pytest.raises(UnsupportedShapeError):
        leaf(Pair)


@pytest.mark.parametrize(
    "hint, container, length",
    [
        (List[Pair], list, None),
        (Sequence[Pair], list, None),
        (Tuple[Pair, ...], tuple, None),
        (Tuple[Pair, Pair], tuple, 2),
        (Annotated[List[Pair], Len(3, 3)], list, 3),
    ],
)
def test_dataset_shapes(hint, container, length):
    shape = dataset_shape_of(hint)
    assert shape.element is Pair.row_shape()
    assert shape.container is container
    assert shape.length == length
    assert shape.relation is None


def test_root_model_dataset_shapes():
    shape = dataset_shape_of(Pairs)
    assert shape.relation == "Pairs"
    rows = shape.container([Pair(a=1, b=2)])
    assert isinstance(rows, Pairs)
    assert dataset_shape_of(NamedPairs).relation == "pairs"


@pytest.mark.parametrize("hint", [list, List, Pair, int, Tuple[Pair, int]])
def test_unsupported_dataset_hints(hint):
    with pytest.raises(UnsupportedShapeError):
        dataset_shape_of(hint)


def test_infer_shape():
    assert infer_shape((1, [2.5, 3.0], "x")) == FixedSequence(
        (
            Leaf(LeafKind.Float, optional=True),
            FixedSequence(
                (Leaf(LeafKind.Float, optional=True), Leaf(LeafKind.Float, optional=True)),
                list,
            ),
            Leaf(LeafKind.String, optional=True),
        ),
        tuple,
    )
    assert infer_shape(Pair(a=1, b=2)) is Pair.row_shape()
    assert infer_shape(Point(1, 2)).factory is Point
    assert infer_shape({"a": 1, "b": True}).column_names() == ["a", "b"]
    assert infer_shape(np.arange(3)).leaf_count == 3
    assert infer_shape(Color.Red).kind == LeafKind.Nominal
    assert infer_shape(Color.Red).optional
    assert infer_shape(np.uint8(3)) == Leaf(LeafKind.Float, optional=True)
    assert infer_shape(True) == Leaf(LeafKind.Boolean, optional=True)


@pytest.mark.parametrize("value", [None, (), {}, object(), (1, None)])
def test_infer_shape_failures(value):
    with pytest.raises(UnsupportedShapeError):
        infer_shape(value)


def test_shapes_are_hashable_values():
    @dataclasses.dataclass
    class A:
        x: int

    assert shape_of(Tuple[int, str]) == shape_of(Tuple[int, str])
    assert hash(shape_of(Tuple[int, str])) == hash(shape_of(Tuple[int, str]))
    assert shape_of(A) == shape_of(A)
