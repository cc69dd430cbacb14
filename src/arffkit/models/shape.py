"""
Row Shape Module.

A row shape is an explicit, reusable descriptor of one row's structure. It
plays the role a compile-time serialization derive would play elsewhere: it
is built once per row type (by hand, or from type hints with `shape_of`) and
then drives both flattening (writing) and reconstruction (reading).

Shapes:
    * `Leaf`: one primitive column.
    * `Struct`: named fields, built back through a factory (a model class,
      a dataclass, `dict`, ...). Struct-within-Struct is rejected.
    * `FixedSequence`: a fixed number of positional elements (tuples, and
      fixed-size arrays via `array_of`).
    * `DynamicSequence`: a data set of rows. Never valid as a row.

Nesting is flattened depth-first, left to right.
"""

import dataclasses
from functools import cached_property
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple, Type

from arffkit.enum import AttributeKind, LeafKind
from arffkit.errors import DuplicateColumnError, UnsupportedShapeError

from .nominal import NominalTable


class RowShape:
    """Base class of all shape descriptors."""

    @property
    def leaf_count(self) -> int:
        """Number of flat columns this shape occupies."""
        raise NotImplementedError

    def leaves(self) -> Iterator["Leaf"]:
        """Yields the leaves of this shape in flattening order."""
        raise NotImplementedError

    def column_names(self) -> List[str]:
        """
        Returns the attribute names of the flattened columns.

        Names come from the outermost shape only: a `Struct` names its
        fields (see `Struct.column_names`), every other shape yields
        synthesized positions `col0`, `col1`, ...
        """
        return [f"col{i}" for i in range(self.leaf_count)]


@dataclasses.dataclass(frozen=True)
class Leaf(RowShape):
    """
    One primitive column.

    Attributes:
        kind (LeafKind): How the cell is coerced.
        optional (bool): Whether the missing marker maps to `None`.
        python_type (Optional[type]): The concrete target type: a numpy
            scalar type for fixed-width numbers, the `Enum` subclass for
            nominal leaves. None means the builtin type of `kind`.
        labels (Tuple[str, ...]): Labels of a literal nominal leaf.
    """

    kind: LeafKind
    optional: bool = False
    python_type: Optional[type] = None
    labels: Tuple[str, ...] = ()

    def __post_init__(self):
        if (
            self.kind == LeafKind.Nominal
            and self.python_type is None
            and not self.labels
        ):
            raise UnsupportedShapeError(
                "A nominal leaf needs an Enum type or a non-empty label set."
            )

    @property
    def leaf_count(self) -> int:
        return 1

    def leaves(self) -> Iterator["Leaf"]:
        yield self

    @property
    def table(self) -> NominalTable:
        """The label table of a nominal or boolean leaf."""
        if self.kind == LeafKind.Boolean:
            return NominalTable.for_bool()
        if self.kind != LeafKind.Nominal:
            raise TypeError(f"{self.kind} leaves have no label table")
        if self.python_type is not None:
            return NominalTable.for_enum(self.python_type)
        return NominalTable.for_labels(self.labels)

    @property
    def attribute_kind(self) -> AttributeKind:
        """The ARFF column kind this leaf is declared as."""
        if self.kind in (LeafKind.Integer, LeafKind.Float):
            return AttributeKind.Numeric
        if self.kind == LeafKind.String:
            return AttributeKind.String
        return AttributeKind.Nominal


@dataclasses.dataclass(frozen=True)
class Struct(RowShape):
    """
    Named fields, flattened in declaration order.

    Attributes:
        fields (Tuple[Tuple[str, RowShape], ...]): `(name, shape)` pairs.
        factory (Callable[..., Any]): Called with one keyword argument per
            field to rebuild a value (defaults to `dict`).
        name (Optional[str]): The record type name, informational.

    Raises:
        UnsupportedShapeError: If there are no fields, or a field nests
            another Struct at any depth.
        DuplicateColumnError: If two flattened columns share a name.
    """

    fields: Tuple[Tuple[str, RowShape], ...]
    factory: Callable[..., Any] = dict
    name: Optional[str] = None

    def __post_init__(self):
        if not self.fields:
            raise UnsupportedShapeError(f"Struct '{self.name}' has no fields.")
        for field_name, shape in self.fields:
            _require_row_shape(shape)
            if _contains_struct(shape):
                raise UnsupportedShapeError(
                    f"Field '{field_name}' of '{self.name or 'struct'}' nests a record; "
                    "nested records have no unambiguous column names."
                )
        names = self.column_names()
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise DuplicateColumnError(
                f"Struct '{self.name or 'struct'}' flattens to duplicate column names {dupes}."
            )

    @cached_property
    def leaf_count(self) -> int:
        return sum(shape.leaf_count for _, shape in self.fields)

    def leaves(self) -> Iterator[Leaf]:
        for _, shape in self.fields:
            yield from shape.leaves()

    def column_names(self) -> List[str]:
        """
        Each field contributes its name; a field flattening to k > 1 columns
        contributes `<name>0 .. <name>k-1`.
        """
        names = []
        for field_name, shape in self.fields:
            count = shape.leaf_count
            if count == 1:
                names.append(field_name)
            else:
                names.extend(f"{field_name}{i}" for i in range(count))
        return names


@dataclasses.dataclass(frozen=True)
class FixedSequence(RowShape):
    """
    A fixed number of positional elements.

    Attributes:
        elements (Tuple[RowShape, ...]): One shape per position.
        container (Callable): Builds the value from a list of elements
            (`tuple` or `list`).
    """

    elements: Tuple[RowShape, ...]
    container: Callable[[List[Any]], Any] = tuple

    def __post_init__(self):
        if not self.elements:
            raise UnsupportedShapeError("A fixed sequence needs at least one element.")
        for shape in self.elements:
            _require_row_shape(shape)

    @cached_property
    def leaf_count(self) -> int:
        return sum(shape.leaf_count for shape in self.elements)

    def leaves(self) -> Iterator[Leaf]:
        for shape in self.elements:
            yield from shape.leaves()


@dataclasses.dataclass(frozen=True)
class DynamicSequence(RowShape):
    """
    A data set: a variable number of rows of one shape.

    Attributes:
        element (RowShape): The shape of every row.
        container (Callable): Builds the data set from the list of rows.
        length (Optional[int]): Required row count for fixed-size containers.
        relation (Optional[str]): Relation name carried by the container type.

    Raises:
        UnsupportedShapeError: If `element` is itself a DynamicSequence
            (a variable-length row).
    """

    element: RowShape
    container: Callable[[List[Any]], Any] = list
    length: Optional[int] = None
    relation: Optional[str] = None

    def __post_init__(self):
        _require_row_shape(self.element)

    @property
    def leaf_count(self) -> int:
        raise UnsupportedShapeError("A data set does not flatten to a fixed column count.")

    def leaves(self) -> Iterator[Leaf]:
        raise UnsupportedShapeError("A data set is not a row.")


# --- Constructors ---


def leaf(python_type: Type, optional: bool = False) -> Leaf:
    """Builds a leaf from a scalar type, e.g. `leaf(int)` or `leaf(Color)`."""
    from .internal.type_mapper import shape_of

    shape = shape_of(python_type)
    if not isinstance(shape, Leaf):
        raise UnsupportedShapeError(f"{python_type!r} is not a primitive type.")
    return dataclasses.replace(shape, optional=optional) if optional else shape


def array_of(element: Any, length: int, container: Callable = list) -> FixedSequence:
    """
    Builds a fixed-size array shape, e.g. `array_of(int, 3)`.

    `element` may be a RowShape or anything `shape_of` accepts.
    """
    if length < 1:
        raise UnsupportedShapeError("Arrays must have at least one element.")
    return FixedSequence((_as_shape(element),) * length, container)


def tuple_of(*elements: Any) -> FixedSequence:
    """Builds a heterogeneous tuple shape, e.g. `tuple_of(int, array_of(int, 2), int)`."""
    return FixedSequence(tuple(_as_shape(e) for e in elements), tuple)


def struct_of(
    fields: Sequence[Tuple[str, Any]] | dict,
    factory: Callable[..., Any] = dict,
    name: Optional[str] = None,
) -> Struct:
    """Builds a record shape from `(name, type)` pairs or a `{name: type}` mapping."""
    items = fields.items() if isinstance(fields, dict) else fields
    return Struct(tuple((n, _as_shape(t)) for n, t in items), factory, name)


def _as_shape(spec: Any) -> RowShape:
    if isinstance(spec, RowShape):
        return spec
    from .internal.type_mapper import shape_of

    return shape_of(spec)


def _require_row_shape(shape: RowShape) -> None:
    if isinstance(shape, DynamicSequence):
        raise UnsupportedShapeError(
            "Variable-length rows are not supported: rows must have a fixed number of columns."
        )
    if not isinstance(shape, RowShape):
        raise UnsupportedShapeError(f"{shape!r} is not a row shape.")


def _contains_struct(shape: RowShape) -> bool:
    if isinstance(shape, Struct):
        return True
    if isinstance(shape, FixedSequence):
        return any(_contains_struct(e) for e in shape.elements)
    return False
