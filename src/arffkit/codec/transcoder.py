"""
Transcoder Module.

The two entry points of the typed codec:

* `encode`: data set -> ARFF text. Derives the relation name and the
  attribute declarations from the row shape, then writes one line per row.
* `decode`: ARFF text -> data set of the requested type. Parses the header,
  then unflattens every data line into the row shape of the target.

Example:
    ```python
    class Point(Record):
        x: int
        y: int

    text = encode([Point(x=1, y=2)], relation="points")
    points = decode(text, List[Point])
    ```
"""

import logging as log
from typing import Any, Iterable, List, Optional, Sequence

import pydantic

from arffkit.enum import AttributeKind
from arffkit.errors import ArffError, ColumnNameError, RowCountError
from arffkit.models.attribute import Attribute
from arffkit.models.header import build_header, parse_header
from arffkit.models.internal.type_mapper import dataset_shape_of, infer_shape, shape_of
from arffkit.models.shape import DynamicSequence, Leaf, RowShape, Struct
from arffkit.parser.lexer import Field, Line, iter_lines

from .config import EncoderConfig
from .flattener import column_names, flatten, unflatten


# --- Writing ---


def encode(
    data_set: Any,
    shape: Any = None,
    relation: Optional[str] = None,
    config: Optional[EncoderConfig] = None,
) -> str:
    """
    Serializes a data set to ARFF text.

    Args:
        data_set (Any): A sequence of rows, or a `pydantic.RootModel`
            wrapping one.
        shape (Any): The row shape, a row type, or a data set shape. If None,
            it is taken from the RootModel type or inferred from the first row.
        relation (Optional[str]): The relation name. Defaults to the
            container's `__arff_relation__`, then the RootModel class name,
            then `config.default_relation`.
        config (Optional[EncoderConfig]): Writer settings.

    Returns:
        str: The complete ARFF document.

    Raises:
        UnsupportedShapeError: If the row shape cannot be derived.
        RowArityError: If a row does not match the row shape.
        ArffValueError: If a value does not fit its column.
        Errors raised for a row carry its 0-based `row` index.
    """
    config = config or EncoderConfig()
    rows = _rows_of(data_set)
    container_shape = _container_shape(data_set, shape)

    row_shape = _row_shape_of(shape, container_shape, rows)
    relation = (
        relation
        or (container_shape.relation if container_shape else None)
        or _relation_of(data_set)
        or config.default_relation
    )
    attributes = declare_attributes(row_shape, config) if row_shape else []

    parts = [build_header(relation, attributes, config.quote_char)]
    for index, row in enumerate(rows):
        try:
            values = flatten(row, row_shape)
        except ArffError as e:
            raise e.at(row=index)
        parts.append(", ".join(v.to_text(config.quote_char) for v in values) + "\n")

    log.debug(
        f"Encoded {len(rows)} row(s) of relation '{relation}' "
        f"with {len(attributes)} attribute(s)"
    )
    return "".join(parts)


def declare_attributes(
    shape: RowShape, config: Optional[EncoderConfig] = None
) -> List[Attribute]:
    """
    Returns one attribute declaration per flattened column of `shape`.

    Integer and float leaves are declared NUMERIC, strings STRING, booleans
    `{f, t}` and enumerations with their label set.
    """
    config = config or EncoderConfig()
    attributes = []
    for name, leaf in zip(column_names(shape), shape.leaves()):
        if leaf.attribute_kind == AttributeKind.Nominal:
            attributes.append(
                Attribute.nominal(name, config.order_labels(leaf.table.labels))
            )
        else:
            attributes.append(Attribute(name=name, kind=leaf.attribute_kind))
    return attributes


def _rows_of(data_set: Any) -> Sequence[Any]:
    if isinstance(data_set, pydantic.RootModel):
        data_set = data_set.root
    if isinstance(data_set, (str, bytes)) or not isinstance(data_set, Iterable):
        raise TypeError(
            f"Expected a sequence of rows, got {type(data_set).__name__}"
        )
    return data_set if isinstance(data_set, (list, tuple)) else list(data_set)


def _relation_of(data_set: Any) -> Optional[str]:
    relation = getattr(type(data_set), "__arff_relation__", None)
    if relation is None and isinstance(data_set, pydantic.RootModel):
        return type(data_set).__name__
    return relation


def _container_shape(data_set: Any, shape: Any) -> Optional[DynamicSequence]:
    if isinstance(shape, DynamicSequence):
        return shape
    if shape is None and isinstance(data_set, pydantic.RootModel):
        return dataset_shape_of(type(data_set))
    return None


def _row_shape_of(
    shape: Any, container_shape: Optional[DynamicSequence], rows: Sequence[Any]
) -> Optional[RowShape]:
    if container_shape is not None:
        return container_shape.element
    if shape is not None:
        return shape_of(shape)
    if rows:
        return infer_shape(rows[0])
    return None


# --- Reading ---


def decode(text: str, target: Any) -> Any:
    """
    Parses ARFF text into a data set of type `target`.

    Args:
        text (str): The complete ARFF document.
        target (Any): A data set type such as `List[Row]`, `Tuple[Row, ...]`,
            `Annotated[List[Row], Len(n, n)]` or a `pydantic.RootModel`
            subclass, or a `DynamicSequence` shape.

    Returns:
        Any: The rows, collected in the target container.

    Notes:
        The target's leaves govern coercion; the declared attribute kinds
        are advisory and a mismatch is only logged. For record rows whose
        column names the header declares exactly (in any order), tokens
        are routed by name.

    Raises:
        FormatError: If the text is malformed.
        ColumnNameError: If a record's column names do not match the header.
        TruncatedRowError, ExtraColumnsError: If a row has the wrong number
            of tokens.
        RowCountError: If a fixed-size target receives a different number
            of rows.
        ArffValueError: If a token does not coerce to its target type.
        Errors raised for a row carry its 0-based `row` index and its 1-based
        `line` number.
    """
    shape = dataset_shape_of(target)
    row_shape = shape.element
    relation, attributes, data_lines = parse_header(iter_lines(text))

    order = _column_order(attributes, row_shape)
    _check_kinds(attributes, row_shape, order)

    rows: List[Any] = []
    try:
        for line in data_lines:
            rows.append(_decode_row(line, row_shape, order))
    except ArffError as e:
        raise e.at(row=len(rows))

    if shape.length is not None and len(rows) != shape.length:
        raise RowCountError(shape.length, len(rows))

    log.debug(f"Decoded {len(rows)} row(s) of relation '{relation}'")
    return shape.container(rows)


def _decode_row(line: Line, row_shape: RowShape, order: Optional[List[int]]) -> Any:
    fields: Sequence[Field] = line.fields
    if order is not None and len(fields) == len(order):
        fields = [fields[i] for i in order]
    try:
        return unflatten(fields, row_shape)
    except ArffError as e:
        raise e.at(line=line.lineno)


def _column_order(
    attributes: List[Attribute], row_shape: RowShape
) -> Optional[List[int]]:
    """
    Returns, for each column of a record shape, the index of the header
    column holding it, or None if tokens are read positionally.

    Raises:
        ColumnNameError: If the header declares as many columns as the record
            has, but under different names.
    """
    if not isinstance(row_shape, Struct):
        return None
    expected = row_shape.column_names()
    declared = [attr.name for attr in attributes]
    if declared == expected or len(declared) != len(expected):
        return None
    if set(declared) != set(expected):
        unknown = sorted(set(declared) - set(expected))
        missing = sorted(set(expected) - set(declared))
        raise ColumnNameError(
            f"header columns {unknown} do not match fields {missing} of "
            f"{row_shape.name or 'record'}"
        )
    return [declared.index(name) for name in expected]


def _check_kinds(
    attributes: List[Attribute], row_shape: RowShape, order: Optional[List[int]]
) -> None:
    leaves: List[Leaf] = list(row_shape.leaves())
    if len(leaves) != len(attributes):
        log.warning(
            f"Header declares {len(attributes)} attribute(s), "
            f"rows of the target have {len(leaves)} column(s)"
        )
        return
    if order is not None:
        attributes = [attributes[i] for i in order]
    for attr, leaf in zip(attributes, leaves):
        if attr.kind != leaf.attribute_kind:
            log.warning(
                f"Attribute '{attr.name}' is declared {attr.kind}, "
                f"reading it as {leaf.kind}"
            )
