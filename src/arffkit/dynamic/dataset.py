"""
Dynamic Data Set Module.

Loads ARFF text without a target type: the header alone decides how every
column is stored. Columns are pyarrow arrays:

* NUMERIC columns take the narrowest type holding every value, trying
  `uint8, int8, uint16, int16, uint32, int32, uint64, int64` and falling back
  to `float64` as soon as one value is fractional or out of integer range.
* STRING columns are `pa.string()`.
* NOMINAL columns are dictionary arrays over the declared labels.

Missing values (`?`) are nulls.
"""

import logging as log
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

import numpy as np
import pyarrow as pa

from arffkit.codec.config import EncoderConfig
from arffkit.codec.coercion import parse_column
from arffkit.enum import AttributeKind, LeafKind
from arffkit.errors import (
    ArffError,
    ColumnNameError,
    ExtraColumnsError,
    InconsistentTypeError,
    TruncatedRowError,
    UnknownVariantError,
)
from arffkit.helpers import MISSING_TOKEN, format_number, quote, quote_if_needed
from arffkit.models.attribute import Attribute
from arffkit.models.column_value import MISSING
from arffkit.models.header import DEFAULT_RELATION, Header, build_header
from arffkit.models.shape import Leaf
from arffkit.parser.lexer import Field, iter_lines

# Schema metadata key holding the relation name of a converted table.
RELATION_METADATA_KEY = b"arff.relation"

# -------------------------------------------------------------------------
# Integer storage types, narrowest first. Each pyarrow type is paired with
# the numpy type giving its range.
# -------------------------------------------------------------------------
_INTEGER_TYPES = [
    (pa.uint8(), np.uint8),
    (pa.int8(), np.int8),
    (pa.uint16(), np.uint16),
    (pa.int16(), np.int16),
    (pa.uint32(), np.uint32),
    (pa.int32(), np.int32),
    (pa.uint64(), np.uint64),
    (pa.int64(), np.int64),
]

# Parses any number, integral or not.
_NUMBER_LEAF = Leaf(LeafKind.Float, optional=True)


def narrowest_numeric_type(values: Sequence[Optional[Union[int, float]]]) -> pa.DataType:
    """
    Returns the narrowest pyarrow type that holds every non-null value.

    Examples:
        - [1, 200] -> uint8
        - [-1, 200] -> int16
        - [1, 2.5] -> float64
        - [None] -> uint8
    """
    present = [v for v in values if v is not None]
    if any(isinstance(v, float) for v in present):
        return pa.float64()
    if not present:
        return pa.uint8()
    low, high = min(present), max(present)
    for arrow_type, numpy_type in _INTEGER_TYPES:
        info = np.iinfo(numpy_type)
        if info.min <= low and high <= info.max:
            return arrow_type
    return pa.float64()


class DataSet:
    """
    A schema-less, column-oriented ARFF data set.

    Example:
        ```python
        ds = DataSet.from_text(text)
        ds.column("sepal_length").type  # DataType(float64)
        ds.row(0)  # [5.1, 3.5, 'Iris-setosa']
        table = ds.to_table()
        ```

    Attributes:
        relation (str): The relation name.
        attributes (List[Attribute]): The column declarations.
    """

    def __init__(self, relation: str, attributes: List[Attribute], columns: List[pa.Array]):
        if len(attributes) != len(columns):
            raise ValueError("one column per attribute is required")
        if len({len(col) for col in columns}) > 1:
            raise ValueError("all columns must have the same length")
        self.header = Header(relation=relation, attributes=attributes)
        self._columns = columns
        self._index: Dict[str, int] = {
            attr.name: i for i, attr in enumerate(attributes)
        }

    def __repr__(self) -> str:
        return (
            f"DataSet(relation={self.relation!r}, n_rows={self.n_rows}, "
            f"columns={self.column_names})"
        )

    def __len__(self) -> int:
        return self.n_rows

    # --- Properties ---

    @property
    def relation(self) -> str:
        return self.header.relation

    @property
    def attributes(self) -> List[Attribute]:
        return self.header.attributes

    @property
    def column_names(self) -> List[str]:
        return self.header.names

    @property
    def n_cols(self) -> int:
        return len(self._columns)

    @property
    def n_rows(self) -> int:
        return len(self._columns[0]) if self._columns else 0

    # --- Access ---

    def column(self, key: Union[int, str]) -> pa.Array:
        """
        Returns a column by position or name.

        Raises:
            ColumnNameError: If no column has the name `key`.
        """
        return self._columns[self._column_index(key)]

    def row(self, index: int) -> List[Any]:
        """Returns row `index` as Python values (labels for nominal cells, None for missing)."""
        return [col[index].as_py() for col in self._columns]

    def item(self, row: int, col: Union[int, str]) -> Any:
        return self.column(col)[row].as_py()

    def flat_iter(self) -> Iterator[Any]:
        """Yields every cell value, row by row."""
        for index in range(self.n_rows):
            yield from self.row(index)

    def _column_index(self, key: Union[int, str]) -> int:
        if isinstance(key, str):
            if key not in self._index:
                raise ColumnNameError(f"no column named '{key}'")
            return self._index[key]
        return key

    # --- Parsing ---

    @classmethod
    def from_text(cls, text: str) -> "DataSet":
        """
        Parses ARFF text, typing every column from the header.

        Raises:
            FormatError: If the text is malformed.
            TruncatedRowError, ExtraColumnsError: If a row has the wrong
                number of fields.
            NumberFormatError: If a NUMERIC cell is not a number.
            UnknownVariantError: If a NOMINAL cell is not a declared label.
        """
        header, data_lines = Header.from_lines(iter_lines(text))
        width = len(header)
        cells: List[List[Field]] = [[] for _ in range(width)]
        linenos: List[int] = []

        for line in data_lines:
            row = len(linenos)
            fields = line.fields
            if len(fields) < width:
                raise TruncatedRowError(width, len(fields), row=row, line=line.lineno)
            if len(fields) > width:
                raise ExtraColumnsError(width, len(fields), row=row, line=line.lineno)
            for column, field in zip(cells, fields):
                column.append(field)
            linenos.append(line.lineno)

        columns = []
        for index, (attr, fields) in enumerate(zip(header.attributes, cells)):
            columns.append(_build_column(attr, fields, index, linenos))

        log.debug(
            f"Loaded relation '{header.relation}': "
            f"{len(linenos)} row(s), {width} column(s)"
        )
        return cls(header.relation, header.attributes, columns)

    # --- Conversion ---

    def to_table(self) -> pa.Table:
        """Returns a pyarrow Table; the relation name is kept in the schema metadata."""
        table = pa.Table.from_arrays(self._columns, names=self.column_names)
        return table.replace_schema_metadata(
            {RELATION_METADATA_KEY: self.relation.encode()}
        )

    @classmethod
    def from_table(cls, table: pa.Table, relation: Optional[str] = None) -> "DataSet":
        """
        Wraps a pyarrow Table.

        Integer and floating columns become NUMERIC, string columns STRING
        and dictionary columns NOMINAL (labels from the dictionary).

        Raises:
            InconsistentTypeError: If a column has any other type.
        """
        if relation is None:
            metadata = table.schema.metadata or {}
            relation = metadata.get(RELATION_METADATA_KEY, b"").decode() or DEFAULT_RELATION
        attributes, columns = [], []
        for index, (field, chunked) in enumerate(zip(table.schema, table.columns)):
            if pa.types.is_dictionary(field.type) and pa.types.is_string(
                field.type.value_type
            ):
                # chunks may carry different dictionaries
                array = chunked.unify_dictionaries().combine_chunks()
                attributes.append(
                    Attribute.nominal(field.name, array.dictionary.to_pylist())
                )
                columns.append(array)
                continue
            array = chunked.combine_chunks()
            if pa.types.is_integer(field.type) or pa.types.is_floating(field.type):
                attributes.append(Attribute.numeric(field.name))
            elif pa.types.is_string(field.type) or pa.types.is_large_string(field.type):
                attributes.append(Attribute.string(field.name))
            else:
                raise InconsistentTypeError(
                    f"column '{field.name}' has unsupported type {field.type}",
                    column=index,
                )
            columns.append(array)
        return cls(relation, attributes, columns)

    def to_text(self, config: Optional[EncoderConfig] = None) -> str:
        """Writes the data set back to ARFF text."""
        config = config or EncoderConfig()
        attributes = [
            Attribute.nominal(attr.name, config.order_labels(attr.labels))
            if attr.kind == AttributeKind.Nominal
            else attr
            for attr in self.attributes
        ]
        parts = [build_header(self.relation, attributes, config.quote_char)]
        columns = [col.to_pylist() for col in self._columns]
        for index in range(self.n_rows):
            cells = (
                _format_cell(attr, col[index], config.quote_char)
                for attr, col in zip(self.attributes, columns)
            )
            parts.append(", ".join(cells) + "\n")
        return "".join(parts)


def _build_column(
    attr: Attribute, fields: List[Field], column: int, linenos: List[int]
) -> pa.Array:
    row = 0
    try:
        if attr.kind == AttributeKind.Numeric:
            values = []
            for row, field in enumerate(fields):
                cv = parse_column(field, _NUMBER_LEAF, column)
                values.append(None if cv is MISSING else cv.value)
            arrow_type = narrowest_numeric_type(values)
            if pa.types.is_floating(arrow_type):
                values = [None if v is None else float(v) for v in values]
            return pa.array(values, type=arrow_type)

        if attr.kind == AttributeKind.String:
            return pa.array(
                [None if f.is_missing() else f.text for f in fields], type=pa.string()
            )

        assert attr.labels is not None
        positions = {label: i for i, label in enumerate(attr.labels)}
        indices = []
        for row, field in enumerate(fields):
            if field.is_missing():
                indices.append(None)
            elif field.text in positions:
                indices.append(positions[field.text])
            else:
                raise UnknownVariantError(
                    f"'{field.text}' is not a declared label of '{attr.name}'",
                    column=column,
                    raw=field.text,
                )
        return pa.DictionaryArray.from_arrays(
            pa.array(indices, type=pa.int32()), pa.array(attr.labels, type=pa.string())
        )
    except ArffError as e:
        raise e.at(row=row, line=linenos[row] if linenos else None)


def _format_cell(attr: Attribute, value: Any, quote_char: str) -> str:
    if value is None:
        return MISSING_TOKEN
    if attr.kind == AttributeKind.Numeric:
        return format_number(value)
    if attr.kind == AttributeKind.String:
        return quote(value, quote_char)
    return quote_if_needed(value, quote_char)
