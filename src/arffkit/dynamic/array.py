"""
Homogeneous Array Module.

Loads an ARFF data set into one contiguous 2-D numpy array of a single dtype,
keeping the attribute declarations alongside. Nominal cells are stored as the
index of their label in the declaration, so numeric learners can consume the
data directly.
"""

import logging as log
from typing import Any, Iterable, List, Optional

import numpy as np

from arffkit.codec.coercion import from_column, parse_column
from arffkit.enum import AttributeKind, LeafKind
from arffkit.errors import (
    ArffError,
    ColumnNameError,
    ExtraColumnsError,
    InconsistentTypeError,
    MissingValueError,
    TruncatedRowError,
    UnknownVariantError,
)
from arffkit.models.attribute import Attribute
from arffkit.models.header import DEFAULT_RELATION, Header
from arffkit.models.shape import Leaf
from arffkit.parser.lexer import Field, iter_lines


class ArffArray:
    """
    A 2-D numpy array with per-column ARFF metadata.

    Attributes:
        relation (str): The relation name.
        attributes (List[Attribute]): One declaration per column.
        data (np.ndarray): The cells, shape `(n_rows, n_cols)`.
    """

    def __init__(
        self,
        attributes: List[Attribute],
        data: np.ndarray,
        relation: str = DEFAULT_RELATION,
    ):
        if data.ndim != 2 or data.shape[1] != len(attributes):
            raise ValueError(
                f"expected a 2-D array with {len(attributes)} column(s), got shape {data.shape}"
            )
        self.relation = relation
        self.attributes = attributes
        self.data = data

    def __repr__(self) -> str:
        return (
            f"ArffArray(relation={self.relation!r}, shape={self.data.shape}, "
            f"dtype={self.data.dtype})"
        )

    @property
    def n_rows(self) -> int:
        return self.data.shape[0]

    @property
    def n_cols(self) -> int:
        return self.data.shape[1]

    @property
    def dtype(self) -> np.dtype:
        return self.data.dtype

    @property
    def column_names(self) -> List[str]:
        return [attr.name for attr in self.attributes]

    def at(self, row: int, col: int) -> Any:
        return self.data[row, col]

    def row(self, row: int) -> np.ndarray:
        return self.data[row]

    def str_at(self, row: int, col: int) -> Optional[str]:
        """
        Returns the label of a nominal cell, or None for numeric cells and
        missing (NaN) nominal cells.
        """
        attr = self.attributes[col]
        if attr.kind != AttributeKind.Nominal:
            return None
        value = self.data[row, col]
        if np.issubdtype(self.data.dtype, np.floating) and np.isnan(value):
            return None
        assert attr.labels is not None
        return attr.labels[int(value)]

    # --- Cloning ---

    def clone_rows(self, indices: Iterable[int]) -> "ArffArray":
        """Returns a new array holding the given rows, in the given order."""
        return ArffArray(self.attributes, self.data[list(indices)], self.relation)

    def clone_cols(self, indices: Iterable[int]) -> "ArffArray":
        """Returns a new array holding the given columns, in the given order."""
        indices = list(indices)
        return ArffArray(
            [self.attributes[i] for i in indices],
            self.data[:, indices],
            self.relation,
        )

    def clone_cols_by_name(self, names: Iterable[str]) -> "ArffArray":
        """
        Returns a new array holding the named columns, in the given order.

        Raises:
            ColumnNameError: If a name is not a column of this array.
        """
        positions = {attr.name: i for i, attr in enumerate(self.attributes)}
        indices = []
        for name in names:
            if name not in positions:
                raise ColumnNameError(f"no column named '{name}'")
            indices.append(positions[name])
        return self.clone_cols(indices)

    def astype(self, dtype) -> "ArffArray":
        """
        Returns a copy with another dtype.

        Raises:
            InconsistentTypeError: If missing (NaN) cells would be cast to an
                integer dtype.
        """
        dtype = np.dtype(dtype)
        if (
            np.issubdtype(dtype, np.integer)
            and np.issubdtype(self.data.dtype, np.floating)
            and np.isnan(self.data).any()
        ):
            raise InconsistentTypeError(
                f"cannot convert missing values to {dtype}"
            )
        return ArffArray(self.attributes, self.data.astype(dtype), self.relation)

    # --- Parsing ---

    @classmethod
    def from_text(cls, text: str, dtype=np.float64) -> "ArffArray":
        """
        Parses ARFF text into an array of `dtype`.

        Args:
            text (str): The complete ARFF document.
            dtype: An integer or floating numpy dtype.

        Raises:
            InconsistentTypeError: If the header declares a STRING column.
            MissingValueError: If a cell is missing and `dtype` is not floating.
            NumberFormatError: If a NUMERIC cell does not parse as `dtype`
                (`NumericRangeError` if it does not fit).
            UnknownVariantError: If a NOMINAL cell is not a declared label.
            TruncatedRowError, ExtraColumnsError: If a row has the wrong
                number of fields.
        """
        dtype = np.dtype(dtype)
        if np.issubdtype(dtype, np.floating):
            leaf = Leaf(LeafKind.Float, optional=True, python_type=dtype.type)
        elif np.issubdtype(dtype, np.integer):
            leaf = Leaf(LeafKind.Integer, python_type=dtype.type)
        else:
            raise ValueError(f"dtype must be integer or floating, got {dtype}")

        header, data_lines = Header.from_lines(iter_lines(text))
        for index, attr in enumerate(header.attributes):
            if attr.kind == AttributeKind.String:
                raise InconsistentTypeError(
                    f"STRING attribute '{attr.name}' cannot be stored in a {dtype} array",
                    column=index,
                )
        label_positions = [
            {label: i for i, label in enumerate(attr.labels)} if attr.labels else None
            for attr in header.attributes
        ]

        width = len(header)
        rows = []
        for line in data_lines:
            fields = line.fields
            try:
                if len(fields) < width:
                    raise TruncatedRowError(width, len(fields))
                if len(fields) > width:
                    raise ExtraColumnsError(width, len(fields))
                rows.append(
                    [
                        _read_cell(field, leaf, positions, column)
                        for column, (field, positions) in enumerate(
                            zip(fields, label_positions)
                        )
                    ]
                )
            except ArffError as e:
                raise e.at(row=len(rows), line=line.lineno)

        data = np.array(rows, dtype=dtype).reshape(len(rows), width)
        log.debug(f"Loaded relation '{header.relation}' as {dtype} array {data.shape}")
        return cls(header.attributes, data, header.relation)


def _read_cell(field: Field, leaf: Leaf, positions: Optional[dict], column: int) -> Any:
    if positions is None:
        value = from_column(parse_column(field, leaf, column), leaf, column)
        return np.nan if value is None else value

    if field.is_missing():
        if leaf.optional:
            return np.nan
        raise MissingValueError("missing value (?) in an integer array", column=column)
    if field.text not in positions:
        raise UnknownVariantError(
            f"'{field.text}' is not a declared label", column=column, raw=field.text
        )
    return positions[field.text]
