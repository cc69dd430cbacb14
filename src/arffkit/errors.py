"""
Error Taxonomy Module.

Every failure raised by the codec derives from `ArffError`. Errors are grouped
by the layer that detects them:

* `FormatError`: malformed text at the lexer/header layer.
* `ShapeError` family: structural mismatches between row shapes, declared
  columns and the tokens or rows actually found.
* `ArffValueError` family: primitive coercion failures for a single cell.

All errors are fatal to the call that raised them. Each carries as much
positional context as is known where it is raised (`line`, `row`, `column`,
`raw`); outer layers fill in what inner layers could not know via `at()`.
"""

from typing import Optional


class ArffError(Exception):
    """
    Base class for all codec errors.

    Attributes:
        message (str): Human readable description, without context.
        line (Optional[int]): 1-based line number in the input text.
        row (Optional[int]): 0-based index of the data row.
        column (Optional[int]): 0-based index of the flattened column.
        raw (Optional[str]): The offending raw text, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        row: Optional[int] = None,
        column: Optional[int] = None,
        raw: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.line = line
        self.row = row
        self.column = column
        self.raw = raw

    def at(
        self,
        *,
        line: Optional[int] = None,
        row: Optional[int] = None,
        column: Optional[int] = None,
    ) -> "ArffError":
        """
        Fills in missing positional context and returns the same error,
        so callers can write `raise err.at(row=i)`.

        Context already set by an inner layer is never overwritten.
        """
        if self.line is None:
            self.line = line
        if self.row is None:
            self.row = row
        if self.column is None:
            self.column = column
        return self

    def __str__(self) -> str:
        context = []
        if self.line is not None:
            context.append(f"line {self.line}")
        if self.row is not None:
            context.append(f"row {self.row}")
        if self.column is not None:
            context.append(f"column {self.column}")
        if self.raw is not None:
            context.append(f"raw {self.raw!r}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class FormatError(ArffError):
    """Malformed directive, quoting or row syntax."""


# --- Shape errors ---


class ShapeError(ArffError):
    """Structural mismatch between a row shape and declared or actual columns."""


class UnsupportedShapeError(ShapeError):
    """The requested row or data set shape cannot be mapped to ARFF columns."""


class DuplicateColumnError(ShapeError):
    """Two flattened columns would share the same attribute name."""


class ColumnNameError(ShapeError):
    """The header names do not match the column names of a record shape."""


class TruncatedRowError(ShapeError):
    """A data row has fewer tokens than the row shape requires."""

    def __init__(self, expected: int, actual: int, **context):
        super().__init__(
            f"row has {actual} column(s), expected {expected}", **context
        )
        self.expected = expected
        self.actual = actual


class ExtraColumnsError(ShapeError):
    """A data row has more tokens than the row shape consumes."""

    def __init__(self, expected: int, actual: int, **context):
        super().__init__(
            f"row has {actual} column(s), expected only {expected}", **context
        )
        self.expected = expected
        self.actual = actual


class RowArityError(ShapeError):
    """A row flattens to a different number of columns than was declared."""


class RowCountError(ShapeError):
    """A fixed-size container received a different number of rows."""

    def __init__(self, expected: int, actual: int, **context):
        super().__init__(
            f"expected exactly {expected} row(s), found {actual}", **context
        )
        self.expected = expected
        self.actual = actual


# --- Value errors ---


class ArffValueError(ArffError, ValueError):
    """A single cell could not be coerced to or from its column value."""


class NumberFormatError(ArffValueError):
    """A numeric token does not parse as the requested numeric type."""


class NumericRangeError(NumberFormatError):
    """A numeric token parses, but lies outside the target type's range."""


class UnknownVariantError(ArffValueError):
    """A nominal label is not one of the target enumeration's variants."""


class MissingValueError(ArffValueError):
    """A missing value (`?`) was found where the target is not optional."""


class InconsistentTypeError(ArffValueError):
    """A value's type does not match the kind declared for its column."""


class RecordValidationError(ArffValueError):
    """A record class rejected the values decoded for one row."""
