"""
Column Value Module.

The intermediate, type-erased form of one cell. Coercion turns Python values
into column values (and back); the writer and the lexer only ever see these.
"""

import dataclasses
from typing import Optional, Union

from arffkit.helpers import MISSING_TOKEN, format_number, quote, quote_if_needed


@dataclasses.dataclass(frozen=True)
class Number:
    """
    A numeric cell.

    `raw` keeps the token text when the value was read, so integer targets can
    reject tokens such as `1.0` or `1e3` that a float would silently accept.
    """

    value: Union[int, float]
    raw: Optional[str] = None

    def to_text(self, quote_char: str = "'") -> str:
        return format_number(self.value)


@dataclasses.dataclass(frozen=True)
class Text:
    """A string cell. Always written quoted, so `''` and `'?'` round-trip."""

    value: str

    def to_text(self, quote_char: str = "'") -> str:
        return quote(self.value, quote_char)


@dataclasses.dataclass(frozen=True)
class Nominal:
    """A nominal cell, holding the label (not the Python variant)."""

    label: str

    def to_text(self, quote_char: str = "'") -> str:
        return quote_if_needed(self.label, quote_char)


class _Missing:
    _instance: Optional["_Missing"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __reduce__(self):
        return (_Missing, ())

    def to_text(self, quote_char: str = "'") -> str:
        return MISSING_TOKEN


# The single missing cell value, written as an unquoted `?`.
MISSING = _Missing()

ColumnValue = Union[Number, Text, Nominal, _Missing]
