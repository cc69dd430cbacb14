"""
Helper Utilities.

Provides text utilities shared by the lexer and the writers: quoting and
escaping of names, labels and strings, and the canonical number format.
"""

import math
import re
from typing import Union

# The reserved token for a missing value. Only ever meaningful unquoted.
MISSING_TOKEN = "?"

# Characters that force a name or nominal label to be written quoted.
_NEEDS_QUOTES = re.compile(r"[\s,'\"%{}\\]")

# Escapes understood inside quoted fields, and their inverse for writing.
_UNESCAPES = {"n": "\n", "t": "\t", "r": "\r"}
_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def unescape_char(ch: str) -> str:
    """
    Returns the character denoted by a backslash escape `\\<ch>`.

    Known control escapes (`n`, `t`, `r`) map to their control character,
    every other character (including quotes and the backslash) maps to itself.
    """
    return _UNESCAPES.get(ch, ch)


def quote(text: str, quote_char: str = "'") -> str:
    """
    Wraps `text` in `quote_char`, escaping backslashes, control characters
    and the quote character itself.

    Examples:
        - "pie" -> "'pie'"
        - "it's" -> "'it\\'s'"
        - "" -> "''"
    """
    escaped = "".join(_ESCAPES.get(ch, ch) for ch in text)
    escaped = escaped.replace(quote_char, "\\" + quote_char)
    return f"{quote_char}{escaped}{quote_char}"


def needs_quoting(text: str) -> bool:
    """
    Checks whether a bare word (a name or nominal label) must be quoted to
    be read back unchanged.

    Empty words, the missing marker, and words containing whitespace,
    delimiters, quotes, comment or brace characters need quoting.
    """
    return (
        text == ""
        or text == MISSING_TOKEN
        or text.startswith("@")
        or _NEEDS_QUOTES.search(text) is not None
    )


def quote_if_needed(text: str, quote_char: str = "'") -> str:
    """Returns `text` bare when that is unambiguous, quoted otherwise."""
    return quote(text, quote_char) if needs_quoting(text) else text


def format_number(value: Union[int, float]) -> str:
    """
    Formats a number in its shortest unambiguous text form.

    Integers and integral finite floats are written without a fractional
    part, other floats use `repr` (round-trip exact).

    Examples:
        - 42 -> "42"
        - 2.0 -> "2"
        - 3.1415 -> "3.1415"
        - float("nan") -> "nan"
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers in ARFF columns")
    if isinstance(value, int):
        return str(value)
    value = float(value)
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)
