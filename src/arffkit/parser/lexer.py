"""
ARFF Lexer Module.

Turns raw ARFF text into a lazy stream of classified `Line`s and splits data
lines into raw `Field`s. The lexer knows nothing about row shapes or target
types: it only answers "what kind of line is this" and "which raw tokens does
it hold".

Lexical rules:
    * Lines whose first non-blank character is `%` are comments.
    * Directives (`@RELATION`, `@ATTRIBUTE`, `@DATA`) are case-insensitive.
    * Names and field values may be quoted with `'` or `"`; quoted text may
      contain delimiters and backslash escapes.
    * Data fields are separated by `,` or a tab; a `%` at the start of a field
      or after whitespace starts a trailing comment.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from pydantic import ValidationError

from arffkit.enum import AttributeKind, LineKind
from arffkit.errors import FormatError
from arffkit.helpers import MISSING_TOKEN, unescape_char
from arffkit.models.attribute import Attribute

_QUOTES = "'\""
_DELIMITERS = ",\t"

# Type keywords accepted after an attribute name, mapped to the column kind.
_TYPE_KEYWORDS = {
    "NUMERIC": AttributeKind.Numeric,
    "REAL": AttributeKind.Numeric,
    "INTEGER": AttributeKind.Numeric,
    "STRING": AttributeKind.String,
}
# Valid ARFF types this codec does not handle.
_UNSUPPORTED_TYPES = ("DATE", "RELATIONAL")

_RELATION = "@RELATION"
_ATTRIBUTE = "@ATTRIBUTE"
_DATA = "@DATA"
_DIRECTIVES = (_RELATION, _ATTRIBUTE, _DATA)


@dataclass(frozen=True)
class Field:
    """
    One raw token of a data line.

    Attributes:
        text (str): The token text, unquoted and unescaped.
        quoted (bool): Whether the token was written between quotes. A quoted
            `'?'` is the string "?", never the missing marker.
    """

    text: str
    quoted: bool = False

    def is_missing(self) -> bool:
        return not self.quoted and self.text == MISSING_TOKEN


@dataclass(frozen=True)
class Line:
    """
    A classified input line.

    Only the payload matching `kind` is set: `name` for relation directives,
    `attribute` for attribute directives, `fields` for data lines.
    """

    kind: LineKind
    lineno: int
    name: Optional[str] = None
    attribute: Optional[Attribute] = None
    fields: Tuple[Field, ...] = ()


def iter_lines(text: str) -> Iterator[Line]:
    """
    Lazily classifies every line of `text`.

    Before `@DATA`, any line starting with `@` must be a known directive.
    After it, known directives are still reported as such (the header layer
    rejects them), other lines are data.

    Raises:
        FormatError: On malformed directives or data lines. Raised lazily,
            when the offending line is reached.
    """
    in_data = False
    # only \n ends a line; other separators may sit inside quoted values
    raw_lines = text.lstrip("\ufeff").split("\n")
    if raw_lines[-1] == "":
        raw_lines.pop()
    for lineno, raw in enumerate(raw_lines, start=1):
        raw = raw.removesuffix("\r")
        stripped = raw.strip()
        if not stripped:
            yield Line(LineKind.Blank, lineno)
            continue
        if stripped.startswith("%"):
            yield Line(LineKind.Comment, lineno)
            continue
        if stripped.startswith("@"):
            keyword = stripped.split(None, 1)[0].upper()
            if keyword in _DIRECTIVES:
                line = _parse_directive(keyword, stripped, lineno)
                in_data = in_data or line.kind == LineKind.DataMarker
                yield line
                continue
            if not in_data:
                raise FormatError(
                    f"unknown directive '{keyword}'", line=lineno, raw=stripped
                )
        yield Line(LineKind.Data, lineno, fields=tuple(tokenize_row(stripped, lineno)))


def tokenize_row(text: str, lineno: Optional[int] = None) -> List[Field]:
    """
    Splits one data line into its raw fields.

    Examples:
        - "42, 9" -> [Field("42"), Field("9")]
        - "'a, b', ?" -> [Field("a, b", quoted=True), Field("?")]
        - "1,,2" -> [Field("1"), Field(""), Field("2")]

    Raises:
        FormatError: On an unterminated quote, text after a closing quote, or
            a sparse (`{...}`) row.
    """
    text = text.strip()
    if text.startswith("{"):
        raise FormatError("sparse data rows are not supported", line=lineno, raw=text)
    return _split_fields(text, lineno)


# --- Internal scanning helpers ---


def _split_fields(text: str, lineno: Optional[int]) -> List[Field]:
    fields: List[Field] = []
    pos, end = 0, len(text)
    while True:
        pos = _skip_spaces(text, pos)
        if pos < end and text[pos] in _QUOTES:
            value, pos = _read_quoted(text, pos, lineno)
            pos = _skip_spaces(text, pos)
            if pos < end and text[pos] not in _DELIMITERS and text[pos] != "%":
                raise FormatError(
                    "unexpected text after quoted field", line=lineno, raw=text
                )
            fields.append(Field(value, quoted=True))
        else:
            start = pos
            while pos < end and text[pos] not in _DELIMITERS:
                if text[pos] == "%" and (pos == start or text[pos - 1] in " \t"):
                    break
                pos += 1
            fields.append(Field(text[start:pos].strip()))
        if pos >= end or text[pos] == "%":
            return fields
        pos += 1


def _skip_spaces(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] == " ":
        pos += 1
    return pos


def _read_quoted(text: str, pos: int, lineno: Optional[int]) -> Tuple[str, int]:
    """Reads a quoted string starting at the opening quote at `pos`."""
    delimiter = text[pos]
    pos += 1
    chars = []
    while pos < len(text):
        ch = text[pos]
        if ch == "\\" and pos + 1 < len(text):
            chars.append(unescape_char(text[pos + 1]))
            pos += 2
            continue
        if ch == delimiter:
            return "".join(chars), pos + 1
        chars.append(ch)
        pos += 1
    raise FormatError("unterminated quoted field", line=lineno, raw=text)


def _read_name(text: str, pos: int, lineno: int) -> Tuple[Optional[str], int]:
    """Reads a bare (up to whitespace) or quoted name. Returns None if absent."""
    while pos < len(text) and text[pos].isspace():
        pos += 1
    if pos >= len(text) or text[pos] == "%":
        return None, pos
    if text[pos] in _QUOTES:
        return _read_quoted(text, pos, lineno)
    start = pos
    while pos < len(text) and not text[pos].isspace():
        pos += 1
    return text[start:pos], pos


def _expect_end(text: str, pos: int, lineno: int, what: str) -> None:
    """Only whitespace or a trailing comment may follow a complete directive."""
    rest = text[pos:].strip()
    if rest and not rest.startswith("%"):
        raise FormatError(f"unexpected text after {what}", line=lineno, raw=text)


def _parse_directive(keyword: str, text: str, lineno: int) -> Line:
    pos = len(keyword)
    if keyword == _DATA:
        _expect_end(text, pos, lineno, _DATA)
        return Line(LineKind.DataMarker, lineno)

    name, pos = _read_name(text, pos, lineno)
    if name is None:
        raise FormatError(f"{keyword} requires a name", line=lineno, raw=text)

    if keyword == _RELATION:
        _expect_end(text, pos, lineno, "relation name")
        return Line(LineKind.Relation, lineno, name=name)

    return Line(
        LineKind.Attribute, lineno, attribute=_parse_attribute_type(name, text, pos, lineno)
    )


def _parse_attribute_type(name: str, text: str, pos: int, lineno: int) -> Attribute:
    type_text = text[pos:].strip()
    if not type_text or type_text.startswith("%"):
        raise FormatError(
            f"attribute '{name}' is missing its type", line=lineno, raw=text
        )

    if type_text.startswith("{"):
        close = _find_closing_brace(type_text, lineno)
        _expect_end(type_text, close + 1, lineno, "nominal label list")
        labels = _split_fields(type_text[1:close], lineno)
        if any(not lb.text for lb in labels):
            raise FormatError(
                f"attribute '{name}' declares an empty nominal label",
                line=lineno,
                raw=text,
            )
        try:
            return Attribute.nominal(name, [lb.text for lb in labels])
        except ValidationError as e:
            raise FormatError(
                f"attribute '{name}' declares duplicate nominal labels",
                line=lineno,
                raw=text,
            ) from e

    word = type_text.split(None, 1)[0]
    if word.upper() in _UNSUPPORTED_TYPES:
        raise FormatError(
            f"attribute type '{word}' is not supported", line=lineno, raw=text
        )
    _expect_end(type_text, len(word), lineno, "attribute type")
    kind = _TYPE_KEYWORDS.get(word.upper())
    if kind is not None:
        return Attribute(name=name, kind=kind)
    raise FormatError(f"invalid attribute type '{word}'", line=lineno, raw=text)


def _find_closing_brace(type_text: str, lineno: int) -> int:
    pos = 1
    while pos < len(type_text):
        ch = type_text[pos]
        if ch in _QUOTES:
            _, pos = _read_quoted(type_text, pos, lineno)
            continue
        if ch == "}":
            return pos
        pos += 1
    raise FormatError("unterminated nominal label list", line=lineno, raw=type_text)
