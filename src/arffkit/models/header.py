"""
Header Model Module.

Reads and writes the ARFF header: the relation name and the ordered list of
attribute declarations that precede the `@DATA` marker.
"""

from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Tuple

from pydantic import Field, field_validator

from arffkit.enum import LineKind
from arffkit.errors import FormatError
from arffkit.helpers import quote_if_needed
from .attribute import Attribute
from .base_model import BaseModel

if TYPE_CHECKING:
    from arffkit.parser.lexer import Line

# Relation name used when the data set carries no name of its own.
DEFAULT_RELATION = "unnamed_data"


class Header(BaseModel):
    """
    A complete ARFF header.

    Attributes:
        relation (str): The data set name.
        attributes (List[Attribute]): Column declarations in file order.
    """

    relation: str = DEFAULT_RELATION
    attributes: List[Attribute] = Field(default_factory=list)

    @field_validator("attributes")
    @classmethod
    def _unique_names(cls, attributes: List[Attribute]) -> List[Attribute]:
        names = [attr.name for attr in attributes]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"Duplicate attribute names: {dupes}")
        return attributes

    @property
    def names(self) -> List[str]:
        return [attr.name for attr in self.attributes]

    def __len__(self) -> int:
        return len(self.attributes)

    def to_text(self, quote_char: str = "'") -> str:
        return build_header(self.relation, self.attributes, quote_char)

    @classmethod
    def from_lines(cls, lines: Iterable["Line"]) -> Tuple["Header", Iterator["Line"]]:
        """Parses a header and bundles it. See `parse_header`."""
        relation, attributes, remaining = parse_header(lines)
        return cls(relation=relation, attributes=attributes), remaining


def parse_header(
    lines: Iterable["Line"],
) -> Tuple[str, List[Attribute], Iterator["Line"]]:
    """
    Consumes header lines up to and including the `@DATA` marker.

    Args:
        lines (Iterable[Line]): Classified lines, usually from `iter_lines`.

    Returns:
        Tuple[str, List[Attribute], Iterator[Line]]: The relation name
        (`DEFAULT_RELATION` if undeclared), the attribute declarations in
        encounter order, and a lazy iterator over the data lines that follow
        the marker (comments and blank lines skipped).

    Raises:
        FormatError: If the marker is missing, a data line precedes it, the
            relation is declared twice or an attribute name repeats. A
            directive found after the marker is reported when the returned
            iterator reaches it.
    """
    it = iter(lines)
    relation: Optional[str] = None
    attributes: List[Attribute] = []
    seen = set()

    for line in it:
        if line.kind in (LineKind.Blank, LineKind.Comment):
            continue
        if line.kind == LineKind.Relation:
            if relation is not None:
                raise FormatError("@RELATION declared twice", line=line.lineno)
            relation = line.name
        elif line.kind == LineKind.Attribute:
            assert line.attribute is not None
            if line.attribute.name in seen:
                raise FormatError(
                    f"duplicate attribute name '{line.attribute.name}'",
                    line=line.lineno,
                )
            seen.add(line.attribute.name)
            attributes.append(line.attribute)
        elif line.kind == LineKind.DataMarker:
            return relation or DEFAULT_RELATION, attributes, _data_lines(it)
        else:
            raise FormatError(
                "expected @RELATION, @ATTRIBUTE or @DATA before data", line=line.lineno
            )

    raise FormatError("missing @DATA section")


def _data_lines(lines: Iterator["Line"]) -> Iterator["Line"]:
    for line in lines:
        if line.kind == LineKind.Data:
            yield line
        elif line.kind not in (LineKind.Blank, LineKind.Comment):
            raise FormatError(
                f"{line.kind} directive after @DATA", line=line.lineno
            )


def build_header(
    relation: str, attributes: Iterable[Attribute], quote_char: str = "'"
) -> str:
    """
    Formats the header text, including the trailing `@DATA` line.

    Example:
        >>> build_header("Data", [Attribute.numeric("a")])
        '@RELATION Data\\n\\n@ATTRIBUTE a NUMERIC\\n\\n@DATA\\n'
    """
    text = f"@RELATION {quote_if_needed(relation, quote_char)}\n\n"
    for attr in attributes:
        text += attr.directive(quote_char) + "\n"
    return text + "\n@DATA\n"
