import pytest
from pydantic import ValidationError

from arffkit.enum import AttributeKind
from arffkit.errors import FormatError
from arffkit.models import DEFAULT_RELATION, Attribute, Header, build_header, parse_header
from arffkit.parser import iter_lines


def test_build_header_layout():
    text = build_header(
        "Data", [Attribute.numeric("a"), Attribute.nominal("c", ["x", "y z"])]
    )
    assert text == (
        "@RELATION Data\n\n"
        "@ATTRIBUTE a NUMERIC\n"
        "@ATTRIBUTE c {x, 'y z'}\n"
        "\n@DATA\n"
    )


def test_build_header_quotes_names():
    text = build_header("my data", [Attribute.string("first name")])
    assert text.startswith("@RELATION 'my data'\n")
    assert "@ATTRIBUTE 'first name' STRING\n" in text


def test_parse_header(iris_text):
    relation, attributes, remaining = parse_header(iter_lines(iris_text))
    assert relation == "iris"
    assert [a.name for a in attributes] == [
        "sepallength",
        "sepalwidth",
        "petallength",
        "petalwidth",
        "class",
    ]
    assert attributes[-1].kind == AttributeKind.Nominal
    # comments between data rows are skipped
    assert len(list(remaining)) == 3


def test_header_round_trip(mixed_text):
    header, _ = Header.from_lines(iter_lines(mixed_text))
    again, _ = Header.from_lines(iter_lines(header.to_text()))
    assert again == header
    assert header.names == ["id", "note", "outlook", "temp"]
    assert len(header) == 4


def test_missing_relation_defaults():
    relation, attributes, _ = parse_header(iter_lines("@ATTRIBUTE a NUMERIC\n@DATA\n"))
    assert relation == DEFAULT_RELATION
    assert len(attributes) == 1


@pytest.mark.parametrize(
    "text, match",
    [
        ("@RELATION r\n@ATTRIBUTE a NUMERIC\n", "missing @DATA"),
        ("@RELATION r\n1, 2\n@DATA\n", "before data"),
        ("@RELATION r\n@RELATION s\n@DATA\n", "declared twice"),
        ("@ATTRIBUTE a NUMERIC\n@ATTRIBUTE a STRING\n@DATA\n", "duplicate attribute"),
    ],
)
def test_parse_header_failures(text, match):
    with pytest.raises(FormatError, match=match):
        parse_header(iter_lines(text))


def test_directive_after_data_fails_lazily():
    _, _, remaining = parse_header(
        iter_lines("@ATTRIBUTE a NUMERIC\n@DATA\n1\n@ATTRIBUTE b NUMERIC\n")
    )
    assert next(remaining).fields[0].text == "1"
    with pytest.raises(FormatError, match="after @DATA") as e:
        next(remaining)
    assert e.value.line == 4


def test_attribute_validation():
    with pytest.raises(ValidationError):
        Attribute(name="c", kind=AttributeKind.Nominal)
    with pytest.raises(ValidationError):
        Attribute(name="a", kind=AttributeKind.Numeric, labels=["x"])
    with pytest.raises(ValidationError):
        Header(attributes=[Attribute.numeric("a"), Attribute.string("a")])
