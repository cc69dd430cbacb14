from enum import StrEnum


class AttributeKind(StrEnum):
    """
    The column type declared by an `@ATTRIBUTE` directive.

    The declared type is advisory when decoding into a typed row shape: the
    target shape's leaf kinds govern coercion.
    """

    Numeric = "NUMERIC"
    """Integers and floating point numbers (`NUMERIC`, `REAL`, `INTEGER`)."""

    String = "STRING"
    """Free text, written quoted."""

    Nominal = "NOMINAL"
    """A closed set of labels, written as `{label1, label2, ...}`."""
